"""Interactive REPL (Read-Eval-Print Loop) for the simulator.

The REPL is the terminal interface.  It loads the configuration,
creates a shell, and enters the classic loop:

    1. **Read** — display a prompt and read user input.
    2. **Eval** — pass the command to ``shell.execute()``.
    3. **Print** — display the result.
    4. **Loop** — repeat until the shell returns the exit sentinel.

The helper functions (``build_prompt``, ``format_banner``) are pure
and testable.  The ``run()`` function is the I/O entrypoint.
"""

import readline

from py_disksched.completer import Completer
from py_disksched.config import SimulatorConfig, load_config
from py_disksched.shell import Shell

_BANNER_WIDTH = 44


def format_banner(config: SimulatorConfig) -> str:
    """Format the start-up banner.

    Args:
        config: The settings the session starts with.

    Returns:
        A formatted string suitable for printing to the console.

    """
    border = "=" * _BANNER_WIDTH
    header = f"\n  {border}\n          Disk Scheduling Simulator\n  {border}\n\n"
    requests = ", ".join(str(r) for r in config.default_requests) or "(none)"
    body = "\n".join(
        [
            f"  Tracks:    0-{config.num_tracks - 1}",
            f"  Head:      {config.default_head} (previous: {config.default_previous})",
            f"  Requests:  {requests}",
            f"  Algorithm: {config.default_algorithm.label} ({config.default_direction})",
        ]
    )
    footer = "\n\nType 'help' for commands, 'run' to schedule, 'exit' to quit.\n"
    return header + body + footer


def build_prompt(shell: Shell) -> str:
    """Build the prompt string showing the selected algorithm.

    Returns:
        A prompt string like ``disksched [SSTF] $ ``.

    """
    return f"disksched [{shell.scheduler.algorithm.label}] $ "


def run() -> None:
    """Start the simulator and run the interactive REPL.

    This is the ``py-disksched`` console entry point.  Ctrl+C and
    Ctrl+D both exit cleanly.
    """
    try:
        config = load_config()
    except ValueError as e:
        print(f"Configuration error: {e}")  # noqa: T201
        raise SystemExit(2) from None
    shell = Shell(config=config)

    # Wire up tab completion via readline.
    completer = Completer(shell)
    readline.set_completer(completer.complete)
    readline.set_completer_delims(" \t")
    readline.parse_and_bind("tab: complete")

    print(format_banner(config))  # noqa: T201

    try:
        while True:
            try:
                command = input(build_prompt(shell))
            except EOFError:
                # Ctrl+D: graceful exit
                print()  # noqa: T201
                break

            result = shell.execute(command)
            if result == Shell.EXIT_SENTINEL:
                break
            if result:
                print(result)  # noqa: T201

    except KeyboardInterrupt:
        # Ctrl+C: graceful exit
        print("\nInterrupted.")  # noqa: T201

    finally:
        shell.scheduler.controller.pause()
        print("Bye.")  # noqa: T201
