"""Flask application factory for the simulator's JSON API.

The ``create_app`` function builds one playback controller and returns a
Flask app with these endpoints:

- ``GET /api/algorithms`` — the available policies and directions.
- ``POST /api/schedule`` — compute a schedule and load it for playback.
- ``POST /api/compare`` — compute every policy on the same input.
- ``GET /api/playback`` — the current playback snapshot.
- ``POST /api/playback/<action>`` — play, pause, next, prev, reset, seek.
- ``GET /api/status`` — settings and a summary of the last schedule.

Playback advances on a ``ThreadingTickSource``.  Its ticks and every
request handler take the same lock, so the controller only ever sees
one caller at a time.
"""

from __future__ import annotations

import threading
from typing import Any

from flask import Flask, Response, jsonify, request

from py_disksched.config import SimulatorConfig, load_config
from py_disksched.disk import Algorithm, Direction, ScheduleError, ScheduleResult, compute_schedule
from py_disksched.logging import Logger, LogLevel
from py_disksched.playback import PlaybackController
from py_disksched.requests import RequestParseError, coerce_requests, validate_num_tracks, validate_position
from py_disksched.timer import ThreadingTickSource

_HTTP_BAD_REQUEST = 400


def _error(message: str) -> tuple[Response, int]:
    return jsonify({"error": message}), _HTTP_BAD_REQUEST


def _parse_inputs(data: dict[str, Any], config: SimulatorConfig) -> dict[str, Any]:
    """Validate a schedule request body into ``compute_schedule`` arguments.

    Raises:
        RequestParseError: If a field is missing or malformed.
        ScheduleError: If the algorithm or direction is unknown.

    """
    num_tracks = validate_num_tracks(data.get("num_tracks", config.num_tracks))
    if "requests" not in data:
        msg = "Missing 'requests' field"
        raise RequestParseError(msg)
    head = validate_position(data.get("head", config.default_head), num_tracks)
    if "previous" in data:
        validate_position(data["previous"], num_tracks, what="Previous position")
    return {
        "requests": coerce_requests(data["requests"], num_tracks),
        "current_pos": head,
        "direction": Direction.parse(str(data.get("direction", config.default_direction.value))),
        "num_tracks": num_tracks,
    }


def create_app(config: SimulatorConfig | None = None) -> Flask:
    """Create and configure the Flask application.

    Args:
        config: Simulator settings; read from the environment if omitted.

    Returns:
        A configured Flask application ready to serve.

    """
    settings = config or load_config()
    lock = threading.RLock()
    logger = Logger(capacity=settings.log_capacity)
    controller = PlaybackController(
        ThreadingTickSource(lock=lock),
        interval_ms=settings.tick_interval_ms,
        logger=logger,
    )
    last: dict[str, ScheduleResult] = {}

    app = Flask(__name__)

    @app.route("/api/algorithms")
    def algorithms() -> Response:  # pyright: ignore[reportUnusedFunction]
        """List the policies and sweep directions."""
        return jsonify(
            {
                "algorithms": [
                    {"name": a.value, "label": a.label, "uses_direction": a.uses_direction}
                    for a in Algorithm
                ],
                "directions": [d.value for d in Direction],
            }
        )

    @app.route("/api/schedule", methods=["POST"])
    def schedule() -> tuple[Response, int] | Response:  # pyright: ignore[reportUnusedFunction]
        """Compute a schedule and load it into the playback controller.

        Expects JSON body: ``{"algorithm": "SSTF", "requests": [...],
        "head": 53, "direction": "up", "num_tracks": 200}``; everything
        but ``requests`` falls back to the configured defaults.

        """
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            return _error("Expected a JSON object")
        try:
            algorithm = Algorithm.parse(str(data.get("algorithm", settings.default_algorithm.value)))
            inputs = _parse_inputs(data, settings)
            result = compute_schedule(algorithm, **inputs)
        except (RequestParseError, ScheduleError) as e:
            logger.log(LogLevel.WARNING, str(e), source="web")
            return _error(str(e))

        with lock:
            last["result"] = result
            controller.load(result.sequence)
        logger.log(LogLevel.INFO, f"{algorithm.label}: total movement {result.total_movement}", source="web")
        return jsonify(result.to_dict())

    @app.route("/api/compare", methods=["POST"])
    def compare() -> tuple[Response, int] | Response:  # pyright: ignore[reportUnusedFunction]
        """Compute every policy on the same input; playback is untouched."""
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            return _error("Expected a JSON object")
        try:
            inputs = _parse_inputs(data, settings)
            results = {a.value: compute_schedule(a, **inputs).to_dict() for a in Algorithm}
        except (RequestParseError, ScheduleError) as e:
            return _error(str(e))
        return jsonify({"results": results})

    @app.route("/api/playback")
    def playback() -> Response:  # pyright: ignore[reportUnusedFunction]
        """Return the current playback snapshot."""
        with lock:
            return jsonify(controller.snapshot().to_dict())

    @app.route("/api/playback/<action>", methods=["POST"])
    def playback_action(action: str) -> tuple[Response, int] | Response:  # pyright: ignore[reportUnusedFunction]
        """Apply a playback action and return the new snapshot.

        ``seek`` expects JSON body ``{"step": n}``.

        """
        with lock:
            match action:
                case "play":
                    controller.play()
                case "pause":
                    controller.pause()
                case "next":
                    controller.next_step()
                case "prev":
                    controller.prev_step()
                case "reset":
                    controller.reset()
                case "seek":
                    data = request.get_json(silent=True) or {}
                    step = data.get("step") if isinstance(data, dict) else None
                    if isinstance(step, bool) or not isinstance(step, int):
                        return _error("seek needs an integer 'step'")
                    controller.seek(step)
                case _:
                    return _error(f"Unknown playback action '{action}'")
            return jsonify(controller.snapshot().to_dict())

    @app.route("/api/status")
    def status() -> Response:  # pyright: ignore[reportUnusedFunction]
        """Return settings and the last schedule summary."""
        with lock:
            result = last.get("result")
        return jsonify(
            {
                "config": settings.to_dict(),
                "last_result": result.to_dict() if result is not None else None,
            }
        )

    return app


def main() -> None:
    """Run the API development server.

    This is the ``py-disksched-web`` console entry point.
    """
    app = create_app()
    app.run(debug=True, port=8080)
