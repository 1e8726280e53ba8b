"""JSON API for the simulator.

This package provides a Flask application exposing the scheduling
engine and a playback controller over HTTP.  It is an **optional**
extra — install with::

    pip install py-disksched[web]

The ``create_app`` factory in ``app.py`` wires up the endpoints.
"""
