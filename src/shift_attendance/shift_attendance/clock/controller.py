from __future__ import annotations

from flask import Flask, jsonify

from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/server-time", methods=["GET"], endpoint="api_server_time")
    def api_server_time():
        now = container.clock.now()
        return jsonify({"server_time": now.isoformat(), "timezone": str(container.tz)})
