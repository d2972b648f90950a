"""The HTTP application, its routes and the process entry point."""

from __future__ import annotations

import argparse
import os
import re
from socketserver import ThreadingMixIn
from typing import Optional, Sequence
from wsgiref.simple_server import WSGIRequestHandler, WSGIServer, make_server

from dotenv import find_dotenv, load_dotenv
from flask import Flask, Response, jsonify, request

from tasktracker.db import new_database
from tasktracker.handlers import TaskHandler
from tasktracker.repository import TaskRepository, UserRepository
from tasktracker.service import TaskService

ALLOWED_ORIGINS = frozenset({"http://localhost:5173"})
ALLOWED_METHODS = ("GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH")
ALLOWED_HEADERS = ("Accept", "Authorization", "Content-Type")


class _ThreadingWSGIServer(ThreadingMixIn, WSGIServer):
    daemon_threads = True


class _RequestHandler(WSGIRequestHandler):
    # Socket timeout for reading a request and writing its response.
    timeout = 10


def _install_cors(app: Flask) -> None:
    @app.before_request
    def _check_origin() -> Optional[Response]:
        origin = request.headers.get("Origin")
        if not origin:
            return None
        if origin not in ALLOWED_ORIGINS:
            return Response(status=403)
        if request.method == "OPTIONS":
            response = Response(status=204)
            response.headers["Access-Control-Allow-Methods"] = ",".join(ALLOWED_METHODS)
            response.headers["Access-Control-Allow-Headers"] = ",".join(ALLOWED_HEADERS)
            response.vary.add("Access-Control-Request-Method")
            response.vary.add("Access-Control-Request-Headers")
            return response
        return None

    @app.after_request
    def _add_cors_headers(response: Response) -> Response:
        origin = request.headers.get("Origin")
        if origin and origin in ALLOWED_ORIGINS:
            response.headers["Access-Control-Allow-Origin"] = origin
            response.headers["Access-Control-Allow-Credentials"] = "true"
            response.vary.add("Origin")
        return response


def register_routes(app: Flask, task_handler: TaskHandler) -> Flask:
    """Attach CORS handling, the task API and the index and health routes."""
    _install_cors(app)

    app.add_url_rule(
        "/api/task/", "create_task", task_handler.create_task, methods=["POST"]
    )
    app.add_url_rule(
        "/api/task/all-task", "get_all_tasks", task_handler.get_all_tasks, methods=["GET"]
    )
    app.add_url_rule(
        "/api/task/id/<task_id>", "get_task_by_id", task_handler.get_task_by_id, methods=["GET"]
    )
    app.add_url_rule(
        "/api/task/user", "get_tasks", task_handler.get_tasks, methods=["GET"]
    )
    app.add_url_rule(
        "/api/task/<task_id>", "delete_task", task_handler.delete_task, methods=["DELETE"]
    )

    @app.get("/")
    def index() -> Response:
        return jsonify({"message": "Task manager api."})

    @app.get("/health")
    def health() -> Response:
        return jsonify({"status": "It's aight mate"})

    return app


def create_app(task_handler: TaskHandler) -> Flask:
    """Build the Flask application serving the task API."""
    app = Flask("tasktracker")
    app.json.sort_keys = False
    return register_routes(app, task_handler)


def _parse_port(text: str) -> int:
    return int(text) if re.fullmatch(r"[+-]?\d+", text) else 0


def _load_env_file() -> None:
    path = find_dotenv(usecwd=True)
    if path:
        load_dotenv(path)


def new_server() -> WSGIServer:
    """Wire database, repositories, service and handlers into a bound server."""
    _load_env_file()
    port = _parse_port(os.environ.get("PORT", ""))
    ip = os.environ.get("IP", "")
    print(f"Initialized server with: {ip}:{port}")

    database = new_database()
    task_repo = TaskRepository(database)
    user_repo = UserRepository(database)
    task_handler = TaskHandler(TaskService(task_repo, user_repo))

    return make_server(
        "",
        port,
        create_app(task_handler),
        server_class=_ThreadingWSGIServer,
        handler_class=_RequestHandler,
    )


def main(argv: Optional[Sequence[str]] = None) -> None:
    """Load the .env file, then serve the API until interrupted."""
    argparse.ArgumentParser(
        prog="tasktracker", description="Serve the task tracker HTTP API."
    ).parse_args(argv)
    path = find_dotenv(usecwd=True)
    if not path:
        raise RuntimeError("No .env file found")
    load_dotenv(path)
    server = new_server()
    try:
        server.serve_forever()
    finally:
        server.server_close()