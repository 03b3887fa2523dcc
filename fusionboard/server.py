#!/usr/bin/env python3
"""
Fusion Board Server
-------------------
JSON API over the SQLite board store. Each mutating route is the server side
of one gateway operation; the client re-fetches /api/board afterwards.

Usage:
    fusionboard-server --port 3000 --db ~/board.db

API:
    GET    /api/board?view=status|context → { statuses, contexts, tasks, view, columns }
    POST   /api/tasks          { column_id, view }  → new task (201)
    PUT    /api/tasks/<id>     full task record     → stored task
    DELETE /api/tasks/<id>
    POST   /api/tasks/move     { tasks: [...] }     → upsert all + dense reorder
    POST   /api/contexts                            → new list (201)
    PUT    /api/columns/<id>   { title, kind }
    GET    /api/colors                              → card colour palette
    GET    /health
"""

import argparse
import logging
import os
import sqlite3
import sys
from typing import Optional

from flask import Flask, current_app, jsonify, request

from .config import ENV_DB, Config, ConfigError
from .gateway import new_context, new_task
from .projection import build_columns, columns_for_view
from .schema import Task, ViewType
from .seed import CARD_COLORS
from .store import BoardStore, StoreError

logger = logging.getLogger(__name__)


def _store() -> BoardStore:
    return current_app.config["BOARD_STORE"]


def _view_arg(value: Optional[str]) -> ViewType:
    return ViewType.from_str(value or ViewType.STATUS.value)


def create_app(config: Optional[Config] = None, store: Optional[BoardStore] = None) -> Flask:
    """Build the Flask app around a store (created from config if not given)."""
    if config is None:
        config = Config.load()
    if store is None:
        store = BoardStore(config.db_path, seed=config.seed)

    app = Flask(__name__)
    app.config["BOARD_STORE"] = store
    app.config["BOARD_CONFIG"] = config

    # ── Errors ───────────────────────────────────────────────────────────────

    @app.errorhandler(sqlite3.IntegrityError)
    def integrity_error(e):
        # Unknown status/context id or duplicate task id
        logger.warning(f"Rejected mutation: {e}")
        return jsonify({"error": str(e)}), 409

    @app.errorhandler(ValueError)
    def value_error(e):
        return jsonify({"error": str(e)}), 400

    # ── Routes ───────────────────────────────────────────────────────────────

    @app.route("/api/board")
    def api_board():
        view = _view_arg(request.args.get("view"))
        snapshot = _store().fetch_all()
        payload = snapshot.to_dict()
        payload["view"] = view.value
        payload["columns"] = build_columns(snapshot.tasks, view, columns_for_view(snapshot, view))
        return jsonify(payload)

    @app.route("/api/tasks", methods=["POST"])
    def api_add_task():
        data = request.get_json(force=True, silent=True) or {}
        column_id = str(data.get("column_id", "")).strip()
        if not column_id:
            return jsonify({"error": "column_id is required"}), 400
        view = _view_arg(data.get("view"))
        task = _store().create_task(new_task(column_id, view))
        return jsonify({"task": task.to_dict()}), 201

    @app.route("/api/tasks/<task_id>", methods=["PUT"])
    def api_save_task(task_id):
        data = request.get_json(force=True, silent=True) or {}
        data["id"] = task_id  # id is immutable
        try:
            task = _store().update_task(Task.from_dict(data))
        except StoreError as e:
            return jsonify({"error": str(e)}), 404
        return jsonify({"task": task.to_dict()})

    @app.route("/api/tasks/<task_id>", methods=["DELETE"])
    def api_remove_task(task_id):
        _store().delete_task(task_id)
        return jsonify({"deleted": task_id})

    @app.route("/api/tasks/move", methods=["POST"])
    def api_move_tasks():
        data = request.get_json(force=True, silent=True) or {}
        raw = data.get("tasks")
        if not isinstance(raw, list):
            return jsonify({"error": "tasks must be a list"}), 400
        try:
            tasks = [Task.from_dict(t) for t in raw]
        except (KeyError, TypeError) as e:
            return jsonify({"error": f"Malformed task: {e}"}), 400
        _store().save_move(tasks)
        return jsonify({"count": len(tasks)})

    @app.route("/api/contexts", methods=["POST"])
    def api_add_context():
        context = _store().create_context(new_context())
        return jsonify({"context": context.to_dict()}), 201

    @app.route("/api/columns/<column_id>", methods=["PUT"])
    def api_update_column(column_id):
        data = request.get_json(force=True, silent=True) or {}
        title = str(data.get("title", "")).strip()
        if not title:
            return jsonify({"error": "title is required"}), 400
        try:
            _store().update_column_title(column_id, title, data.get("kind", ""))
        except StoreError as e:
            return jsonify({"error": str(e)}), 400
        return jsonify({"id": column_id, "title": title})

    @app.route("/api/colors")
    def api_colors():
        return jsonify({"colors": list(CARD_COLORS)})

    @app.route("/health")
    def health():
        return jsonify({"status": "ok", "db": _store().db_path})

    return app


# ── Main ─────────────────────────────────────────────────────────────────────

def main(argv=None):
    parser = argparse.ArgumentParser(description="Fusion Board Server")
    parser.add_argument("--config", help="Path to fusionboard.yaml")
    parser.add_argument("--host", help="Bind address (use 0.0.0.0 to expose on network)")
    parser.add_argument("--port", type=int)
    parser.add_argument("--db", help="Path to board.db (overrides FUSIONBOARD_DB env var)")
    args = parser.parse_args(argv)

    if args.db:
        os.environ[ENV_DB] = args.db

    try:
        config = Config.load(args.config)
    except ConfigError as e:
        print(f"Config error: {e}", file=sys.stderr)
        return 2
    if args.host:
        config.host = args.host
    if args.port:
        config.port = args.port

    logging.basicConfig(
        level=getattr(logging, config.log_level, logging.INFO),
        format="%(asctime)s [fusionboard] %(levelname)s: %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )

    app = create_app(config)
    logger.info(f"Serving board at http://{config.host}:{config.port} (db: {config.db_path})")
    app.run(host=config.host, port=config.port, debug=False, threaded=True)
    return 0


if __name__ == "__main__":
    sys.exit(main())
