#!/usr/bin/env python
"""
Webサーバー起動スクリプト

使用方法:
    python run_web.py [--host HOST] [--port PORT] [--config CONFIG]

例:
    python run_web.py
    python run_web.py --port 8080
    python run_web.py --think-time 0.5
"""

import argparse
import uvicorn

from main import load_config
from src.logger import setup_logging


def main():
    parser = argparse.ArgumentParser(description="Tic-Tac-Toe MCTS Web Server")
    parser.add_argument(
        "--config",
        type=str,
        default="configs/default.yaml",
        help="Path to config file (default: configs/default.yaml)",
    )
    parser.add_argument(
        "--host",
        type=str,
        default=None,
        help="Host address (default: from config)",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=None,
        help="Port number (default: from config)",
    )
    parser.add_argument(
        "--think-time",
        type=float,
        default=None,
        help="Seconds the AI waits before reading its recommendation",
    )

    args = parser.parse_args()

    config = load_config(args.config)
    log_config = config.get("logging", {})
    setup_logging(log_config.get("level", "INFO"), log_config.get("file"))

    web_config = config.get("web", {})
    worker_config = config.get("worker", {})
    game_config = config.get("game", {})
    host = args.host or web_config.get("host", "127.0.0.1")
    port = args.port or web_config.get("port", 8000)

    from src.web.api import app, configure_game_manager
    from src.web.game_manager import GameManager

    manager = configure_game_manager(
        GameManager(
            think_time=args.think_time if args.think_time is not None
            else worker_config.get("think_time", 0.1),
            idle_interval=worker_config.get("idle_interval", 0.001),
            seed=config.get("mcts", {}).get("seed"),
        )
    )
    manager.new_game(
        human_player=game_config.get("human_player", "X"),
        first_player=game_config.get("first_player", "X"),
    )

    print(f"Starting server at http://{host}:{port}")
    print("Press Ctrl+C to stop")

    uvicorn.run(app, host=host, port=port)


if __name__ == "__main__":
    main()
