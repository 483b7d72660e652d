"""
Webインターフェースモジュール

FastAPIを使ったWeb版三目並べ（人間 vs MCTS）
"""

from .game_manager import GameManager
from .schemas import (
    GameStateResponse,
    MoveRequest,
    MoveResponse,
    NewGameRequest,
    HintResponse,
    ThinkTimeRequest,
)

__all__ = [
    "GameManager",
    "GameStateResponse",
    "MoveRequest",
    "MoveResponse",
    "NewGameRequest",
    "HintResponse",
    "ThinkTimeRequest",
]
