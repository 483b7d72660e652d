"""
ゲームモジュール

MCTSが扱う局面インターフェースと三目並べの実装を提供
"""

from .base import GameState
from .board import Player, TicTacToeBoard
from .notation import format_action, parse_action, render_board

__all__ = [
    "GameState",
    "Player",
    "TicTacToeBoard",
    "format_action",
    "parse_action",
    "render_board",
]
