"""
評価システムモジュール

AIの強さを測定するための対戦・評価機能を提供
"""

from .players import (
    Player,
    RandomPlayer,
    GreedyPlayer,
    MCTSPlayer,
    HumanPlayer,
)
from .arena import Arena, MatchResult, evaluate_player

__all__ = [
    "Player",
    "RandomPlayer",
    "GreedyPlayer",
    "MCTSPlayer",
    "HumanPlayer",
    "Arena",
    "MatchResult",
    "evaluate_player",
]
