"""
Monte Carlo Tree Search モジュール

UCT方式のMCTSとバックグラウンド探索ワーカーを提供
"""

from .exceptions import (
    MCTSError,
    SearchInvariantError,
    SearchWorkerError,
    UnexploredActionError,
)
from .mcts import MCTS, ActionEvaluation
from .node import MCTSNode, NodeStatus
from .worker import SearchReport, SearchWorker

__all__ = [
    "MCTS",
    "ActionEvaluation",
    "MCTSNode",
    "NodeStatus",
    "SearchReport",
    "SearchWorker",
    "MCTSError",
    "SearchInvariantError",
    "SearchWorkerError",
    "UnexploredActionError",
]
