"""
三目並べプレイヤークラス

評価用の様々なプレイヤーを実装:
- RandomPlayer: ランダムに着手
- GreedyPlayer: 勝てる手・負けを防ぐ手を優先
- MCTSPlayer: 木を再利用するMCTSベースのAI
- HumanPlayer: 標準入力から着手
"""

import logging
from abc import ABC, abstractmethod
from typing import Optional

import numpy as np

from src.game.board import Action, TicTacToeBoard
from src.game.notation import format_action, parse_action
from src.mcts.mcts import MCTS

logger = logging.getLogger(__name__)


class Player(ABC):
    """
    プレイヤーの基底クラス
    """

    def __init__(self, name: str):
        """
        Args:
            name: プレイヤー名
        """
        self.name = name

    @abstractmethod
    def get_action(self, board: TicTacToeBoard) -> Action:
        """
        着手を選択

        Args:
            board: 現在の盤面

        Returns:
            Action: (row, col)
        """
        pass

    def reset(self):
        """ゲーム開始時の初期化（必要に応じてオーバーライド）"""
        pass


class RandomPlayer(Player):
    """
    ランダムプレイヤー

    合法手の中からランダムに選択
    """

    def __init__(self, name: str = "Random", seed: Optional[int] = None):
        super().__init__(name)
        self.rng = np.random.default_rng(seed)

    def get_action(self, board: TicTacToeBoard) -> Action:
        """ランダムに着手を選択"""
        legal_moves = board.get_actions()
        if not legal_moves:
            raise ValueError("No legal moves: the game has ended")

        return legal_moves[self.rng.integers(len(legal_moves))]


class GreedyPlayer(Player):
    """
    貪欲プレイヤー

    1. 即座に勝てる手があれば打つ
    2. 相手の即勝ちを防ぐ手があれば打つ
    3. それ以外はランダム
    """

    def __init__(self, name: str = "Greedy", seed: Optional[int] = None):
        super().__init__(name)
        self.rng = np.random.default_rng(seed)

    def get_action(self, board: TicTacToeBoard) -> Action:
        legal_moves = board.get_actions()
        if not legal_moves:
            raise ValueError("No legal moves: the game has ended")

        me = board.next_player

        for action in legal_moves:
            if board.apply(action).get_winner() is me:
                return action

        # 相手の手番だったと仮定して、相手の勝ち筋を塞ぐ
        as_opponent = board.copy()
        as_opponent.next_player = me.opponent()
        for action in legal_moves:
            if as_opponent.apply(action).get_winner() is me.opponent():
                return action

        return legal_moves[self.rng.integers(len(legal_moves))]


class MCTSPlayer(Player):
    """
    MCTSベースのAIプレイヤー

    1ゲームを通して同じ探索木を使い、
    相手の着手を commit_action で反映して探索結果を引き継ぐ
    """

    def __init__(
        self,
        num_iterations: int = 200,
        seed: Optional[int] = None,
        reuse_tree: bool = True,
        name: Optional[str] = None,
    ):
        """
        Args:
            num_iterations: 1手あたりの探索回数
            seed: 乱数シード
            reuse_tree: 前の手の探索木を再利用するか
            name: プレイヤー名
        """
        super().__init__(name or f"MCTS-{num_iterations}it")
        self.num_iterations = num_iterations
        self.reuse_tree = reuse_tree
        self.rng = np.random.default_rng(seed)
        self.mcts: Optional[MCTS] = None

        # 統計（木を再利用できた回数、作り直した回数）
        self.reused = 0
        self.rebuilt = 0

    def reset(self):
        self.mcts = None

    def get_action(self, board: TicTacToeBoard) -> Action:
        """MCTSで最良の手を選択"""
        if board.is_ended():
            raise ValueError("No legal moves: the game has ended")

        self._sync(board)
        self.mcts.search(self.num_iterations)

        action = self.mcts.get_best_action()
        if action is None:
            # search(0) の場合など、まだ子ノードがない
            self.mcts.run()
            action = self.mcts.get_best_action()

        # 自分の着手も木に反映しておく
        self.mcts.commit_action(action)
        return action

    def _sync(self, board: TicTacToeBoard):
        """探索木のルートを現在の盤面に合わせる"""
        if self.reuse_tree and self.mcts is not None and self.mcts.player is board.next_player:
            if self.mcts.board == board:
                self.reused += 1
                return

            # 相手の着手を子ノードから探す
            for child in self.mcts.root.children:
                if child.board == board:
                    self.mcts.commit_action(child.action)
                    self.reused += 1
                    return

            logger.debug(
                "%s: opponent move not explored, starting a new tree", self.name
            )

        self.mcts = MCTS(board.next_player, board, rng=self.rng)
        self.rebuilt += 1


class HumanPlayer(Player):
    """
    人間プレイヤー（CLI用）

    標準入力から着手を受け付ける
    """

    def __init__(self, name: str = "Human"):
        super().__init__(name)

    def get_action(self, board: TicTacToeBoard) -> Action:
        """標準入力から着手を受け付ける"""
        legal_moves = board.get_actions()
        print(f"\n合法手: {', '.join(format_action(a) for a in legal_moves)}")

        while True:
            try:
                action = parse_action(input("着手を入力してください (例: a1): "))
            except ValueError:
                print("入力エラー。もう一度入力してください。")
                continue

            if action in legal_moves:
                return action
            print("無効な着手です。")
