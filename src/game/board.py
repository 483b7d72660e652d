"""
三目並べの盤面

3x3のnumpy配列で盤面を保持する
(0=空, 1=X, -1=O)
"""

from enum import Enum
from typing import List, Optional, Tuple

import numpy as np

from .base import GameState

Action = Tuple[int, int]

BOARD_SIZE = 3

# 8本のライン（横3, 縦3, 斜め2）を平坦化インデックスで表現
_LINES = np.array(
    [
        [0, 1, 2], [3, 4, 5], [6, 7, 8],
        [0, 3, 6], [1, 4, 7], [2, 5, 8],
        [0, 4, 8], [2, 4, 6],
    ],
    dtype=np.intp,
)


class Player(Enum):
    """プレイヤー (X=1, O=-1)"""

    X = 1
    O = -1

    def opponent(self) -> "Player":
        """相手プレイヤー"""
        return Player.O if self is Player.X else Player.X

    @classmethod
    def parse(cls, text: str) -> "Player":
        """
        文字列からプレイヤーを取得

        Args:
            text: "X" または "O"（大文字小文字を区別しない）

        Raises:
            ValueError: どちらでもない場合
        """
        try:
            return cls[str(text).strip().upper()]
        except KeyError:
            raise ValueError(f"Unknown player: {text!r}") from None

    def __str__(self) -> str:
        return self.name


class TicTacToeBoard(GameState):
    """
    三目並べの盤面

    Attributes:
        fields (np.ndarray): (3, 3) int8 配列
        next_player (Player): 次の手番
    """

    def __init__(self, first_player: Player = Player.X):
        """
        Args:
            first_player: 先手プレイヤー
        """
        self.fields = np.zeros((BOARD_SIZE, BOARD_SIZE), dtype=np.int8)
        self.next_player = first_player

    def reset(self, first_player: Optional[Player] = None):
        """盤面を初期状態に戻す"""
        self.fields[:] = 0
        if first_player is not None:
            self.next_player = first_player

    def copy(self) -> "TicTacToeBoard":
        board = TicTacToeBoard.__new__(TicTacToeBoard)
        board.fields = self.fields.copy()
        board.next_player = self.next_player
        return board

    @property
    def move_count(self) -> int:
        """盤面上の石の数（＝手数）"""
        return int(np.count_nonzero(self.fields))

    def get_winner(self) -> Optional[Player]:
        """
        勝者を判定

        Returns:
            Optional[Player]: 3つ並んだプレイヤー。いなければNone
        """
        sums = self.fields.ravel()[_LINES].sum(axis=1)
        if np.any(sums == 3):
            return Player.X
        if np.any(sums == -3):
            return Player.O
        return None

    def is_ended(self) -> bool:
        if self.get_winner() is not None:
            return True
        # 全マス埋まっていれば引き分けで終局
        return bool(np.all(self.fields != 0))

    def is_legal_action(self, action: Action) -> bool:
        row, col = action
        if not (0 <= row < BOARD_SIZE and 0 <= col < BOARD_SIZE):
            return False
        return bool(self.fields[row, col] == 0)

    def perform_action(self, action: Action) -> None:
        """
        着手を適用し、手番を交代する

        Raises:
            ValueError: 非合法手の場合
        """
        if self.is_ended() or not self.is_legal_action(action):
            raise ValueError(f"Illegal action: {action}")

        row, col = action
        self.fields[row, col] = self.next_player.value
        self.next_player = self.next_player.opponent()

    def get_actions(self) -> List[Action]:
        """合法手（空きマス）を行優先で列挙。終局していれば空"""
        if self.is_ended():
            return []

        rows, cols = np.nonzero(self.fields == 0)
        return [(int(r), int(c)) for r, c in zip(rows, cols)]

    def get_reward(self, player: Player) -> Optional[int]:
        if not self.is_ended():
            return None

        winner = self.get_winner()
        if winner is None:
            return 0
        return 1 if winner is player else -1

    def to_list(self) -> List[List[int]]:
        """JSON用の2次元リスト"""
        return self.fields.tolist()

    def __eq__(self, other) -> bool:
        if not isinstance(other, TicTacToeBoard):
            return NotImplemented
        return (
            self.next_player is other.next_player
            and bool(np.array_equal(self.fields, other.fields))
        )

    def __repr__(self) -> str:
        """デバッグ用の文字列表現"""
        symbols = {0: ".", 1: "x", -1: "o"}
        lines = ["TicTacToeBoard(", f"    next_player={self.next_player}", "      a b c"]
        for i, row in enumerate(self.fields):
            cells = " ".join(symbols[int(v)] for v in row)
            lines.append(f"    {i + 1} {cells}")
        lines.append(")")
        return "\n".join(lines)
