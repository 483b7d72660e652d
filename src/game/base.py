"""
ゲーム状態の抽象インターフェース

MCTSが盤面に要求する操作だけを定義する
"""

from abc import ABC, abstractmethod
from typing import List, Optional


class GameState(ABC):
    """
    二人零和・完全情報ゲームの局面

    MCTSはこのインターフェースだけを通して盤面を扱う:
    - get_actions: 合法手の列挙（終局なら空）
    - apply / perform_action: 着手の適用
    - is_ended: 終局判定
    - get_reward: 終局時の報酬（指定プレイヤー視点）
    """

    @abstractmethod
    def get_actions(self) -> List:
        """合法手のリスト。終局していれば空リスト"""
        pass

    @abstractmethod
    def perform_action(self, action) -> None:
        """着手をこの盤面に適用する（破壊的）"""
        pass

    @abstractmethod
    def is_ended(self) -> bool:
        """終局しているか"""
        pass

    @abstractmethod
    def get_reward(self, player) -> Optional[int]:
        """
        終局時の報酬

        Args:
            player: 報酬を計算するプレイヤー

        Returns:
            Optional[int]: 1=勝ち, -1=負け, 0=引き分け, 未終局ならNone
        """
        pass

    @abstractmethod
    def copy(self) -> "GameState":
        pass

    def apply(self, action) -> "GameState":
        """
        着手後の盤面を新しく作って返す

        元の盤面は変更しない
        """
        board = self.copy()
        board.perform_action(action)
        return board
