"""
MCTSノード定義

UCT方式のMCTSで使用する木構造のノードクラス
選択・展開・ランダムプレイアウト・逆伝播を1回の再帰で行う
"""

from enum import Enum
from typing import Dict, List, Optional

import numpy as np

from .exceptions import SearchInvariantError


class NodeStatus(Enum):
    """ノードの展開状態"""

    LEAF = "leaf"  # 終局局面
    FULLY_EXPANDED = "fully_expanded"  # 全合法手に子ノードがある
    EXPANDABLE = "expandable"  # 未展開の合法手が残っている


class MCTSNode:
    """
    MCTSの木構造ノード

    各ノードは以下の情報を保持:
    - 視点プレイヤー (perspective) - 木全体で固定
    - 局面 (board)
    - 訪問回数 (N) と累積報酬 (W)
    - この局面に至った着手 (action) - ルートはNone
    - 子ノード（展開した順）

    UCT式:
        W(s,a) / N(s,a) + sqrt(2 * ln N(s) / N(s,a))
    """

    def __init__(self, perspective, board, action=None):
        """
        Args:
            perspective: 報酬を計算するプレイヤー
            board: このノードの局面 (GameState)
            action: 親ノードからこのノードへの着手
        """
        self.perspective = perspective
        self.board = board
        self.action = action

        # 統計情報
        self.visit_count = 0  # N
        self.win_score = 0  # W

        # 子ノード（展開順）
        self.children: List[MCTSNode] = []

        self.status = NodeStatus.EXPANDABLE

    def get_value(self) -> float:
        """
        平均報酬 W/N

        Returns:
            float: 平均報酬。訪問回数が0の場合は0を返す
        """
        if self.visit_count == 0:
            return 0.0
        return self.win_score / self.visit_count

    def terminal_reward(self) -> int:
        """
        終局局面の報酬（視点プレイヤー基準）

        Raises:
            SearchInvariantError: 終局していない局面の場合
        """
        reward = self.board.get_reward(self.perspective)
        if reward is None:
            raise SearchInvariantError(
                f"Terminal reward requested for a non-terminal node: {self!r}"
            )
        return reward

    def best_child(self) -> "MCTSNode":
        """
        UCT値が最大の子ノードを選択

        同点の場合は先に展開された子ノードを返す

        Returns:
            MCTSNode: 選択された子ノード
        """
        if not self.children:
            raise SearchInvariantError(f"best_child() on a node without children: {self!r}")

        best_value = -np.inf
        best_child = None
        log_total = np.log(self.visit_count)

        for child in self.children:
            if child.visit_count == 0:
                raise SearchInvariantError(f"Unvisited child in the tree: {child!r}")

            exploitation = child.win_score / child.visit_count
            exploration = np.sqrt(2.0 * log_total / child.visit_count)
            value = exploitation + exploration

            if value > best_value:
                best_value = value
                best_child = child

        return best_child

    def expand(self, rng: np.random.Generator) -> Optional["MCTSNode"]:
        """
        未展開の合法手を1つランダムに選び、子ノードを追加する

        Args:
            rng: 乱数生成器

        Returns:
            Optional[MCTSNode]: 追加した子ノード。終局局面ならNone
        """
        actions = self.board.get_actions()

        if not actions:
            self.status = NodeStatus.LEAF
            return None

        # 展開済みの手を除外
        explored = {child.action for child in self.children}
        untried = [action for action in actions if action not in explored]

        if not untried:
            raise SearchInvariantError(f"Expandable node without untried actions: {self!r}")

        if len(untried) == 1:
            # 最後の1手を展開するので、このノードは展開完了になる
            self.status = NodeStatus.FULLY_EXPANDED

        action = untried[rng.integers(len(untried))]
        child = MCTSNode(
            perspective=self.perspective,
            board=self.board.apply(action),
            action=action,
        )
        self.children.append(child)
        return child

    def simulate(self, rng: np.random.Generator) -> int:
        """
        終局までランダムにプレイアウトする

        盤面のコピー上で行うため、このノードの局面は変化しない。
        統計の記録は呼び出し側で行う

        Returns:
            int: 終局時の報酬（視点プレイヤー基準）
        """
        if self.visit_count != 0 or self.win_score != 0:
            raise SearchInvariantError(f"simulate() on an already visited node: {self!r}")

        board = self.board.copy()

        while True:
            actions = board.get_actions()
            if not actions:
                break
            board.perform_action(actions[rng.integers(len(actions))])

        return board.get_reward(self.perspective)

    def update(self, reward: int):
        """
        ノードの統計情報を更新（バックプロパゲーション）

        Args:
            reward: 視点プレイヤー基準の報酬
        """
        self.visit_count += 1
        self.win_score += reward

    def perform_search(self, rng: np.random.Generator) -> int:
        """
        1回の探索を実行

        Select -> Expand -> Simulate -> Backpropagate を
        このノードから1本の経路に沿って再帰的に行う

        Returns:
            int: この経路で得られた報酬
        """
        if self.status is NodeStatus.LEAF:
            return self.terminal_reward()

        if self.status is NodeStatus.FULLY_EXPANDED:
            reward = self.best_child().perform_search(rng)
        else:
            child = self.expand(rng)
            if child is None:
                return self.terminal_reward()

            reward = child.simulate(rng)
            child.update(reward)

        self.update(reward)
        return reward

    def is_finished(self) -> bool:
        """このノードと直下の子ノードがすべて展開済み（または終局）か"""
        if self.status is NodeStatus.EXPANDABLE:
            return False
        return all(child.status is not NodeStatus.EXPANDABLE for child in self.children)

    def find_child(self, action) -> Optional["MCTSNode"]:
        """指定した着手の子ノードを探す"""
        for child in self.children:
            if child.action == action:
                return child
        return None

    def get_visit_counts(self) -> Dict:
        """
        子ノードの訪問回数を取得

        Returns:
            Dict: {action: visit_count}
        """
        return {child.action: child.visit_count for child in self.children}

    def __repr__(self) -> str:
        """デバッグ用の文字列表現"""
        return (f"MCTSNode(action={self.action}, "
                f"N={self.visit_count}, "
                f"W={self.win_score}, "
                f"status={self.status.value}, "
                f"children={len(self.children)})")
