"""
モンテカルロ木探索 (Monte Carlo Tree Search)

UCT方式のMCTS実装:
- ランダムプレイアウトによる評価
- UCT式による選択
- 1回ずつ呼び出せるanytimeな探索 (run)
- 着手確定時の木の再利用 (commit_action)
"""

import logging
from dataclasses import dataclass
from typing import Dict, Optional

import numpy as np

from .exceptions import UnexploredActionError
from .node import MCTSNode

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ActionEvaluation:
    """ルート直下の子ノードの統計"""

    visit_count: int
    win_score: int
    value: float


class MCTS:
    """
    モンテカルロ木探索

    探索アルゴリズム（run 1回あたり）:
    1. Select: UCT値が最大の子ノードを選択
    2. Expand: 未展開の合法手から子ノードを1つ追加
    3. Simulate: 追加したノードから終局までランダムにプレイアウト
    4. Backpropagate: 報酬を経路上のノードに加算

    木はゲーム1回・プレイヤー1人につき1つ作成し、
    着手が確定するたびに該当する子ノードを新しいルートにする
    """

    def __init__(
        self,
        player,
        board,
        seed: Optional[int] = None,
        rng: Optional[np.random.Generator] = None,
    ):
        """
        Args:
            player: 探索する側のプレイヤー（報酬の視点）
            board: 開始局面 (GameState)。コピーして保持する
            seed (int, optional): 乱数シード
            rng (np.random.Generator, optional): 乱数生成器（seedより優先）
        """
        self.player = player
        self.rng = rng if rng is not None else np.random.default_rng(seed)
        self.root = MCTSNode(perspective=player, board=board.copy())

    @property
    def board(self):
        """現在のルート局面"""
        return self.root.board

    @property
    def finished(self) -> bool:
        """ルートと直下の子ノードが展開し尽くされたか"""
        return self.root.is_finished()

    def run(self) -> bool:
        """
        探索を1回だけ実行

        Returns:
            bool: 探索を行った場合True（探索済みなら何もしない）
        """
        if self.finished:
            return False

        self.root.perform_search(self.rng)
        return True

    def search(self, num_iterations: int) -> int:
        """
        探索を指定回数まで繰り返す

        Args:
            num_iterations (int): 最大探索回数

        Returns:
            int: 実際に行った探索回数（途中で探索済みになれば打ち切る）
        """
        done = 0
        for _ in range(num_iterations):
            if not self.run():
                break
            done += 1
        return done

    def get_best_action(self):
        """
        現時点の最善手

        Returns:
            ルートのUCT最大の子ノードの着手。子ノードがまだなければNone
        """
        if not self.root.children:
            return None
        return self.root.best_child().action

    def commit_action(self, action):
        """
        着手を確定し、対応する子ノードを新しいルートにする

        それまでの探索結果（部分木の統計）はそのまま引き継ぎ、
        他の子ノードは破棄する

        Args:
            action: 確定した着手（自分・相手どちらの手でもよい）

        Raises:
            UnexploredActionError: ルートにその着手の子ノードがない場合
        """
        child = self.root.find_child(action)
        if child is None:
            raise UnexploredActionError(
                f"Action {action} has not been explored from the current root "
                f"(explored: {[c.action for c in self.root.children]})"
            )

        logger.debug(
            "Committed %s: reusing subtree N=%d W=%d", action, child.visit_count, child.win_score
        )
        self.root = child

    def get_action_evaluations(self) -> Dict[object, ActionEvaluation]:
        """
        ルート直下の各着手の評価（ヒント表示用）

        Returns:
            Dict: {action: ActionEvaluation}
        """
        return {
            child.action: ActionEvaluation(
                visit_count=child.visit_count,
                win_score=child.win_score,
                value=child.get_value(),
            )
            for child in self.root.children
        }
