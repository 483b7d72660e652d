"""
バックグラウンド探索ワーカー

相手の思考中もMCTSを回し続けるためのスレッド:
- 受信: 確定した着手（キュー、ノンブロッキング）
- 送信: 現時点の最善手（ロックで保護した共有スロット）

探索木はこのワーカーのスレッドだけが触る
"""

import logging
import queue
import threading
from dataclasses import dataclass, field
from typing import Dict, Optional

from .exceptions import SearchWorkerError
from .mcts import MCTS, ActionEvaluation

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SearchReport:
    """
    ワーカーが探索1回ごとに公開する結果

    Attributes:
        best_action: 最善手（まだなければNone）
        board: この結果を計算したルート局面のコピー
        root_visits: ルートの訪問回数
        finished: 探索済みかどうか
        commits_applied: 反映済みの着手数
        iterations: ワーカーのループ回数
        evaluations: ルート直下の各着手の評価
    """

    best_action: Optional[tuple]
    board: object
    root_visits: int
    finished: bool
    commits_applied: int
    iterations: int
    evaluations: Dict[tuple, ActionEvaluation] = field(default_factory=dict)


class SearchWorker:
    """
    MCTSを継続的に実行するワーカースレッド

    ループ1回ごとに:
    1. 確定した着手があれば1つだけ取り出して commit_action
    2. run() で探索を1回
    3. 最善手を共有スロットに書き込む
    """

    def __init__(
        self,
        mcts: MCTS,
        idle_interval: float = 0.001,
        name: str = "mcts-search-worker",
    ):
        """
        Args:
            mcts: このワーカーが専有する探索木
            idle_interval: 探索済みのときにループを休ませる秒数
            name: スレッド名
        """
        self.mcts = mcts
        self.idle_interval = idle_interval

        self._commits: "queue.SimpleQueue" = queue.SimpleQueue()
        self._cond = threading.Condition(threading.Lock())
        self._stop = threading.Event()

        # 以下は _cond で保護
        self._sent = 0
        self._report: Optional[SearchReport] = None
        self._error: Optional[BaseException] = None

        self._thread = threading.Thread(target=self._run, name=name, daemon=True)

    def start(self) -> "SearchWorker":
        self._thread.start()
        return self

    def stop(self, timeout: Optional[float] = 1.0):
        """ループを止めてスレッドの終了を待つ"""
        self._stop.set()
        if self._thread.is_alive():
            self._thread.join(timeout)

    def is_alive(self) -> bool:
        return self._thread.is_alive()

    def commit(self, action) -> int:
        """
        確定した着手をワーカーに送る（ブロックしない）

        Returns:
            int: 送信順の番号（wait_for_commit に渡す）
        """
        with self._cond:
            self._sent += 1
            self._commits.put(action)
            return self._sent

    def get_report(self) -> Optional[SearchReport]:
        """最新の探索結果。まだループが1回も回っていなければNone"""
        with self._cond:
            self._raise_if_failed()
            return self._report

    def get_action(self):
        """現時点の最善手。まだなければNone"""
        report = self.get_report()
        return None if report is None else report.best_action

    @property
    def iterations(self) -> int:
        with self._cond:
            return 0 if self._report is None else self._report.iterations

    def wait_for_iterations(self, count: int, timeout: Optional[float] = None) -> bool:
        """
        ループが count 回以上回るまで待つ

        Returns:
            bool: 条件を満たした場合True、タイムアウトならFalse
        """
        with self._cond:
            done = self._cond.wait_for(
                lambda: self._error is not None
                or (self._report is not None and self._report.iterations >= count),
                timeout,
            )
            self._raise_if_failed()
            return done

    def wait_for_commit(self, ticket: int, timeout: Optional[float] = None) -> bool:
        """
        ticket 番目の着手を反映したルートで計算された結果が公開されるまで待つ

        Returns:
            bool: 条件を満たした場合True、タイムアウトならFalse
        """
        with self._cond:
            done = self._cond.wait_for(
                lambda: self._error is not None
                or (self._report is not None and self._report.commits_applied >= ticket),
                timeout,
            )
            self._raise_if_failed()
            return done

    def wait_until_explored(self, action, timeout: Optional[float] = None) -> bool:
        """
        送信済みの着手をすべて反映したルートに action の子ノードができるまで待つ

        commit(action) の前に呼ぶと、未探索の手による commit_action の失敗を避けられる

        Returns:
            bool: 条件を満たした場合True、タイムアウトならFalse
        """
        with self._cond:
            done = self._cond.wait_for(
                lambda: self._error is not None
                or (
                    self._report is not None
                    and self._report.commits_applied >= self._sent
                    and action in self._report.evaluations
                ),
                timeout,
            )
            self._raise_if_failed()
            return done

    def _raise_if_failed(self):
        if self._error is not None:
            raise SearchWorkerError(f"Search worker failed: {self._error!r}") from self._error

    def _run(self):
        logger.info("Search worker started for player %s", self.mcts.player)
        applied = 0
        iterations = 0

        try:
            while not self._stop.is_set():
                # 着手の反映は探索より先に行う
                try:
                    action = self._commits.get_nowait()
                except queue.Empty:
                    pass
                else:
                    self.mcts.commit_action(action)
                    applied += 1

                self.mcts.run()
                iterations += 1

                report = SearchReport(
                    best_action=self.mcts.get_best_action(),
                    board=self.mcts.board.copy(),
                    root_visits=self.mcts.root.visit_count,
                    finished=self.mcts.finished,
                    commits_applied=applied,
                    iterations=iterations,
                    evaluations=self.mcts.get_action_evaluations(),
                )
                with self._cond:
                    self._report = report
                    self._cond.notify_all()

                if report.finished:
                    self._stop.wait(self.idle_interval)

        except Exception as e:
            logger.exception("Search worker stopped by an error")
            with self._cond:
                self._error = e
                self._cond.notify_all()
            return

        logger.info("Search worker stopped after %d iterations", iterations)
