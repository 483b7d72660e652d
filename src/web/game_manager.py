"""
ゲーム状態管理クラス

人間 vs AI の対局を管理する。
AIの探索は SearchWorker がバックグラウンドで回し続け、
このクラスは着手の送信と最善手の読み出しだけを行う
"""

import logging
import threading
import time
from typing import Dict, Optional, Tuple

from src.game.board import Player, TicTacToeBoard
from src.game.notation import format_action
from src.mcts.exceptions import SearchWorkerError
from src.mcts.mcts import MCTS, ActionEvaluation
from src.mcts.worker import SearchWorker
from .schemas import GameStateResponse

logger = logging.getLogger(__name__)

AI_ALREADY_THINKING = "AI is already thinking"


class GameManager:
    """
    Webインターフェース向けゲーム状態管理

    着手はすべて SearchWorker.commit で探索木に反映する
    """

    def __init__(
        self,
        think_time: float = 0.1,
        idle_interval: float = 0.001,
        commit_timeout: float = 5.0,
        seed: Optional[int] = None,
    ) -> None:
        """
        Args:
            think_time: AIが着手前に待つ秒数
            idle_interval: 探索済みのときのワーカーの休止秒数
            commit_timeout: 着手の反映を待つ最大秒数
            seed: 乱数シード
        """
        self.think_time = think_time
        self.idle_interval = idle_interval
        self.commit_timeout = commit_timeout
        self.seed = seed

        self._lock = threading.RLock()
        self.board = TicTacToeBoard()
        self.human_player = Player.X
        self.is_ai_thinking = False
        self.last_message: Optional[str] = None
        self.worker: Optional[SearchWorker] = None
        self._last_ticket = 0

    @property
    def ai_player(self) -> Player:
        return self.human_player.opponent()

    def new_game(self, human_player: str = "X", first_player: str = "X") -> None:
        """
        新規ゲーム開始

        前のゲームのワーカーは停止し、AI側の探索木を作り直す

        Args:
            human_player: 人間の手番 (X/O)
            first_player: 先手 (X/O)
        """
        with self._lock:
            self.shutdown()

            self.human_player = Player.parse(human_player)
            self.board = TicTacToeBoard(first_player=Player.parse(first_player))
            self.is_ai_thinking = False
            self._last_ticket = 0

            mcts = MCTS(self.ai_player, self.board, seed=self.seed)
            self.worker = SearchWorker(mcts, idle_interval=self.idle_interval).start()
            self.last_message = "New game started"
            logger.info(
                "New game: human=%s, first=%s", self.human_player, self.board.next_player
            )

    def shutdown(self) -> None:
        """ワーカーを停止"""
        if self.worker is not None:
            self.worker.stop()
            self.worker = None

    def _play(self, action) -> None:
        self.board.perform_action(action)
        self._last_ticket = self.worker.commit(action)

    def make_move(self, row: int, col: int) -> Tuple[bool, Optional[str]]:
        """
        人間の着手を実行

        AIの木に子ノードができるのを待つ間はロックを手放すので、
        待機後に盤面を確認し直してから着手する

        Returns:
            (成功フラグ, エラーメッセージ)
        """
        action = (row, col)

        with self._lock:
            error = self._check_human_move(action)
            if error is not None:
                return False, error
            worker = self.worker

        # 未探索の手を commit しないよう、AIの木に子ノードができるのを待つ
        try:
            if not worker.wait_until_explored(action, timeout=self.commit_timeout):
                return False, "AI has not caught up with the last move"
        except SearchWorkerError as e:
            return False, str(e)

        with self._lock:
            if worker is not self.worker:
                return False, "Game changed while waiting for the AI"

            error = self._check_human_move(action)
            if error is not None:
                return False, error

            self._play(action)
            self.last_message = f"Moved to {format_action(action)}"
            return True, None

    def _check_human_move(self, action) -> Optional[str]:
        """人間の着手を検証し、不正ならエラーメッセージを返す（ロック内で呼ぶ）"""
        if self.worker is None:
            return "No game in progress"

        if self.board.is_ended():
            return "Game has already ended"

        if self.board.next_player is not self.human_player:
            return "Not your turn"

        if not self.board.is_legal_action(action):
            return f"Invalid move: {format_action(action)} is not legal"

        return None

    def try_start_ai_move(self) -> Tuple[bool, Optional[str]]:
        """
        AI着手の開始を予約する

        思考中フラグの確認と設定をロック内でまとめて行うので、
        同時に来たリクエストのうち1つだけが成功する

        Returns:
            (成功フラグ, エラーメッセージ)
        """
        with self._lock:
            if self.worker is None:
                return False, "No game in progress"

            if self.is_ai_thinking:
                return False, AI_ALREADY_THINKING

            if self.board.is_ended():
                return False, "Game has ended"

            if self.board.next_player is not self.ai_player:
                return False, "Not AI's turn"

            self.is_ai_thinking = True
            self.last_message = "AI thinking..."
            return True, None

    def finish_ai_move(self, error: Optional[str] = None) -> None:
        """思考中フラグを下ろす。失敗時はメッセージを残す"""
        with self._lock:
            self.is_ai_thinking = False
            if error is not None:
                self.last_message = error

    def execute_ai_move(self) -> Tuple[bool, Optional[str]]:
        """
        AIに着手させる

        直前の着手が探索木に反映されるのを待ってから思考時間だけ待ち、
        ワーカーの最善手を読み出す

        Returns:
            (成功フラグ, エラーメッセージ)
        """
        with self._lock:
            if self.worker is None:
                return False, "No game in progress"

            if self.board.is_ended():
                return False, "Game has ended"

            if self.board.next_player is not self.ai_player:
                return False, "Not AI's turn"

            worker = self.worker
            ticket = self._last_ticket

        try:
            if not worker.wait_for_commit(ticket, timeout=self.commit_timeout):
                return False, "AI has not caught up with the last move"
            time.sleep(self.think_time)
            action = worker.get_action()
        except SearchWorkerError as e:
            return False, str(e)

        if action is None:
            return False, "AI has no move yet"

        with self._lock:
            # 待っている間に別の着手が入っていれば、読んだ最善手は別の局面のもの
            if (
                worker is not self.worker
                or ticket != self._last_ticket
                or self.board.next_player is not self.ai_player
                or not self.board.is_legal_action(action)
            ):
                return False, "Game changed while AI was thinking"

            self._play(action)
            self.last_message = f"AI played at {format_action(action)}"
            return True, None

    def get_hint_evaluations(self) -> Tuple[Dict[str, ActionEvaluation], Optional[str]]:
        """
        ヒント評価値を取得

        最新の探索結果から、ルート直下の各着手の評価を返す

        Returns:
            (評価値辞書 {"a1": ActionEvaluation}, エラーメッセージ)
        """
        with self._lock:
            worker = self.worker
            board = self.board.copy()

        if worker is None:
            return {}, "No game in progress"

        if board.is_ended():
            return {}, "Game has ended"

        try:
            report = worker.get_report()
        except SearchWorkerError as e:
            return {}, str(e)

        if report is None or report.board != board:
            return {}, "Search has not caught up yet"

        return {format_action(a): ev for a, ev in report.evaluations.items()}, None

    def set_think_time(self, seconds: float) -> None:
        """AI思考時間を設定 (0-10秒)"""
        self.think_time = max(0.0, min(10.0, seconds))

    def get_state(self) -> GameStateResponse:
        """
        現在のゲーム状態を取得

        Returns:
            GameStateResponse: Pydanticモデル
        """
        with self._lock:
            winner = None
            if self.board.is_ended():
                mark = self.board.get_winner()
                winner = "draw" if mark is None else str(mark)

            iterations = 0
            if self.worker is not None and self.worker.is_alive():
                iterations = self.worker.iterations

            return GameStateResponse(
                board=self.board.to_list(),
                legal_moves=[format_action(a) for a in self.board.get_actions()],
                current_player=str(self.board.next_player),
                human_player=str(self.human_player),
                is_terminal=self.board.is_ended(),
                winner=winner,
                is_ai_thinking=self.is_ai_thinking,
                move_count=self.board.move_count,
                search_iterations=iterations,
                message=self.last_message,
            )
