"""
FastAPI APIエンドポイント

三目並べ（人間 vs MCTS）のWeb API
"""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import BackgroundTasks, FastAPI, HTTPException

from .game_manager import AI_ALREADY_THINKING, GameManager
from .schemas import (
    ActionEvaluationResponse,
    AIStatusResponse,
    GameStateResponse,
    HintResponse,
    MoveRequest,
    MoveResponse,
    NewGameRequest,
    SuccessResponse,
    ThinkTimeRequest,
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """終了時にワーカーを止める"""
    yield
    if _game_manager is not None:
        _game_manager.shutdown()


# FastAPIアプリ
app = FastAPI(
    lifespan=lifespan,
    title="Tic-Tac-Toe MCTS Web",
    description="バックグラウンドで探索を続けるMCTS AIとの対局API",
    version="0.1.0",
)

# ゲームマネージャ（シングルトン）
_game_manager: Optional[GameManager] = None


def get_game_manager() -> GameManager:
    """ゲームマネージャを取得（初回はゲームも開始する）"""
    global _game_manager
    if _game_manager is None:
        _game_manager = GameManager()
        _game_manager.new_game()
    return _game_manager


def configure_game_manager(manager: GameManager) -> GameManager:
    """ゲームマネージャを差し替える（起動スクリプト・テスト用）"""
    global _game_manager
    if _game_manager is not None:
        _game_manager.shutdown()
    _game_manager = manager
    return manager


# === ゲームAPI ===


@app.post("/api/game/new", response_model=GameStateResponse)
def new_game(request: NewGameRequest):
    """新規ゲーム開始"""
    manager = get_game_manager()
    manager.new_game(human_player=request.human_player, first_player=request.first_player)
    return manager.get_state()


@app.get("/api/game/state", response_model=GameStateResponse)
def get_game_state():
    """現在のゲーム状態を取得"""
    return get_game_manager().get_state()


@app.post("/api/game/move", response_model=MoveResponse)
def make_move(request: MoveRequest):
    """着手を実行"""
    manager = get_game_manager()

    success, error = manager.make_move(request.row, request.col)

    return MoveResponse(
        success=success,
        game_state=manager.get_state(),
        error=error,
    )


@app.post("/api/game/ai-move", response_model=AIStatusResponse)
def request_ai_move(background_tasks: BackgroundTasks):
    """
    AIに着手させる（非同期）

    思考時間だけ待ってからワーカーの最善手を打つ。
    フロントエンドは /api/game/ai-status でポーリング
    """
    manager = get_game_manager()

    started, error = manager.try_start_ai_move()
    if not started:
        if error == AI_ALREADY_THINKING:
            return AIStatusResponse(
                is_thinking=True,
                game_state=manager.get_state(),
            )
        raise HTTPException(status_code=400, detail=error)

    def run_ai():
        """バックグラウンドでAI着手"""
        error = None
        try:
            _, error = manager.execute_ai_move()
        finally:
            manager.finish_ai_move(error)

    background_tasks.add_task(run_ai)

    return AIStatusResponse(
        is_thinking=True,
        game_state=manager.get_state(),
    )


@app.get("/api/game/ai-status", response_model=AIStatusResponse)
def get_ai_status():
    """AI思考状態を取得"""
    manager = get_game_manager()

    return AIStatusResponse(
        is_thinking=manager.is_ai_thinking,
        game_state=manager.get_state(),
    )


@app.get("/api/game/hint", response_model=HintResponse)
def get_hint():
    """ヒント評価値を取得"""
    manager = get_game_manager()

    evaluations, error = manager.get_hint_evaluations()

    return HintResponse(
        evaluations={
            action: ActionEvaluationResponse(visits=ev.visit_count, value=ev.value)
            for action, ev in evaluations.items()
        },
        success=error is None,
        error=error,
    )


# === AI設定API ===


@app.put("/api/ai/think-time", response_model=SuccessResponse)
def set_think_time(request: ThinkTimeRequest):
    """AI思考時間を設定"""
    manager = get_game_manager()
    manager.set_think_time(request.seconds)

    return SuccessResponse(
        success=True,
        message=f"Think time set to {manager.think_time:.2f}s",
    )


@app.get("/api/ai/think-time")
def get_think_time():
    """現在のAI思考時間を取得"""
    return {"seconds": get_game_manager().think_time}
