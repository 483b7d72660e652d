"""
Pydanticスキーマ定義

Web APIのリクエスト/レスポンスモデル
"""

from typing import Dict, List, Optional
from pydantic import BaseModel, Field


# === リクエストモデル ===


class NewGameRequest(BaseModel):
    """新規ゲームリクエスト"""

    human_player: str = Field(default="X", pattern="^[XOxo]$", description="人間の手番: X または O")
    first_player: str = Field(default="X", pattern="^[XOxo]$", description="先手: X または O")


class MoveRequest(BaseModel):
    """着手リクエスト"""

    row: int = Field(..., ge=0, le=2, description="行 (0-2)")
    col: int = Field(..., ge=0, le=2, description="列 (0-2)")


class ThinkTimeRequest(BaseModel):
    """AI思考時間設定リクエスト"""

    seconds: float = Field(..., ge=0.0, le=10.0, description="思考時間（秒, 0-10）")


# === レスポンスモデル ===


class GameStateResponse(BaseModel):
    """ゲーム状態レスポンス"""

    board: List[List[int]] = Field(..., description="3x3盤面 (0=空, 1=X, -1=O)")
    legal_moves: List[str] = Field(..., description="合法手リスト (例: a1)")
    current_player: str = Field(..., description="現在の手番 (X/O)")
    human_player: str = Field(..., description="人間の手番 (X/O)")
    is_terminal: bool = Field(..., description="ゲーム終了フラグ")
    winner: Optional[str] = Field(None, description="勝者 (X/O, 引き分けはdraw, 未終了はNone)")
    is_ai_thinking: bool = Field(..., description="AI思考中フラグ")
    move_count: int = Field(..., description="手数")
    search_iterations: int = Field(..., description="バックグラウンド探索のループ回数")
    message: Optional[str] = Field(None, description="ステータスメッセージ")


class MoveResponse(BaseModel):
    """着手レスポンス"""

    success: bool = Field(..., description="成功フラグ")
    game_state: GameStateResponse = Field(..., description="着手後のゲーム状態")
    error: Optional[str] = Field(None, description="エラーメッセージ")


class ActionEvaluationResponse(BaseModel):
    """1手分の評価"""

    visits: int = Field(..., description="訪問回数")
    value: float = Field(..., description="平均報酬 (-1.0〜1.0, AI視点)")


class HintResponse(BaseModel):
    """ヒントレスポンス"""

    evaluations: Dict[str, ActionEvaluationResponse] = Field(
        ..., description="各着手の評価 (例: a1 -> 評価)"
    )
    success: bool = Field(..., description="成功フラグ")
    error: Optional[str] = Field(None, description="エラーメッセージ")


class AIStatusResponse(BaseModel):
    """AI状態レスポンス"""

    is_thinking: bool = Field(..., description="AI思考中フラグ")
    game_state: GameStateResponse = Field(..., description="現在のゲーム状態")


class SuccessResponse(BaseModel):
    """汎用成功レスポンス"""

    success: bool = Field(..., description="成功フラグ")
    message: Optional[str] = Field(None, description="メッセージ")
    error: Optional[str] = Field(None, description="エラーメッセージ")
