"""
着手の表記と盤面のテキスト表示

列は a-c、行は 1-3 で表す（例: "a1" = 左上）
"""

from .board import BOARD_SIZE, Action, TicTacToeBoard

_COLUMNS = "abc"


def format_action(action: Action) -> str:
    """(row, col) を "a1" 形式に変換"""
    row, col = action
    return f"{_COLUMNS[col]}{row + 1}"


def parse_action(text: str) -> Action:
    """
    "a1" 形式の文字列を (row, col) に変換

    "1a" のように行を先に書いても受け付ける

    Raises:
        ValueError: 形式が不正、または盤外の場合
    """
    token = text.strip().lower()
    if len(token) != 2:
        raise ValueError(f"Invalid action: {text!r}")

    if token[0].isdigit():
        token = token[::-1]

    col_char, row_char = token
    if col_char not in _COLUMNS or not row_char.isdigit():
        raise ValueError(f"Invalid action: {text!r}")

    row = int(row_char) - 1
    col = _COLUMNS.index(col_char)
    if not 0 <= row < BOARD_SIZE:
        raise ValueError(f"Invalid action: {text!r}")

    return row, col


def render_board(board: TicTacToeBoard) -> str:
    """盤面を表示用の文字列にする"""
    symbols = {0: ".", 1: "x", -1: "o"}
    lines = ["  " + " ".join(_COLUMNS)]
    for i, row in enumerate(board.fields):
        lines.append(f"{i + 1} " + " ".join(symbols[int(v)] for v in row))
    return "\n".join(lines)
