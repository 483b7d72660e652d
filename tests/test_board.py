"""盤面のテスト

初期配置、合法手生成、勝敗判定、着手表記が正しいことを確認する。
"""

import numpy as np
import pytest

from src.game.board import Player, TicTacToeBoard
from src.game.notation import format_action, parse_action, render_board


def make_board(moves, first_player=Player.X):
    """着手列から盤面を作る"""
    board = TicTacToeBoard(first_player=first_player)
    for action in moves:
        board.perform_action(action)
    return board


class TestPlayer:
    """プレイヤーのテスト"""

    def test_opponent(self):
        assert Player.X.opponent() is Player.O
        assert Player.O.opponent() is Player.X

    def test_parse(self):
        assert Player.parse("x") is Player.X
        assert Player.parse(" O ") is Player.O

    def test_parse_invalid(self):
        with pytest.raises(ValueError):
            Player.parse("Z")


class TestTicTacToeBoardInit:
    """初期化テスト"""

    def test_initial_position(self):
        """初期状態は空で、先手の手番"""
        board = TicTacToeBoard()

        assert board.move_count == 0
        assert board.next_player is Player.X
        assert not board.is_ended()
        assert board.get_winner() is None

    def test_initial_legal_moves(self):
        """初期状態では9マスすべてが合法手（行優先）"""
        board = TicTacToeBoard()
        expected = [(r, c) for r in range(3) for c in range(3)]
        assert board.get_actions() == expected

    def test_first_player(self):
        board = TicTacToeBoard(first_player=Player.O)
        board.perform_action((0, 0))
        assert board.fields[0, 0] == Player.O.value
        assert board.next_player is Player.X

    def test_reset(self):
        """リセットで初期状態に戻ること"""
        board = make_board([(0, 0), (1, 1)])
        board.reset(first_player=Player.O)

        assert board.move_count == 0
        assert board.next_player is Player.O


class TestTicTacToeBoardMoves:
    """着手テスト"""

    def test_perform_action(self):
        board = TicTacToeBoard()
        board.perform_action((1, 2))

        assert board.fields[1, 2] == 1
        assert board.next_player is Player.O
        assert (1, 2) not in board.get_actions()
        assert len(board.get_actions()) == 8

    def test_occupied_cell_is_illegal(self):
        board = make_board([(1, 1)])

        assert not board.is_legal_action((1, 1))
        with pytest.raises(ValueError):
            board.perform_action((1, 1))

    def test_out_of_bounds_is_illegal(self):
        board = TicTacToeBoard()
        assert not board.is_legal_action((3, 0))
        assert not board.is_legal_action((-1, 2))

    def test_apply_does_not_mutate(self):
        """apply は元の盤面を変えない"""
        board = TicTacToeBoard()
        successor = board.apply((0, 0))

        assert board.move_count == 0
        assert successor.move_count == 1
        assert successor.next_player is Player.O

    def test_copy_is_independent(self):
        board = make_board([(0, 0)])
        copied = board.copy()
        copied.perform_action((2, 2))

        assert board.move_count == 1
        assert copied.move_count == 2

    def test_equality(self):
        a = make_board([(0, 0), (1, 1)])
        b = make_board([(0, 0), (1, 1)])
        c = make_board([(1, 1), (0, 0)], first_player=Player.O)

        assert a == b
        # マスは同じだが手番が違う
        assert a != c
        assert a != make_board([(0, 0)])


class TestTicTacToeBoardOutcome:
    """勝敗判定テスト"""

    @pytest.mark.parametrize("line", [
        [(0, 0), (0, 1), (0, 2)],
        [(2, 0), (2, 1), (2, 2)],
        [(0, 2), (1, 2), (2, 2)],
        [(0, 0), (1, 1), (2, 2)],
        [(0, 2), (1, 1), (2, 0)],
    ])
    def test_all_lines_win(self, line):
        """横・縦・斜めのすべてのラインで勝ちになる"""
        board = TicTacToeBoard()
        for row, col in line:
            board.fields[row, col] = Player.O.value

        assert board.get_winner() is Player.O
        assert board.is_ended()
        assert board.get_actions() == []

    def test_rewards(self):
        # X: 上段を揃える
        board = make_board([(0, 0), (1, 0), (0, 1), (1, 1), (0, 2)])

        assert board.get_winner() is Player.X
        assert board.get_reward(Player.X) == 1
        assert board.get_reward(Player.O) == -1

    def test_draw(self):
        board = make_board([
            (0, 0), (0, 1), (0, 2),
            (1, 1), (1, 0), (1, 2),
            (2, 1), (2, 0), (2, 2),
        ])

        assert board.is_ended()
        assert board.get_winner() is None
        assert board.get_reward(Player.X) == 0
        assert board.get_reward(Player.O) == 0

    def test_reward_undefined_before_end(self):
        board = make_board([(0, 0)])
        assert board.get_reward(Player.X) is None

    def test_no_moves_after_win(self):
        board = make_board([(0, 0), (1, 0), (0, 1), (1, 1), (0, 2)])
        with pytest.raises(ValueError):
            board.perform_action((2, 2))


class TestNotation:
    """着手表記テスト"""

    def test_format_action(self):
        assert format_action((0, 0)) == "a1"
        assert format_action((2, 1)) == "b3"

    @pytest.mark.parametrize("text,expected", [
        ("a1", (0, 0)),
        ("C2", (1, 2)),
        ("1a", (0, 0)),
        (" b3 ", (2, 1)),
    ])
    def test_parse_action(self, text, expected):
        assert parse_action(text) == expected

    @pytest.mark.parametrize("text", ["", "a", "a4", "d1", "aa", "11", "a10"])
    def test_parse_invalid(self, text):
        with pytest.raises(ValueError):
            parse_action(text)

    def test_render_board(self):
        board = make_board([(0, 0), (1, 1)])
        text = render_board(board)

        assert text.splitlines() == [
            "  a b c",
            "1 x . .",
            "2 . o .",
            "3 . . .",
        ]

    def test_board_to_list(self):
        board = make_board([(0, 0), (1, 1)])
        assert board.to_list() == [[1, 0, 0], [0, -1, 0], [0, 0, 0]]
        assert isinstance(board.fields, np.ndarray)
