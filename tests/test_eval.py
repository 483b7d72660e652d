"""
評価システムのテストケース

- 各プレイヤーの着手テスト
- Arenaの対戦テスト
- evaluate_playerの集計テスト
"""

import pytest

from src.eval.arena import Arena, MatchResult, evaluate_player
from src.eval.players import (
    GreedyPlayer,
    HumanPlayer,
    MCTSPlayer,
    RandomPlayer,
)
from src.game.board import Player as Mark
from src.game.board import TicTacToeBoard


def make_board(moves, first_player=Mark.X):
    board = TicTacToeBoard(first_player=first_player)
    for action in moves:
        board.perform_action(action)
    return board


def finished_board():
    return make_board([(0, 0), (1, 0), (0, 1), (1, 1), (0, 2)])


class TestPlayers:
    """プレイヤーのテスト"""

    def test_random_player(self):
        """RandomPlayerは合法手を返す"""
        player = RandomPlayer(seed=42)
        board = make_board([(1, 1)])

        for _ in range(20):
            assert board.is_legal_action(player.get_action(board))

    def test_random_player_is_reproducible(self):
        a = RandomPlayer(seed=7)
        b = RandomPlayer(seed=7)
        board = TicTacToeBoard()

        assert [a.get_action(board) for _ in range(10)] == [b.get_action(board) for _ in range(10)]

    @pytest.mark.parametrize("player", [RandomPlayer(seed=0), GreedyPlayer(seed=0), MCTSPlayer(seed=0)])
    def test_no_moves_after_end(self, player):
        with pytest.raises(ValueError):
            player.get_action(finished_board())

    def test_greedy_takes_win(self):
        """勝てる手があれば打つ"""
        board = make_board([(0, 0), (1, 0), (0, 1), (1, 1)])
        assert GreedyPlayer(seed=0).get_action(board) == (0, 2)

    def test_greedy_blocks(self):
        """相手の勝ち筋を塞ぐ"""
        board = make_board([(0, 0), (2, 2), (0, 1)])
        assert board.next_player is Mark.O
        assert GreedyPlayer(seed=0).get_action(board) == (0, 2)

    def test_mcts_player_takes_win(self):
        board = make_board([(0, 0), (1, 0), (0, 1), (1, 1)])
        assert MCTSPlayer(num_iterations=200, seed=0).get_action(board) == (0, 2)

    def test_mcts_player_reuses_tree(self):
        """1ゲームを通して探索木を引き継ぐ"""
        player = MCTSPlayer(num_iterations=200, seed=0)
        opponent = RandomPlayer(seed=0)
        board = TicTacToeBoard()

        while not board.is_ended():
            if board.next_player is Mark.X:
                action = player.get_action(board)
            else:
                action = opponent.get_action(board)
            assert board.is_legal_action(action)
            board.perform_action(action)

        assert player.rebuilt >= 1
        assert player.reused > 0
        assert player.reused + player.rebuilt == (board.move_count + 1) // 2

    def test_mcts_player_without_reuse(self):
        player = MCTSPlayer(num_iterations=50, seed=0, reuse_tree=False)
        board = TicTacToeBoard()

        for _ in range(3):
            board.perform_action(player.get_action(board))
            if not board.is_ended():
                board.perform_action(board.get_actions()[0])

        assert player.reused == 0
        assert player.rebuilt == 3

    def test_mcts_player_zero_iterations(self):
        """探索回数0でも着手を返す"""
        player = MCTSPlayer(num_iterations=0, seed=0)
        assert TicTacToeBoard().is_legal_action(player.get_action(TicTacToeBoard()))

    def test_mcts_player_reset(self):
        player = MCTSPlayer(num_iterations=20, seed=0)
        player.get_action(TicTacToeBoard())
        assert player.mcts is not None

        player.reset()
        assert player.mcts is None

    def test_human_player(self, monkeypatch, capsys):
        """不正な入力・非合法手は読み飛ばす"""
        inputs = iter(["zz", "a1", "b2"])
        monkeypatch.setattr("builtins.input", lambda prompt="": next(inputs))
        board = make_board([(0, 0)])

        assert HumanPlayer().get_action(board) == (1, 1)
        out = capsys.readouterr().out
        assert "入力エラー" in out
        assert "無効な着手" in out


class TestArena:
    """Arenaのテスト"""

    def test_play_game(self):
        arena = Arena(verbose=False)
        result = arena.play_game(RandomPlayer("A", seed=1), RandomPlayer("B", seed=2))

        assert isinstance(result, MatchResult)
        assert result.player1_name == "A"
        assert result.player2_name == "B"
        assert result.winner in (-1, 0, 1)
        assert 5 <= result.num_moves <= 9
        assert result.duration >= 0

    def test_play_game_verbose(self, capsys):
        Arena(verbose=True).play_game(RandomPlayer("A", seed=1), RandomPlayer("B", seed=2))
        out = capsys.readouterr().out

        assert "A (X) plays" in out
        assert "Moves:" in out

    def test_starting_player(self):
        """starting_player=-1 ならプレイヤー2がXを持つ"""
        first = GreedyPlayer("First", seed=0)
        moves = []

        class Recorder(RandomPlayer):
            def get_action(self, board):
                moves.append(board.next_player)
                return super().get_action(board)

        Arena(verbose=False).play_game(first, Recorder("Second", seed=0), starting_player=-1)
        assert moves[0] is Mark.X

    def test_play_matches(self):
        results = Arena(verbose=False).play_matches(
            RandomPlayer("A", seed=1), RandomPlayer("B", seed=2), num_games=6
        )
        assert len(results) == 6

    def test_match_result_str(self):
        assert str(MatchResult("A", "B", 1, 7, 0.5)).startswith("A wins")
        assert str(MatchResult("A", "B", -1, 6, 0.5)).startswith("B wins")
        assert str(MatchResult("A", "B", 0, 9, 0.5)).startswith("Draw")


class TestEvaluatePlayer:
    """evaluate_playerのテスト"""

    def test_rates(self):
        result = evaluate_player(
            RandomPlayer("A", seed=3), RandomPlayer("B", seed=4), num_games=10, verbose=False
        )

        total = result["win_rate"] + result["draw_rate"] + result["loss_rate"]
        assert total == pytest.approx(1.0)
        assert 5 <= result["avg_moves"] <= 9
        assert len(result["results"]) == 10

    def test_no_games(self):
        result = evaluate_player(RandomPlayer(), RandomPlayer(), num_games=0, verbose=False)

        assert result["win_rate"] == 0
        assert result["results"] == []

    def test_mcts_beats_random(self):
        """MCTSはランダムプレイヤーより多く勝つ"""
        result = evaluate_player(
            MCTSPlayer(num_iterations=200, seed=0),
            RandomPlayer(seed=0),
            num_games=10,
            verbose=False,
        )

        assert result["win_rate"] > result["loss_rate"]
