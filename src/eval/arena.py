"""
対戦管理システム (Arena)

2つのプレイヤーを対戦させ、結果を記録する
"""

import time
from dataclasses import dataclass
from typing import List

from src.game.board import Player as Mark
from src.game.board import TicTacToeBoard
from src.game.notation import format_action, render_board
from .players import Player


@dataclass
class MatchResult:
    """
    対戦結果

    Attributes:
        player1_name: プレイヤー1の名前
        player2_name: プレイヤー2の名前
        winner: 勝者 (1: player1, -1: player2, 0: 引き分け)
        num_moves: 総手数
        duration: 対戦時間（秒）
    """
    player1_name: str
    player2_name: str
    winner: int
    num_moves: int
    duration: float

    def __str__(self) -> str:
        """結果の文字列表現"""
        if self.winner == 1:
            result = f"{self.player1_name} wins"
        elif self.winner == -1:
            result = f"{self.player2_name} wins"
        else:
            result = "Draw"

        return (
            f"{result} | "
            f"{self.player1_name} vs {self.player2_name} | "
            f"Moves: {self.num_moves} | "
            f"Time: {self.duration:.2f}s"
        )


class Arena:
    """
    対戦管理システム

    2つのプレイヤーを対戦させ、結果を記録する
    """

    def __init__(self, verbose: bool = True):
        """
        Args:
            verbose: 詳細な出力を行うか
        """
        self.verbose = verbose

    def play_game(
        self,
        player1: Player,
        player2: Player,
        starting_player: int = 1,
    ) -> MatchResult:
        """
        1ゲームを実行

        先手がXを持つ

        Args:
            player1: プレイヤー1
            player2: プレイヤー2
            starting_player: 先手 (1: player1, -1: player2)

        Returns:
            MatchResult: 対戦結果
        """
        board = TicTacToeBoard(first_player=Mark.X)

        player1.reset()
        player2.reset()

        if starting_player == 1:
            marks = {Mark.X: player1, Mark.O: player2}
        else:
            marks = {Mark.X: player2, Mark.O: player1}

        start_time = time.time()

        while not board.is_ended():
            current_player = marks[board.next_player]
            action = current_player.get_action(board)

            if self.verbose:
                print(f"{current_player.name} ({board.next_player}) plays: {format_action(action)}")

            board.perform_action(action)

        duration = time.time() - start_time

        if self.verbose:
            print(render_board(board))

        # プレイヤー1視点での勝者判定
        winner_mark = board.get_winner()
        if winner_mark is None:
            winner = 0
        elif marks[winner_mark] is player1:
            winner = 1
        else:
            winner = -1

        result = MatchResult(
            player1_name=player1.name,
            player2_name=player2.name,
            winner=winner,
            num_moves=board.move_count,
            duration=duration,
        )

        if self.verbose:
            print(f"\n{result}\n")

        return result

    def play_matches(
        self,
        player1: Player,
        player2: Player,
        num_games: int = 10,
        alternate_colors: bool = True,
    ) -> List[MatchResult]:
        """
        複数ゲームを実行

        Args:
            player1: プレイヤー1
            player2: プレイヤー2
            num_games: ゲーム数
            alternate_colors: 先後を交代するか

        Returns:
            List[MatchResult]: 対戦結果のリスト
        """
        results = []

        for game_idx in range(num_games):
            if self.verbose:
                print(f"=== Game {game_idx + 1}/{num_games} ===")

            if alternate_colors:
                starting_player = 1 if (game_idx % 2 == 0) else -1
            else:
                starting_player = 1

            result = self.play_game(player1, player2, starting_player)
            results.append(result)

        if self.verbose:
            self._print_summary(results, player1.name, player2.name)

        return results

    def _print_summary(
        self,
        results: List[MatchResult],
        player1_name: str,
        player2_name: str,
    ):
        """対戦結果のサマリーを表示"""
        print("\n" + "=" * 70)
        print("Match Summary")
        print("=" * 70)

        player1_wins = sum(1 for r in results if r.winner == 1)
        player2_wins = sum(1 for r in results if r.winner == -1)
        draws = sum(1 for r in results if r.winner == 0)

        total_games = len(results)
        player1_win_rate = player1_wins / total_games * 100 if total_games > 0 else 0
        player2_win_rate = player2_wins / total_games * 100 if total_games > 0 else 0
        avg_duration = sum(r.duration for r in results) / total_games if total_games > 0 else 0

        print(f"\nTotal Games: {total_games}")
        print(f"{player1_name}: {player1_wins} wins ({player1_win_rate:.1f}%)")
        print(f"{player2_name}: {player2_wins} wins ({player2_win_rate:.1f}%)")
        print(f"Draws: {draws}")
        print(f"\nAverage Duration: {avg_duration:.2f}s")
        print("=" * 70 + "\n")


def evaluate_player(
    player: Player,
    opponent: Player,
    num_games: int = 10,
    verbose: bool = True,
) -> dict:
    """
    プレイヤーを評価

    Args:
        player: 評価対象のプレイヤー
        opponent: 対戦相手
        num_games: ゲーム数
        verbose: 詳細な出力

    Returns:
        dict: 評価結果
            - win_rate: 勝率
            - draw_rate: 引き分け率
            - loss_rate: 負け率
            - avg_moves: 平均手数
            - results: 対戦結果リスト
    """
    arena = Arena(verbose=verbose)
    results = arena.play_matches(player, opponent, num_games=num_games)

    if num_games <= 0:
        return {"win_rate": 0, "draw_rate": 0, "loss_rate": 0, "avg_moves": 0, "results": results}

    return {
        "win_rate": sum(1 for r in results if r.winner == 1) / num_games,
        "draw_rate": sum(1 for r in results if r.winner == 0) / num_games,
        "loss_rate": sum(1 for r in results if r.winner == -1) / num_games,
        "avg_moves": sum(r.num_moves for r in results) / num_games,
        "results": results,
    }
