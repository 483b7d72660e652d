"""
三目並べ MCTS - CLIエントリポイント

対局・評価・ベンチマーク用のコマンドラインインターフェース
"""

import argparse
import time

import yaml

from src.game.board import Player, TicTacToeBoard
from src.game.notation import format_action, parse_action, render_board
from src.logger import setup_logging
from src.mcts.mcts import MCTS
from src.mcts.worker import SearchWorker


def load_config(config_path: str) -> dict:
    """
    YAML設定ファイルを読み込む

    Args:
        config_path: 設定ファイルのパス

    Returns:
        dict: 設定辞書（空ファイルなら空辞書）
    """
    with open(config_path, 'r', encoding='utf-8') as f:
        config = yaml.safe_load(f)
    return config or {}


def read_human_action(board: TicTacToeBoard):
    """
    標準入力から人間の着手を読む

    空行・不正な形式・非合法手は再入力させる
    """
    print("Action [e.g. a1]: ", end="", flush=True)

    while True:
        text = input().strip()

        if not text:
            print("> ", end="", flush=True)
            continue

        try:
            action = parse_action(text)
        except ValueError:
            print("Invalid action")
            print("> ", end="", flush=True)
            continue

        if not board.is_legal_action(action):
            print("Illegal action")
            print("> ", end="", flush=True)
            continue

        return action


def play_command(args):
    """
    対戦コマンド（人間 vs AI）

    AIは相手の思考中もバックグラウンドで探索を続ける

    Args:
        args: argparseの引数
    """
    config = load_config(args.config)
    game_config = config.get('game', {})
    worker_config = config.get('worker', {})

    human = Player.parse(args.human or game_config.get('human_player', 'X'))
    ai = human.opponent()
    first = Player.parse(args.first or game_config.get('first_player', 'X'))
    think_time = worker_config.get('think_time', 0.1)

    board = TicTacToeBoard(first_player=first)
    mcts = MCTS(ai, board, seed=config.get('mcts', {}).get('seed'))
    worker = SearchWorker(mcts, idle_interval=worker_config.get('idle_interval', 0.001)).start()

    ticket = 0
    try:
        while not board.is_ended():
            print(render_board(board))
            print(f"Turn: {board.next_player}")

            if board.next_player is human:
                action = read_human_action(board)
                worker.wait_until_explored(action)
            else:
                # 直前の着手を反映した探索結果が出てから読む
                worker.wait_for_commit(ticket)
                time.sleep(think_time)
                action = worker.get_action()
                print(f"AI action: {format_action(action)}")

            ticket = worker.commit(action)
            board.perform_action(action)
            print()
    finally:
        worker.stop()

    print(render_board(board))
    winner = board.get_winner()
    if winner is not None:
        print(f"Winner is Player {winner}")
    else:
        print("Game ended with a draw")


def eval_command(args):
    """
    評価コマンド

    MCTSPlayerをRandomPlayer・GreedyPlayerと対戦させる

    Args:
        args: argparseの引数
    """
    import json
    from datetime import datetime
    from pathlib import Path
    from src.eval.players import RandomPlayer, GreedyPlayer, MCTSPlayer
    from src.eval.arena import evaluate_player

    config = load_config(args.config)
    eval_config = config.get('eval', {})
    num_games = args.games or eval_config.get('games', 20)
    iterations = args.iterations or eval_config.get('iterations', 200)
    seed = config.get('mcts', {}).get('seed')

    print("=" * 70)
    print("MCTS Evaluation")
    print("=" * 70)
    print(f"Games per opponent: {num_games}")
    print(f"MCTS iterations per move: {iterations}")

    ai_player = MCTSPlayer(num_iterations=iterations, seed=seed)

    opponents = [
        RandomPlayer(name="Random", seed=seed),
        GreedyPlayer(name="Greedy", seed=seed),
    ]

    results_summary = {}

    for opponent in opponents:
        print(f"\n{'=' * 70}")
        print(f"Evaluating against {opponent.name}")
        print('=' * 70)

        eval_result = evaluate_player(
            player=ai_player,
            opponent=opponent,
            num_games=num_games,
            verbose=args.verbose,
        )

        results_summary[opponent.name] = {
            "win_rate": eval_result["win_rate"],
            "draw_rate": eval_result["draw_rate"],
            "loss_rate": eval_result["loss_rate"],
            "avg_moves": eval_result["avg_moves"],
        }

        print(f"\nResult vs {opponent.name}:")
        print(f"  Win Rate:  {eval_result['win_rate'] * 100:.1f}%")
        print(f"  Draw Rate: {eval_result['draw_rate'] * 100:.1f}%")
        print(f"  Loss Rate: {eval_result['loss_rate'] * 100:.1f}%")
        print(f"  Avg Moves: {eval_result['avg_moves']:.1f}")

    print(f"\n{'=' * 70}")
    print("Evaluation Summary")
    print('=' * 70)
    for opponent_name, result in results_summary.items():
        print(f"{opponent_name:15s}: {result['win_rate']*100:5.1f}% win, "
              f"{result['draw_rate']*100:5.1f}% draw, "
              f"{result['loss_rate']*100:5.1f}% loss")
    print(f"Tree reuse: {ai_player.reused} reused, {ai_player.rebuilt} rebuilt")

    if args.save_results:
        output_dir = Path("data/eval")
        output_dir.mkdir(parents=True, exist_ok=True)

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        result_file = output_dir / f"eval_{timestamp}.json"

        eval_data = {
            "timestamp": datetime.now().isoformat(),
            "mcts_iterations": iterations,
            "games_per_opponent": num_games,
            "results": results_summary,
        }

        with open(result_file, "w") as f:
            json.dump(eval_data, f, indent=2)

        print(f"\nResults saved to: {result_file}")

    print("\n" + "=" * 70)


def bench_command(args):
    """
    ベンチマークコマンド

    - 空の盤面から探索済みになるまでの探索速度 (iterations/sec)
    - ランダム対局の速度 (games/sec)
    """
    print("=== MCTS ベンチマーク ===")

    mcts = MCTS(Player.X, TicTacToeBoard(), seed=0)
    start = time.perf_counter()
    iterations = mcts.search(args.iterations)
    elapsed = time.perf_counter() - start

    print(f"探索回数: {iterations:,} (finished={mcts.finished})")
    print(f"ルート訪問回数: {mcts.root.visit_count:,}")
    print(f"Iterations/sec: {iterations / elapsed:,.0f}" if elapsed > 0 else "Iterations/sec: -")
    print(f"最善手: {format_action(mcts.get_best_action())}")

    from src.eval.players import RandomPlayer

    player = RandomPlayer(seed=0)
    start = time.perf_counter()
    for _ in range(args.games):
        board = TicTacToeBoard()
        while not board.is_ended():
            board.perform_action(player.get_action(board))
    elapsed = time.perf_counter() - start

    print(f"\n対局数: {args.games:,}")
    print(f"Games/sec: {args.games / elapsed:,.0f}" if elapsed > 0 else "Games/sec: -")


def main(argv=None):
    """メインエントリポイント"""
    parser = argparse.ArgumentParser(description="Tic-Tac-Toe MCTS - CLI")
    parser.add_argument(
        '--config',
        type=str,
        default='configs/default.yaml',
        help='Path to config file (default: configs/default.yaml)'
    )

    subparsers = parser.add_subparsers(dest='command', help='Commands')

    # Play コマンド
    play_parser = subparsers.add_parser('play', help='Play against the AI')
    play_parser.add_argument('--human', type=str, default=None, help='Your mark: X or O')
    play_parser.add_argument('--first', type=str, default=None, help='First player: X or O')
    play_parser.set_defaults(func=play_command)

    # Eval コマンド
    eval_parser = subparsers.add_parser('eval', help='Evaluate the MCTS player')
    eval_parser.add_argument(
        '--games',
        type=int,
        default=None,
        help='Number of games per opponent (default: from config)'
    )
    eval_parser.add_argument(
        '--iterations',
        type=int,
        default=None,
        help='MCTS iterations per move (default: from config)'
    )
    eval_parser.add_argument(
        '--verbose',
        action='store_true',
        help='Show detailed game progress'
    )
    eval_parser.add_argument(
        '--save-results',
        action='store_true',
        help='Save evaluation results to JSON file'
    )
    eval_parser.set_defaults(func=eval_command)

    # Bench コマンド
    bench_parser = subparsers.add_parser('bench', help='Benchmark search speed')
    bench_parser.add_argument('--iterations', type=int, default=50000)
    bench_parser.add_argument('--games', type=int, default=2000)
    bench_parser.set_defaults(func=bench_command)

    args = parser.parse_args(argv)

    if hasattr(args, 'func'):
        log_config = load_config(args.config).get('logging', {})
        setup_logging(log_config.get('level', 'WARNING'), log_config.get('file'))
        args.func(args)
    else:
        parser.print_help()


if __name__ == "__main__":
    main()
