"""
MCTSの例外定義
"""


class MCTSError(Exception):
    """MCTS関連の例外の基底クラス"""


class SearchInvariantError(MCTSError):
    """
    探索木の不変条件が破れた

    選択・展開・逆伝播の実装不備を示すため、回復せずにそのまま送出する
    """


class UnexploredActionError(MCTSError, LookupError):
    """ルートの子ノードに存在しない着手を確定しようとした"""


class SearchWorkerError(MCTSError):
    """バックグラウンド探索スレッドが例外で停止した"""
