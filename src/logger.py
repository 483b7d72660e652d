"""
ロギング設定
"""

import logging
from pathlib import Path
from typing import Optional

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def setup_logging(level: str = "INFO", log_file: Optional[str] = None) -> logging.Logger:
    """
    ルートロガーにコンソール（と任意でファイル）ハンドラを設定

    Args:
        level: ログレベル名 (DEBUG, INFO, WARNING, ...)
        log_file: ログファイルのパス（Noneならファイル出力しない）

    Returns:
        logging.Logger: 設定したルートロガー
    """
    formatter = logging.Formatter(LOG_FORMAT)
    root = logging.getLogger()
    root.setLevel(level.upper())

    # 二重登録を避けるため既存ハンドラを外す
    for handler in root.handlers[:]:
        root.removeHandler(handler)
        handler.close()

    console = logging.StreamHandler()
    console.setFormatter(formatter)
    root.addHandler(console)

    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)

    return root
