"""
並發控制工具

FastAPI 會把同步 endpoint 丟到 thread pool 執行，所以多個請求可能同時碰到同一場 Match。
這裡提供整個 Match 聚合的粗粒度互斥鎖（Pessimistic Locking），
吞吐量不是目標，保證「一次只做一個操作」才是。
"""
from contextlib import contextmanager
from typing import Iterator

from models import Match


@contextmanager
def with_match_lock(match: Match) -> Iterator[Match]:
    """
    鎖定整個 Match

    使用場景：
    - 任何讀取或修改 Match 狀態的操作
    - 需要確保整個操作期間不被其他請求插隊

    範例：
        with with_match_lock(match) as m:
            player = m.get_player(player_id)
            player.health = 100

    注意：
        - 使用 RLock，同一個 thread 可以重入（操作內呼叫另一個操作不會 deadlock）
        - 鎖的範圍是整個聚合，不做細粒度鎖定
    """
    with match.lock:
        yield match
