"""
事件服務：建立事件紀錄並寫入 Match 的事件 log

事件 log 是 append-only，超過上限時 deque 會自動從最舊的開始淘汰（FIFO）
"""
from datetime import datetime, timezone
import logging

from models import Event, Match

logger = logging.getLogger(__name__)

DISPLAY_TS_FORMAT = "%Y-%m-%d %H:%M:%S"


def build_event(message: str, now: datetime = None) -> Event:
    """
    建立事件

    參數：
        message: 事件文字
        now: 事件時間（UTC），預設為現在

    返回：
        Event，ts 為 UTC 時間，display_ts 為本地時間字串（YYYY-MM-DD HH:MM:SS）
    """
    if now is None:
        now = datetime.now(timezone.utc)
    display_ts = now.astimezone().strftime(DISPLAY_TS_FORMAT)
    return Event(ts=now, message=message, display_ts=display_ts)


def log_event(match: Match, message: str) -> Event:
    """寫入事件 log，同時輸出到 logger"""
    event = build_event(message)
    match.events.append(event)
    logger.info(f"[EVENT] {event.display_ts} - {message}")
    return event
