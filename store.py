from functools import lru_cache, wraps
import logging

from pydantic_settings import BaseSettings, SettingsConfigDict

from models import Match, DEFAULT_EVENT_LOG_LIMIT
from core.exceptions import CaptureTheFlagException
from core.locks import with_match_lock

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    host: str = "0.0.0.0"
    port: int = 3000
    event_log_limit: int = DEFAULT_EVENT_LOG_LIMIT
    # 逗號分隔
    cors_origins: str = "*"
    log_level: str = "INFO"

    @property
    def cors_origins_list(self) -> list[str]:
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


@lru_cache()
def get_settings():
    return Settings()


settings = get_settings()


def create_match(settings: Settings) -> Match:
    return Match(event_log_limit=settings.event_log_limit)


# 整個 process 只有一場 Match，restart 是就地重置而不是換新物件
match = create_match(settings)


def get_match() -> Match:
    """
    FastAPI dependency：提供目前的 Match

    測試時用 app.dependency_overrides[get_match] 換成全新的 Match
    """
    return match


def atomic(func):
    """
    Atomic decorator：確保 Match 操作互不交錯

    使用方式：
        @atomic
        def some_operation(match: Match, ...):
            # 整個函式都在 match lock 內執行
            player = match.get_player(...)

    如果函式內發生異常：
        - 記錄 log（業務異常用 warning，其他用 error + traceback）
        - 異常會被重新拋出（讓上層處理）

    注意：
        - 第一個參數必須是 match: Match
        - 所有驗證都要在修改狀態之前完成，這裡不做 rollback
    """
    @wraps(func)
    def wrapper(*args, **kwargs):
        # 找出 match（可能在 args 或 kwargs）
        target = None
        if args and isinstance(args[0], Match):
            target = args[0]
        elif 'match' in kwargs:
            target = kwargs['match']

        if target is None:
            raise ValueError(
                f"@atomic requires 'match: Match' as first argument, "
                f"but got args={args}, kwargs={kwargs}"
            )

        with with_match_lock(target):
            try:
                return func(*args, **kwargs)
            except CaptureTheFlagException as e:
                logger.warning(f"{func.__name__} rejected: {e}")
                raise
            except Exception as e:
                logger.error(f"Operation failed in {func.__name__}: {e}", exc_info=True)
                raise

    return wrapper
