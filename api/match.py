"""
Match API Endpoints - 短輪詢版

職責：
1. 事件 log（前端定時輪詢）
2. 整場重置
"""
from fastapi import APIRouter, Depends, HTTPException
import logging

from store import get_match
from models import Match
from schemas import EventsResponse, RestartResponse
from core.match_manager import MatchManager

router = APIRouter(prefix="/api", tags=["match"])
logger = logging.getLogger(__name__)


@router.get("/events", response_model=EventsResponse)
def list_events(match: Match = Depends(get_match)):
    """事件 log，舊的在前（最多保留 2000 筆）"""
    try:
        return EventsResponse(events=MatchManager.list_events(match))

    except Exception as e:
        logger.error(f"Failed to list events: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Internal error")


@router.post("/restart", response_model=RestartResponse)
def restart(match: Match = Depends(get_match)):
    """
    重置整場比賽

    效果：
    - 清空所有玩家
    - 兩隊得分歸零、旗子回到中立
    - 清空事件 log，只留下一筆「Match restarted」
    - 玩家顯示編號從 4 重新開始
    """
    try:
        teams = MatchManager.restart(match)

        logger.info("Match restarted")
        return RestartResponse(
            message="Match restarted successfully",
            players=[],
            teams=teams,
            flag_holder=None
        )

    except Exception as e:
        logger.error(f"Failed to restart match: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Internal error")
