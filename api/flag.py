"""
Flag API Endpoints

旗子只有兩種狀態：中立（flagHolder = null）或被某位玩家持有
- obtain：任何狀態 -> 被呼叫者持有（可以直接搶）
- capture：只有持旗者本人可以得分，得分後回到中立
"""
from fastapi import APIRouter, Depends, HTTPException
import logging

from store import get_match
from models import Match
from schemas import PlayerRef, ObtainFlagResponse, CaptureFlagResponse
from core.match_manager import MatchManager
from core.exceptions import BadState, InvalidStateTransition, PlayerNotFound

router = APIRouter(prefix="/api/flag", tags=["flag"])
logger = logging.getLogger(__name__)


@router.post("/obtain", response_model=ObtainFlagResponse)
def obtain_flag(ref: PlayerRef, match: Match = Depends(get_match)):
    """撿起或搶走旗子"""
    try:
        holder, previous = MatchManager.obtain_flag(match, ref.player_id)
        return ObtainFlagResponse(
            obtained_by=holder,
            previous_holder=previous,
            flag_holder=holder
        )

    except PlayerNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        logger.error(f"Failed to obtain flag: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Internal error")


@router.post("/capture", response_model=CaptureFlagResponse)
def capture_flag(ref: PlayerRef, match: Match = Depends(get_match)):
    """
    得分

    異常對應：
        404: 玩家不存在
        400: 玩家隊伍無效 / 玩家沒有持旗
    """
    try:
        team, flags_captured, flag_holder = MatchManager.capture_flag(match, ref.player_id)

        logger.info(f"Flag captured by {ref.player_id}, {team.value} now has {flags_captured}")
        return CaptureFlagResponse(
            team=team,
            flags_captured=flags_captured,
            flag_holder=flag_holder
        )

    except PlayerNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except (BadState, InvalidStateTransition) as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Failed to capture flag: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Internal error")
