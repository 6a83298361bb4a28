"""
Player API Endpoints

職責：
1. 玩家加入 / 離開
2. 查詢玩家列表（含「我是誰」）
3. 修改數值、攻擊、治療、換隊
"""
from fastapi import APIRouter, Depends, HTTPException, Request
import logging

from store import get_match
from models import Match
from schemas import (
    PlayerJoin,
    PlayerUpdate,
    PlayerRef,
    AttackRequest,
    HealRequest,
    ChangeTeamRequest,
    JoinResponse,
    PlayersResponse,
    PlayerResponse,
    MessageResponse,
    AttackResponse,
    HealResponse,
)
from core.match_manager import MatchManager
from core.exceptions import (
    Conflict,
    InvalidInput,
    InvalidStateTransition,
    PlayerNotFound,
)
from services.network_service import get_client_ip

router = APIRouter(prefix="/api", tags=["players"])
logger = logging.getLogger(__name__)


@router.get("/players", response_model=PlayersResponse)
def list_players(request: Request, match: Match = Depends(get_match)):
    """
    取得所有玩家、兩隊分數與持旗者

    myPlayerId：與呼叫者 IP 相同的玩家，讓前端知道「哪一個是我」
    """
    try:
        players, teams, flag_holder, my_player_id = MatchManager.list_players(
            match, get_client_ip(request)
        )
        return PlayersResponse(
            players=players,
            teams=teams,
            flag_holder=flag_holder,
            my_player_id=my_player_id
        )

    except Exception as e:
        logger.error(f"Failed to list players: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Internal error")


@router.post("/player/join", response_model=JoinResponse)
def join(player_data: PlayerJoin, request: Request, match: Match = Depends(get_match)):
    """
    加入遊戲

    前置條件：
    - code 是 0-99 的整數，且沒有被其他玩家使用
    - 同一個 IP 沒有其他活躍玩家

    流程：
    1. 取得呼叫者 IP
    2. 建立玩家（自動分隊）
    3. 返回 playerId 與玩家資訊
    """
    try:
        ip = get_client_ip(request)
        player = MatchManager.join(match, player_data.code, ip)

        logger.info(f"Player {player.id} ({player.name}) joined from {ip}")
        return JoinResponse(player_id=player.id, player=player)

    except InvalidInput as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Conflict as e:
        raise HTTPException(status_code=409, detail=str(e))
    except Exception as e:
        logger.error(f"Failed to join: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Internal error")


@router.post("/player/update", response_model=PlayerResponse)
def update_player(update: PlayerUpdate, match: Match = Depends(get_match)):
    """修改玩家 kills / health（沒給的欄位不變）"""
    try:
        player = MatchManager.update_stats(
            match, update.player_id, kills=update.kills, health=update.health
        )
        return PlayerResponse(player=player)

    except PlayerNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        logger.error(f"Failed to update player: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Internal error")


def _remove(match: Match, player_id: str) -> MessageResponse:
    try:
        MatchManager.remove_player(match, player_id)
        return MessageResponse(message="Player removed")

    except PlayerNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        logger.error(f"Failed to remove player: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Internal error")


@router.delete("/player/{player_id}", response_model=MessageResponse)
def remove_player(player_id: str, match: Match = Depends(get_match)):
    """移除玩家；若該玩家持旗，旗子回到中立"""
    return _remove(match, player_id)


@router.post("/player/leave", response_model=MessageResponse)
def leave(ref: PlayerRef, match: Match = Depends(get_match)):
    """移除玩家（舊版 endpoint，行為與 DELETE /api/player/{id} 相同）"""
    return _remove(match, ref.player_id)


@router.post("/player/attack", response_model=AttackResponse)
def attack(attack_data: AttackRequest, match: Match = Depends(get_match)):
    """
    攻擊

    - damage 預設 10，負數視為 0
    - health 歸零時 attacker 得到一次擊殺，target 掉旗並立即重生
    """
    try:
        attacker, target, killed, flag_holder = MatchManager.attack(
            match,
            attack_data.attacker_id,
            attack_data.target_id,
            damage=attack_data.damage
        )
        return AttackResponse(
            attacker=attacker,
            target=target,
            killed=killed,
            flag_holder=flag_holder
        )

    except PlayerNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except InvalidStateTransition as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Failed to attack: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Internal error")


@router.post("/player/heal", response_model=HealResponse)
def heal(heal_data: HealRequest, match: Match = Depends(get_match)):
    """治療（amount 預設 20，health 上限 100；沒有 healerId 時記為 System）"""
    try:
        target = MatchManager.heal(
            match,
            heal_data.target_id,
            healer_id=heal_data.healer_id,
            amount=heal_data.amount
        )
        return HealResponse(target=target)

    except PlayerNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        logger.error(f"Failed to heal: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Internal error")


@router.post("/player/changeTeam", response_model=PlayerResponse)
def change_team(change: ChangeTeamRequest, match: Match = Depends(get_match)):
    """手動換隊（不做平衡）"""
    try:
        player = MatchManager.change_team(match, change.player_id, change.team)
        return PlayerResponse(player=player)

    except PlayerNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except InvalidInput as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Failed to change team: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Internal error")
