"""
API 請求 / 回應格式

JSON 一律 camelCase（playerId、flagHolder ...），Python 端 snake_case
"""
from typing import Annotated, Any, Dict, List, Optional

from pydantic import BeforeValidator, Field, field_validator

from models import CamelModel, Event, Player, Team, TeamKey
from services.stats_service import as_number


# 不能用的數值一律當作沒給，由 MatchManager 套用預設值
UsableNumber = Annotated[Optional[int], BeforeValidator(as_number)]


# ============ Requests ============

class PlayerJoin(CamelModel):
    code: int = Field(..., ge=0, le=99, strict=True)

    @field_validator("code", mode="before")
    @classmethod
    def integral_float(cls, v):
        # JSON 的 7.0 視為 7，7.5 仍然不合法
        if isinstance(v, float) and v.is_integer():
            return int(v)
        return v


class PlayerUpdate(CamelModel):
    player_id: Any = None
    kills: UsableNumber = None
    health: UsableNumber = None


class PlayerRef(CamelModel):
    player_id: Any = None


class AttackRequest(CamelModel):
    attacker_id: Any = None
    target_id: Any = None
    damage: UsableNumber = None


class HealRequest(CamelModel):
    healer_id: Any = None
    target_id: Any = None
    amount: UsableNumber = None


class ChangeTeamRequest(CamelModel):
    player_id: Any = None
    team: Any = None


# ============ Responses ============

class JoinResponse(CamelModel):
    player_id: str
    player: Player


class PlayersResponse(CamelModel):
    players: List[Player]
    teams: Dict[TeamKey, Team]
    flag_holder: Optional[str] = None
    my_player_id: Optional[str] = None


class PlayerResponse(CamelModel):
    player: Player


class MessageResponse(CamelModel):
    message: str


class ObtainFlagResponse(CamelModel):
    obtained_by: str
    previous_holder: Optional[str] = None
    flag_holder: Optional[str] = None


class CaptureFlagResponse(CamelModel):
    team: TeamKey
    flags_captured: int
    flag_holder: Optional[str] = None


class AttackResponse(CamelModel):
    attacker: Player
    target: Player
    killed: bool
    flag_holder: Optional[str] = None


class HealResponse(CamelModel):
    target: Player


class EventsResponse(CamelModel):
    events: List[Event]


class RestartResponse(CamelModel):
    message: str
    players: List[Player]
    teams: Dict[TeamKey, Team]
    flag_holder: Optional[str] = None


class StatusResponse(CamelModel):
    ok: bool
    hostname: str
