"""
領域模型：Player、Team、Event 與 Match 聚合根

所有狀態都放在記憶體中，一個 process 只有一場 Match（由 store.get_match 提供），
但測試可以自由建立多個獨立的 Match。
"""
from collections import deque
from datetime import datetime
from enum import Enum
from threading import RLock
from typing import Deque, Dict, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

INITIAL_PLAYER_NUMBER = 4
DEFAULT_EVENT_LOG_LIMIT = 2000
MAX_HEALTH = 100


class CamelModel(BaseModel):
    """JSON 使用 camelCase，Python 端使用 snake_case"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class TeamKey(str, Enum):
    BLUE = "blue"
    RED = "red"


class Player(CamelModel):
    id: str
    number: int
    code: int
    name: str
    ip: str
    team: TeamKey
    kills: int = 0
    health: int = MAX_HEALTH
    joined_at: datetime


class Team(CamelModel):
    name: str
    color: str
    flags_captured: int = 0


class Event(CamelModel):
    model_config = ConfigDict(frozen=True)

    ts: datetime
    message: str
    display_ts: str


def default_teams() -> Dict[TeamKey, Team]:
    return {
        TeamKey.BLUE: Team(name="Blue", color="#0066ff"),
        TeamKey.RED: Team(name="Red", color="#ff3333"),
    }


class Match:
    """
    Match 聚合根

    欄位：
        players: 以 player.id 為主鍵
        teams: 固定兩隊（blue / red）
        flag_holder: 持旗者的 player.id，沒人持旗為 None
        events: 事件紀錄，超過上限時從最舊的開始淘汰
        next_player_number: 下一位玩家的顯示編號（從 4 開始）
        lock: 整個聚合的互斥鎖（見 core.locks）

    不變量：
        - code 和 ip 在活躍玩家中唯一（由 _by_code / _by_ip 索引維護）
        - flag_holder 為 None 或指向活躍玩家
    """

    def __init__(self, event_log_limit: int = DEFAULT_EVENT_LOG_LIMIT):
        self.players: Dict[str, Player] = {}
        self._by_code: Dict[int, str] = {}
        self._by_ip: Dict[str, str] = {}
        self.teams: Dict[TeamKey, Team] = default_teams()
        self.flag_holder: Optional[str] = None
        self.events: Deque[Event] = deque(maxlen=event_log_limit)
        self.next_player_number = INITIAL_PLAYER_NUMBER
        self.lock = RLock()

    # ============ 索引維護 ============

    def add_player(self, player: Player) -> None:
        self.players[player.id] = player
        self._by_code[player.code] = player.id
        self._by_ip[player.ip] = player.id

    def discard_player(self, player_id: str) -> Optional[Player]:
        """移除玩家並同步索引；持旗者被移除時旗子回到中立"""
        player = self.players.pop(player_id, None)
        if player is None:
            return None
        self._by_code.pop(player.code, None)
        self._by_ip.pop(player.ip, None)
        if self.flag_holder == player_id:
            self.flag_holder = None
        return player

    def get_player(self, player_id) -> Optional[Player]:
        # 請求帶來的 id 可能不是字串
        if not isinstance(player_id, str) or not player_id:
            return None
        return self.players.get(player_id)

    def player_by_code(self, code: int) -> Optional[Player]:
        return self.get_player(self._by_code.get(code))

    def player_by_ip(self, ip: str) -> Optional[Player]:
        return self.get_player(self._by_ip.get(ip))

    def count_team(self, team: TeamKey) -> int:
        return sum(1 for p in self.players.values() if p.team == team)

    def reset(self) -> None:
        """就地重置（不換掉物件，外部持有的參照仍然有效）"""
        self.players.clear()
        self._by_code.clear()
        self._by_ip.clear()
        for team in self.teams.values():
            team.flags_captured = 0
        self.flag_holder = None
        self.events.clear()
        self.next_player_number = INITIAL_PLAYER_NUMBER
