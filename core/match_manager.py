"""
Match Manager：管理 Match 內所有狀態轉換

職責：
1. 玩家加入 / 離開 / 換隊 / 修改數值
2. 旗子：拿旗（含搶旗）、得分
3. 戰鬥：攻擊（擊殺 + 重生）、治療
4. 事件 log 與整場重置

原則：
- 所有操作經過 @atomic，一次只做一個操作
- 先驗證再修改：驗證失敗時狀態完全不變
- 返回的是快照（copy），避免 API 層在鎖外讀到正在修改的物件
"""
from datetime import datetime, timezone
import logging
from typing import Dict, List, Optional, Tuple

from models import Event, Match, Player, Team, TeamKey, MAX_HEALTH
from core.exceptions import (
    AddressInUse,
    CodeInUse,
    FlagNotHeld,
    InvalidPlayerCode,
    InvalidTeam,
    InvalidTeamReference,
    PlayerNotFound,
    SelfAttack,
)
from services.event_service import log_event
from services.stats_service import as_number, clamp
from services.naming_service import (
    describe_player,
    generate_display_name,
    generate_fallback_player_id,
    generate_player_id,
)
from services.team_service import assign_team, parse_team_key
from store import atomic

logger = logging.getLogger(__name__)

MIN_CODE = 0
MAX_CODE = 99
DEFAULT_DAMAGE = 10
DEFAULT_HEAL_AMOUNT = 20


class MatchManager:
    """Match 狀態轉換管理器"""

    @staticmethod
    def _require_player(match: Match, player_id: Optional[str], role: str = "Player") -> Player:
        player = match.get_player(player_id)
        if player is None:
            raise PlayerNotFound(player_id, role)
        return player

    @staticmethod
    @atomic
    def join(match: Match, code, ip: str) -> Player:
        """
        玩家加入

        流程：
        1. 驗證代碼（0-99 整數）
        2. 檢查代碼與 IP 唯一性
        3. 分配隊伍（人少的隊伍優先，平手給 blue）
        4. 建立 Player、記錄事件

        參數：
            match: Match
            code: 玩家選的代碼
            ip: 來源 IP（每個 IP 只能有一位活躍玩家）

        返回：
            新建立的 Player

        異常：
            InvalidPlayerCode: 代碼不是 0-99 的整數
            CodeInUse: 代碼已被使用
            AddressInUse: 同一個 IP 已有玩家
        """
        # 1. 驗證代碼
        if isinstance(code, bool) or not isinstance(code, int) or not MIN_CODE <= code <= MAX_CODE:
            raise InvalidPlayerCode(code)

        # 2. 唯一性
        if match.player_by_code(code) is not None:
            raise CodeInUse(code)
        if match.player_by_ip(ip) is not None:
            raise AddressInUse(ip)

        # 3. 分配隊伍
        team = assign_team(match)

        # 4. 建立玩家（ID 碰撞機率極低，但仍會檢查唯一性）
        player_id = generate_player_id(ip)
        while player_id in match.players:
            player_id = generate_fallback_player_id(ip)
            logger.warning(f"Player id collision detected, regenerating: {player_id}")

        player = Player(
            id=player_id,
            number=match.next_player_number,
            code=code,
            name=generate_display_name(code),
            ip=ip,
            team=team,
            kills=0,
            health=MAX_HEALTH,
            joined_at=datetime.now(timezone.utc),
        )
        match.next_player_number += 1
        match.add_player(player)

        logger.info(f"Player {player.id} joined as #{player.number} on {team.value}")
        log_event(
            match,
            f"Join: {describe_player(player)} joined on {team.value} from {ip}"
        )
        return player.model_copy()

    @staticmethod
    @atomic
    def list_players(
        match: Match, caller_ip: Optional[str] = None
    ) -> Tuple[List[Player], Dict[TeamKey, Team], Optional[str], Optional[str]]:
        """
        取得所有玩家、兩隊分數、持旗者，以及呼叫者自己的 player id

        返回：
            (players, teams, flag_holder, my_player_id) tuple
        """
        players = [p.model_copy() for p in match.players.values()]
        teams = {key: team.model_copy() for key, team in match.teams.items()}
        me = match.player_by_ip(caller_ip) if caller_ip else None
        return players, teams, match.flag_holder, me.id if me else None

    @staticmethod
    @atomic
    def update_stats(match: Match, player_id: str, kills=None, health=None) -> Player:
        """
        直接修改玩家數值

        - kills 最小為 0
        - health 限制在 0-100
        - 沒給（或不是數字）的欄位不變
        - health 被設成 0 時持旗者掉旗（不重生，沒有擊殺者）

        異常：
            PlayerNotFound: 玩家不存在
        """
        player = MatchManager._require_player(match, player_id)

        new_kills = as_number(kills)
        new_health = as_number(health)
        if new_kills is not None:
            player.kills = clamp(new_kills, 0)
        if new_health is not None:
            player.health = clamp(new_health, 0, MAX_HEALTH)
            if player.health == 0 and match.flag_holder == player.id:
                match.flag_holder = None

        return player.model_copy()

    @staticmethod
    @atomic
    def remove_player(match: Match, player_id: str) -> Player:
        """
        移除玩家；若該玩家持旗，旗子回到中立

        異常：
            PlayerNotFound: 玩家不存在
        """
        MatchManager._require_player(match, player_id)
        player = match.discard_player(player_id)

        log_event(match, f"Leave: {describe_player(player)} removed from the game")
        return player

    @staticmethod
    @atomic
    def obtain_flag(match: Match, player_id: str) -> Tuple[str, Optional[str]]:
        """
        拿旗（撿起中立的旗子，或直接從別人手上搶走）

        不檢查目前持旗者，任何狀態都轉成 Held(player_id)

        返回：
            (holder_id, previous_holder_id) tuple

        異常：
            PlayerNotFound: 玩家不存在
        """
        player = MatchManager._require_player(match, player_id)

        previous_id = match.flag_holder
        previous = match.get_player(previous_id)
        match.flag_holder = player.id

        previous_label = describe_player(previous) if previous else "none"
        log_event(
            match,
            f"Obtain: {describe_player(player)} obtained the flag (previous: {previous_label})"
        )
        return player.id, previous_id

    @staticmethod
    @atomic
    def capture_flag(match: Match, player_id: str) -> Tuple[TeamKey, int, Optional[str]]:
        """
        得分：持旗者把旗子送回，隊伍分數 +1，旗子回到中立

        前置條件：
        1. 玩家存在
        2. 玩家的隊伍有效
        3. 玩家目前持旗

        返回：
            (team, flags_captured, flag_holder) tuple，flag_holder 一定是 None

        異常：
            PlayerNotFound: 玩家不存在
            InvalidTeamReference: 玩家的隊伍參照損壞
            FlagNotHeld: 玩家沒有持旗
        """
        player = MatchManager._require_player(match, player_id)

        team = match.teams.get(player.team)
        if team is None:
            raise InvalidTeamReference(player.id, player.team)

        if match.flag_holder != player.id:
            raise FlagNotHeld(player.id)

        team.flags_captured += 1
        match.flag_holder = None

        log_event(
            match,
            f"Capture: {describe_player(player)} captured the flag for {team.name}"
        )
        return player.team, team.flags_captured, match.flag_holder

    @staticmethod
    @atomic
    def attack(
        match: Match, attacker_id: str, target_id: str, damage=None
    ) -> Tuple[Player, Player, bool, Optional[str]]:
        """
        攻擊

        規則：
        - damage 不是數字時預設 10，負數視為 0
        - 不能攻擊自己，但可以攻擊隊友
        - health 最低到 0；造成傷害（damage > 0）且剛好到 0 時：
            1. attacker kills +1
            2. 若 target 持旗，旗子回到中立
            3. target 立即重生（health 100）

        返回：
            (attacker, target, killed, flag_holder) tuple

        異常：
            PlayerNotFound: attacker 或 target 不存在
            SelfAttack: attacker == target
        """
        dmg = as_number(damage)
        dmg = DEFAULT_DAMAGE if dmg is None else clamp(dmg, 0)

        attacker = MatchManager._require_player(match, attacker_id, "Attacker")
        target = MatchManager._require_player(match, target_id, "Target")

        if attacker.id == target.id:
            raise SelfAttack(attacker.id)

        target.health = max(0, target.health - dmg)
        killed = dmg > 0 and target.health == 0

        log_event(
            match,
            f"Attack: {describe_player(attacker)} attacked {describe_player(target)} "
            f"for {dmg} damage{' and killed them' if killed else ''}"
        )

        if killed:
            attacker.kills += 1
            if match.flag_holder == target.id:
                match.flag_holder = None
            target.health = MAX_HEALTH
            log_event(match, f"Kill: {describe_player(attacker)} killed {describe_player(target)}")
            log_event(match, f"Respawn: {describe_player(target)} respawned with full health")

        return attacker.model_copy(), target.model_copy(), killed, match.flag_holder

    @staticmethod
    @atomic
    def heal(match: Match, target_id: str, healer_id: Optional[str] = None, amount=None) -> Player:
        """
        治療，health 上限 100

        healer_id 可省略（系統治療），事件中記為 System

        異常：
            PlayerNotFound: target 不存在，或有給 healer_id 但不存在
        """
        amt = as_number(amount)
        amt = DEFAULT_HEAL_AMOUNT if amt is None else clamp(amt, 0)

        target = MatchManager._require_player(match, target_id, "Target")
        healer = MatchManager._require_player(match, healer_id, "Healer") if healer_id else None

        target.health = clamp(target.health + amt, 0, MAX_HEALTH)

        healer_label = healer.name if healer else "System"
        log_event(match, f"Heal: {healer_label} healed {describe_player(target)} by {amt}")
        return target.model_copy()

    @staticmethod
    @atomic
    def change_team(match: Match, player_id: str, team) -> Player:
        """
        手動換隊，不做平衡

        異常：
            PlayerNotFound: 玩家不存在
            InvalidTeam: team 不是 blue / red
        """
        player = MatchManager._require_player(match, player_id)
        try:
            team_key = parse_team_key(team)
        except ValueError:
            raise InvalidTeam(team)

        player.team = team_key
        log_event(
            match,
            f"TeamChange: {describe_player(player)} moved to {match.teams[team_key].name}"
        )
        return player.model_copy()

    @staticmethod
    @atomic
    def list_events(match: Match) -> List[Event]:
        """事件 log，舊的在前"""
        return list(match.events)

    @staticmethod
    @atomic
    def restart(match: Match) -> Dict[TeamKey, Team]:
        """
        整場重置

        清空玩家、兩隊分數歸零、旗子回到中立、清空事件 log、
        顯示編號回到 4，然後記錄一筆「Match restarted」作為新 log 的第一筆

        返回：
            重置後兩隊的快照
        """
        match.reset()
        logger.info("Match state reset")
        log_event(match, "Match restarted")
        return {key: team.model_copy() for key, team in match.teams.items()}
