"""
分隊服務：新玩家加入時的隊伍平衡

純計算邏輯，不涉及狀態轉換

規則：
- 新玩家進人少的隊伍，平手給 blue
- 只靠加入時，兩隊人數差距不會超過 1
- 手動換隊不會重新平衡
"""
from models import Match, TeamKey

DEFAULT_TEAM = TeamKey.BLUE


def assign_team(match: Match) -> TeamKey:
    """
    為新加入的玩家選隊伍

    範例：
        空房間依序加入：blue, red, blue, red, ...
    """
    blue = match.count_team(TeamKey.BLUE)
    red = match.count_team(TeamKey.RED)
    if blue <= red:
        return DEFAULT_TEAM
    return TeamKey.RED


def parse_team_key(value) -> TeamKey:
    """
    把請求中的隊伍值（"blue" / "red"）轉成 TeamKey

    參數：
        value: 請求帶來的原始值（可能不是字串）

    返回：
        TeamKey

    異常：
        ValueError: 其他任何值，包含 None
    """
    if isinstance(value, TeamKey):
        return value
    if not isinstance(value, str):
        raise ValueError(f"{value!r} is not a valid TeamKey")
    return TeamKey(value)
