"""
自定義異常類別

集中管理所有業務邏輯異常，方便 API 層統一處理

分類（對應 HTTP 狀態碼）：
- InvalidInput: 400，請求欄位格式錯誤或超出範圍
- Conflict: 409，違反唯一性限制（代碼 / IP 重複）
- NotFound: 404，找不到玩家
- InvalidStateTransition: 400，目前狀態不允許此操作
- BadState: 400，內部資料參照錯誤
"""


class CaptureTheFlagException(Exception):
    """所有遊戲異常的基類"""
    pass


# ============ 分類基類 ============

class InvalidInput(CaptureTheFlagException):
    """請求欄位格式錯誤或超出範圍"""
    pass


class Conflict(CaptureTheFlagException):
    """違反唯一性限制"""
    pass


class NotFound(CaptureTheFlagException):
    """參照的實體不存在"""
    pass


class InvalidStateTransition(CaptureTheFlagException):
    """非法的狀態轉換"""
    pass


class BadState(CaptureTheFlagException):
    """內部參照損壞"""
    pass


# ============ Player 相關異常 ============

class InvalidPlayerCode(InvalidInput):
    """加入代碼必須是 0-99 的整數"""
    def __init__(self, code):
        self.code = code
        super().__init__("You must join with an integer `code` between 0 and 99")


class CodeInUse(Conflict):
    """代碼已被其他玩家使用"""
    def __init__(self, code):
        self.code = code
        super().__init__("This code is already in use. Pick another code.")


class AddressInUse(Conflict):
    """同一個 IP 已經有玩家在遊戲中"""
    def __init__(self, ip):
        self.ip = ip
        super().__init__("A player from this IP is already in the game. Leave first to rejoin.")


class PlayerNotFound(NotFound):
    """玩家不存在（role 用於區分 Attacker / Target / Healer）"""
    def __init__(self, player_id, role="Player"):
        self.player_id = player_id
        self.role = role
        super().__init__(f"{role} not found")


# ============ Team 相關異常 ============

class InvalidTeam(InvalidInput):
    """隊伍代碼不是 blue 或 red"""
    def __init__(self, team):
        self.team = team
        super().__init__("Invalid team")


class InvalidTeamReference(BadState):
    """玩家身上的隊伍參照不存在"""
    def __init__(self, player_id, team):
        self.player_id = player_id
        self.team = team
        super().__init__("Player has invalid team")


# ============ Flag / Combat 相關異常 ============

class FlagNotHeld(InvalidStateTransition):
    """只有持旗者可以得分"""
    def __init__(self, player_id):
        self.player_id = player_id
        super().__init__("Player does not currently hold the flag")


class SelfAttack(InvalidStateTransition):
    """不能攻擊自己"""
    def __init__(self, player_id):
        self.player_id = player_id
        super().__init__("Cannot attack yourself")
