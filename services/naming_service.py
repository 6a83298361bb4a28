"""
命名服務：生成 Player ID 和 Player Display Name

純計算邏輯，不涉及狀態轉換
"""
import time
import uuid


def generate_player_id(ip: str) -> str:
    """
    生成玩家 ID：「來源 IP-建立時間（毫秒）」

    範例：192.168.1.20-1718000000123

    注意：
    - 不檢查唯一性（由呼叫者負責，碰撞時改用 generate_fallback_player_id）
    """
    return f"{ip}-{int(time.time() * 1000)}"


def generate_fallback_player_id(ip: str) -> str:
    """同一毫秒內碰撞時加上隨機後綴"""
    return f"{generate_player_id(ip)}-{uuid.uuid4().hex[:6]}"


def generate_display_name(code: int) -> str:
    """
    玩家顯示名稱

    格式：「Player N」，N 為玩家加入時選的代碼
    """
    return f"Player {code}"


def describe_player(player) -> str:
    """事件訊息裡的玩家描述，例如：Player 7 (code 7)"""
    return f"{player.name} (code {player.code})"
