"""
數值服務：請求中的數值處理

純計算邏輯，不涉及狀態轉換
"""
import math
from typing import Optional


def as_number(value) -> Optional[int]:
    """
    把請求中的數值轉成 int，不能用的值返回 None

    規則：
    - bool 不算數字（JSON 的 true/false）
    - 字串、None、物件不算數字
    - NaN / Infinity 不算數字
    - 小數無條件捨去（health、kills 一律是整數）

    範例：
        as_number(25) -> 25
        as_number(7.9) -> 7
        as_number("10") -> None
        as_number(True) -> None
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if isinstance(value, float) and not math.isfinite(value):
        return None
    return int(value)


def clamp(value: int, low: int, high: Optional[int] = None) -> int:
    value = max(low, value)
    if high is not None:
        value = min(high, value)
    return value
