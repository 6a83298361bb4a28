"""
核心業務邏輯層

這個 package 包含所有核心業務邏輯，包括：
- MatchManager：集中管理所有狀態轉換
- Exceptions：業務異常分類
- Locks：並發控制工具
"""
