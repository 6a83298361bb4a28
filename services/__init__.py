"""
服務層

這個 package 包含純計算邏輯，不負責狀態轉換：
- NamingService：玩家 ID 與名稱生成
- TeamService：分隊平衡
- StatsService：數值轉換與限制
- EventService：事件紀錄
- NetworkService：來源 IP 與區網位址
"""
