"""
API 層

FastAPI routers，只負責請求 / 回應轉換與錯誤碼對應，業務邏輯在 core.match_manager
"""
