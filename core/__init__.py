"""
核心業務邏輯層

這個 package 包含所有核心業務邏輯，包括：
- 狀態機：集中管理系列賽的狀態轉換
- Controller / Scheduler：管理系列賽與回合的生命週期
- BoardStateStore：參賽者本回合的猜測紀錄
- Timers / Locks：計時器 handle 與並發控制工具
"""
