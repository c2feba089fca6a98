"""
服務層

這個 package 包含純計算邏輯與外部服務 client，不負責狀態轉換：
- EvaluatorService：猜測評分
- StandingsService：勝場統計與冠軍判定
- WordService：題目選擇
- HistoryService：冠軍紀錄
- DirectoryService / ParticipantClient / RewardService / SigningService：外部服務
"""
