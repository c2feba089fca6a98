"""
戰績服務：系列賽勝場統計與冠軍判定

純計算邏輯，不涉及狀態轉換
"""
from typing import Dict, Iterable, List, Optional


def credit_round_winners(win_counts: Dict[str, int], round_winners: Iterable[str]) -> Dict[str, int]:
    """每位本回合贏家勝場 +1（直接修改並回傳 win_counts）"""
    for participant_id in round_winners:
        win_counts[participant_id] = win_counts.get(participant_id, 0) + 1
    return win_counts


def determine_series_winner(win_counts: Dict[str, int], wins_needed: int) -> Optional[str]:
    """
    判定系列賽冠軍

    規則：
    1. 找出勝場 >= wins_needed 的參賽者
    2. 取其中最高勝場
    3. 只有一人持有最高勝場 -> 該人為冠軍
    4. 多人並列最高（即使都超過門檻）-> 沒有冠軍，繼續下一回合

    平手不做驟死賽，也不隨機挑選，只靠繼續比賽分出勝負

    範例：
        {"a": 3, "b": 3}, wins_needed=3 -> None
        {"a": 3, "b": 2}, wins_needed=3 -> "a"
        {"a": 4, "b": 3}, wins_needed=3 -> "a"
    """
    qualified = {pid: wins for pid, wins in win_counts.items() if wins >= wins_needed}
    if not qualified:
        return None

    top = max(qualified.values())
    leaders = [pid for pid, wins in qualified.items() if wins == top]
    if len(leaders) == 1:
        return leaders[0]
    return None


def build_player_history(win_count: int, round_number: int) -> List[bool]:
    """
    參賽者本系列賽的勝負紀錄（給觀戰畫面顯示）

    已結束回合數 = round_number - 1
    回傳 win_count 個 True 接著其餘的 False
    """
    total_rounds = max(round_number - 1, 0)
    losses = max(total_rounds - win_count, 0)
    return [True] * win_count + [False] * losses
