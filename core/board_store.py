"""
BoardStateStore：每位參賽者本回合的猜測紀錄

職責：
1. 延遲建立 BoardState（第一次存取時）
2. 記錄猜測與回饋，維護 guess_count / complete / won_round
3. 回合開始時重置所有 BoardState
4. 判斷是否所有人都已完成（用於提前結束回合）

不變量：
- guess_count == len(guesses) == len(feedback) <= max_guesses
- won_round 為 True 時 complete 必為 True
- complete 一旦為 True，同一回合內不會變回 False
"""
import copy
from dataclasses import dataclass, field
from typing import Dict, List


@dataclass
class BoardState:
    guesses: List[str] = field(default_factory=list)
    feedback: List[str] = field(default_factory=list)
    guess_count: int = 0
    complete: bool = False
    won_round: bool = False

    def to_dict(self) -> dict:
        return {
            "guesses": list(self.guesses),
            "feedback": list(self.feedback),
            "guessCount": self.guess_count,
            "isComplete": self.complete,
            "wonRound": self.won_round,
        }


class BoardStateStore:
    """參賽者 ID -> BoardState"""

    def __init__(self, max_guesses: int):
        self.max_guesses = max_guesses
        self._boards: Dict[str, BoardState] = {}

    def __len__(self):
        return len(self._boards)

    def __contains__(self, participant_id):
        return participant_id in self._boards

    def get(self, participant_id: str) -> BoardState:
        """
        取得參賽者的 BoardState，不存在時建立並保存

        同一回合內重複呼叫會拿到同一個物件
        """
        board = self._boards.get(participant_id)
        if board is None:
            board = BoardState()
            self._boards[participant_id] = board
        return board

    def peek(self, participant_id: str) -> BoardState:
        """唯讀查詢：不存在時回傳空白 BoardState，但不寫入 store"""
        board = self._boards.get(participant_id)
        return copy.deepcopy(board) if board else BoardState()

    def record(self, participant_id: str, guess: str, feedback: str, won: bool) -> bool:
        """
        記錄一次猜測

        參數：
            participant_id: 參賽者 ID
            guess: 已驗證的猜測
            feedback: 回饋字串（例如 🟩🟩⬜🟨⬜）
            won: 這次猜測是否全對

        返回：
            True 如果有記錄，False 如果該 BoardState 已完成（不做任何變更）
        """
        board = self.get(participant_id)
        if board.complete or board.guess_count >= self.max_guesses:
            return False

        board.guesses.append(guess)
        board.feedback.append(feedback)
        board.guess_count = len(board.guesses)

        if won:
            board.won_round = True
            board.complete = True
        elif board.guess_count >= self.max_guesses:
            board.complete = True
        return True

    def reset_all(self) -> None:
        """每個既有參賽者換成全新的 BoardState（回合開始時使用）"""
        for participant_id in list(self._boards):
            self._boards[participant_id] = BoardState()

    def all_complete(self) -> bool:
        """
        是否所有 BoardState 都已完成

        空的 store 視為「未完成」，沒有參賽者的回合只能靠計時器結束
        """
        if not self._boards:
            return False
        return all(
            board.complete or board.guess_count >= self.max_guesses
            for board in self._boards.values()
        )

    def snapshot(self) -> Dict[str, BoardState]:
        """給觀戰端用的深拷貝"""
        return copy.deepcopy(self._boards)
