"""
評分服務：猜測與答案的比對邏輯

純計算邏輯，不涉及狀態轉換
"""
from typing import List, Optional

from core.exceptions import GuessLengthMismatch
from models import FeedbackSymbol


def score(guess: str, secret: str) -> List[FeedbackSymbol]:
    """
    比對猜測與答案，回傳每個位置的結果

    規則：
    - 同位置同字母：EXACT（🟩）
    - 答案中任一位置含有此字母：PRESENT（🟨）
    - 其他：ABSENT（⬜）

    注意：
    - PRESENT 只檢查「是否包含」，不計算字母剩餘數量
      所以重複字母可能各自都是 PRESENT
    - 長度不同屬於呼叫端錯誤，應先用 validate_guess 過濾

    範例：
        score("SLATE", "CRANE") -> ⬜⬜🟩⬜🟩
        score("CRATE", "CRANE") -> 🟩🟩🟩⬜🟩

    異常：
        GuessLengthMismatch: 長度不同
    """
    if len(guess) != len(secret):
        raise GuessLengthMismatch(guess, secret)

    feedback = []
    for letter, expected in zip(guess, secret):
        if letter == expected:
            feedback.append(FeedbackSymbol.EXACT)
        elif letter in secret:
            feedback.append(FeedbackSymbol.PRESENT)
        else:
            feedback.append(FeedbackSymbol.ABSENT)
    return feedback


def feedback_to_string(feedback: List[FeedbackSymbol]) -> str:
    return "".join(symbol.value for symbol in feedback)


def is_winning_feedback(feedback: List[FeedbackSymbol]) -> bool:
    """全部 EXACT 才算猜中"""
    return bool(feedback) and all(symbol == FeedbackSymbol.EXACT for symbol in feedback)


def validate_guess(raw, length: int) -> Optional[str]:
    """
    驗證並正規化參賽者送來的猜測

    返回：
        正規化後（去空白、小寫）的字串；不合法時回傳 None
    """
    if not isinstance(raw, str):
        return None
    guess = raw.strip().lower()
    if len(guess) != length or not guess.isascii() or not guess.isalpha():
        return None
    return guess
