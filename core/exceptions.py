"""
自定義異常類別

集中管理所有業務邏輯異常，方便 API 層與排程器統一處理
"""


class WordAileException(Exception):
    """所有遊戲異常的基類"""
    pass


# ============ 參賽者相關異常 ============

class ParticipantUnreachable(WordAileException):
    """參賽者無法連線、逾時或回傳錯誤狀態碼"""
    def __init__(self, participant_id, reason=""):
        self.participant_id = participant_id
        self.reason = reason
        super().__init__(f"Participant {participant_id} unreachable: {reason}")


class DirectoryUnavailable(WordAileException):
    """參賽者名單服務無法取得"""
    pass


# ============ 猜測相關異常 ============

class GuessLengthMismatch(WordAileException):
    """猜測與答案長度不同（呼叫前應先驗證）"""
    def __init__(self, guess, secret):
        self.guess = guess
        self.secret = secret
        super().__init__(
            f"Guess length {len(guess)} does not match secret length {len(secret)}"
        )


# ============ 外部副作用異常 ============

class RewardTransferFailure(WordAileException):
    """獎勵轉帳失敗"""
    pass


class PersistenceFailure(WordAileException):
    """冠軍紀錄寫入失敗"""
    pass


# ============ 狀態轉換異常 ============

class InvalidStateTransition(WordAileException):
    """非法的狀態轉換"""
    pass


class GameNotStarted(WordAileException):
    """遊戲尚未開始（沒有進行中的系列賽）"""
    pass
