"""
題目服務：從固定字庫隨機選出答案

純計算邏輯，不涉及狀態轉換
"""
import random
from typing import Optional, Sequence, Tuple

WORD_LIST = (
    "about", "above", "actor", "adopt", "after", "agent", "alarm", "album",
    "alert", "alive", "apple", "april", "arena", "argue", "award", "badge",
    "beach", "bench", "black", "blade", "blank", "blend", "board", "brain",
    "brave", "bread", "brick", "brief", "bring", "brown", "brush", "cabin",
    "candy", "chain", "chair", "charm", "chart", "chess", "chief", "child",
    "cloud", "coach", "coast", "crane", "crash", "cream", "crowd", "dance",
    "delta", "dream", "drink", "eagle", "earth", "event", "fancy", "field",
    "flame", "fleet", "float", "focus", "frame", "fresh", "fruit", "ghost",
    "giant", "glass", "globe", "grace", "grape", "green", "guest", "heart",
    "honey", "horse", "house", "image", "jelly", "juice", "knife", "laser",
    "lemon", "light", "magic", "maple", "match", "medal", "metal", "money",
    "mouse", "music", "night", "noble", "ocean", "olive", "orbit", "paint",
    "panel", "piano", "pilot", "plant", "point", "power", "prize", "queen",
    "quiet", "radio", "raise", "river", "robot", "round", "scale", "shark",
    "shine", "slate", "smile", "solar", "sound", "space", "spark", "stone",
    "storm", "sugar", "table", "tiger", "token", "tower", "train", "trust",
    "union", "value", "voice", "watch", "water", "whale", "world", "youth",
)


def select_random_word(words: Sequence[str] = WORD_LIST, rng: Optional[random.Random] = None) -> str:
    """
    從字庫均勻隨機選一個字

    注意：
    - 不排除歷史題目，允許重複
    """
    chooser = rng or random
    return chooser.choice(words)


def words_of_length(length: int, words: Sequence[str] = WORD_LIST) -> Tuple[str, ...]:
    """
    篩出指定長度的字

    異常：
        ValueError: 字庫裡沒有該長度的字（WORD_LENGTH 設定錯誤時啟動即失敗）
    """
    matching = tuple(w for w in words if len(w) == length)
    if not matching:
        raise ValueError(f"No words of length {length} in the word list")
    return matching
