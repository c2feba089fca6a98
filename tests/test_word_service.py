import random

import pytest

from database import Settings
from main import build_controller
from services.word_service import WORD_LIST, select_random_word, words_of_length


def test_word_list_is_five_letter_lowercase():
    assert all(len(w) == 5 and w.isalpha() and w.islower() for w in WORD_LIST)


def test_selection_can_reach_every_word():
    rng = random.Random(7)
    words = ("alpha", "bravo", "delta")
    seen = {select_random_word(words, rng) for _ in range(200)}
    assert seen == set(words)


def test_words_of_length_filters():
    assert words_of_length(4, ["tree", "crane", "lamp"]) == ("tree", "lamp")
    assert words_of_length(5) == WORD_LIST


def test_words_of_length_without_matches_raises():
    with pytest.raises(ValueError):
        words_of_length(6)


def test_controller_picks_words_of_configured_length():
    controller = build_controller(Settings(word_length=5, signing_secret=None))
    state = controller.start_series()
    assert len(state.current_word) == 5
    assert state.current_word in WORD_LIST


def test_controller_rejects_unsupported_word_length():
    with pytest.raises(ValueError):
        build_controller(Settings(word_length=6))
