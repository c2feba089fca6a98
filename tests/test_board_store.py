from core.board_store import BoardStateStore


def test_get_is_idempotent_for_unseen_participant():
    store = BoardStateStore(max_guesses=5)
    first = store.get("p1")
    second = store.get("p1")
    assert first is second
    assert first.guesses == [] and first.guess_count == 0
    assert len(store) == 1


def test_peek_does_not_create_entry():
    store = BoardStateStore(max_guesses=5)
    board = store.peek("ghost")
    assert board.guess_count == 0
    assert "ghost" not in store


def test_winning_guess_completes_board():
    store = BoardStateStore(max_guesses=5)
    store.record("p1", "slate", "⬜⬜🟩⬜🟩", won=False)
    store.record("p1", "crate", "🟩🟩🟩⬜🟩", won=False)
    store.record("p1", "crane", "🟩🟩🟩🟩🟩", won=True)

    board = store.get("p1")
    assert board.won_round and board.complete
    assert board.guess_count == len(board.guesses) == len(board.feedback) == 3


def test_exhausting_guesses_completes_without_win():
    store = BoardStateStore(max_guesses=5)
    for _ in range(5):
        assert store.record("p1", "slate", "⬜⬜🟩⬜🟩", won=False)

    board = store.get("p1")
    assert board.complete
    assert not board.won_round
    assert board.guess_count == 5


def test_record_after_complete_is_refused():
    store = BoardStateStore(max_guesses=5)
    store.record("p1", "crane", "🟩🟩🟩🟩🟩", won=True)
    assert not store.record("p1", "slate", "⬜⬜🟩⬜🟩", won=False)

    board = store.get("p1")
    assert board.guess_count == 1
    assert board.complete


def test_all_complete_rules():
    store = BoardStateStore(max_guesses=2)
    assert not store.all_complete()

    store.record("p1", "crane", "🟩🟩🟩🟩🟩", won=True)
    store.record("p2", "slate", "⬜⬜🟩⬜🟩", won=False)
    assert not store.all_complete()

    store.record("p2", "slate", "⬜⬜🟩⬜🟩", won=False)
    assert store.all_complete()


def test_reset_all_keeps_participants_with_fresh_boards():
    store = BoardStateStore(max_guesses=5)
    store.record("p1", "crane", "🟩🟩🟩🟩🟩", won=True)
    store.get("p2")

    store.reset_all()

    assert len(store) == 2
    board = store.get("p1")
    assert board.guess_count == 0 and not board.complete and not board.won_round


def test_snapshot_is_detached():
    store = BoardStateStore(max_guesses=5)
    store.record("p1", "slate", "⬜⬜🟩⬜🟩", won=False)
    snap = store.snapshot()
    snap["p1"].guesses.append("mutated")
    assert store.get("p1").guesses == ["slate"]
