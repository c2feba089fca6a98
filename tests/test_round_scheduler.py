import asyncio
import time

from core.exceptions import DirectoryUnavailable, ParticipantUnreachable
from core.round_scheduler import RoundEndReason, RoundScheduler
from core.series_state import SeriesState
from core.timers import TimerSlots
from tests.fakes import SLOW, FakeDirectory, ScriptedClient, entry


def make_scheduler(directory, client, round_duration=5.0, guess_interval=0.01, participant_timeout=1.0):
    return RoundScheduler(
        directory=directory,
        participant_client=client,
        round_duration=round_duration,
        guess_interval=guess_interval,
        word_length=5,
        participant_timeout=participant_timeout,
    )


def test_round_ends_early_when_every_board_is_complete():
    directory = FakeDirectory([entry("p1"), entry("p2")])
    client = ScriptedClient({
        "p1": ["slate", "crate", "crane"],
        "p2": ["pilot", "pilot", "pilot", "pilot", "pilot"],
    })
    scheduler = make_scheduler(directory, client, round_duration=5.0)
    state = SeriesState.fresh("crane", max_guesses=5)

    async def scenario():
        started = time.monotonic()
        reason = await scheduler.run_round(state)
        return reason, time.monotonic() - started

    reason, elapsed = asyncio.run(scenario())

    assert reason == RoundEndReason.ALL_COMPLETE
    assert elapsed < 5.0
    assert scheduler.timers.active_names() == []

    winner = state.board_states.get("p1")
    assert winner.feedback == ["⬜⬜🟩⬜🟩", "🟩🟩🟩⬜🟩", "🟩🟩🟩🟩🟩"]
    assert winner.won_round and winner.guess_count == 3

    loser = state.board_states.get("p2")
    assert loser.complete and not loser.won_round
    assert loser.guess_count == 5
    assert state.round_winners == {"p1"}


def test_round_times_out_when_nobody_finishes():
    directory = FakeDirectory([entry("p1")])
    client = ScriptedClient({"p1": ["slate"]})
    scheduler = make_scheduler(directory, client, round_duration=0.1)
    state = SeriesState.fresh("crane", max_guesses=5)

    reason = asyncio.run(scheduler.run_round(state))

    assert reason == RoundEndReason.TIMEOUT
    assert state.board_states.get("p1").guess_count == 1
    assert not state.board_states.get("p1").complete
    assert scheduler.timers.active_names() == []


def test_empty_roster_only_ends_by_timer():
    scheduler = make_scheduler(FakeDirectory([]), ScriptedClient({}), round_duration=0.05)
    state = SeriesState.fresh("crane", max_guesses=5)

    assert asyncio.run(scheduler.run_round(state)) == RoundEndReason.TIMEOUT
    assert len(state.board_states) == 0


def test_failing_participant_does_not_block_others():
    directory = FakeDirectory([entry("bad"), entry("good")])
    client = ScriptedClient({
        "bad": [ParticipantUnreachable("bad", "connection refused")],
        "good": ["crane"],
    })
    scheduler = make_scheduler(directory, client)
    state = SeriesState.fresh("crane", max_guesses=5)

    recorded = asyncio.run(scheduler.run_guess_cycle(state))

    assert recorded == 1
    assert state.round_winners == {"good"}
    assert "bad" not in state.board_states


def test_slow_participant_is_bounded_by_timeout():
    directory = FakeDirectory([entry("slow"), entry("fast")])
    client = ScriptedClient({"slow": [SLOW], "fast": ["slate"]})
    scheduler = make_scheduler(directory, client, participant_timeout=0.05)
    state = SeriesState.fresh("crane", max_guesses=5)

    async def scenario():
        started = time.monotonic()
        recorded = await scheduler.run_guess_cycle(state)
        return recorded, time.monotonic() - started

    recorded, elapsed = asyncio.run(scenario())

    assert recorded == 1
    assert elapsed < 1.0
    assert state.board_states.get("fast").guesses == ["slate"]


def test_invalid_guesses_are_discarded():
    directory = FakeDirectory([entry("a"), entry("b"), entry("c")])
    client = ScriptedClient({"a": ["cranes"], "b": ["cr4ne"], "c": [12345]})
    scheduler = make_scheduler(directory, client)
    state = SeriesState.fresh("crane", max_guesses=5)

    assert asyncio.run(scheduler.run_guess_cycle(state)) == 0
    assert len(state.board_states) == 0


def test_guesses_are_normalized_before_scoring():
    directory = FakeDirectory([entry("p1")])
    client = ScriptedClient({"p1": [" CRANE "]})
    scheduler = make_scheduler(directory, client)
    state = SeriesState.fresh("crane", max_guesses=5)

    asyncio.run(scheduler.run_guess_cycle(state))

    assert state.board_states.get("p1").won_round


def test_inactive_or_unreachable_entries_are_not_polled():
    directory = FakeDirectory([
        entry("idle", status="inactive"),
        entry("nowhere", endpoint=None),
        entry("live"),
    ])
    client = ScriptedClient({"idle": ["crane"], "nowhere": ["crane"], "live": ["slate"]})
    scheduler = make_scheduler(directory, client)
    state = SeriesState.fresh("crane", max_guesses=5)

    asyncio.run(scheduler.run_guess_cycle(state))

    assert [pid for pid, _, _ in client.pushes] == ["live"]


def test_directory_failure_skips_cycle():
    scheduler = make_scheduler(FakeDirectory(error=DirectoryUnavailable("down")), ScriptedClient({}))
    state = SeriesState.fresh("crane", max_guesses=5)

    assert asyncio.run(scheduler.run_guess_cycle(state)) == 0


def test_completed_board_accepts_no_more_guesses():
    directory = FakeDirectory([entry("p1")])
    client = ScriptedClient({"p1": ["crane", "slate"]})
    scheduler = make_scheduler(directory, client)
    state = SeriesState.fresh("crane", max_guesses=5)

    async def two_cycles():
        await scheduler.run_guess_cycle(state)
        await scheduler.run_guess_cycle(state)

    asyncio.run(two_cycles())

    board = state.board_states.get("p1")
    assert board.guess_count == 1
    assert board.complete


def test_push_carries_board_and_round_number():
    directory = FakeDirectory([entry("p1")])
    client = ScriptedClient({"p1": ["slate", "crate"]})
    scheduler = make_scheduler(directory, client)
    state = SeriesState.fresh("crane", max_guesses=5)
    state.round_number = 4

    async def two_cycles():
        await scheduler.run_guess_cycle(state)
        await scheduler.run_guess_cycle(state)

    asyncio.run(two_cycles())

    (_, first_board, first_round), (_, second_board, _) = client.pushes
    assert first_round == 4
    assert first_board.guesses == []
    assert second_board.guesses == ["slate"]


def test_timer_slot_replacement_cancels_previous_task():
    async def scenario():
        slots = TimerSlots()
        first = await slots.arm("tick", asyncio.sleep(3600))
        second = await slots.arm("tick", asyncio.sleep(3600))
        assert first.task.cancelled()
        assert not second.done
        await slots.cancel_all()
        return second

    second = asyncio.run(scenario())
    assert second.task.cancelled()


def test_pending_reply_is_cancelled_when_round_ends():
    directory = FakeDirectory([entry("p1")])
    client = ScriptedClient({"p1": [SLOW, "crane"]})
    scheduler = make_scheduler(directory, client, round_duration=0.05, participant_timeout=10.0)
    state = SeriesState.fresh("crane", max_guesses=5)

    async def scenario():
        started = time.monotonic()
        reason = await scheduler.run_round(state)
        # anything still in flight would have had a chance to land here
        await asyncio.sleep(0.05)
        return reason, time.monotonic() - started

    reason, elapsed = asyncio.run(scenario())

    assert reason == RoundEndReason.TIMEOUT
    assert elapsed < 1.0
    assert "p1" not in state.board_states
    assert state.round_winners == set()
    assert scheduler.timers.active_names() == []
