import random
import threading

import pytest

from planetlines.components.game_state import GameMode
from planetlines.config import EngineConfig
from planetlines.errors import MoveRejection, OutOfBoundsError
from planetlines.events.bus import (
    EventBus,
    EVENT_GAME_OVER,
    EVENT_MATCH_RESOLVED,
    EVENT_MOVE_REJECTED,
    EVENT_MOVE_RESOLVED,
    EVENT_NO_MATCH,
    EVENT_SELECTION_IGNORED,
    EVENT_TILE_CLICK,
    EVENT_TILE_DESELECTED,
    EVENT_TILE_SELECTED,
    EVENT_TILES_SPAWNED,
)
from planetlines.systems.match import find_all_matches
from planetlines.systems.pathfinding import reachable_from
from planetlines.systems.turn_engine import OutcomeKind
from planetlines.world import new_game

from helpers import make_engine, record_events

ALL_EVENTS = [
    EVENT_TILE_SELECTED,
    EVENT_TILE_DESELECTED,
    EVENT_SELECTION_IGNORED,
    EVENT_MOVE_REJECTED,
    EVENT_MOVE_RESOLVED,
    EVENT_MATCH_RESOLVED,
    EVENT_NO_MATCH,
    EVENT_TILES_SPAWNED,
    EVENT_GAME_OVER,
]

SCENARIO_ROWS = [
    "RR..",
    "....",
    "..R.",
    "....",
]


def _engine(rows=SCENARIO_ROWS, **kwargs):
    bus = EventBus()
    received = record_events(bus, ALL_EVENTS)
    engine = make_engine(rows, event_bus=bus, **kwargs)
    return engine, received


def _state(engine):
    return (
        engine.snapshot(),
        engine.grid.empty_positions(),
        engine.score,
        engine.mode,
    )


def test_scenario_a_move_completes_row():
    engine, received = _engine()
    assert engine.try_move((2, 2), (0, 2)) is True

    names = [name for name, _ in received]
    assert names == [EVENT_MOVE_RESOLVED, EVENT_MATCH_RESOLVED, EVENT_TILES_SPAWNED]
    move = received[0][1]
    assert move["path"] == [(2, 2), (1, 2), (0, 2)]
    assert move["type_name"] == 'R'
    match = received[1][1]
    assert set(match["positions"]) == {(0, 0), (0, 1), (0, 2)}
    assert match["score_delta"] == 3 * 10
    assert engine.score == 30
    for pos in [(0, 0), (0, 1), (2, 2)]:
        spawned = received[2][1]["tiles"]
        assert engine.tile_at(pos) == spawned.get(pos)
    assert engine.mode == GameMode.AWAITING_SELECTION


def test_scenario_b_occupied_destination():
    rows = [
        "RG..",
        "....",
        "..R.",
        "....",
    ]
    engine, received = _engine(rows)
    before = _state(engine)
    assert engine.try_move((2, 2), (0, 1)) is False
    assert received == [
        (EVENT_MOVE_REJECTED, {"src": (2, 2), "dst": (0, 1), "reason": MoveRejection.OCCUPIED_DESTINATION}),
    ]
    assert _state(engine) == before


def test_scenario_c_walled_destination():
    rows = [
        "R....",
        "..G..",
        ".B.B.",
        "..G..",
        ".....",
    ]
    engine, received = _engine(rows)
    before = _state(engine)
    assert engine.try_move((0, 0), (2, 2)) is False
    assert [name for name, _ in received] == [EVENT_MOVE_REJECTED]
    assert received[0][1]["reason"] == MoveRejection.NO_PATH
    assert _state(engine) == before


def test_scenario_d_last_cell_ends_game():
    rows = [
        ".BC",
        "BCA",
        "CAB",
    ]
    engine, received = _engine(rows, tile_types=('A', 'B', 'C'))
    assert engine.empty_count == 1
    assert engine.try_move((0, 1), (0, 0)) is True

    names = [name for name, _ in received]
    assert names == [EVENT_MOVE_RESOLVED, EVENT_NO_MATCH, EVENT_TILES_SPAWNED, EVENT_GAME_OVER]
    assert list(received[2][1]["tiles"]) == [(0, 1)]
    assert received[3][1] == {"final_score": 0}
    assert engine.grid.is_full()
    assert engine.is_game_over

    outcome = engine.select_or_move((1, 1))
    assert outcome.kind == OutcomeKind.REJECTED
    assert outcome.rejection == MoveRejection.GAME_CLOSED
    assert engine.try_move((1, 1), (0, 0)) is False


def test_game_closed_is_permanent():
    engine, _ = _engine([".BC", "BCA", "CAB"], tile_types=('A', 'B', 'C'))
    engine.try_move((0, 1), (0, 0))
    before = _state(engine)
    for pos in [(0, 0), (2, 2), (9, 9)]:
        outcome = engine.select_or_move(pos)
        assert outcome.rejection == MoveRejection.GAME_CLOSED
    assert _state(engine) == before
    assert engine.selected is None


def test_select_deselect_and_ignore():
    engine, received = _engine()
    outcome = engine.select_or_move((3, 3))
    assert outcome.kind == OutcomeKind.IGNORED
    assert outcome.accepted
    assert engine.selected is None

    outcome = engine.select_or_move((2, 2))
    assert outcome.kind == OutcomeKind.SELECTED
    assert engine.selected == (2, 2)

    outcome = engine.select_or_move((2, 2))
    assert outcome.kind == OutcomeKind.DESELECTED
    assert engine.selected is None

    assert received == [
        (EVENT_SELECTION_IGNORED, {"row": 3, "col": 3}),
        (EVENT_TILE_SELECTED, {"row": 2, "col": 2}),
        (EVENT_TILE_DESELECTED, {"row": 2, "col": 2}),
    ]


def test_rejected_move_keeps_selection():
    engine, _ = _engine()
    engine.select_or_move((2, 2))
    outcome = engine.select_or_move((0, 0))
    assert outcome.kind == OutcomeKind.REJECTED
    assert not outcome.accepted
    assert outcome.rejection == MoveRejection.OCCUPIED_DESTINATION
    assert engine.selected == (2, 2)

    # A second destination works without re-selecting.
    outcome = engine.select_or_move((0, 2))
    assert outcome.kind == OutcomeKind.MOVED
    assert outcome.accepted
    assert engine.selected is None
    assert engine.score == 30
    assert [event.name for event in outcome.events] == [
        EVENT_MOVE_RESOLVED, EVENT_MATCH_RESOLVED, EVENT_TILES_SPAWNED,
    ]


def test_out_of_bounds_is_a_typed_rejection():
    engine, received = _engine()
    engine.select_or_move((2, 2))
    outcome = engine.select_or_move((4, 0))
    assert outcome.rejection == MoveRejection.OUT_OF_BOUNDS
    assert engine.selected == (2, 2)
    assert received[-1] == (EVENT_MOVE_REJECTED, {"src": (2, 2), "dst": (4, 0), "reason": MoveRejection.OUT_OF_BOUNDS})
    assert engine.try_move((2, 2), (-1, 0)) is False
    with pytest.raises(OutOfBoundsError):
        engine.tile_at((7, 7))


def test_try_move_from_empty_cell_rejected():
    engine, received = _engine()
    before = _state(engine)
    assert engine.try_move((3, 3), (3, 2)) is False
    assert received[-1][1]["reason"] == MoveRejection.EMPTY_SOURCE
    assert _state(engine) == before


def test_state_is_final_before_events_are_published():
    bus = EventBus()
    seen = {}

    def on_move(sender, **payload):
        seen["dst_tile"] = engine.tile_at(payload["dst"])
        seen["score"] = engine.score
        seen["selected"] = engine.selected

    bus.subscribe(EVENT_MOVE_RESOLVED, on_move)
    engine = make_engine(SCENARIO_ROWS, event_bus=bus, min_spawn=0, max_spawn=0)
    engine.select_or_move((2, 2))
    engine.select_or_move((0, 2))
    # Match already cleared, score already awarded, selection already released.
    assert seen == {"dst_tile": None, "score": 30, "selected": None}


def test_tile_click_event_drives_engine():
    bus = EventBus()
    engine = make_engine(SCENARIO_ROWS, event_bus=bus)
    bus.emit(EVENT_TILE_CLICK, row=2, col=2)
    assert engine.selected == (2, 2)
    bus.emit(EVENT_TILE_CLICK, row=0, col=2)
    assert engine.score == 30
    bus.emit(EVENT_TILE_CLICK, row=None, col=2)


def test_handlers_may_call_back_into_engine():
    bus = EventBus()
    engine = make_engine(SCENARIO_ROWS, event_bus=bus)
    bus.subscribe(EVENT_TILE_SELECTED, lambda sender, **payload: engine.select_or_move((0, 2)))
    engine.select_or_move((2, 2))
    assert engine.score == 30


def test_match_is_scored_per_cleared_cell():
    rows = [
        "..B..",
        "..B..",
        "BB...",
        "..B..",
        "....B",
    ]
    engine, received = _engine(rows, score_multiplier=7, min_spawn=0, max_spawn=0)
    # Completes a horizontal run of three and a vertical run of four sharing (2,2).
    assert engine.try_move((4, 4), (2, 2)) is True
    match = [payload for name, payload in received if name == EVENT_MATCH_RESOLVED][0]
    assert match["positions"] == [(0, 2), (1, 2), (2, 0), (2, 1), (2, 2), (3, 2)]
    assert match["score_delta"] == 42
    assert engine.score == 42
    assert engine.empty_count == 25


def test_match_only_detected_at_destination():
    rows = [
        "GGG.",
        "....",
        "....",
        "...R",
    ]
    engine, received = _engine(rows, min_spawn=0, max_spawn=0)
    # The existing G run is not part of this turn; only (3,0) is scanned.
    assert engine.try_move((3, 3), (3, 0)) is True
    assert [name for name, _ in received] == [EVENT_MOVE_RESOLVED, EVENT_NO_MATCH, EVENT_TILES_SPAWNED]
    assert engine.score == 0
    assert engine.tile_at((0, 1)) == 'G'


def test_random_play_keeps_invariants():
    for seed in range(5):
        engine = new_game(seed=seed)
        picker = random.Random(seed)
        dim = engine.grid.dimension
        last_score = 0
        turns = 0
        while not engine.is_game_over and turns < 300:
            turns += 1
            occupied = sorted(engine.snapshot())
            moves = [(src, sorted(reachable_from(engine.grid, src))) for src in occupied]
            moves = [(src, dsts) for src, dsts in moves if dsts]
            if not moves:
                break
            src, dsts = picker.choice(moves)
            assert engine.try_move(src, picker.choice(dsts))
            assert engine.empty_count + engine.grid.occupied_count == dim * dim
            assert engine.score >= last_score
            assert engine.score % 10 == 0
            last_score = engine.score
            # Matches are cleared on the spot and refills never form new ones.
            assert find_all_matches(engine.grid) == []
            assert engine.is_game_over == engine.grid.is_full()


def test_concurrent_callers_are_serialised():
    engine = new_game(EngineConfig(min_spawn=1, max_spawn=2), seed=21)
    dim = engine.grid.dimension
    errors = []

    def player(seed):
        picker = random.Random(seed)
        try:
            for _ in range(150):
                src = (picker.randrange(dim), picker.randrange(dim))
                dst = (picker.randrange(dim), picker.randrange(dim))
                if picker.random() < 0.5:
                    engine.try_move(src, dst)
                else:
                    engine.select_or_move(src)
                    engine.select_or_move(dst)
        except Exception as exc:  # surfaced in the main thread below
            errors.append(exc)

    threads = [threading.Thread(target=player, args=(seed,)) for seed in range(6)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert errors == []
    grid = engine.grid
    assert grid.empty_count + grid.occupied_count == dim * dim
    assert set(grid.empty_positions()) == {pos for pos in grid.positions() if grid.get(pos) is None}
    assert find_all_matches(grid) == []
    assert engine.is_game_over == grid.is_full()

    # The log follows mutation order: running totals line up turn by turn.
    running = 0
    for event in engine.event_log:
        if event.name == EVENT_MATCH_RESOLVED:
            running += event.payload["score_delta"]
            assert event.payload["score"] == running
    assert engine.score == running
    assert any(event.name == EVENT_MOVE_RESOLVED for event in engine.event_log)


def test_second_caller_waits_for_running_turn():
    engine, received = _engine()
    before = _state(engine)
    results = []

    engine._lock.acquire()
    try:
        worker = threading.Thread(target=lambda: results.append(engine.try_move((2, 2), (0, 2))))
        worker.start()
        worker.join(timeout=0.2)
        assert worker.is_alive()
        assert _state(engine) == before
        assert received == []
        assert engine.event_log == []
    finally:
        engine._lock.release()

    worker.join(timeout=5)
    assert not worker.is_alive()
    assert results == [True]
    assert engine.score == 30
    assert [name for name, _ in received][:2] == [EVENT_MOVE_RESOLVED, EVENT_MATCH_RESOLVED]
