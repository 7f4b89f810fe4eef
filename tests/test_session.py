"""
Tests for the session state, running extremes and scheduler.
"""

import asyncio
from decimal import Decimal

import pytest

from fundman.analytics.extremes import ExtremesTracker
from fundman.models import CycleOutcome, CycleSummary, HoldingResult
from fundman.scheduler import Scheduler
from fundman.session import Session


def _outcome(generation: int, today: str = "0", identifiers: tuple = ()) -> CycleOutcome:
    results = [
        HoldingResult(
            identifier=identifier,
            display_name=identifier,
            units_held=Decimal("1"),
            unit_cost=Decimal("1"),
            investment=Decimal("1"),
            current_income_rate=Decimal("0"),
            total_income=Decimal("0"),
            total_rate_of_return=Decimal("0"),
            today_income=Decimal("0"),
            intraday_series=[1.0],
            min_series_value=1.0,
        )
        for identifier in identifiers
    ]
    summary = CycleSummary(today_income_total=Decimal(today), generation=generation)
    return CycleOutcome(generation=generation, results=results, summary=summary)


class StubCycle:
    """Refresh cycle double whose duration depends on the generation."""

    def __init__(self, delays: dict[int, float] | None = None, fail: set[int] | None = None):
        self.delays = delays or {}
        self.fail = fail or set()
        self.generations: list[int] = []
        self.cancelled: list[int] = []

    async def run(self, holdings, generation=0):
        self.generations.append(generation)
        try:
            await asyncio.sleep(self.delays.get(generation, 0))
        except asyncio.CancelledError:
            self.cancelled.append(generation)
            raise
        if generation in self.fail:
            raise RuntimeError(f"cycle {generation} exploded")
        return _outcome(generation, today=str(generation), identifiers=(f"G{generation}",))


class TestExtremesTracker:
    """Tests for ExtremesTracker."""

    def test_initial_state(self):
        tracker = ExtremesTracker()
        assert tracker.minimum == Decimal("Infinity")
        assert tracker.maximum == Decimal("-Infinity")
        assert tracker.has_observations is False

    def test_sequence(self):
        tracker = ExtremesTracker()
        for value in ["5", "-3", "8"]:
            tracker.update(Decimal(value))
        assert tracker.minimum == Decimal("-3")
        assert tracker.maximum == Decimal("8")
        assert tracker.has_observations is True

    def test_zero_from_non_trading_cycle_is_folded_in(self):
        tracker = ExtremesTracker()
        tracker.update(Decimal("12"))
        tracker.update(Decimal("0"))
        assert tracker.minimum == Decimal("0")
        assert tracker.maximum == Decimal("12")

    def test_only_widens(self):
        tracker = ExtremesTracker()
        tracker.update(Decimal("-10"))
        tracker.update(Decimal("10"))
        tracker.update(Decimal("1"))
        assert (tracker.minimum, tracker.maximum) == (Decimal("-10"), Decimal("10"))


class TestSession:
    """Tests for Session.apply and generation fencing."""

    def test_generations_increase(self):
        session = Session()
        assert [session.next_generation() for _ in range(3)] == [1, 2, 3]

    def test_apply_updates_state(self):
        session = Session()
        outcome = _outcome(1, today="5", identifiers=("A", "B"))

        assert session.apply(outcome) is True

        assert session.summary is outcome.summary
        assert [r.identifier for r in session.results] == ["A", "B"]
        assert [s.identifier for s in session.charts.series] == ["A", "B"]
        assert session.extremes.maximum == Decimal("5")
        assert session.applied_generation == 1

    def test_stale_outcome_is_dropped(self):
        session = Session()
        session.apply(_outcome(2, today="7", identifiers=("NEW",)))

        assert session.apply(_outcome(1, today="-100", identifiers=("OLD",))) is False

        assert session.summary.generation == 2
        assert [s.identifier for s in session.charts.series] == ["NEW"]
        assert session.extremes.minimum == Decimal("7")

    def test_extremes_across_cycles(self):
        session = Session()
        for generation, today in enumerate(["5", "-3", "8"], start=1):
            session.apply(_outcome(generation, today=today))
        assert session.extremes.minimum == Decimal("-3")
        assert session.extremes.maximum == Decimal("8")

    def test_stale_selection_after_empty_cycle(self):
        session = Session()
        session.apply(_outcome(1, identifiers=("A", "B", "C")))
        session.charts.select(2)

        session.apply(_outcome(2))

        assert session.charts.current_series() is None


class TestScheduler:
    """Tests for the Scheduler."""

    def test_invalid_interval(self):
        with pytest.raises(ValueError):
            Scheduler(Session(), StubCycle(), interval=0)

    def test_runs_requested_cycles(self):
        session = Session()
        cycle = StubCycle()
        seen = []
        scheduler = Scheduler(
            session, cycle, interval=0.01,
            on_cycle=lambda outcome, applied: seen.append((outcome.generation, applied)),
        )

        asyncio.run(scheduler.start([], max_cycles=3))

        assert cycle.generations == [1, 2, 3]
        assert seen == [(1, True), (2, True), (3, True)]
        assert session.summary.generation == 3

    def test_overlapping_cycles_keep_newest(self):
        session = Session()
        cycle = StubCycle(delays={1: 0.3})
        seen = []
        scheduler = Scheduler(
            session, cycle, interval=0.05,
            on_cycle=lambda outcome, applied: seen.append((outcome.generation, applied)),
        )

        asyncio.run(scheduler.start([], max_cycles=2))

        assert seen == [(2, True), (1, False)]
        assert session.summary.generation == 2
        assert session.extremes.minimum == Decimal("2")

    def test_failed_cycle_does_not_stop_schedule(self):
        session = Session()
        cycle = StubCycle(fail={1})
        scheduler = Scheduler(session, cycle, interval=0.01)

        asyncio.run(scheduler.start([], max_cycles=2))

        assert cycle.generations == [1, 2]
        assert session.summary.generation == 2

    def test_callback_errors_are_contained(self):
        session = Session()

        def broken(outcome, applied):
            raise RuntimeError("display failed")

        scheduler = Scheduler(session, StubCycle(), interval=0.01, on_cycle=broken)
        asyncio.run(scheduler.start([], max_cycles=2))

        assert session.summary.generation == 2

    def test_runs_until_cancelled(self):
        session = Session()
        scheduler = Scheduler(session, StubCycle(), interval=0.01)

        async def drive():
            task = asyncio.create_task(scheduler.start([]))
            await asyncio.sleep(0.1)
            task.cancel()
            with pytest.raises(asyncio.CancelledError):
                await task

        asyncio.run(drive())

        assert session.applied_generation >= 3

    def test_cancel_stops_in_flight_cycles(self):
        session = Session()
        cycle = StubCycle(delays={1: 10})
        scheduler = Scheduler(session, cycle, interval=60)

        async def drive():
            task = asyncio.create_task(scheduler.start([]))
            await asyncio.sleep(0.05)
            assert scheduler.in_flight == 1
            task.cancel()
            with pytest.raises(asyncio.CancelledError):
                await task
            assert cycle.cancelled == [1]
            assert scheduler.in_flight == 0

        asyncio.run(drive())

        assert session.summary is None
