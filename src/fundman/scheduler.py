"""
Fixed-interval refresh scheduler.

Launches a refresh cycle immediately and then every ``interval`` seconds.
Cycles are not serialised: a slow cycle can still be in flight when the
next one starts. Each cycle runs as its own asyncio task and is applied
to the Session when it completes.
"""

import asyncio
import logging
from typing import Callable, Optional

from fundman.models import CycleOutcome, Holding
from fundman.portfolio.refresh import RefreshCycle
from fundman.session import Session

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL = 5.0

CycleCallback = Callable[[CycleOutcome, bool], None]


class Scheduler:
    """
    Run refresh cycles forever on a fixed interval.

    Args:
        session: Session receiving cycle outcomes
        refresh_cycle: Cycle runner
        interval: Seconds between cycle launches
        on_cycle: Called with (outcome, applied) after each cycle
    """

    def __init__(
        self,
        session: Session,
        refresh_cycle: RefreshCycle,
        interval: float = DEFAULT_INTERVAL,
        on_cycle: Optional[CycleCallback] = None,
    ):
        if interval <= 0:
            raise ValueError(f"interval must be positive, got {interval}")
        self.session = session
        self.refresh_cycle = refresh_cycle
        self.interval = interval
        self.on_cycle = on_cycle
        self._tasks: set[asyncio.Task] = set()

    async def run_cycle(self, holdings: list[Holding]) -> Optional[CycleOutcome]:
        """
        Run and apply a single cycle.

        Errors are logged and swallowed so the schedule keeps going.
        """
        generation = self.session.next_generation()
        try:
            outcome = await self.refresh_cycle.run(holdings, generation=generation)
        except Exception:
            logger.exception("Refresh cycle %d failed", generation)
            return None

        applied = self.session.apply(outcome)
        if self.on_cycle is not None:
            try:
                self.on_cycle(outcome, applied)
            except Exception:
                logger.exception("Cycle callback failed for cycle %d", generation)
        return outcome

    def _launch(self, holdings: list[Holding]) -> asyncio.Task:
        task = asyncio.create_task(self.run_cycle(holdings))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def start(
        self,
        holdings: list[Holding],
        max_cycles: Optional[int] = None,
    ) -> None:
        """
        Start refreshing.

        Args:
            holdings: Holdings to refresh every cycle
            max_cycles: Stop launching after this many cycles and wait for
                those in flight; None runs until the process exits
        """
        logger.info(
            "Refreshing %d holding(s) every %s seconds", len(holdings), self.interval
        )
        launched = 0
        try:
            while max_cycles is None or launched < max_cycles:
                self._launch(holdings)
                launched += 1
                if max_cycles is not None and launched >= max_cycles:
                    break
                await asyncio.sleep(self.interval)

            if self._tasks:
                await asyncio.gather(*list(self._tasks))
        except asyncio.CancelledError:
            await self._cancel_in_flight()
            raise

    @property
    def in_flight(self) -> int:
        return len(self._tasks)

    async def _cancel_in_flight(self) -> None:
        """Cancel cycles still running when the scheduler is stopped."""
        tasks = list(self._tasks)
        if not tasks:
            return
        logger.info("Cancelling %d in-flight cycle(s)", len(tasks))
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
