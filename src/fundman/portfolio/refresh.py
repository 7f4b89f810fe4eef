"""
Refresh cycle: concurrent fetch and aggregation.

One cycle deduplicates the holding list, fetches every holding
concurrently, waits for all fetches to settle and aggregates the
survivors into a CycleOutcome. A holding whose fetch exhausts its retries
is dropped from that cycle only.
"""

import asyncio
import logging
from decimal import Decimal
from typing import Callable, Optional

from fundman.models import CycleOutcome, ErrorInfo, Holding, HoldingResult
from fundman.data.fetcher import ValuationFetcher
from fundman.data.providers.base import FetchError
from fundman.portfolio.holdings import deduplicate_holdings
from fundman.portfolio.valuation import summarize_results, value_holding

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int], None]


class RefreshCycle:
    """
    Runs refresh cycles against a ValuationFetcher.

    Args:
        fetcher: Retrying fetcher used for every holding
        on_progress: Called with (completed, total) after each fetch settles
    """

    def __init__(
        self,
        fetcher: ValuationFetcher,
        on_progress: Optional[ProgressCallback] = None,
    ):
        self.fetcher = fetcher
        self.on_progress = on_progress

    def _report_progress(self, completed: int, total: int) -> None:
        if self.on_progress is None:
            return
        try:
            self.on_progress(completed, total)
        except Exception:
            logger.exception("Progress callback failed at %d/%d", completed, total)

    async def run(self, holdings: list[Holding], generation: int = 0) -> CycleOutcome:
        """
        Run one cycle.

        Args:
            holdings: Holdings in user order (duplicates allowed)
            generation: Launch order of this cycle

        Returns:
            CycleOutcome with results in input order
        """
        unique = deduplicate_holdings(holdings)
        total = len(unique)
        completed = 0

        async def fetch_one(holding: Holding):
            nonlocal completed
            try:
                return await asyncio.to_thread(self.fetcher.fetch, holding.identifier)
            finally:
                completed += 1
                self._report_progress(completed, total)

        settled = await asyncio.gather(
            *(fetch_one(holding) for holding in unique),
            return_exceptions=True,
        )

        results: list[HoldingResult] = []
        last_error: Optional[ErrorInfo] = None
        failed = 0

        for holding, outcome in zip(unique, settled):
            if isinstance(outcome, FetchError):
                failed += 1
                last_error = ErrorInfo(
                    identifier=holding.identifier,
                    message=str(outcome),
                    attempts=outcome.attempts,
                )
                continue
            if isinstance(outcome, BaseException):
                raise outcome
            results.append(value_holding(holding, outcome))

        summary = summarize_results(
            results,
            last_error=last_error,
            generation=generation,
            holding_count=total,
            failed_count=failed,
        )

        logger.info(
            "Cycle %d: %d/%d holdings valued, today income %s",
            generation, len(results), total,
            summary.today_income_total.quantize(Decimal("0.01")),
        )

        return CycleOutcome(generation=generation, results=results, summary=summary)
