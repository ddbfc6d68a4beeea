"""Run simulations off the calling thread and decide what the dashboard shows.

Each request goes to a named channel ("actual", "potential", ...). Every new
submission on a channel bumps its generation; a result that arrives for an
older generation is discarded instead of interrupting the computation.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Executor, Future, ProcessPoolExecutor, ThreadPoolExecutor
from dataclasses import dataclass
from datetime import date
from typing import Iterable, Mapping, Optional

from analytics.dca_engine import simulate
from analytics.scheduler import years_before
from config import DEMO_LOOKBACK_YEARS, DEMO_MAX_CLEAN_DAYS, DEMO_MAX_TRACKED_DAYS
from models import Cadence, GhostPolicy, PotentialPolicy, SimulationInput, SimulationResult

logger = logging.getLogger(__name__)

ACTUAL = "actual"
POTENTIAL = "potential"


@dataclass(frozen=True)
class SimulationTicket:
    channel: str
    generation: int
    future: Future


class SimulationWorker:
    """Background executor for DCA simulations with stale-result rejection."""

    def __init__(self, max_workers: int = 2, use_processes: bool = False, executor: Optional[Executor] = None):
        if executor is not None:
            self._executor = executor
            self._owns_executor = False
        elif use_processes:
            self._executor = ProcessPoolExecutor(max_workers=max_workers)
            self._owns_executor = True
        else:
            self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="dca")
            self._owns_executor = True
        self._latest: dict[str, int] = {}
        self._lock = threading.Lock()

    def submit(self, channel: str, sim_input: SimulationInput) -> SimulationTicket:
        """Queue a simulation; any earlier request on ``channel`` becomes stale."""
        with self._lock:
            generation = self._latest.get(channel, 0) + 1
            self._latest[channel] = generation
        future = self._executor.submit(simulate, sim_input)
        return SimulationTicket(channel=channel, generation=generation, future=future)

    def is_current(self, ticket: SimulationTicket) -> bool:
        with self._lock:
            return self._latest.get(ticket.channel) == ticket.generation

    def collect(self, ticket: SimulationTicket, timeout: Optional[float] = None) -> Optional[SimulationResult]:
        """Wait for a result. Returns None when a newer request superseded it.

        Exceptions raised inside the simulation propagate to the caller.
        """
        result = ticket.future.result(timeout=timeout)
        if not self.is_current(ticket):
            logger.debug("Discarding stale %s result (generation %d)", ticket.channel, ticket.generation)
            return None
        return result

    def run_concurrently(
        self, inputs: Mapping[str, SimulationInput], timeout: Optional[float] = None,
    ) -> dict[str, SimulationResult]:
        """Fire all simulations in parallel and return {channel: result} once all resolve."""
        tickets = {channel: self.submit(channel, sim_input) for channel, sim_input in inputs.items()}
        results = {}
        for channel, ticket in tickets.items():
            try:
                result = self.collect(ticket, timeout=timeout)
            except Exception:
                logger.exception("Simulation failed on channel %s", channel)
                raise
            if result is not None:
                results[channel] = result
        return results

    def shutdown(self, wait: bool = True):
        if self._owns_executor:
            self._executor.shutdown(wait=wait)

    def __enter__(self) -> "SimulationWorker":
        return self

    def __exit__(self, *exc):
        self.shutdown()


# ---------------------------------------------------------------------------
# Dashboard planning
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class DashboardPlan:
    """Which simulations to run for the dashboard."""
    actual: SimulationInput
    potential: SimulationInput
    is_demo: bool
    start_date: date


def should_use_demo(start_date: Optional[date], clean_days: Iterable[date], today: date) -> bool:
    """New users (short tracking history and few clean days) get the one-year demo."""
    if start_date is None:
        return True
    days_tracked = (today - start_date).days
    return days_tracked < DEMO_MAX_TRACKED_DAYS and len(set(clean_days)) < DEMO_MAX_CLEAN_DAYS


def plan_dashboard_simulation(
    prices,
    start_date: Optional[date],
    cadence: Cadence,
    amount: float,
    clean_days: Iterable[date],
    today: Optional[date] = None,
) -> DashboardPlan:
    """Build the actual + potential simulation inputs for the dashboard.

    In demo mode the "actual" run is a potential-policy simulation anchored
    one year back, showing what the habit money could have become.
    """
    today = today or date.today()
    days = frozenset(clean_days)
    prices = tuple(prices)
    cadence = Cadence(cadence)

    if should_use_demo(start_date, days, today):
        demo_start = years_before(today, DEMO_LOOKBACK_YEARS)
        demo = SimulationInput(
            prices=prices, start_date=demo_start, cadence=cadence,
            amount_per_purchase=amount, policy=PotentialPolicy(),
        )
        return DashboardPlan(actual=demo, potential=demo, is_demo=True, start_date=demo_start)

    return DashboardPlan(
        actual=SimulationInput(
            prices=prices, start_date=start_date, cadence=cadence,
            amount_per_purchase=amount, policy=GhostPolicy(qualifying_dates=days),
        ),
        potential=SimulationInput(
            prices=prices, start_date=start_date, cadence=cadence,
            amount_per_purchase=amount, policy=PotentialPolicy(),
        ),
        is_demo=False,
        start_date=start_date,
    )


def run_dashboard(worker: SimulationWorker, plan: DashboardPlan) -> dict[str, SimulationResult]:
    """Run the plan's simulations concurrently."""
    if plan.is_demo:
        return worker.run_concurrently({ACTUAL: plan.actual})
    return worker.run_concurrently({ACTUAL: plan.actual, POTENTIAL: plan.potential})
