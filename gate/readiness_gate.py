"""
Readiness Gate
Blocks until the validator's ledger counter passes a floor, and funds
the deployer identity with a bounded retry ladder
"""

import asyncio
from enum import Enum
from typing import Awaitable, Callable, Iterable, Iterator, Optional
from loguru import logger


class GateResult(Enum):
    """Outcome of one await_progress call"""
    READY = 'ready'
    TIMED_OUT = 'timed_out'


class FundingState(Enum):
    """States of a single fund_with_retry sequence"""
    ATTEMPTING = 'attempting'
    WAITING_FOR_PROGRESS = 'waiting_for_progress'
    SUCCEEDED = 'succeeded'
    EXHAUSTED = 'exhausted'


class GateError(Exception):
    """Base class for errors that cross the gate boundary"""


class ExhaustedError(GateError):
    """Every step of the retry ladder was used without a successful funding"""

    def __init__(self, attempts: int):
        self.attempts = attempts
        super().__init__(f"Funding failed after {attempts} attempts, retry ladder exhausted")


class StartupTimeoutError(GateError):
    """A caller-imposed deadline expired before the counter passed the floor"""

    def __init__(self, floor: int, timeout: float):
        self.floor = floor
        self.timeout = timeout
        super().__init__(f"Progress did not pass {floor} within {timeout}s")


class RetryLadder:
    """
    Ordered progress thresholds used to pace funding retries

    The ladder always ends with a terminal step, so a ladder built from
    thresholds (10, 20, 30) has four steps and allows four attempts.
    """

    def __init__(self, thresholds: Iterable[int] = (10, 20, 30)):
        thresholds = tuple(thresholds)

        for threshold in thresholds:
            if isinstance(threshold, bool) or not isinstance(threshold, int):
                raise TypeError(f"Ladder thresholds must be integers, got {threshold!r}")

        self._thresholds = thresholds

    @property
    def thresholds(self) -> tuple:
        return self._thresholds

    def __len__(self) -> int:
        return len(self._thresholds) + 1

    def __iter__(self) -> Iterator[Optional[int]]:
        """Yield each threshold, then None for the terminal step"""
        yield from self._thresholds
        yield None

    def __repr__(self):
        return f"RetryLadder({list(self._thresholds)})"


class ReadinessGate:
    """
    Cooperative sleep-poll gate over an external progress counter

    The progress source must provide `async fetch_progress() -> Optional[int]`
    returning None whenever the counter cannot be read. The funding action is
    an async callable returning True on success.
    """

    def __init__(
        self,
        progress_source,
        funding_action: Callable[[], Awaitable[bool]],
        poll_interval: float = 1.0,
        wait_timeout: Optional[float] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep
    ):
        """
        Initialize Readiness Gate

        Args:
            progress_source: Object exposing fetch_progress()
            funding_action: Idempotent funding call
            poll_interval: Seconds between progress queries
            wait_timeout: Deadline for each wait inside fund_with_retry (None = unbounded)
            sleep: Sleep coroutine (injected in tests)
        """
        self.progress_source = progress_source
        self.funding_action = funding_action
        self.poll_interval = poll_interval
        self.wait_timeout = wait_timeout
        self._sleep = sleep

        self.state = None
        self.funding_attempts = 0

    async def await_progress(self, floor: int, timeout: Optional[float] = None) -> GateResult:
        """
        Wait until the progress counter is strictly greater than floor

        Unreadable counters count as "not yet ready". Without a timeout
        this never gives up.

        Args:
            floor: Value the counter must exceed
            timeout: Optional deadline in seconds

        Returns:
            GateResult.READY, or GateResult.TIMED_OUT if the deadline expired
        """
        if timeout is None:
            await self._poll_until_past(floor)
            return GateResult.READY

        try:
            await asyncio.wait_for(self._poll_until_past(floor), timeout)
        except asyncio.TimeoutError:
            logger.warning(f"Progress did not pass {floor} within {timeout}s")
            return GateResult.TIMED_OUT

        return GateResult.READY

    async def _poll_until_past(self, floor: int):
        queries = 0

        while True:
            progress = await self.progress_source.fetch_progress()
            queries += 1

            if progress is not None and progress > floor:
                logger.debug(f"Progress {progress} > {floor} after {queries} queries")
                return

            logger.trace(f"Progress {progress} not past {floor}, retrying")
            await self._sleep(self.poll_interval)

    async def fund_with_retry(self, ladder: Optional[RetryLadder] = None):
        """
        Run the funding action, waiting for more progress between failures

        Args:
            ladder: Retry ladder (default thresholds 10, 20, 30)

        Raises:
            ExhaustedError: Every ladder step failed
            StartupTimeoutError: A wait exceeded wait_timeout
        """
        if ladder is None:
            ladder = RetryLadder()

        self.funding_attempts = 0
        steps = iter(ladder)

        while True:
            self._transition(FundingState.ATTEMPTING)
            self.funding_attempts += 1

            if await self._attempt_funding():
                self._transition(FundingState.SUCCEEDED)
                logger.success(f"Funding succeeded on attempt {self.funding_attempts}")
                return

            threshold = next(steps)

            if threshold is None:
                self._transition(FundingState.EXHAUSTED)
                logger.error(f"Funding failed {self.funding_attempts} times, giving up")
                raise ExhaustedError(self.funding_attempts)

            logger.warning(
                f"Funding attempt {self.funding_attempts} failed, "
                f"waiting for ledger > {threshold}"
            )

            self._transition(FundingState.WAITING_FOR_PROGRESS)
            result = await self.await_progress(threshold, timeout=self.wait_timeout)

            if result is GateResult.TIMED_OUT:
                raise StartupTimeoutError(threshold, self.wait_timeout)

    async def _attempt_funding(self) -> bool:
        try:
            return bool(await self.funding_action())
        except Exception as e:
            logger.warning(f"Funding action raised: {e}")
            return False

    def _transition(self, state: FundingState):
        logger.debug(f"Funding state: {self.state.value if self.state else 'init'} -> {state.value}")
        self.state = state
