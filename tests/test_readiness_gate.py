"""
Unit Tests for Readiness Gate
"""

import pytest
import asyncio
from unittest.mock import AsyncMock

from gate.readiness_gate import (
    ReadinessGate,
    RetryLadder,
    GateResult,
    FundingState,
    ExhaustedError,
    StartupTimeoutError
)


class ScriptedProgressSource:
    """Returns a fixed sequence of readings, repeating the last one"""

    def __init__(self, readings):
        self.readings = list(readings)
        self.queries = 0

    async def fetch_progress(self):
        reading = self.readings[min(self.queries, len(self.readings) - 1)]
        self.queries += 1
        return reading


@pytest.fixture
def sleep():
    """Sleep that returns immediately"""
    return AsyncMock()


def make_gate(readings, funding_action=None, sleep=None, **kwargs):
    return ReadinessGate(
        ScriptedProgressSource(readings),
        funding_action or AsyncMock(return_value=True),
        sleep=sleep or AsyncMock(),
        **kwargs
    )


class TestRetryLadder:
    """Test RetryLadder"""

    def test_default_thresholds(self):
        """Default ladder is 10, 20, 30 plus the terminal step"""
        ladder = RetryLadder()

        assert ladder.thresholds == (10, 20, 30)
        assert len(ladder) == 4
        assert list(ladder) == [10, 20, 30, None]

    def test_empty_ladder_has_only_terminal_step(self):
        ladder = RetryLadder([])

        assert len(ladder) == 1
        assert list(ladder) == [None]

    def test_rejects_non_integer_thresholds(self):
        with pytest.raises(TypeError):
            RetryLadder([10, 'quit'])

        with pytest.raises(TypeError):
            RetryLadder([True])

    def test_iteration_is_repeatable(self):
        ladder = RetryLadder([5])

        assert list(ladder) == list(ladder)


class TestAwaitProgress:
    """Test await_progress"""

    @pytest.mark.asyncio
    async def test_returns_after_counter_passes_floor(self, sleep):
        """Readings [0, 0, 0, 5] with floor 0 return on the 4th query"""
        gate = make_gate([0, 0, 0, 5], sleep=sleep)

        result = await gate.await_progress(0)

        assert result is GateResult.READY
        assert gate.progress_source.queries == 4
        assert sleep.await_count == 3

    @pytest.mark.asyncio
    async def test_equal_to_floor_is_not_ready(self, sleep):
        gate = make_gate([10, 10, 11], sleep=sleep)

        await gate.await_progress(10)

        assert gate.progress_source.queries == 3

    @pytest.mark.asyncio
    async def test_ready_on_first_query(self, sleep):
        gate = make_gate([25], sleep=sleep)

        assert await gate.await_progress(20) is GateResult.READY
        assert gate.progress_source.queries == 1
        sleep.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_unreadable_counter_keeps_polling(self, sleep):
        """None readings are treated as not yet ready"""
        gate = make_gate([None, None, 3, None, 7], sleep=sleep)

        assert await gate.await_progress(5) is GateResult.READY
        assert gate.progress_source.queries == 5

    @pytest.mark.asyncio
    async def test_sleeps_poll_interval_between_queries(self, sleep):
        gate = make_gate([0, 1], sleep=sleep, poll_interval=2.5)

        await gate.await_progress(0)

        sleep.assert_awaited_once_with(2.5)

    @pytest.mark.asyncio
    async def test_stalled_counter_never_returns(self):
        """A counter that never advances must be bounded from outside"""
        gate = make_gate([3], sleep=asyncio.sleep, poll_interval=0.001)

        with pytest.raises(asyncio.TimeoutError):
            await asyncio.wait_for(gate.await_progress(3), 0.05)

    @pytest.mark.asyncio
    async def test_timeout_returns_timed_out(self):
        gate = make_gate([None], sleep=asyncio.sleep, poll_interval=0.001)

        result = await gate.await_progress(0, timeout=0.05)

        assert result is GateResult.TIMED_OUT


class TestFundWithRetry:
    """Test fund_with_retry"""

    @pytest.mark.asyncio
    async def test_success_on_first_attempt(self):
        funding = AsyncMock(return_value=True)
        gate = make_gate([100], funding_action=funding)
        gate.await_progress = AsyncMock(return_value=GateResult.READY)

        await gate.fund_with_retry(RetryLadder([10, 20, 30]))

        assert funding.await_count == 1
        assert gate.funding_attempts == 1
        assert gate.state is FundingState.SUCCEEDED
        gate.await_progress.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_fails_three_times_then_succeeds(self):
        """Waits for 10, 20, 30 interleave with three failed attempts"""
        events = []

        async def funding():
            events.append('fund')
            return len([e for e in events if e == 'fund']) == 4

        async def await_progress(floor, timeout=None):
            events.append(('wait', floor))
            return GateResult.READY

        gate = make_gate([0], funding_action=funding)
        gate.await_progress = await_progress

        await gate.fund_with_retry(RetryLadder([10, 20, 30]))

        assert events == [
            'fund', ('wait', 10),
            'fund', ('wait', 20),
            'fund', ('wait', 30),
            'fund'
        ]
        assert gate.funding_attempts == 4
        assert gate.state is FundingState.SUCCEEDED

    @pytest.mark.asyncio
    async def test_always_failing_exhausts_ladder(self):
        funding = AsyncMock(return_value=False)
        gate = make_gate([0], funding_action=funding)
        gate.await_progress = AsyncMock(return_value=GateResult.READY)

        with pytest.raises(ExhaustedError) as exc_info:
            await gate.fund_with_retry(RetryLadder([10, 20, 30]))

        assert funding.await_count == 4
        assert exc_info.value.attempts == 4
        assert [c.args[0] for c in gate.await_progress.await_args_list] == [10, 20, 30]
        assert gate.state is FundingState.EXHAUSTED

    @pytest.mark.asyncio
    async def test_success_on_second_attempt_stops_waiting(self):
        funding = AsyncMock(side_effect=[False, True])
        gate = make_gate([0], funding_action=funding)
        gate.await_progress = AsyncMock(return_value=GateResult.READY)

        await gate.fund_with_retry(RetryLadder([10, 20, 30]))

        assert funding.await_count == 2
        assert gate.await_progress.await_count == 1

    @pytest.mark.asyncio
    async def test_funding_exception_counts_as_failure(self):
        funding = AsyncMock(side_effect=[RuntimeError("friendbot down"), True])
        gate = make_gate([0], funding_action=funding)
        gate.await_progress = AsyncMock(return_value=GateResult.READY)

        await gate.fund_with_retry(RetryLadder([10]))

        assert gate.funding_attempts == 2
        assert gate.state is FundingState.SUCCEEDED

    @pytest.mark.asyncio
    async def test_empty_ladder_allows_single_attempt(self):
        funding = AsyncMock(return_value=False)
        gate = make_gate([0], funding_action=funding)

        with pytest.raises(ExhaustedError):
            await gate.fund_with_retry(RetryLadder([]))

        assert funding.await_count == 1

    @pytest.mark.asyncio
    async def test_waits_on_real_progress(self, sleep):
        """Ladder waits consult the progress source"""
        funding = AsyncMock(side_effect=[False, True])
        gate = make_gate([5, 8, 12], funding_action=funding, sleep=sleep)

        await gate.fund_with_retry(RetryLadder([10]))

        assert gate.progress_source.queries == 3
        assert funding.await_count == 2

    @pytest.mark.asyncio
    async def test_wait_timeout_raises(self):
        funding = AsyncMock(return_value=False)
        gate = make_gate(
            [0],
            funding_action=funding,
            sleep=asyncio.sleep,
            poll_interval=0.001,
            wait_timeout=0.05
        )

        with pytest.raises(StartupTimeoutError) as exc_info:
            await gate.fund_with_retry(RetryLadder([10]))

        assert exc_info.value.floor == 10
        assert funding.await_count == 1

    @pytest.mark.asyncio
    async def test_default_ladder(self):
        funding = AsyncMock(return_value=False)
        gate = make_gate([0], funding_action=funding)
        gate.await_progress = AsyncMock(return_value=GateResult.READY)

        with pytest.raises(ExhaustedError):
            await gate.fund_with_retry()

        assert funding.await_count == 4


if __name__ == "__main__":
    pytest.main([__file__, '-v'])
