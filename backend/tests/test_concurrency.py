"""Tests for bounded fan-out with per-item slots and a run deadline."""

import asyncio

import pytest

from pitchwright.core.concurrency import Deadline, gather_bounded


class TestGatherBounded:
    @pytest.mark.asyncio
    async def test_results_keep_input_order(self):
        async def worker(n):
            await asyncio.sleep(0.01 * (5 - n))
            return n * 10

        outcomes = await gather_bounded([1, 2, 3, 4], worker, limit=4, item_timeout=1.0)

        assert [o.value for o in outcomes] == [10, 20, 30, 40]
        assert all(o.ok for o in outcomes)

    @pytest.mark.asyncio
    async def test_error_is_isolated_to_its_slot(self):
        async def worker(n):
            if n == 2:
                raise ValueError("boom")
            return n

        outcomes = await gather_bounded([1, 2, 3], worker, limit=2, item_timeout=1.0)

        assert outcomes[0].value == 1
        assert isinstance(outcomes[1].error, ValueError)
        assert not outcomes[1].ok
        assert outcomes[2].value == 3

    @pytest.mark.asyncio
    async def test_item_timeout_is_isolated_to_its_slot(self):
        async def worker(n):
            await asyncio.sleep(1.0 if n == 1 else 0)
            return n

        outcomes = await gather_bounded([0, 1, 2], worker, limit=3, item_timeout=0.05)

        assert outcomes[1].timed_out
        assert outcomes[0].ok and outcomes[2].ok

    @pytest.mark.asyncio
    async def test_expired_deadline_runs_nothing(self):
        calls = []

        async def worker(n):
            calls.append(n)
            return n

        outcomes = await gather_bounded([1, 2, 3], worker, limit=2, item_timeout=1.0, deadline=Deadline(0))

        assert calls == []
        assert all(o.timed_out for o in outcomes)

    @pytest.mark.asyncio
    async def test_deadline_cancels_running_work(self):
        async def worker(n):
            await asyncio.sleep(0 if n == 0 else 5.0)
            return n

        outcomes = await gather_bounded([0, 1], worker, limit=2, item_timeout=10.0, deadline=Deadline(0.1))

        assert outcomes[0].value == 0
        assert outcomes[1].timed_out

    @pytest.mark.asyncio
    async def test_limit_bounds_concurrency(self):
        in_flight = 0
        peak = 0

        async def worker(n):
            nonlocal in_flight, peak
            in_flight += 1
            peak = max(peak, in_flight)
            await asyncio.sleep(0.01)
            in_flight -= 1
            return n

        await gather_bounded(list(range(10)), worker, limit=3, item_timeout=1.0)

        assert peak == 3

    @pytest.mark.asyncio
    async def test_empty_input(self):
        async def worker(n):
            return n

        assert await gather_bounded([], worker, limit=2, item_timeout=1.0) == []
