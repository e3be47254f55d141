"""
Tests for the sorting runners.

Run with: pytest tests/test_sorting.py -v
"""

import asyncio

import pytest

from api.runners.registry import AlgorithmType
from api.runners.settings import AlgorithmSettings, DataType

SORTS = [
    AlgorithmType.BUBBLE_SORT,
    AlgorithmType.SELECTION_SORT,
    AlgorithmType.INSERTION_SORT,
    AlgorithmType.MERGE_SORT,
    AlgorithmType.QUICK_SORT,
    AlgorithmType.HEAP_SORT,
]


async def run_until(runner, predicate, max_iterations=100000):
    """Start ``runner`` and yield until ``predicate()`` holds or it finishes."""
    task = asyncio.create_task(runner.run())
    await asyncio.sleep(0)
    for _ in range(max_iterations):
        if predicate() or not runner.is_running:
            break
        await asyncio.sleep(0)
    return task


class TestCompleteRuns:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("algorithm_type", SORTS)
    @pytest.mark.parametrize("data_type", list(DataType))
    async def test_sorts_to_sorted_permutation(self, make_runner, algorithm_type, data_type):
        runner = make_runner(algorithm_type, AlgorithmSettings(array_size=17, data_type=data_type))
        original = list(runner.algorithm.data)

        await runner.run()

        data = runner.algorithm.data
        assert data == sorted(original)
        assert runner.algorithm.completed
        assert not runner.is_running

    @pytest.mark.asyncio
    @pytest.mark.parametrize("algorithm_type", SORTS)
    async def test_markers_cleared_after_completion(self, make_runner, algorithm_type):
        runner = make_runner(algorithm_type)

        await runner.run()

        view = runner.view()["state"]
        assert view["highlighted"] == []
        assert view["comparing"] == []
        assert view["completed"] is True

    @pytest.mark.asyncio
    @pytest.mark.parametrize("algorithm_type", SORTS)
    async def test_counts_comparisons(self, make_runner, algorithm_type):
        runner = make_runner(algorithm_type, AlgorithmSettings(array_size=12, data_type=DataType.REVERSE))

        await runner.run()

        assert runner.stats.comparisons > 0
        assert runner.stats.steps > 0

    @pytest.mark.asyncio
    async def test_bubble_sort_on_sorted_input_never_swaps(self, make_runner):
        runner = make_runner(
            AlgorithmType.BUBBLE_SORT, AlgorithmSettings(array_size=10, data_type=DataType.SORTED)
        )

        await runner.run()

        assert runner.stats.swaps == 0
        assert runner.stats.comparisons == 45


class TestStoppedRuns:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("algorithm_type", SORTS)
    @pytest.mark.parametrize("stop_after", [1, 4, 11, 29, 60])
    async def test_stop_leaves_a_permutation(self, make_runner, algorithm_type, stop_after):
        runner = make_runner(algorithm_type, AlgorithmSettings(array_size=20))
        original = sorted(runner.algorithm.data)

        task = await run_until(runner, lambda: runner.stats.comparisons >= stop_after)
        runner.stop()
        await task

        assert sorted(runner.algorithm.data) == original
        assert not runner.is_running

    @pytest.mark.asyncio
    @pytest.mark.parametrize("algorithm_type", SORTS)
    async def test_stopped_run_is_not_marked_complete(self, make_runner, algorithm_type):
        runner = make_runner(
            algorithm_type, AlgorithmSettings(array_size=30, data_type=DataType.REVERSE)
        )

        task = await run_until(runner, lambda: runner.stats.comparisons >= 3)
        runner.stop()
        await task

        assert not runner.algorithm.completed

    @pytest.mark.asyncio
    @pytest.mark.parametrize("algorithm_type", [AlgorithmType.INSERTION_SORT, AlgorithmType.MERGE_SORT])
    async def test_stop_mid_shift_or_merge_keeps_every_value(self, make_runner, algorithm_type):
        runner = make_runner(
            algorithm_type, AlgorithmSettings(array_size=16, data_type=DataType.REVERSE)
        )
        original = sorted(runner.algorithm.data)

        # Stop right after a step, which lands inside a shift or a merge.
        task = await run_until(runner, lambda: runner.stats.steps >= 9)
        runner.stop()
        await task

        assert sorted(runner.algorithm.data) == original

    @pytest.mark.asyncio
    async def test_rerun_after_stop_finishes_sorting(self, make_runner):
        runner = make_runner(AlgorithmType.QUICK_SORT, AlgorithmSettings(array_size=25))
        original = sorted(runner.algorithm.data)

        task = await run_until(runner, lambda: runner.stats.comparisons >= 10)
        runner.stop()
        await task
        await runner.run()

        assert runner.algorithm.data == original
