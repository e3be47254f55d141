"""
Tests for the dynamic programming, greedy and numerical runners.
"""

import asyncio
import itertools
import math

import numpy as np
import pytest

from api.runners.generators import generate_gcd_operands, knapsack_capacity, sieve_limit
from api.runners.registry import AlgorithmType
from api.runners.settings import AlgorithmSettings


def fib(n):
    a, b = 0, 1
    for _ in range(n):
        a, b = b, a + b
    return a


def is_subsequence(sub, text):
    it = iter(text)
    return all(ch in it for ch in sub)


def primes_up_to(limit):
    return [n for n in range(2, limit + 1) if all(n % d for d in range(2, math.isqrt(n) + 1))]


class TestFibonacci:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("array_size, n", [(5, 5), (12, 12), (20, 20), (50, 20)])
    async def test_computes_fibonacci_number(self, make_runner, array_size, n):
        runner = make_runner(AlgorithmType.FIBONACCI, AlgorithmSettings(array_size=array_size))

        await runner.run()

        fibonacci = runner.algorithm
        assert fibonacci.n == n
        assert fibonacci.result == fib(n)
        assert fibonacci.values == [fib(i) for i in range(n + 1)]

    @pytest.mark.asyncio
    async def test_memo_is_reused(self, make_runner):
        runner = make_runner(AlgorithmType.FIBONACCI, AlgorithmSettings(array_size=10))

        await runner.run()

        # Every F(i) for 1 <= i <= n - 2 is looked up again after being computed.
        assert runner.algorithm.memoized == set(range(1, 9))
        assert runner.algorithm.calculating == []

    @pytest.mark.asyncio
    async def test_each_stored_value_counts_as_a_swap(self, make_runner):
        runner = make_runner(AlgorithmType.FIBONACCI, AlgorithmSettings(array_size=10))

        await runner.run()

        # F(0) through F(10) are each written to the table exactly once.
        assert runner.stats.swaps == 11

    @pytest.mark.asyncio
    async def test_stop_inside_recursion(self, make_runner):
        runner = make_runner(AlgorithmType.FIBONACCI, AlgorithmSettings(array_size=20))

        task = asyncio.create_task(runner.run())
        await asyncio.sleep(0)
        while runner.is_running and runner.stats.steps < 10:
            await asyncio.sleep(0)
        runner.stop()
        await task

        assert runner.algorithm.result is None
        assert not runner.is_running


class TestKnapsack:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("seed", range(5))
    async def test_matches_brute_force(self, make_runner, seed):
        runner = make_runner(AlgorithmType.KNAPSACK, AlgorithmSettings(array_size=18))
        runner.algorithm.rng = np.random.default_rng(seed)
        runner.reset()

        await runner.run()

        knapsack = runner.algorithm
        items = knapsack.items
        best = max(
            sum(item.value for item in combo)
            for r in range(len(items) + 1)
            for combo in itertools.combinations(items, r)
            if sum(item.weight for item in combo) <= knapsack.capacity
        )
        chosen = [item for item in items if item.id in knapsack.selected_items]

        assert knapsack.is_complete
        assert knapsack.total_value == best
        assert sum(item.value for item in chosen) == best
        assert sum(item.weight for item in chosen) == knapsack.total_weight
        assert knapsack.total_weight <= knapsack.capacity

    @pytest.mark.asyncio
    async def test_table_updates_count_as_swaps(self, make_runner):
        runner = make_runner(AlgorithmType.KNAPSACK, AlgorithmSettings(array_size=12))

        await runner.run()

        filled = sum(1 for row in runner.algorithm.table for cell in row if cell)
        assert filled > 0
        assert runner.stats.swaps == filled

    def test_capacity_and_items(self, make_runner):
        runner = make_runner(AlgorithmType.KNAPSACK, AlgorithmSettings(array_size=12))
        knapsack = runner.algorithm
        assert knapsack.capacity == knapsack_capacity(12) == 12
        assert len(knapsack.items) == 4
        densities = [item.value_per_weight for item in knapsack.items]
        assert densities == sorted(densities, reverse=True)
        assert [item.id for item in knapsack.items] == list(range(4))


class TestLcs:
    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "first, second, length",
        [("AGGTAB", "GXTXAYB", 4), ("ABCDGH", "AEDFHR", 3), ("HELLO", "WORLD", 1)],
    )
    async def test_known_pairs(self, make_runner, first, second, length):
        runner = make_runner(AlgorithmType.LCS)
        lcs = runner.algorithm
        lcs.first, lcs.second = first, second

        await runner.run()

        assert lcs.is_complete
        assert lcs.lcs_length == length
        assert len(lcs.lcs) == length
        assert is_subsequence(lcs.lcs, first)
        assert is_subsequence(lcs.lcs, second)
        assert runner.stats.comparisons == len(first) * len(second)

    @pytest.mark.asyncio
    async def test_table_updates_count_as_swaps(self, make_runner):
        runner = make_runner(AlgorithmType.LCS)
        lcs = runner.algorithm
        lcs.first, lcs.second = "AGGTAB", "GXTXAYB"

        await runner.run()

        filled = sum(1 for row in lcs.table for cell in row if cell)
        assert filled > 0
        assert runner.stats.swaps == filled

    def test_short_arrays_truncate_strings(self, make_runner):
        runner = make_runner(AlgorithmType.LCS, AlgorithmSettings(array_size=6))
        assert len(runner.algorithm.first) <= 4
        assert len(runner.algorithm.second) <= 4


class TestCoinChange:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("target, coins", [(109, 6), (15, 2), (66, 4), (99, 10)])
    async def test_greedy_coin_count(self, make_runner, target, coins):
        runner = make_runner(AlgorithmType.COIN_CHANGE)
        change = runner.algorithm
        change.target = target

        await runner.run()

        assert change.is_complete
        assert change.remaining == 0
        assert change.total_coins == coins
        assert sum(c.value * c.used for c in change.coins) == target

    def test_target_range(self, make_runner):
        for seed in range(20):
            runner = make_runner(AlgorithmType.COIN_CHANGE)
            runner.algorithm.rng = np.random.default_rng(seed)
            runner.reset()
            assert 15 <= runner.algorithm.target <= 109


class TestEuclideanGcd:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("seed", range(6))
    async def test_gcd(self, make_runner, seed):
        runner = make_runner(AlgorithmType.EUCLIDEAN_GCD)
        runner.algorithm.rng = np.random.default_rng(seed)
        runner.reset()

        await runner.run()

        gcd = runner.algorithm
        assert gcd.is_complete
        assert gcd.gcd == math.gcd(gcd.a, gcd.b)
        assert runner.stats.steps == len(gcd.steps)
        assert "coefficients" not in runner.view()["state"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("a, b", [(240, 46), (99, 78), (17, 5), (60, 15)])
    async def test_extended_mode_bezout(self, make_runner, a, b):
        runner = make_runner(AlgorithmType.EUCLIDEAN_GCD, extended=True)
        gcd = runner.algorithm
        gcd.a, gcd.b = a, b

        await runner.run()

        assert gcd.gcd == math.gcd(a, b)
        assert a * gcd.x + b * gcd.y == gcd.gcd
        assert runner.view()["state"]["coefficients"] == {"x": gcd.x, "y": gcd.y}

    @pytest.mark.asyncio
    async def test_steps_carry_coefficients_only_in_extended_mode(self, make_runner):
        plain = make_runner(AlgorithmType.EUCLIDEAN_GCD)
        extended = make_runner(AlgorithmType.EUCLIDEAN_GCD, extended=True)
        for runner in (plain, extended):
            runner.algorithm.a, runner.algorithm.b = 240, 46
            await runner.run()

        assert all(step.x == 0 and step.y == 0 for step in plain.algorithm.steps)
        first = extended.algorithm.steps[0]
        assert (first.x, first.y) == (1, 0)
        assert [(s.a, s.b) for s in plain.algorithm.steps] == [(s.a, s.b) for s in extended.algorithm.steps]

    def test_operands_larger_first(self):
        rng = np.random.default_rng(9)
        for array_size in (5, 20, 50):
            a, b = generate_gcd_operands(array_size, rng)
            assert a >= b >= 5


class TestSieve:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("array_size", [5, 20, 37, 50])
    async def test_finds_all_primes(self, make_runner, array_size):
        runner = make_runner(AlgorithmType.SIEVE_OF_ERATOSTHENES, AlgorithmSettings(array_size=array_size))

        await runner.run()

        sieve = runner.algorithm
        assert sieve.limit == sieve_limit(array_size)
        assert sieve.is_complete
        assert sieve.primes == primes_up_to(sieve.limit)

    @pytest.mark.asyncio
    async def test_composites_marked_by_smallest_prime_factor(self, make_runner):
        runner = make_runner(AlgorithmType.SIEVE_OF_ERATOSTHENES, AlgorithmSettings(array_size=50))

        await runner.run()

        sieve = runner.algorithm
        assert sieve.limit == 100
        assert sieve.marked_by[91] == 7
        assert sieve.marked_by[49] == 7
        assert sieve.marked_by[30] == 2
        assert sieve.marked_by[97] == 0
