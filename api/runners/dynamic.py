"""
Dynamic programming runners: memoised Fibonacci, 0/1 knapsack and LCS.
"""

from dataclasses import asdict
from typing import Any, Dict, List, Optional, Set

import numpy as np

from .controller import RunContext
from .generators import (
    KnapsackItem,
    generate_knapsack_items,
    generate_lcs_strings,
    knapsack_capacity,
)
from .settings import AlgorithmSettings

FIBONACCI_MAX_N = 20


class Fibonacci:
    """Top-down Fibonacci with a memo table."""

    def __init__(self, rng: Optional[np.random.Generator] = None):
        self.rng = rng
        self.n = 0
        self.restart()

    def prepare(self, settings: AlgorithmSettings) -> None:
        self.n = min(settings.array_size, FIBONACCI_MAX_N)
        self.restart()

    def restart(self) -> None:
        self.values: List[int] = [-1] * (self.n + 1)
        self.memo: Dict[int, int] = {}
        self.memoized: Set[int] = set()
        self.calculating: List[int] = []
        self.current_index = -1
        self.result: Optional[int] = None

    async def execute(self, ctx: RunContext) -> None:
        self.restart()
        value = await self._fib(ctx, self.n)
        if ctx.running and value is not None:
            self.result = value
            self.current_index = -1

    async def _fib(self, ctx: RunContext, n: int) -> Optional[int]:
        """Return F(n), or None once the run has been stopped."""
        if not ctx.running:
            return None

        self.current_index = n
        self.calculating.append(n)
        ctx.step()
        await ctx.pause()
        if not ctx.running:
            return None

        if n in self.memo:
            self.memoized.add(n)
            self.calculating.remove(n)
            value = self.memo[n]
            await ctx.pause()
            return value if ctx.running else None

        ctx.comparison()
        if n <= 1:
            value = n
        else:
            await ctx.pause()
            first = await self._fib(ctx, n - 1)
            if first is None:
                return None
            second = await self._fib(ctx, n - 2)
            if second is None or not ctx.running:
                return None
            value = first + second
            ctx.step()

        self.values[n] = value
        self.memo[n] = value
        self.calculating.remove(n)
        ctx.swap()
        await ctx.pause()
        return value if ctx.running else None

    def view(self) -> Dict[str, Any]:
        return {
            "n": self.n,
            "values": list(self.values),
            "memoized": sorted(self.memoized),
            "calculating": list(self.calculating),
            "current_index": self.current_index,
            "memo_size": len(self.memo),
            "result": self.result,
        }


class Knapsack:
    """0/1 knapsack by bottom-up table fill, then backtracking the choice."""

    def __init__(self, rng: Optional[np.random.Generator] = None):
        self.rng = rng
        self.items: List[KnapsackItem] = []
        self.capacity = 0
        self.restart()

    def prepare(self, settings: AlgorithmSettings) -> None:
        self.capacity = knapsack_capacity(settings.array_size)
        self.items = generate_knapsack_items(settings.array_size, self.rng)
        self.restart()

    def restart(self) -> None:
        self.table: List[List[int]] = [
            [0] * (self.capacity + 1) for _ in range(len(self.items) + 1)
        ]
        self.current_row = -1
        self.current_col = -1
        self.selected_items: List[int] = []
        self.total_value = 0
        self.total_weight = 0
        self.is_complete = False

    async def execute(self, ctx: RunContext) -> None:
        self.restart()
        await self._fill(ctx)
        if not ctx.running:
            return
        await self._backtrack(ctx)

    async def _fill(self, ctx: RunContext) -> None:
        table = self.table
        for i in range(1, len(self.items) + 1):
            item = self.items[i - 1]
            for w in range(1, self.capacity + 1):
                if not ctx.running:
                    return

                self.current_row, self.current_col = i, w
                ctx.step()
                await ctx.pause()
                if not ctx.running:
                    return

                if item.weight <= w:
                    ctx.comparison()
                    value = max(table[i - 1][w - item.weight] + item.value, table[i - 1][w])
                else:
                    value = table[i - 1][w]
                if value != table[i][w]:
                    table[i][w] = value
                    ctx.swap()
                await ctx.pause(0.3)

        if ctx.running:
            self.current_row = self.current_col = -1

    async def _backtrack(self, ctx: RunContext) -> None:
        w = self.capacity
        self.total_value = self.table[len(self.items)][self.capacity]

        for i in range(len(self.items), 0, -1):
            if not ctx.running:
                return

            self.current_row, self.current_col = i, w
            await ctx.pause()
            if not ctx.running:
                return

            if self.table[i][w] != self.table[i - 1][w]:
                item = self.items[i - 1]
                self.selected_items.append(item.id)
                self.total_weight += item.weight
                w -= item.weight
                ctx.step()

        self.selected_items.sort()
        self.is_complete = True
        self.current_row = self.current_col = -1

    def view(self) -> Dict[str, Any]:
        return {
            "items": [asdict(item) for item in self.items],
            "capacity": self.capacity,
            "table": [list(row) for row in self.table],
            "current_row": self.current_row,
            "current_col": self.current_col,
            "selected_items": list(self.selected_items),
            "total_value": self.total_value,
            "total_weight": self.total_weight,
            "is_complete": self.is_complete,
        }


class LongestCommonSubsequence:
    def __init__(self, rng: Optional[np.random.Generator] = None):
        self.rng = rng
        self.first = ""
        self.second = ""
        self.restart()

    def prepare(self, settings: AlgorithmSettings) -> None:
        self.first, self.second = generate_lcs_strings(settings.array_size, self.rng)
        self.restart()

    def restart(self) -> None:
        self.table: List[List[int]] = [
            [0] * (len(self.second) + 1) for _ in range(len(self.first) + 1)
        ]
        self.current_row = -1
        self.current_col = -1
        self.backtrack_path: List[List[int]] = []
        self.first_matches: List[int] = []
        self.second_matches: List[int] = []
        self.lcs_length = 0
        self.lcs = ""
        self.is_complete = False

    async def execute(self, ctx: RunContext) -> None:
        self.restart()
        await self._fill(ctx)
        if not ctx.running:
            return
        await self._backtrack(ctx)

    async def _fill(self, ctx: RunContext) -> None:
        table = self.table
        for i in range(1, len(self.first) + 1):
            for j in range(1, len(self.second) + 1):
                if not ctx.running:
                    return

                self.current_row, self.current_col = i, j
                ctx.step()
                await ctx.pause()
                if not ctx.running:
                    return

                ctx.comparison()
                if self.first[i - 1] == self.second[j - 1]:
                    value = table[i - 1][j - 1] + 1
                else:
                    value = max(table[i - 1][j], table[i][j - 1])
                if value != table[i][j]:
                    table[i][j] = value
                    ctx.swap()
                await ctx.pause(0.5)

        if not ctx.running:
            return
        self.lcs_length = table[len(self.first)][len(self.second)]
        self.current_row = self.current_col = -1

    async def _backtrack(self, ctx: RunContext) -> None:
        i, j = len(self.first), len(self.second)
        chars: List[str] = []

        while i > 0 and j > 0:
            if not ctx.running:
                return

            self.current_row, self.current_col = i, j
            self.backtrack_path.append([i, j])
            await ctx.pause()
            if not ctx.running:
                return

            if self.first[i - 1] == self.second[j - 1]:
                chars.append(self.first[i - 1])
                self.first_matches.append(i - 1)
                self.second_matches.append(j - 1)
                i -= 1
                j -= 1
            elif self.table[i - 1][j] > self.table[i][j - 1]:
                i -= 1
            else:
                j -= 1
            ctx.step()

        self.lcs = "".join(reversed(chars))
        self.is_complete = True
        self.current_row = self.current_col = -1

    def view(self) -> Dict[str, Any]:
        return {
            "first": self.first,
            "second": self.second,
            "table": [list(row) for row in self.table],
            "current_row": self.current_row,
            "current_col": self.current_col,
            "backtrack_path": [list(cell) for cell in self.backtrack_path],
            "first_matches": sorted(self.first_matches),
            "second_matches": sorted(self.second_matches),
            "lcs_length": self.lcs_length,
            "lcs": self.lcs,
            "is_complete": self.is_complete,
        }
