"""
Linear and binary search over generated array data.

The target is always picked from the data, so a run to completion finds
it. Binary search sorts its data during ``prepare``.
"""

from typing import Any, Dict, List, Optional

import numpy as np

from .controller import RunContext
from .generators import generate_array_data
from .settings import AlgorithmSettings


class LinearSearch:
    def __init__(self, rng: Optional[np.random.Generator] = None):
        self.rng = rng
        self.data: List[int] = []
        self.target = 0
        self.current_index = -1
        self.found_index = -1
        self.search_complete = False

    def _pick_target(self) -> int:
        rng = self.rng if self.rng is not None else np.random.default_rng()
        return self.data[int(rng.integers(0, len(self.data)))]

    def prepare(self, settings: AlgorithmSettings) -> None:
        self.data = generate_array_data(settings.array_size, settings.data_type, self.rng)
        self.target = self._pick_target()
        self.current_index = -1
        self.found_index = -1
        self.search_complete = False

    async def execute(self, ctx: RunContext) -> None:
        self.search_complete = False
        self.found_index = -1

        for i, value in enumerate(self.data):
            if not ctx.running:
                return

            self.current_index = i
            ctx.comparison()
            ctx.step()
            await ctx.pause()
            if not ctx.running:
                return

            if value == self.target:
                self.found_index = i
                break

        self.search_complete = True
        self.current_index = -1

    def view(self) -> Dict[str, Any]:
        return {
            "data": list(self.data),
            "target": self.target,
            "current_index": self.current_index,
            "found_index": self.found_index,
            "search_complete": self.search_complete,
        }


class BinarySearch(LinearSearch):
    def __init__(self, rng: Optional[np.random.Generator] = None):
        super().__init__(rng)
        self.left = 0
        self.right = -1
        self.mid = -1
        self.excluded: List[int] = []

    def prepare(self, settings: AlgorithmSettings) -> None:
        super().prepare(settings)
        self.data.sort()
        self.left = 0
        self.right = len(self.data) - 1
        self.mid = -1
        self.excluded: List[int] = []

    async def execute(self, ctx: RunContext) -> None:
        self.search_complete = False
        self.found_index = -1
        self.left, self.right = 0, len(self.data) - 1
        self.excluded = []
        excluded = set()

        while self.left <= self.right:
            if not ctx.running:
                return

            self.mid = (self.left + self.right) // 2
            ctx.step()
            await ctx.pause()
            if not ctx.running:
                return

            value = self.data[self.mid]
            ctx.comparison()
            await ctx.pause()
            if not ctx.running:
                return

            if value == self.target:
                self.found_index = self.mid
                break
            if value < self.target:
                excluded.update(range(self.left, self.mid + 1))
                self.left = self.mid + 1
            else:
                excluded.update(range(self.mid, self.right + 1))
                self.right = self.mid - 1
            self.excluded = sorted(excluded)

        self.search_complete = True
        self.mid = -1

    def view(self) -> Dict[str, Any]:
        return {
            **super().view(),
            "left": self.left,
            "right": self.right,
            "mid": self.mid,
            "excluded": list(self.excluded),
        }
