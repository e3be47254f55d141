"""
Comparison sorts: bubble, selection, insertion, merge, quick and heap.

Every sort works in place on ``data`` and follows the same discipline:
poll ``ctx.running`` at every loop head, count and pause after every
comparison and every swap, and poll again after each pause. A stopped
sort always leaves ``data`` as a permutation of its input.
"""

from typing import Any, Dict, List, Optional

import numpy as np

from .controller import RunContext
from .generators import generate_array_data
from .settings import AlgorithmSettings


class ArraySort:
    """Working data shared by the sorting algorithms."""

    def __init__(self, rng: Optional[np.random.Generator] = None):
        self.rng = rng
        self.data: List[int] = []
        self.completed = False
        self.clear_markers()

    def prepare(self, settings: AlgorithmSettings) -> None:
        self.data = generate_array_data(settings.array_size, settings.data_type, self.rng)
        self.completed = False
        self.clear_markers()

    def clear_markers(self) -> None:
        self.highlighted: List[int] = []
        self.comparing: List[int] = []

    async def execute(self, ctx: RunContext) -> None:
        await self.sort(ctx, self.data)
        if ctx.running:
            self.completed = True
            self.clear_markers()

    async def sort(self, ctx: RunContext, arr: List[int]) -> None:
        raise NotImplementedError

    def markers(self) -> Dict[str, Any]:
        return {}

    def view(self) -> Dict[str, Any]:
        return {
            "data": list(self.data),
            "highlighted": list(self.highlighted),
            "comparing": list(self.comparing),
            "completed": self.completed,
            **self.markers(),
        }


class BubbleSort(ArraySort):
    async def sort(self, ctx: RunContext, arr: List[int]) -> None:
        n = len(arr)
        for i in range(n - 1):
            if not ctx.running:
                return
            for j in range(n - i - 1):
                if not ctx.running:
                    return

                self.comparing = [j, j + 1]
                ctx.comparison()
                await ctx.pause()
                if not ctx.running:
                    return

                if arr[j] > arr[j + 1]:
                    arr[j], arr[j + 1] = arr[j + 1], arr[j]
                    self.highlighted = [j, j + 1]
                    ctx.swap()
                    ctx.step()
                    await ctx.pause()


class SelectionSort(ArraySort):
    def clear_markers(self) -> None:
        super().clear_markers()
        self.min_index = -1

    def markers(self) -> Dict[str, Any]:
        return {"min_index": self.min_index}

    async def sort(self, ctx: RunContext, arr: List[int]) -> None:
        n = len(arr)
        for i in range(n - 1):
            if not ctx.running:
                return

            min_idx = i
            self.min_index = min_idx
            for j in range(i + 1, n):
                if not ctx.running:
                    return

                self.comparing = [min_idx, j]
                ctx.comparison()
                await ctx.pause()
                if not ctx.running:
                    return

                if arr[j] < arr[min_idx]:
                    min_idx = j
                    self.min_index = min_idx

            if min_idx != i:
                arr[i], arr[min_idx] = arr[min_idx], arr[i]
                self.highlighted = [i, min_idx]
                ctx.swap()
                ctx.step()
                await ctx.pause()


class InsertionSort(ArraySort):
    def clear_markers(self) -> None:
        super().clear_markers()
        self.current_index = -1
        self.sorted_until = -1

    def markers(self) -> Dict[str, Any]:
        return {"current_index": self.current_index, "sorted_until": self.sorted_until}

    async def sort(self, ctx: RunContext, arr: List[int]) -> None:
        n = len(arr)
        self.sorted_until = 0 if n else -1

        for i in range(1, n):
            if not ctx.running:
                return

            key = arr[i]
            self.current_index = i
            self.highlighted = [i]
            await ctx.pause()
            if not ctx.running:
                return

            j = i - 1
            while j >= 0:
                if not ctx.running:
                    break

                self.comparing = [j, i]
                ctx.comparison()
                await ctx.pause()
                if not ctx.running:
                    break

                if arr[j] <= key:
                    break
                arr[j + 1] = arr[j]
                ctx.step()
                await ctx.pause()
                j -= 1

            # The key is held outside the array while shifting.
            arr[j + 1] = key
            if not ctx.running:
                return

            self.sorted_until = i
            ctx.step()
            await ctx.pause()


class MergeSort(ArraySort):
    def clear_markers(self) -> None:
        super().clear_markers()
        self.merge_range: List[int] = []

    def markers(self) -> Dict[str, Any]:
        return {"merge_range": list(self.merge_range)}

    async def sort(self, ctx: RunContext, arr: List[int]) -> None:
        await self._merge_sort(ctx, arr, 0, len(arr) - 1)

    async def _merge_sort(self, ctx: RunContext, arr: List[int], left: int, right: int) -> None:
        if left >= right or not ctx.running:
            return

        middle = (left + right) // 2
        await self._merge_sort(ctx, arr, left, middle)
        if not ctx.running:
            return
        await self._merge_sort(ctx, arr, middle + 1, right)
        if not ctx.running:
            return
        await self._merge(ctx, arr, left, middle, right)

    async def _merge(
        self, ctx: RunContext, arr: List[int], left: int, middle: int, right: int
    ) -> None:
        left_part = arr[left:middle + 1]
        right_part = arr[middle + 1:right + 1]
        i = j = 0
        k = left
        self.merge_range = [left, right]

        while i < len(left_part) and j < len(right_part) and ctx.running:
            self.comparing = [left + i, middle + 1 + j]
            ctx.comparison()
            await ctx.pause()
            if not ctx.running:
                break

            if left_part[i] <= right_part[j]:
                arr[k] = left_part[i]
                i += 1
            else:
                arr[k] = right_part[j]
                j += 1
            self.highlighted = [k]
            ctx.step()
            await ctx.pause()
            k += 1

        for rest, start in ((left_part, i), (right_part, j)):
            for value in rest[start:]:
                if not ctx.running:
                    break
                arr[k] = value
                self.highlighted = [k]
                ctx.step()
                await ctx.pause()
                k += 1

        if k <= right:
            # Interrupted: put the range back the way it was before this merge.
            arr[left:right + 1] = left_part + right_part
            return
        if ctx.running:
            self.merge_range = []


class QuickSort(ArraySort):
    def clear_markers(self) -> None:
        super().clear_markers()
        self.pivot_index = -1

    def markers(self) -> Dict[str, Any]:
        return {"pivot_index": self.pivot_index}

    async def sort(self, ctx: RunContext, arr: List[int]) -> None:
        await self._quick_sort(ctx, arr, 0, len(arr) - 1)

    async def _quick_sort(self, ctx: RunContext, arr: List[int], low: int, high: int) -> None:
        if low >= high or not ctx.running:
            return

        pivot = await self._partition(ctx, arr, low, high)
        if pivot is None or not ctx.running:
            return
        await self._quick_sort(ctx, arr, low, pivot - 1)
        if not ctx.running:
            return
        await self._quick_sort(ctx, arr, pivot + 1, high)

    async def _partition(
        self, ctx: RunContext, arr: List[int], low: int, high: int
    ) -> Optional[int]:
        """Lomuto partition around ``arr[high]``; None when cancelled."""
        pivot = arr[high]
        self.pivot_index = high
        i = low - 1

        for j in range(low, high):
            if not ctx.running:
                return None

            self.comparing = [j, high]
            ctx.comparison()
            await ctx.pause()
            if not ctx.running:
                return None

            if arr[j] < pivot:
                i += 1
                arr[i], arr[j] = arr[j], arr[i]
                self.highlighted = [i, j]
                ctx.swap()
                ctx.step()
                await ctx.pause()

        if not ctx.running:
            return None

        arr[i + 1], arr[high] = arr[high], arr[i + 1]
        self.highlighted = [i + 1, high]
        self.pivot_index = -1
        ctx.swap()
        await ctx.pause()
        return i + 1


class HeapSort(ArraySort):
    def clear_markers(self) -> None:
        super().clear_markers()
        self.heap_indices: List[int] = []

    def markers(self) -> Dict[str, Any]:
        return {"heap_indices": list(self.heap_indices)}

    async def sort(self, ctx: RunContext, arr: List[int]) -> None:
        n = len(arr)
        for i in range(n // 2 - 1, -1, -1):
            if not ctx.running:
                return
            await self._heapify(ctx, arr, n, i)

        for end in range(n - 1, 0, -1):
            if not ctx.running:
                return

            arr[0], arr[end] = arr[end], arr[0]
            self.highlighted = [0, end]
            ctx.swap()
            ctx.step()
            await ctx.pause()
            if not ctx.running:
                return

            await self._heapify(ctx, arr, end, 0)

    async def _heapify(self, ctx: RunContext, arr: List[int], n: int, i: int) -> None:
        largest = i
        left = 2 * i + 1
        right = 2 * i + 2

        self.heap_indices = [k for k in (i, left, right) if k < n]
        await ctx.pause()

        for child in (left, right):
            if child >= n:
                continue
            if not ctx.running:
                return
            self.comparing = [child, largest]
            ctx.comparison()
            await ctx.pause()
            if not ctx.running:
                return
            if arr[child] > arr[largest]:
                largest = child

        if largest != i and ctx.running:
            arr[i], arr[largest] = arr[largest], arr[i]
            self.highlighted = [i, largest]
            ctx.swap()
            ctx.step()
            await ctx.pause()
            if ctx.running:
                await self._heapify(ctx, arr, n, largest)
