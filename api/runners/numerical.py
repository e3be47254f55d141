"""
Numerical runners: Euclidean GCD and the sieve of Eratosthenes.
"""

import math
from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Optional

import numpy as np

from .controller import RunContext
from .generators import generate_gcd_operands, sieve_limit
from .settings import AlgorithmSettings


@dataclass
class DivisionStep:
    a: int
    b: int
    quotient: int
    remainder: int
    # Bezout coefficients of ``a`` so far (extended mode only).
    x: int = 0
    y: int = 0


class EuclideanGcd:
    """GCD by repeated division.

    In extended mode the run also tracks Bezout coefficients, so that
    ``a * x + b * y == gcd`` holds once complete.
    """

    def __init__(self, rng: Optional[np.random.Generator] = None, extended: bool = False):
        self.rng = rng
        self.extended = extended
        self.a = 0
        self.b = 0
        self.restart()

    def prepare(self, settings: AlgorithmSettings) -> None:
        self.a, self.b = generate_gcd_operands(settings.array_size, self.rng)
        self.restart()

    def restart(self) -> None:
        self.steps: List[DivisionStep] = []
        self.current_step_index = -1
        self.gcd = 0
        self.x = 0
        self.y = 0
        self.is_complete = False

    async def execute(self, ctx: RunContext) -> None:
        self.restart()
        old_r, r = self.a, self.b
        old_s, s = 1, 0
        old_t, t = 0, 1

        while r != 0:
            if not ctx.running:
                return

            quotient, remainder = divmod(old_r, r)
            if self.extended:
                step = DivisionStep(old_r, r, quotient, remainder, old_s, old_t)
            else:
                step = DivisionStep(old_r, r, quotient, remainder)
            self.steps.append(step)
            self.current_step_index = len(self.steps) - 1
            ctx.step()
            ctx.comparison()
            await ctx.pause()
            if not ctx.running:
                return

            old_r, r = r, remainder
            if self.extended:
                old_s, s = s, old_s - quotient * s
                old_t, t = t, old_t - quotient * t
            await ctx.pause(0.5)

        if not ctx.running:
            return
        self.gcd = old_r
        if self.extended:
            self.x, self.y = old_s, old_t
        self.is_complete = True
        self.current_step_index = -1

    def view(self) -> Dict[str, Any]:
        state = {
            "a": self.a,
            "b": self.b,
            "extended": self.extended,
            "steps": [asdict(step) for step in self.steps],
            "current_step_index": self.current_step_index,
            "gcd": self.gcd,
            "is_complete": self.is_complete,
        }
        if self.extended:
            state["coefficients"] = {"x": self.x, "y": self.y}
        return state


class SieveOfEratosthenes:
    def __init__(self, rng: Optional[np.random.Generator] = None):
        self.rng = rng
        self.limit = 0
        self.restart()

    def prepare(self, settings: AlgorithmSettings) -> None:
        self.limit = sieve_limit(settings.array_size)
        self.restart()

    def restart(self) -> None:
        # Index i holds the prime that crossed out i, 0 while unmarked.
        self.marked_by: List[int] = [0] * (self.limit + 1)
        self.current_prime = 2
        self.current_multiple = -1
        self.primes: List[int] = []
        self.multiples_marked = 0
        self.is_complete = False

    def _next_unmarked(self, start: int) -> int:
        for i in range(start, self.limit + 1):
            if not self.marked_by[i]:
                return i
        return self.limit + 1

    async def execute(self, ctx: RunContext) -> None:
        self.restart()
        bound = math.isqrt(self.limit)

        while self.current_prime <= bound:
            if not ctx.running:
                return

            prime = self.current_prime
            self.primes.append(prime)
            ctx.step()
            await ctx.pause()
            if not ctx.running:
                return

            for multiple in range(prime * prime, self.limit + 1, prime):
                if not ctx.running:
                    return
                self.current_multiple = multiple
                ctx.comparison()
                if not self.marked_by[multiple]:
                    self.marked_by[multiple] = prime
                    self.multiples_marked += 1
                await ctx.pause(0.5)

            if not ctx.running:
                return
            self.current_multiple = -1
            self.current_prime = self._next_unmarked(prime + 1)

        if not ctx.running:
            return
        self.primes.extend(
            i for i in range(self.current_prime, self.limit + 1) if not self.marked_by[i]
        )
        self.is_complete = True

    def view(self) -> Dict[str, Any]:
        return {
            "limit": self.limit,
            "numbers": [
                {"value": i, "marked_by": self.marked_by[i]}
                for i in range(2, self.limit + 1)
            ],
            "current_prime": self.current_prime,
            "current_multiple": self.current_multiple,
            "primes": list(self.primes),
            "multiples_marked": self.multiples_marked,
            "is_complete": self.is_complete,
        }
