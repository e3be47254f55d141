"""
Greedy coin change over a canonical coin system.

With denominations 500, 100, 50, 10, 5 and 1, taking the largest coin that
fits at every step yields the minimum number of coins.
"""

from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Optional

import numpy as np

from .controller import RunContext
from .generators import generate_coin_target
from .settings import AlgorithmSettings

COIN_DENOMINATIONS = (500, 100, 50, 10, 5, 1)


@dataclass
class Coin:
    value: int
    used: int = 0


class CoinChange:
    def __init__(self, rng: Optional[np.random.Generator] = None):
        self.rng = rng
        self.target = 0
        self.restart()

    def prepare(self, settings: AlgorithmSettings) -> None:
        self.target = generate_coin_target(self.rng)
        self.restart()

    def restart(self) -> None:
        self.coins: List[Coin] = [Coin(value) for value in COIN_DENOMINATIONS]
        self.current_coin_index = -1
        self.remaining = self.target
        self.total_coins = 0
        self.log: List[str] = []
        self.is_complete = False

    async def execute(self, ctx: RunContext) -> None:
        self.restart()

        for index, coin in enumerate(self.coins):
            if not ctx.running:
                return

            self.current_coin_index = index
            ctx.step()
            await ctx.pause()
            if not ctx.running:
                return

            count = self.remaining // coin.value
            ctx.comparison()
            if count > 0:
                coin.used = count
                self.remaining -= count * coin.value
                self.total_coins += count
                self.log.append(f"{count} x {coin.value}")
                await ctx.pause()
                for _ in range(count):
                    if not ctx.running:
                        return
                    await ctx.pause(0.3)

            if self.remaining == 0:
                break

        if ctx.running:
            self.is_complete = True
            self.current_coin_index = -1

    def view(self) -> Dict[str, Any]:
        return {
            "target": self.target,
            "coins": [asdict(coin) for coin in self.coins],
            "current_coin_index": self.current_coin_index,
            "remaining": self.remaining,
            "total_coins": self.total_coins,
            "log": list(self.log),
            "is_complete": self.is_complete,
        }
