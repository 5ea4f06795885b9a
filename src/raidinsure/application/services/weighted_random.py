from __future__ import annotations

import random
from typing import Hashable, Mapping, TypeVar


K = TypeVar("K", bound=Hashable)


class WeightedRandomSelector:
    def __init__(self, rng: random.Random | None = None) -> None:
        self._rng = rng or random.Random()

    def choose(self, weights: Mapping[K, float]) -> K:
        candidates = [(key, float(weight)) for key, weight in weights.items() if float(weight) > 0]
        total = sum(weight for _, weight in candidates)
        if not candidates or total <= 0:
            raise ValueError("Weighted selection needs at least one positive weight")

        roll = self._rng.random() * total
        cumulative = 0.0
        for key, weight in candidates:
            cumulative += weight
            if roll < cumulative:
                return key
        return candidates[-1][0]
