from __future__ import annotations

import random
from typing import List, Optional

from config.exceptions import CategoryNotFoundError
from services.retrieval.manifest_loader import ImageStore


class Sampler:
    """Draws random, non-repeating URLs from one category of the store."""

    def __init__(self, store: ImageStore, rng: Optional[random.Random] = None):
        self.store = store
        self.rng = rng or random.Random()

    def sample(self, category: str, num: int = 1) -> List[str]:
        """Return ``min(num, len(urls))`` distinct URLs, each ending in a newline.

        Raises:
            CategoryNotFoundError: the category is not in the store.
        """
        links = self.store.get(category)
        if links is None:
            raise CategoryNotFoundError(category, self.store.categories)

        count = max(1, num)
        total = len(links)
        actual = min(count, total)

        if actual == 1 and count == 1 and actual < total:
            return [links[self.rng.randrange(total)] + "\n"]

        # Reject-and-retry; order is the order indices were first drawn
        chosen: List[int] = []
        seen = set()
        while len(chosen) < actual:
            idx = self.rng.randrange(total)
            if idx not in seen:
                seen.add(idx)
                chosen.append(idx)
        return [links[i] + "\n" for i in chosen]


__all__ = ["Sampler"]
