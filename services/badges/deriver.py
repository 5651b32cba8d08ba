# services/badges/deriver.py
from __future__ import annotations

import logging
from typing import Any, Iterable, List, Optional, Sequence

from domain.car_context import CertificationBadge, NormalizedSpecs
from domain.dealer_input import DealerInput
from .strategies import BadgeStrategy, default_strategies

logger = logging.getLogger(__name__)


def merge_badges(batches: Iterable[Iterable[CertificationBadge]]) -> List[CertificationBadge]:
    """
    Collapses badges by id. The first one seen wins, so batch order is priority order.
    Duplicates inside one batch collapse too.
    """
    seen = {}
    for batch in batches:
        for badge in batch:
            if badge.id not in seen:
                seen[badge.id] = badge
    return list(seen.values())


class CertificationDeriver:
    def __init__(self, strategies: Optional[Sequence[BadgeStrategy]] = None):
        self.strategies = list(strategies) if strategies is not None else default_strategies()

    def derive(self, payload: Any, specs: NormalizedSpecs, dealer_input: DealerInput) -> List[CertificationBadge]:
        batches: List[List[CertificationBadge]] = []
        for strategy in self.strategies:
            name = getattr(strategy, "name", type(strategy).__name__)
            try:
                found = list(strategy.detect(payload, specs, dealer_input) or [])
            except Exception as e:
                # אסטרטגיה שנכשלה לא מפילה את האחרות
                logger.warning("badge strategy %s failed: %s", name, e, exc_info=True)
                continue
            logger.debug("badge strategy %s found %d badges", name, len(found))
            batches.append(found)
        return merge_badges(batches)
