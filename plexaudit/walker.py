#!/usr/bin/env python3
"""
Rate-limited sequential enrichment of catalog shows

Shows are looked up strictly one at a time. The delay is paid *before* each
lookup, so a show that short-circuits on a miss still costs exactly one delay
and a walk over N shows takes at least N * delay.
"""

import time
import logging
from collections import Counter
from typing import Callable, Iterable, List, Optional

from plexaudit.models import CatalogShow, EnrichedShow

logger = logging.getLogger(__name__)


class RateLimiter:
    """Fixed pause between consecutive remote calls"""

    def __init__(self, delay_ms: int, sleep: Callable[[float], None] = time.sleep):
        if delay_ms < 0:
            raise ValueError(f"delay_ms must not be negative, got {delay_ms}")
        self.delay_ms = delay_ms
        self._sleep = sleep
        self.waits = 0

    def wait(self):
        self.waits += 1
        self._sleep(self.delay_ms / 1000)


class SequentialWalker:
    """
    Pair each catalog show with its TMDb reference record, one show at a time.

    `reference` needs find_tv_id(title, year) and get_tv_details(id), both
    returning None on failure. Excluded titles are skipped before any delay or
    lookup. Every show ends up counted in exactly one of: excluded, missing_id,
    missing_details, enriched.
    """

    def __init__(self, reference, limiter: RateLimiter, exclude: Iterable[str] = ()):
        self.reference = reference
        self.limiter = limiter
        self.exclude = frozenset(exclude)
        self.stats = Counter()

    def enrich(self, show: CatalogShow) -> Optional[EnrichedShow]:
        """Look up one show. Pays one delay. Returns None if either lookup comes back empty."""
        self.limiter.wait()
        logger.info(f"Processing: {show.title}...")

        tv_id = self.reference.find_tv_id(show.title, show.year)
        if tv_id is None:
            self.stats['missing_id'] += 1
            logger.warning(f"Failed to find a TMDb id for '{show.title}' ({show.year}), skipping")
            return None

        details = self.reference.get_tv_details(tv_id)
        if details is None:
            self.stats['missing_details'] += 1
            logger.warning(
                f"Failed to get TMDb details for '{show.title}' ({show.year}), id {tv_id}, skipping"
            )
            return None

        self.stats['enriched'] += 1
        return EnrichedShow(show=show, reference=details)

    def walk(self, shows: Iterable[CatalogShow]) -> List[EnrichedShow]:
        """Enrich shows in input order, dropping (with a diagnostic) the ones that fail"""
        enriched = []
        for show in shows:
            if show.title in self.exclude:
                self.stats['excluded'] += 1
                logger.info(f"Skipping excluded title: {show.title}")
                continue

            result = self.enrich(show)
            if result is not None:
                enriched.append(result)

        logger.info(
            f"Walk complete: {self.stats['enriched']} enriched, "
            f"{self.stats['missing_id'] + self.stats['missing_details']} without reference data, "
            f"{self.stats['excluded']} excluded"
        )
        return enriched
