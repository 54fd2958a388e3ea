#!/usr/bin/env python3
"""
Classification rules for the three audits

All predicates are pure apart from the warning emitted for an unknown
resolution. Multi-file items belong to the duplicate audit only; they are
never bitrate-checked.
"""

import logging
from typing import Dict, List, Optional, Sequence

from plexaudit.config import normalize_resolution
from plexaudit.models import EnrichedShow, FlaggedItem, MediaDescriptor

logger = logging.getLogger(__name__)


def parse_count(value) -> int:
    """Plex counts arrive as strings; compare them as base-10 integers"""
    if isinstance(value, int):
        return value
    return int(str(value), 10)


def has_count_mismatch(enriched: EnrichedShow) -> bool:
    """True when Plex's season or episode count disagrees with TMDb's"""
    show, reference = enriched.show, enriched.reference
    return (
        parse_count(show.season_count) != reference.seasons
        or parse_count(show.episode_count) != reference.episodes
    )


def resolve_threshold(resolution: str, thresholds: Dict[str, int]) -> Optional[int]:
    threshold = thresholds.get(normalize_resolution(resolution))
    if threshold is None:
        logger.warning(f"No bitrate threshold configured for resolution '{resolution}'")
    return threshold


def is_below_threshold(descriptor: MediaDescriptor, thresholds: Dict[str, int]) -> bool:
    """
    True when the descriptor's bitrate is under the threshold for its resolution.

    Fail-closed: a resolution missing from the table counts as below threshold.
    """
    threshold = resolve_threshold(descriptor.resolution, thresholds)
    if threshold is None:
        return True
    return descriptor.bitrate < threshold


def is_bitrate_eligible(media: Sequence[MediaDescriptor]) -> bool:
    """Only single-file items are bitrate-audited"""
    return len(media) == 1


def has_duplicate_files(media: Sequence[MediaDescriptor]) -> bool:
    return len(media) > 1


def flag_low_bitrate(title: str, media: List[MediaDescriptor],
                     thresholds: Dict[str, int]) -> Optional[FlaggedItem]:
    """
    Apply the bitrate rule to one movie or episode.

    Returns a FlaggedItem when it fails, None when it passes or isn't eligible.
    """
    if not is_bitrate_eligible(media):
        return None

    descriptor = media[0]
    if not is_below_threshold(descriptor, thresholds):
        return None

    return FlaggedItem(
        title=title,
        bitrate=descriptor.bitrate,
        resolution=descriptor.resolution,
        bitrate_threshold=thresholds.get(normalize_resolution(descriptor.resolution)),
    )
