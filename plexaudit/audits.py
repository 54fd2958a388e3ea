#!/usr/bin/env python3
"""
The three library audits: season counts, bitrates, duplicate files

Each function takes already-built collaborators (Plex client, walker,
threshold table) and returns the data the report renderer needs.
"""

import logging
from typing import Dict, Iterable, List, Tuple

from plexaudit.grouping import NestedGroup, group_by_show_season, sort_by_bitrate
from plexaudit.models import CatalogEpisode, DuplicateRecord, EnrichedShow, FlaggedItem
from plexaudit.policy import flag_low_bitrate, has_count_mismatch, has_duplicate_files
from plexaudit.walker import SequentialWalker

logger = logging.getLogger(__name__)


def audit_season_counts(plex, walker: SequentialWalker) -> List[EnrichedShow]:
    """Shows whose Plex season/episode counts differ from TMDb's, in library order"""
    shows = plex.list_shows()
    enriched = walker.walk(shows)
    flagged = [item for item in enriched if has_count_mismatch(item)]
    logger.info(f"{len(flagged)} of {len(enriched)} enriched shows have mismatched counts")
    return flagged


def iter_library_episodes(plex) -> Iterable[CatalogEpisode]:
    """Every episode of every show. Plex only, so no rate limiting."""
    for show in plex.list_shows():
        yield from plex.list_episodes(show)


def _skip_multi_file(kind: str, title: str, media) -> bool:
    if has_duplicate_files(media):
        logger.info(
            f"Skipping bitrate check for {kind} '{title}': "
            f"{len(media)} media files (see duplicate audit)"
        )
        return True
    if not media:
        logger.debug(f"Skipping {kind} '{title}': no media")
        return True
    return False


def audit_movie_bitrates(plex, thresholds: Dict[str, int]) -> List[FlaggedItem]:
    """Single-file movies under their resolution's bitrate, lowest bitrate first"""
    flagged = []
    for movie in plex.list_movies():
        if _skip_multi_file('movie', movie.title, movie.media):
            continue
        item = flag_low_bitrate(movie.title, movie.media, thresholds)
        if item is not None:
            flagged.append(item)
    return sort_by_bitrate(flagged)


def flag_episode_bitrates(episodes: Iterable[CatalogEpisode],
                          thresholds: Dict[str, int]) -> NestedGroup:
    def flagged_rows() -> Iterable[Tuple[str, str, FlaggedItem]]:
        for episode in episodes:
            label = f"{episode.show_title} / {episode.season_title} / {episode.title}"
            if _skip_multi_file('episode', label, episode.media):
                continue
            item = flag_low_bitrate(episode.title, episode.media, thresholds)
            if item is not None:
                yield episode.show_title, episode.season_title, item

    return group_by_show_season(flagged_rows())


def audit_episode_bitrates(plex, thresholds: Dict[str, int]) -> NestedGroup:
    """Single-file episodes under threshold, grouped show → season"""
    return flag_episode_bitrates(iter_library_episodes(plex), thresholds)


def audit_duplicate_movies(plex) -> List[DuplicateRecord]:
    return [
        DuplicateRecord(title=movie.title, file_count=len(movie.media))
        for movie in plex.list_movies()
        if has_duplicate_files(movie.media)
    ]


def group_duplicate_episodes(episodes: Iterable[CatalogEpisode]) -> NestedGroup:
    return group_by_show_season(
        (e.show_title, e.season_title, DuplicateRecord(title=e.title, file_count=len(e.media)))
        for e in episodes
        if has_duplicate_files(e.media)
    )


def audit_duplicate_episodes(plex) -> NestedGroup:
    """Episodes with more than one media file, grouped show → season"""
    return group_duplicate_episodes(iter_library_episodes(plex))
