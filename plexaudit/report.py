#!/usr/bin/env python3
"""
Human-readable report lines for the audits

Lines carry rich console markup (colour on bitrates); print them through
rich.console.Console. Titles are escaped so a "[1080p]" in a title stays text.

Movie bitrate report:
    Movie with an extra long name that goes all the way out here - 920
    Movie with a shorter name                                    - 2110

Episode bitrate report:
    Adventure Time
    └── Season 1
        └── Tree Trunks                    2855
        └── Memories of Boom Boom Mountain 2698
"""

from typing import List, Optional, Sequence

from rich.markup import escape

from plexaudit.grouping import NestedGroup, sort_by_bitrate
from plexaudit.models import DuplicateRecord, EnrichedShow, FlaggedItem

EMPTY_REPORT = 'Nothing to report.'

STYLE_CRITICAL = 'bold bright_white on bright_red'
STYLE_WARNING = 'bold bright_black on bright_yellow'
STYLE_NOTICE = 'bold bright_white on bright_blue'


def bitrate_style(bitrate: int, threshold: Optional[int]) -> str:
    """Red under half the target, yellow under three quarters, blue otherwise"""
    if threshold is None or bitrate < threshold / 2:
        return STYLE_CRITICAL
    if bitrate < (threshold * 3) / 4:
        return STYLE_WARNING
    return STYLE_NOTICE


def decorate_bitrate(bitrate: int, threshold: Optional[int]) -> str:
    style = bitrate_style(bitrate, threshold)
    return f"[{style}]{bitrate}[/]"


def render_movie_bitrate_report(items: Sequence[FlaggedItem]) -> List[str]:
    if not items:
        return [EMPTY_REPORT]

    items = sort_by_bitrate(items)
    width = max(len(item.title) for item in items)
    return [
        f"{escape(item.title.ljust(width))} - {decorate_bitrate(item.bitrate, item.bitrate_threshold)}"
        for item in items
    ]


def render_episode_bitrate_report(groups: NestedGroup) -> List[str]:
    if not groups:
        return [EMPTY_REPORT]

    lines = []
    for show, seasons in groups.items():
        lines.append(escape(show))
        for season, episodes in seasons.items():
            lines.append(f"└── {escape(season)}")
            width = max(len(episode.title) for episode in episodes)
            for episode in episodes:
                lines.append(
                    f"    └── {escape(episode.title.ljust(width))} "
                    f"{decorate_bitrate(episode.bitrate, episode.bitrate_threshold)}"
                )
        lines.append('')
    return lines


def render_season_report(flagged: Sequence[EnrichedShow]) -> List[str]:
    """One line per show whose counts disagree with TMDb"""
    if not flagged:
        return [EMPTY_REPORT]

    width = max(len(item.show.title) for item in flagged)
    lines = []
    for item in flagged:
        show, ref = item.show, item.reference
        status = ' ' + escape(f"[{ref.status}]") if ref.status else ''
        lines.append(
            f"{escape(show.title.ljust(width))}  "
            f"Plex: {show.season_count} seasons / {show.episode_count} episodes  "
            f"TMDb: {ref.seasons} seasons / {ref.episodes} episodes{status}"
        )
    return lines


def render_duplicate_movie_report(records: Sequence[DuplicateRecord]) -> List[str]:
    if not records:
        return [EMPTY_REPORT]
    return [f"{escape(r.title)} ({r.file_count} files)" for r in records]


def render_duplicate_episode_report(groups: NestedGroup) -> List[str]:
    if not groups:
        return [EMPTY_REPORT]

    lines = []
    for show, seasons in groups.items():
        lines.append(escape(show))
        for season, records in seasons.items():
            lines.append(f"└── {escape(season)}")
            for record in records:
                lines.append(f"    └── {escape(record.title)} ({record.file_count} files)")
        lines.append('')
    return lines
