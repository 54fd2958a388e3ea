#!/usr/bin/env python3
"""
Data containers shared by the catalog client, the reference client and the audits
"""

from dataclasses import dataclass, field
from typing import List, Optional, Union


@dataclass(frozen=True)
class MediaDescriptor:
    """One encoded version of a video as reported by Plex"""
    bitrate: int  # kbps
    resolution: str  # Plex videoResolution tag: sd, 480, 720, 1080, 4k, ...
    # <Part> count; informational, the duplicate rule counts descriptors
    file_count: int = 1


@dataclass(frozen=True)
class CatalogShow:
    """A TV show with the season/episode counts Plex reports for it"""
    title: str
    year: Optional[int]
    # Plex hands these back as XML attribute strings; parsed when compared
    season_count: Union[str, int]
    episode_count: Union[str, int]
    rating_key: Optional[str] = None


@dataclass(frozen=True)
class CatalogMovie:
    title: str
    year: Optional[int]
    media: List[MediaDescriptor] = field(default_factory=list)


@dataclass(frozen=True)
class CatalogEpisode:
    show_title: str
    season_title: str
    title: str
    media: List[MediaDescriptor] = field(default_factory=list)


@dataclass(frozen=True)
class ReferenceRecord:
    """Authoritative counts for a show, from TMDb"""
    external_id: int
    seasons: Optional[int]
    episodes: Optional[int]
    status: Optional[str] = None


@dataclass(frozen=True)
class EnrichedShow:
    show: CatalogShow
    reference: ReferenceRecord


@dataclass(frozen=True)
class FlaggedItem:
    """A movie or episode whose bitrate fell short of its resolution's threshold"""
    title: str
    bitrate: int
    resolution: str
    bitrate_threshold: Optional[int]  # None when the resolution had no threshold


@dataclass(frozen=True)
class DuplicateRecord:
    title: str
    file_count: int
