#!/usr/bin/env python3
"""
Plex Media Server client (catalog side of the audits)

Reads the XML library endpoints. Unlike the TMDb client, failures here are
fatal: without the catalog there is nothing to audit, so every transport,
status or parse problem is raised as PlexError.
"""

import logging
import xml.etree.ElementTree as ET
from typing import List, Optional

import requests
import urllib3

from plexaudit.config import AuditConfig, normalize_resolution
from plexaudit.models import CatalogEpisode, CatalogMovie, CatalogShow, MediaDescriptor

logger = logging.getLogger(__name__)


class PlexError(RuntimeError):
    """The Plex server could not be reached or returned something unusable"""


def _int_attr(element: ET.Element, name: str) -> Optional[int]:
    value = element.get(name)
    if value is None or value == '':
        return None
    try:
        return int(value, 10)
    except ValueError:
        return None


def parse_media(video: ET.Element) -> List[MediaDescriptor]:
    """Extract one MediaDescriptor per <Media> child of a <Video> element"""
    descriptors = []
    for media in video.findall('Media'):
        bitrate = _int_attr(media, 'bitrate')
        if bitrate is None:
            # Missing bitrate fails every threshold rather than passing silently
            logger.debug(f"No bitrate on media for '{video.get('title')}', treating as 0")
            bitrate = 0
        resolution = media.get('videoResolution')
        descriptors.append(MediaDescriptor(
            bitrate=bitrate,
            resolution=normalize_resolution(resolution) if resolution else 'unknown',
            file_count=max(1, len(media.findall('Part'))),
        ))
    return descriptors


class PlexClient:
    """Thin XML client for the handful of library endpoints the audits need"""

    def __init__(self, config: AuditConfig, session: Optional[requests.Session] = None):
        self.base_url = config.plex_url
        self.token = config.plex_token
        self.verify_ssl = config.plex_verify_ssl
        self.timeout = config.request_timeout
        self.movie_section = config.movie_section
        self.tv_section = config.tv_section
        self.session = session or requests.Session()

        if not self.verify_ssl:
            # Local servers typically serve a self-signed certificate
            urllib3.disable_warnings(urllib3.exceptions.InsecureRequestWarning)

    def _get_xml(self, path: str) -> ET.Element:
        url = f"{self.base_url}{path}"
        logger.debug(f"Plex GET {path}")
        try:
            response = self.session.get(
                url,
                params={'X-Plex-Token': self.token},
                headers={'Accept': 'application/xml'},
                timeout=self.timeout,
                verify=self.verify_ssl,
            )
            response.raise_for_status()
        except requests.exceptions.RequestException as e:
            raise PlexError(f"Plex request failed for {path}: {e}") from e

        try:
            return ET.fromstring(response.content)
        except ET.ParseError as e:
            raise PlexError(f"Plex returned invalid XML for {path}: {e}") from e

    def list_shows(self, section: Optional[int] = None) -> List[CatalogShow]:
        """Every show in the TV section with Plex's own season/episode counts"""
        section = self.tv_section if section is None else section
        root = self._get_xml(f"/library/sections/{section}/all")

        shows = [
            CatalogShow(
                title=d.get('title', ''),
                year=_int_attr(d, 'year'),
                season_count=d.get('childCount', '0'),
                episode_count=d.get('leafCount', '0'),
                rating_key=d.get('ratingKey'),
            )
            for d in root.iter('Directory')
        ]
        logger.info(f"Loaded {len(shows)} shows from Plex section {section}")
        return shows

    def list_movies(self, section: Optional[int] = None) -> List[CatalogMovie]:
        section = self.movie_section if section is None else section
        root = self._get_xml(f"/library/sections/{section}/all")

        movies = [
            CatalogMovie(
                title=v.get('title', ''),
                year=_int_attr(v, 'year'),
                media=parse_media(v),
            )
            for v in root.iter('Video')
        ]
        logger.info(f"Loaded {len(movies)} movies from Plex section {section}")
        return movies

    def list_episodes(self, show: CatalogShow) -> List[CatalogEpisode]:
        """All episodes of a show, across seasons, in Plex's order"""
        if not show.rating_key:
            raise PlexError(f"Show '{show.title}' has no ratingKey to list episodes from")

        root = self._get_xml(f"/library/metadata/{show.rating_key}/allLeaves")
        return [
            CatalogEpisode(
                show_title=v.get('grandparentTitle') or show.title,
                season_title=v.get('parentTitle', ''),
                title=v.get('title', ''),
                media=parse_media(v),
            )
            for v in root.iter('Video')
        ]

    def list_video_descriptors(self, rating_key: str) -> List[MediaDescriptor]:
        """
        Media descriptors for a single movie or episode.

        The audits read descriptors from the listing endpoints instead; this is
        for callers holding only a ratingKey.
        """
        root = self._get_xml(f"/library/metadata/{rating_key}")
        descriptors = []
        for video in root.iter('Video'):
            descriptors.extend(parse_media(video))
        return descriptors
