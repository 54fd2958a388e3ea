#!/usr/bin/env python3
"""
TMDb API client for TV show reference data

Lookups never raise for a single show: a miss, an HTTP error or an unusable
payload all come back as None so the caller can skip the show and carry on.
"""

import logging
from typing import Dict, Optional

import requests

from plexaudit.config import AuditConfig
from plexaudit.models import ReferenceRecord

logger = logging.getLogger(__name__)


class TMDbClient:
    """Interface to The Movie Database API (v3, bearer token auth)"""

    def __init__(self, config: AuditConfig, session: Optional[requests.Session] = None):
        self.api_token = config.tmdb_api_token
        self.base_url = config.tmdb_url
        self.timeout = config.request_timeout
        self.session = session or requests.Session()
        self.found = 0
        self.missing = 0
        self.errors = 0

    def _get_json(self, path: str, params: Optional[Dict] = None) -> Optional[Dict]:
        """GET a TMDb endpoint, returning the decoded body or None on any failure"""
        try:
            response = self.session.get(
                f"{self.base_url}{path}",
                params=params,
                headers={
                    'accept': 'application/json',
                    'Authorization': f"Bearer {self.api_token}",
                },
                timeout=self.timeout,
            )
            response.raise_for_status()
            data = response.json()
        except requests.exceptions.Timeout:
            self.errors += 1
            logger.warning(f"TMDb API timeout for {path}")
            return None
        except requests.exceptions.RequestException as e:
            self.errors += 1
            logger.warning(f"TMDb API error for {path}: {e}")
            return None
        except ValueError as e:
            self.errors += 1
            logger.warning(f"TMDb returned invalid JSON for {path}: {e}")
            return None

        if not isinstance(data, dict):
            self.errors += 1
            logger.warning(f"TMDb returned unexpected payload for {path}")
            return None
        return data

    def find_tv_id(self, title: str, year: Optional[int] = None) -> Optional[int]:
        """Best-guess TMDb id for a show: the top search result for title + first air year"""
        params = {'query': title}
        if year:
            params['first_air_date_year'] = year

        data = self._get_json('/search/tv', params)
        if data is None:
            return None

        results = data.get('results') or []
        if data.get('total_results') == 0 or not results:
            self.missing += 1
            logger.debug(f"No TMDb results for '{title}' ({year})")
            return None

        top = results[0] if isinstance(results, list) else None
        if not isinstance(top, dict) or top.get('id') is None:
            self.errors += 1
            logger.warning(f"TMDb search for '{title}' ({year}) returned a malformed result")
            return None

        tv_id = top['id']
        logger.debug(f"TMDb: '{title}' ({year}) → {tv_id} '{top.get('name')}'")
        return tv_id

    def get_tv_details(self, tv_id: int) -> Optional[ReferenceRecord]:
        """Season/episode counts and airing status for a TMDb TV id"""
        data = self._get_json(f"/tv/{tv_id}")
        if data is None:
            return None

        # A payload that doesn't echo the id back is a "not found" shaped response
        if data.get('id') is None:
            self.missing += 1
            logger.debug(f"TMDb details for {tv_id} had no id: {data.get('status_message')}")
            return None

        self.found += 1
        return ReferenceRecord(
            external_id=data['id'],
            seasons=data.get('number_of_seasons'),
            episodes=data.get('number_of_episodes'),
            status=data.get('status'),
        )

    def get_stats(self) -> Dict:
        """Lookup outcome counters for the summary line"""
        return {
            'found': self.found,
            'missing': self.missing,
            'errors': self.errors,
        }
