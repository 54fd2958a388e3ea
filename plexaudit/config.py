#!/usr/bin/env python3
"""
Audit configuration: YAML file + environment overrides

Credentials normally live in a .env file (PLEX_API_TOKEN, TMDB_API_TOKEN,
NOOP_TITLES) and everything else in config.yaml. The result is an immutable
AuditConfig that is handed to the clients and the walker explicitly.
"""

import os
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, FrozenSet, Optional

import yaml
from dotenv import find_dotenv, load_dotenv

logger = logging.getLogger(__name__)

DEFAULT_PLEX_URL = 'https://127.0.0.1:32400'
DEFAULT_TMDB_URL = 'https://api.themoviedb.org/3'

# kbps required per Plex videoResolution tag
DEFAULT_BITRATE_THRESHOLDS = {
    'sd': 1500,
    '480': 1500,
    '576': 2000,
    '720': 4000,
    '1080': 8000,
    '2k': 12000,
    '4k': 20000,
}


class ConfigError(ValueError):
    """Raised when the configuration cannot be used to start an audit"""


@dataclass(frozen=True)
class AuditConfig:
    plex_token: str
    plex_url: str = DEFAULT_PLEX_URL
    plex_verify_ssl: bool = False
    movie_section: int = 4
    tv_section: int = 5
    tmdb_api_token: Optional[str] = None
    tmdb_url: str = DEFAULT_TMDB_URL
    lookup_delay_ms: int = 1000
    noop_titles: FrozenSet[str] = frozenset()
    bitrate_thresholds: Dict[str, int] = field(
        default_factory=lambda: dict(DEFAULT_BITRATE_THRESHOLDS)
    )
    request_timeout: float = 30


def normalize_resolution(resolution) -> str:
    """Resolution tags compare case-insensitively and as strings (1080 == '1080')"""
    return str(resolution).strip().lower()


def _parse_thresholds(raw) -> Dict[str, int]:
    if raw is None:
        return dict(DEFAULT_BITRATE_THRESHOLDS)
    if not isinstance(raw, dict):
        raise ConfigError("bitrate_thresholds must be a mapping of resolution -> kbps")

    thresholds = {}
    for resolution, value in raw.items():
        try:
            thresholds[normalize_resolution(resolution)] = int(value)
        except (TypeError, ValueError):
            raise ConfigError(
                f"bitrate threshold for '{resolution}' is not an integer: {value!r}"
            ) from None
    return thresholds


def _parse_titles(raw) -> FrozenSet[str]:
    if not raw:
        return frozenset()
    if isinstance(raw, str):
        raw = raw.split(',')
    return frozenset(str(t).strip() for t in raw if str(t).strip())


def read_yaml(config_path: Path) -> dict:
    """Load the YAML document, treating a missing file as empty"""
    if not config_path.exists():
        logger.debug(f"No config file at {config_path}, using defaults + environment")
        return {}

    with open(config_path, 'r', encoding='utf-8') as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"Could not parse {config_path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"{config_path} must contain a YAML mapping")
    return data


def parse_config(data: dict, env=None, require_tmdb: bool = False) -> AuditConfig:
    """
    Build an AuditConfig from a loaded YAML mapping and an environment mapping.

    Environment values win over the file for the credentials and NOOP_TITLES.
    Raises ConfigError for anything that would only fail later, mid-run.
    """
    env = os.environ if env is None else env

    plex_token = env.get('PLEX_API_TOKEN') or data.get('plex_token')
    if not plex_token:
        raise ConfigError("No Plex token: set PLEX_API_TOKEN or plex_token in config")

    tmdb_token = env.get('TMDB_API_TOKEN') or data.get('tmdb_api_token')
    if require_tmdb and not tmdb_token:
        raise ConfigError("No TMDb token: set TMDB_API_TOKEN or tmdb_api_token in config")

    noop_raw = env.get('NOOP_TITLES')
    if noop_raw is None:
        noop_raw = data.get('noop_titles')

    try:
        delay_ms = int(data.get('lookup_delay_ms', 1000))
        movie_section = int(data.get('movie_section', 4))
        tv_section = int(data.get('tv_section', 5))
        timeout = float(data.get('request_timeout', 30))
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Invalid numeric setting: {e}") from e

    if delay_ms <= 0:
        raise ConfigError(f"lookup_delay_ms must be positive, got {delay_ms}")

    verify_ssl = data.get('plex_verify_ssl', False)
    if not isinstance(verify_ssl, bool):
        raise ConfigError(f"plex_verify_ssl must be true or false, got {verify_ssl!r}")

    return AuditConfig(
        plex_token=plex_token,
        plex_url=str(data.get('plex_url', DEFAULT_PLEX_URL)).rstrip('/'),
        plex_verify_ssl=verify_ssl,
        movie_section=movie_section,
        tv_section=tv_section,
        tmdb_api_token=tmdb_token,
        tmdb_url=str(data.get('tmdb_url', DEFAULT_TMDB_URL)).rstrip('/'),
        lookup_delay_ms=delay_ms,
        noop_titles=_parse_titles(noop_raw),
        bitrate_thresholds=_parse_thresholds(data.get('bitrate_thresholds')),
        request_timeout=timeout,
    )


def load_config(config_path: Path, require_tmdb: bool = False) -> AuditConfig:
    """Load .env from the working directory, then the YAML file, and validate the combination"""
    load_dotenv(find_dotenv(usecwd=True))
    return parse_config(read_yaml(config_path), require_tmdb=require_tmdb)
