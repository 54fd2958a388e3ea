#!/usr/bin/env python3
"""
audit_seasons.py - Compare Plex season/episode counts against TMDb

Read-only. For every show in the Plex TV section, looks the show up on TMDb
(one show at a time, lookup_delay_ms apart) and reports shows whose season or
episode count differs: usually a new season you don't have yet, or missing
episodes.

Shows listed in NOOP_TITLES / noop_titles are skipped without a lookup.

Usage:
    python audit_seasons.py                      # uses config.yaml + .env
    python audit_seasons.py --config my.yaml
    python audit_seasons.py --delay-ms 250 -v
"""

import sys
import logging
import argparse
from pathlib import Path

from rich.console import Console

from plexaudit.audits import audit_season_counts
from plexaudit.config import ConfigError, load_config
from plexaudit.plex import PlexClient, PlexError
from plexaudit.report import render_season_report
from plexaudit.tmdb import TMDbClient
from plexaudit.walker import RateLimiter, SequentialWalker

logger = logging.getLogger(__name__)


def main(argv=None):
    parser = argparse.ArgumentParser(
        description='Report shows whose Plex season/episode counts differ from TMDb'
    )
    parser.add_argument('--config', type=Path, default=Path('config.yaml'),
                        help='Configuration file (default: config.yaml)')
    parser.add_argument('--delay-ms', type=int, default=None,
                        help='Override lookup_delay_ms between TMDb lookups')
    parser.add_argument('--verbose', '-v', action='store_true',
                        help='Debug logging')
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s - %(levelname)s - %(message)s',
        stream=sys.stdout,
    )

    try:
        config = load_config(args.config, require_tmdb=True)
    except ConfigError as e:
        logger.error(f"Configuration error: {e}")
        return 1

    delay_ms = config.lookup_delay_ms if args.delay_ms is None else args.delay_ms
    if delay_ms < 0:
        logger.error(f"--delay-ms must not be negative, got {delay_ms}")
        return 1

    print('Auditing new seasons...')

    plex = PlexClient(config)
    tmdb = TMDbClient(config)
    walker = SequentialWalker(tmdb, RateLimiter(delay_ms), exclude=config.noop_titles)

    try:
        flagged = audit_season_counts(plex, walker)
    except PlexError as e:
        logger.error(f"Could not read the Plex library: {e}")
        return 1

    console = Console(highlight=False)
    console.print('Shows whose season/episode counts differ from TMDb:')
    for line in render_season_report(flagged):
        console.print(line)

    stats = tmdb.get_stats()
    logger.info(
        f"TMDb lookups: {stats['found']} found, {stats['missing']} missing, {stats['errors']} errors"
    )
    return 0


if __name__ == '__main__':
    sys.exit(main())
