#!/usr/bin/env python3
"""
audit_duplicates.py - List movies and episodes backed by more than one media file

Read-only, Plex only. Usually means an upgrade was added without removing the
old copy.

Usage:
    python audit_duplicates.py
    python audit_duplicates.py --config my.yaml
"""

import sys
import logging
import argparse
from pathlib import Path

from rich.console import Console

from plexaudit.audits import audit_duplicate_episodes, audit_duplicate_movies
from plexaudit.config import ConfigError, load_config
from plexaudit.plex import PlexClient, PlexError
from plexaudit.report import render_duplicate_episode_report, render_duplicate_movie_report

logger = logging.getLogger(__name__)


def main(argv=None):
    parser = argparse.ArgumentParser(
        description='Report Plex items that have more than one media file'
    )
    parser.add_argument('--config', type=Path, default=Path('config.yaml'),
                        help='Configuration file (default: config.yaml)')
    parser.add_argument('--verbose', '-v', action='store_true',
                        help='Debug logging')
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s - %(levelname)s - %(message)s',
        stream=sys.stdout,
    )

    try:
        config = load_config(args.config)
    except ConfigError as e:
        logger.error(f"Configuration error: {e}")
        return 1

    print('Auditing duplicate files...')

    plex = PlexClient(config)

    try:
        movies = audit_duplicate_movies(plex)
        episodes = audit_duplicate_episodes(plex)
    except PlexError as e:
        logger.error(f"Could not read the Plex library: {e}")
        return 1

    console = Console(highlight=False)
    console.print('Here are your movies that may have duplicated media files:')
    for line in render_duplicate_movie_report(movies):
        console.print(line)

    console.print('Here are your tv episodes that may have duplicated media files:')
    for line in render_duplicate_episode_report(episodes):
        console.print(line)

    return 0


if __name__ == '__main__':
    sys.exit(main())
