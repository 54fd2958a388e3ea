#!/usr/bin/env python3
"""
audit_bitrates.py - Find movies and episodes encoded below a bitrate threshold

Read-only, Plex only (no TMDb calls). The threshold depends on the video's
resolution (bitrate_thresholds in config). Items with more than one media
file are left to audit_duplicates.py.

Usage:
    python audit_bitrates.py                 # movies and TV
    python audit_bitrates.py --movies-only
    python audit_bitrates.py --tv-only
"""

import sys
import logging
import argparse
from pathlib import Path

from rich.console import Console

from plexaudit.audits import audit_episode_bitrates, audit_movie_bitrates
from plexaudit.config import ConfigError, load_config
from plexaudit.plex import PlexClient, PlexError
from plexaudit.report import render_episode_bitrate_report, render_movie_bitrate_report

logger = logging.getLogger(__name__)


def main(argv=None):
    parser = argparse.ArgumentParser(
        description='Report Plex movies and episodes below their resolution bitrate threshold'
    )
    parser.add_argument('--config', type=Path, default=Path('config.yaml'),
                        help='Configuration file (default: config.yaml)')
    scope = parser.add_mutually_exclusive_group()
    scope.add_argument('--movies-only', action='store_true', help='Skip the TV library')
    scope.add_argument('--tv-only', action='store_true', help='Skip the movie library')
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

    print('Auditing file bitrates...')

    plex = PlexClient(config)
    console = Console(highlight=False)

    try:
        if not args.tv_only:
            movies = audit_movie_bitrates(plex, config.bitrate_thresholds)
            console.print('These movies do not meet their bitrate threshold:')
            for line in render_movie_bitrate_report(movies):
                console.print(line)

        if not args.movies_only:
            episodes = audit_episode_bitrates(plex, config.bitrate_thresholds)
            console.print('These episodes do not meet their bitrate threshold:')
            for line in render_episode_bitrate_report(episodes):
                console.print(line)
    except PlexError as e:
        logger.error(f"Could not read the Plex library: {e}")
        return 1

    return 0


if __name__ == '__main__':
    sys.exit(main())
