#!/usr/bin/env python3
"""Test suite for the audit_*.py entry points - exit codes and fatal paths"""

import sys
from pathlib import Path
from unittest.mock import MagicMock, patch

sys.path.insert(0, str(Path(__file__).parent.parent))

import audit_bitrates
import audit_duplicates
import audit_seasons
from plexaudit.config import AuditConfig, ConfigError
from plexaudit.models import CatalogMovie, MediaDescriptor
from plexaudit.plex import PlexError


def config(**kwargs):
    kwargs.setdefault('plex_token', 'p')
    kwargs.setdefault('tmdb_api_token', 't')
    return AuditConfig(**kwargs)


class TestConfigFailures:

    def test_season_audit_config_error_exits_before_network(self):
        with patch('audit_seasons.load_config', side_effect=ConfigError('No TMDb token')), \
                patch('audit_seasons.PlexClient') as plex_cls:
            assert audit_seasons.main([]) == 1
        plex_cls.assert_not_called()

    def test_season_audit_requires_tmdb(self):
        with patch('audit_seasons.load_config', return_value=config()) as load, \
                patch('audit_seasons.PlexClient') as plex_cls, \
                patch('audit_seasons.TMDbClient'):
            plex_cls.return_value.list_shows.return_value = []
            audit_seasons.main([])
        assert load.call_args[1]['require_tmdb'] is True


class TestExitCodes:

    def test_flagged_items_still_exit_zero(self, capsys):
        plex = MagicMock()
        plex.list_movies.return_value = [
            CatalogMovie('Heat', 1995, [MediaDescriptor(1, '1080'), MediaDescriptor(2, '1080')]),
        ]
        plex.list_shows.return_value = []
        with patch('audit_duplicates.load_config', return_value=config()), \
                patch('audit_duplicates.PlexClient', return_value=plex):
            assert audit_duplicates.main([]) == 0
        assert 'Heat (2 files)' in capsys.readouterr().out

    def test_plex_failure_is_fatal(self):
        plex = MagicMock()
        plex.list_movies.side_effect = PlexError('connection refused')
        with patch('audit_bitrates.load_config', return_value=config()), \
                patch('audit_bitrates.PlexClient', return_value=plex):
            assert audit_bitrates.main(['--movies-only']) == 1

    def test_bitrates_tv_only_skips_movies(self):
        plex = MagicMock()
        plex.list_shows.return_value = []
        with patch('audit_bitrates.load_config', return_value=config()), \
                patch('audit_bitrates.PlexClient', return_value=plex):
            assert audit_bitrates.main(['--tv-only']) == 0
        plex.list_movies.assert_not_called()

    def test_season_audit_uses_delay_override(self):
        with patch('audit_seasons.load_config', return_value=config()), \
                patch('audit_seasons.PlexClient'), \
                patch('audit_seasons.TMDbClient') as tmdb_cls, \
                patch('audit_seasons.RateLimiter') as limiter_cls, \
                patch('audit_seasons.audit_season_counts', return_value=[]):
            tmdb_cls.return_value.get_stats.return_value = {'found': 0, 'missing': 0, 'errors': 0}
            assert audit_seasons.main(['--delay-ms', '250']) == 0
        limiter_cls.assert_called_once_with(250)
