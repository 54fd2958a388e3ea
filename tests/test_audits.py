#!/usr/bin/env python3
"""Test suite for plexaudit/audits.py - the three audits end to end with fake sources"""

import logging

import pytest
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from plexaudit.audits import (
    audit_duplicate_episodes, audit_duplicate_movies, audit_episode_bitrates,
    audit_movie_bitrates, audit_season_counts,
)
from plexaudit.models import (
    CatalogEpisode, CatalogMovie, CatalogShow, DuplicateRecord, MediaDescriptor,
    ReferenceRecord,
)
from plexaudit.walker import RateLimiter, SequentialWalker

THRESHOLDS = {'720': 4000, '1080': 8000}


class FakePlex:

    def __init__(self, shows=(), episodes=None, movies=()):
        self.shows = list(shows)
        self.episodes = episodes or {}
        self.movies = list(movies)

    def list_shows(self):
        return self.shows

    def list_episodes(self, show):
        return self.episodes.get(show.title, [])

    def list_movies(self):
        return self.movies


class FakeReference:

    def __init__(self, records):
        self.records = records
        self.lookups = []

    def find_tv_id(self, title, year=None):
        self.lookups.append(title)
        return title if title in self.records else None

    def get_tv_details(self, tv_id):
        return self.records.get(tv_id)


def media(bitrate, resolution='1080'):
    return MediaDescriptor(bitrate=bitrate, resolution=resolution)


def episode(show, season, title, *descriptors):
    return CatalogEpisode(show_title=show, season_title=season, title=title, media=list(descriptors))


@pytest.fixture
def sleeps():
    return []


class TestSeasonAudit:

    def test_season_mismatch_flagged_even_when_episodes_match(self, sleeps):
        plex = FakePlex(shows=[
            CatalogShow(title='Foo', year=2015, season_count='2', episode_count='20'),
            CatalogShow(title='Bar', year=2012, season_count='1', episode_count='8'),
        ])
        ref = FakeReference({
            'Foo': ReferenceRecord(external_id=1, seasons=3, episodes=20, status='Returning Series'),
            'Bar': ReferenceRecord(external_id=2, seasons=1, episodes=8, status='Ended'),
        })
        walker = SequentialWalker(ref, RateLimiter(1000, sleep=sleeps.append))

        flagged = audit_season_counts(plex, walker)

        assert [f.show.title for f in flagged] == ['Foo']
        assert flagged[0].reference.seasons == 3
        assert len(sleeps) == 2

    def test_unresolved_and_excluded_shows_absent(self, sleeps):
        plex = FakePlex(shows=[
            CatalogShow(title='Lost Show', year=1990, season_count='1', episode_count='1'),
            CatalogShow(title='Skip Me', year=2000, season_count='9', episode_count='99'),
        ])
        ref = FakeReference({
            'Skip Me': ReferenceRecord(external_id=3, seasons=1, episodes=1),
        })
        walker = SequentialWalker(ref, RateLimiter(10, sleep=sleeps.append), exclude={'Skip Me'})

        assert audit_season_counts(plex, walker) == []
        assert ref.lookups == ['Lost Show']
        assert len(sleeps) == 1


class TestBitrateAudit:

    def test_movies_sorted_and_multi_file_excluded(self, caplog):
        plex = FakePlex(movies=[
            CatalogMovie(title='Alien', year=1979, media=[media(7000)]),
            CatalogMovie(title='Heat', year=1995, media=[media(100), media(200)]),
            CatalogMovie(title='Ran', year=1985, media=[media(3000, '720')]),
            CatalogMovie(title='Fine', year=2001, media=[media(9000)]),
            CatalogMovie(title='Empty', year=2001, media=[]),
        ])

        with caplog.at_level(logging.INFO):
            flagged = audit_movie_bitrates(plex, THRESHOLDS)

        assert [(f.title, f.bitrate, f.bitrate_threshold) for f in flagged] == [
            ('Ran', 3000, 4000),
            ('Alien', 7000, 8000),
        ]
        assert 'Heat' in caplog.text

    def test_episodes_grouped_in_encounter_order(self):
        plex = FakePlex(
            shows=[CatalogShow('ShowA', 2000, '1', '3', '1'), CatalogShow('ShowB', 2001, '1', '1', '2')],
            episodes={
                'ShowA': [
                    episode('ShowA', 'Season 1', 'E2', media(100)),
                    episode('ShowA', 'Season 1', 'OK', media(9999)),
                    episode('ShowA', 'Season 1', 'E1', media(200)),
                    episode('ShowA', 'Season 1', 'Dup', media(1), media(2)),
                ],
                'ShowB': [episode('ShowB', 'Season 1', 'E1', media(300))],
            },
        )

        groups = audit_episode_bitrates(plex, THRESHOLDS)

        assert groups.shows() == ['ShowA', 'ShowB']
        assert [e.title for e in groups.seasons('ShowA')['Season 1']] == ['E2', 'E1']
        assert [e.title for e in groups.seasons('ShowB')['Season 1']] == ['E1']

    def test_unknown_resolution_flagged(self):
        plex = FakePlex(movies=[CatalogMovie('Odd', 2000, [media(99999, 'unknown')])])
        flagged = audit_movie_bitrates(plex, THRESHOLDS)
        assert flagged[0].title == 'Odd'
        assert flagged[0].bitrate_threshold is None


class TestDuplicateAudit:

    def test_movies(self):
        plex = FakePlex(movies=[
            CatalogMovie('Alien', 1979, [media(1)]),
            CatalogMovie('Heat', 1995, [media(1), media(2)]),
        ])
        assert audit_duplicate_movies(plex) == [DuplicateRecord('Heat', 2)]

    def test_episodes_include_items_passing_other_checks(self):
        plex = FakePlex(
            shows=[CatalogShow('Foo', 2015, '2', '3', '9')],
            episodes={'Foo': [
                episode('Foo', 'Season 2', 'B', media(50000), media(50000)),
                episode('Foo', 'Season 1', 'A', media(1)),
                episode('Foo', 'Season 1', 'C', media(1), media(1), media(1)),
            ]},
        )

        groups = audit_duplicate_episodes(plex)

        assert groups.as_dict() == {
            'Foo': {
                'Season 2': [DuplicateRecord('B', 2)],
                'Season 1': [DuplicateRecord('C', 3)],
            }
        }
        assert list(groups.seasons('Foo')) == ['Season 2', 'Season 1']
