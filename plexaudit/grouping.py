#!/usr/bin/env python3
"""
Show → season → episodes grouping for audit reports

Order of first appearance fixes the position of both shows and seasons;
records for an existing show/season are appended without reordering anything.
"""

from typing import Any, Dict, Iterable, Iterator, List, Tuple

from plexaudit.models import FlaggedItem


class NestedGroup:
    """Insertion-ordered mapping of show title → season title → [records]"""

    def __init__(self):
        self._shows: Dict[str, Dict[str, List[Any]]] = {}

    def insert(self, show: str, season: str, record: Any):
        """Append record at [show, season], creating each level on first sight"""
        seasons = self._shows.setdefault(show, {})
        seasons.setdefault(season, []).append(record)

    def shows(self) -> List[str]:
        return list(self._shows)

    def seasons(self, show: str) -> Dict[str, List[Any]]:
        return self._shows[show]

    def items(self) -> Iterator[Tuple[str, Dict[str, List[Any]]]]:
        return iter(self._shows.items())

    def as_dict(self) -> Dict[str, Dict[str, List[Any]]]:
        """Deep-enough copy for callers that want plain dicts"""
        return {
            show: {season: list(records) for season, records in seasons.items()}
            for show, seasons in self._shows.items()
        }

    def __len__(self) -> int:
        return len(self._shows)

    def __bool__(self) -> bool:
        return bool(self._shows)

    def __eq__(self, other) -> bool:
        if not isinstance(other, NestedGroup):
            return NotImplemented
        # dict equality ignores order, so compare the key sequences too
        return (
            self.as_dict() == other.as_dict()
            and [(s, list(ss)) for s, ss in self._shows.items()]
            == [(s, list(ss)) for s, ss in other._shows.items()]
        )

    def __repr__(self) -> str:
        return f"NestedGroup({self.as_dict()!r})"


def group_by_show_season(rows: Iterable[Tuple[str, str, Any]]) -> NestedGroup:
    """Fold (show, season, record) tuples into a NestedGroup, in order"""
    group = NestedGroup()
    for show, season, record in rows:
        group.insert(show, season, record)
    return group


def sort_by_bitrate(items: Iterable[FlaggedItem]) -> List[FlaggedItem]:
    """Ascending bitrate; sorted() is stable so ties keep their original order"""
    return sorted(items, key=lambda item: item.bitrate)
