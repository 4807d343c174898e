"""Search, repo filter, sort, pagination and statistics over assembled builds.

Pure computation over ``BuildGroup`` lists.  The caller owns the ``BuildQuery``
state; nothing here mutates the groups it is given.
"""

from __future__ import annotations

import math
import re
import unicodedata
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

import pandas as pd

from artifact_catalog.schemas.artifacts import ALL_REPOS, BuildStatistics, SortField, SortOrder
from artifact_catalog.services.build_groups import BuildGroup, unique_modules, unique_repos

DEFAULT_PAGE_SIZE = 12

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")
_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def build_number_value(build_number: str) -> int:
    """Leading integer of a build number, 0 when there is none ("10" > "9", "rc1" -> 0)."""
    match = _LEADING_INT.match(build_number or "")
    if not match:
        return 0
    return int(match.group(1))


def timestamp_value(value: str) -> tuple[int, int, int]:
    """Sortable ``(parsed, seconds since epoch, sub-second nanoseconds)``.

    Unparseable values sort first.  Dates outside the nanosecond range of
    pandas (before 1677, after 2262) still order chronologically.
    """
    if not value:
        return (0, 0, 0)
    try:
        ts = pd.Timestamp(value)
        if pd.isna(ts):
            return (0, 0, 0)
        if ts.tzinfo is None:
            ts = ts.tz_localize("UTC")
        delta = ts.to_pydatetime(warn=False) - _EPOCH
    except (TypeError, ValueError, OverflowError):
        return (0, 0, 0)
    return (1, delta.days * 86400 + delta.seconds, delta.microseconds * 1000 + ts.nanosecond)


def _strip_accents(value: str) -> str:
    return "".join(ch for ch in unicodedata.normalize("NFKD", value) if not unicodedata.combining(ch))


def collation_key(value: str) -> tuple[str, str, tuple[bool, ...], str]:
    # Letters first ("éclair" between "apple" and "zebra"), then accents,
    # then lowercase before uppercase ("a" < "A"), then exact text.
    return (
        _strip_accents(value).casefold(),
        value.casefold(),
        tuple(ch.isupper() for ch in value),
        value,
    )


_SORT_KEYS: dict[str, Callable[[BuildGroup], Any]] = {
    "moduleName": lambda g: collation_key(g.module_name),
    "buildNumber": lambda g: build_number_value(g.build_number),
    "totalSize": lambda g: g.total_size,
    "artifactCount": lambda g: g.artifact_count,
    "repo": lambda g: collation_key(g.repo),
    "latestCreated": lambda g: timestamp_value(g.latest_created),
}


def matches_search(group: BuildGroup, search_term: str) -> bool:
    if not search_term:
        return True
    needle = search_term.lower()
    return (
        needle in group.module_name.lower()
        or needle in group.branch_name.lower()
        or needle in group.build_number.lower()
        or any(needle in artifact.name.lower() for artifact in group.artifacts)
    )


def filter_builds(groups: Sequence[BuildGroup], search_term: str = "", repo_filter: str = ALL_REPOS) -> list[BuildGroup]:
    if not search_term and repo_filter == ALL_REPOS:
        return list(groups)
    return [
        group
        for group in groups
        if (repo_filter == ALL_REPOS or group.repo == repo_filter) and matches_search(group, search_term)
    ]


def sort_builds(groups: Sequence[BuildGroup], sort_field: SortField = "moduleName", sort_order: SortOrder = "asc") -> list[BuildGroup]:
    key = _SORT_KEYS.get(sort_field, _SORT_KEYS["moduleName"])
    return sorted(groups, key=key, reverse=sort_order == "desc")


def paginate(groups: Sequence[BuildGroup], page: int, page_size: int) -> list[BuildGroup]:
    start = max(0, page) * page_size
    return list(groups[start : start + page_size])


def page_count(total: int, page_size: int) -> int:
    if page_size <= 0:
        return 0
    return math.ceil(total / page_size)


def compute_statistics(groups: Sequence[BuildGroup]) -> BuildStatistics:
    return BuildStatistics(
        total_builds=len(groups),
        total_artifacts=sum(group.artifact_count for group in groups),
        total_size=sum(group.total_size for group in groups),
        total_modules=len({group.module_name for group in groups}),
    )


@dataclass
class BuildQuery:
    """View state for a build list.

    Changing the search term, repo filter or page size sends the view back to the
    first page; changing the sort does not.
    """

    search_term: str = ""
    repo_filter: str = ALL_REPOS
    sort_field: SortField = "moduleName"
    sort_order: SortOrder = "asc"
    page: int = 0
    page_size: int = DEFAULT_PAGE_SIZE

    def __post_init__(self) -> None:
        if self.page_size < 1:
            raise ValueError("page_size must be a positive integer")
        if self.page < 0:
            raise ValueError("page must be >= 0")

    def set_search_term(self, search_term: str) -> None:
        self.search_term = search_term
        self.page = 0

    def set_repo_filter(self, repo_filter: str) -> None:
        self.repo_filter = repo_filter
        self.page = 0

    def set_page_size(self, page_size: int) -> None:
        if page_size < 1:
            raise ValueError("page_size must be a positive integer")
        self.page_size = page_size
        self.page = 0

    def set_page(self, page: int) -> None:
        if page < 0:
            raise ValueError("page must be >= 0")
        self.page = page

    def set_sort_field(self, sort_field: SortField) -> None:
        self.sort_field = sort_field

    def set_sort_order(self, sort_order: SortOrder) -> None:
        self.sort_order = sort_order

    def toggle_sort_order(self) -> None:
        self.sort_order = "desc" if self.sort_order == "asc" else "asc"

    def toggle_sort(self, sort_field: SortField) -> None:
        """Flip the order on the active field, otherwise sort ascending by the new one."""
        if sort_field == self.sort_field:
            self.toggle_sort_order()
        else:
            self.sort_field = sort_field
            self.sort_order = "asc"


@dataclass
class BuildQueryResult:
    filtered: list[BuildGroup]
    sorted: list[BuildGroup]
    page_items: list[BuildGroup]
    page_count: int
    total_statistics: BuildStatistics
    filtered_statistics: BuildStatistics
    repos: list[str] = field(default_factory=list)
    modules: list[str] = field(default_factory=list)


def run_query(groups: Sequence[BuildGroup], query: BuildQuery) -> BuildQueryResult:
    filtered = filter_builds(groups, query.search_term, query.repo_filter)
    ordered = sort_builds(filtered, query.sort_field, query.sort_order)
    return BuildQueryResult(
        filtered=filtered,
        sorted=ordered,
        page_items=paginate(ordered, query.page, query.page_size),
        page_count=page_count(len(filtered), query.page_size),
        total_statistics=compute_statistics(groups),
        filtered_statistics=compute_statistics(filtered),
        repos=unique_repos(groups),
        modules=unique_modules(groups),
    )
