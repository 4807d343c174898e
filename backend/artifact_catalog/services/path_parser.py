"""Parse repository paths of the form ``module/branchType/branchName/buildNumber/...``."""

from __future__ import annotations

from collections import OrderedDict
from dataclasses import dataclass
from functools import lru_cache
from threading import Lock

from artifact_catalog.core.config import get_settings

BUILD_SEGMENTS = 4


@dataclass(frozen=True)
class ParsedIdentity:
    module_name: str
    branch_type: str
    branch_name: str
    build_number: str
    remainder_path: str
    file_name: str


class PathParser:
    """Memoizing parser keyed by the exact ``(path, file_name)`` pair.

    With ``max_entries=0`` the cache only ever grows.  A positive value turns it
    into a least-recently-used cache of that size.
    """

    def __init__(self, max_entries: int = 0) -> None:
        self.max_entries = max(0, max_entries)
        self._cache: OrderedDict[tuple[str, str], ParsedIdentity | None] = OrderedDict()
        self._lock = Lock()

    def parse(self, path: str, file_name: str) -> ParsedIdentity | None:
        key = (path, file_name)
        with self._lock:
            if key in self._cache:
                if self.max_entries:
                    self._cache.move_to_end(key)
                return self._cache[key]

        result = _split_path(path, file_name)

        with self._lock:
            self._cache[key] = result
            if self.max_entries:
                self._cache.move_to_end(key)
                while len(self._cache) > self.max_entries:
                    self._cache.popitem(last=False)
        return result

    def cache_size(self) -> int:
        with self._lock:
            return len(self._cache)

    def clear(self) -> None:
        with self._lock:
            self._cache.clear()


def _split_path(path: str, file_name: str) -> ParsedIdentity | None:
    parts = path.split("/")
    if len(parts) < BUILD_SEGMENTS:
        return None
    return ParsedIdentity(
        module_name=parts[0],
        branch_type=parts[1],
        branch_name=parts[2],
        build_number=parts[3],
        remainder_path="/".join(parts[BUILD_SEGMENTS:]),
        file_name=file_name,
    )


@lru_cache(maxsize=1)
def get_path_parser() -> PathParser:
    return PathParser(max_entries=get_settings().path_cache_max_entries)


def parse_path(path: str, file_name: str) -> ParsedIdentity | None:
    """Parse with the process-wide parser; ``None`` when the path has fewer than four segments."""
    return get_path_parser().parse(path, file_name)
