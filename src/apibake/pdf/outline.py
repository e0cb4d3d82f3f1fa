"""Bookkeeping for the nesting of the PDF outline (bookmarks)."""

from apibake.errors import OutlineStructureError


class Outline:
    """Tracks the open outline branch, one title per level.

    A header at level L is allowed when L <= depth: L == depth opens a child
    of the deepest entry, L < depth replaces the entry at L and closes every
    deeper one. Anything deeper than depth skips a level and is rejected.
    """

    def __init__(self):
        self._path: list[str] = []
        self.entries: list[tuple[int, str]] = []

    @property
    def path(self) -> list[str]:
        return list(self._path)

    @property
    def depth(self) -> int:
        return len(self._path)

    def check(self, level: int) -> None:
        if level < 0 or level > len(self._path):
            raise OutlineStructureError(level, len(self._path))

    def add(self, level: int, title: str) -> None:
        self.check(level)
        del self._path[level:]
        self._path.append(title)
        self.entries.append((level, title))
