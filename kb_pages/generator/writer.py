"""Write generated pages to disk and prune pages that are no longer produced.

The writer owns the output directory: every page lives at
``<out>/<segments>/index.html`` and any other ``index.html`` beneath the
output root is considered stale on the next run. In dry-run mode every action
is computed and logged, and the filesystem is left untouched.
"""

from __future__ import annotations

import logging
import typing as typ
from pathlib import Path

import msgspec

from kb_pages._constants import INDEX_FILENAME, SEARCH_INDEX_FILENAME

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from .models import SearchDoc

logger = logging.getLogger(__name__)


class OutputWriter:
    """Persist rendered pages and the search index below ``out_dir``."""

    def __init__(self, out_dir: Path, *, dry_run: bool = False) -> None:
        self.out_dir = out_dir.resolve()
        self.dry_run = dry_run

    def page_path(self, segments: cabc.Sequence[str]) -> Path:
        """Return the ``index.html`` path for a page at ``segments``."""
        return self.out_dir.joinpath(*segments, INDEX_FILENAME)

    def write_page(self, segments: cabc.Sequence[str], html: str) -> Path:
        """Write ``html`` as the index file of the page directory ``segments``."""
        target = self.page_path(segments)
        if self.dry_run:
            logger.info("would write %s", target)
            return target
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(html, encoding="utf-8")
        return target

    def write_search_index(self, docs: cabc.Sequence[SearchDoc]) -> Path:
        """Write the search index as pretty-printed JSON at the output root."""
        target = self.out_dir / SEARCH_INDEX_FILENAME
        payload = msgspec.json.format(msgspec.json.encode(list(docs)), indent=2)
        if self.dry_run:
            logger.info("would write %s (%d docs)", target, len(docs))
            return target
        self.out_dir.mkdir(parents=True, exist_ok=True)
        target.write_bytes(payload + b"\n")
        return target

    def prune_stale(self, expected: cabc.Iterable[Path]) -> tuple[list[Path], list[Path]]:
        """Delete index files that are not in ``expected``.

        Parameters
        ----------
        expected : Iterable[Path]
            Index file paths produced by the current run.

        Returns
        -------
        tuple[list[Path], list[Path]]
            The stale index files deleted and the directories removed because
            they became empty. Directories at or above the output root are
            never removed.
        """
        if not self.out_dir.is_dir():
            return [], []
        keep = {path.resolve() for path in expected}
        stale = sorted(
            path.resolve()
            for path in self.out_dir.rglob(INDEX_FILENAME)
            if path.is_file() and path.resolve() not in keep
        )
        removed_files: set[Path] = set()
        removed_dirs: list[Path] = []
        for path in stale:
            if self.dry_run:
                logger.info("would delete stale page %s", path)
            else:
                path.unlink()
                logger.info("deleted stale page %s", path)
            removed_files.add(path)
            removed_dirs.extend(self._remove_empty_parents(path.parent, removed_files, removed_dirs))
        return stale, removed_dirs

    def _remove_empty_parents(
        self, start: Path, removed_files: set[Path], removed_dirs: list[Path]
    ) -> list[Path]:
        """Remove ``start`` and its ancestors while they are empty.

        In dry-run mode files and directories already scheduled for removal
        count as absent so the reported directories match a real run.
        """
        gone = removed_files.union(removed_dirs)
        removed: list[Path] = []
        current = start
        while current != self.out_dir and self.out_dir in current.parents:
            if not current.is_dir():
                break
            if any(child not in gone for child in current.iterdir()):
                break
            if self.dry_run:
                logger.info("would remove empty directory %s", current)
            else:
                current.rmdir()
            removed.append(current)
            gone.add(current)
            current = current.parent
        return removed


__all__ = ["OutputWriter"]
