"""
Asset discovery — find re-encodable media under a root directory.

Matching is by extension only (case-insensitive); file contents are
never inspected. Only regular files are considered: symlinks are left
alone, and symlinked directories are not followed, so every original
path is yielded exactly once.

Directories that cannot be listed are logged and skipped. They are not
failures: nothing was attempted on them.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterator
from pathlib import Path

from asset_recode.core.models.asset import EXTENSION_CATEGORIES, Asset, Category

logger = logging.getLogger(__name__)


def classify(path: Path) -> Category | None:
    """Category for ``path`` based on its extension, or None."""
    return EXTENSION_CATEGORIES.get(Path(path).suffix.lower())


def discover_assets(root: Path) -> Iterator[Asset]:
    """Lazily yield every matching asset under ``root``.

    Walks top-down in sorted order so runs are reproducible.
    """

    def _on_error(err: OSError) -> None:
        logger.warning("Skipping unreadable directory %s: %s", err.filename, err.strerror)

    for dirpath, dirnames, filenames in os.walk(root, onerror=_on_error):
        dirnames.sort()
        for filename in sorted(filenames):
            path = Path(dirpath) / filename
            category = classify(path)
            if category is None:
                continue
            if path.is_symlink() or not path.is_file():
                logger.debug("Not a regular file, skipping: %s", path)
                continue
            yield Asset(path=path, category=category)


def count_by_category(assets: list[Asset]) -> dict[str, int]:
    """Tally assets per category (all categories present, zero if none)."""
    counts: dict[str, int] = {c: 0 for c in ("image-jpeg", "image-png", "video")}
    for asset in assets:
        counts[asset.category] += 1
    return counts
