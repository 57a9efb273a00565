"""
Catalog lookup: static chapter/page/artist metadata by stamp identifier.

Read-only and constant-time. Built once at startup from a JSON file:

    {
      "chapters": {
        "1": [{"cpid": "A123...", "page": "1", "artist": "..."}, ...],
        "2": [...]
      }
    }

A stamp that isn't catalogued is not an error; get() returns None and the
card renders empty chapter/page/artist fields.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, Mapping, Optional, Union

from logging_config import get_logger
from models.stamp import CatalogEntry


# Module logger
logger = get_logger(__name__)


class CatalogLookup:
    """Immutable identifier -> CatalogEntry mapping."""

    def __init__(self, entries: Optional[Mapping[str, CatalogEntry]] = None):
        self._entries: Dict[str, CatalogEntry] = dict(entries or {})

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, stamp_id: object) -> bool:
        return stamp_id in self._entries

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def get(self, stamp_id: str) -> Optional[CatalogEntry]:
        return self._entries.get(stamp_id)

    def entry_or_blank(self, stamp_id: str) -> CatalogEntry:
        """Entry for stamp_id, or an all-empty entry."""
        return self._entries.get(stamp_id) or CatalogEntry()

    @classmethod
    def from_rows(cls, rows: Iterable[Mapping[str, Any]]) -> "CatalogLookup":
        """
        Build from rows with cpid, chapter, page and artist keys.

        Duplicate identifiers are logged; the first occurrence wins.
        Rows without a cpid are skipped.
        """
        entries: Dict[str, CatalogEntry] = {}
        for row in rows:
            cpid = str(row.get("cpid") or "").strip()
            if not cpid:
                continue
            entry = CatalogEntry(
                chapter=str(row.get("chapter", "") or ""),
                page=str(row.get("page", "") or ""),
                artist=str(row.get("artist", "") or ""),
            )
            if cpid in entries:
                logger.warning(
                    f"Duplicate cpid in catalog: {cpid} "
                    f"(keeping chapter {entries[cpid].chapter} page {entries[cpid].page}, "
                    f"ignoring chapter {entry.chapter} page {entry.page})"
                )
                continue
            entries[cpid] = entry
        return cls(entries)

    @classmethod
    def from_chapters(cls, chapters: Mapping[str, Iterable[Mapping[str, Any]]]) -> "CatalogLookup":
        """Build from {chapter: [rows]}; the chapter key fills each row's chapter."""
        rows = []
        for chapter, chapter_rows in chapters.items():
            for row in chapter_rows:
                if not isinstance(row, Mapping):
                    logger.warning(f"Skipping non-object catalog row in chapter {chapter}")
                    continue
                rows.append({**row, "chapter": row.get("chapter", chapter)})
        return cls.from_rows(rows)

    @classmethod
    def from_json_file(cls, path: Union[str, Path, None]) -> "CatalogLookup":
        """
        Load the catalog file.

        A missing path or file gives an empty catalog. An unreadable or
        invalid file is logged and also gives an empty catalog.
        """
        if not path:
            return cls()

        p = Path(path)
        if not p.exists():
            logger.info(f"No catalog file at {p}; chapter/page/artist will be blank")
            return cls()

        try:
            data = json.loads(p.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError) as e:
            logger.error(f"Failed to read catalog {p}: {e}")
            return cls()

        chapters = data.get("chapters") if isinstance(data, dict) else None
        if not isinstance(chapters, dict):
            logger.error(f"Catalog {p} has no 'chapters' object")
            return cls()

        catalog = cls.from_chapters(chapters)
        logger.info(f"Catalog loaded: {len(catalog)} stamps from {p}")
        return catalog
