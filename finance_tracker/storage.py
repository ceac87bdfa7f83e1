"""Key-value persistence for the tracker's JSON collections.

Each storage key maps to one ``<key>.json`` file inside the data directory.
Collections are JSON arrays of records and are always rewritten whole.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional

from . import config

logger = logging.getLogger(__name__)

_MISSING = object()


class Storage:
    """Reads and writes JSON collections stored under fixed keys."""

    def __init__(self, data_dir: Optional[Path] = None) -> None:
        self.data_dir = Path(data_dir) if data_dir else config.DATA_DIR
        self._staged: Optional[Dict[str, Any]] = None

    def path_for(self, key: str) -> Path:
        return self.data_dir / f"{key}.json"

    # Collections -----------------------------------------------------------

    def load(self, key: str) -> List[Dict[str, Any]]:
        """Return the records stored under ``key``.

        A missing key, unreadable file, malformed JSON or a non-array
        document all read as an empty collection.
        """
        data = self.load_value(key)
        if data is None:
            return []
        if not isinstance(data, list):
            logger.warning("Collection %s is not a JSON array; treating as empty", key)
            return []
        return [dict(record) for record in data if isinstance(record, dict)]

    def save(self, key: str, records: List[Dict[str, Any]]) -> None:
        """Overwrite the collection stored under ``key``."""
        self.save_value(key, [dict(record) for record in records])

    # Raw values ------------------------------------------------------------

    def load_value(self, key: str) -> Any:
        if self._staged is not None and key in self._staged:
            staged = self._staged[key]
            return None if staged is _MISSING else json.loads(json.dumps(staged))

        target = self.path_for(key)
        if not target.exists():
            return None
        try:
            with target.open('r', encoding='utf-8') as handle:
                return json.load(handle)
        except (json.JSONDecodeError, OSError, UnicodeDecodeError) as exc:
            logger.warning("Could not read %s: %s", target, exc)
            return None

    def save_value(self, key: str, value: Any) -> None:
        if self._staged is not None:
            self._staged[key] = json.loads(json.dumps(value))
            return
        self._write(key, value)

    def delete(self, key: str) -> None:
        if self._staged is not None:
            self._staged[key] = _MISSING
            return
        target = self.path_for(key)
        if target.exists():
            target.unlink()

    # Batching --------------------------------------------------------------

    @contextmanager
    def batch(self) -> Iterator["Storage"]:
        """Stage every write made inside the block and flush them together.

        Reads inside the block see staged values.  If the block raises,
        nothing is written.  Nested batches join the outer one.
        """
        if self._staged is not None:
            yield self
            return

        self._staged = {}
        try:
            yield self
        except BaseException:
            self._staged = None
            raise
        staged, self._staged = self._staged, None
        for key, value in staged.items():
            if value is _MISSING:
                self.delete(key)
            else:
                self._write(key, value)
        logger.debug("Committed batch of %d key(s)", len(staged))

    # Internal ----------------------------------------------------------------

    def _write(self, key: str, value: Any) -> None:
        target = self.path_for(key)
        target.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{key}.", suffix=".tmp", dir=str(target.parent))
        try:
            with os.fdopen(fd, 'w', encoding='utf-8') as handle:
                json.dump(value, handle, indent=2, ensure_ascii=False)
            os.replace(tmp_name, target)
        except OSError as exc:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise OSError(f"Failed to save {key} to {target}: {exc}") from exc
