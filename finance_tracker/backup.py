"""Export and import of the complete data set as a single JSON document.

Import is all-or-nothing: the document is parsed and validated in full
before any collection is written, and the writes share one storage batch.
"""

from __future__ import annotations

import json
import logging
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

from . import config
from .errors import ImportFormatError
from .models import Budget, Category, Transaction
from .storage import Storage

logger = logging.getLogger(__name__)

# collection name -> (storage key, accepted document keys)
COLLECTIONS = {
    'transactions': (config.TRANSACTIONS_KEY, ('transactions', 'Transactions')),
    'budgets': (config.BUDGETS_KEY, ('budgets', 'Budgets')),
    'categories': (config.CATEGORIES_KEY, ('categories', 'Categories')),
}

RECORD_TYPES = {
    'transactions': Transaction,
    'budgets': Budget,
    'categories': Category,
}


def export_data(storage: Storage) -> Dict[str, Any]:
    """Return every stored record, across all users, plus backup metadata."""
    payload: Dict[str, Any] = {
        name: storage.load(key) for name, (key, _aliases) in COLLECTIONS.items()
    }
    payload['exportDate'] = datetime.now(timezone.utc).isoformat()
    payload['appName'] = config.APP_NAME
    payload['version'] = config.APP_VERSION
    return payload


def backup_filename(today: Optional[date] = None) -> str:
    today = today or date.today()
    return f"{config.APP_NAME.replace(' ', '_')}_Backup_{today.isoformat()}.json"


def write_backup(storage: Storage, directory: Optional[Path] = None) -> Path:
    """Write an export file into ``directory`` and return its path."""
    target_dir = Path(directory) if directory else storage.data_dir / 'backups'
    target_dir.mkdir(parents=True, exist_ok=True)
    target = target_dir / backup_filename()
    with target.open('w', encoding='utf-8') as handle:
        json.dump(export_data(storage), handle, indent=2, ensure_ascii=False)
    logger.info("Wrote backup to %s", target)
    return target


def read_backup(path: Union[str, Path]) -> Any:
    """Read a backup file.

    Raises:
        ImportFormatError: If the file cannot be read or is not JSON.
    """
    try:
        with Path(path).open('r', encoding='utf-8') as handle:
            return json.load(handle)
    except (json.JSONDecodeError, OSError, UnicodeDecodeError) as exc:
        logger.error("Could not read backup %s: %s", path, exc)
        raise ImportFormatError() from exc


def _parse_collection(value: Any) -> List[Dict[str, Any]]:
    if isinstance(value, str):
        if not value.strip():
            return []
        try:
            value = json.loads(value)
        except json.JSONDecodeError as exc:
            raise ImportFormatError() from exc
    if not isinstance(value, list) or not all(isinstance(item, dict) for item in value):
        raise ImportFormatError()
    return value


def parse_document(document: Union[str, bytes, Mapping[str, Any]]) -> Dict[str, List[Dict[str, Any]]]:
    """Extract the recognised collections from a backup document.

    Returns:
        Mapping of collection name to its records, for the collections present.

    Raises:
        ImportFormatError: If the document is not JSON, is not an object,
            holds none of the recognised collections, or holds one that is
            not an array of records.
    """
    if isinstance(document, (str, bytes)):
        try:
            document = json.loads(document)
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise ImportFormatError() from exc
    if not isinstance(document, Mapping):
        raise ImportFormatError()

    parsed: Dict[str, List[Dict[str, Any]]] = {}
    for name, (_key, aliases) in COLLECTIONS.items():
        present = [alias for alias in aliases if alias in document]
        if not present:
            continue
        chosen = next((alias for alias in present if document[alias]), present[0])
        parsed[name] = _parse_collection(document[chosen])
    if not parsed:
        raise ImportFormatError()
    return parsed


def import_data(
    storage: Storage,
    document: Union[str, bytes, Mapping[str, Any]],
    user_id: str,
) -> Dict[str, int]:
    """Replace stored collections with those of ``document``.

    Imported transactions and budgets are reassigned to ``user_id``;
    categories keep the system owner when they have it and are otherwise
    reassigned as well.

    Returns:
        Number of records written per collection.
    """
    try:
        parsed = parse_document(document)
    except ImportFormatError:
        logger.error("Import rejected: invalid document format")
        raise

    normalized: Dict[str, List[Dict[str, Any]]] = {}
    for name, records in parsed.items():
        if name == 'categories':
            normalized[name] = [
                {**record, 'userId': config.SYSTEM_USER_ID if record.get('userId') == config.SYSTEM_USER_ID else user_id}
                for record in records
            ]
        else:
            normalized[name] = [{**record, 'userId': user_id} for record in records]

    for name, records in normalized.items():
        for record in records:
            try:
                RECORD_TYPES[name].from_dict(record)
            except (KeyError, TypeError, ValueError) as exc:
                logger.error("Import rejected: invalid %s record %r: %s", name, record.get('id'), exc)
                raise ImportFormatError() from exc

    with storage.batch():
        for name, records in normalized.items():
            storage.save(COLLECTIONS[name][0], records)

    counts = {name: len(records) for name, records in normalized.items()}
    logger.info("Imported %s for %s", counts, user_id)
    return counts
