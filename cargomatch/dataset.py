"""Loading of the curated dataset into engine entries.

The dataset ships as one JSON document with a list of records per section
(``Company``, ``Incident``, ``Product``, ``ProductLine``). This module turns
it into a flat tuple of immutable :class:`~cargomatch.engine.types.Entry`
objects and keeps one read-only snapshot per process. The matching engine
itself never reads files; it only receives the snapshot's entries.
"""

from __future__ import annotations

import json
import logging
import threading
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Mapping, Tuple

from .engine.text import decode_html_entities
from .engine.types import EntityType, Entry

logger = logging.getLogger(__name__)

DATASET_SECTIONS: Tuple[str, ...] = tuple(entity_type.value for entity_type in EntityType)

# Cargo field name -> Entry attribute
FIELD_MAP: Dict[str, str] = {
    'PageID': 'page_id',
    'PageName': 'page_name',
    'Website': 'website',
    'Description': 'description',
    'Company': 'company',
    'Product': 'product',
    'ProductLine': 'product_line',
    'Status': 'status',
    'StartDate': 'start_date',
}


class DatasetError(Exception):
    """Raised when the dataset file cannot be read or decoded."""


@dataclass(frozen=True)
class DatasetSnapshot:
    """An immutable view of the dataset as loaded at a point in time."""

    entries: Tuple[Entry, ...] = ()
    source: str | None = None
    loaded_at: datetime | None = None
    failed: bool = False


def decode_entity_strings(value: Any) -> Any:
    """Return ``value`` with HTML entities decoded in every nested string."""

    if isinstance(value, str):
        return decode_html_entities(value)
    if isinstance(value, list):
        return [decode_entity_strings(item) for item in value]
    if isinstance(value, dict):
        return {key: decode_entity_strings(item) for key, item in value.items()}
    return value


def validate_dataset(raw: Mapping[str, Any]) -> Dict[str, Any]:
    """Return a copy of ``raw`` in which every section is a list.

    Missing or malformed sections are replaced by an empty list and logged.
    """

    validated = dict(raw)
    for section in DATASET_SECTIONS:
        if not isinstance(validated.get(section), list):
            logger.warning('Missing or invalid dataset section: %s', section)
            validated[section] = []
    return validated


def _optional_text(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def entry_from_record(section: str, record: Mapping[str, Any]) -> Entry:
    """Build an :class:`Entry` from one raw record of ``section``."""

    entity_type = EntityType(section)
    page_name = str(record.get('PageName') or '').strip()
    page_id = str(record.get('PageID') or '').strip()
    if not page_id:
        page_id = f'{entity_type.value}:{page_name}'

    return Entry(
        entity_type=entity_type,
        page_id=page_id,
        page_name=page_name,
        website=_optional_text(record.get('Website')),
        description=_optional_text(record.get('Description')),
        company=record.get('Company'),
        product=record.get('Product'),
        product_line=record.get('ProductLine'),
        status=record.get('Status'),
        start_date=record.get('StartDate'),
        extra={key: value for key, value in record.items() if key not in FIELD_MAP},
    )


def entry_to_record(entry: Entry) -> Dict[str, Any]:
    """Return the Cargo-style record for ``entry`` (the inverse of the above)."""

    record: Dict[str, Any] = dict(entry.extra)
    record['_type'] = entry.entity_type.value
    for cargo_key, attribute in FIELD_MAP.items():
        value = getattr(entry, attribute)
        if value is not None:
            record[cargo_key] = value
    return record


def flatten_dataset(raw: Mapping[str, Any]) -> List[Entry]:
    """Flatten the per-section dataset into one list, in section order."""

    validated = validate_dataset(decode_entity_strings(dict(raw)))
    entries: List[Entry] = []
    for section in DATASET_SECTIONS:
        for record in validated[section]:
            if not isinstance(record, dict):
                logger.warning('Skipping non-object record in section %s', section)
                continue
            entries.append(entry_from_record(section, record))
    return entries


def load_dataset(path: str | Path) -> Tuple[Entry, ...]:
    """Read the dataset JSON file at ``path`` and return its entries.

    Parameters
    ----------
    path:
        Location of the combined dataset JSON document.

    Returns
    -------
    tuple of Entry
        Every record of every section, in section order.

    Raises
    ------
    DatasetError
        If the file cannot be read or does not hold a JSON object.
    """

    dataset_path = Path(path)
    try:
        with dataset_path.open('r', encoding='utf-8') as stream:
            raw = json.load(stream)
    except (OSError, json.JSONDecodeError) as exc:
        raise DatasetError(f'Cannot load dataset from {dataset_path}: {exc}') from exc
    if not isinstance(raw, dict):
        raise DatasetError(f'Dataset {dataset_path} is not a JSON object')

    entries = tuple(flatten_dataset(raw))
    logger.info('Dataset loaded with %d entries from %s', len(entries), dataset_path)
    return entries


class DatasetStore:
    """Lazily loaded, process-wide dataset snapshot.

    The snapshot is never modified in place: :meth:`reload` builds a new one
    and swaps it in, so concurrent readers always see a consistent dataset.
    """

    def __init__(self, path: str | Path | None) -> None:
        self.path = Path(path) if path else None
        self._snapshot: DatasetSnapshot | None = None
        self._lock = threading.Lock()

    def snapshot(self) -> DatasetSnapshot:
        """Return the current snapshot, loading it on first use.

        A failed load is returned but not kept, so the next call retries.
        """

        current = self._snapshot
        if current is not None:
            return current
        with self._lock:
            if self._snapshot is not None:
                return self._snapshot
            snapshot = self._load()
            if not snapshot.failed:
                self._snapshot = snapshot
            return snapshot

    def entries(self) -> Tuple[Entry, ...]:
        return self.snapshot().entries

    def reload(self) -> DatasetSnapshot:
        """Re-read the dataset file; a failed read keeps the previous snapshot."""

        snapshot = self._load()
        if snapshot.failed:
            return self._snapshot or snapshot
        with self._lock:
            self._snapshot = snapshot
        return snapshot

    def replace(self, entries: Tuple[Entry, ...] | List[Entry], source: str | None = None) -> DatasetSnapshot:
        """Swap in an already-built set of entries."""

        snapshot = DatasetSnapshot(tuple(entries), source, datetime.now(timezone.utc))
        with self._lock:
            self._snapshot = snapshot
        return snapshot

    def _load(self) -> DatasetSnapshot:
        if self.path is None:
            logger.warning('No dataset path configured; matching against an empty dataset')
            return DatasetSnapshot(loaded_at=datetime.now(timezone.utc))
        try:
            entries = load_dataset(self.path)
        except DatasetError:
            logger.exception('Dataset load failed')
            return DatasetSnapshot(source=str(self.path), loaded_at=datetime.now(timezone.utc), failed=True)
        return DatasetSnapshot(entries, str(self.path), datetime.now(timezone.utc))
