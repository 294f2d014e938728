"""
Reference Frequency Table I/O
Loads the table of "important" frequencies from JSON into immutable objects.
"""
from __future__ import annotations

from typing import Any, Dict, Iterator, List, Optional, Tuple
import json
import logging

from harmonicexplorer.config import REFERENCE_FREQUENCIES_PATH
from harmonicexplorer.model.exceptions import ValidationError
from harmonicexplorer.model.frequencies import Frequency, ImportantFrequency

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("id", "source", "category", "type", "emojis", "value")


class ReferenceFrequencyTable:
    """Ordered, read-only collection of ImportantFrequency records."""

    def __init__(self, frequencies: Tuple[ImportantFrequency, ...]) -> None:
        self._frequencies = tuple(frequencies)
        self._by_id: Dict[str, ImportantFrequency] = {}
        for frequency in self._frequencies:
            if frequency.id in self._by_id:
                raise ValidationError(f"Duplicate reference frequency id '{frequency.id}'.")
            self._by_id[frequency.id] = frequency

    def __iter__(self) -> Iterator[ImportantFrequency]:
        return iter(self._frequencies)

    def __len__(self) -> int:
        return len(self._frequencies)

    def __getitem__(self, index: int) -> ImportantFrequency:
        return self._frequencies[index]

    def find(self, frequency_id: str) -> Optional[ImportantFrequency]:
        return self._by_id.get(frequency_id)

    @staticmethod
    def from_records(records: List[Dict[str, Any]]) -> ReferenceFrequencyTable:
        return ReferenceFrequencyTable(tuple(important_frequency_from_dict(r) for r in records))


def important_frequency_from_dict(data: Dict[str, Any]) -> ImportantFrequency:
    missing = [name for name in REQUIRED_FIELDS if name not in data]
    if missing:
        raise ValidationError(f"Reference frequency {data.get('id', '?')!r} is missing fields: {', '.join(missing)}")
    try:
        value = float(data["value"])
    except (TypeError, ValueError) as e:
        raise ValidationError(f"Reference frequency '{data['id']}' has an invalid value: {data['value']!r}") from e

    return ImportantFrequency(
        id=str(data["id"]),
        source=str(data["source"]),
        category=str(data["category"]),
        type=str(data["type"]),
        emojis=str(data["emojis"]),
        frequency=Frequency(value),
        solfeggio=data.get("solfeggio"),
    )


def load_reference_frequencies(filepath: Optional[str] = None) -> ReferenceFrequencyTable:
    """
    Read the reference frequency table. The JSON document holds a
    "frequencies" list of {id, source, category, type, emojis, value} records.
    """
    filepath = filepath or REFERENCE_FREQUENCIES_PATH
    logger.info(f"Loading reference frequencies from: {filepath}")
    try:
        with open(filepath, mode='r', encoding='utf-8') as f:
            document = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        logger.error(f"Failed to read reference frequencies: {e}")
        raise

    records = document.get("frequencies") if isinstance(document, dict) else None
    if not isinstance(records, list):
        raise ValidationError(f"File '{filepath}' has no 'frequencies' list.")

    table = ReferenceFrequencyTable.from_records(records)
    logger.info(f"Loaded {len(table)} reference frequencies.")
    return table
