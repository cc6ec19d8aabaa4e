"""
Row decoding for layoutbench.

A scenario describes the shape of its projection as an ordered sequence of
`Slot` destinations, one per selected column. `decode_row` binds one result
row to such a sequence and is the only decode routine: the document read,
the typed-column read, the hybrid extraction read and the narrow reads all
go through it.

Usage:
    from layoutbench.decoder import field_slots, scan_rows

    with conn.cursor() as cur:
        records = scan_rows(cur.stream(query), field_slots())
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from pydantic import ValidationError

from layoutbench.domain.models import COLUMNS, DOCUMENT_COLUMN, Record
from layoutbench.errors import DecodeError


class SlotKind(str, enum.Enum):
    INTEGER = "integer"
    TEXT = "text"
    OPTIONAL_INTEGER = "optional_integer"
    OPTIONAL_TIMESTAMP = "optional_timestamp"
    RECORD = "record"


@dataclass(frozen=True)
class Slot:
    """One destination for one selected column."""

    field: str
    kind: SlotKind


FIELD_KINDS: Dict[str, SlotKind] = {
    "id": SlotKind.INTEGER,
    "name": SlotKind.TEXT,
    "status": SlotKind.TEXT,
    "last_updated_at": SlotKind.OPTIONAL_TIMESTAMP,
    "last_modified_at": SlotKind.OPTIONAL_TIMESTAMP,
    "num": SlotKind.OPTIONAL_INTEGER,
    "num2": SlotKind.OPTIONAL_INTEGER,
    "updated_at": SlotKind.OPTIONAL_TIMESTAMP,
    "created_at": SlotKind.OPTIONAL_TIMESTAMP,
    "jumbled_at": SlotKind.OPTIONAL_TIMESTAMP,
    "secret_code": SlotKind.TEXT,
    "entries": SlotKind.INTEGER,
}


def record_slots() -> Tuple[Slot, ...]:
    """A single slot taking the whole document column."""
    return (Slot(DOCUMENT_COLUMN, SlotKind.RECORD),)


def slots_for(*fields: str) -> Tuple[Slot, ...]:
    """Scalar slots for the given record fields, in the given order."""
    try:
        return tuple(Slot(name, FIELD_KINDS[name]) for name in fields)
    except KeyError as exc:
        raise ValueError(f"Unknown record field {exc.args[0]!r}") from None


def field_slots() -> Tuple[Slot, ...]:
    """One scalar slot per record field, in `COLUMNS` order."""
    return slots_for(*COLUMNS)


def _is_integer(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _bind_scalar(slot: Slot, value: Any) -> Any:
    kind = slot.kind
    if value is None:
        if kind in (SlotKind.OPTIONAL_INTEGER, SlotKind.OPTIONAL_TIMESTAMP):
            return None
        raise DecodeError(f"NULL in non-nullable slot '{slot.field}'", detail=kind.value)

    if kind in (SlotKind.INTEGER, SlotKind.OPTIONAL_INTEGER):
        ok = _is_integer(value)
    elif kind is SlotKind.TEXT:
        ok = isinstance(value, str)
    else:
        ok = isinstance(value, datetime)

    if not ok:
        raise DecodeError(
            f"Cannot bind {type(value).__name__} to slot '{slot.field}'",
            detail=kind.value,
        )
    return value


def _bind_record(slot: Slot, value: Any) -> Record:
    if value is None:
        raise DecodeError(f"NULL document in slot '{slot.field}'", detail=slot.kind.value)
    try:
        if isinstance(value, (str, bytes, bytearray)):
            record = Record.model_validate_json(value)
        else:
            record = Record.model_validate(value)
    except ValidationError as exc:
        raise DecodeError(f"Invalid document in slot '{slot.field}'", detail=str(exc)) from exc

    # Field defaults exist for narrow reads only; a document must carry every key.
    missing = [name for name in COLUMNS if name not in record.model_fields_set]
    if missing:
        raise DecodeError(
            f"Incomplete document in slot '{slot.field}'",
            detail=f"missing {', '.join(missing)}",
        )
    return record


def decode_row(row: Sequence[Any], slots: Sequence[Slot]) -> Record:
    """
    Bind the columns of `row` to `slots`, in order, and return the Record.

    Raises
    ------
    DecodeError
        If the row width differs from the slot count, a non-nullable slot
        receives NULL, a value has the wrong native type, or a document fails
        validation.
    """
    if len(row) != len(slots):
        raise DecodeError(
            "Row shape mismatch",
            detail=f"{len(row)} column(s) for {len(slots)} slot(s)",
        )

    base: Optional[Record] = None
    values: Dict[str, Any] = {}
    for slot, value in zip(slots, row):
        if slot.kind is SlotKind.RECORD:
            base = _bind_record(slot, value)
        else:
            values[slot.field] = _bind_scalar(slot, value)

    if base is None:
        # Values were checked slot by slot above.
        return Record.model_construct(**values)
    if values:
        return base.model_copy(update=values)
    return base


def scan_rows(
    rows: Iterable[Sequence[Any]],
    slots: Sequence[Slot],
    on_progress: Optional[Callable[[Record], None]] = None,
    progress_every: int = 100_000,
) -> List[Record]:
    """
    Decode every row of an open result stream.

    The stream is consumed completely. `on_progress` is called for each
    decoded record whose id is a multiple of `progress_every`.
    """
    records: List[Record] = []
    for row in rows:
        record = decode_row(row, slots)
        records.append(record)
        if on_progress is not None and record.id % progress_every == 0:
            on_progress(record)
    return records


__all__ = [
    "FIELD_KINDS",
    "Slot",
    "SlotKind",
    "decode_row",
    "field_slots",
    "record_slots",
    "scan_rows",
    "slots_for",
]
