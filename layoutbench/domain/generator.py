"""Deterministic synthetic record generation."""

from __future__ import annotations

from datetime import datetime, timezone

from layoutbench.domain.models import Record


def make_record(i: int) -> Record:
    """
    Build the record for index `i`.

    Every text field embeds `i`; all five timestamps share one instant read
    from the clock at call time.
    """
    now = datetime.now(timezone.utc).replace(tzinfo=None)
    derived = i + 7
    return Record(
        id=i,
        name=f"MyName:{i}",
        status=f"MyStatus:{i}",
        last_updated_at=now,
        last_modified_at=now,
        num=derived,
        num2=derived,
        updated_at=now,
        created_at=now,
        jumbled_at=now,
        secret_code=f"MyCode:{i}",
        entries=i + 10,
    )


__all__ = ["make_record"]
