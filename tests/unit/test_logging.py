from __future__ import annotations

import json
import logging
import sys

from layoutbench.utils.logging import ConsoleFormatter, _json_formatter

EXPECTED_SEEDED = 100_000
EXPECTED_ITERATIONS = 10


def _record(msg: str = "hello") -> logging.LogRecord:
    return logging.LogRecord(
        name="test.logger",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg=msg,
        args=(),
        exc_info=None,
    )


def test_json_formatter_promotes_standard_extra_fields() -> None:
    record = _record("[SEED] 100000")
    record.seeded = EXPECTED_SEEDED
    record.table = "perf"

    payload = json.loads(_json_formatter(record))

    assert payload["level"] == "INFO"
    assert payload["logger"] == "test.logger"
    assert payload["message"] == "[SEED] 100000"
    assert payload["seeded"] == EXPECTED_SEEDED
    assert payload["table"] == "perf"
    assert "lineno" not in payload


def test_json_formatter_supports_nested_extra_field() -> None:
    record = _record()
    record.extra = {"iterations": EXPECTED_ITERATIONS}

    payload = json.loads(_json_formatter(record))

    assert payload["iterations"] == EXPECTED_ITERATIONS


def test_json_formatter_stringifies_unserializable_values() -> None:
    record = _record()
    record.scenario = object()

    payload = json.loads(_json_formatter(record))

    assert payload["scenario"].startswith("<object object")


def test_json_formatter_includes_exception_text() -> None:
    try:
        raise RuntimeError("boom")
    except RuntimeError:
        record = logging.getLogger("test.logger").makeRecord(
            "test.logger", logging.ERROR, __file__, 1, "failed", (), exc_info=sys.exc_info()
        )

    payload = json.loads(_json_formatter(record))

    assert "RuntimeError: boom" in payload["exc_info"]

def test_console_formatter_appends_extra_fields() -> None:
    record = _record("[SEED] 100000")
    record.table = "perf"
    record.seeded = EXPECTED_SEEDED

    line = ConsoleFormatter("%(levelname)s | %(message)s").format(record)

    assert line == "INFO | [SEED] 100000 | table=perf seeded=100000"


def test_console_formatter_leaves_plain_records_alone() -> None:
    line = ConsoleFormatter("%(levelname)s | %(message)s").format(_record())

    assert line == "INFO | hello"
