from __future__ import annotations

import io
import json
from typing import Any

from goapkit.io.logging import StructuredLogger


def read_json_lines(buffer: io.StringIO) -> list[dict[str, Any]]:
    """Parse the contents of the buffer into JSON objects."""
    buffer.seek(0)
    return [json.loads(line) for line in buffer.read().splitlines() if line]


def test_structured_logger_outputs_json_lines() -> None:
    """JSON mode should emit one JSON object per line."""
    stream = io.StringIO()
    logger = StructuredLogger(name="goapkit", json_mode=True, stream=stream)

    logger.info("plan found", goal="Shelter", details={"steps": 3})
    logger.error("execution failed", action="BuildHouse")

    records = read_json_lines(stream)
    assert len(records) == 2
    first, second = records
    assert first["level"] == "INFO"
    assert first["goal"] == "Shelter"
    assert first["message"] == "plan found"
    assert first["details"] == {"steps": 3}
    assert "timestamp" in first

    assert second["level"] == "ERROR"
    assert second["message"] == "execution failed"
    assert second["action"] == "BuildHouse"


def test_structured_logger_text_mode() -> None:
    """Text mode should produce a single newline-terminated line."""
    stream = io.StringIO()
    logger = StructuredLogger(name="goapkit", json_mode=False, stream=stream)

    logger.info("search complete", iterations=5)

    stream.seek(0)
    output = stream.read()
    assert "INFO" in output
    assert "search complete" in output
    assert "iterations=5" in output
    assert output.count("\n") == 1


def test_structured_logger_filters_below_level() -> None:
    """Records under the configured level are dropped."""
    stream = io.StringIO()
    logger = StructuredLogger(name="goapkit", json_mode=True, stream=stream, level="warning")

    logger.debug("noise")
    logger.info("still noise")
    logger.warning("kept")

    records = read_json_lines(stream)
    assert [record["message"] for record in records] == ["kept"]


def test_structured_logger_masks_sensitive_data() -> None:
    """Credential-looking fragments are masked before emission."""
    json_stream = io.StringIO()
    text_stream = io.StringIO()
    json_logger = StructuredLogger(name="goapkit", json_mode=True, stream=json_stream)
    text_logger = StructuredLogger(name="goapkit", json_mode=False, stream=text_stream)

    secret_token = "token" + "=" + "abcd1234"
    json_logger.info("state %s", state={"note": secret_token, "count": 3}, values=["password: hunter2"])
    text_logger.error("Failed with api_key=xyz")

    records = read_json_lines(json_stream)
    assert records[0]["state"] == {"note": "token=***", "count": 3}
    assert records[0]["values"] == ["password:***"]

    text_stream.seek(0)
    text_output = text_stream.read()
    assert "api_key=***" in text_output
    assert "xyz" not in text_output


def test_non_json_values_are_rendered_with_repr() -> None:
    """Arbitrary objects in fields do not break emission."""
    stream = io.StringIO()
    logger = StructuredLogger(name="goapkit", json_mode=True, stream=stream)

    logger.info("odd field", value=object())

    assert read_json_lines(stream)[0]["value"].startswith("<object object")
