"""Structured logging utilities."""

from __future__ import annotations

import json
from collections.abc import Mapping as MappingABC
from datetime import datetime, UTC
import re
from typing import Any, TextIO, cast
from collections.abc import Mapping

from pydantic import BaseModel, SecretStr, field_validator

from goapkit.core.models import LogLevel

_LEVEL_ORDER = {LogLevel.debug: 10, LogLevel.info: 20, LogLevel.warning: 30, LogLevel.error: 40}


class _SanitizedText(BaseModel):
    """Model that masks credentials that may leak into log text through state values."""

    text: SecretStr

    @field_validator("text", mode="before")
    @classmethod
    def _mask_sensitive_data(cls, value: Any) -> str:
        text = str(value)
        return re.sub(
            r"\b(token|password|secret|api_key)([=:])\s*\S+",
            r"\1\2***",
            text,
            flags=re.IGNORECASE,
        )


def _sanitize_log_output(text: str) -> str:
    """Mask sensitive fragments in the provided text."""
    sanitized = _SanitizedText.model_validate({"text": text})
    return sanitized.text.get_secret_value()


def _sanitize_log_value(value: Any) -> Any:
    """Apply sanitisation recursively to structured log data."""
    if isinstance(value, str):
        return _sanitize_log_output(value)
    if isinstance(value, MappingABC):
        typed_mapping = cast("Mapping[Any, Any]", value)
        return {key: _sanitize_log_value(item) for key, item in typed_mapping.items()}
    if isinstance(value, (list, tuple)):
        typed_items = cast("list[Any]", value)
        return [_sanitize_log_value(item) for item in typed_items]
    return value


class StructuredLogger:
    """Simple structured logger supporting JSON lines and text output."""

    def __init__(
        self,
        *,
        name: str,
        json_mode: bool = False,
        stream: TextIO | None = None,
        level: LogLevel | str = LogLevel.info,
    ) -> None:
        """Initialise the structured logger."""
        self._name = name
        self._json_mode = json_mode
        self._stream: TextIO = stream or _default_stream()
        self._level = level if isinstance(level, LogLevel) else LogLevel(level.upper())

    @property
    def name(self) -> str:
        """Return the logger name."""
        return self._name

    @property
    def json_mode(self) -> bool:
        """Return whether JSON mode is enabled."""
        return self._json_mode

    @property
    def level(self) -> LogLevel:
        """Return the minimum level emitted."""
        return self._level

    def debug(self, message: str, **fields: Any) -> None:
        """Log a DEBUG-level message."""
        self._emit(LogLevel.debug, message, fields)

    def info(self, message: str, **fields: Any) -> None:
        """Log an INFO-level message."""
        self._emit(LogLevel.info, message, fields)

    def warning(self, message: str, **fields: Any) -> None:
        """Log a WARNING-level message."""
        self._emit(LogLevel.warning, message, fields)

    def error(self, message: str, **fields: Any) -> None:
        """Log an ERROR-level message."""
        self._emit(LogLevel.error, message, fields)

    def _emit(self, level: LogLevel, message: str, fields: dict[str, Any]) -> None:
        if _LEVEL_ORDER[level] < _LEVEL_ORDER[self._level]:
            return
        timestamp = datetime.now(UTC).isoformat()
        sanitised_message = _sanitize_log_output(message)
        sanitised_fields = {key: _sanitize_log_value(value) for key, value in fields.items()}
        if self._json_mode:
            payload: dict[str, Any] = {
                "timestamp": timestamp,
                "level": level.value,
                "logger": self._name,
                "message": sanitised_message,
            }
            payload.update(sanitised_fields)
            self._stream.write(json.dumps(payload, ensure_ascii=False, default=repr) + "\n")
        else:
            line = f"[{timestamp}] {level.value:<7} {self._name}: {sanitised_message}"
            if sanitised_fields:
                extras = " ".join(
                    f"{key}={json.dumps(value, ensure_ascii=False, default=repr)}"
                    for key, value in sanitised_fields.items()
                )
                line = f"{line} | {extras}"
            self._stream.write(line + "\n")
        self._stream.flush()


def _default_stream() -> TextIO:
    import sys

    return sys.stderr


__all__ = ["StructuredLogger"]
