"""
Structured logging with key=value and JSON output support.

[Logger][subrpc.core.logger.Logger] wraps a stdlib ``logging.Logger`` and
turns keyword arguments into structured fields. In the default mode the
fields travel in the ``structured_kv`` extra and are rendered by
[StructuredFormatter][subrpc.core.logger.StructuredFormatter] as
``key=value`` pairs; in JSON mode the whole record is serialized into the
message.

Examples:
    ```python
    from subrpc.core.logger import Logger

    logger = Logger("subrpc.registry")
    logger.info("registry_updated", name="Polkadot Directory", chains=12)
    # info subrpc.registry registry_updated name="Polkadot Directory" chains=12

    Logger("subrpc.registry", json_output=True).info("registry_updated", chains=12)
    # {"timestamp": "...", "level": "info", "service": "subrpc.registry", ...}
    ```
"""

from __future__ import annotations

import datetime
import json
import logging
from typing import Any, ClassVar


_TRUNCATION_MARK = "...<truncated {n} chars>"


def _truncate(value: str, max_value_length: int | None) -> str:
    if max_value_length and len(value) > max_value_length:
        return value[:max_value_length] + _TRUNCATION_MARK.format(n=len(value) - max_value_length)
    return value


def format_kv_pairs(
    kwargs: dict[str, Any],
    max_value_length: int | None = 1000,
    prefix: str = " ",
) -> str:
    """Format a dictionary as space-separated key=value pairs.

    Values longer than ``max_value_length`` are truncated. Empty values and
    values containing whitespace, ``=`` or quotes are quoted, with
    backslashes and double quotes escaped.

    Returns:
        e.g. ``' url=wss://rpc.polkadot.io name="Parity Bad"'``, or ``""``
        when ``kwargs`` is empty.
    """
    if not kwargs:
        return ""

    parts = []
    for key, value in kwargs.items():
        s = _truncate(str(value), max_value_length)
        if not s or any(c in s for c in " =\"'"):
            escaped = s.replace("\\", "\\\\").replace('"', '\\"')
            parts.append(f'{key}="{escaped}"')
        else:
            parts.append(f"{key}={s}")
    return prefix + " ".join(parts)


class StructuredFormatter(logging.Formatter):
    """Render every record as ``level name message key=value ...``.

    Records without ``structured_kv`` (plain ``logging.getLogger()`` calls
    in the models, probe and utils layers) get the same prefix so the
    output stays uniform.
    """

    def format(self, record: logging.LogRecord) -> str:
        line = f"{record.levelname.lower()} {record.name} {record.getMessage()}"
        fields: dict[str, Any] = getattr(record, "structured_kv", {})
        if fields:
            line += format_kv_pairs(fields)
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


class JsonFormatter(logging.Formatter):
    """Render every record as one JSON object per line.

    Used by the CLI's ``--log-json`` so that records from both
    [Logger][subrpc.core.logger.Logger] and plain stdlib loggers share the
    same shape as ``Logger(json_output=True)``.
    """

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": datetime.datetime.fromtimestamp(record.created, datetime.UTC).isoformat(),
            "level": record.levelname.lower(),
            "service": record.name,
            "message": record.getMessage(),
            **getattr(record, "structured_kv", {}),
        }
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


class Logger:
    """Structured logger that appends keyword arguments as fields.

    Mirrors the stdlib API (``debug`` .. ``critical``, ``exception``) with
    an extra ``**kwargs`` carrying the structured fields.
    """

    _DEFAULT_MAX_VALUE_LENGTH: ClassVar[int] = 1000

    def __init__(
        self,
        name: str,
        *,
        json_output: bool = False,
        max_value_length: int | None = None,
    ) -> None:
        self._logger = logging.getLogger(name)
        self._json_output = json_output
        self._max_value_length = (
            self._DEFAULT_MAX_VALUE_LENGTH if max_value_length is None else max_value_length
        )

    @property
    def name(self) -> str:
        return self._logger.name

    def _format_json(self, msg: str, level: str, kwargs: dict[str, Any]) -> str:
        record = {
            "timestamp": datetime.datetime.now(datetime.UTC).isoformat(),
            "level": level,
            "service": self._logger.name,
            "message": msg,
            **kwargs,
        }
        return json.dumps(record, default=str)

    def _make_extra(self, kwargs: dict[str, Any]) -> dict[str, Any]:
        if not kwargs:
            return {}
        # Pre-truncate so the formatter receives clean data; short values keep their type
        fields: dict[str, Any] = {}
        for key, value in kwargs.items():
            s = str(value)
            truncated = _truncate(s, self._max_value_length)
            fields[key] = value if truncated is s else truncated
        return {"structured_kv": fields}

    def _log(
        self,
        level: int,
        msg: str,
        kwargs: dict[str, Any],
        *,
        exc_info: bool = False,
    ) -> None:
        if not self._logger.isEnabledFor(level):
            return
        if self._json_output:
            level_name = logging.getLevelName(level).lower()
            self._logger.log(level, self._format_json(msg, level_name, kwargs), exc_info=exc_info)
        else:
            self._logger.log(level, msg, extra=self._make_extra(kwargs), exc_info=exc_info)

    def debug(self, msg: str, **kwargs: Any) -> None:
        self._log(logging.DEBUG, msg, kwargs)

    def info(self, msg: str, **kwargs: Any) -> None:
        self._log(logging.INFO, msg, kwargs)

    def warning(self, msg: str, **kwargs: Any) -> None:
        self._log(logging.WARNING, msg, kwargs)

    def error(self, msg: str, **kwargs: Any) -> None:
        self._log(logging.ERROR, msg, kwargs)

    def critical(self, msg: str, **kwargs: Any) -> None:
        self._log(logging.CRITICAL, msg, kwargs)

    def exception(self, msg: str, **kwargs: Any) -> None:
        """Log at ERROR level with the current exception's traceback."""
        self._log(logging.ERROR, msg, kwargs, exc_info=True)
