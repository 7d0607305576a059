"""
Structured logging with key=value and JSON output support.

Wraps the standard library ``logging`` module. Services log through
[Logger][relayoptimizer.core.logger.Logger], which attaches keyword arguments
to the record as structured fields; the lower layers (models, nips, utils)
use plain ``logging.getLogger("relayoptimizer.<module>")`` calls with
``"event key=%s"`` messages. [StructuredFormatter][relayoptimizer.core.logger.StructuredFormatter]
renders both uniformly as ``level name message key=value ...`` or as one
JSON object per line.

Values containing spaces, equals signs, or quotes are escaped and wrapped
in double quotes. Long values are truncated.

Examples:
    ```python
    from relayoptimizer.core.logger import Logger, configure_logging

    configure_logging("INFO")
    logger = Logger("prober")
    logger.info("probe_completed", relay="wss://relay.damus.io", latency_ms=84)
    # info prober probe_completed relay=wss://relay.damus.io latency_ms=84

    relay_logger = logger.bind(relay="wss://nos.lol")
    relay_logger.warning("probe_failed", reason="timeout")
    # warning prober probe_failed relay=wss://nos.lol reason=timeout
    ```
"""

from __future__ import annotations

import datetime
import json
import logging
from typing import Any, ClassVar


_TRUNCATION = "...<truncated {n} chars>"


def _truncate(value: str, max_length: int | None) -> str:
    if max_length and len(value) > max_length:
        return value[:max_length] + _TRUNCATION.format(n=len(value) - max_length)
    return value


def format_kv_pairs(
    kwargs: dict[str, Any],
    max_value_length: int | None = 1000,
    prefix: str = " ",
) -> str:
    """Format a dictionary as space-separated key=value pairs.

    Args:
        kwargs: Key-value pairs to format.
        max_value_length: Maximum characters per value before truncation.
            Pass None to disable truncation.
        prefix: String prepended to the output (default: single space).

    Returns:
        Formatted string, e.g. ``' relay=wss://a.com reason="timed out"'``,
        or an empty string when *kwargs* is empty.
    """
    if not kwargs:
        return ""

    parts = []
    for k, v in kwargs.items():
        s = _truncate(str(v), max_value_length)
        if not s or any(c in s for c in ' ="\''):
            escaped = s.replace("\\", "\\\\").replace('"', '\\"')
            parts.append(f'{k}="{escaped}"')
        else:
            parts.append(f"{k}={s}")

    return prefix + " ".join(parts)


class StructuredFormatter(logging.Formatter):
    """Render log records as key=value text or JSON lines.

    Structured fields are read from the ``structured_kv`` extra attached by
    [Logger][relayoptimizer.core.logger.Logger]. Records without it (plain
    ``logging.getLogger()`` calls) are emitted with the same
    ``level name message`` prefix.

    Args:
        json_output: Emit one JSON object per record instead of text.
    """

    def __init__(self, *, json_output: bool = False) -> None:
        super().__init__()
        self._json_output = json_output

    def format(self, record: logging.LogRecord) -> str:
        extra: dict[str, Any] = getattr(record, "structured_kv", {})
        if self._json_output:
            payload = {
                "timestamp": datetime.datetime.fromtimestamp(
                    record.created, datetime.UTC
                ).isoformat(),
                "level": record.levelname.lower(),
                "logger": record.name,
                "message": record.getMessage(),
                **extra,
            }
            if record.exc_info:
                payload["exception"] = self.formatException(record.exc_info)
            return json.dumps(payload, default=str)

        base = f"{record.levelname.lower()} {record.name} {record.getMessage()}"
        base += format_kv_pairs(extra)
        if record.exc_info:
            base += "\n" + self.formatException(record.exc_info)
        return base


def configure_logging(level: str = "INFO", *, json_output: bool = False) -> None:
    """Install a [StructuredFormatter][relayoptimizer.core.logger.StructuredFormatter] on the root logger.

    Existing root handlers are replaced so repeated calls (tests, CLI
    re-entry) do not duplicate output.
    """
    handler = logging.StreamHandler()
    handler.setFormatter(StructuredFormatter(json_output=json_output))
    root = logging.getLogger()
    for existing in list(root.handlers):
        root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper()))


class Logger:
    """Structured logger that appends keyword arguments as extra fields.

    All public methods mirror the standard logging API with an added
    ``**kwargs`` parameter. Context bound with
    [bind()][relayoptimizer.core.logger.Logger.bind] is prepended to every
    record's fields.

    Examples:
        ```python
        logger = Logger("aggregator")
        logger.info("batch_completed", batch=3, events=87)
        ```
    """

    _DEFAULT_MAX_VALUE_LENGTH: ClassVar[int] = 1000

    def __init__(
        self,
        name: str,
        *,
        max_value_length: int | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        """Initialize a structured logger.

        Args:
            name: Logger name, typically the service name. Maps to
                ``logging.getLogger(name)``.
            max_value_length: Maximum character length for individual
                values before truncation. Defaults to 1000.
            context: Fields attached to every record.
        """
        if max_value_length is None:
            max_value_length = self._DEFAULT_MAX_VALUE_LENGTH
        self._logger = logging.getLogger(name)
        self._max_value_length = max_value_length
        self._context = dict(context or {})

    @property
    def name(self) -> str:
        return self._logger.name

    def bind(self, **context: Any) -> Logger:
        """Return a child logger that adds *context* to every record."""
        return Logger(
            self._logger.name,
            max_value_length=self._max_value_length,
            context={**self._context, **context},
        )

    def _make_extra(self, kwargs: dict[str, Any]) -> dict[str, Any]:
        fields = {**self._context, **kwargs}
        if not fields:
            return {}
        truncated = {
            k: _truncate(v, self._max_value_length) if isinstance(v, str) else v
            for k, v in fields.items()
        }
        return {"structured_kv": truncated}

    def _log(self, level: int, msg: str, kwargs: dict[str, Any], *, exc_info: bool = False) -> None:
        if not self._logger.isEnabledFor(level):
            return
        self._logger.log(level, msg, extra=self._make_extra(kwargs), exc_info=exc_info)

    def debug(self, msg: str, **kwargs: Any) -> None:
        """Log a DEBUG level message with optional key=value pairs."""
        self._log(logging.DEBUG, msg, kwargs)

    def info(self, msg: str, **kwargs: Any) -> None:
        """Log an INFO level message with optional key=value pairs."""
        self._log(logging.INFO, msg, kwargs)

    def warning(self, msg: str, **kwargs: Any) -> None:
        """Log a WARNING level message with optional key=value pairs."""
        self._log(logging.WARNING, msg, kwargs)

    def error(self, msg: str, **kwargs: Any) -> None:
        """Log an ERROR level message with optional key=value pairs."""
        self._log(logging.ERROR, msg, kwargs)

    def exception(self, msg: str, **kwargs: Any) -> None:
        """Log an ERROR level message with the active traceback."""
        self._log(logging.ERROR, msg, kwargs, exc_info=True)


__all__ = ["Logger", "StructuredFormatter", "configure_logging", "format_kv_pairs"]
