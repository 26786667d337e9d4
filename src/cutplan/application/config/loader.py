"""Job file loading.

Every failure surfaces as ``ConfigError``; its ``error_type`` is one of
``file_not_found``, ``permission_denied``, ``file_read_error``,
``json_parse`` or ``validation``.
"""

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from cutplan.application.config.schema import JobConfiguration

logger = logging.getLogger(__name__)


class ConfigError(Exception):
    """A job file could not be read, parsed or validated.

    Attributes:
        message: Human-readable summary.
        error_type: Failure category.
        path: Job file, when loaded from disk.
        details: ``line``/``column``/``message`` for JSON errors, or one
            ``path``/``message``/``value``/``error_type`` dict per schema
            violation.
    """

    def __init__(
        self,
        message: str,
        error_type: str = "unknown",
        path: Path | None = None,
        details: list[dict[str, Any]] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.error_type = error_type
        self.path = path
        self.details = details or []

    def __str__(self) -> str:
        return self.message


def _format_json_path(loc: tuple[str | int, ...]) -> str:
    """``("cuts", 2, "quantity")`` -> ``"cuts[2].quantity"``."""
    path = ""
    for segment in loc:
        if isinstance(segment, int):
            path += f"[{segment}]"
        else:
            path += f".{segment}" if path else str(segment)
    return path


def _validation_error(error: PydanticValidationError, path: Path | None) -> ConfigError:
    details = [
        {
            "path": _format_json_path(err["loc"]),
            "message": err["msg"],
            "value": err.get("input"),
            "error_type": err["type"],
        }
        for err in error.errors()
    ]

    lines = ["Job file validation failed:"]
    for detail in details:
        line = f"  - {detail['path'] or '(root)'}: {detail['message']}"
        # Nested input would echo the whole job section back
        if detail["value"] is not None and not isinstance(detail["value"], (dict, list)):
            line += f" (got: {detail['value']!r})"
        lines.append(line)

    return ConfigError("\n".join(lines), error_type="validation", path=path, details=details)


def _read_text(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise ConfigError(f"Job file not found: {path}", "file_not_found", path)
    except PermissionError:
        raise ConfigError(f"Permission denied reading job file: {path}", "permission_denied", path)
    except OSError as e:
        raise ConfigError(f"Cannot read job file {path}: {e}", "file_read_error", path)


def load_config(path: Path) -> JobConfiguration:
    """Read, parse and validate the JSON job file at ``path``.

    Raises:
        ConfigError: On any failure; see ``ConfigError.error_type``.
    """
    content = _read_text(path)

    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        raise ConfigError(
            f"Invalid JSON in {path} at line {e.lineno}, column {e.colno}: {e.msg}",
            error_type="json_parse",
            path=path,
            details=[{"line": e.lineno, "column": e.colno, "message": e.msg}],
        )

    logger.debug("Loaded job file %s", path)
    return _validate(data, path)


def load_config_from_dict(data: dict[str, Any]) -> JobConfiguration:
    """Validate an already-parsed job."""
    return _validate(data)


def _validate(data: Any, path: Path | None = None) -> JobConfiguration:
    try:
        return JobConfiguration.model_validate(data)
    except PydanticValidationError as e:
        raise _validation_error(e, path)
