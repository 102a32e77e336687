"""Configuration models and helpers for report generation."""

from __future__ import annotations

import logging
import tomllib
from dataclasses import dataclass, replace
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any, Optional

from .errors import ConfigError
from .paths import get_config_path

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ReportSettings:
    """Settings shared by the ``summary`` and ``excel`` commands."""

    hourly_rate: Decimal = Decimal(0)
    strict: bool = False

    @classmethod
    def from_mapping(cls, data: dict[str, Any]) -> "ReportSettings":
        section = data.get("report", {})
        if not isinstance(section, dict):
            raise ConfigError("[report] must be a table")
        settings = cls()
        if "rate" in section:
            settings.hourly_rate = parse_rate(section["rate"])
        if "strict" in section:
            if not isinstance(section["strict"], bool):
                raise ConfigError("report.strict must be true or false")
            settings.strict = section["strict"]
        return settings

    def override(
        self, *, rate: Optional[float] = None, strict: Optional[bool] = None
    ) -> "ReportSettings":
        """Return a copy with command-line values applied on top."""
        updated = replace(self)
        if rate is not None:
            updated.hourly_rate = parse_rate(rate)
        if strict is not None:
            updated.strict = strict
        return updated


def parse_rate(value: Any) -> Decimal:
    if isinstance(value, bool):
        raise ConfigError(f"invalid hourly rate: {value!r}")
    try:
        rate = Decimal(str(value))
    except InvalidOperation as exc:
        raise ConfigError(f"invalid hourly rate: {value!r}") from exc
    if not rate.is_finite() or rate < 0:
        raise ConfigError(f"hourly rate must be a non-negative number, got {value!r}")
    return rate


def load_settings(path: Optional[Path] = None) -> ReportSettings:
    """Load settings from ``path`` or the default per-user config file.

    A missing default file means defaults; a missing explicit file is an error.
    """
    explicit = path is not None
    config_path = Path(path) if explicit else get_config_path()
    if not config_path.exists():
        if explicit:
            raise ConfigError(f"config file not found: {config_path}")
        logger.debug("No config file at %s; using defaults.", config_path)
        return ReportSettings()

    try:
        with config_path.open("rb") as handle:
            data = tomllib.load(handle)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"{config_path}: {exc}") from exc
    logger.debug("Loaded settings from %s", config_path)
    return ReportSettings.from_mapping(data)
