"""Sink configuration — the ``[general]`` section of the plugin's ``.cfg`` file.

The host passes a configuration directory to ``init``; the sink reads
``<config_path>/<package>.cfg`` from it.  The file uses INI syntax::

    [general]
    enabled = yes
    backend = http://localhost:7777/events
    events = sessions, handles, media

A missing or unparseable file is reported and treated as absent, which
leaves the sink disabled.
"""

from __future__ import annotations

import configparser
import logging
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator

from eventrelay.core.levels import VERBOSE

logger = logging.getLogger(__name__)

GENERAL_SECTION = "general"
CONFIG_EXTENSION = ".cfg"

_TRUE_VALUES = frozenset({"true", "yes", "1"})


def is_truthy(value: Any) -> bool:
    """Return ``True`` for the host's truthy spellings (``true``, ``yes``, ``1``)."""
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    return str(value).strip().lower() in _TRUE_VALUES


def config_filename(config_path: str | Path, package: str) -> Path:
    """Return the configuration file for *package* inside *config_path*."""
    return Path(config_path) / f"{package}{CONFIG_EXTENSION}"


def backend_is_valid(backend: str | None) -> bool:
    """A backend is usable when it starts with ``http`` (so ``https`` too)."""
    return bool(backend) and backend.startswith("http")


class GeneralSection(BaseModel):
    """The recognised keys of the ``[general]`` section."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    enabled: bool = False
    backend: str | None = None
    events: str | None = None

    @field_validator("enabled", mode="before")
    @classmethod
    def _coerce_enabled(cls, value: Any) -> bool:
        return is_truthy(value)


def load_config(path: str | Path) -> dict[str, dict[str, str]] | None:
    """Parse an INI file into ``{section: {key: value}}``.

    Returns ``None`` if the file does not exist or cannot be parsed.
    """
    path = Path(path)
    if not path.is_file():
        logger.error("Configuration file not found: %s", path)
        return None

    parser = configparser.ConfigParser(
        interpolation=None,
        comment_prefixes=("#", ";"),
        inline_comment_prefixes=("#", ";"),
    )
    try:
        with path.open(encoding="utf-8") as config_file:
            parser.read_file(config_file)
    except (OSError, UnicodeDecodeError, configparser.Error) as exc:
        logger.error("Error parsing configuration file %s: %s", path, exc)
        return None

    return {section: dict(parser.items(section)) for section in parser.sections()}


def print_config(sections: dict[str, dict[str, str]]) -> None:
    """Dump every section and key at VERB level."""
    for section, items in sections.items():
        logger.log(VERBOSE, "[%s]", section)
        for key, value in items.items():
            logger.log(VERBOSE, "    %s: %s", key, value)


def general_section(sections: dict[str, dict[str, str]]) -> GeneralSection:
    """Validate the ``[general]`` section; absent keys take their defaults."""
    return GeneralSection(**sections.get(GENERAL_SECTION, {}))
