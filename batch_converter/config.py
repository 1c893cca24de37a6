"""Runtime settings read from the environment."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import FrozenSet, Optional

ENV_PREFIX = "BATCH_CONVERTER_"

DEFAULT_PAGE_KINDS = frozenset({"png", "svg"})
# kinds that can be exported once per part; paged ones go through page-by-page
DEFAULT_PART_KINDS = frozenset({"pdf", "mp3"})
DEFAULT_PAGED_PART_KINDS = frozenset({"png"})


def _kinds_from_env(name: str) -> Optional[FrozenSet[str]]:
    value = os.getenv(ENV_PREFIX + name)
    if value is None:
        return None
    return frozenset(kind.strip().lower().lstrip(".") for kind in value.split(",") if kind.strip())


def log_level_from_env(default: int = logging.WARNING) -> int:
    value = os.getenv(ENV_PREFIX + "LOG_LEVEL")
    if not value:
        return default
    level = logging.getLevelName(value.strip().upper())
    return level if isinstance(level, int) else default


@dataclass(frozen=True)
class ConverterSettings:
    """
    Output-kind classification used by the converter.

    Attributes:
        page_kinds: Kinds written one file per page
        part_kinds: Kinds a part template may use, one file per part
        paged_part_kinds: Part-template kinds written page by page per part
        native_kinds: Kinds saved by the document itself; ``None`` defers to the loader
    """
    page_kinds: FrozenSet[str] = DEFAULT_PAGE_KINDS
    part_kinds: FrozenSet[str] = DEFAULT_PART_KINDS
    paged_part_kinds: FrozenSet[str] = DEFAULT_PAGED_PART_KINDS
    native_kinds: Optional[FrozenSet[str]] = field(default=None)

    @classmethod
    def from_env(cls) -> "ConverterSettings":
        """Build settings, letting ``BATCH_CONVERTER_*`` variables override defaults."""

        page_kinds = _kinds_from_env("PAGE_KINDS")
        native_kinds = _kinds_from_env("NATIVE_KINDS")
        return cls(
            page_kinds=page_kinds if page_kinds is not None else DEFAULT_PAGE_KINDS,
            native_kinds=native_kinds,
        )


__all__ = ["ConverterSettings", "log_level_from_env"]
