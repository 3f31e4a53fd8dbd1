"""Runtime configuration for dump reading."""

from __future__ import annotations

from dataclasses import dataclass
import os
from typing import Mapping

from dumpfeed.wiki.language import Language

DEFAULT_LANGUAGE_CODE = Language.DEFAULT_CODE

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off", ""}


def _parse_positive_int(*, name: str, raw_value: str, minimum: int = 1) -> int:
    try:
        value = int(raw_value)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer") from exc
    if value < minimum:
        raise ValueError(f"{name} must be >= {minimum}")
    return value


def _parse_bool(*, name: str, raw_value: str) -> bool:
    lowered = raw_value.lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ValueError(f"{name} must be one of 0/1/true/false/yes/no")


@dataclass(frozen=True, slots=True)
class SourceSettings:
    """Validated settings for building page sources."""

    language: Language | None = None
    default_language: Language = Language(DEFAULT_LANGUAGE_CODE)
    max_workers: int = os.cpu_count() or 1
    raise_on_task_error: bool = False

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "SourceSettings":
        source: Mapping[str, str] = os.environ if environ is None else environ

        language_raw = source.get("DUMPFEED_LANGUAGE", "").strip()
        default_language_raw = source.get("DUMPFEED_DEFAULT_LANGUAGE", DEFAULT_LANGUAGE_CODE).strip()
        max_workers_raw = source.get("DUMPFEED_MAX_WORKERS", "").strip()
        raise_raw = source.get("DUMPFEED_RAISE_ON_TASK_ERROR", "").strip()

        if not default_language_raw:
            raise ValueError("DUMPFEED_DEFAULT_LANGUAGE cannot be empty")

        max_workers = (
            _parse_positive_int(name="DUMPFEED_MAX_WORKERS", raw_value=max_workers_raw)
            if max_workers_raw
            else os.cpu_count() or 1
        )

        return cls(
            language=Language.get(language_raw) if language_raw else None,
            default_language=Language.get(default_language_raw),
            max_workers=max_workers,
            raise_on_task_error=_parse_bool(name="DUMPFEED_RAISE_ON_TASK_ERROR", raw_value=raise_raw),
        )
