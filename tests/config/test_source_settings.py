from __future__ import annotations

import os

import pytest

from dumpfeed.config import SourceSettings
from dumpfeed.wiki.language import Language


def test_settings_defaults_from_empty_env() -> None:
    settings = SourceSettings.from_env({})

    assert settings.language is None
    assert settings.default_language == Language.get("en")
    assert settings.max_workers == (os.cpu_count() or 1)
    assert settings.raise_on_task_error is False


def test_settings_load_from_env() -> None:
    settings = SourceSettings.from_env(
        {
            "DUMPFEED_LANGUAGE": "de",
            "DUMPFEED_DEFAULT_LANGUAGE": "fr",
            "DUMPFEED_MAX_WORKERS": "3",
            "DUMPFEED_RAISE_ON_TASK_ERROR": "yes",
        }
    )

    assert settings.language == Language.get("de")
    assert settings.default_language == Language.get("fr")
    assert settings.max_workers == 3
    assert settings.raise_on_task_error is True


def test_settings_reject_invalid_values() -> None:
    with pytest.raises(ValueError, match="DUMPFEED_MAX_WORKERS"):
        SourceSettings.from_env({"DUMPFEED_MAX_WORKERS": "0"})

    with pytest.raises(ValueError, match="DUMPFEED_MAX_WORKERS"):
        SourceSettings.from_env({"DUMPFEED_MAX_WORKERS": "many"})

    with pytest.raises(ValueError, match="DUMPFEED_DEFAULT_LANGUAGE"):
        SourceSettings.from_env({"DUMPFEED_DEFAULT_LANGUAGE": " "})

    with pytest.raises(ValueError, match="DUMPFEED_RAISE_ON_TASK_ERROR"):
        SourceSettings.from_env({"DUMPFEED_RAISE_ON_TASK_ERROR": "maybe"})
