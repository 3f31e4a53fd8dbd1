from __future__ import annotations

import pytest

from dumpfeed.wiki.language import Language
from dumpfeed.wiki.title import WikiTitle

GERMAN = Language.get("de")
ENGLISH = Language.get("en")


def test_title_is_normalized() -> None:
    title = WikiTitle.parse("  new_york   city ", ENGLISH)

    assert title.decoded == "New york city"
    assert title.encoded == "New_york_city"
    assert title.namespace == 0
    assert title.is_valid


def test_localized_namespace_depends_on_language() -> None:
    german = WikiTitle.parse("Kategorie:Berlin", GERMAN)
    english = WikiTitle.parse("Kategorie:Berlin", ENGLISH)

    assert (german.namespace, german.decoded) == (14, "Berlin")
    assert (english.namespace, english.decoded) == (0, "Kategorie:Berlin")


def test_canonical_namespace_names_work_in_every_language() -> None:
    title = WikiTitle.parse("category:Berlin", GERMAN)

    assert title.namespace == 14
    assert title.full_name == "Kategorie:Berlin"


def test_fragment_and_leading_colon_are_split_off() -> None:
    title = WikiTitle.parse(":Help:Contents#Editing", ENGLISH)

    assert title.namespace == 12
    assert title.decoded == "Contents"
    assert title.fragment == "Editing"


def test_unknown_prefix_stays_in_main_namespace() -> None:
    title = WikiTitle.parse("Star Wars: Episode IV", ENGLISH)

    assert title.namespace == 0
    assert title.decoded == "Star Wars: Episode IV"


@pytest.mark.parametrize("raw", ["", "   ", None, "A|B", "{{Template}}"])
def test_malformed_titles_come_back_as_invalid_sentinel(raw: str | None) -> None:
    title = WikiTitle.parse(raw, ENGLISH)

    assert title.is_valid is False


def test_language_codes_are_normalized_and_validated() -> None:
    assert Language.get(" DE ") == GERMAN
    assert Language.get("zh_yue").wiki_code == "zh-yue"
    assert Language.from_dbname("dewiki") == GERMAN
    assert Language.from_dbname("wiki") is None
    assert Language.from_dbname("commonswiktionary") is None

    with pytest.raises(ValueError, match="cannot be empty"):
        Language.get("  ")
