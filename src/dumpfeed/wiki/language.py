"""Wiki language codes and their namespace name tables."""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from typing import ClassVar, Mapping

MAIN_NAMESPACE = 0

# Canonical names are valid on every wiki regardless of its content language.
_CANONICAL_NAMESPACES: dict[int, tuple[str, ...]] = {
    -2: ("Media",),
    -1: ("Special",),
    1: ("Talk",),
    2: ("User",),
    3: ("User talk",),
    4: ("Project",),
    5: ("Project talk",),
    6: ("File", "Image"),
    7: ("File talk", "Image talk"),
    8: ("MediaWiki",),
    9: ("MediaWiki talk",),
    10: ("Template",),
    11: ("Template talk",),
    12: ("Help",),
    13: ("Help talk",),
    14: ("Category",),
    15: ("Category talk",),
}

# First name listed is the one used when rendering a title.
_LOCALIZED_NAMESPACES: dict[str, dict[int, tuple[str, ...]]] = {
    "de": {
        -2: ("Medium",),
        -1: ("Spezial",),
        1: ("Diskussion",),
        2: ("Benutzer", "Benutzerin"),
        3: ("Benutzer Diskussion", "Benutzerin Diskussion"),
        4: ("Wikipedia",),
        5: ("Wikipedia Diskussion",),
        6: ("Datei", "Bild"),
        7: ("Datei Diskussion", "Bild Diskussion"),
        8: ("MediaWiki",),
        9: ("MediaWiki Diskussion",),
        10: ("Vorlage",),
        11: ("Vorlage Diskussion",),
        12: ("Hilfe",),
        13: ("Hilfe Diskussion",),
        14: ("Kategorie",),
        15: ("Kategorie Diskussion",),
    },
    "fr": {
        -2: ("Média",),
        -1: ("Spécial",),
        1: ("Discussion",),
        2: ("Utilisateur", "Utilisatrice"),
        3: ("Discussion utilisateur", "Discussion utilisatrice"),
        4: ("Wikipédia",),
        5: ("Discussion Wikipédia",),
        6: ("Fichier",),
        7: ("Discussion fichier",),
        8: ("MediaWiki",),
        9: ("Discussion MediaWiki",),
        10: ("Modèle",),
        11: ("Discussion modèle",),
        12: ("Aide",),
        13: ("Discussion aide",),
        14: ("Catégorie",),
        15: ("Discussion catégorie",),
    },
    "en": {
        4: ("Wikipedia",),
        5: ("Wikipedia talk",),
    },
}


def _normalize_code(raw: str) -> str:
    return raw.strip().lower().replace("_", "-")


def _normalize_namespace_name(raw: str) -> str:
    return " ".join(raw.replace("_", " ").split()).casefold()


@lru_cache(maxsize=None)
def _namespace_lookup(wiki_code: str) -> Mapping[str, int]:
    lookup: dict[str, int] = {}
    for code, names in _CANONICAL_NAMESPACES.items():
        for name in names:
            lookup[_normalize_namespace_name(name)] = code
    for code, names in _LOCALIZED_NAMESPACES.get(wiki_code, {}).items():
        for name in names:
            lookup[_normalize_namespace_name(name)] = code
    return lookup


@dataclass(frozen=True, slots=True)
class Language:
    """Extraction language identified by its wiki code (``en``, ``de``, ...)."""

    wiki_code: str

    DEFAULT_CODE: ClassVar[str] = "en"

    @classmethod
    def get(cls, code: str) -> "Language":
        normalized = _normalize_code(code or "")
        if not normalized:
            raise ValueError("Language code cannot be empty")
        return cls(wiki_code=normalized)

    @classmethod
    def default(cls) -> "Language":
        return cls(wiki_code=cls.DEFAULT_CODE)

    @classmethod
    def from_dbname(cls, dbname: str | None) -> "Language | None":
        """Derive a language from a site ``dbname`` such as ``dewiki``."""
        if not dbname:
            return None
        raw = dbname.strip().lower()
        if not raw.endswith("wiki") or raw == "wiki":
            return None
        return cls.get(raw[: -len("wiki")])

    def namespace_code(self, prefix: str) -> int | None:
        """Return the namespace code a title prefix maps to, or None."""
        return _namespace_lookup(self.wiki_code).get(_normalize_namespace_name(prefix))

    def namespace_name(self, code: int) -> str:
        if code == MAIN_NAMESPACE:
            return ""
        localized = _LOCALIZED_NAMESPACES.get(self.wiki_code, {}).get(code)
        if localized:
            return localized[0]
        canonical = _CANONICAL_NAMESPACES.get(code)
        return canonical[0] if canonical else ""

    def __str__(self) -> str:
        return self.wiki_code
