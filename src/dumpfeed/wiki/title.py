"""Namespace-aware page titles resolved against a wiki language."""

from __future__ import annotations

from dataclasses import dataclass
import re

from dumpfeed.wiki.language import MAIN_NAMESPACE, Language

_ILLEGAL_CHARS_RE = re.compile(r"[\[\]{}|<>]")


def _normalize_whitespace(raw: str) -> str:
    return " ".join(raw.replace("_", " ").split())


def _capitalize_first(text: str) -> str:
    return text[:1].upper() + text[1:]


@dataclass(frozen=True, slots=True)
class WikiTitle:
    """A parsed page title.

    ``decoded`` never carries the namespace prefix; ``full_name`` renders it
    back with the localized prefix of ``language``.
    """

    decoded: str
    namespace: int
    language: Language
    fragment: str | None = None
    is_valid: bool = True

    @classmethod
    def parse(cls, raw: str | None, language: Language) -> "WikiTitle":
        """Resolve ``raw`` against the namespace names of ``language``.

        Malformed titles come back as an invalid sentinel instead of raising, so
        the caller's filter decides what to do with them.
        """
        text = raw or ""
        fragment: str | None = None
        if "#" in text:
            text, fragment = text.split("#", 1)
            fragment = fragment.strip() or None

        text = _normalize_whitespace(text)
        if text.startswith(":"):
            text = text[1:].lstrip()

        if not text or _ILLEGAL_CHARS_RE.search(text):
            return cls.invalid(raw or "", language)

        namespace = MAIN_NAMESPACE
        if ":" in text:
            prefix, remainder = text.split(":", 1)
            code = language.namespace_code(prefix)
            if code is not None and remainder.strip():
                namespace = code
                text = remainder.strip()

        return cls(
            decoded=_capitalize_first(text),
            namespace=namespace,
            language=language,
            fragment=fragment,
        )

    @classmethod
    def invalid(cls, raw: str, language: Language) -> "WikiTitle":
        return cls(decoded=raw, namespace=MAIN_NAMESPACE, language=language, is_valid=False)

    @property
    def encoded(self) -> str:
        return self.decoded.replace(" ", "_")

    @property
    def full_name(self) -> str:
        prefix = self.language.namespace_name(self.namespace)
        return f"{prefix}:{self.decoded}" if prefix else self.decoded

    def __str__(self) -> str:
        return self.full_name
