"""Canonical page record emitted by every page source."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from dumpfeed.wiki.title import WikiTitle

ANONYMOUS_CONTRIBUTOR_ID = "0"


@dataclass(slots=True)
class WikiPage:
    """One page at its selected revision, ready for extraction.

    ``contributor_id`` is ``"0"`` exactly when the edit was anonymous, in which
    case ``contributor_name`` holds the IP address instead of a username.
    """

    title: WikiTitle
    page_id: str
    revision_id: str
    timestamp: str
    contributor_id: str
    contributor_name: str
    source: str
    format: str
    redirect: WikiTitle | None = None

    @property
    def is_redirect(self) -> bool:
        return self.redirect is not None

    @property
    def is_anonymous(self) -> bool:
        return self.contributor_id == ANONYMOUS_CONTRIBUTOR_ID


PageCallback = Callable[[WikiPage], object]
TitleFilter = Callable[[WikiTitle], bool]


def accept_all(title: WikiTitle) -> bool:
    return True


def resolve_contributor(contributor_id: str | None, username: str | None, ip: str | None) -> tuple[str, str]:
    """Return ``(id, name)`` with a missing id normalized to the anonymous form."""
    cleaned_id = (contributor_id or "").strip()
    if not cleaned_id or cleaned_id == ANONYMOUS_CONTRIBUTOR_ID:
        return ANONYMOUS_CONTRIBUTOR_ID, (ip or "").strip()
    return cleaned_id, (username or "").strip()
