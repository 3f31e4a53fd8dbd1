"""Shared contract for page sources."""

from __future__ import annotations

from abc import ABC, abstractmethod
import threading
from typing import IO, Callable

from dumpfeed.sources.models import PageCallback, WikiPage

ReaderFactory = Callable[[], IO[bytes]]


class PageSource(ABC):
    """A traversable collection of wiki pages."""

    has_definite_size = True

    @abstractmethod
    def foreach(self, proc: PageCallback) -> object:
        """Call ``proc`` once per page; returns after the last call completed."""

    def collect(self) -> list[WikiPage]:
        """Gather every page into a list; order is only kept per input."""

        pages: list[WikiPage] = []
        lock = threading.Lock()

        def _append(page: WikiPage) -> None:
            with lock:
                pages.append(page)

        self.foreach(_append)
        return pages
