"""Page source over a single readable dump stream."""

from __future__ import annotations

import weakref

from dumpfeed.sources.base import PageSource, ReaderFactory
from dumpfeed.sources.dump_parser import ScanState, WikipediaDumpParser
from dumpfeed.sources.models import PageCallback, TitleFilter, WikiPage
from dumpfeed.wiki.language import Language


class PageIterable:
    """Pull-mode view of one dump stream.

    The reader is opened as soon as the iterable is built, not on first use. It
    is released by :meth:`close`, by leaving a ``with`` block, when the stream
    ends, or at the latest when the iterable is garbage collected.
    """

    def __init__(
        self,
        reader_factory: ReaderFactory,
        language: Language | None,
        title_filter: TitleFilter | None,
        *,
        source_name: str,
    ) -> None:
        reader = reader_factory()
        self._finalizer = weakref.finalize(self, reader.close)
        self._parser = WikipediaDumpParser(reader, language, title_filter, None, source_name=source_name)
        self._parser.prepare_iteration()

    @property
    def closed(self) -> bool:
        return not self._finalizer.alive

    @property
    def state(self) -> ScanState:
        return self._parser.state

    @property
    def error(self) -> BaseException | None:
        """Cause of an early end of stream; None when the stream ended cleanly."""

        return self._parser.error

    def close(self) -> None:
        self._finalizer()

    def __iter__(self) -> "PageIterable":
        return self

    def __next__(self) -> WikiPage:
        if self.closed or not self._parser.has_next_page():
            self.close()
            raise StopIteration
        page = self._parser.next_page()
        if page is None:
            self.close()
            raise StopIteration
        return page

    def __enter__(self) -> "PageIterable":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


class XMLReaderSource(PageSource):
    """Reads pages from one reader, opened anew for every traversal."""

    def __init__(
        self,
        reader_factory: ReaderFactory,
        language: Language | None = None,
        title_filter: TitleFilter | None = None,
        *,
        source_name: str = "<reader>",
    ) -> None:
        self._reader_factory = reader_factory
        self._language = language
        self._filter = title_filter
        self._source_name = source_name

    def foreach(self, proc: PageCallback) -> None:
        reader = self._reader_factory()
        try:
            WikipediaDumpParser(reader, self._language, self._filter, proc, source_name=self._source_name).run()
        finally:
            reader.close()

    def iterable(self) -> PageIterable:
        return PageIterable(self._reader_factory, self._language, self._filter, source_name=self._source_name)
