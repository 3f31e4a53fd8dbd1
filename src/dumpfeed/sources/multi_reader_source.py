"""Concurrent page source fanning several dump readers out over a thread pool."""

from __future__ import annotations

from concurrent.futures import Future, ThreadPoolExecutor, wait
from dataclasses import dataclass, field
import logging
import os
from typing import Sequence

from dumpfeed.sources.base import PageSource, ReaderFactory
from dumpfeed.sources.dump_parser import WikipediaDumpParser
from dumpfeed.sources.errors import FanOutError, TaskFailure
from dumpfeed.sources.models import PageCallback, TitleFilter
from dumpfeed.wiki.language import Language

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class FanOutReport:
    """Per-traversal outcome of a fan-out over several readers."""

    files: int
    failures: list[TaskFailure] = field(default_factory=list)

    @property
    def failed(self) -> int:
        return len(self.failures)

    @property
    def ok(self) -> bool:
        return not self.failures


class MultipleXMLReaderSource(PageSource):
    """Parses every reader on its own worker thread.

    Pages of one reader reach ``proc`` in document order; pages of different
    readers interleave freely, so ``proc`` must be thread-safe. A failing reader
    does not stop the others. Failures are logged and returned in the
    :class:`FanOutReport`; they are raised only with ``raise_on_error=True``.
    """

    def __init__(
        self,
        reader_factories: Sequence[ReaderFactory],
        language: Language | None = None,
        title_filter: TitleFilter | None = None,
        *,
        max_workers: int | None = None,
        raise_on_error: bool = False,
        source_names: Sequence[str] | None = None,
    ) -> None:
        if max_workers is not None and max_workers < 1:
            raise ValueError("max_workers must be >= 1")
        if source_names is not None and len(source_names) != len(reader_factories):
            raise ValueError("source_names must match reader_factories")

        self._reader_factories = list(reader_factories)
        self._language = language
        self._filter = title_filter
        self._max_workers = max_workers
        self._raise_on_error = raise_on_error
        self._source_names = (
            list(source_names)
            if source_names is not None
            else [f"<reader {index}>" for index in range(len(self._reader_factories))]
        )

    def foreach(self, proc: PageCallback) -> FanOutReport:
        workers = self._max_workers or os.cpu_count() or 1
        executor = ThreadPoolExecutor(max_workers=workers, thread_name_prefix="dumpfeed-reader")
        futures: list[Future[None]] = []
        try:
            for index, reader_factory in enumerate(self._reader_factories):
                futures.append(executor.submit(self._parse_one, index, reader_factory, proc))
            wait(futures)
        finally:
            executor.shutdown(wait=True)

        failures: list[TaskFailure] = []
        for index, future in enumerate(futures):
            error = future.exception()
            if error is None:
                continue
            LOGGER.error("Reader task for %s failed: %s", self._source_names[index], error, exc_info=error)
            failures.append(TaskFailure(index=index, error=error))

        report = FanOutReport(files=len(futures), failures=failures)
        if failures and self._raise_on_error:
            raise FanOutError(failures)
        return report

    def _parse_one(self, index: int, reader_factory: ReaderFactory, proc: PageCallback) -> None:
        reader = reader_factory()
        try:
            WikipediaDumpParser(
                reader,
                self._language,
                self._filter,
                proc,
                source_name=self._source_names[index],
            ).run()
        finally:
            reader.close()
