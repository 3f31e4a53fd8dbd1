from __future__ import annotations

from io import BytesIO
import logging
import threading

import pytest

from dumpfeed.sources.errors import FanOutError
from dumpfeed.sources.models import WikiPage
from dumpfeed.sources.multi_reader_source import FanOutReport, MultipleXMLReaderSource
from dumpfeed.sources.reader_source import XMLReaderSource


def _dump_with(count: int, prefix: str) -> bytes:
    pages = "".join(
        f"<page><title>{prefix} {index}</title><ns>0</ns><id>{prefix}-{index}</id>"
        f"<revision><id>{index}</id><timestamp>2024-01-0{index + 1}T00:00:00Z</timestamp>"
        f"<contributor><username>U{index}</username><id>{index + 1}</id></contributor>"
        f"<format>text/x-wiki</format><text>{prefix} body {index}</text></revision></page>"
        for index in range(count)
    )
    return (
        '<mediawiki xmlns="http://www.mediawiki.org/xml/export-0.10/">'
        f"<siteinfo><dbname>enwiki</dbname></siteinfo>{pages}</mediawiki>"
    ).encode("utf-8")


class _ClosingReaders:
    def __init__(self, payload: bytes) -> None:
        self._payload = payload
        self.opened: list[BytesIO] = []
        self._lock = threading.Lock()

    def __call__(self) -> BytesIO:
        reader = BytesIO(self._payload)
        with self._lock:
            self.opened.append(reader)
        return reader


def _key(page: WikiPage) -> tuple[str, str, str]:
    return page.title.full_name, page.page_id, page.revision_id


def test_fan_out_invokes_callback_once_per_page_before_returning() -> None:
    readers = [_ClosingReaders(_dump_with(2, "A")), _ClosingReaders(_dump_with(3, "B")), _ClosingReaders(_dump_with(0, "C"))]
    source = MultipleXMLReaderSource(readers, max_workers=3)
    calls: list[WikiPage] = []
    lock = threading.Lock()

    def _record(page: WikiPage) -> None:
        with lock:
            calls.append(page)

    report = source.foreach(_record)

    assert len(calls) == 5
    assert report.files == 3
    assert report.ok
    assert all(reader.closed for factory in readers for reader in factory.opened)


def test_fan_out_yields_union_of_individual_readers() -> None:
    payloads = [_dump_with(2, "A"), _dump_with(4, "B"), _dump_with(1, "C")]

    expected: set[tuple[str, str, str]] = set()
    for payload in payloads:
        expected.update(_key(page) for page in XMLReaderSource(_ClosingReaders(payload)).collect())

    fanned = MultipleXMLReaderSource([_ClosingReaders(payload) for payload in payloads], max_workers=2).collect()

    assert {_key(page) for page in fanned} == expected
    assert len(fanned) == 7


def test_fan_out_keeps_document_order_within_each_reader() -> None:
    source = MultipleXMLReaderSource(
        [_ClosingReaders(_dump_with(5, "A")), _ClosingReaders(_dump_with(5, "B"))],
        max_workers=2,
    )

    pages = source.collect()

    for prefix in ("A", "B"):
        ids = [page.page_id for page in pages if page.page_id.startswith(prefix)]
        assert ids == [f"{prefix}-{index}" for index in range(5)]


def test_failing_reader_does_not_stop_siblings(caplog: pytest.LogCaptureFixture) -> None:
    broken = _ClosingReaders(b"<mediawiki><page><title>Broken")
    healthy = _ClosingReaders(_dump_with(3, "OK"))
    source = MultipleXMLReaderSource([broken, healthy], max_workers=2, source_names=["broken.xml", "ok.xml"])
    pages: list[WikiPage] = []

    with caplog.at_level(logging.ERROR):
        report = source.foreach(pages.append)

    assert len(pages) == 3
    assert isinstance(report, FanOutReport)
    assert report.failed == 1
    assert report.failures[0].index == 0
    assert broken.opened[0].closed
    assert "broken.xml" in caplog.text


def test_failures_raise_only_when_requested() -> None:
    def _unopenable() -> BytesIO:
        raise FileNotFoundError("missing.xml")

    healthy = _ClosingReaders(_dump_with(2, "OK"))
    source = MultipleXMLReaderSource([_unopenable, healthy], max_workers=2, raise_on_error=True)
    pages: list[WikiPage] = []

    with pytest.raises(FanOutError, match="1 reader task"):
        source.foreach(pages.append)

    assert len(pages) == 2
    assert healthy.opened[0].closed


def test_pool_is_created_per_traversal() -> None:
    readers = [_ClosingReaders(_dump_with(1, "A")), _ClosingReaders(_dump_with(1, "B"))]
    source = MultipleXMLReaderSource(readers, max_workers=2)

    assert len(source.collect()) == 2
    assert len(source.collect()) == 2
    assert [len(factory.opened) for factory in readers] == [2, 2]


def test_invalid_worker_count_is_rejected() -> None:
    with pytest.raises(ValueError, match="max_workers"):
        MultipleXMLReaderSource([], max_workers=0)
