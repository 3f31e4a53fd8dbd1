"""Pick and build the page source that fits the caller's input."""

from __future__ import annotations

import bz2
from functools import partial
import gzip
from pathlib import Path
from typing import IO, Sequence

from lxml import etree

from dumpfeed.sources.base import PageSource, ReaderFactory
from dumpfeed.sources.multi_reader_source import MultipleXMLReaderSource
from dumpfeed.sources.models import TitleFilter
from dumpfeed.sources.reader_source import XMLReaderSource
from dumpfeed.sources.tree_source import OAIXMLSource, XMLTreeSource
from dumpfeed.sources.xml_tree import parse_xml
from dumpfeed.wiki.language import Language

DUMP_SUFFIXES = {".xml", ".bz2", ".gz"}


def open_dump(path: Path) -> IO[bytes]:
    """Open a dump file for binary reading, decompressing ``.bz2`` and ``.gz``."""

    suffix = path.suffix.lower()
    if suffix == ".bz2":
        return bz2.open(path, "rb")
    if suffix == ".gz":
        return gzip.open(path, "rb")
    return path.open("rb")


def from_file(
    file: str | Path,
    language: Language | None = None,
    title_filter: TitleFilter | None = None,
) -> XMLReaderSource:
    """Source over one dump file.

    Without a ``language`` the parser takes it from the dump's ``<siteinfo>``.
    """

    path = Path(file)
    return from_reader(partial(open_dump, path), language, title_filter, source_name=str(path))


def from_multiple_files(
    files: Sequence[str | Path],
    language: Language | None = None,
    title_filter: TitleFilter | None = None,
    *,
    max_workers: int | None = None,
    raise_on_error: bool = False,
) -> PageSource:
    paths = [Path(file) for file in files]
    return from_readers(
        [partial(open_dump, path) for path in paths],
        language,
        title_filter,
        max_workers=max_workers,
        raise_on_error=raise_on_error,
        source_names=[str(path) for path in paths],
    )


def from_reader(
    reader_factory: ReaderFactory,
    language: Language | None = None,
    title_filter: TitleFilter | None = None,
    *,
    source_name: str = "<reader>",
) -> XMLReaderSource:
    return XMLReaderSource(reader_factory, language, title_filter, source_name=source_name)


def from_readers(
    reader_factories: Sequence[ReaderFactory],
    language: Language | None = None,
    title_filter: TitleFilter | None = None,
    *,
    max_workers: int | None = None,
    raise_on_error: bool = False,
    source_names: Sequence[str] | None = None,
) -> PageSource:
    """Fan several readers out over a thread pool; a single reader skips the pool."""

    if len(reader_factories) == 1:
        name = source_names[0] if source_names else "<reader>"
        return from_reader(reader_factories[0], language, title_filter, source_name=name)
    return MultipleXMLReaderSource(
        reader_factories,
        language,
        title_filter,
        max_workers=max_workers,
        raise_on_error=raise_on_error,
        source_names=source_names,
    )


def from_xml(
    xml: etree._Element | etree._ElementTree | bytes,
    language: Language,
    title_filter: TitleFilter | None = None,
) -> XMLTreeSource:
    if isinstance(xml, bytes):
        xml = parse_xml(xml)
    return XMLTreeSource(xml, language, title_filter)


def from_oai_xml(
    xml: etree._Element | etree._ElementTree | bytes,
    title_filter: TitleFilter | None = None,
    *,
    default_language: Language | None = None,
) -> OAIXMLSource:
    if isinstance(xml, bytes):
        xml = parse_xml(xml)
    return OAIXMLSource(xml, title_filter, default_language=default_language)
