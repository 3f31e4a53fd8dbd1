"""Streaming parser for MediaWiki XML export dumps.

Handles every ``export-0.x`` schema revision by matching element local names.
One forward-only ``iterparse`` scan backs both consumption modes:

* push: :meth:`WikipediaDumpParser.run` hands every accepted page to a callback;
* pull: :meth:`prepare_iteration`, then :meth:`has_next_page` / :meth:`next_page`
  over a one-record lookahead buffer.
"""

from __future__ import annotations

from enum import Enum
import logging
from typing import IO, Iterator
from urllib.parse import urlparse

from lxml import etree

from dumpfeed.sources.errors import DumpParseError
from dumpfeed.sources.models import PageCallback, TitleFilter, WikiPage, accept_all, resolve_contributor
from dumpfeed.sources.xml_tree import child_text, children, first_child, local_name
from dumpfeed.wiki.language import Language
from dumpfeed.wiki.title import WikiTitle

LOGGER = logging.getLogger(__name__)


class ScanState(Enum):
    """Lookahead state of a pull-mode parser."""

    PENDING = "pending"
    READY = "ready"
    EXHAUSTED = "exhausted"
    FAILED = "failed"


def _language_from_base_url(base_url: str | None) -> Language | None:
    if not base_url:
        return None
    host = urlparse(base_url.strip()).hostname or ""
    labels = host.split(".")
    if len(labels) < 3 or labels[0] in {"www", "m"}:
        return None
    return Language.get(labels[0])


class WikipediaDumpParser:
    def __init__(
        self,
        stream: IO[bytes],
        language: Language | None = None,
        title_filter: TitleFilter | None = None,
        processor: PageCallback | None = None,
        *,
        source_name: str = "<stream>",
    ) -> None:
        self._stream = stream
        self._language = language
        self._filter = title_filter or accept_all
        self._processor = processor
        self._source_name = source_name

        self._events: Iterator[tuple[str, etree._Element]] | None = None
        self._buffer: WikiPage | None = None
        self._state = ScanState.PENDING
        self._error: BaseException | None = None
        self._pulling = False

        self.pages_accepted = 0
        self.pages_skipped = 0

    @property
    def language(self) -> Language | None:
        """Language in effect; None until known when derived from siteinfo."""

        return self._language

    @property
    def state(self) -> ScanState:
        return self._state

    @property
    def error(self) -> BaseException | None:
        """Error that ended a pull-mode scan, if it did not end cleanly."""

        return self._error

    def run(self) -> None:
        """Consume the whole stream, calling the processor once per accepted page."""

        if self._processor is None:
            raise ValueError("Push mode requires a page processor")
        if self._pulling:
            raise RuntimeError("Parser is already prepared for pull iteration")

        self._start()
        try:
            while True:
                page = self._scan_next()
                if page is None:
                    break
                self._processor(page)
        except BaseException as exc:
            self._state = ScanState.FAILED
            self._error = exc
            raise

        self._state = ScanState.EXHAUSTED
        LOGGER.debug(
            "Finished %s: %d pages accepted, %d skipped",
            self._source_name,
            self.pages_accepted,
            self.pages_skipped,
        )

    def prepare_iteration(self) -> None:
        """Position the parser at the start of the stream without consuming it."""

        self._pulling = True
        self._start()

    def has_next_page(self) -> bool:
        """Report whether another accepted page is available.

        A read or parse error ends the stream quietly: the parser moves to
        ``ScanState.FAILED`` and keeps the cause in :attr:`error`.
        """

        if self._state is ScanState.READY:
            return True
        if self._state in {ScanState.EXHAUSTED, ScanState.FAILED}:
            return False

        self.prepare_iteration()
        try:
            page = self._scan_next()
        except Exception as exc:
            self._fail(exc)
            return False

        if page is None:
            self._state = ScanState.EXHAUSTED
            return False

        self._buffer = page
        self._state = ScanState.READY
        return True

    def next_page(self) -> WikiPage | None:
        """Return the buffered page and advance past it; None when none is left."""

        if not self.has_next_page():
            return None
        page = self._buffer
        self._buffer = None
        self._state = ScanState.PENDING
        return page

    def _fail(self, exc: BaseException) -> None:
        self._state = ScanState.FAILED
        self._error = exc
        self._buffer = None
        LOGGER.warning("Stopped reading %s early: %s", self._source_name, exc)

    def _start(self) -> None:
        if self._events is not None:
            return
        self._events = iter(
            etree.iterparse(
                self._stream,
                events=("end",),
                resolve_entities=False,
                no_network=True,
                load_dtd=False,
                huge_tree=True,
            )
        )

    def _scan_next(self) -> WikiPage | None:
        """Advance the scan to the next accepted page, None at end of stream."""

        assert self._events is not None
        while True:
            try:
                _, element = next(self._events)
            except StopIteration:
                return None
            except etree.XMLSyntaxError as exc:
                raise DumpParseError(self._source_name, f"Malformed export XML: {exc}") from exc

            name = local_name(element)
            if name == "siteinfo":
                self._read_siteinfo(element)
                element.clear()
                continue
            if name != "page":
                continue

            try:
                page = self._read_page(element)
            finally:
                self._release(element)

            if page is None:
                self.pages_skipped += 1
                continue
            self.pages_accepted += 1
            return page

    def _release(self, element: etree._Element) -> None:
        element.clear()
        parent = element.getparent()
        if parent is None:
            return
        while element.getprevious() is not None:
            del parent[0]

    def _read_siteinfo(self, siteinfo: etree._Element) -> None:
        namespaces = first_child(siteinfo, "namespaces")
        if namespaces is not None:
            LOGGER.debug("%s declares %d namespaces", self._source_name, len(children(namespaces, "namespace")))

        if self._language is not None:
            return

        language = Language.from_dbname(child_text(siteinfo, "dbname"))
        if language is None:
            language = _language_from_base_url(child_text(siteinfo, "base"))
        if language is not None:
            LOGGER.debug("Using language %s from siteinfo of %s", language, self._source_name)
            self._language = language

    def _effective_language(self) -> Language:
        if self._language is None:
            self._language = Language.default()
            LOGGER.debug("No language for %s, defaulting to %s", self._source_name, self._language)
        return self._language

    def _read_page(self, page: etree._Element) -> WikiPage | None:
        language = self._effective_language()

        raw_title = child_text(page, "title")
        if raw_title is None:
            raise DumpParseError(self._source_name, "Page without <title>")

        title = WikiTitle.parse(raw_title, language)
        if not self._filter(title):
            return None

        page_id = (child_text(page, "id") or "").strip()
        if not page_id:
            raise DumpParseError(self._source_name, f"Page '{raw_title}' without <id>")

        self._check_namespace(page, title)

        redirect: WikiTitle | None = None
        redirect_element = first_child(page, "redirect")
        if redirect_element is not None and redirect_element.get("title"):
            redirect = WikiTitle.parse(redirect_element.get("title"), language)

        revisions = children(page, "revision")
        if not revisions:
            raise DumpParseError(self._source_name, f"Page '{raw_title}' has no <revision>")

        return self._read_revision(revisions[-1], title, page_id, redirect, raw_title)

    def _check_namespace(self, page: etree._Element, title: WikiTitle) -> None:
        raw_ns = child_text(page, "ns")
        if raw_ns is None or not title.is_valid:
            return
        try:
            declared = int(raw_ns.strip())
        except ValueError:
            LOGGER.warning("Ignoring non-numeric <ns> '%s' for '%s' in %s", raw_ns, title, self._source_name)
            return
        if declared != title.namespace:
            LOGGER.warning(
                "Namespace mismatch for '%s' in %s: dump says %d, title resolves to %d",
                title,
                self._source_name,
                declared,
                title.namespace,
            )

    def _read_revision(
        self,
        revision: etree._Element,
        title: WikiTitle,
        page_id: str,
        redirect: WikiTitle | None,
        raw_title: str,
    ) -> WikiPage:
        revision_id = (child_text(revision, "id") or "").strip()
        if not revision_id:
            raise DumpParseError(self._source_name, f"Revision of '{raw_title}' without <id>")

        contributor = first_child(revision, "contributor")
        if contributor is None or contributor.get("deleted") == "deleted":
            contributor_id, contributor_name = resolve_contributor(None, None, None)
        else:
            contributor_id, contributor_name = resolve_contributor(
                child_text(contributor, "id"),
                child_text(contributor, "username"),
                child_text(contributor, "ip"),
            )

        return WikiPage(
            title=title,
            redirect=redirect,
            page_id=page_id,
            revision_id=revision_id,
            timestamp=(child_text(revision, "timestamp") or "").strip(),
            contributor_id=contributor_id,
            contributor_name=contributor_name,
            source=child_text(revision, "text") or "",
            format=(child_text(revision, "format") or "").strip(),
        )
