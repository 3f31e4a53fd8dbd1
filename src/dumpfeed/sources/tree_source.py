"""Page sources over already parsed XML trees, including harvested OAI batches."""

from __future__ import annotations

from lxml import etree

from dumpfeed.sources.base import PageSource
from dumpfeed.sources.errors import DumpParseError
from dumpfeed.sources.models import PageCallback, TitleFilter, WikiPage, accept_all, resolve_contributor
from dumpfeed.sources.xml_tree import XML_LANG_ATTRIBUTE, child_text, children, descendants, first_child
from dumpfeed.wiki.language import Language
from dumpfeed.wiki.title import WikiTitle


def _as_element(xml: etree._Element | etree._ElementTree) -> etree._Element:
    if isinstance(xml, etree._ElementTree):
        return xml.getroot()
    return xml


class XMLTreeSource(PageSource):
    """Emits one page per ``<revision>`` of every ``<page>`` child of the tree.

    Redirect targets are not read here; ``WikiPage.redirect`` is always None.
    """

    def __init__(
        self,
        xml: etree._Element | etree._ElementTree,
        language: Language,
        title_filter: TitleFilter | None = None,
    ) -> None:
        self._xml = _as_element(xml)
        self._language = language
        self._filter = title_filter or accept_all

    @property
    def language(self) -> Language:
        return self._language

    def foreach(self, proc: PageCallback) -> None:
        for page in children(self._xml, "page"):
            title = WikiTitle.parse(child_text(page, "title") or "", self._language)
            if not self._filter(title):
                continue
            page_id = (child_text(page, "id") or "").strip()

            for revision in children(page, "revision"):
                contributor = first_child(revision, "contributor")
                contributor_id, contributor_name = resolve_contributor(
                    child_text(contributor, "id"),
                    child_text(contributor, "username"),
                    child_text(contributor, "ip"),
                )
                proc(
                    WikiPage(
                        title=title,
                        redirect=None,
                        page_id=page_id,
                        revision_id=(child_text(revision, "id") or "").strip(),
                        timestamp=(child_text(revision, "timestamp") or "").strip(),
                        contributor_id=contributor_id,
                        contributor_name=contributor_name,
                        source=child_text(revision, "text") or "",
                        format=(child_text(revision, "format") or "").strip(),
                    )
                )


class OAIXMLSource(PageSource):
    """Harvested update batch whose ``<mediawiki xml:lang="..">`` names the language."""

    def __init__(
        self,
        xml: etree._Element | etree._ElementTree,
        title_filter: TitleFilter | None = None,
        *,
        default_language: Language | None = None,
    ) -> None:
        self._xml = _as_element(xml)
        self._filter = title_filter
        self._default_language = default_language or Language.default()

    def resolve_language(self) -> Language:
        mediawiki = self._mediawiki()
        code = (mediawiki.get(XML_LANG_ATTRIBUTE) or "").strip()
        return Language.get(code) if code else self._default_language

    def foreach(self, proc: PageCallback) -> None:
        XMLTreeSource(self._mediawiki(), self.resolve_language(), self._filter).foreach(proc)

    def _mediawiki(self) -> etree._Element:
        batches = descendants(self._xml, "mediawiki")
        if not batches:
            raise DumpParseError("<harvested batch>", "Harvested batch has no <mediawiki> element")
        return batches[0]
