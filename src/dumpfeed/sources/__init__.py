"""Page sources turning wiki exports into a uniform stream of pages."""

from .base import PageSource, ReaderFactory
from .dump_parser import ScanState, WikipediaDumpParser
from .errors import DumpParseError, FanOutError, TaskFailure
from .factory import from_file, from_multiple_files, from_oai_xml, from_reader, from_readers, from_xml
from .models import WikiPage
from .multi_reader_source import FanOutReport, MultipleXMLReaderSource
from .reader_source import PageIterable, XMLReaderSource
from .tree_source import OAIXMLSource, XMLTreeSource

__all__ = [
    "DumpParseError",
    "FanOutError",
    "FanOutReport",
    "MultipleXMLReaderSource",
    "OAIXMLSource",
    "PageIterable",
    "PageSource",
    "ReaderFactory",
    "ScanState",
    "TaskFailure",
    "WikiPage",
    "WikipediaDumpParser",
    "XMLReaderSource",
    "XMLTreeSource",
    "from_file",
    "from_multiple_files",
    "from_oai_xml",
    "from_reader",
    "from_readers",
    "from_xml",
]
