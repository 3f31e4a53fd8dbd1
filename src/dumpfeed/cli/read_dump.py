"""CLI command that reads wiki dumps or harvested batches and reports page counts."""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path

from dotenv import load_dotenv

from dumpfeed.config import SourceSettings
from dumpfeed.sources import factory
from dumpfeed.sources.base import PageSource
from dumpfeed.sources.errors import DumpParseError, FanOutError
from dumpfeed.sources.models import TitleFilter, WikiPage
from dumpfeed.sources.multi_reader_source import FanOutReport
from dumpfeed.wiki.language import Language
from dumpfeed.wiki.title import WikiTitle


load_dotenv()

LOGGER = logging.getLogger(__name__)


def _is_dump(path: Path) -> bool:
    suffixes = [part.lower() for part in path.suffixes]
    if not suffixes:
        return False
    if suffixes[-1] == ".xml":
        return True
    return len(suffixes) >= 2 and suffixes[-2] == ".xml" and suffixes[-1] in {".bz2", ".gz"}


def _collect_inputs(target: Path) -> list[Path]:
    if target.is_file():
        return [target]
    if target.is_dir():
        return sorted(path for path in target.rglob("*") if path.is_file() and _is_dump(path))
    return []


def _namespace_filter(namespaces: list[int] | None) -> TitleFilter | None:
    if not namespaces:
        return None
    allowed = set(namespaces)

    def _accept(title: WikiTitle) -> bool:
        return title.is_valid and title.namespace in allowed

    return _accept


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Read wiki export dumps and emit page statistics")
    parser.add_argument("--path", required=True, help="Dump file or directory of dumps")
    parser.add_argument("--language", help="Wiki language code; default is read from each dump")
    parser.add_argument(
        "--namespace",
        type=int,
        action="append",
        help="Only count pages in this namespace (repeatable)",
    )
    parser.add_argument("--mode", choices=("push", "pull"), default="push", help="Consumption mode")
    parser.add_argument("--harvested", action="store_true", help="Treat input as a harvested OAI batch")
    parser.add_argument("--limit", type=int, default=20, help="Number of titles to list")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(message)s")
    args = _parse_args(argv)
    settings = SourceSettings.from_env()

    source_path = Path(args.path)
    files = _collect_inputs(source_path)
    language = Language.get(args.language) if args.language else settings.language
    title_filter = _namespace_filter(args.namespace)

    pages: list[WikiPage] = []
    errors: list[dict[str, str]] = []
    failed_files = 0

    if args.harvested:
        for file_path in files:
            try:
                batch = factory.from_oai_xml(
                    file_path.read_bytes(),
                    title_filter,
                    default_language=settings.default_language,
                )
                pages.extend(batch.collect())
            except (DumpParseError, OSError, ValueError) as exc:
                failed_files += 1
                errors.append({"source_path": str(file_path), "error": str(exc)})
    elif args.mode == "pull":
        for file_path in files:
            try:
                iterable = factory.from_file(file_path, language, title_filter).iterable()
            except OSError as exc:
                failed_files += 1
                errors.append({"source_path": str(file_path), "error": str(exc)})
                continue
            with iterable:
                pages.extend(iterable)
            if iterable.error is not None:
                failed_files += 1
                errors.append({"source_path": str(file_path), "error": str(iterable.error)})
    elif files:
        source: PageSource = factory.from_multiple_files(
            files,
            language,
            title_filter,
            max_workers=settings.max_workers,
            raise_on_error=settings.raise_on_task_error,
        )
        try:
            outcome = source.foreach(pages.append)
        except FanOutError as exc:
            outcome = FanOutReport(files=len(files), failures=exc.failures)
        except (DumpParseError, OSError) as exc:
            outcome = None
            failed_files += 1
            errors.append({"source_path": str(files[0]), "error": str(exc)})

        if isinstance(outcome, FanOutReport):
            failed_files += outcome.failed
            for failure in outcome.failures:
                errors.append({"source_path": str(files[failure.index]), "error": str(failure.error)})

    LOGGER.info("Read %d pages from %d file(s)", len(pages), len(files))

    payload = {
        "path": str(source_path),
        "files": len(files),
        "language": str(language) if language else None,
        "pages": len(pages),
        "titles": [page.title.full_name for page in pages[: max(args.limit, 0)]],
        "failed_files": failed_files,
        "errors": errors,
    }
    print(json.dumps(payload, ensure_ascii=False, indent=2))
    return 0 if not errors else 1


if __name__ == "__main__":
    raise SystemExit(main())
