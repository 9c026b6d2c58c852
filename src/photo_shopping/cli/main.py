from __future__ import annotations

import argparse
import json
import os
import re
import sys
from typing import Sequence

import requests

from ..config import load_search_options, load_search_url, load_tesseract
from ..domain.models import SearchOptions
from ..errors import ShoppingListError
from ..logging import get_logger
from ..orchestrator import ShoppingListExtractor, TesseractTextDetector
from ..paths import expand_abs, read_image_bytes
from ..search.client import ShoppingSearchClient

LOG = get_logger("cli-main")

EXIT_SHOPPING_LIST_ERROR = 2
EXIT_SEARCH_ERROR = 3


def _slug(query: str) -> str:
    s = re.sub(r"[^\w]+", "-", query.lower(), flags=re.UNICODE).strip("-")
    return s[:60] or "query"


def _build_extractor(ns: argparse.Namespace, script_dir: str) -> ShoppingListExtractor:
    cmd_default, lang_default = load_tesseract(script_dir)
    detector = TesseractTextDetector(
        lang=ns.lang or lang_default,
        tesseract_cmd=ns.tesseract_cmd or cmd_default,
    )
    return ShoppingListExtractor(detector)


def _build_options(ns: argparse.Namespace, script_dir: str) -> SearchOptions:
    defaults = load_search_options(script_dir)
    return SearchOptions(
        language=ns.language or defaults.language,
        max_results=ns.max_results if ns.max_results is not None else defaults.max_results,
    )


def _positive_int(value: str) -> int:
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid int value: {value!r}") from exc
    if parsed < 1:
        raise argparse.ArgumentTypeError(f"must be a positive integer, got {parsed}")
    return parsed


def _add_ocr_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--image", required=True, help="Path to the shopping list photo")
    p.add_argument("--tesseract-cmd", help="Path to the tesseract binary (defaults to env/.env, then PATH)")
    p.add_argument("--lang", help="Tesseract language (defaults to env/.env, then 'eng')")


def _add_search_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--language", help="Results language (defaults to env/.env, then 'en')")
    p.add_argument("--max-results", type=_positive_int, help="Number of results to request")
    p.add_argument("--search-url", help="Override the search endpoint (defaults to env/.env)")
    p.add_argument("--timeout", type=int, default=30, help="HTTP timeout in seconds for search requests")


def _handle_extract(ns: argparse.Namespace) -> int:
    script_dir = os.getcwd()
    extractor = _build_extractor(ns, script_dir)
    try:
        queries = extractor.extract_shopping_list(read_image_bytes(ns.image))
    except ShoppingListError as exc:
        LOG.error(f"Extraction failed: {exc}")
        return EXIT_SHOPPING_LIST_ERROR
    except OSError as exc:
        LOG.error(f"Cannot read image: {exc}")
        return 1
    print(json.dumps(queries, ensure_ascii=False))
    return 0


def _handle_search(ns: argparse.Namespace) -> int:
    script_dir = os.getcwd()
    options = _build_options(ns, script_dir)
    client = ShoppingSearchClient(ns.search_url or load_search_url(script_dir), timeout=ns.timeout)
    try:
        page = client.fetch_results_page(ns.query, options)
    except requests.RequestException as exc:
        LOG.error(f"Search failed: {exc}")
        return EXIT_SEARCH_ERROR
    finally:
        client.close()
    print(page)
    return 0


def _handle_shop(ns: argparse.Namespace) -> int:
    script_dir = os.getcwd()
    extractor = _build_extractor(ns, script_dir)
    options = _build_options(ns, script_dir)
    client = ShoppingSearchClient(ns.search_url or load_search_url(script_dir), timeout=ns.timeout)
    try:
        queries = extractor.extract_shopping_list(read_image_bytes(ns.image))
        pages = extractor.search_all(queries, client, options)
    except ShoppingListError as exc:
        LOG.error(f"Extraction failed: {exc}")
        return EXIT_SHOPPING_LIST_ERROR
    except requests.RequestException as exc:
        LOG.error(f"Search failed: {exc}")
        return EXIT_SEARCH_ERROR
    except OSError as exc:
        LOG.error(f"Cannot read image: {exc}")
        return 1
    finally:
        client.close()

    summary = []
    outdir = expand_abs(ns.output_dir) if ns.output_dir else None
    if outdir:
        os.makedirs(outdir, exist_ok=True)
    for n, (query, page) in enumerate(pages.items(), start=1):
        entry = {"query": query, "bytes": len(page)}
        if outdir:
            out_path = os.path.join(outdir, f"{n:02d}_{_slug(query)}.html")
            with open(out_path, "w", encoding="utf-8") as f:
                f.write(page)
            entry["path"] = out_path
            LOG.info(f"Wrote: {out_path}")
        summary.append(entry)
    print(json.dumps(summary, ensure_ascii=False))
    return 0


def _handle_serve(ns: argparse.Namespace) -> int:
    from ..frontend.app import create_app
    import uvicorn

    app = create_app(root_dir=os.getcwd(), allow_origins=ns.allow_origins)
    uvicorn.run(app, host=ns.host, port=ns.port, log_level=ns.log_level)
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    provided = list(argv) if argv is not None else sys.argv[1:]
    LOG.debug(f"CLI invoked with arguments: {provided}")

    parser = argparse.ArgumentParser(
        prog="photo-shopping",
        description="Turn a photo of a shopping list into shopping search queries.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    extract_cmd = subparsers.add_parser("extract", help="Print the queries found in a shopping list photo as JSON.")
    _add_ocr_args(extract_cmd)
    extract_cmd.set_defaults(handler=_handle_extract)

    search_cmd = subparsers.add_parser("search", help="Fetch the shopping results page for one query.")
    search_cmd.add_argument("--query", required=True)
    _add_search_args(search_cmd)
    search_cmd.set_defaults(handler=_handle_search)

    shop_cmd = subparsers.add_parser("shop", help="Extract queries from a photo and fetch results for each.")
    _add_ocr_args(shop_cmd)
    _add_search_args(shop_cmd)
    shop_cmd.add_argument("--output-dir", help="Write each results page as an HTML file into this directory")
    shop_cmd.set_defaults(handler=_handle_shop)

    serve_cmd = subparsers.add_parser("serve", help="Run the HTTP API.")
    serve_cmd.add_argument("--host", default="127.0.0.1")
    serve_cmd.add_argument("--port", type=int, default=8080)
    serve_cmd.add_argument("--log-level", default="info")
    serve_cmd.add_argument(
        "--allow-origin",
        action="append",
        dest="allow_origins",
        help="Allowed CORS origin (can be provided multiple times, use '*' for any).",
    )
    serve_cmd.set_defaults(handler=_handle_serve)

    args = parser.parse_args(provided)
    code = args.handler(args)
    LOG.info(f"Subcommand '{args.command}' finished with exit code {code}.")
    return code


if __name__ == "__main__":
    sys.exit(main())
