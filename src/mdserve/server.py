"""HTTP server entrypoint.

Responsibilities (and nothing more):
- Configure structlog
- Create AppState and the Starlette application
- Route the index and view pages
- Parse the command line and start the HTTP transport
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Any

import structlog
from starlette.applications import Starlette
from starlette.concurrency import run_in_threadpool
from starlette.responses import PlainTextResponse
from starlette.routing import Route
from starlette.templating import Jinja2Templates

from mdserve import __version__
from mdserve.config import TOC_POSITIONS, Settings
from mdserve.documents import list_documents, read_document
from mdserve.errors import MdServeError
from mdserve.highlight import highlight_markdown
from mdserve.renderer import render_document
from mdserve.state import AppState
from mdserve.transport import run_http_server

if TYPE_CHECKING:
    from collections.abc import Sequence

    from starlette.requests import Request
    from starlette.responses import Response

    from mdserve.models.document import RenderedDocument

log = structlog.get_logger()

TEMPLATES_DIR = Path(__file__).parent / "templates"


# ---------------------------------------------------------------------------
# Logging setup
# ---------------------------------------------------------------------------


def _setup_logging(settings: Settings) -> None:
    """Configure structlog. Called once at startup before any log statements."""
    log_level = logging.getLevelNamesMapping()[settings.logging.level]

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    if settings.logging.format == "json":
        processors = [*shared_processors, structlog.processors.JSONRenderer()]
    else:
        processors = [*shared_processors, structlog.dev.ConsoleRenderer()]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )


# ---------------------------------------------------------------------------
# Request handlers
# ---------------------------------------------------------------------------


def _load_and_render(docs_root: Path, path: str) -> RenderedDocument:
    return render_document(read_document(docs_root, path))


async def index(request: Request) -> Response:
    """List the directories and Markdown files below the document root."""
    state: AppState = request.app.state.mdserve
    document_index = await run_in_threadpool(
        list_documents, state.docs_root, state.settings.docs.extensions
    )
    log.info(
        "index_listed",
        route="index",
        directories=len(document_index.directories),
        files=len(document_index.files),
    )
    return state.templates.TemplateResponse(request, "index.html", {"index": document_index})


async def view(request: Request) -> Response:
    """Render one Markdown document with its table of contents."""
    state: AppState = request.app.state.mdserve
    path: str = request.path_params["path"]
    view_log = log.bind(route="view", path=path)

    try:
        document = await run_in_threadpool(_load_and_render, state.docs_root, path)
    except MdServeError as exc:
        view_log.warning("request_error", code=exc.code, message=exc.message)
        return PlainTextResponse(exc.message, status_code=exc.status_code)
    except Exception:
        view_log.error("request_unexpected_error", exc_info=True)
        raise

    view_log.info("document_rendered", headings=len(document.headings))
    return state.templates.TemplateResponse(
        request,
        "view.html",
        {
            "file": path,
            "document": document,
            "headings": [heading.model_dump() for heading in document.headings],
            "toc_position": state.settings.toc.position,
        },
    )


def create_app(settings: Settings) -> Starlette:
    """Build the Starlette application serving ``settings.docs.root``."""
    templates = Jinja2Templates(directory=str(TEMPLATES_DIR))
    templates.env.filters["highlight_markdown"] = highlight_markdown
    state = AppState(
        settings=settings,
        docs_root=Path(settings.docs.root).expanduser().resolve(),
        templates=templates,
    )
    app = Starlette(
        routes=[
            Route("/", index),
            Route("/view/{path:path}", view),
        ],
    )
    app.state.mdserve = state
    return app


# ---------------------------------------------------------------------------
# Entrypoint
# ---------------------------------------------------------------------------


def _parse_args(argv: Sequence[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="mdserve",
        description=f"mdserve v{__version__}: serve Markdown files as HTML pages",
    )
    parser.add_argument("directory", nargs="?", help="Directory to serve Markdown files from")
    parser.add_argument("--dir", dest="dir_option", help="Same as the positional DIRECTORY")
    parser.add_argument("--host", help="Host to bind to")
    parser.add_argument("--port", "-p", type=int, help="Port to serve on")
    parser.add_argument("--toc", help=f"Table of contents position: {' or '.join(TOC_POSITIONS)}")
    return parser.parse_args(argv)


def _settings_overrides(args: argparse.Namespace) -> dict[str, Any]:
    """Map command-line flags onto nested settings; unset flags are omitted."""
    overrides: dict[str, Any] = {}
    # The positional directory wins over --dir
    directory = args.directory or args.dir_option
    if directory:
        overrides["docs"] = {"root": directory}
    server = {key: value for key, value in (("host", args.host), ("port", args.port)) if value}
    if server:
        overrides["server"] = server
    if args.toc:
        overrides["toc"] = {"position": args.toc}
    return overrides


def main(argv: Sequence[str] | None = None) -> None:
    args = _parse_args(argv)
    settings = Settings(**_settings_overrides(args))
    _setup_logging(settings)

    app = create_app(settings)
    docs_root: Path = app.state.mdserve.docs_root
    if not docs_root.is_dir():
        log.error("docs_root_invalid", docs_root=str(docs_root))
        raise SystemExit(1)

    log.info(
        "server_starting",
        version=__version__,
        docs_root=str(docs_root),
        toc_position=settings.toc.position,
        url=f"http://localhost:{settings.server.port}",
    )
    run_http_server(app, settings)


if __name__ == "__main__":
    main()
