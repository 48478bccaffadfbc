"""Application state container.

AppState is created once by create_app() and stored on the Starlette app so
every request handler reads the same settings, document root and templates.
Nothing in it is mutated after startup.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pathlib import Path

    from starlette.templating import Jinja2Templates

    from mdserve.config import Settings


@dataclass(frozen=True)
class AppState:
    """Holds all shared runtime state. Read by every request handler."""

    settings: Settings
    docs_root: Path
    templates: Jinja2Templates
