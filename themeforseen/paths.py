"""Centralized path computations for ThemeForseen.

Everything is relative to a single project root (the current working
directory by default).  The ``THEMEFORSEEN_ROOT`` environment variable
overrides the default for testing and for running outside the project.

Also holds the fixed per-framework path tables used by detection: the
conventional CSS locations to probe, and the default file to create when
no existing target is found.
"""

import os
from pathlib import Path

from themeforseen.models import ProjectType

CONFIG_FILENAME = ".themeforseen.yaml"

# Entry HTML files probed for <link>/<style> tags, in priority order.
HTML_ENTRY_FILES = ["index.html", "public/index.html", "src/index.html"]

# Preferred stylesheet names when an HTML file links several.
STYLESHEET_PRIORITIES = ["main.css", "style.css", "styles.css", "global.css", "app.css"]

TAILWIND_CONFIGS = ["tailwind.config.js", "tailwind.config.ts", "tailwind.config.mjs"]

# Conventional CSS locations per project type (ordered by preference).
CSS_CANDIDATES: dict[ProjectType, list[str]] = {
    ProjectType.NEXTJS: [
        "src/app/globals.css",
        "app/globals.css",
        "src/styles/globals.css",
        "styles/globals.css",
    ],
    ProjectType.VITE: [
        "src/index.css",
        "src/style.css",
        "src/styles/index.css",
        "src/App.css",
    ],
    ProjectType.ASTRO: [
        "src/styles/global.css",
        "src/styles/globals.css",
        "src/styles/main.css",
    ],
    ProjectType.SVELTE: [
        "src/app.css",
        "src/global.css",
        "src/styles/global.css",
    ],
    ProjectType.NUXT: [
        "assets/css/main.css",
        "assets/main.css",
        "assets/css/global.css",
    ],
    ProjectType.REMIX: [
        "app/styles/global.css",
        "app/root.css",
        "app/styles.css",
    ],
    ProjectType.PLAIN: [
        "styles.css",
        "style.css",
        "css/styles.css",
        "css/style.css",
        "css/main.css",
        "index.css",
    ],
    ProjectType.UNKNOWN: [
        "src/styles.css",
        "src/index.css",
        "styles.css",
        "style.css",
        "css/styles.css",
    ],
}

# File created on first write when detection found nothing.
DEFAULT_CSS_PATHS: dict[ProjectType, str] = {
    ProjectType.NEXTJS: "src/app/globals.css",
    ProjectType.VITE: "src/index.css",
    ProjectType.ASTRO: "src/styles/global.css",
    ProjectType.SVELTE: "src/app.css",
    ProjectType.NUXT: "assets/css/main.css",
    ProjectType.REMIX: "app/styles/global.css",
    ProjectType.PLAIN: "styles.css",
    ProjectType.UNKNOWN: "src/styles/theme-forseen.css",
}


def project_root(override: Path | None = None) -> Path:
    """Return the project root directory.

    Resolution order:
    1. *override* argument (used in tests and by ``--root``)
    2. ``THEMEFORSEEN_ROOT`` environment variable
    3. current working directory
    """
    if override is not None:
        return Path(override)
    env = os.environ.get("THEMEFORSEEN_ROOT")
    if env:
        return Path(env)
    return Path.cwd()


def config_path(root: Path) -> Path:
    return root / CONFIG_FILENAME


def resolve(root: Path, rel_path: str) -> Path:
    """Absolute filesystem path for a root-relative (or already absolute) path."""
    p = Path(rel_path)
    return p if p.is_absolute() else root / p
