"""Project detection — classify a project and pick the CSS file to write.

Detection is read-only and never raises for bad input: a missing or
malformed ``package.json``, an unreadable HTML file, or a project with no
stylesheet at all simply yield less information.  An absent target is a
valid outcome; the server then falls back to ``default_css_path()``.

Functions:
    detect_project(root)            — full ProjectInfo for a root directory
    detect_project_type(root)       — ProjectType only
    find_css_target_for_html(root)  — <link>/<style> based target for plain sites
    default_css_path(type)          — file to create when nothing was found
    import_instruction(type, path)  — how to wire a freshly created file in
"""

import json
import logging
import posixpath
from dataclasses import dataclass, field
from pathlib import Path

from themeforseen.models import FILE, INLINE, CssTarget, ProjectInfo, ProjectType
from themeforseen.paths import (
    CSS_CANDIDATES,
    DEFAULT_CSS_PATHS,
    HTML_ENTRY_FILES,
    STYLESHEET_PRIORITIES,
    TAILWIND_CONFIGS,
)
from themeforseen.tags import find_element, tokenize

logger = logging.getLogger(__name__)

# Dependency name -> project type, checked in this order.
_DEPENDENCY_TYPES = [
    ("next", ProjectType.NEXTJS),
    ("nuxt", ProjectType.NUXT),
    ("@remix-run/react", ProjectType.REMIX),
    ("astro", ProjectType.ASTRO),
    ("svelte", ProjectType.SVELTE),
    ("vite", ProjectType.VITE),
]

# Config files -> project type, checked in this order when no dependency matched.
_CONFIG_TYPES = [
    (("next.config.js", "next.config.mjs", "next.config.ts"), ProjectType.NEXTJS),
    (("vite.config.js", "vite.config.ts"), ProjectType.VITE),
    (("astro.config.mjs", "astro.config.js"), ProjectType.ASTRO),
    (("svelte.config.js",), ProjectType.SVELTE),
    (("nuxt.config.js", "nuxt.config.ts"), ProjectType.NUXT),
]

_REMOTE_PREFIXES = ("http://", "https://", "//", "data:")


# ---------------------------------------------------------------------------
# package.json / project type
# ---------------------------------------------------------------------------

def read_package_json(root: Path) -> dict | None:
    """Return the parsed ``package.json``, or None if missing or malformed."""
    pkg_path = root / "package.json"
    if not pkg_path.is_file():
        return None
    try:
        data = json.loads(pkg_path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError):
        logger.debug("Ignoring unreadable package.json at %s", pkg_path)
        return None
    return data if isinstance(data, dict) else None


def has_dependency(pkg: dict | None, name: str) -> bool:
    if not pkg:
        return False
    for section in ("dependencies", "devDependencies"):
        deps = pkg.get(section)
        if isinstance(deps, dict) and deps.get(name):
            return True
    return False


def detect_project_type(root: Path) -> ProjectType:
    pkg = read_package_json(root)
    for dep, project_type in _DEPENDENCY_TYPES:
        if has_dependency(pkg, dep):
            return project_type

    for names, project_type in _CONFIG_TYPES:
        if any((root / n).exists() for n in names):
            return project_type

    if (root / "index.html").exists():
        return ProjectType.PLAIN
    return ProjectType.UNKNOWN


def has_tailwind(root: Path) -> bool:
    return any((root / n).exists() for n in TAILWIND_CONFIGS)


def find_existing_css_files(root: Path, project_type: ProjectType) -> list[str]:
    """Return the conventional CSS paths for *project_type* that exist, in priority order."""
    candidates = CSS_CANDIDATES.get(project_type, CSS_CANDIDATES[ProjectType.UNKNOWN])
    return [rel for rel in candidates if (root / rel).is_file()]


# ---------------------------------------------------------------------------
# Plain HTML sites
# ---------------------------------------------------------------------------

@dataclass
class HtmlStyleInfo:
    html_file: str
    stylesheet_links: list[str] = field(default_factory=list)
    has_inline_style: bool = False


def _is_stylesheet_link(attrs: dict[str, str]) -> bool:
    rel = attrs.get("rel", "").lower().split()
    return "stylesheet" in rel and bool(attrs.get("href"))


def _is_local(href: str) -> bool:
    return not href.lower().startswith(_REMOTE_PREFIXES)


def scan_html(html: str) -> tuple[list[str], bool]:
    """Return ``(local stylesheet hrefs, has <style> inside <head>)`` for a document."""
    tags = tokenize(html)

    links: list[str] = []
    for tag in tags:
        if tag.name != "link" or tag.closing or not _is_stylesheet_link(tag.attrs):
            continue
        href = tag.attrs["href"].strip()
        if _is_local(href) and href not in links:
            links.append(href)

    inline = False
    head = find_element(tags, "head")
    if head is not None:
        head_open, head_close = head
        for i, tag in enumerate(tags[:-1]):
            if tag.name != "style" or tag.closing:
                continue
            close = tags[i + 1]
            if (
                close.name == "style" and close.closing
                and head_open.end <= tag.start and close.end <= head_close.start
            ):
                inline = True
                break
    return links, inline


def parse_html_for_styles(root: Path) -> HtmlStyleInfo | None:
    """Scan the first readable entry HTML file for stylesheets and inline styles."""
    for html_file in HTML_ENTRY_FILES:
        full = root / html_file
        if not full.is_file():
            continue
        try:
            content = full.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError):
            logger.debug("Skipping unreadable HTML entry %s", full)
            continue
        links, inline = scan_html(content)
        return HtmlStyleInfo(html_file=html_file, stylesheet_links=links, has_inline_style=inline)
    return None


def _resolve_href(html_file: str, href: str) -> str:
    """Root-relative path for an href found in *html_file*."""
    href = href.split("#", 1)[0].split("?", 1)[0]
    if href.startswith("/"):
        return href.lstrip("/")
    html_dir = posixpath.dirname(html_file)
    return posixpath.normpath(posixpath.join(html_dir, href))


def _pick_stylesheet(links: list[str]) -> str:
    for name in STYLESHEET_PRIORITIES:
        for link in links:
            if link.lower().split("?", 1)[0].endswith(name):
                return link
    return links[0]


def find_css_target_for_html(root: Path) -> CssTarget | None:
    info = parse_html_for_styles(root)
    if info is None:
        return None

    links = info.stylesheet_links
    if len(links) == 1:
        # Targeted even if missing; the first write creates it.
        return CssTarget(FILE, _resolve_href(info.html_file, links[0]))
    if not links and info.has_inline_style:
        return CssTarget(INLINE, info.html_file)
    if len(links) > 1:
        return CssTarget(FILE, _resolve_href(info.html_file, _pick_stylesheet(links)))
    return None


# ---------------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------------

def detect_project(root: Path | str) -> ProjectInfo:
    """Classify *root* and resolve its best CSS target."""
    root = Path(root)
    project_type = detect_project_type(root)
    css_files = find_existing_css_files(root, project_type)

    target: CssTarget | None = None
    if project_type in (ProjectType.PLAIN, ProjectType.UNKNOWN):
        target = find_css_target_for_html(root)
    if target is None and css_files:
        target = CssTarget(FILE, css_files[0])

    return ProjectInfo(
        type=project_type,
        root_dir=str(root),
        css_files=css_files,
        css_target=target,
        has_tailwind=has_tailwind(root),
    )


def default_css_path(project_type: ProjectType) -> str:
    return DEFAULT_CSS_PATHS.get(project_type, DEFAULT_CSS_PATHS[ProjectType.UNKNOWN])


def _strip_src(path: str) -> str:
    return path[len("src/"):] if path.startswith("src/") else path


def import_instruction(project_type: ProjectType, css_path: str) -> str:
    """Return a human-readable hint for wiring a newly created CSS file in."""
    if project_type is ProjectType.NEXTJS:
        return f"Add to your layout.tsx or _app.tsx:\nimport './{_strip_src(css_path)}';"
    if project_type is ProjectType.VITE:
        return f"Add to your main.tsx or main.ts:\nimport './{_strip_src(css_path)}';"
    if project_type is ProjectType.ASTRO:
        return f"Add to your Layout.astro:\nimport '{css_path}';"
    if project_type is ProjectType.SVELTE:
        return f"Add to your +layout.svelte or App.svelte:\nimport './{_strip_src(css_path)}';"
    if project_type is ProjectType.NUXT:
        return f"Add to nuxt.config.ts:\ncss: ['~/{css_path}']"
    if project_type is ProjectType.REMIX:
        return f"Add to your root.tsx links function:\n{{ rel: 'stylesheet', href: '/{css_path}' }}"
    if project_type is ProjectType.PLAIN:
        return f'Add to your HTML <head>:\n<link rel="stylesheet" href="{css_path}">'
    return "Import this CSS file in your application entry point."
