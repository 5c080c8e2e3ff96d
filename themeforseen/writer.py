"""Marker-block writer — materialize generated CSS into a target idempotently.

A *block* is the text between a start marker (``/* ThemeForseen Colors``
or ``/* ThemeForseen Font``) and the shared end marker
``/* End ThemeForseen */``.  Every write re-reads the whole target,
splices out the previous block of the same kind, inserts the fresh one and
writes the whole file back.  Writing the same input twice gives the same
bytes; writing new input leaves nothing of the old block behind.

The splice only understands markers this module wrote itself.  Hand-edited
or unbalanced markers are not repaired: a start marker without an end
marker is left alone and the new block is added next to it.

File targets get the theme block prepended and the font block appended.
Inline targets (the first ``<style>`` element of an HTML file) get either
block appended to the element's content.

Filesystem problems are never raised to callers; they come back as
``WriteResult(success=False, ...)``.
"""

import logging
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path

from themeforseen.models import CssTarget, ThemeColors
from themeforseen.paths import project_root, resolve
from themeforseen.tags import find_element, tokenize

logger = logging.getLogger(__name__)

THEME_START_MARKER = "/* ThemeForseen Colors"
FONT_START_MARKER = "/* ThemeForseen Font"
END_MARKER = "/* End ThemeForseen */"


@dataclass
class WriteResult:
    success: bool
    message: str
    created: bool = False
    inline: bool = False


class InlineTargetError(Exception):
    """The HTML document has no ``<style>`` element to write into."""


# ---------------------------------------------------------------------------
# Block text
# ---------------------------------------------------------------------------

def generate_theme_block(colors: ThemeColors, is_dark_mode: bool) -> str:
    mode_label = "Dark Mode" if is_dark_mode else "Light Mode"
    return (
        f"{THEME_START_MARKER} - {mode_label} */\n"
        ":root {\n"
        f"  --color-primary: {colors.primary};\n"
        f"  --color-primary-shadow: {colors.primary_shadow};\n"
        f"  --color-accent: {colors.accent};\n"
        f"  --color-accent-shadow: {colors.accent_shadow};\n"
        f"  --color-bg: {colors.background};\n"
        f"  --color-card-bg: {colors.card_background};\n"
        f"  --color-text: {colors.text};\n"
        f"  --color-extra: {colors.extra};\n"
        "}\n"
        f"{END_MARKER}"
    )


def generate_font_block(font_family: str) -> str:
    return (
        f"{FONT_START_MARKER} */\n"
        ":root {\n"
        f"  --font-family: {font_family};\n"
        "}\n"
        f"{END_MARKER}"
    )


# ---------------------------------------------------------------------------
# Pure text transforms
# ---------------------------------------------------------------------------

def remove_block(content: str, start_marker: str) -> str:
    """Splice the first block opened by *start_marker* out of *content*.

    Whitespace on both sides of the block goes with it; the remaining
    halves are joined by one blank line.  Returns *content* unchanged when
    there is no complete block.
    """
    start = content.find(start_marker)
    if start == -1:
        return content
    end = content.find(END_MARKER, start)
    if end == -1:
        return content

    before = content[:start].rstrip()
    after = content[end + len(END_MARKER):].lstrip()
    if before and after:
        return before + "\n\n" + after
    return before or after


def with_theme_block(content: str, block: str) -> str:
    """Return *content* with its theme block replaced by *block*, at the top."""
    cleaned = remove_block(content, THEME_START_MARKER)
    if cleaned.strip():
        return block + "\n\n" + cleaned.lstrip()
    return block + "\n"


def with_font_block(content: str, block: str) -> str:
    """Return *content* with its font block replaced by *block*, at the end."""
    cleaned = remove_block(content, FONT_START_MARKER)
    if cleaned.strip():
        return cleaned.rstrip() + "\n\n" + block + "\n"
    return block + "\n"


def with_inline_block(html: str, block: str, start_marker: str) -> str:
    """Return *html* with *block* written into its first ``<style>`` element.

    Only the element's content changes; the opening tag (attributes
    included) and everything outside the element are kept as-is.

    Raises:
        InlineTargetError: If the document has no complete ``<style>`` element.
    """
    pair = find_element(tokenize(html), "style")
    if pair is None:
        raise InlineTargetError("no <style> element")
    open_tag, close_tag = pair

    inner = remove_block(html[open_tag.end:close_tag.start], start_marker)
    kept = inner.rstrip()
    if kept.strip():
        new_inner = kept + "\n\n" + block + "\n"
    else:
        new_inner = "\n" + block + "\n"
    return html[:open_tag.end] + new_inner + html[close_tag.start:]


# ---------------------------------------------------------------------------
# Filesystem
# ---------------------------------------------------------------------------

def _read(path: Path) -> str:
    # newline="" keeps CRLF files byte-identical outside the block
    with open(path, encoding="utf-8", newline="") as fh:
        return fh.read()


BOM = "\ufeff"


def _split_bom(text: str) -> tuple[str, str]:
    """Separate a leading byte-order mark so blocks are never inserted before it."""
    if text.startswith(BOM):
        return BOM, text[len(BOM):]
    return "", text


def _write_atomic(path: Path, content: str) -> None:
    """Write *content* to *path* via a temp file in the same directory + rename."""
    fd, tmp = tempfile.mkstemp(dir=str(path.parent), prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as fh:
            fh.write(content)
        if path.exists():
            os.chmod(tmp, path.stat().st_mode & 0o777)
        else:
            os.chmod(tmp, 0o644)
        os.replace(tmp, path)
    except BaseException:
        Path(tmp).unlink(missing_ok=True)
        raise


def _write_css_file(root: Path, css_path: str, block: str, splice, what: str) -> WriteResult:
    full = resolve(root, css_path)
    created = False
    try:
        bom = ""
        if full.exists():
            bom, existing = _split_bom(_read(full))
        else:
            created = True
            existing = ""
            full.parent.mkdir(parents=True, exist_ok=True)

        _write_atomic(full, bom + splice(existing, block))
    except (OSError, UnicodeError) as exc:
        logger.warning("Failed to write %s: %s", full, exc)
        return WriteResult(False, f"Failed to write CSS: {exc}")

    verb = "Created" if created else "Updated"
    logger.info("%s %s (%s)", verb, full, what)
    return WriteResult(True, f"{verb} {css_path} with {what}", created=created)


def write_theme_to_css(
    css_path: str,
    colors: ThemeColors,
    is_dark_mode: bool,
    root: Path | None = None,
) -> WriteResult:
    block = generate_theme_block(colors, is_dark_mode)
    return _write_css_file(project_root(root), css_path, block, with_theme_block, "theme colors")


def write_font_to_css(css_path: str, font_family: str, root: Path | None = None) -> WriteResult:
    block = generate_font_block(font_family)
    return _write_css_file(project_root(root), css_path, block, with_font_block, "font family")


def write_to_inline_style(
    html_path: str,
    block: str,
    start_marker: str,
    root: Path | None = None,
) -> WriteResult:
    full = resolve(project_root(root), html_path)
    try:
        if not full.is_file():
            return WriteResult(False, f"HTML file not found: {html_path}")
        html = _read(full)
        try:
            updated = with_inline_block(html, block, start_marker)
        except InlineTargetError:
            return WriteResult(False, f"No <style> tag found in {html_path}")
        _write_atomic(full, updated)
    except (OSError, UnicodeError) as exc:
        logger.warning("Failed to write inline styles in %s: %s", full, exc)
        return WriteResult(False, f"Failed to write inline CSS: {exc}")

    logger.info("Updated inline <style> in %s", full)
    return WriteResult(True, f"Updated inline styles in {html_path}", inline=True)


def write_theme_to_target(
    target: CssTarget,
    colors: ThemeColors,
    is_dark_mode: bool,
    root: Path | None = None,
) -> WriteResult:
    if target.is_inline:
        block = generate_theme_block(colors, is_dark_mode)
        return write_to_inline_style(target.path, block, THEME_START_MARKER, root=root)
    return write_theme_to_css(target.path, colors, is_dark_mode, root=root)


def write_font_to_target(target: CssTarget, font_family: str, root: Path | None = None) -> WriteResult:
    if target.is_inline:
        block = generate_font_block(font_family)
        return write_to_inline_style(target.path, block, FONT_START_MARKER, root=root)
    return write_font_to_css(target.path, font_family, root=root)
