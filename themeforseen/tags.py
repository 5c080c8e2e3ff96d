"""Minimal HTML tag tokenizer.

Just enough HTML to find ``<link>``, ``<head>`` and ``<style>`` tags in an
entry page: a flat list of tags with their attributes and character
offsets.  No tree, no entity decoding.  Comments are skipped and the raw
text of ``<script>``/``<style>`` elements is never tokenized, so markup
inside a JS string does not produce phantom tags.
"""

import re
from dataclasses import dataclass, field

_TAG_RE = re.compile(
    r"""<!--.*?-->"""
    r"""|<(?P<closing>/?)(?P<name>[a-zA-Z][\w:-]*)"""
    r"""(?P<attrs>(?:\s+[^\s=/>"']+(?:\s*=\s*(?:"[^"]*"|'[^']*'|[^\s>"']+))?)*)"""
    r"""\s*(?P<self_closing>/?)>""",
    re.DOTALL,
)

_ATTR_RE = re.compile(r"""([^\s=/>"']+)(?:\s*=\s*("[^"]*"|'[^']*'|[^\s>"']+))?""")

RAW_TEXT_ELEMENTS = ("script", "style")


@dataclass
class Tag:
    name: str
    attrs: dict[str, str] = field(default_factory=dict)
    start: int = 0
    end: int = 0
    closing: bool = False
    self_closing: bool = False

    def get(self, attr: str, default: str | None = None) -> str | None:
        return self.attrs.get(attr, default)


def parse_attrs(text: str) -> dict[str, str]:
    """Parse an attribute string into a dict (names lowercased, first wins)."""
    attrs: dict[str, str] = {}
    for m in _ATTR_RE.finditer(text):
        name = m.group(1).lower()
        value = m.group(2) or ""
        if value[:1] in ("'", '"'):
            value = value[1:-1]
        attrs.setdefault(name, value)
    return attrs


def tokenize(text: str) -> list[Tag]:
    """Return every start/end tag in *text*, in document order."""
    tags: list[Tag] = []
    pos = 0
    while True:
        m = _TAG_RE.search(text, pos)
        if m is None:
            break
        pos = m.end()
        if m.group("name") is None:
            continue  # comment

        tag = Tag(
            name=m.group("name").lower(),
            attrs=parse_attrs(m.group("attrs") or ""),
            start=m.start(),
            end=m.end(),
            closing=bool(m.group("closing")),
            self_closing=bool(m.group("self_closing")),
        )
        tags.append(tag)

        if tag.name in RAW_TEXT_ELEMENTS and not tag.closing and not tag.self_closing:
            close = re.compile(rf"</{tag.name}\s*>", re.IGNORECASE).search(text, pos)
            if close is None:
                break
            tags.append(Tag(name=tag.name, start=close.start(), end=close.end(), closing=True))
            pos = close.end()
    return tags


def find_element(tags: list[Tag], name: str) -> tuple[Tag, Tag] | None:
    """Return the first ``(open, close)`` tag pair for element *name*."""
    for i, tag in enumerate(tags):
        if tag.name != name or tag.closing:
            continue
        for other in tags[i + 1:]:
            if other.name == name and other.closing:
                return tag, other
        return None
    return None
