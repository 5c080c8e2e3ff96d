"""Shared test fixtures for theme-forseen tests."""

import json
import os

import pytest

from themeforseen.models import ThemeColors


SAMPLE_COLORS = {
    "primary": "#3B82F6",
    "primaryShadow": "#1D4ED8",
    "accent": "#F59E0B",
    "accentShadow": "#B45309",
    "background": "#FFFFFF",
    "cardBackground": "#F3F4F6",
    "text": "#111827",
    "extra": "#10B981",
}

OTHER_COLORS = {
    "primary": "#E11D48",
    "primaryShadow": "#9F1239",
    "accent": "#8B5CF6",
    "accentShadow": "#5B21B6",
    "background": "#0F172A",
    "cardBackground": "#1E293B",
    "text": "#F8FAFC",
    "extra": "#22D3EE",
}


def write_tree(root, files: dict) -> None:
    """Create *files* (relative path -> text, or dict for JSON) under *root*."""
    for rel, content in files.items():
        p = root / rel
        p.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, dict):
            content = json.dumps(content)
        p.write_text(content)


def snapshot(root) -> dict:
    """Map of relative path -> bytes for every file under *root*."""
    return {
        str(p.relative_to(root)): p.read_bytes()
        for p in sorted(root.rglob("*"))
        if p.is_file()
    }


@pytest.fixture
def colors():
    return ThemeColors.model_validate(SAMPLE_COLORS)


@pytest.fixture
def other_colors():
    return ThemeColors.model_validate(OTHER_COLORS)


@pytest.fixture
def project(tmp_path):
    """An empty project root.  Every test gets an isolated, disposable tree."""
    root = tmp_path / "project"
    root.mkdir()
    return root


@pytest.fixture(autouse=True)
def _isolate_env():
    """Keep THEMEFORSEEN_* variables from the outer shell out of the tests."""
    saved = {k: v for k, v in os.environ.items() if k.startswith("THEMEFORSEEN_")}
    for k in saved:
        os.environ.pop(k)
    yield
    for k in [k for k in os.environ if k.startswith("THEMEFORSEEN_")]:
        os.environ.pop(k)
    os.environ.update(saved)
