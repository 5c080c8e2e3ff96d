"""Tests for themeforseen/detect.py — project classification and CSS target resolution."""

import pytest

from themeforseen.detect import (
    default_css_path,
    detect_project,
    detect_project_type,
    find_css_target_for_html,
    import_instruction,
    read_package_json,
    scan_html,
)
from themeforseen.models import CssTarget, ProjectType

from tests.conftest import snapshot, write_tree


class TestProjectType:
    def test_next_dependency(self, project):
        write_tree(project, {"package.json": {"dependencies": {"next": "14.0.0"}}})
        assert detect_project_type(project) is ProjectType.NEXTJS

    def test_dev_dependency_counts(self, project):
        write_tree(project, {"package.json": {"devDependencies": {"vite": "^5.0.0"}}})
        assert detect_project_type(project) is ProjectType.VITE

    def test_dependency_priority(self, project):
        # Nuxt and Astro projects also depend on vite
        write_tree(project, {"package.json": {"dependencies": {"vite": "5", "astro": "4"}}})
        assert detect_project_type(project) is ProjectType.ASTRO

    def test_remix(self, project):
        write_tree(project, {"package.json": {"dependencies": {"@remix-run/react": "2"}}})
        assert detect_project_type(project) is ProjectType.REMIX

    @pytest.mark.parametrize("filename,expected", [
        ("next.config.mjs", ProjectType.NEXTJS),
        ("vite.config.ts", ProjectType.VITE),
        ("astro.config.mjs", ProjectType.ASTRO),
        ("svelte.config.js", ProjectType.SVELTE),
        ("nuxt.config.ts", ProjectType.NUXT),
    ])
    def test_config_file_fallback(self, project, filename, expected):
        write_tree(project, {filename: "export default {}\n"})
        assert detect_project_type(project) is expected

    def test_malformed_package_json_is_absent(self, project):
        write_tree(project, {"package.json": "{not json", "vite.config.js": ""})
        assert read_package_json(project) is None
        assert detect_project_type(project) is ProjectType.VITE

    def test_non_object_package_json_is_absent(self, project):
        write_tree(project, {"package.json": "[1, 2]"})
        assert read_package_json(project) is None

    def test_plain_and_unknown(self, project):
        assert detect_project_type(project) is ProjectType.UNKNOWN
        write_tree(project, {"index.html": "<html></html>"})
        assert detect_project_type(project) is ProjectType.PLAIN


class TestScanHtml:
    def test_excludes_remote_links(self):
        html = (
            '<link rel="stylesheet" href="https://cdn.example.com/x.css">'
            '<link rel="stylesheet" href="//fonts.example.com/f.css">'
            '<link rel="stylesheet" href="local.css">'
        )
        links, _ = scan_html(html)
        assert links == ["local.css"]

    def test_both_attribute_orders_no_duplicates(self):
        html = '<link href="a.css" rel="stylesheet"><link rel="stylesheet" href="a.css">'
        links, _ = scan_html(html)
        assert links == ["a.css"]

    def test_non_stylesheet_links_ignored(self):
        links, _ = scan_html('<link rel="icon" href="favicon.css"><link rel="preload" href="x.css">')
        assert links == []

    def test_inline_style_must_be_in_head(self):
        assert scan_html("<head><style>a{}</style></head>")[1] is True
        assert scan_html("<head></head><body><style>a{}</style></body>")[1] is False


class TestCssTarget:
    def test_single_local_link(self, project):
        write_tree(project, {
            "index.html": '<html><head><link rel="stylesheet" href="css/style.css"></head></html>',
        })
        info = detect_project(project)
        assert info.type is ProjectType.PLAIN
        assert info.css_target == CssTarget("file", "css/style.css")

    def test_link_relative_to_html_dir(self, project):
        write_tree(project, {
            "public/index.html": '<head><link rel="stylesheet" href="./site.css"></head>',
        })
        assert find_css_target_for_html(project) == CssTarget("file", "public/site.css")

    def test_leading_slash_stripped(self, project):
        write_tree(project, {
            "public/index.html": '<head><link rel="stylesheet" href="/assets/app.css?v=3"></head>',
        })
        assert find_css_target_for_html(project) == CssTarget("file", "assets/app.css")

    def test_inline_style(self, project):
        write_tree(project, {
            "index.html": "<html><head><style>body { margin: 0; }</style></head><body></body></html>",
        })
        assert detect_project(project).css_target == CssTarget("inline", "index.html")

    def test_multiple_links_prefers_priority_name(self, project):
        write_tree(project, {
            "index.html": (
                "<head>"
                '<link rel="stylesheet" href="vendor/reset.css">'
                '<link rel="stylesheet" href="css/styles.css">'
                '<link rel="stylesheet" href="css/main.css">'
                "</head>"
            ),
        })
        assert find_css_target_for_html(project) == CssTarget("file", "css/main.css")

    def test_multiple_links_falls_back_to_first(self, project):
        write_tree(project, {
            "index.html": (
                '<head><link rel="stylesheet" href="a.css"><link rel="stylesheet" href="b.css"></head>'
            ),
        })
        assert find_css_target_for_html(project) == CssTarget("file", "a.css")

    def test_no_links_no_style(self, project):
        write_tree(project, {"index.html": "<html><head><title>x</title></head></html>"})
        info = detect_project(project)
        assert info.css_target is None

    def test_html_without_target_uses_existing_css(self, project):
        write_tree(project, {"index.html": "<html></html>", "css/style.css": "body{}\n"})
        info = detect_project(project)
        assert info.css_files == ["css/style.css"]
        assert info.css_target == CssTarget("file", "css/style.css")

    def test_framework_uses_first_existing_candidate(self, project):
        write_tree(project, {
            "package.json": {"dependencies": {"next": "14.0.0"}},
            "app/globals.css": "",
            "styles/globals.css": "",
        })
        info = detect_project(project)
        assert info.css_files == ["app/globals.css", "styles/globals.css"]
        assert info.css_target == CssTarget("file", "app/globals.css")

    def test_framework_without_css(self, project):
        write_tree(project, {"package.json": {"dependencies": {"svelte": "4"}}})
        info = detect_project(project)
        assert info.css_target is None
        assert info.css_files == []

    def test_tailwind(self, project):
        write_tree(project, {"tailwind.config.ts": "export default {}"})
        assert detect_project(project).has_tailwind is True

    def test_detection_is_read_only(self, project):
        write_tree(project, {"index.html": '<head><link rel="stylesheet" href="missing.css"></head>'})
        before = snapshot(project)
        detect_project(project)
        assert snapshot(project) == before


class TestDefaults:
    def test_default_paths(self):
        assert default_css_path(ProjectType.NEXTJS) == "src/app/globals.css"
        assert default_css_path(ProjectType.PLAIN) == "styles.css"
        assert default_css_path(ProjectType.UNKNOWN) == "src/styles/theme-forseen.css"

    def test_import_instruction_strips_src(self):
        text = import_instruction(ProjectType.NEXTJS, "src/app/globals.css")
        assert text == "Add to your layout.tsx or _app.tsx:\nimport './app/globals.css';"

    def test_import_instruction_every_type_non_empty(self):
        for project_type in ProjectType:
            assert import_instruction(project_type, default_css_path(project_type))
