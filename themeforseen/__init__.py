"""ThemeForseen dev server — writes picked themes and fonts into a project's CSS."""

__version__ = "1.0.0"
