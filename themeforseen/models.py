"""Shared types for project detection, CSS writing and the HTTP protocol.

Filesystem-side types (``ProjectType``, ``CssTarget``, ``ProjectInfo``) are
plain dataclasses/enums.  Wire payloads are pydantic models so FastAPI can
validate request bodies the same way it does everywhere else.
"""

import enum
from dataclasses import dataclass, field
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class ProjectType(str, enum.Enum):
    """Coarse framework/build-tool classification of a project."""

    NEXTJS = "nextjs"
    VITE = "vite"
    ASTRO = "astro"
    SVELTE = "svelte"
    NUXT = "nuxt"
    REMIX = "remix"
    PLAIN = "plain"
    UNKNOWN = "unknown"


FILE = "file"
INLINE = "inline"


@dataclass(frozen=True)
class CssTarget:
    """Single write destination: a CSS file, or the first ``<style>`` of an HTML file.

    ``path`` is POSIX-style and relative to the project root (absolute paths
    are accepted too).
    """

    kind: Literal["file", "inline"]
    path: str

    @property
    def is_inline(self) -> bool:
        return self.kind == INLINE

    def to_dict(self) -> dict:
        return {"kind": self.kind, "path": self.path}

    @classmethod
    def from_dict(cls, data: dict) -> "CssTarget":
        kind = data.get("kind", FILE)
        if kind not in (FILE, INLINE):
            raise ValueError(f"Unknown target kind: {kind!r}")
        path = data.get("path")
        if not isinstance(path, str) or not path:
            raise ValueError("Target path must be a non-empty string")
        return cls(kind=kind, path=path)


@dataclass
class ProjectInfo:
    type: ProjectType
    root_dir: str
    css_files: list[str] = field(default_factory=list)
    css_target: CssTarget | None = None
    has_tailwind: bool = False

    def to_dict(self) -> dict:
        return {
            "type": self.type.value,
            "rootDir": self.root_dir,
            "cssFiles": list(self.css_files),
            "cssTarget": self.css_target.to_dict() if self.css_target else None,
            "hasTailwind": self.has_tailwind,
        }


# ---------------------------------------------------------------------------
# Wire payloads
# ---------------------------------------------------------------------------

_FORBIDDEN_IN_VALUES = ("/*", "*/", "{", "}", ";", "\n", "\r")


def _check_css_value(value: str) -> str:
    """Reject values that could end the declaration or the marker block early."""
    if any(s in value for s in _FORBIDDEN_IN_VALUES):
        raise ValueError(f"not a plain CSS value: {value!r}")
    return value.strip()


class ThemeColors(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    primary: str
    primary_shadow: str = Field(alias="primaryShadow")
    accent: str
    accent_shadow: str = Field(alias="accentShadow")
    background: str
    card_background: str = Field(alias="cardBackground")
    text: str
    extra: str

    @field_validator("*")
    @classmethod
    def _plain_value(cls, value: str) -> str:
        return _check_css_value(value)


class ApplyData(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    colors: ThemeColors | None = None
    font: str | None = None
    is_dark_mode: bool = Field(default=False, alias="isDarkMode")

    @field_validator("font")
    @classmethod
    def _plain_font(cls, value: str | None) -> str | None:
        return None if value is None else _check_css_value(value)


class ApplyRequest(BaseModel):
    """Body of ``POST /api/apply``.

    ``data`` must carry ``colors`` for a theme request and a non-empty
    ``font`` for a font request.
    """

    type: Literal["theme", "font"]
    data: ApplyData

    @model_validator(mode="after")
    def _check_data_for_type(self) -> "ApplyRequest":
        if self.type == "theme" and self.data.colors is None:
            raise ValueError("theme requests require data.colors")
        if self.type == "font" and not (self.data.font and self.data.font.strip()):
            raise ValueError("font requests require a non-empty data.font")
        return self


class ApplyResponse(BaseModel):
    success: bool
    message: str
    file: str | None = None
    project_type: ProjectType | None = Field(default=None, serialization_alias="projectType")
    created: bool | None = None
    import_instruction: str | None = Field(default=None, serialization_alias="importInstruction")

    def to_json(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class HealthResponse(BaseModel):
    status: Literal["ok"] = "ok"
    version: str
    project_type: ProjectType = Field(serialization_alias="projectType")
    css_file: str | None = Field(serialization_alias="cssFile")

    def to_json(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)
