"""Configuration templates packaged with docquiz."""

from __future__ import annotations

from dataclasses import dataclass
from importlib import resources
from pathlib import Path
from typing import Iterable

from .config import TomlConfigError, write_toml_template

__all__ = [
    "ConfigTemplate",
    "ConfigTemplateError",
    "get_template",
    "iter_templates",
]


class ConfigTemplateError(RuntimeError):
    """Raised when a template is unknown or cannot be written."""


@dataclass(frozen=True)
class ConfigTemplate:
    """A TOML template shipped as package data."""

    name: str
    filename: str
    description: str
    package: str

    def read_text(self) -> str:
        try:
            resource = resources.files(self.package).joinpath(self.filename)
            return resource.read_text(encoding="utf-8")
        except FileNotFoundError as exc:  # pragma: no cover - package state
            raise ConfigTemplateError(
                f"Template '{self.name}' resource not found."
            ) from exc

    def write(self, path: Path, *, overwrite: bool = False) -> Path:
        """Write the template to ``path``; existing files need ``overwrite``."""

        try:
            return write_toml_template(
                path,
                template=self.read_text(),
                overwrite=overwrite,
            )
        except TomlConfigError as exc:
            raise ConfigTemplateError(str(exc)) from exc


_TEMPLATES: dict[str, ConfigTemplate] = {
    "catalog": ConfigTemplate(
        name="catalog",
        filename="template.toml",
        description="Quiz catalog with default mode and sample entry.",
        package="docquiz.quizzer",
    ),
    "sample": ConfigTemplate(
        name="sample",
        filename="sample.txt",
        description="Tagged quiz document referenced by the catalog template.",
        package="docquiz.quizzer",
    ),
}


def get_template(name: str) -> ConfigTemplate:
    try:
        return _TEMPLATES[name]
    except KeyError as exc:
        raise ConfigTemplateError(f"Unknown config template '{name}'.") from exc


def iter_templates() -> Iterable[ConfigTemplate]:
    return tuple(_TEMPLATES.values())
