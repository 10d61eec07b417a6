from __future__ import annotations

import codecs
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, field_validator

CONFIG_NAMES = ("synthesia-meta.yaml", "synthesia-meta.yml")


class OutputSettings(BaseModel):
    encoding: str = "utf-8"
    xml_declaration: bool = True
    indent: Optional[str] = None
    backup: bool = False

    @field_validator("encoding")
    @classmethod
    def _byte_encoding(cls, value: str) -> str:
        if value.lower() == "unicode":
            raise ValueError("encoding must name a byte encoding such as utf-8")
        try:
            codecs.lookup(value)
        except LookupError as exc:
            raise ValueError(f"unknown encoding {value!r}") from exc
        return value

    def save_options(self) -> dict:
        return {
            "encoding": self.encoding,
            "xml_declaration": self.xml_declaration,
            "indent": self.indent,
        }


class PathSettings(BaseModel):
    separator: str = "/"

    @field_validator("separator")
    @classmethod
    def _non_empty(cls, value: str) -> str:
        if not value:
            raise ValueError("path separator cannot be empty")
        return value


class CheckSettings(BaseModel):
    warn_dangling_references: bool = True
    warn_missing_unique_id: bool = True


class Settings(BaseModel):
    output: OutputSettings = OutputSettings()
    paths: PathSettings = PathSettings()
    check: CheckSettings = CheckSettings()

    @classmethod
    def load(cls, path: Path) -> "Settings":
        with path.open("r", encoding="utf-8") as fh:
            raw = yaml.safe_load(fh)
        return cls.model_validate(raw or {})


def find_config(explicit_path: Optional[Path]) -> Optional[Path]:
    if explicit_path:
        return explicit_path
    cwd = Path.cwd()
    for name in CONFIG_NAMES:
        candidate = cwd / name
        if candidate.exists():
            return candidate
    return None


def load_settings(explicit_path: Optional[Path] = None) -> Settings:
    path = find_config(explicit_path)
    if path is None:
        return Settings()
    return Settings.load(path)
