"""Helpers to persist intermediate representations for debugging."""
from __future__ import annotations

import enum
import json
from dataclasses import fields, is_dataclass
from pathlib import Path
from typing import Any

from docx_html.model.elements import Document, Notes


class DebugDumper:
    """Writes intermediate artifacts onto disk for inspection."""

    def __init__(self, directory: Path) -> None:
        self.directory = directory

    def dump(self, document: Document) -> Path:
        """Persist the document tree as JSON for offline analysis."""
        self.directory.mkdir(parents=True, exist_ok=True)
        target = self.directory / "document_tree.json"
        target.write_text(json.dumps(self._serialize(document), indent=2, ensure_ascii=False), encoding="utf-8")
        return target

    def _serialize(self, value: Any) -> Any:
        if is_dataclass(value):
            payload = {"type": type(value).__name__}
            for item in fields(value):
                field_value = getattr(value, item.name)
                # image openers cannot be written out
                if not callable(field_value):
                    payload[item.name] = self._serialize(field_value)
            return payload
        if isinstance(value, Notes):
            return [self._serialize(note) for note in value]
        if isinstance(value, enum.Enum):
            return value.value
        if isinstance(value, dict):
            return {k: self._serialize(v) for k, v in value.items()}
        if isinstance(value, (list, tuple)):
            return [self._serialize(v) for v in value]
        return value
