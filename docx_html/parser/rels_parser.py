"""Utilities for reading Open Packaging Convention relationship parts."""
from __future__ import annotations

import posixpath
from dataclasses import dataclass
from pathlib import PurePosixPath
from typing import Dict, Mapping, Optional, Tuple
from xml.etree import ElementTree as ET

from docx_html.utils.xml_utils import Namespaces, parse_xml

WORD_REL_NS = "http://schemas.openxmlformats.org/officeDocument/2006/relationships"

RELTYPE_OFFICE_DOCUMENT = f"{WORD_REL_NS}/officeDocument"

MAIN_DOCUMENT_PART = "word/document.xml"


class MissingRelationshipError(KeyError):
    """Raised when the body refers to a relationship id its part does not define."""

    def __init__(self, part_name: str, r_id: str) -> None:
        super().__init__(f"Could not find relationship {r_id!r} for part {part_name!r}")
        self.part_name = part_name
        self.r_id = r_id

    def __str__(self) -> str:
        return self.args[0]


@dataclass(frozen=True)
class Relationship:
    """Represents a single OPC relationship."""

    source_part: str
    r_id: str
    target: str
    rel_type: str
    is_external: bool = False
    resolved_target: Optional[str] = None


class PartRelationships:
    """Relationships of a single source part, as seen by the body reader."""

    def __init__(self, part_name: str, relationships: Mapping[str, Relationship]) -> None:
        self.part_name = part_name
        self._relationships = dict(relationships)

    def find_target_by_relationship_id(self, r_id: str) -> str:
        rel = self._relationships.get(r_id)
        if rel is None:
            raise MissingRelationshipError(self.part_name, r_id)
        return rel.target


class Relationships:
    """Aggregated relationship mappings for the DOCX package."""

    def __init__(self, relationships: Dict[str, Dict[str, Relationship]]) -> None:
        self._by_source = relationships

    @classmethod
    def from_package(cls, parts: Mapping[str, bytes]) -> "Relationships":
        """Collect relationships from all known .rels parts within the package."""
        by_source: Dict[str, Dict[str, Relationship]] = {}
        for name, payload in parts.items():
            if not name.endswith(".rels"):
                continue
            source, base_dir = cls._source_and_base_from_rel_part(name)
            tree = parse_xml(payload)
            parsed = cls._parse_relationship_part(source, base_dir, tree)
            if parsed:
                by_source[source] = parsed
        return cls(by_source)

    def for_part(self, part_name: str) -> PartRelationships:
        """Return the relationships a given source part may refer to."""
        source = self._normalize_source(part_name)
        return PartRelationships(source, self._by_source.get(source, {}))

    def main_document_part(self) -> Optional[str]:
        """Return the main document part named by the package relationships."""
        for rel in self._by_source.get("", {}).values():
            if rel.rel_type == RELTYPE_OFFICE_DOCUMENT and rel.resolved_target:
                return rel.resolved_target
        return None

    @classmethod
    def _parse_relationship_part(
        cls, source_part: str, base_dir: PurePosixPath, tree: ET.ElementTree
    ) -> Dict[str, Relationship]:
        result: Dict[str, Relationship] = {}
        for rel_el in tree.findall(".//rel:Relationship", Namespaces.RELS):
            r_id = rel_el.attrib["Id"]
            target = rel_el.attrib.get("Target", "")
            rel_type = rel_el.attrib.get("Type", "")
            is_external = rel_el.attrib.get("TargetMode") == "External"
            resolved_target = cls._resolve_target_path(base_dir, target, is_external)
            result[r_id] = Relationship(
                source_part=source_part,
                r_id=r_id,
                target=target,
                rel_type=rel_type,
                is_external=is_external,
                resolved_target=resolved_target,
            )
        return result

    @staticmethod
    def _source_and_base_from_rel_part(rel_part: str) -> Tuple[str, PurePosixPath]:
        rel_path = PurePosixPath(rel_part)
        base_dir = rel_path.parent
        if rel_part == "_rels/.rels":
            return "", base_dir
        if "/_rels/" in rel_part:
            folder, suffix = rel_part.split("/_rels/", 1)
            base = suffix[:-5]
            return f"{folder}/{base}", base_dir
        if rel_part.startswith("_rels/"):
            base = rel_part[len("_rels/") : -5]
            return base, base_dir
        return rel_part[:-5], base_dir

    @staticmethod
    def _resolve_target_path(base_dir: PurePosixPath, target: str, is_external: bool) -> Optional[str]:
        if not target:
            return None
        if is_external:
            return target
        if target.startswith("/"):
            return target[1:]
        resolved = base_dir.joinpath(target)
        normalized = posixpath.normpath(resolved.as_posix())
        normalized = normalized.replace("/_rels/", "/")
        if normalized.startswith("_rels/"):
            normalized = normalized[len("_rels/") :]
        return normalized

    @classmethod
    def _normalize_source(cls, part_name: str) -> str:
        if part_name.endswith(".rels"):
            source, _ = cls._source_and_base_from_rel_part(part_name)
            return source
        return part_name


def uri_to_zip_entry_name(base: str, uri: str) -> str:
    """Resolve a relationship target against the folder of the part that owns it."""
    if uri.startswith("/"):
        return uri[1:]
    return posixpath.normpath(f"{base}/{uri}")


def replace_fragment(uri: str, fragment: str) -> str:
    hash_index = uri.find("#")
    if hash_index != -1:
        uri = uri[:hash_index]
    return f"{uri}#{fragment}"
