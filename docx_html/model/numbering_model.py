"""Numbering model captures list definitions extracted from numbering.xml."""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Dict, Optional

from docx_html.model.elements import NumberingLevel


@dataclass(slots=True)
class AbstractNumberingDefinition:
    """Template describing multi-level numbering behavior."""

    abstract_num_id: str
    levels: Dict[str, NumberingLevel] = field(default_factory=dict)
    style_link: Optional[str] = None


@dataclass(slots=True)
class NumberingInstance:
    """Concrete numbering instance bound to an abstract definition."""

    num_id: str
    abstract_num_id: str
    start_overrides: Dict[str, int] = field(default_factory=dict)


class NumberingCatalog:
    """Collection of abstract definitions and concrete numbering instances."""

    def __init__(
        self,
        abstracts: Dict[str, AbstractNumberingDefinition],
        instances: Dict[str, NumberingInstance],
        numbering_styles: Optional[Dict[str, str]] = None,
    ) -> None:
        self.abstracts = abstracts
        self.instances = instances
        self._numbering_styles = numbering_styles or {}

    @classmethod
    def empty(cls) -> "NumberingCatalog":
        return cls(abstracts={}, instances={})

    def find_level(self, num_id: str, level: str) -> Optional[NumberingLevel]:
        instance = self.instances.get(num_id)
        if instance is None:
            return None
        abstract = self._resolve_abstract(instance.abstract_num_id, seen=set())
        if abstract is None:
            return None
        level_def = abstract.levels.get(level)
        if level_def is None:
            return None
        start_override = instance.start_overrides.get(level)
        if start_override is not None:
            return replace(level_def, start=start_override)
        return level_def

    def _resolve_abstract(self, abstract_num_id: str, seen: set) -> Optional[AbstractNumberingDefinition]:
        abstract = self.abstracts.get(abstract_num_id)
        if abstract is None or abstract.style_link is None or abstract.levels:
            return abstract
        # A definition that only links to a numbering style borrows that style's levels.
        if abstract_num_id in seen:
            return None
        seen.add(abstract_num_id)
        linked_num_id = self._numbering_styles.get(abstract.style_link)
        linked_instance = self.instances.get(linked_num_id) if linked_num_id is not None else None
        if linked_instance is None:
            return None
        return self._resolve_abstract(linked_instance.abstract_num_id, seen)
