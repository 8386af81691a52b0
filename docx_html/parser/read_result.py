"""Results that carry warnings alongside the values read from a document.

Every read in the body reader returns a :class:`ReadResult`: the elements
produced, any ``extra`` elements that must surface one level up, and the
warnings collected so far. Combining results always unions their warnings,
so nothing reported by a nested read is lost on the way to the caller.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, FrozenSet, Generic, Iterable, List, Sequence, Tuple, TypeVar, Union

from docx_html.model.elements import DocumentElement

T = TypeVar("T")
U = TypeVar("U")

Warnings = FrozenSet[str]


@dataclass(frozen=True, slots=True)
class Result(Generic[T]):
    """A single value plus the warnings raised while producing it."""

    value: T
    warnings: Warnings = frozenset()

    @classmethod
    def success(cls, value: T) -> "Result[T]":
        return cls(value)

    @classmethod
    def with_warning(cls, value: T, warning: str) -> "Result[T]":
        return cls(value, frozenset([warning]))

    def map(self, func: Callable[[T], U]) -> "Result[U]":
        return Result(func(self.value), self.warnings)


Elements = Union[DocumentElement, Sequence[DocumentElement]]


def _as_tuple(elements: Elements) -> Tuple[DocumentElement, ...]:
    if isinstance(elements, (list, tuple)):
        return tuple(elements)
    return (elements,)


@dataclass(frozen=True, slots=True)
class ReadResult:
    """Zero or more document elements read from a single XML element."""

    elements: Tuple[DocumentElement, ...] = ()
    extra: Tuple[DocumentElement, ...] = ()
    warnings: Warnings = frozenset()

    @classmethod
    def success(cls, elements: Elements) -> "ReadResult":
        return cls(_as_tuple(elements))

    @classmethod
    def with_warning(cls, elements: Elements, warning: str) -> "ReadResult":
        return cls(_as_tuple(elements), (), frozenset([warning]))

    @classmethod
    def empty_with_warning(cls, warning: str) -> "ReadResult":
        return cls((), (), frozenset([warning]))

    @classmethod
    def concat(cls, results: Iterable["ReadResult"]) -> "ReadResult":
        elements: List[DocumentElement] = []
        extra: List[DocumentElement] = []
        warnings: set = set()
        for result in results:
            elements.extend(result.elements)
            extra.extend(result.extra)
            warnings.update(result.warnings)
        return cls(tuple(elements), tuple(extra), frozenset(warnings))

    @classmethod
    def flat_map_all(cls, items: Iterable[T], func: Callable[[T], "ReadResult"]) -> "ReadResult":
        return cls.concat(func(item) for item in items)

    def map(self, func: Callable[[List[DocumentElement]], Elements]) -> "ReadResult":
        return ReadResult(_as_tuple(func(list(self.elements))), self.extra, self.warnings)

    def flat_map(self, func: Callable[[List[DocumentElement]], "ReadResult"]) -> "ReadResult":
        result = func(list(self.elements))
        return ReadResult(result.elements, self.extra + result.extra, self.warnings | result.warnings)

    def combine(
        self,
        other: Result[T],
        func: Callable[[T, List[DocumentElement]], Elements],
    ) -> "ReadResult":
        """Build elements from a separately read value and this result's elements."""
        return ReadResult(
            _as_tuple(func(other.value, list(self.elements))),
            self.extra,
            self.warnings | other.warnings,
        )

    def to_extra(self) -> "ReadResult":
        return ReadResult((), self.elements + self.extra, self.warnings)

    def append_extra(self) -> "ReadResult":
        return ReadResult(self.elements + self.extra, (), self.warnings)


EMPTY = ReadResult()
