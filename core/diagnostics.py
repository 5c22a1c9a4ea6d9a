"""Diagnostics produced by validation rules."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Dict, Iterable, Iterator, List, Optional, Sequence

from core.attribute_path import AttributePath


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"


@dataclass(frozen=True)
class Diagnostic:
    """A single validation message anchored to an attribute path."""

    severity: Severity
    summary: str
    detail: str
    path: AttributePath = field(default_factory=AttributePath)

    @property
    def is_error(self) -> bool:
        return self.severity is Severity.ERROR

    def with_severity(self, severity: Severity) -> "Diagnostic":
        return replace(self, severity=severity)

    def to_dict(self) -> Dict[str, object]:
        data: Dict[str, object] = {
            "severity": self.severity.value,
            "summary": self.summary,
            "detail": self.detail,
        }
        if not self.path.is_empty:
            data["path"] = str(self.path)
        return data


class Diagnostics:
    """Ordered accumulator of diagnostics owned by one validation run."""

    def __init__(self, items: Optional[Iterable[Diagnostic]] = None) -> None:
        self._items: List[Diagnostic] = list(items or ())

    def add(self, diagnostic: Diagnostic) -> None:
        self._items.append(diagnostic)

    def add_error(self, summary: str, detail: str) -> None:
        self._items.append(Diagnostic(Severity.ERROR, summary, detail))

    def add_attribute_error(self, path: AttributePath, summary: str, detail: str) -> None:
        self._items.append(Diagnostic(Severity.ERROR, summary, detail, path))

    def add_attribute_warning(self, path: AttributePath, summary: str, detail: str) -> None:
        self._items.append(Diagnostic(Severity.WARNING, summary, detail, path))

    def extend(self, diagnostics: Iterable[Diagnostic]) -> None:
        self._items.extend(diagnostics)

    def has_error(self) -> bool:
        return any(item.is_error for item in self._items)

    @property
    def errors(self) -> Sequence[Diagnostic]:
        return tuple(item for item in self._items if item.severity is Severity.ERROR)

    @property
    def warnings(self) -> Sequence[Diagnostic]:
        return tuple(item for item in self._items if item.severity is Severity.WARNING)

    def to_list(self) -> List[Dict[str, object]]:
        return [item.to_dict() for item in self._items]

    def __iter__(self) -> Iterator[Diagnostic]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __getitem__(self, position: int) -> Diagnostic:
        return self._items[position]

    def __repr__(self) -> str:  # pragma: no cover - trivial
        return f"Diagnostics({self._items!r})"


def format_set(values: Iterable[object]) -> str:
    """Render values the way Terraform prints a set of strings: ``["a","b"]``."""

    return "[" + ",".join(f'"{value}"' for value in values) + "]"
