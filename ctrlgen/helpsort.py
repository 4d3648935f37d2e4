"""Ways to sort and group marker definitions for help output."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Optional


class SortGroup(ABC):
    """Knows how to order marker definitions and put them into groups."""

    @abstractmethod
    def less(self, i: Any, j: Any) -> bool:
        """True if definition ``i`` sorts before ``j``."""

    @abstractmethod
    def group(self, definition: Any, help: Optional[Any]) -> str:
        """The group the given definition belongs to."""


class SortByCategory(SortGroup):
    """Sorts by marker name and groups by help category."""

    def less(self, i: Any, j: Any) -> bool:
        return i.name < j.name

    def group(self, definition: Any, help: Optional[Any]) -> str:
        if help is None:
            return ""
        return help.category


def _option_parts(name: str) -> tuple[str, str]:
    parts = name.split(":")
    if len(parts) == 1:
        return parts[0], ""
    if len(parts) == 2:
        # a default output rule: no generator
        return "", parts[1]
    if len(parts) == 3:
        return parts[1], parts[2]
    return "", ""


class OptionsSort(SortGroup):
    """Sorts command-line options by the generator they belong to."""

    def less(self, i: Any, j: Any) -> bool:
        i_gen, i_rule = _option_parts(i.name)
        j_gen, j_rule = _option_parts(j.name)
        if i_gen != j_gen:
            return i_gen > j_gen
        return i_rule < j_rule

    def group(self, definition: Any, help: Optional[Any]) -> str:
        parts = definition.name.split(":")
        if len(parts) == 1:
            return "generic" if parts[0] == "paths" else "generators"
        if len(parts) == 2:
            return "output rules (optionally as output:<generator>:...)"
        return ""