"""Merged views of marker definitions and their help text."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass(frozen=True)
class DetailedHelp:
    """A one-line summary plus optional further details."""

    summary: str = ""
    details: str = ""


def _help_dict(help_: DetailedHelp) -> dict[str, Any]:
    out: dict[str, Any] = {"summary": help_.summary}
    if help_.details:
        out["details"] = help_.details
    return out


@dataclass(frozen=True)
class Argument:
    """Type data for a marker argument.

    ``type`` is one of string, bool, int, slice, any, raw or invalid.
    """

    type: str
    optional: bool = False
    item_type: Optional[Argument] = None

    def type_string(self) -> str:
        """A user-friendly rendering of the type the argument parses to."""
        if self.type == "slice":
            if self.item_type is None:
                raise ValueError("slice argument has no item type")
            return "[]" + self.item_type.type_string()
        return self.type


def _argument_dict(arg: Argument) -> dict[str, Any]:
    out: dict[str, Any] = {"type": arg.type, "optional": arg.optional}
    if arg.item_type is not None:
        out["itemType"] = _argument_dict(arg.item_type)
    return out


@dataclass(frozen=True)
class FieldHelp:
    """Documentation for one field of a marker."""

    name: str
    argument: Argument
    help: DetailedHelp = field(default_factory=DetailedHelp)

    @property
    def optional(self) -> bool:
        return self.argument.optional

    @property
    def summary(self) -> str:
        return self.help.summary

    @property
    def details(self) -> str:
        return self.help.details

    def type_string(self) -> str:
        """The rendered type of this field's argument."""
        return self.argument.type_string()


def _field_dict(field_help: FieldHelp) -> dict[str, Any]:
    out: dict[str, Any] = {"name": field_help.name}
    out.update(_argument_dict(field_help.argument))
    out.update(_help_dict(field_help.help))
    return out


@dataclass
class MarkerDoc:
    """Documentation for a single marker."""

    name: str
    target: str
    help: DetailedHelp = field(default_factory=DetailedHelp)
    category: str = ""
    deprecated_in_favor_of: Optional[str] = None
    fields: list[FieldHelp] = field(default_factory=list)

    @property
    def summary(self) -> str:
        return self.help.summary

    @property
    def details(self) -> str:
        return self.help.details

    def empty(self) -> bool:
        """True if the marker takes no arguments."""
        return not self.fields

    def anonymous_field(self) -> bool:
        """True if the marker takes a single unnamed value."""
        return len(self.fields) == 1 and self.fields[0].name == ""

    def to_dict(self) -> dict[str, Any]:
        """A JSON-ready representation, with empty optional keys left out."""
        out: dict[str, Any] = {"name": self.name, "target": self.target}
        out.update(_help_dict(self.help))
        out["category"] = self.category
        if self.deprecated_in_favor_of is not None:
            out["deprecatedInFavorOf"] = self.deprecated_in_favor_of
        if self.fields:
            out["fields"] = [_field_dict(f) for f in self.fields]
        return out


@dataclass
class CategoryDoc:
    """Help for every marker in one category."""

    category: str
    markers: list[MarkerDoc] = field(default_factory=list)