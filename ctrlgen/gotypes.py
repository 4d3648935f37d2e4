"""A small model of Go packages, types and the errors attached to them."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable, Iterator, Optional


class ErrorKind(Enum):
    """Where a package error came from."""

    UNKNOWN = "unknown"
    LIST = "list"
    PARSE = "parse"
    TYPE = "type"


@dataclass(frozen=True)
class PackageError:
    """An error recorded against a package, with a textual position."""

    pos: str
    msg: str
    kind: ErrorKind = ErrorKind.UNKNOWN

    def __str__(self) -> str:
        return f"{self.pos or '-'}: {self.msg}"


class PositionedError(Exception):
    """An error tied to a position in some source file."""

    def __init__(self, pos: Any, err: BaseException) -> None:
        super().__init__(str(err))
        self.pos = pos
        self.err = err

    def __str__(self) -> str:
        return str(self.err)


class ErrList(Exception):
    """Several errors aggregated into one."""

    def __init__(self, errors: Iterable[BaseException]) -> None:
        self.errors = list(errors)
        super().__init__(self.errors)

    def __iter__(self) -> Iterator[BaseException]:
        return iter(self.errors)

    def __len__(self) -> int:
        return len(self.errors)

    def __str__(self) -> str:
        return "[" + " ".join(str(e) for e in self.errors) + "]"


def _position_of(node: Any) -> Any:
    return getattr(node, "pos", node)


def err_from_node(err: BaseException, node: Any) -> BaseException:
    """Attach the position of ``node`` to ``err``, mapping over error lists.

    ``node`` is anything with a ``pos`` attribute, or a position itself.
    """
    if isinstance(err, ErrList):
        return ErrList(err_from_node(sub, node) for sub in err)
    return PositionedError(_position_of(node), err)


def maybe_err_list(errs: Iterable[BaseException]) -> Optional[ErrList]:
    """An ErrList of ``errs``, or None when there are none."""
    errs = list(errs)
    return ErrList(errs) if errs else None


class GoType:
    """Base of all Go types."""

    def underlying(self) -> GoType:
        """The type with all names resolved; most types are their own."""
        return self


class Invalid(GoType):
    """The type of something that failed to type-check."""

    def __str__(self) -> str:
        return "invalid type"

    def __repr__(self) -> str:
        return "Invalid()"


INVALID = Invalid()


@dataclass(frozen=True)
class Basic(GoType):
    """A predeclared type such as int or string."""

    name: str

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class Pointer(GoType):
    elem: GoType

    def __str__(self) -> str:
        return f"*{self.elem}"


@dataclass(frozen=True)
class Slice(GoType):
    elem: GoType

    def __str__(self) -> str:
        return f"[]{self.elem}"


@dataclass(frozen=True)
class Map(GoType):
    key: GoType
    elem: GoType

    def __str__(self) -> str:
        return f"map[{self.key}]{self.elem}"


@dataclass(frozen=True)
class Field:
    """A struct field; embedded fields are named after their type."""

    name: str
    type: GoType
    embedded: bool = False
    tag: str = ""


@dataclass(eq=False)
class Struct(GoType):
    fields: list[Field] = field(default_factory=list)

    def __str__(self) -> str:
        parts = [str(f.type) if f.embedded else f"{f.name} {f.type}" for f in self.fields]
        return "struct{" + "; ".join(parts) + "}"


@dataclass(frozen=True)
class Signature:
    """A method signature; ``recv`` is the receiver type."""

    params: tuple[GoType, ...] = ()
    results: tuple[GoType, ...] = ()
    recv: Optional[GoType] = None


@dataclass(eq=False)
class Named(GoType):
    """A declared type. Named types compare by identity."""

    name: str
    package: Optional[Package] = None
    type: Optional[GoType] = None
    methods: dict[str, Signature] = field(default_factory=dict)

    def underlying(self) -> GoType:
        current: Optional[GoType] = self.type
        seen = {id(self)}
        while isinstance(current, Named):
            if id(current) in seen:
                return INVALID
            seen.add(id(current))
            current = current.type
        return INVALID if current is None else current

    def add_method(self, name: str, signature: Signature) -> None:
        """Declare a method; a signature without receiver gets this type."""
        if signature.recv is None:
            signature = dataclasses.replace(signature, recv=self)
        self.methods[name] = signature

    def __str__(self) -> str:
        if self.package is None:
            return self.name
        return f"{self.package.path}.{self.name}"

    def __repr__(self) -> str:
        return f"Named({self})"


def _first(values: dict[str, list[Any]], name: str) -> Any:
    found = values.get(name)
    return found[0] if found else None


@dataclass
class TypeInfo:
    """A declared type together with the markers written on it."""

    name: str
    type: GoType
    markers: dict[str, list[Any]] = field(default_factory=dict)
    pos: Any = None

    def marker(self, name: str) -> Any:
        """The first value of the named marker, or None."""
        return _first(self.markers, name)


@dataclass(eq=False)
class Package:
    """A loaded package with its types, markers, imports and errors."""

    name: str
    path: str
    id: str = ""
    imports: dict[str, Package] = field(default_factory=dict)
    types: list[TypeInfo] = field(default_factory=list)
    markers: dict[str, list[Any]] = field(default_factory=dict)
    compiled_go_files: list[str] = field(default_factory=list)
    errors: list[PackageError] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not self.id:
            self.id = self.path

    def marker(self, name: str) -> Any:
        """The first value of the named package marker, or None."""
        return _first(self.markers, name)

    def add_error(self, err: BaseException | PackageError) -> None:
        """Record an error, unrolling error lists into single entries."""
        if isinstance(err, PackageError):
            self.errors.append(err)
        elif isinstance(err, ErrList):
            for sub in err:
                self.add_error(sub)
        elif isinstance(err, PositionedError):
            self.errors.append(PackageError(str(err.pos), str(err), ErrorKind.UNKNOWN))
        elif isinstance(err, OSError) and err.filename is not None:
            msg = err.strerror or str(err)
            self.errors.append(PackageError(f"{err.filename}:1", msg, ErrorKind.PARSE))
        else:
            self.errors.append(PackageError(f"{self.id}:-", str(err), ErrorKind.UNKNOWN))