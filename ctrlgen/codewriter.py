"""Writing Go source lines and tracking the imports they need."""

from __future__ import annotations

import io
import json
import unicodedata
from contextlib import contextmanager
from typing import Callable, Iterator

from .gotypes import Basic, GoType, Map, Named, Package, Pointer, Slice
from .loaderutil import non_vendor_path


class CodeWriter:
    """Collects lines and blocks of Go code."""

    def __init__(self) -> None:
        self._out = io.StringIO()

    def line(self, text: str) -> None:
        """Write one line."""
        self._out.write(text)
        self._out.write("\n")

    @contextmanager
    def if_(self, setup: str) -> Iterator[None]:
        """Wrap the body written inside the ``with`` in an if statement."""
        self.line(f"if {setup} {{")
        yield
        self.line("}")

    @contextmanager
    def for_(self, setup: str) -> Iterator[None]:
        """Wrap the body written inside the ``with`` in a for statement."""
        self.line(f"for {setup} {{")
        yield
        self.line("}")

    def if_else(self, setup: str, if_block: Callable[[], None],
                else_block: Callable[[], None]) -> None:
        """Write an if/else, calling each block function to fill its body."""
        self.line(f"if {setup} {{")
        if_block()
        self.line("} else {")
        else_block()
        self.line("}")

    def getvalue(self) -> str:
        """Everything written so far."""
        return self._out.getvalue()


def _split_path(path: str) -> tuple[str, str]:
    head, sep, tail = path.rpartition("/")
    return head + sep, tail


def _is_digit(ch: str) -> bool:
    return unicodedata.category(ch) == "Nd"


def _identifier_char(ch: str) -> str:
    if ch == "_" or _is_digit(ch) or unicodedata.category(ch).startswith("L"):
        return ch
    return "_"


def _go_quote(text: str) -> str:
    return json.dumps(text, ensure_ascii=False)


class ImportsList:
    """Tracks needed imports and gives each a unique alias."""

    def __init__(self, pkg: Package) -> None:
        self.pkg = pkg
        self._by_path: dict[str, str] = {}
        self._by_alias: dict[str, str] = {}

    def reserve(self, alias: str) -> None:
        """Keep ``alias`` from being given to any import."""
        self._by_alias[alias] = ""

    def need_import(self, import_path: str) -> str:
        """Mark ``import_path`` as needed and return the alias to use for it."""
        ind = import_path.rfind("/vendor/")
        if ind != -1:
            import_path = import_path[ind + len("/vendor/"):]

        if import_path in self._by_path:
            return self._by_path[import_path]

        rest, next_word = _split_path(import_path)
        alias = ""
        other, exists = "", True
        while exists and other != import_path:
            if not rest:
                # out of path parts and still clashing
                alias += "x"
            while next_word and _is_digit(next_word[0]):
                next_word = next_word[1:]
            next_word = "".join(_identifier_char(ch) for ch in next_word)
            alias = next_word + alias
            if rest:
                rest, next_word = _split_path(rest[:-1])
            exists = alias in self._by_alias
            other = self._by_alias.get(alias, "")

        self._by_path[import_path] = alias
        self._by_alias[alias] = import_path
        return alias

    def import_specs(self) -> list[str]:
        """Import specs sorted by path; aliases only where they differ from the name."""
        specs = []
        for path, alias in sorted(self._by_path.items()):
            imported = self.pkg.imports.get(path)
            if imported is not None and imported.name == alias:
                specs.append(_go_quote(path))
            else:
                specs.append(f"{alias} {_go_quote(path)}")
        return specs


def type_syntax(typ: GoType, base_pkg: Package, imports: ImportsList) -> str:
    """The Go syntax naming ``typ`` from inside ``base_pkg``, registering imports."""
    if isinstance(typ, Named):
        if typ.package is None or typ.package is base_pkg:
            return typ.name
        alias = imports.need_import(non_vendor_path(typ.package.path))
        return f"{alias}.{typ.name}"
    if isinstance(typ, Basic):
        return typ.name
    if isinstance(typ, Pointer):
        return "*" + type_syntax(typ.elem, base_pkg, imports)
    if isinstance(typ, Slice):
        return "[]" + type_syntax(typ.elem, base_pkg, imports)
    if isinstance(typ, Map):
        key = type_syntax(typ.key, base_pkg, imports)
        elem = type_syntax(typ.elem, base_pkg, imports)
        return f"map[{key}]{elem}"
    base_pkg.add_error(ValueError(f"name requested for invalid type {typ}"))
    return str(typ)