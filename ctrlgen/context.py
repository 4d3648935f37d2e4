"""Shared generation context and the runtime that drives generators."""

from __future__ import annotations

import dataclasses
import sys
from dataclasses import dataclass, field
from typing import Any, BinaryIO, Iterable, Iterator, Optional

import yaml

from .gotypes import ErrorKind, Package
from .inputs import InputFromFileSystem, InputRule
from .outputs import OutputRule, OutputRules, OutputToNothing, Writable


@dataclass
class GenerationContext:
    """What every generator needs: root packages and I/O rules."""

    roots: list[Package] = field(default_factory=list)
    output_rule: Optional[OutputRule] = field(default_factory=OutputToNothing)
    input_rule: InputRule = field(default_factory=InputFromFileSystem)

    def open(self, pkg: Optional[Package], path: str) -> Writable:
        """Open an artifact for writing through the output rule."""
        if self.output_rule is None:
            raise ValueError("no output rule configured")
        return self.output_rule.open(pkg, path)

    def open_for_read(self, path: str) -> BinaryIO:
        """Open a non-code artifact for reading through the input rule."""
        return self.input_rule.open_for_read(path)

    def write_yaml(self, item_path: str, *args: Any) -> None:
        """Write each object as a YAML document, each preceded by ``---``."""
        with self.open(None, item_path) as out:
            for obj in args:
                content = yaml.safe_dump(obj, default_flow_style=False, sort_keys=True)
                data = b"\n---\n" + content.encode("utf-8")
                written = out.write(data)
                if written is not None and written < len(data):
                    raise OSError("short write")

    def read_file(self, path: str) -> bytes:
        """Read a whole non-code artifact."""
        with self.open_for_read(path) as src:
            return src.read()


def _visit(pkgs: Iterable[Package], seen: set[int]) -> Iterator[Package]:
    for pkg in pkgs:
        if id(pkg) in seen:
            continue
        seen.add(id(pkg))
        yield from _visit((pkg.imports[k] for k in sorted(pkg.imports)), seen)
        yield pkg


def _print_errors(pkgs: Iterable[Package], *skip: ErrorKind) -> bool:
    had_errors = False
    for pkg in _visit(pkgs, set()):
        for err in pkg.errors:
            if err.kind in skip:
                continue
            had_errors = True
            print(err, file=sys.stderr)
    return had_errors


@dataclass
class Runtime:
    """Runs generators against shared packages with per-generator output."""

    generators: list[Any] = field(default_factory=list)
    context: GenerationContext = field(default_factory=GenerationContext)
    output_rules: OutputRules = field(
        default_factory=lambda: OutputRules(default=OutputToNothing()))

    def run(self) -> bool:
        """Run every generator; return True if any errors were reported.

        Type errors on packages are skipped, since partial type checking
        commonly produces them.
        """
        if not self.generators:
            print("no generators to run", file=sys.stderr)
            return True

        for gen in self.generators:
            ctx = dataclasses.replace(
                self.context, output_rule=self.output_rules.for_generator(gen))
            try:
                gen.generate(ctx)
            except Exception as err:
                print(err, file=sys.stderr)

        return _print_errors(self.context.roots, ErrorKind.TYPE)