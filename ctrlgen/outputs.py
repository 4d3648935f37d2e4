"""Rules deciding where generated artifacts are written."""

from __future__ import annotations

import os
import sys
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, BinaryIO, Mapping, Optional, Union

from .gotypes import Package


class _NopCloser:
    """Forwards writes to a stream but never closes it."""

    def __init__(self, target: Any) -> None:
        self._target = target

    def write(self, data: bytes) -> int:
        written = self._target.write(data)
        return len(data) if written is None else written

    def flush(self) -> None:
        flush = getattr(self._target, "flush", None)
        if flush is not None:
            flush()

    def close(self) -> None:
        self.flush()

    def __enter__(self) -> _NopCloser:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()


class _Discard:
    """A sink that accepts and drops everything."""

    def write(self, data: bytes) -> int:
        return len(data)

    def flush(self) -> None:
        pass


Writable = Union[BinaryIO, _NopCloser]


class OutputRule(ABC):
    """Describes how to open artifacts for writing."""

    @abstractmethod
    def open(self, pkg: Optional[Package], path: str) -> Writable:
        """Open ``path`` for binary writing.

        A package means the artifact belongs to that package (generated
        code); None means it is configuration or similar.
        """


@dataclass(frozen=True)
class OutputToNothing(OutputRule):
    """Discards all output."""

    def open(self, pkg: Optional[Package], path: str) -> Writable:
        return _NopCloser(_Discard())


@dataclass(frozen=True)
class OutputToDirectory(OutputRule):
    """Writes every artifact into one directory, creating it if needed."""

    path: str

    def open(self, pkg: Optional[Package], path: str) -> Writable:
        os.makedirs(self.path, exist_ok=True)
        return open(os.path.join(self.path, path), "wb")


@dataclass(frozen=True)
class OutputToStdout(OutputRule):
    """Writes everything to standard output with no separation."""

    def open(self, pkg: Optional[Package], path: str) -> Writable:
        return _NopCloser(getattr(sys.stdout, "buffer", sys.stdout))


@dataclass(frozen=True)
class OutputArtifacts(OutputRule):
    """Writes config to one directory and code next to its package.

    Code goes to ``code`` when it is set, otherwise to the directory of the
    package's first source file.
    """

    config: OutputToDirectory
    code: Optional[OutputToDirectory] = None

    def open(self, pkg: Optional[Package], path: str) -> Writable:
        if pkg is None:
            return self.config.open(pkg, path)
        if self.code is not None and self.code.path:
            return self.code.open(pkg, path)
        if not pkg.compiled_go_files:
            raise ValueError("cannot output to a package with no path on disk")
        out_dir = os.path.dirname(pkg.compiled_go_files[0])
        return open(os.path.join(out_dir, path), "wb")


@dataclass
class OutputRules:
    """An output rule per generator, with a default for the rest.

    Generators are matched by identity, so distinct instances that compare
    equal still get their own rules. Later entries win over earlier ones.
    """

    default: Optional[OutputRule] = None
    by_generator: list[tuple[Any, OutputRule]] = field(default_factory=list)

    def for_generator(self, gen: Any) -> Optional[OutputRule]:
        """The rule to use for ``gen``."""
        for candidate, rule in reversed(self.by_generator):
            if candidate is gen:
                return rule
        return self.default


def directory_per_generator(base: str, generators: Mapping[str, Any]) -> OutputRules:
    """Rules sending config of each generator to ``base/<name>``."""
    return OutputRules(
        default=OutputArtifacts(config=OutputToDirectory(base)),
        by_generator=[
            (gen, OutputArtifacts(config=OutputToDirectory(os.path.join(base, name))))
            for name, gen in generators.items()
        ],
    )