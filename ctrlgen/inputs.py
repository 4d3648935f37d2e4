"""Rules for reading non-code artifacts such as header files."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import BinaryIO


class InputRule(ABC):
    """Describes how to open non-code artifacts for reading."""

    @abstractmethod
    def open_for_read(self, path: str) -> BinaryIO:
        """Open the artifact at ``path`` for binary reading."""


class InputFromFileSystem(InputRule):
    """Reads artifacts from the local filesystem."""

    def open_for_read(self, path: str) -> BinaryIO:
        return open(path, "rb")