"""Generation of DeepCopy, DeepCopyInto and DeepCopyObject for a package's types."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Optional

from .codewriter import CodeWriter, ImportsList
from .context import GenerationContext
from .copymethods import CopyMethodMaker
from .copyrules import (
    ENABLE_MARKER,
    LEGACY_ENABLE_MARKER,
    enabled_on_type,
    should_be_copied,
)
from .gotypes import Package

OUTPUT_FILE = "zz_generated.deepcopy.go"


def enabled_on_package(pkg: Package) -> bool:
    """Whether deepcopy generation is switched on for the whole package."""
    marker: Any = pkg.marker(ENABLE_MARKER)
    if marker is not None:
        return bool(marker)
    legacy: Any = pkg.marker(LEGACY_ENABLE_MARKER)
    if legacy is not None:
        return str(legacy).split(",")[0] == "package"
    return False


def render_header(package_name: str, import_specs: Iterable[str], header_text: str) -> str:
    """The build tag, header, package clause and import block of the output file."""
    # the blank line after the build tag keeps it apart from the comments
    return (
        "// +build !ignore_autogenerated\n"
        "\n"
        f"{header_text}\n"
        "\n"
        "// Code generated by controller-gen. DO NOT EDIT.\n"
        "\n"
        f"package {package_name}\n"
        "\n"
        "import (\n"
        + "\n".join(import_specs)
        + "\n)\n\n"
    )


def render_methods(by_type: Mapping[str, str]) -> str:
    """The generated methods of every type, in type-name order."""
    return "".join(by_type[name] for name in sorted(by_type))


_INLINE_BLOCK = re.compile(r"^(?P<head>.*\S) \{ (?P<body>.+) \}$")


def _split_statement(text: str) -> list[str]:
    if text.startswith("{") and len(text) > 1:
        return ["{"] + _split_statement(text[1:].strip())
    match = _INLINE_BLOCK.match(text)
    if match:
        return [match["head"] + " {", match["body"], "}"]
    return [text]


def _balance(text: str) -> int:
    return text.count("{") + text.count("(") - text.count("}") - text.count(")")


def _format_source(source: str) -> Optional[str]:
    """Re-indent generated code by its block structure.

    Returns None when the blocks do not balance.
    """
    lines: list[str] = []
    depth = 0
    in_block_comment = False
    for raw in source.split("\n"):
        text = raw.strip()
        if in_block_comment:
            lines.append(raw.rstrip())
            if "*/" in text:
                in_block_comment = False
            continue
        if text.startswith("/*"):
            lines.append("\t" * depth + text)
            if "*/" not in text[2:]:
                in_block_comment = True
            continue
        if not text:
            lines.append("")
            continue
        if text.startswith("//"):
            lines.append("\t" * depth + text)
            continue
        for stmt in _split_statement(text):
            closes_first = stmt[0] in "})"
            if closes_first:
                depth -= 1
            if depth < 0:
                return None
            lines.append("\t" * depth + stmt)
            depth += _balance(stmt) + (1 if closes_first else 0)
    if depth != 0 or in_block_comment:
        return None

    collapsed: list[str] = []
    for text in lines:
        if not text and (not collapsed or not collapsed[-1]):
            continue
        collapsed.append(text)
    return "\n".join(collapsed).rstrip("\n") + "\n"


@dataclass
class ObjectGenCtx:
    """Common settings for generating deepcopy code for packages."""

    header_text: str = ""

    def generate_for_package(self, root: Package) -> Optional[str]:
        """The generated source for ``root``, or None if nothing is generated.

        Problems are recorded as errors on the package. If the result cannot
        be formatted, the unformatted source is returned for inspection.
        """
        all_types = enabled_on_package(root)

        imports = ImportsList(root)
        # keep the package's own name from being used as an import alias
        imports.reserve(root.name)

        by_type: dict[str, str] = {}
        for info in root.types:
            if not enabled_on_type(all_types, info):
                continue
            if not should_be_copied(root, info.name, info.type):
                continue
            writer = CodeWriter()
            CopyMethodMaker(root, imports, writer).generate_methods_for(info)
            content = writer.getvalue()
            if content:
                by_type[info.name] = content

        if not by_type:
            return None

        source = render_header(root.name, imports.import_specs(), self.header_text)
        source += render_methods(by_type)

        formatted = _format_source(source)
        if formatted is None:
            root.add_error(ValueError("generated source could not be formatted"))
            return source
        return formatted


def _write_out(ctx: GenerationContext, root: Package, content: str) -> None:
    data = content.encode("utf-8")
    try:
        with ctx.open(root, OUTPUT_FILE) as out:
            written = out.write(data)
    except (OSError, ValueError) as err:
        root.add_error(err)
        return
    if written is not None and written < len(data):
        root.add_error(OSError("short write"))


@dataclass
class Generator:
    """Generates DeepCopy, DeepCopyInto and DeepCopyObject implementations.

    ``header_file`` is prepended to each output file, with " YEAR" in it
    replaced by " " followed by ``year``.
    """

    header_file: str = ""
    year: str = ""

    def generate(self, ctx: GenerationContext) -> None:
        """Write a generated file for every root package that needs one."""
        header_text = ""
        if self.header_file:
            header_text = ctx.read_file(self.header_file).decode("utf-8")
        header_text = header_text.replace(" YEAR", " " + self.year)

        gen_ctx = ObjectGenCtx(header_text=header_text)
        for root in ctx.roots:
            content = gen_ctx.generate_for_package(root)
            if content is None:
                continue
            _write_out(ctx, root, content)