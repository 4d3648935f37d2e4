"""Helpers for package paths and struct field tags."""

from __future__ import annotations

import string
from typing import Optional


def non_vendor_path(raw_path: str) -> str:
    """Return the part of a package path after the last vendor directory."""
    return raw_path.split("/vendor/")[-1]


_SIMPLE_ESCAPES = {
    "a": "\a",
    "b": "\b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "v": "\v",
    "\\": "\\",
}
_HEX_WIDTHS = {"x": 2, "u": 4, "U": 8}
_OCTAL = "01234567"


def _unquote(literal: str) -> str:
    """Decode a quoted string literal, raising ValueError when malformed."""
    if len(literal) < 2 or literal[0] != literal[-1]:
        raise ValueError(f"invalid quoted literal: {literal!r}")
    quote = literal[0]
    body = literal[1:-1]
    if quote == "`":
        if "`" in body:
            raise ValueError("backquote inside raw literal")
        return body.replace("\r", "")
    if quote not in "\"'":
        raise ValueError(f"invalid quoted literal: {literal!r}")
    if "\n" in body:
        raise ValueError("newline inside quoted literal")

    out = []
    i = 0
    while i < len(body):
        ch = body[i]
        if ch == quote:
            raise ValueError("unescaped quote inside literal")
        if ch != "\\":
            out.append(ch)
            i += 1
            continue
        i += 1
        if i >= len(body):
            raise ValueError("dangling escape")
        esc = body[i]
        i += 1
        if esc in _SIMPLE_ESCAPES:
            out.append(_SIMPLE_ESCAPES[esc])
        elif esc == quote:
            out.append(esc)
        elif esc in _HEX_WIDTHS:
            width = _HEX_WIDTHS[esc]
            digits = body[i:i + width]
            if len(digits) != width or any(d not in string.hexdigits for d in digits):
                raise ValueError(f"invalid \\{esc} escape")
            i += width
            code = int(digits, 16)
            if esc != "x" and (code > 0x10FFFF or 0xD800 <= code <= 0xDFFF):
                raise ValueError("invalid unicode escape")
            out.append(chr(code))
        elif esc in _OCTAL:
            digits = esc + body[i:i + 2]
            if len(digits) != 3 or any(d not in _OCTAL for d in digits):
                raise ValueError("invalid octal escape")
            i += 2
            code = int(digits, 8)
            if code > 0xFF:
                raise ValueError("octal escape out of range")
            out.append(chr(code))
        else:
            raise ValueError(f"unknown escape \\{esc}")

    result = "".join(out)
    if quote == "'" and len(result) != 1:
        raise ValueError("character literal must hold one character")
    return result


class StructTag(str):
    """A struct field tag of the form ``key:"value" key2:"value2"``."""

    def lookup(self, key: str) -> Optional[str]:
        """Return the value stored under ``key``, or None if absent or malformed."""
        tag = str(self)
        while tag:
            tag = tag.lstrip(" ")
            if not tag:
                break
            i = 0
            while i < len(tag) and tag[i] > " " and tag[i] not in ':"\x7f':
                i += 1
            if i == 0 or i + 1 >= len(tag) or tag[i] != ":" or tag[i + 1] != '"':
                break
            name = tag[:i]
            tag = tag[i + 1:]

            i = 1
            while i < len(tag) and tag[i] != '"':
                if tag[i] == "\\":
                    i += 1
                i += 1
            if i >= len(tag):
                break
            quoted = tag[:i + 1]
            tag = tag[i + 1:]

            if name == key:
                try:
                    return _unquote(quoted)
                except ValueError:
                    break
        return None

    def get(self, key: str) -> str:
        """Return the value stored under ``key``, or an empty string."""
        value = self.lookup(key)
        return "" if value is None else value


def parse_ast_tag(tag: Optional[str]) -> StructTag:
    """Parse a raw tag literal as written in source into a StructTag."""
    if tag is None:
        return StructTag("")
    try:
        return StructTag(_unquote(tag))
    except ValueError:
        return StructTag("")