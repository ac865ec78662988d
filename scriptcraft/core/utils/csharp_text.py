"""Small C# text helpers shared by the generator and the parser."""

import re
import textwrap
from typing import Optional, Tuple

from ..config import get_config_value

_ESCAPE_RE = re.compile(r"\\(.)")
_UNESCAPES = {"n": "\n", "t": "\t", "r": "\r", "0": "\0"}

# Matches one regular (non-verbatim) C# string literal; group 1 is the raw content.
STRING_LITERAL = r'"((?:[^"\\]|\\.)*)"'


def indent(level: int) -> str:
    width = get_config_value("generator", "indent_width", default=4)
    return " " * (width * level)


def reindent(text: str, level: int) -> str:
    """Dedent a code fragment and re-indent it at ``level``, keeping relative indentation."""
    prefix = indent(level)
    lines = textwrap.dedent(text.expandtabs(4)).strip("\n").split("\n")
    return "\n".join(prefix + line if line.strip() else "" for line in lines)


def csharp_string(text: str) -> str:
    """Quote ``text`` as a C# string literal."""
    escaped = (
        text.replace("\\", "\\\\")
        .replace('"', '\\"')
        .replace("\n", "\\n")
        .replace("\t", "\\t")
    )
    return f'"{escaped}"'


def unescape_csharp_string(raw: str) -> str:
    """Inverse of ``csharp_string`` for the content between the quotes."""
    return _ESCAPE_RE.sub(lambda m: _UNESCAPES.get(m.group(1), m.group(1)), raw)


def format_number(value: float) -> str:
    """Render 0 as ``0`` and 0.5 as ``0.5`` (no trailing ``.0``)."""
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))


def parse_number(text: str):
    """Parse a C# numeric literal such as ``0.5f`` or ``100``; None if it is not one."""
    cleaned = text.strip().rstrip("fFdDmM")
    try:
        number = float(cleaned)
    except ValueError:
        return None
    return int(number) if number.is_integer() else number


_LEADING_ATTRIBUTES = re.compile(r"^(?:\[[^\]]*\]\s*)*")
_FIELD_MODIFIERS = re.compile(r"^(?:(?:public|private|protected|internal|static|readonly|const|volatile|new)\s+)*")
_FIELD_HEAD = re.compile(r"^(.+?)\s+(\w+)\s*(?:=(?![=>])|;)", re.DOTALL)


def parse_field_declaration(declaration: str) -> Optional[Tuple[str, str]]:
    """``(type, name)`` of a field declaration, or None if it is not one.

    Attribute, comment and preprocessor lines are ignored. The type comes
    back with whitespace removed, e.g. ``Dictionary<string,int>``.
    """
    lines = (line.strip() for line in declaration.split("\n"))
    code = " ".join(line for line in lines if line and not line.startswith(("//", "/*", "*", "#")))
    code = _FIELD_MODIFIERS.sub("", _LEADING_ATTRIBUTES.sub("", code))
    match = _FIELD_HEAD.match(code)
    if match is None:
        return None
    type_name = re.sub(r"\s+", "", match.group(1))
    if any(ch in type_name for ch in "{}()=;"):
        return None
    return type_name, match.group(2)
