"""Brace scanner for C# source lines.

Tracks string, verbatim-string, char-literal, line-comment and block-comment
state so that braces inside literals and comments never count toward
nesting depth.
"""

from dataclasses import dataclass
from typing import Iterator, List, Optional, Tuple

# Lexical states
_CODE = 0
_STRING = 1
_VERBATIM = 2
_CHAR = 3
_BLOCK_COMMENT = 4


@dataclass
class BalancedBlock:
    """A brace-delimited span of lines.

    ``start_line`` is where the scan began (e.g. a method signature), the
    opening brace sits at (``open_line``, ``open_col``) and the matching
    closing brace at (``end_line``, ``close_col``). ``text`` covers
    ``start_line`` through ``end_line`` inclusive.
    """
    text: str
    start_line: int
    open_line: int
    open_col: int
    end_line: int
    close_col: int

    def body(self, lines: List[str]) -> str:
        """Text strictly between the braces, keeping inner line indentation."""
        if self.open_line == self.end_line:
            return lines[self.open_line][self.open_col + 1:self.close_col].strip()

        parts: List[str] = []
        head = lines[self.open_line][self.open_col + 1:]
        if head.strip():
            parts.append(head.strip())
        parts.extend(lines[self.open_line + 1:self.end_line])
        tail = lines[self.end_line][:self.close_col]
        if tail.strip():
            parts.append(tail)
        return "\n".join(parts)


def code_chars(lines: List[str], from_line: int = 0) -> Iterator[Tuple[int, int, str]]:
    """Yield ``(line, column, char)`` for every character outside literals and comments."""
    state = _CODE
    for line_no in range(from_line, len(lines)):
        line = lines[line_no]
        col = 0
        length = len(line)
        while col < length:
            ch = line[col]
            nxt = line[col + 1] if col + 1 < length else ""

            if state == _BLOCK_COMMENT:
                if ch == "*" and nxt == "/":
                    state = _CODE
                    col += 1
            elif state == _STRING or state == _CHAR:
                if ch == "\\":
                    col += 1
                elif (ch == '"' and state == _STRING) or (ch == "'" and state == _CHAR):
                    state = _CODE
            elif state == _VERBATIM:
                if ch == '"':
                    if nxt == '"':
                        col += 1
                    else:
                        state = _CODE
            elif ch == "/" and nxt == "/":
                break
            elif ch == "/" and nxt == "*":
                state = _BLOCK_COMMENT
                col += 1
            elif ch == '"':
                prefix = line[max(0, col - 2):col]
                state = _VERBATIM if "@" in prefix else _STRING
            elif ch == "'":
                state = _CHAR
            else:
                yield line_no, col, ch
            col += 1

        # Regular strings and char literals cannot span lines.
        if state in (_STRING, _CHAR):
            state = _CODE


def find_balanced_block(lines: List[str], from_line: int) -> Optional[BalancedBlock]:
    """Locate the first brace block at or after ``from_line``.

    Returns None when no opening brace exists or the block never closes.
    """
    depth = 0
    open_pos: Optional[Tuple[int, int]] = None

    for line_no, col, ch in code_chars(lines, from_line):
        if ch == "{":
            if open_pos is None:
                open_pos = (line_no, col)
            depth += 1
        elif ch == "}" and open_pos is not None:
            depth -= 1
            if depth == 0:
                return BalancedBlock(
                    text="\n".join(lines[from_line:line_no + 1]),
                    start_line=from_line,
                    open_line=open_pos[0],
                    open_col=open_pos[1],
                    end_line=line_no,
                    close_col=col,
                )
    return None


def brace_delta(line: str) -> int:
    """Net brace depth change of a single line, ignoring literals and comments."""
    delta = 0
    for _, _, ch in code_chars([line]):
        if ch == "{":
            delta += 1
        elif ch == "}":
            delta -= 1
    return delta


def first_code_char(lines: List[str], from_line: int, targets: str) -> Optional[Tuple[int, int, str]]:
    """Position of the first code character among ``targets``, or None."""
    for line_no, col, ch in code_chars(lines, from_line):
        if ch in targets:
            return line_no, col, ch
    return None


def strip_line_comment(line: str) -> str:
    """``line`` without a trailing ``//`` comment (literal-aware)."""
    last = -1
    for _, col, _ in code_chars([line]):
        last = col
    cut = line.find("//", last + 1)
    return line if cut == -1 else line[:cut].rstrip()
