"""Advisory C# syntax check using tree-sitter.

Used on generated text only; the round-trip parser never depends on it.
"""

import logging
from typing import List

import tree_sitter
import tree_sitter_c_sharp

logger = logging.getLogger(__name__)

_CSHARP_LANGUAGE = tree_sitter.Language(tree_sitter_c_sharp.language())

# Cap on reported problems per file
MAX_REPORTED_ERRORS = 20


def _collect_problems(node: tree_sitter.Node, problems: List[tree_sitter.Node]) -> None:
    if len(problems) >= MAX_REPORTED_ERRORS:
        return
    if node.is_error or node.is_missing:
        problems.append(node)
        return
    if not node.has_error:
        return
    for child in node.children:
        _collect_problems(child, problems)


def check_syntax(source: str) -> List[str]:
    """Return human-readable, line-numbered syntax problems (empty when clean)."""
    parser = tree_sitter.Parser(_CSHARP_LANGUAGE)
    tree = parser.parse(source.encode("utf-8"))
    if not tree.root_node.has_error:
        return []

    problems: List[tree_sitter.Node] = []
    _collect_problems(tree.root_node, problems)

    messages = []
    for node in problems:
        line = node.start_point[0] + 1
        column = node.start_point[1] + 1
        if node.is_missing:
            messages.append(f"Line {line}, column {column}: missing '{node.type}'")
        else:
            messages.append(f"Line {line}, column {column}: unexpected syntax")
    if not messages:
        messages.append("Tree-sitter reported parse errors in file")

    logger.info(f"Syntax check found {len(messages)} problem(s)")
    return messages
