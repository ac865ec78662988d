"""Element tree recovery from a GUI method body.

Each line is tried, in priority order, as:
1. a container opening call (Begin*/End* pair, Foldout guard, Toolbar switch)
2. an ``if (GUILayout.Button(...))`` click block
3. one of the single-statement call shapes in ``patterns.CALL_PATTERNS``
4. the start of any other statement, captured verbatim as an opaque element
5. a leftover line, kept verbatim as its own opaque element

Boilerplate lines are dropped before any of that.
"""

import logging
import re
import textwrap
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

from ..config import get_config_value
from ..model.factory import make_element
from ..model.models import ActionType, ElementType, UIElement
from ..utils.csharp_text import STRING_LITERAL, unescape_csharp_string
from .patterns import apply_style, is_style_expression, match_call, string_literals
from .scanner import find_balanced_block, first_code_char, strip_line_comment

logger = logging.getLogger(__name__)

DEFAULT_MAX_OPAQUE_RATIO = 0.5
DEFAULT_SMALL_BODY_MAX_ELEMENTS = 3

OPAQUE_LABEL = "Custom Code"

BOILERPLATE_PATTERNS = [
    re.compile(p)
    for p in (
        # Property sync
        r"^serializedObject\.(?:Update\w*|ApplyModifiedProperties)\s*\(\s*\)\s*;$",
        r"^EditorGUI\.(?:BeginProperty|EndProperty)\s*\(.*\)\s*;$",
        # Base-class delegation
        r"^base\.\w+\s*\(.*\)\s*;$",
        # Repaint / undo / dirty
        r"^Repaint\s*\(\s*\)\s*;$",
        r"^Undo\.RecordObject\s*\(.*\)\s*;$",
        r"^EditorUtility\.SetDirty\s*\(.*\)\s*;$",
        # Style setup
        r"^var\s+\w+Style\s*=\s*new\s+GUIStyle\s*\(",
        r"^\w+Style\.\w+\s*=",
        r"^EditorGUI\.indentLevel\s*(?:\+\+|--|[+-]=\s*\d+)\s*;$",
        # Bare braces
        r"^[{}]$",
    )
]

_STATEMENT_START = re.compile(r"^[\w.]+\s*(?:<[^>]*>)?\s*\(")
_CONTROL_KEYWORD = re.compile(
    r"^(?:if|else|for|foreach|while|do|switch|using|try|lock|var|return|break|continue)\b"
)
_CONTINUATION = re.compile(r"^(?:else|catch|finally)\b")

_BUTTON_RE = re.compile(
    rf"^if\s*\(\s*(?:Editor)?GUILayout\.Button\s*\(\s*{STRING_LITERAL}\s*(?:,\s*(.+?))?\s*\)\s*\)(.*)$"
)
_FOLDOUT_RE = re.compile(
    rf"^(\w+)\s*=\s*EditorGUI(?:Layout)?\.Foldout\s*\(\s*\1\s*,\s*{STRING_LITERAL}"
    r"\s*(?:,\s*(?:true|false)\s*)?\)\s*;$"
)
_TOOLBAR_RE = re.compile(
    r"^(\w+)\s*=\s*GUILayout\.Toolbar\s*\(\s*\1\s*,\s*new\s*(?:string\s*)?(?:\[\s*\])?\s*\{(.*)\}\s*\)\s*;$"
)
_CASE_LINE_RE = re.compile(r"^(?:case\s+\d+\s*:|default\s*:|break\s*;)")
_PLAIN_LABEL_RE = re.compile(rf"^EditorGUILayout\.LabelField\s*\(\s*{STRING_LITERAL}\s*\)\s*;$")


@dataclass
class QualityGate:
    """Decides whether a recovered tree is worth keeping over the raw body.

    The tree is discarded when more than ``max_opaque_ratio`` of its root
    elements are opaque, or when it is small (``small_body_max_elements``
    roots or fewer) and any root is opaque.
    """
    max_opaque_ratio: float = DEFAULT_MAX_OPAQUE_RATIO
    small_body_max_elements: int = DEFAULT_SMALL_BODY_MAX_ELEMENTS

    @classmethod
    def from_config(cls) -> "QualityGate":
        return cls(
            max_opaque_ratio=float(get_config_value(
                "parser", "quality_gate", "max_opaque_ratio", default=DEFAULT_MAX_OPAQUE_RATIO
            )),
            small_body_max_elements=int(get_config_value(
                "parser", "quality_gate", "small_body_max_elements", default=DEFAULT_SMALL_BODY_MAX_ELEMENTS
            )),
        )

    def should_fall_back(self, elements: List[UIElement]) -> bool:
        total = len(elements)
        if total == 0:
            return False
        opaque = sum(1 for e in elements if e.opaque)
        if opaque / total > self.max_opaque_ratio:
            return True
        return total <= self.small_body_max_elements and opaque > 0


def make_opaque(code: str) -> UIElement:
    """Placeholder element holding unrecognised code verbatim."""
    element = make_element(ElementType.BUTTON, OPAQUE_LABEL)
    element.action = ActionType.CUSTOM_CODE
    element.action_param = code
    element.opaque = True
    return element


def is_boilerplate(line: str) -> bool:
    return any(p.match(line) for p in BOILERPLATE_PATTERNS)


def _dedent(text: str) -> str:
    return textwrap.dedent(text.expandtabs(4)).strip("\n")


def _opens_brace(line: str) -> bool:
    return first_code_char([line], 0, "{") is not None


@dataclass(frozen=True)
class ContainerPattern:
    """A Begin*/End* call pair delimiting a layout container."""
    element_type: ElementType
    begin: re.Pattern
    nest_begin: re.Pattern
    nest_end: re.Pattern
    configure: Optional[Callable[[UIElement, re.Match], bool]] = None


def _configure_box(element: UIElement, match: re.Match) -> bool:
    return apply_style(element, match.group(1), '"box"')


def _configure_disabled(element: UIElement, match: re.Match) -> bool:
    element.disable_condition = match.group(1).strip()
    return True


_VERTICAL_BEGIN = re.compile(r"(?:Editor)?GUILayout\.BeginVertical\b")
_VERTICAL_END = re.compile(r"(?:Editor)?GUILayout\.EndVertical\b")

CONTAINER_PATTERNS: List[ContainerPattern] = [
    ContainerPattern(
        ElementType.HORIZONTAL_GROUP,
        re.compile(r"^(?:Editor)?GUILayout\.BeginHorizontal\s*\("),
        re.compile(r"(?:Editor)?GUILayout\.BeginHorizontal\b"),
        re.compile(r"(?:Editor)?GUILayout\.EndHorizontal\b"),
    ),
    ContainerPattern(
        ElementType.BOX,
        re.compile(r"^(?:Editor)?GUILayout\.BeginVertical\s*\(\s*(.+?)\s*\)\s*;$"),
        _VERTICAL_BEGIN,
        _VERTICAL_END,
        _configure_box,
    ),
    ContainerPattern(
        ElementType.VERTICAL_GROUP,
        re.compile(r"^(?:Editor)?GUILayout\.BeginVertical\s*\("),
        _VERTICAL_BEGIN,
        _VERTICAL_END,
    ),
    ContainerPattern(
        ElementType.SCROLL_VIEW,
        re.compile(r"^(?:\w+\s*=\s*)?(?:Editor)?GUILayout\.BeginScrollView\s*\("),
        re.compile(r"(?:Editor)?GUILayout\.BeginScrollView\b"),
        re.compile(r"(?:Editor)?GUILayout\.EndScrollView\b"),
    ),
    ContainerPattern(
        ElementType.DISABLED_GROUP,
        re.compile(r"^EditorGUI\.BeginDisabledGroup\s*\((.*)\)\s*;$"),
        re.compile(r"EditorGUI\.BeginDisabledGroup\b"),
        re.compile(r"EditorGUI\.EndDisabledGroup\b"),
        _configure_disabled,
    ),
]

_CONTAINER_LABELS = {
    ElementType.HORIZONTAL_GROUP: "Horizontal",
    ElementType.VERTICAL_GROUP: "Vertical",
    ElementType.SCROLL_VIEW: "Scroll View",
    ElementType.DISABLED_GROUP: "Disabled Group",
    ElementType.BOX: "Box",
}


class _Recoverer:
    """Line cursor over one method body (or container interior)."""

    def __init__(self, text: str, warnings: List[str]):
        self.lines = text.split("\n")
        self.code = [strip_line_comment(line).strip() for line in self.lines]
        self.warnings = warnings

    # --- cursor helpers -----------------------------------------------------

    def next_code_line(self, index: int) -> Optional[int]:
        for j in range(index + 1, len(self.code)):
            if self.code[j]:
                return j
        return None

    def verbatim(self, start: int, end: int) -> str:
        return _dedent("\n".join(self.lines[start:end + 1]))

    def statement_end(self, index: int) -> int:
        """Last line of the statement starting at ``index``.

        Brace blocks are taken whole; other statements run until a line ends
        with ``;``. Trailing ``else``/``catch``/``finally`` parts and the
        ``while`` of a ``do`` loop are absorbed.
        """
        line = self.code[index]
        following = self.next_code_line(index)
        end = index

        if _opens_brace(line) or (following is not None and self.code[following].startswith("{")):
            block = find_balanced_block(self.lines, index)
            if block is None:
                return index
            end = block.end_line
        else:
            while end < len(self.code) - 1 and not self.code[end].endswith(";"):
                if end > index and _opens_brace(self.code[end]):
                    block = find_balanced_block(self.lines, end)
                    if block is None:
                        break
                    end = block.end_line
                    continue
                end += 1

        after = self.next_code_line(end)
        if after is not None:
            if _CONTINUATION.match(self.code[after]):
                return self.statement_end(after)
            if line.startswith("do") and self.code[after].startswith("while"):
                return self.statement_end(after)
        return end

    # --- recognisers --------------------------------------------------------

    def find_matching_end(self, start: int, pattern: ContainerPattern) -> Optional[int]:
        depth = 1
        for j in range(start + 1, len(self.code)):
            if pattern.nest_begin.search(self.code[j]):
                depth += 1
            if pattern.nest_end.search(self.code[j]):
                depth -= 1
                if depth == 0:
                    return j
        return None

    def children_of(self, text: str) -> List[UIElement]:
        return _Recoverer(text, self.warnings).recover()

    def try_container(self, index: int) -> Optional[Tuple[UIElement, int]]:
        line = self.code[index]

        for pattern in CONTAINER_PATTERNS:
            match = pattern.begin.match(line)
            if match is None:
                continue
            if pattern.element_type == ElementType.BOX and not is_style_expression(match.group(1)):
                continue
            element = make_element(pattern.element_type, _CONTAINER_LABELS[pattern.element_type])
            if pattern.configure and not pattern.configure(element, match):
                continue

            end = self.find_matching_end(index, pattern)
            if end is None:
                message = f"Missing close call for layout block: {line}"
                logger.warning(message)
                self.warnings.append(message)
                return element, index + 1

            element.children = self.children_of("\n".join(self.lines[index + 1:end]))
            return element, end + 1

        match = _FOLDOUT_RE.match(line)
        if match:
            var = match.group(1)
            element = make_element(ElementType.FOLDOUT, unescape_csharp_string(match.group(2)), var)
            guard = self.next_code_line(index)
            if guard is not None and re.match(rf"^if\s*\(\s*{re.escape(var)}\s*\)", self.code[guard]):
                block = find_balanced_block(self.lines, guard)
                if block is not None:
                    element.children = self.children_of(block.body(self.lines))
                    return element, block.end_line + 1
            return element, index + 1

        match = _TOOLBAR_RE.match(line)
        if match:
            var = match.group(1)
            element = make_element(ElementType.TAB_GROUP, var, var)
            element.tabs = string_literals(match.group(2))
            switch = self.next_code_line(index)
            if switch is not None and re.match(rf"^switch\s*\(\s*{re.escape(var)}\s*\)", self.code[switch]):
                block = find_balanced_block(self.lines, switch)
                if block is not None and self._is_empty_switch(block.body(self.lines)):
                    return element, block.end_line + 1
            return element, index + 1

        return None

    @staticmethod
    def _is_empty_switch(body: str) -> bool:
        for raw in body.split("\n"):
            line = strip_line_comment(raw).strip()
            if line and not _CASE_LINE_RE.match(line):
                return False
        return True

    def try_button(self, index: int) -> Optional[Tuple[UIElement, int]]:
        match = _BUTTON_RE.match(self.code[index])
        if match is None:
            return None

        element = make_element(ElementType.BUTTON, unescape_csharp_string(match.group(1)))
        if not apply_style(element, match.group(2), '"button"'):
            return None
        element.action = ActionType.CUSTOM_CODE

        rest = match.group(3).strip()
        following = self.next_code_line(index)
        if rest.startswith("{") or (not rest and following is not None and self.code[following].startswith("{")):
            block = find_balanced_block(self.lines, index)
            if block is None:
                return None
            element.action_param = _dedent(block.body(self.lines))
            return element, block.end_line + 1
        if rest:
            element.action_param = rest
            return element, index + 1
        if following is not None:
            end = self.statement_end(following)
            element.action_param = self.verbatim(following, end)
            return element, end + 1
        element.action_param = ""
        return element, index + 1

    def try_labeled_text_area(self, index: int) -> Optional[Tuple[UIElement, int]]:
        match = _PLAIN_LABEL_RE.match(self.code[index])
        following = self.next_code_line(index)
        if match is None or following is None:
            return None
        element = match_call(self.code[following])
        if element is None or element.type != ElementType.TEXT_AREA:
            return None
        element.label = unescape_csharp_string(match.group(1))
        return element, following + 1

    def skip_block_comment(self, start: int) -> int:
        """Index to resume at after the block comment opened on line ``start``.

        Code following the closing ``*/`` is left on that line to be read next.
        """
        offset = self.lines[start].find("/*") + 2
        for j in range(start, len(self.lines)):
            close = self.lines[j].find("*/", offset if j == start else 0)
            if close < 0:
                continue
            rest = self.lines[j][close + 2:]
            if not rest.strip():
                return j + 1
            self.lines[j] = rest
            self.code[j] = strip_line_comment(rest).strip()
            return j
        return len(self.lines)

    # --- main loop ----------------------------------------------------------

    def recover(self) -> List[UIElement]:
        elements: List[UIElement] = []
        i = 0
        while i < len(self.code):
            line = self.code[i]

            if not line:
                i += 1
                continue

            if line.startswith("/*"):
                i = self.skip_block_comment(i)
                continue

            if is_boilerplate(line):
                logger.debug(f"Skipping boilerplate: {line}")
                if line.endswith(";") or line in ("{", "}"):
                    i += 1
                else:
                    i = self.statement_end(i) + 1
                continue

            result = self.try_container(i) or self.try_button(i) or self.try_labeled_text_area(i)
            if result is not None:
                element, i = result
                elements.append(element)
                continue

            element = match_call(line)
            if element is not None:
                logger.debug(f"Recognised {element.type.value}: {line}")
                elements.append(element)
                i += 1
                continue

            if _STATEMENT_START.match(line) or _CONTROL_KEYWORD.match(line):
                end = self.statement_end(i)
                elements.append(make_opaque(self.verbatim(i, end)))
                i = end + 1
                continue

            logger.debug(f"Unrecognised line kept verbatim: {line}")
            elements.append(make_opaque(self.lines[i].strip()))
            i += 1

        return elements


def recover_elements(body: str, warnings: Optional[List[str]] = None) -> List[UIElement]:
    """Rebuild the element tree from a GUI method body.

    Args:
        body: Method body text without the enclosing braces
        warnings: Optional list that receives human-readable warnings

    Returns:
        Root elements in source order; unrecognised code becomes opaque elements
    """
    if warnings is None:
        warnings = []
    return _Recoverer(body, warnings).recover()
