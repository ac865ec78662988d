"""Structural extraction of a C# editor script.

Pulls imports, class kind, settings, preserved members and outer code out of
source text. Everything outside the GUI method body is kept as text; only
the GUI body is handed on to the element tree recoverer.
"""

import logging
import re
import textwrap
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from ..model.factory import create_default_settings
from ..model.models import ClassKind, ProjectSettings, SettingsScope
from .scanner import BalancedBlock, brace_delta, code_chars, find_balanced_block, strip_line_comment

logger = logging.getLogger(__name__)

LIFECYCLE_METHOD_NAMES = frozenset({
    "OnEnable", "OnDisable", "OnDestroy", "OnFocus", "OnLostFocus",
    "Awake", "Start", "Update", "LateUpdate", "FixedUpdate",
    "OnValidate", "Reset", "OnDrawGizmos", "OnDrawGizmosSelected",
    "OnSelectionChange", "OnHierarchyChange", "OnProjectChange",
    "OnInspectorUpdate", "OnSceneGUI",
})

# Name of the GUI-producing method per class kind. Kinds without an entry
# have no GUI method, so an OnGUI there is an ordinary lifecycle hook.
GUI_METHOD_NAMES: Dict[ClassKind, str] = {
    ClassKind.EDITOR_WINDOW: "OnGUI",
    ClassKind.CUSTOM_EDITOR: "OnInspectorGUI",
    ClassKind.SETTINGS_PROVIDER: "OnGUI",
    ClassKind.PROPERTY_DRAWER: "OnGUI",
}

BASE_TYPES: Dict[ClassKind, str] = {
    ClassKind.EDITOR_WINDOW: "EditorWindow",
    ClassKind.CUSTOM_EDITOR: "Editor",
    ClassKind.MONO_BEHAVIOUR: "MonoBehaviour",
    ClassKind.SCRIPTABLE_OBJECT: "ScriptableObject",
    ClassKind.SETTINGS_PROVIDER: "SettingsProvider",
    ClassKind.PROPERTY_DRAWER: "PropertyDrawer",
}
KNOWN_BASE_TYPES = frozenset(BASE_TYPES.values()) | {"AssetPostprocessor"}

# Optional namespace qualifier on Unity type and attribute names
UNITY_NAMESPACE = r"(?:Unity(?:Editor|Engine)\.)?"
_SETTINGS_PROVIDER_ATTRIBUTE = re.compile(rf"\[\s*{UNITY_NAMESPACE}SettingsProvider\s*\]")

# Class kind detection, highest priority first
KIND_RULES: List[Tuple[ClassKind, List[re.Pattern]]] = [
    (ClassKind.EDITOR_WINDOW, [re.compile(rf":\s*{UNITY_NAMESPACE}EditorWindow\b")]),
    (
        ClassKind.CUSTOM_EDITOR,
        [re.compile(rf"\[\s*{UNITY_NAMESPACE}CustomEditor\s*\("), re.compile(rf":\s*{UNITY_NAMESPACE}Editor\b")],
    ),
    (ClassKind.MONO_BEHAVIOUR, [re.compile(rf":\s*{UNITY_NAMESPACE}MonoBehaviour\b")]),
    (ClassKind.SCRIPTABLE_OBJECT, [re.compile(rf":\s*{UNITY_NAMESPACE}ScriptableObject\b")]),
    (
        ClassKind.SETTINGS_PROVIDER,
        [
            _SETTINGS_PROVIDER_ATTRIBUTE,
            re.compile(rf":\s*{UNITY_NAMESPACE}SettingsProvider\b"),
        ],
    ),
    (ClassKind.PROPERTY_DRAWER, [re.compile(rf":\s*{UNITY_NAMESPACE}PropertyDrawer\b")]),
]

# Class attributes each template writes itself; they are not preserved verbatim.
SYNTHESIZED_ATTRIBUTES: Dict[ClassKind, Tuple[str, ...]] = {
    ClassKind.EDITOR_WINDOW: (),
    ClassKind.CUSTOM_EDITOR: ("CustomEditor",),
    ClassKind.MONO_BEHAVIOUR: ("RequireComponent", "HelpURL"),
    ClassKind.SCRIPTABLE_OBJECT: ("CreateAssetMenu",),
    ClassKind.SETTINGS_PROVIDER: (),
    ClassKind.PROPERTY_DRAWER: ("CustomPropertyDrawer",),
}

OUTER_CODE_MARKER = "// === Preserved outer code ==="
_GENERATED_MARKERS = (
    OUTER_CODE_MARKER,
    "// === Preserved field declarations ===",
    "// === Preserved inner types ===",
)

_MODIFIERS = r"(?:(?:public|private|protected|internal|static|sealed|abstract|partial|readonly|unsafe|new)\s+)*"
_TYPE_HEADER = re.compile(rf"^{_MODIFIERS}(class|struct|enum|interface|record)\s+(\w+)")
_CLASS_HEADER = re.compile(rf"^{_MODIFIERS}class\s+(\w+)(?:\s*<[^>]*>)?\s*(?::\s*([^{{]+))?")
_METHOD_SIGNATURE = re.compile(
    r"^(?:(?:public|private|protected|internal|static|override|virtual|abstract|sealed|new|async|extern|unsafe|partial)\s+)*"
    r"(?:[\w<>\[\],.?]+\s+)*?(\w+)\s*(?:<[^>]*>)?\s*\("
)
_NOT_METHOD_NAMES = frozenset({"if", "for", "foreach", "while", "switch", "using", "return", "new", "lock", "catch", "base", "this"})
_ATTRIBUTE_LINE = re.compile(r"^\[.*\]$")
_USING_RE = re.compile(r"^using\s+[^(]+;$")
_NAMESPACE_RE = re.compile(r"^namespace\s+([\w.]+)")
_GET_WINDOW_BODY = re.compile(r"^(?:var\s+\w+\s*=\s*)?GetWindow(?:<[\w.]+>)?\s*\([^;]*\)\s*;$")


@dataclass
class SourceStructure:
    """Everything the extractor found in one source file."""
    using_statements: List[str]
    class_kind: ClassKind
    settings: ProjectSettings
    found_class: bool = False
    field_declarations: List[str] = field(default_factory=list)
    inner_types: List[str] = field(default_factory=list)
    gui_method_body: Optional[str] = None
    lifecycle_methods: List[str] = field(default_factory=list)
    custom_methods: List[str] = field(default_factory=list)
    outer_code: List[str] = field(default_factory=list)


def _code(line: str) -> str:
    return strip_line_comment(line).strip()


def _dedent(text: str) -> str:
    return textwrap.dedent(text.expandtabs(4)).strip("\n")


def extract_using_statements(content: str) -> List[str]:
    usings: List[str] = []
    for line in content.split("\n"):
        code = _code(line)
        if _USING_RE.match(code) and code not in usings:
            usings.append(code)
    return usings


def detect_class_kind(content: str) -> ClassKind:
    for kind, patterns in KIND_RULES:
        if any(p.search(content) for p in patterns):
            return kind
    return ClassKind.EDITOR_WINDOW


def split_base_list(bases: Optional[str]) -> List[str]:
    """Split ``A, IFoo<B, C> where T : X`` into ``["A", "IFoo<B, C>"]``."""
    if not bases:
        return []
    bases = re.split(r"\bwhere\b", bases)[0]
    tokens: List[str] = []
    depth = 0
    current = ""
    for ch in bases:
        if ch == "<":
            depth += 1
        elif ch == ">":
            depth -= 1
        if ch == "," and depth == 0:
            tokens.append(current.strip())
            current = ""
        else:
            current += ch
    tokens.append(current.strip())
    return [t for t in tokens if t]


def short_type_name(name: str) -> str:
    """``UnityEditor.Editor`` -> ``Editor``; generic arguments are kept as written."""
    head, bracket, rest = name.partition("<")
    return head.rsplit(".", 1)[-1].strip() + bracket + rest


def _short_bases(bases: Optional[str]) -> List[str]:
    return [short_type_name(t) for t in split_base_list(bases)]


def _first(pattern: str, content: str, flags: int = 0) -> Optional[re.Match]:
    return re.search(pattern, content, flags)


def extract_settings(content: str, kind: ClassKind, class_name: str, bases: List[str]) -> ProjectSettings:
    """Recover template settings from attributes and well-known calls."""
    settings = create_default_settings()
    settings.class_name = class_name
    settings.interfaces = [t for t in bases if short_type_name(t) not in KNOWN_BASE_TYPES]

    match = _first(r"^\s*namespace\s+([\w.]+)", content, re.MULTILINE)
    if match:
        settings.namespace_name = match.group(1)

    match = _first(rf'\[\s*{UNITY_NAMESPACE}MenuItem\s*\(\s*"([^"]+)"', content)
    if match:
        settings.menu_path = match.group(1)
    match = _first(rf'\[\s*{UNITY_NAMESPACE}AddComponentMenu\s*\(\s*"([^"]+)"', content)
    if match:
        settings.menu_path = match.group(1)

    match = (
        _first(r'GetWindow(?:<[\w.]+>)?\s*\(\s*"([^"]*)"', content)
        or _first(r'titleContent\s*=\s*new\s+GUIContent\s*\(\s*"([^"]*)"', content)
    )
    if match:
        settings.window_title = match.group(1)

    match = _first(rf"\[\s*{UNITY_NAMESPACE}CustomEditor\s*\(\s*typeof\s*\(\s*([\w.]+)\s*\)", content)
    if match:
        settings.target_type_name = match.group(1)

    scope_names = {scope.value for scope in SettingsScope}
    scope_arg = rf'"([^"]+)"\s*,\s*{UNITY_NAMESPACE}SettingsScope\.(\w+)'
    match = (
        _first(rf"new\s+{UNITY_NAMESPACE}SettingsProvider\s*\(\s*{scope_arg}", content)
        or _first(rf":\s*base\s*\(\s*{scope_arg}", content)
    )
    if match:
        settings.settings_path = match.group(1)
        if match.group(2) in scope_names:
            settings.settings_scope = SettingsScope(match.group(2))
    elif kind == ClassKind.SETTINGS_PROVIDER:
        # Shape written by the SettingsProvider template
        match = _first(rf'return\s+new\s+{re.escape(class_name)}\s*\(\s*"([^"]+)"', content)
        if match:
            settings.settings_path = match.group(1)
        match = _first(rf"SettingsScope\s+\w+\s*=\s*{UNITY_NAMESPACE}SettingsScope\.(\w+)", content)
        if match and match.group(1) in scope_names:
            settings.settings_scope = SettingsScope(match.group(1))

    match = _first(rf'\[\s*{UNITY_NAMESPACE}CreateAssetMenu\s*\([^)]*menuName\s*=\s*"([^"]+)"', content)
    if match:
        settings.create_menu_path = match.group(1)

    match = _first(rf'\[\s*{UNITY_NAMESPACE}HelpURL\s*\(\s*"([^"]+)"', content)
    if match:
        settings.add_help_url = True
        settings.help_url = match.group(1)

    settings.require_components = re.findall(
        rf"\[\s*{UNITY_NAMESPACE}RequireComponent\s*\(\s*typeof\s*\(\s*([\w.]+)\s*\)", content
    )

    match = _first(rf"\[\s*{UNITY_NAMESPACE}CustomPropertyDrawer\s*\(\s*typeof\s*\(\s*([\w.]+)\s*\)", content)
    if match:
        name = match.group(1)
        name = short_type_name(name)
        settings.target_attribute_name = name[:-len("Attribute")] if name.endswith("Attribute") and name != "Attribute" else name

    return settings


def member_end(lines: List[str], start: int, stop: int) -> int:
    """Last line of the member declared at ``start``.

    A member ends at a ``;`` at brace depth zero, or at the ``}`` that
    returns to depth zero unless an initializer (``=``) or ``;`` follows it.
    """
    depth = 0
    candidate: Optional[int] = None
    for line_no, _, ch in code_chars(lines, start):
        if line_no >= stop:
            break
        if ch.isspace():
            continue
        if candidate is not None:
            if ch not in "=;":
                return candidate
            candidate = None
        if ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                candidate = line_no
        elif ch == ";" and depth == 0:
            return line_no
    if candidate is not None:
        return candidate
    return max(start, stop - 1)


def method_name(code: str) -> Optional[str]:
    """Name of the method whose signature starts ``code``, or None."""
    match = _METHOD_SIGNATURE.match(code)
    if match is None:
        return None
    name = match.group(1)
    if name in _NOT_METHOD_NAMES or "=" in code[:code.index("(")]:
        return None
    return name


def _leading_run(lines: List[str], index: int, allow_blank: bool = False) -> int:
    """First line of the attribute/comment run directly above ``index``."""
    start = index
    j = index - 1
    while j >= 0:
        stripped = lines[j].strip()
        if _ATTRIBUTE_LINE.match(stripped) or stripped.startswith("//"):
            start = j
        elif not (allow_blank and stripped == ""):
            break
        j -= 1
    return start


def _block_is_blank(block: BalancedBlock, lines: List[str]) -> bool:
    return not _code(block.body(lines).replace("\n", " "))


def _is_generated_member(name: str, text: str, body: Optional[str], kind: ClassKind, class_name: str) -> bool:
    """True for members the template re-creates on every generation."""
    body_code = " ".join(_code(line) for line in (body or "").split("\n")).strip()
    if kind == ClassKind.EDITOR_WINDOW and name == "ShowWindow":
        return bool(_GET_WINDOW_BODY.match(body_code))
    if kind == ClassKind.SETTINGS_PROVIDER:
        if name == class_name:
            return not body_code and re.search(r":\s*base\s*\(\s*path\s*,\s*scope\s*\)", text) is not None
        if name == f"Create{class_name}" and _SETTINGS_PROVIDER_ATTRIBUTE.search(text):
            return re.match(rf'^return\s+new\s+{re.escape(class_name)}\s*\(\s*"[^"]*"\s*\)\s*;$', body_code) is not None
    return False


def _classify_body(lines: List[str], start: int, stop: int, structure: SourceStructure) -> None:
    """Sort the class body members between ``start`` and ``stop`` (exclusive).

    Comment and directive lines that are not directly above a member (a
    ``#endregion`` followed by a blank line, say) stay with the member kept
    before them, so preprocessor regions remain balanced.
    """
    kind = structure.class_kind
    class_name = structure.settings.class_name
    gui_name = GUI_METHOD_NAMES.get(kind)
    pending: List[str] = []
    last: Optional[Tuple[List[str], int, List[str]]] = None
    i = start

    def keep(bucket: List[str], member_lines: List[str]) -> None:
        nonlocal last
        bucket.append(_dedent("\n".join(member_lines)))
        last = (bucket, len(bucket) - 1, member_lines)

    def attach_trailing(extra: List[str]) -> None:
        if not extra:
            return
        if last is None:
            keep(structure.field_declarations, list(extra))
            return
        bucket, index, member_lines = last
        member_lines.extend(extra)
        bucket[index] = _dedent("\n".join(member_lines))

    while i < stop:
        raw = lines[i]
        stripped = raw.strip()
        code = _code(raw)

        if not stripped:
            attach_trailing(pending)
            pending = []
            i += 1
            continue
        if stripped.startswith("/*"):
            j = i
            while j < stop - 1 and "*/" not in lines[j]:
                j += 1
            pending.extend(lines[i:j + 1])
            i = j + 1
            continue
        if not code or code.startswith("#") or _ATTRIBUTE_LINE.match(code):
            if stripped not in _GENERATED_MARKERS:
                pending.append(raw)
            i += 1
            continue

        end = member_end(lines, i, stop)
        member_lines = pending + lines[i:end + 1]
        leading = pending
        pending = []

        if _TYPE_HEADER.match(code):
            keep(structure.inner_types, member_lines)
            i = end + 1
            continue

        name = method_name(code)
        if name is None:
            keep(structure.field_declarations, member_lines)
            i = end + 1
            continue

        text = _dedent("\n".join(member_lines))
        block = find_balanced_block(lines[:end + 1], i)
        body = block.body(lines) if block is not None else None
        if gui_name and name == gui_name and body is not None and structure.gui_method_body is None:
            structure.gui_method_body = body
            attach_trailing([line for line in leading if _code(line).startswith("#")])
        elif _is_generated_member(name, text, body, kind, class_name):
            logger.debug(f"Dropping generated member {name}")
            attach_trailing([line for line in leading if _code(line).startswith("#")])
        elif name in LIFECYCLE_METHOD_NAMES:
            keep(structure.lifecycle_methods, member_lines)
        else:
            keep(structure.custom_methods, member_lines)
        i = end + 1

    attach_trailing(pending)


def _class_headers(lines: List[str]) -> List[Tuple[int, re.Match]]:
    headers = []
    for index, line in enumerate(lines):
        match = _CLASS_HEADER.match(_code(line))
        if match:
            headers.append((index, match))
    return headers


def _is_marker_attribute_type(lines: List[str], index: int, block: BalancedBlock, settings: ProjectSettings) -> bool:
    match = _CLASS_HEADER.match(_code(lines[index]))
    if match is None or match.group(1) != f"{settings.target_attribute_name}Attribute":
        return False
    return "PropertyAttribute" in _short_bases(match.group(2)) and _block_is_blank(block, lines)


def _pre_class_types(lines: List[str], stop: int, structure: SourceStructure) -> List[str]:
    """Type definitions that precede the primary class."""
    chunks: List[str] = []
    i = 0
    while i < stop:
        code = _code(lines[i])
        if not _TYPE_HEADER.match(code):
            i += 1
            continue
        block = find_balanced_block(lines, i)
        if block is None or block.end_line >= stop:
            break
        if structure.class_kind == ClassKind.PROPERTY_DRAWER and _is_marker_attribute_type(
            lines, i, block, structure.settings
        ):
            logger.debug("Dropping generated property attribute marker type")
        else:
            first = _leading_run(lines, i)
            chunks.append(_dedent("\n".join(lines[first:block.end_line + 1])))
        i = block.end_line + 1
    return chunks


def split_outer_code(lines: List[str]) -> List[str]:
    """Split the text after the primary class into type-sized chunks.

    Unmatched closing braces (namespace ends) and generator marker
    comments are dropped.
    """
    kept: List[str] = []
    depth = 0
    for line in lines:
        stripped = line.strip()
        if stripped in _GENERATED_MARKERS:
            continue
        if _code(line) == "}" and depth == 0:
            continue
        depth = max(0, depth + brace_delta(line))
        kept.append(line)

    chunks: List[List[str]] = [[]]
    depth = 0
    for line in kept:
        if depth == 0 and _TYPE_HEADER.match(_code(line)) and chunks[-1]:
            current = chunks[-1]
            split_at = len(current)
            while split_at > 0:
                previous = current[split_at - 1].strip()
                if _ATTRIBUTE_LINE.match(previous) or previous.startswith("//"):
                    split_at -= 1
                else:
                    break
            chunks[-1] = current[:split_at]
            chunks.append(current[split_at:])
        chunks[-1].append(line)
        depth = max(0, depth + brace_delta(line))

    result = []
    for chunk in chunks:
        text = _dedent("\n".join(chunk)).strip()
        if text:
            result.append(text)
    return result


def extract_structure(content: str, warnings: List[str]) -> SourceStructure:
    """Split source text into the parts of a ScriptProject.

    Args:
        content: Complete C# file text
        warnings: Receives a warning when no class body can be located

    Returns:
        SourceStructure; ``found_class`` is False when extraction stopped early
    """
    lines = content.replace("\r\n", "\n").split("\n")
    kind = detect_class_kind(content)
    structure = SourceStructure(
        using_statements=extract_using_statements(content),
        class_kind=kind,
        settings=create_default_settings(),
    )

    headers = _class_headers(lines)
    if not headers:
        warnings.append("No class definition found")
        return structure

    base_type = BASE_TYPES[kind]
    header_index, header = next(
        ((index, match) for index, match in headers if base_type in _short_bases(match.group(2))),
        headers[0],
    )
    bases = split_base_list(header.group(2))
    structure.settings = extract_settings(content, kind, header.group(1), bases)

    block = find_balanced_block(lines, header_index)
    if block is None:
        warnings.append(f"Class body not found for {header.group(1)}")
        return structure
    structure.found_class = True

    # Attributes directly above the class header
    attr_start = _leading_run(lines, header_index, allow_blank=True)
    synthesized = SYNTHESIZED_ATTRIBUTES[kind]
    for line in lines[attr_start:header_index]:
        code = _code(line)
        generated = any(re.match(rf"^\[\s*{UNITY_NAMESPACE}{name}\b", code) for name in synthesized)
        if _ATTRIBUTE_LINE.match(code) and not generated:
            structure.settings.class_attributes.append(code)

    _classify_body(lines, block.open_line + 1, block.end_line, structure)

    structure.outer_code = _pre_class_types(lines, attr_start, structure)
    structure.outer_code += split_outer_code(lines[block.end_line + 1:])

    logger.info(
        f"Extracted {kind.value} '{structure.settings.class_name}': "
        f"{len(structure.field_declarations)} fields, {len(structure.inner_types)} inner types, "
        f"{len(structure.lifecycle_methods)} lifecycle + {len(structure.custom_methods)} custom methods"
    )
    return structure
