"""C# parser: source text -> ScriptProject plus warnings.

Example:
    from scriptcraft.core.cs_parser import parse_csharp_file
    result = parse_csharp_file("MyTool.cs", text)
    result.project, result.warnings
"""

import logging
import re
import textwrap
from dataclasses import dataclass, field
from pathlib import PurePath
from typing import Dict, List, Optional, Sequence, Set, Tuple

from ..generator.declarations import STRING_TYPES, accessor_name, bound_elements, csharp_type, has_scroll_view
from ..generator.templates import EMPTY_GUI_COMMENT, ClassTemplate, get_template
from ..model.factory import create_project
from ..model.models import ElementType, ScriptProject, UIElement
from ..utils.csharp_text import STRING_LITERAL, parse_field_declaration, parse_number, unescape_csharp_string
from .extractor import extract_structure, extract_using_statements
from .recoverer import QualityGate, recover_elements
from .syntax_check import check_syntax

logger = logging.getLogger(__name__)

__all__ = [
    "ParseResult",
    "QualityGate",
    "check_syntax",
    "parse_csharp_file",
    "parse_csharp_folder",
    "recover_elements",
    "score_file",
]

# Keyword weights used to pick the primary file of a multi-file import
FILE_SCORE_WEIGHTS: List[Tuple[re.Pattern, int]] = [
    (re.compile(r":\s*(?:UnityEditor\.)?EditorWindow\b"), 10),
    (re.compile(r":\s*(?:UnityEditor\.)?Editor\b"), 8),
    (re.compile(r"\[\s*(?:UnityEditor\.)?CustomEditor"), 8),
    (re.compile(r"OnGUI|OnInspectorGUI"), 5),
    (re.compile(r"\[\s*(?:UnityEditor\.)?MenuItem"), 3),
    (re.compile(r":\s*(?:UnityEngine\.)?MonoBehaviour\b"), 2),
    (re.compile(r":\s*(?:UnityEngine\.)?ScriptableObject\b"), 2),
]

_SCROLL_POSITION_DECLARATION = re.compile(r"^private\s+Vector2\s+scrollPosition\s*(?:=\s*Vector2\.zero\s*)?;$")


@dataclass
class ParseResult:
    project: ScriptProject
    warnings: List[str] = field(default_factory=list)


def score_file(content: str) -> int:
    return sum(weight for pattern, weight in FILE_SCORE_WEIGHTS if pattern.search(content))


def _display_name(file_name: str) -> str:
    return PurePath(file_name.replace("\\", "/")).stem or file_name


def _generated_initializer(declaration: str, type_name: str, name: str, serialized: bool) -> Optional[str]:
    """Initializer of a declaration written exactly as the template writes it, else None."""
    prefix = r"\[SerializeField\]\s*" if serialized else ""
    match = re.fullmatch(
        rf"{prefix}private\s+{re.escape(type_name)}\s+{re.escape(name)}\s*=\s*(.+?)\s*;",
        declaration.strip(),
        re.DOTALL,
    )
    return match.group(1) if match else None


def _apply_initializer(element: UIElement, value: str) -> None:
    """Carry a field initializer back onto an element it backs."""
    if element.type == ElementType.FOLDOUT:
        element.foldout_default = value == "true"
    elif element.type == ElementType.PROGRESS_BAR:
        number = parse_number(value)
        if number is not None:
            element.progress_value = float(number)
    elif element.type in STRING_TYPES:
        literal = re.fullmatch(STRING_LITERAL, value)
        element.default_value = unescape_csharp_string(literal.group(1)) if literal else value
    else:
        element.default_value = value


def _is_generated_accessor(declaration: str, element: UIElement) -> bool:
    name = element.variable_name
    pattern = (
        rf"public\s+{re.escape(csharp_type(element))}\s+{re.escape(accessor_name(name))}"
        rf"\s*=>\s*{re.escape(name)}\s*;"
    )
    return re.fullmatch(pattern, declaration.strip()) is not None


def _absorb_bound_fields(project: ScriptProject, template: ClassTemplate) -> None:
    """Drop declarations the generator re-creates from the recovered elements.

    A declaration is absorbed only when it has the exact generated shape and
    type; anything else stays preserved and the generator leaves that
    variable undeclared.
    """
    bound: Dict[str, List[UIElement]] = {}
    for element in bound_elements(project.elements):
        bound.setdefault(element.variable_name, []).append(element)
    scroll_view = has_scroll_view(project.elements)

    absorbed: Set[str] = set()
    kept = []
    for declaration in project.field_declarations:
        parsed = parse_field_declaration(declaration)
        name = parsed[1] if parsed else None
        if name in bound and name not in absorbed:
            elements = bound[name]
            value = _generated_initializer(declaration, csharp_type(elements[0]), name, template.serialized_fields)
            if value is not None:
                for element in elements:
                    _apply_initializer(element, value)
                absorbed.add(name)
                continue
        if scroll_view and _SCROLL_POSITION_DECLARATION.match(declaration.strip()):
            continue
        kept.append(declaration)

    if template.emits_accessors:
        kept = [
            declaration for declaration in kept
            if not any(_is_generated_accessor(declaration, bound[name][0]) for name in absorbed)
        ]
    project.field_declarations = kept


def _has_content(body: str, template: ClassTemplate) -> bool:
    """True when the body holds more than the placeholder comment and the template's own wrapper calls."""
    wrapper_lines = set(template.gui_prologue() + template.gui_epilogue())
    for line in body.split("\n"):
        stripped = line.strip()
        if stripped and stripped != EMPTY_GUI_COMMENT and stripped not in wrapper_lines:
            return True
    return False


def _load_gui_body(project: ScriptProject, body: str, warnings: List[str], gate: QualityGate) -> None:
    template = get_template(project.class_kind)
    elements = recover_elements(body, warnings)
    raw = textwrap.dedent(body.expandtabs(4)).strip("\n")

    if elements and gate.should_fall_back(elements):
        opaque = sum(1 for e in elements if e.opaque)
        message = (
            f"Complex GUI code ({opaque} of {len(elements)} statements not recognised): "
            f"loaded in raw-body mode"
        )
        logger.warning(message)
        warnings.append(message)
        project.elements = []
        project.raw_gui_method_body = raw
    elif elements:
        project.elements = elements
        project.raw_gui_method_body = ""
        _absorb_bound_fields(project, template)
    else:
        project.elements = []
        project.raw_gui_method_body = raw if _has_content(raw, template) else ""


def parse_csharp_file(file_name: str, content: str, quality_gate: Optional[QualityGate] = None) -> ParseResult:
    """Parse one C# file into a project.

    Args:
        file_name: Seeds the project name (extension stripped)
        content: C# source text
        quality_gate: Overrides the configured recovery quality gate

    Returns:
        ParseResult with the best-effort project and ordered warnings
    """
    warnings: List[str] = []
    project = create_project(_display_name(file_name))

    structure = extract_structure(content, warnings)
    project.class_kind = structure.class_kind
    project.settings = structure.settings
    project.using_statements = structure.using_statements
    if not structure.found_class:
        return ParseResult(project=project, warnings=warnings)

    project.name = structure.settings.class_name or project.name
    project.field_declarations = structure.field_declarations
    project.inner_types = structure.inner_types
    project.lifecycle_methods = structure.lifecycle_methods
    project.custom_methods = structure.custom_methods
    project.outer_code = structure.outer_code

    if structure.gui_method_body is not None:
        _load_gui_body(project, structure.gui_method_body, warnings, quality_gate or QualityGate.from_config())

    logger.info(
        f"Parsed {file_name}: {project.class_kind.value} '{project.settings.class_name}', "
        f"{len(project.elements)} root elements, {len(warnings)} warnings"
    )
    return ParseResult(project=project, warnings=warnings)


def parse_csharp_folder(
    files: Sequence[Tuple[str, str]], quality_gate: Optional[QualityGate] = None
) -> ParseResult:
    """Parse several files: the best-scoring one structurally, the rest verbatim.

    Args:
        files: Ordered ``(file_name, content)`` pairs; non-``.cs`` names are ignored

    Returns:
        ParseResult of the primary file, with the other files appended to
        its outer code and their imports merged
    """
    cs_files = [(name, content) for name, content in files if name.lower().endswith(".cs")]
    if not cs_files:
        return ParseResult(project=create_project("Empty"), warnings=["No C# files found"])

    best_index = 0
    best_score = -1
    for index, (_, content) in enumerate(cs_files):
        score = score_file(content)
        if score > best_score:
            best_index, best_score = index, score

    primary_name, primary_content = cs_files[best_index]
    result = parse_csharp_file(primary_name, primary_content, quality_gate)
    notes = [f"Primary file: {primary_name}"]

    project = result.project
    for index, (name, content) in enumerate(cs_files):
        if index == best_index:
            continue
        notes.append(f"Secondary file: {name}")
        for statement in extract_using_statements(content):
            if statement not in project.using_statements:
                project.using_statements.append(statement)
        project.outer_code.append(f"// ===== {name} =====")
        project.outer_code.append(content)

    logger.info(f"Parsed folder of {len(cs_files)} C# files; primary is {primary_name}")
    result.warnings.extend(notes)
    return result
