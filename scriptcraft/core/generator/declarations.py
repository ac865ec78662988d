"""Backing-variable and preserved-fragment emission for the class templates."""

from typing import AbstractSet, Dict, List, Set

from ..model.models import ElementType, ScriptProject, UIElement
from ..model.tree import iter_elements
from ..utils.csharp_text import csharp_string, format_number, indent, parse_field_declaration, reindent

# Display and container types that do not bind a variable.
# Foldout and TabGroup do: they store the open flag / selected tab.
NO_VARIABLE_TYPES = frozenset({
    ElementType.BUTTON,
    ElementType.LABEL,
    ElementType.HELP_BOX,
    ElementType.SPACE,
    ElementType.SEPARATOR,
    ElementType.HEADER,
    ElementType.HORIZONTAL_GROUP,
    ElementType.VERTICAL_GROUP,
    ElementType.SCROLL_VIEW,
    ElementType.DISABLED_GROUP,
    ElementType.BOX,
})

STRING_TYPES = frozenset({ElementType.TEXT_FIELD, ElementType.TEXT_AREA, ElementType.TAG_FIELD})

_CSHARP_TYPES: Dict[ElementType, str] = {
    ElementType.TEXT_FIELD: "string",
    ElementType.TEXT_AREA: "string",
    ElementType.TAG_FIELD: "string",
    ElementType.INT_FIELD: "int",
    ElementType.INT_SLIDER: "int",
    ElementType.POPUP: "int",
    ElementType.LAYER_FIELD: "int",
    ElementType.TAB_GROUP: "int",
    ElementType.FLOAT_FIELD: "float",
    ElementType.SLIDER: "float",
    ElementType.PROGRESS_BAR: "float",
    ElementType.TOGGLE: "bool",
    ElementType.FOLDOUT: "bool",
    ElementType.COLOR_FIELD: "Color",
    ElementType.VECTOR2_FIELD: "Vector2",
    ElementType.VECTOR3_FIELD: "Vector3",
    ElementType.CURVE_FIELD: "AnimationCurve",
    ElementType.GRADIENT_FIELD: "Gradient",
}

_DEFAULT_LITERALS: Dict[ElementType, str] = {
    ElementType.TEXT_FIELD: '""',
    ElementType.TEXT_AREA: '""',
    ElementType.TAG_FIELD: '""',
    ElementType.INT_FIELD: "0",
    ElementType.INT_SLIDER: "0",
    ElementType.POPUP: "0",
    ElementType.LAYER_FIELD: "0",
    ElementType.ENUM_POPUP: "0",
    ElementType.TAB_GROUP: "0",
    ElementType.FLOAT_FIELD: "0f",
    ElementType.SLIDER: "0.5f",
    ElementType.TOGGLE: "false",
    ElementType.COLOR_FIELD: "Color.white",
    ElementType.VECTOR2_FIELD: "Vector2.zero",
    ElementType.VECTOR3_FIELD: "Vector3.zero",
    ElementType.OBJECT_FIELD: "null",
    ElementType.CURVE_FIELD: "new AnimationCurve()",
    ElementType.GRADIENT_FIELD: "new Gradient()",
}

SCROLL_POSITION_FIELD = "private Vector2 scrollPosition;"
DEFAULT_ENUM_TYPE = "Space"


def needs_variable(element: UIElement) -> bool:
    return not element.opaque and element.type not in NO_VARIABLE_TYPES


def csharp_type(element: UIElement) -> str:
    if element.type == ElementType.OBJECT_FIELD:
        return element.object_type or "Object"
    if element.type == ElementType.ENUM_POPUP:
        return element.object_type or DEFAULT_ENUM_TYPE
    return _CSHARP_TYPES.get(element.type, "object")


def default_value(element: UIElement) -> str:
    """Initializer literal for an element's backing variable."""
    if element.type == ElementType.PROGRESS_BAR:
        if element.default_value:
            return element.default_value
        value = element.progress_value if element.progress_value is not None else 0
        return f"{format_number(value)}f"
    if element.type == ElementType.FOLDOUT:
        return "true" if element.foldout_default else "false"
    if element.default_value:
        if element.type in STRING_TYPES and not element.default_value.startswith('"'):
            return csharp_string(element.default_value)
        return element.default_value
    return _DEFAULT_LITERALS.get(element.type, "null")


def accessor_name(variable_name: str) -> str:
    return variable_name[:1].upper() + variable_name[1:]


def bound_elements(elements: List[UIElement]) -> List[UIElement]:
    """Every element in the tree that needs a backing variable, in tree order."""
    return [e for e in iter_elements(elements) if needs_variable(e)]


def has_scroll_view(elements: List[UIElement]) -> bool:
    return any(e.type == ElementType.SCROLL_VIEW for e in iter_elements(elements))


def declared_field_names(declarations: List[str]) -> Set[str]:
    """Names declared by preserved field (or accessor) declarations."""
    names = set()
    for declaration in declarations:
        parsed = parse_field_declaration(declaration)
        if parsed is not None:
            names.add(parsed[1])
    return names


def backing_variables(elements: List[UIElement], declared: AbstractSet[str] = frozenset()) -> List[UIElement]:
    """First element per variable name, skipping names declared elsewhere."""
    seen = set(declared)
    unique = []
    for element in bound_elements(elements):
        if element.variable_name not in seen:
            seen.add(element.variable_name)
            unique.append(element)
    return unique


def variable_declarations(
    elements: List[UIElement], level: int, serialized: bool = False, declared: AbstractSet[str] = frozenset()
) -> List[str]:
    """Field lines for the element variables (plus ``scrollPosition`` if needed).

    Each variable is declared once; names in ``declared`` already have a
    preserved declaration and are skipped.
    """
    prefix = indent(level) + ("[SerializeField] " if serialized else "")
    lines = [
        f"{prefix}private {csharp_type(e)} {e.variable_name} = {default_value(e)};"
        for e in backing_variables(elements, declared)
    ]
    if has_scroll_view(elements) and "scrollPosition" not in declared:
        lines.append(f"{indent(level)}{SCROLL_POSITION_FIELD}")
    return lines


def accessor_declarations(elements: List[UIElement], level: int, declared: AbstractSet[str] = frozenset()) -> List[str]:
    return [
        f"{indent(level)}public {csharp_type(e)} {accessor_name(e.variable_name)} => {e.variable_name};"
        for e in backing_variables(elements, declared)
    ]


def merge_using_statements(project: ScriptProject, defaults: List[str]) -> List[str]:
    """Preserved imports first, then each default not already covered.

    A default is covered when its namespace text appears in any preserved
    import, e.g. ``using UnityEditor;`` is suppressed by a preserved
    ``using UnityEditor;``.
    """
    usings: List[str] = []
    for statement in project.using_statements:
        if statement not in usings:
            usings.append(statement)
    for statement in defaults:
        namespace = statement.replace("using ", "").replace(";", "")
        if not any(namespace in u for u in usings):
            usings.append(statement)
    return usings


def preserved_declarations(project: ScriptProject, level: int) -> List[str]:
    """Preserved field declarations and inner types as class-body sections.

    Each section starts with a marker comment so a reader can tell the
    carried-over text from the synthesized members.
    """
    sections: List[str] = []
    ind = indent(level)

    if project.field_declarations:
        lines = [f"{ind}// === Preserved field declarations ==="]
        lines.extend(reindent(declaration, level) for declaration in project.field_declarations)
        sections.append("\n".join(lines))

    if project.inner_types:
        inner = "\n\n".join(reindent(inner_type, level) for inner_type in project.inner_types)
        sections.append(f"{ind}// === Preserved inner types ===\n{inner}")

    return sections


def preserved_methods(project: ScriptProject, level: int) -> List[str]:
    """Preserved lifecycle methods, then custom methods, one section each."""
    return [reindent(method, level) for method in project.lifecycle_methods + project.custom_methods]


def outer_code(project: ScriptProject) -> str:
    if not project.outer_code:
        return ""
    return "\n".join(["// === Preserved outer code ==="] + project.outer_code)
