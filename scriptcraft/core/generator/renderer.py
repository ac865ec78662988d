"""Element tree renderer.

Turns UIElement trees into IMGUI statements. Pure functions: nothing here
mutates the input elements.
"""

import logging
from typing import Callable, Dict, List, Optional

from ..model.models import (
    ActionType,
    ClassKind,
    ElementType,
    FontStyle,
    HelpBoxType,
    TextAlignment,
    UIElement,
)
from ..utils.csharp_text import csharp_string, format_number, indent, reindent
from .declarations import csharp_type

logger = logging.getLogger(__name__)

STYLEABLE_TYPES = frozenset({
    ElementType.BOX,
    ElementType.LABEL,
    ElementType.HEADER,
    ElementType.BUTTON,
    ElementType.TEXT_FIELD,
    ElementType.TEXT_AREA,
})

TEXT_ANCHORS: Dict[TextAlignment, str] = {
    TextAlignment.LEFT: "MiddleLeft",
    TextAlignment.CENTER: "MiddleCenter",
    TextAlignment.RIGHT: "MiddleRight",
}

DEFAULT_POPUP_OPTIONS = ["Option 1", "Option 2"]
DEFAULT_TABS = ["Tab 1", "Tab 2"]
EMPTY_ACTION_COMMENT = "// Button action"


def _dirty_target(class_kind: ClassKind) -> str:
    if class_kind == ClassKind.CUSTOM_EDITOR:
        return "target"
    if class_kind == ClassKind.PROPERTY_DRAWER:
        return "property.serializedObject.targetObject"
    return "this"


def action_code(element: UIElement, level: int, class_kind: ClassKind) -> str:
    """Body of a Button's click block, or "" when it has no action."""
    action = element.action
    if action is None or action == ActionType.NONE:
        return ""

    ind = indent(level)
    param = element.action_param or ""
    if action == ActionType.DEBUG_LOG:
        return f"{ind}Debug.Log({csharp_string(param or element.label)});"
    if action == ActionType.DISPLAY_DIALOG:
        return f'{ind}EditorUtility.DisplayDialog({csharp_string(element.label)}, {csharp_string(param)}, "OK");'
    if action == ActionType.REPAINT:
        return f"{ind}Repaint();"
    if action == ActionType.SET_DIRTY:
        return f"{ind}EditorUtility.SetDirty({_dirty_target(class_kind)});"
    if action == ActionType.UNDO_RECORD:
        return f"{ind}Undo.RecordObject({_dirty_target(class_kind)}, {csharp_string(param or 'Change')});"
    if action == ActionType.CUSTOM_CODE:
        return reindent(param, level) if param.strip() else ""
    return ""


def gui_style_code(element: UIElement, default_base: str) -> Optional[str]:
    """Style-override expression for an element, or None when it is unstyled.

    Example: ``new GUIStyle(EditorStyles.label) { fontSize = 14, alignment = TextAnchor.MiddleCenter }``
    """
    if element.type not in STYLEABLE_TYPES:
        return None

    initializers = []
    if element.font_size:
        initializers.append(f"fontSize = {element.font_size}")
    if element.font_style and element.font_style != FontStyle.NORMAL:
        initializers.append(f"fontStyle = FontStyle.{element.font_style.value}")
    if element.text_alignment:
        initializers.append(f"alignment = TextAnchor.{TEXT_ANCHORS[element.text_alignment]}")

    base = csharp_string(element.box_style) if element.box_style else default_base
    if not initializers:
        return base if element.box_style else None
    return f"new GUIStyle({base}) {{ {', '.join(initializers)} }}"


def _with_style(statement: str, element: UIElement, default_base: str) -> str:
    """Append the style expression as the last call argument."""
    style = gui_style_code(element, default_base)
    if style is None or not statement.endswith(");"):
        return statement
    return f"{statement[:-2]}, {style});"


def _render_children(element: UIElement, level: int, class_kind: ClassKind) -> List[str]:
    rendered = (render_element(child, level, class_kind) for child in element.children or [])
    return [text for text in rendered if text]


def render_element(element: UIElement, level: int, class_kind: ClassKind) -> str:
    """Render one element (recursively for containers) at ``level``.

    Unknown type tags render as an empty string.
    """
    ind = indent(level)
    var = element.variable_name
    label = csharp_string(element.label)
    etype = element.type
    lines: List[str] = []

    if element.opaque:
        return reindent(element.action_param or "", level)

    if etype == ElementType.BUTTON:
        args = [label]
        style = gui_style_code(element, '"button"')
        if style:
            args.append(style)
        lines.append(f"{ind}if (GUILayout.Button({', '.join(args)}))")
        lines.append(f"{ind}{{")
        lines.append(action_code(element, level + 1, class_kind) or f"{indent(level + 1)}{EMPTY_ACTION_COMMENT}")
        lines.append(f"{ind}}}")

    elif etype == ElementType.TEXT_FIELD:
        lines.append(_with_style(
            f"{ind}{var} = EditorGUILayout.TextField({label}, {var});", element, "EditorStyles.textField"))

    elif etype == ElementType.TEXT_AREA:
        lines.append(f"{ind}EditorGUILayout.LabelField({label});")
        lines.append(_with_style(
            f"{ind}{var} = EditorGUILayout.TextArea({var}, GUILayout.Height(60));", element, "EditorStyles.textArea"))

    elif etype in _SIMPLE_FIELDS:
        lines.append(f"{ind}{var} = EditorGUILayout.{_SIMPLE_FIELDS[etype]}({label}, {var});")

    elif etype == ElementType.SLIDER:
        low = format_number(element.min_value if element.min_value is not None else 0)
        high = format_number(element.max_value if element.max_value is not None else 1)
        lines.append(f"{ind}{var} = EditorGUILayout.Slider({label}, {var}, {low}f, {high}f);")

    elif etype == ElementType.INT_SLIDER:
        low = int(element.min_value if element.min_value is not None else 0)
        high = int(element.max_value if element.max_value is not None else 100)
        lines.append(f"{ind}{var} = EditorGUILayout.IntSlider({label}, {var}, {low}, {high});")

    elif etype == ElementType.OBJECT_FIELD:
        object_type = element.object_type or "Object"
        allow = "false" if element.allow_scene_objects is False else "true"
        lines.append(
            f"{ind}{var} = ({object_type})EditorGUILayout.ObjectField("
            f"{label}, {var}, typeof({object_type}), {allow});"
        )

    elif etype == ElementType.ENUM_POPUP:
        enum_type = csharp_type(element)
        lines.append(f"{ind}{var} = ({enum_type})EditorGUILayout.EnumPopup({label}, {var});")

    elif etype == ElementType.POPUP:
        options = ", ".join(csharp_string(o) for o in (element.popup_options or DEFAULT_POPUP_OPTIONS))
        lines.append(f"{ind}{var} = EditorGUILayout.Popup({label}, {var}, new string[] {{ {options} }});")

    elif etype == ElementType.LABEL:
        args = [label]
        style = gui_style_code(element, "EditorStyles.label")
        if style:
            args.append(style)
        lines.append(f"{ind}EditorGUILayout.LabelField({', '.join(args)});")

    elif etype == ElementType.HELP_BOX:
        message = csharp_string(element.default_value or element.label)
        severity = (element.help_box_type or HelpBoxType.INFO).value
        lines.append(f"{ind}EditorGUILayout.HelpBox({message}, MessageType.{severity});")

    elif etype == ElementType.SPACE:
        lines.append(f"{ind}EditorGUILayout.Space({element.space_height or 10});")

    elif etype == ElementType.SEPARATOR:
        lines.append(f'{ind}EditorGUILayout.LabelField("", GUI.skin.horizontalSlider);')

    elif etype == ElementType.HEADER:
        text = csharp_string(element.header_text or element.label)
        style = gui_style_code(element, "EditorStyles.boldLabel") or "EditorStyles.boldLabel"
        lines.append(f"{ind}EditorGUILayout.LabelField({text}, {style});")

    elif etype == ElementType.PROGRESS_BAR:
        lines.append(f"{ind}EditorGUI.ProgressBar(EditorGUILayout.GetControlRect(false, 20), {var}, {label});")

    elif etype in _GROUP_CALLS:
        begin, end = _GROUP_CALLS[etype](element)
        lines.append(f"{ind}{begin}")
        lines.extend(_render_children(element, level + 1, class_kind))
        lines.append(f"{ind}{end}")

    elif etype == ElementType.FOLDOUT:
        lines.append(f"{ind}{var} = EditorGUILayout.Foldout({var}, {label}, true);")
        lines.append(f"{ind}if ({var})")
        lines.append(f"{ind}{{")
        lines.append(f"{indent(level + 1)}EditorGUI.indentLevel++;")
        lines.extend(_render_children(element, level + 1, class_kind))
        lines.append(f"{indent(level + 1)}EditorGUI.indentLevel--;")
        lines.append(f"{ind}}}")

    elif etype == ElementType.TAB_GROUP:
        # Children are not routed to individual tabs; each case is left empty.
        tabs = element.tabs or DEFAULT_TABS
        tab_labels = ", ".join(csharp_string(t) for t in tabs)
        lines.append(f"{ind}{var} = GUILayout.Toolbar({var}, new string[] {{ {tab_labels} }});")
        lines.append(f"{ind}switch ({var})")
        lines.append(f"{ind}{{")
        for i, tab in enumerate(tabs):
            lines.append(f"{indent(level + 1)}case {i}: // {tab}")
            lines.append(f"{indent(level + 2)}break;")
        lines.append(f"{ind}}}")

    else:
        logger.debug(f"No renderer for element type {etype!r}; skipping")

    return "\n".join(lines)


def render_elements(elements: List[UIElement], level: int, class_kind: ClassKind) -> str:
    """Render root elements separated by blank lines."""
    rendered = (render_element(e, level, class_kind) for e in elements)
    return "\n\n".join(text for text in rendered if text)


# Leaf fields of the shape ``var = EditorGUILayout.<Call>("label", var);``
_SIMPLE_FIELDS: Dict[ElementType, str] = {
    ElementType.INT_FIELD: "IntField",
    ElementType.FLOAT_FIELD: "FloatField",
    ElementType.TOGGLE: "Toggle",
    ElementType.COLOR_FIELD: "ColorField",
    ElementType.VECTOR2_FIELD: "Vector2Field",
    ElementType.VECTOR3_FIELD: "Vector3Field",
    ElementType.LAYER_FIELD: "LayerField",
    ElementType.TAG_FIELD: "TagField",
    ElementType.CURVE_FIELD: "CurveField",
    ElementType.GRADIENT_FIELD: "GradientField",
}


def _box_calls(element: UIElement):
    style = gui_style_code(element, '"box"') or '"box"'
    return f"EditorGUILayout.BeginVertical({style});", "EditorGUILayout.EndVertical();"


_GROUP_CALLS: Dict[ElementType, Callable[[UIElement], tuple]] = {
    ElementType.HORIZONTAL_GROUP: lambda e: ("EditorGUILayout.BeginHorizontal();", "EditorGUILayout.EndHorizontal();"),
    ElementType.VERTICAL_GROUP: lambda e: ("EditorGUILayout.BeginVertical();", "EditorGUILayout.EndVertical();"),
    ElementType.SCROLL_VIEW: lambda e: (
        "scrollPosition = EditorGUILayout.BeginScrollView(scrollPosition);", "EditorGUILayout.EndScrollView();"
    ),
    ElementType.DISABLED_GROUP: lambda e: (
        f"EditorGUI.BeginDisabledGroup({e.disable_condition or 'false'});", "EditorGUI.EndDisabledGroup();"
    ),
    ElementType.BOX: _box_calls,
}
