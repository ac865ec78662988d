"""Single-statement IMGUI call shapes.

``CALL_PATTERNS`` is evaluated top to bottom against one stripped line and the
first entry whose regex matches and whose builder returns an element wins.
A builder may return None to reject a match and let later entries try.
"""

import re
from dataclasses import dataclass
from typing import Callable, List, Optional

from ..model.factory import make_element
from ..model.models import ElementType, FontStyle, HelpBoxType, TextAlignment, UIElement
from ..utils.csharp_text import STRING_LITERAL, parse_number, unescape_csharp_string

# Optional leading label argument: ``"Label", ``
_LABEL_ARG = rf"(?:{STRING_LITERAL}\s*,\s*)?"
_EDITOR_GUI = r"EditorGUI(?:Layout)?"
_NUMBER = r"(-?[\d.]+[fFdD]?)"

_STYLE_PREFIXES = ("new GUIStyle", "EditorStyles.", "GUI.skin.", '"')
_GUI_STYLE_RE = re.compile(r"^new\s+GUIStyle\s*\(\s*(.+?)\s*\)\s*\{(.*)\}$")
_FONT_SIZE_RE = re.compile(r"fontSize\s*=\s*(\d+)")
_FONT_STYLE_RE = re.compile(r"fontStyle\s*=\s*FontStyle\.(\w+)")
_ALIGNMENT_RE = re.compile(r"alignment\s*=\s*TextAnchor\.\w*?(Left|Center|Right)\b")
_STRING_RE = re.compile(STRING_LITERAL)
_FONT_STYLES = {style.value for style in FontStyle}


@dataclass(frozen=True)
class CallPattern:
    name: str
    regex: re.Pattern
    builder: Callable[[re.Match, str], Optional[UIElement]]


def is_style_expression(text: Optional[str]) -> bool:
    return bool(text) and text.strip().startswith(_STYLE_PREFIXES)


def apply_style(element: UIElement, style_expr: Optional[str], default_base: str) -> bool:
    """Copy font/alignment/box-style overrides from a GUIStyle expression.

    Returns False when ``style_expr`` is not a style expression at all.
    """
    if not style_expr:
        return True
    expr = style_expr.strip()
    if not is_style_expression(expr):
        return False

    initializers = ""
    base = expr
    match = _GUI_STYLE_RE.match(expr)
    if match:
        base, initializers = match.group(1), match.group(2)

    literal = _STRING_RE.fullmatch(base.strip())
    if literal and base.strip() != default_base:
        element.box_style = unescape_csharp_string(literal.group(1))

    font_size = _FONT_SIZE_RE.search(initializers)
    if font_size:
        element.font_size = int(font_size.group(1))
    font_style = _FONT_STYLE_RE.search(initializers)
    if font_style and font_style.group(1) in _FONT_STYLES:
        element.font_style = FontStyle(font_style.group(1))
    alignment = _ALIGNMENT_RE.search(initializers)
    if alignment:
        element.text_alignment = TextAlignment(alignment.group(1))
    return True


def _label(match: re.Match, group: int, fallback: str) -> str:
    raw = match.group(group)
    return unescape_csharp_string(raw) if raw is not None else fallback


def string_literals(text: str) -> List[str]:
    return [unescape_csharp_string(m.group(1)) for m in _STRING_RE.finditer(text)]


# --- builders ---------------------------------------------------------------

def _simple_field(element_type: ElementType):
    def build(match: re.Match, line: str) -> UIElement:
        return make_element(element_type, _label(match, 2, match.group(1)), match.group(1))
    return build


def _styled_field(element_type: ElementType, default_base: str):
    def build(match: re.Match, line: str) -> Optional[UIElement]:
        element = make_element(element_type, _label(match, 2, match.group(1)), match.group(1))
        if not apply_style(element, match.group(3), default_base):
            return None
        return element
    return build


def _slider(element_type: ElementType):
    def build(match: re.Match, line: str) -> UIElement:
        element = make_element(element_type, _label(match, 2, match.group(1)), match.group(1))
        element.min_value = parse_number(match.group(3))
        element.max_value = parse_number(match.group(4))
        return element
    return build


def _toggle(match: re.Match, line: str) -> UIElement:
    return make_element(ElementType.TOGGLE, _label(match, 2, match.group(1)), match.group(1))


def _object_field(match: re.Match, line: str) -> UIElement:
    var, cast, label_raw, object_type, allow = match.groups()
    element = make_element(
        ElementType.OBJECT_FIELD,
        unescape_csharp_string(label_raw) if label_raw is not None else var,
        var,
    )
    element.object_type = object_type or cast
    element.allow_scene_objects = allow != "false"
    return element


def _enum_popup(match: re.Match, line: str) -> UIElement:
    element = make_element(ElementType.ENUM_POPUP, _label(match, 3, match.group(1)), match.group(1))
    element.object_type = match.group(2)
    return element


def _popup(match: re.Match, line: str) -> UIElement:
    element = make_element(ElementType.POPUP, _label(match, 2, match.group(1)), match.group(1))
    element.popup_options = string_literals(match.group(3))
    return element


def _text_area(match: re.Match, line: str) -> Optional[UIElement]:
    element = make_element(ElementType.TEXT_AREA, match.group(1), match.group(1))
    if not apply_style(element, match.group(2), "EditorStyles.textArea"):
        return None
    return element


def _help_box(match: re.Match, line: str) -> Optional[UIElement]:
    message = unescape_csharp_string(match.group(1))
    try:
        severity = HelpBoxType(match.group(2))
    except ValueError:
        return None
    element = make_element(ElementType.HELP_BOX, message)
    element.default_value = message
    element.help_box_type = severity
    return element


def _space(match: re.Match, line: str) -> UIElement:
    element = make_element(ElementType.SPACE, "Space")
    element.space_height = int(match.group(1)) if match.group(1) else 10
    return element


def _separator(match: re.Match, line: str) -> UIElement:
    return make_element(ElementType.SEPARATOR, "Separator")


def _progress_bar(match: re.Match, line: str) -> UIElement:
    return make_element(ElementType.PROGRESS_BAR, unescape_csharp_string(match.group(2)), match.group(1))


def _header(match: re.Match, line: str) -> Optional[UIElement]:
    text = unescape_csharp_string(match.group(1))
    element = make_element(ElementType.HEADER, text)
    element.header_text = text
    style = match.group(2)
    if style.strip() != "EditorStyles.boldLabel" and not apply_style(element, style, "EditorStyles.boldLabel"):
        return None
    return element


def _label_field(match: re.Match, line: str) -> Optional[UIElement]:
    element = make_element(ElementType.LABEL, unescape_csharp_string(match.group(1)))
    if not apply_style(element, match.group(2), "EditorStyles.label"):
        return None
    return element


def _pattern(name: str, regex: str, builder) -> CallPattern:
    return CallPattern(name, re.compile(regex), builder)


def _value_call(call: str, tail: str = r"\s*\)\s*;$") -> str:
    """``var = EditorGUILayout.<call>(["label", ]var<tail>``"""
    return rf"^(\w+)\s*=\s*{_EDITOR_GUI}\.{call}\s*\(\s*{_LABEL_ARG}\1{tail}"


_STYLE_TAIL = r"\s*(?:,\s*(.+?))?\s*\)\s*;$"

CALL_PATTERNS: List[CallPattern] = [
    _pattern(
        "enum-popup",
        rf"^(\w+)\s*=\s*\(\s*([\w.]+)\s*\)\s*{_EDITOR_GUI}\.EnumPopup\s*\(\s*{_LABEL_ARG}\1\s*\)\s*;$",
        _enum_popup,
    ),
    _pattern(
        "popup",
        rf"^(\w+)\s*=\s*{_EDITOR_GUI}\.Popup\s*\(\s*{_LABEL_ARG}\1\s*,\s*"
        r"new\s*(?:string\s*)?(?:\[\s*\])?\s*\{(.*)\}\s*\)\s*;$",
        _popup,
    ),
    _pattern("text-field", _value_call("TextField", _STYLE_TAIL), _styled_field(ElementType.TEXT_FIELD, "EditorStyles.textField")),
    _pattern(
        "text-area",
        rf"^(\w+)\s*=\s*{_EDITOR_GUI}\.TextArea\s*\(\s*\1\s*(?:,\s*GUILayout\.\w+\s*\([^)]*\))?{_STYLE_TAIL}",
        _text_area,
    ),
    _pattern("int-field", _value_call("IntField"), _simple_field(ElementType.INT_FIELD)),
    _pattern("float-field", _value_call("FloatField"), _simple_field(ElementType.FLOAT_FIELD)),
    _pattern(
        "slider",
        _value_call("Slider", rf"\s*,\s*{_NUMBER}\s*,\s*{_NUMBER}\s*\)\s*;$"),
        _slider(ElementType.SLIDER),
    ),
    _pattern(
        "int-slider",
        _value_call("IntSlider", rf"\s*,\s*{_NUMBER}\s*,\s*{_NUMBER}\s*\)\s*;$"),
        _slider(ElementType.INT_SLIDER),
    ),
    _pattern(
        "toggle",
        rf"^(\w+)\s*=\s*(?:EditorGUILayout|EditorGUI|GUILayout)\.Toggle\s*\(\s*{_LABEL_ARG}\1\s*\)\s*;$",
        _toggle,
    ),
    _pattern("color-field", _value_call("ColorField"), _simple_field(ElementType.COLOR_FIELD)),
    _pattern("vector2-field", _value_call("Vector2Field"), _simple_field(ElementType.VECTOR2_FIELD)),
    _pattern("vector3-field", _value_call("Vector3Field"), _simple_field(ElementType.VECTOR3_FIELD)),
    _pattern(
        "object-field",
        rf"^(\w+)\s*=\s*(?:\(\s*([\w.]+)\s*\)\s*)?{_EDITOR_GUI}\.ObjectField\s*\(\s*{_LABEL_ARG}\1\s*,\s*"
        r"typeof\s*\(\s*([\w.]+)\s*\)\s*(?:,\s*(true|false)\s*)?\)\s*;$",
        _object_field,
    ),
    _pattern("layer-field", _value_call("LayerField"), _simple_field(ElementType.LAYER_FIELD)),
    _pattern("tag-field", _value_call("TagField"), _simple_field(ElementType.TAG_FIELD)),
    _pattern("curve-field", _value_call("CurveField"), _simple_field(ElementType.CURVE_FIELD)),
    _pattern("gradient-field", _value_call("GradientField"), _simple_field(ElementType.GRADIENT_FIELD)),
    _pattern(
        "help-box",
        rf"^EditorGUILayout\.HelpBox\s*\(\s*{STRING_LITERAL}\s*,\s*MessageType\.(\w+)\s*\)\s*;$",
        _help_box,
    ),
    _pattern("space", r"^(?:EditorGUILayout|GUILayout)\.Space\s*\(\s*(\d+)?\s*\)\s*;$", _space),
    _pattern(
        "separator",
        r'^EditorGUILayout\.LabelField\s*\(\s*""\s*,\s*GUI\.skin\.horizontalSlider\s*\)\s*;$',
        _separator,
    ),
    _pattern(
        "progress-bar",
        rf"^EditorGUI\.ProgressBar\s*\(.+,\s*(\w+)\s*,\s*{STRING_LITERAL}\s*\)\s*;$",
        _progress_bar,
    ),
    _pattern(
        "header",
        rf"^EditorGUILayout\.LabelField\s*\(\s*{STRING_LITERAL}\s*,\s*(.*EditorStyles\.boldLabel.*?)\s*\)\s*;$",
        _header,
    ),
    _pattern(
        "label",
        rf"^(?:GUILayout\.Label|EditorGUILayout\.LabelField)\s*\(\s*{STRING_LITERAL}\s*(?:,\s*(.+?))?\s*\)\s*;$",
        _label_field,
    ),
]


def match_call(line: str) -> Optional[UIElement]:
    """First element built from ``line`` by the call-shape table, or None."""
    for pattern in CALL_PATTERNS:
        match = pattern.regex.match(line)
        if match is None:
            continue
        element = pattern.builder(match, line)
        if element is not None:
            return element
    return None
