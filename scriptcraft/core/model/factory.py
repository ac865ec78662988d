"""Element catalogue and type-driven defaults.

Elements are created on demand (a palette click in the editor) and carry
defaults chosen by their type tag.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import List, Optional
from uuid import uuid4

from .models import (
    ActionType,
    ElementCategory,
    ElementType,
    HelpBoxType,
    ProjectSettings,
    ScriptProject,
    UIElement,
)


@dataclass(frozen=True)
class ElementDefinition:
    type: ElementType
    display_name: str
    category: ElementCategory
    description: str
    has_children: bool = False


_INPUT = ElementCategory.INPUT
_DISPLAY = ElementCategory.DISPLAY
_LAYOUT = ElementCategory.LAYOUT

ELEMENT_DEFINITIONS: List[ElementDefinition] = [
    # Input
    ElementDefinition(ElementType.BUTTON, "Button", _INPUT, "Clickable button"),
    ElementDefinition(ElementType.TEXT_FIELD, "Text Field", _INPUT, "Single-line text input"),
    ElementDefinition(ElementType.TEXT_AREA, "Text Area", _INPUT, "Multi-line text input"),
    ElementDefinition(ElementType.INT_FIELD, "Int Field", _INPUT, "Integer input"),
    ElementDefinition(ElementType.FLOAT_FIELD, "Float Field", _INPUT, "Floating point input"),
    ElementDefinition(ElementType.SLIDER, "Slider", _INPUT, "Float slider with range"),
    ElementDefinition(ElementType.INT_SLIDER, "Int Slider", _INPUT, "Integer slider with range"),
    ElementDefinition(ElementType.TOGGLE, "Toggle", _INPUT, "On/off switch"),
    ElementDefinition(ElementType.COLOR_FIELD, "Color", _INPUT, "Color picker"),
    ElementDefinition(ElementType.VECTOR2_FIELD, "Vector2", _INPUT, "2D vector input"),
    ElementDefinition(ElementType.VECTOR3_FIELD, "Vector3", _INPUT, "3D vector input"),
    ElementDefinition(ElementType.OBJECT_FIELD, "Object Reference", _INPUT, "Asset or scene object reference"),
    ElementDefinition(ElementType.ENUM_POPUP, "Enum Popup", _INPUT, "Dropdown over an enum"),
    ElementDefinition(ElementType.POPUP, "Popup", _INPUT, "Dropdown over a string list"),
    ElementDefinition(ElementType.LAYER_FIELD, "Layer", _INPUT, "Layer selector"),
    ElementDefinition(ElementType.TAG_FIELD, "Tag", _INPUT, "Tag selector"),
    ElementDefinition(ElementType.CURVE_FIELD, "Curve", _INPUT, "Animation curve"),
    ElementDefinition(ElementType.GRADIENT_FIELD, "Gradient", _INPUT, "Gradient editor"),
    # Display
    ElementDefinition(ElementType.LABEL, "Label", _DISPLAY, "Text label"),
    ElementDefinition(ElementType.HELP_BOX, "Help Box", _DISPLAY, "Info / warning / error message"),
    ElementDefinition(ElementType.SPACE, "Space", _DISPLAY, "Vertical spacing"),
    ElementDefinition(ElementType.SEPARATOR, "Separator", _DISPLAY, "Horizontal rule"),
    ElementDefinition(ElementType.HEADER, "Header", _DISPLAY, "Section heading"),
    ElementDefinition(ElementType.PROGRESS_BAR, "Progress Bar", _DISPLAY, "Progress display"),
    # Layout
    ElementDefinition(ElementType.HORIZONTAL_GROUP, "Horizontal Group", _LAYOUT, "Side-by-side layout", True),
    ElementDefinition(ElementType.VERTICAL_GROUP, "Vertical Group", _LAYOUT, "Stacked layout", True),
    ElementDefinition(ElementType.FOLDOUT, "Foldout", _LAYOUT, "Collapsible section", True),
    ElementDefinition(ElementType.SCROLL_VIEW, "Scroll View", _LAYOUT, "Scrollable area", True),
    ElementDefinition(ElementType.DISABLED_GROUP, "Disabled Group", _LAYOUT, "Conditionally disabled area", True),
    ElementDefinition(ElementType.BOX, "Box", _LAYOUT, "Framed group", True),
    ElementDefinition(ElementType.TAB_GROUP, "Tab Group", _LAYOUT, "Tab switcher", True),
]

LAYOUT_TYPES = frozenset(d.type for d in ELEMENT_DEFINITIONS if d.has_children)


def is_layout(element_type: ElementType) -> bool:
    """True for types whose elements own a ``children`` list."""
    return element_type in LAYOUT_TYPES


def now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def make_element(element_type: ElementType, label: str, variable_name: str = "") -> UIElement:
    """Bare element with no type-driven defaults (used by the parser).

    Layout types still get an empty ``children`` list.
    """
    return UIElement(
        type=element_type,
        label=label,
        variable_name=variable_name,
        children=[] if is_layout(element_type) else None,
    )


def create_element(element_type: ElementType) -> UIElement:
    """Create a new element with the defaults documented for its type."""
    element_id = str(uuid4())
    tag = element_type.value
    element = UIElement(
        id=element_id,
        type=element_type,
        label=tag,
        variable_name=f"{tag[0].lower()}{tag[1:]}_{element_id[:4]}",
    )

    if element_type in (ElementType.TEXT_FIELD, ElementType.TEXT_AREA):
        element.default_value = ""
    elif element_type == ElementType.INT_FIELD:
        element.default_value = "0"
    elif element_type == ElementType.FLOAT_FIELD:
        element.default_value = "0f"
    elif element_type == ElementType.SLIDER:
        element.min_value = 0
        element.max_value = 1
        element.default_value = "0.5f"
    elif element_type == ElementType.INT_SLIDER:
        element.min_value = 0
        element.max_value = 100
        element.default_value = "50"
    elif element_type == ElementType.TOGGLE:
        element.default_value = "false"
    elif element_type == ElementType.COLOR_FIELD:
        element.default_value = "Color.white"
    elif element_type == ElementType.VECTOR2_FIELD:
        element.default_value = "Vector2.zero"
    elif element_type == ElementType.VECTOR3_FIELD:
        element.default_value = "Vector3.zero"
    elif element_type == ElementType.OBJECT_FIELD:
        element.object_type = "Object"
        element.allow_scene_objects = True
    elif element_type == ElementType.SPACE:
        element.space_height = 10
    elif element_type == ElementType.HELP_BOX:
        element.help_box_type = HelpBoxType.INFO
        element.default_value = "Enter a message here"
    elif element_type == ElementType.HEADER:
        element.header_text = "Section"
    elif element_type == ElementType.PROGRESS_BAR:
        element.progress_value = 0.5
    elif element_type == ElementType.POPUP:
        element.popup_options = ["Option 1", "Option 2", "Option 3"]
        element.default_value = "0"
    elif element_type == ElementType.BUTTON:
        element.action = ActionType.NONE
    elif element_type == ElementType.TAB_GROUP:
        element.tabs = ["Tab 1", "Tab 2"]
    elif element_type == ElementType.DISABLED_GROUP:
        element.disable_condition = "false"
    elif element_type == ElementType.FOLDOUT:
        element.foldout_default = True

    if is_layout(element_type):
        element.children = []

    return element


def create_default_settings() -> ProjectSettings:
    return ProjectSettings()


def create_project(name: Optional[str] = None) -> ScriptProject:
    """Create an empty EditorWindow project with default settings."""
    timestamp = now_iso()
    return ScriptProject(
        name=name if name is not None else "New Project",
        settings=create_default_settings(),
        created_at=timestamp,
        updated_at=timestamp,
    )
