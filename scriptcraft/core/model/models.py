"""Document model for ScriptCraft projects.

Defines the tree/record types shared by the code generator and the C# parser.
These are pure data containers with no rendering or parsing logic.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional
from uuid import uuid4


class ClassKind(Enum):
    """Supported output-class shapes, each with its own template."""
    EDITOR_WINDOW = "EditorWindow"
    CUSTOM_EDITOR = "CustomEditor"
    MONO_BEHAVIOUR = "MonoBehaviour"
    SCRIPTABLE_OBJECT = "ScriptableObject"
    SETTINGS_PROVIDER = "SettingsProvider"
    PROPERTY_DRAWER = "PropertyDrawer"


class ElementCategory(Enum):
    INPUT = "input"
    DISPLAY = "display"
    LAYOUT = "layout"


class ElementType(Enum):
    """Type tag of a UI element; controls its rendering and recovery shape."""
    # Input
    BUTTON = "Button"
    TEXT_FIELD = "TextField"
    TEXT_AREA = "TextArea"
    INT_FIELD = "IntField"
    FLOAT_FIELD = "FloatField"
    SLIDER = "Slider"
    INT_SLIDER = "IntSlider"
    TOGGLE = "Toggle"
    COLOR_FIELD = "ColorField"
    VECTOR2_FIELD = "Vector2Field"
    VECTOR3_FIELD = "Vector3Field"
    OBJECT_FIELD = "ObjectField"
    ENUM_POPUP = "EnumPopup"
    POPUP = "Popup"
    LAYER_FIELD = "LayerField"
    TAG_FIELD = "TagField"
    CURVE_FIELD = "CurveField"
    GRADIENT_FIELD = "GradientField"
    # Display
    LABEL = "Label"
    HELP_BOX = "HelpBox"
    SPACE = "Space"
    SEPARATOR = "Separator"
    HEADER = "Header"
    PROGRESS_BAR = "ProgressBar"
    # Layout
    HORIZONTAL_GROUP = "HorizontalGroup"
    VERTICAL_GROUP = "VerticalGroup"
    FOLDOUT = "Foldout"
    SCROLL_VIEW = "ScrollView"
    DISABLED_GROUP = "DisabledGroup"
    BOX = "Box"
    TAB_GROUP = "TabGroup"


class ActionType(Enum):
    """What a Button does when clicked."""
    NONE = "none"
    DEBUG_LOG = "debugLog"
    DISPLAY_DIALOG = "displayDialog"
    REPAINT = "repaint"
    SET_DIRTY = "setDirty"
    UNDO_RECORD = "undoRecord"
    CUSTOM_CODE = "customCode"


class HelpBoxType(Enum):
    NONE = "None"
    INFO = "Info"
    WARNING = "Warning"
    ERROR = "Error"


class FontStyle(Enum):
    NORMAL = "Normal"
    BOLD = "Bold"
    ITALIC = "Italic"
    BOLD_ITALIC = "BoldItalic"


class TextAlignment(Enum):
    LEFT = "Left"
    CENTER = "Center"
    RIGHT = "Right"


class SettingsScope(Enum):
    USER = "User"
    PROJECT = "Project"


@dataclass
class UIElement:
    """One node of the UI tree.

    ``children`` is a list only for layout-category types and ``None`` for
    every other type. A parent exclusively owns its children list.
    Elements flagged ``opaque`` are placeholders holding unrecognised code
    verbatim in ``action_param``.
    """
    type: ElementType
    label: str
    variable_name: str = ""
    id: str = field(default_factory=lambda: str(uuid4()))
    # Values
    default_value: Optional[str] = None
    min_value: Optional[float] = None
    max_value: Optional[float] = None
    # Button
    action: Optional[ActionType] = None
    action_param: Optional[str] = None
    # HelpBox
    help_box_type: Optional[HelpBoxType] = None
    # ObjectField / EnumPopup
    object_type: Optional[str] = None
    allow_scene_objects: Optional[bool] = None
    # Space
    space_height: Optional[int] = None
    # Foldout
    foldout_default: Optional[bool] = None
    # Layout
    children: Optional[List["UIElement"]] = None
    # Popup
    popup_options: Optional[List[str]] = None
    # ProgressBar
    progress_value: Optional[float] = None
    # TabGroup
    tabs: Optional[List[str]] = None
    # DisabledGroup
    disable_condition: Optional[str] = None
    # Header
    header_text: Optional[str] = None
    # Style (Box, Label, Header, Button, TextField, TextArea)
    font_size: Optional[int] = None
    font_style: Optional[FontStyle] = None
    text_alignment: Optional[TextAlignment] = None
    box_style: Optional[str] = None  # GUIStyle name: "box", "window", "button", ...
    opaque: bool = False


@dataclass
class ProjectSettings:
    """Class-kind-specific configuration.

    Every field exists regardless of class kind; the templates pick the ones
    they render.
    """
    class_name: str = "MyTool"
    menu_path: str = "Tools/My Tool"
    window_title: str = "My Tool"
    target_type_name: str = ""  # CustomEditor
    settings_path: str = "Preferences/My Settings"  # SettingsProvider
    settings_scope: SettingsScope = SettingsScope.USER
    target_attribute_name: str = "MyAttribute"  # PropertyDrawer
    create_menu_path: str = "ScriptCraft/My Data"  # ScriptableObject
    require_components: List[str] = field(default_factory=list)  # MonoBehaviour
    namespace_name: str = ""
    add_help_url: bool = False
    help_url: str = ""
    interfaces: List[str] = field(default_factory=list)
    class_attributes: List[str] = field(default_factory=list)


@dataclass
class ScriptProject:
    """The complete document: settings, element tree and preserved C# fragments.

    At most one of ``elements`` / ``raw_gui_method_body`` is the authoritative
    content of the GUI method: the raw body is only rendered when
    ``elements`` is empty.
    """
    name: str
    id: str = field(default_factory=lambda: str(uuid4()))
    class_kind: ClassKind = ClassKind.EDITOR_WINDOW
    settings: ProjectSettings = field(default_factory=ProjectSettings)
    elements: List[UIElement] = field(default_factory=list)
    created_at: str = ""
    updated_at: str = ""
    # Preserved C# code
    using_statements: List[str] = field(default_factory=list)
    field_declarations: List[str] = field(default_factory=list)
    custom_methods: List[str] = field(default_factory=list)
    inner_types: List[str] = field(default_factory=list)
    lifecycle_methods: List[str] = field(default_factory=list)
    outer_code: List[str] = field(default_factory=list)
    raw_gui_method_body: str = ""
