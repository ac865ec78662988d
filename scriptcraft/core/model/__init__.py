"""ScriptCraft document model: data types, defaults, tree edits, persistence."""

from .factory import (
    ELEMENT_DEFINITIONS,
    create_default_settings,
    create_element,
    create_project,
    is_layout,
)
from .models import (
    ActionType,
    ClassKind,
    ElementCategory,
    ElementType,
    FontStyle,
    HelpBoxType,
    ProjectSettings,
    ScriptProject,
    SettingsScope,
    TextAlignment,
    UIElement,
)
from .serialization import ProjectLoadError, dump_project, load_project

__all__ = [
    "ActionType",
    "ClassKind",
    "ElementCategory",
    "ElementType",
    "FontStyle",
    "HelpBoxType",
    "ProjectSettings",
    "ScriptProject",
    "SettingsScope",
    "TextAlignment",
    "UIElement",
    "ELEMENT_DEFINITIONS",
    "create_default_settings",
    "create_element",
    "create_project",
    "is_layout",
    "ProjectLoadError",
    "dump_project",
    "load_project",
]
