"""Class-kind templates.

Defines the Strategy base class that every class-kind template implements.
The shared skeleton (imports, namespace, class header, body section order,
outer code) lives in ``ClassTemplate.render``; subclasses contribute the
kind-specific attributes and members.
"""

import logging
import re
from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Union

from ..model.models import ClassKind, ProjectSettings, ScriptProject, SettingsScope
from ..utils.csharp_text import csharp_string, indent, reindent
from .declarations import (
    accessor_declarations,
    declared_field_names,
    merge_using_statements,
    outer_code,
    preserved_declarations,
    preserved_methods,
    variable_declarations,
)
from .renderer import render_elements

logger = logging.getLogger(__name__)

EDITOR_USINGS = ["using UnityEditor;", "using UnityEngine;"]
RUNTIME_USINGS = ["using UnityEngine;"]
EMPTY_GUI_COMMENT = "// Add UI elements from the palette"


class UnknownClassKindError(ValueError):
    """Raised when no template is registered for a class kind."""


def is_raw_body_mode(project: ScriptProject) -> bool:
    return not project.elements and bool(project.raw_gui_method_body.strip())


def gui_method_content(project: ScriptProject, level: int) -> str:
    """Rendered element tree, or the raw body when there are no elements."""
    if project.elements:
        return render_elements(project.elements, level, project.class_kind)
    if is_raw_body_mode(project):
        return reindent(project.raw_gui_method_body, level)
    return f"{indent(level)}{EMPTY_GUI_COMMENT}"


def _block(signature: str, body: List[str], level: int) -> str:
    ind = indent(level)
    return "\n".join([f"{ind}{signature}", f"{ind}{{"] + body + [f"{ind}}}"])


class ClassTemplate(ABC):
    """Abstract base for the six class-kind templates.

    Subclasses implement:
    - kind / base_class: the class kind served and the C# base type
    - kind_attributes(): attribute lines emitted above the class header

    and may override the member hooks (leading_members, members_before_gui,
    members_after_gui) or the GUI method shape.
    """

    kind: ClassKind
    base_class: str
    default_usings: List[str] = EDITOR_USINGS
    # None means the class has no GUI-producing method.
    gui_signature: Optional[str] = None
    serialized_fields: bool = False
    # Emits one read-only accessor per backing variable
    emits_accessors: bool = False

    @abstractmethod
    def kind_attributes(self, settings: ProjectSettings) -> List[str]:
        """Attribute lines (without indentation) placed above the class header."""
        ...

    def leading_types(self, project: ScriptProject, level: int) -> List[str]:
        return []

    def leading_members(self, project: ScriptProject, level: int) -> List[str]:
        return []

    def field_members(self, project: ScriptProject, level: int) -> List[str]:
        lines = variable_declarations(
            project.elements,
            level,
            serialized=self.serialized_fields,
            declared=declared_field_names(project.field_declarations),
        )
        return ["\n".join(lines)] if lines else []

    def members_before_gui(self, project: ScriptProject, level: int) -> List[str]:
        return []

    def members_after_gui(self, project: ScriptProject, level: int) -> List[str]:
        return []

    def gui_prologue(self) -> List[str]:
        return []

    def gui_epilogue(self) -> List[str]:
        return []

    def gui_method(self, project: ScriptProject, level: int) -> List[str]:
        if self.gui_signature is None:
            return []
        inner = indent(level + 1)
        body: List[str] = []
        wrap = not is_raw_body_mode(project)
        if wrap and self.gui_prologue():
            body.extend(f"{inner}{line}" for line in self.gui_prologue())
            body.append("")
        body.append(gui_method_content(project, level + 1))
        if wrap and self.gui_epilogue():
            body.append("")
            body.extend(f"{inner}{line}" for line in self.gui_epilogue())
        return [_block(self.gui_signature, body, level)]

    def class_header(self, settings: ProjectSettings) -> str:
        header = f"public class {settings.class_name} : {self.base_class}"
        if settings.interfaces:
            header += ", " + ", ".join(settings.interfaces)
        return header

    def render(self, project: ScriptProject) -> str:
        """Assemble the complete source text for ``project``."""
        settings = project.settings
        lines: List[str] = list(merge_using_statements(project, self.default_usings))
        lines.append("")

        level = 0
        if settings.namespace_name:
            lines.append(f"namespace {settings.namespace_name}")
            lines.append("{")
            level = 1
        ind = indent(level)

        leading = self.leading_types(project, level)
        if leading:
            lines.extend(leading)
            lines.append("")

        for attribute in self.kind_attributes(settings) + list(settings.class_attributes):
            lines.append(f"{ind}{attribute}")
        lines.append(f"{ind}{self.class_header(settings)}")
        lines.append(f"{ind}{{")

        member_level = level + 1
        sections: List[str] = []
        sections += self.leading_members(project, member_level)
        sections += self.field_members(project, member_level)
        sections += preserved_declarations(project, member_level)
        sections += self.members_before_gui(project, member_level)
        sections += self.gui_method(project, member_level)
        sections += preserved_methods(project, member_level)
        sections += self.members_after_gui(project, member_level)
        if sections:
            lines.append("\n\n".join(sections))

        lines.append(f"{ind}}}")
        if settings.namespace_name:
            lines.append("}")

        trailing = outer_code(project)
        if trailing:
            lines.append("")
            lines.append(trailing)

        return "\n".join(lines) + "\n"


class EditorWindowTemplate(ClassTemplate):
    kind = ClassKind.EDITOR_WINDOW
    base_class = "EditorWindow"
    gui_signature = "private void OnGUI()"

    def kind_attributes(self, settings: ProjectSettings) -> List[str]:
        return []

    def leading_members(self, project: ScriptProject, level: int) -> List[str]:
        settings = project.settings
        show_window = _block(
            "public static void ShowWindow()",
            [f"{indent(level + 1)}GetWindow<{settings.class_name}>({csharp_string(settings.window_title)});"],
            level,
        )
        return [f"{indent(level)}[MenuItem({csharp_string(settings.menu_path)})]\n{show_window}"]


class CustomEditorTemplate(ClassTemplate):
    kind = ClassKind.CUSTOM_EDITOR
    base_class = "Editor"
    gui_signature = "public override void OnInspectorGUI()"

    def kind_attributes(self, settings: ProjectSettings) -> List[str]:
        return [f"[CustomEditor(typeof({settings.target_type_name or 'MonoBehaviour'}))]"]

    def gui_prologue(self) -> List[str]:
        return ["serializedObject.Update();"]

    def gui_epilogue(self) -> List[str]:
        return ["serializedObject.ApplyModifiedProperties();"]


class MonoBehaviourTemplate(ClassTemplate):
    kind = ClassKind.MONO_BEHAVIOUR
    base_class = "MonoBehaviour"
    default_usings = RUNTIME_USINGS
    serialized_fields = True

    def kind_attributes(self, settings: ProjectSettings) -> List[str]:
        attributes = [f"[RequireComponent(typeof({component}))]" for component in settings.require_components]
        if settings.add_help_url and settings.help_url:
            attributes.append(f"[HelpURL({csharp_string(settings.help_url)})]")
        return attributes

    def members_after_gui(self, project: ScriptProject, level: int) -> List[str]:
        if project.lifecycle_methods:
            return []
        inner = indent(level + 1)
        return [
            _block("private void Start()", [f"{inner}// Initialization"], level),
            _block("private void Update()", [f"{inner}// Per-frame logic"], level),
        ]


class ScriptableObjectTemplate(ClassTemplate):
    kind = ClassKind.SCRIPTABLE_OBJECT
    base_class = "ScriptableObject"
    default_usings = RUNTIME_USINGS
    serialized_fields = True
    emits_accessors = True

    def kind_attributes(self, settings: ProjectSettings) -> List[str]:
        menu_name = settings.create_menu_path or f"ScriptCraft/{settings.class_name}"
        return [
            f'[CreateAssetMenu(fileName = "New{settings.class_name}", menuName = {csharp_string(menu_name)})]'
        ]

    def members_after_gui(self, project: ScriptProject, level: int) -> List[str]:
        declared = declared_field_names(project.field_declarations)
        accessors = accessor_declarations(project.elements, level, declared)
        return ["\n".join(accessors)] if accessors else []


class SettingsProviderTemplate(ClassTemplate):
    kind = ClassKind.SETTINGS_PROVIDER
    base_class = "SettingsProvider"
    gui_signature = "public override void OnGUI(string searchContext)"

    def kind_attributes(self, settings: ProjectSettings) -> List[str]:
        return []

    def members_before_gui(self, project: ScriptProject, level: int) -> List[str]:
        settings = project.settings
        scope = (settings.settings_scope or SettingsScope.USER).value
        ind = indent(level)
        return [
            f"{ind}public {settings.class_name}(string path, SettingsScope scope = SettingsScope.{scope})\n"
            f"{indent(level + 1)}: base(path, scope) {{ }}"
        ]

    def members_after_gui(self, project: ScriptProject, level: int) -> List[str]:
        settings = project.settings
        path = settings.settings_path or f"Preferences/{settings.class_name}"
        factory = _block(
            f"public static SettingsProvider Create{settings.class_name}()",
            [f"{indent(level + 1)}return new {settings.class_name}({csharp_string(path)});"],
            level,
        )
        return [f"{indent(level)}[SettingsProvider]\n{factory}"]


class PropertyDrawerTemplate(ClassTemplate):
    kind = ClassKind.PROPERTY_DRAWER
    base_class = "PropertyDrawer"
    gui_signature = "public override void OnGUI(Rect position, SerializedProperty property, GUIContent label)"

    @staticmethod
    def attribute_type_name(settings: ProjectSettings) -> str:
        return f"{settings.target_attribute_name or 'MyAttribute'}Attribute"

    def kind_attributes(self, settings: ProjectSettings) -> List[str]:
        return [f"[CustomPropertyDrawer(typeof({self.attribute_type_name(settings)}))]"]

    def leading_types(self, project: ScriptProject, level: int) -> List[str]:
        name = self.attribute_type_name(project.settings)
        # A hand-written attribute class carried in the outer code replaces the marker.
        if any(re.search(rf"\bclass\s+{re.escape(name)}\b", fragment) for fragment in project.outer_code):
            return []
        return [_block(f"public class {name} : PropertyAttribute", [], level)]

    def gui_prologue(self) -> List[str]:
        return ["EditorGUI.BeginProperty(position, label, property);"]

    def gui_epilogue(self) -> List[str]:
        return ["EditorGUI.EndProperty();"]


# Template registry, populated on first use
_template_registry: Dict[ClassKind, ClassTemplate] = {}


def get_template(kind: Union[ClassKind, str]) -> ClassTemplate:
    """Get the template for a class kind.

    Args:
        kind: A ClassKind or its string value (e.g. 'EditorWindow')

    Returns:
        ClassTemplate instance

    Raises:
        UnknownClassKindError: If no template serves the kind
    """
    if not _template_registry:
        for template_cls in (
            EditorWindowTemplate,
            CustomEditorTemplate,
            MonoBehaviourTemplate,
            ScriptableObjectTemplate,
            SettingsProviderTemplate,
            PropertyDrawerTemplate,
        ):
            _template_registry[template_cls.kind] = template_cls()

    try:
        return _template_registry[ClassKind(kind)]
    except (ValueError, KeyError):
        raise UnknownClassKindError(
            f"Unsupported class kind: {kind}. Supported: {[k.value for k in ClassKind]}"
        ) from None
