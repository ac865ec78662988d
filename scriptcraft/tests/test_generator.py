"""Tests for the C# generator: element rendering and class templates."""

import pytest

from scriptcraft.core.generator import UnknownClassKindError, generate_code, suggested_file_name
from scriptcraft.core.generator.declarations import (
    accessor_declarations,
    merge_using_statements,
    variable_declarations,
)
from scriptcraft.core.generator.renderer import action_code, gui_style_code, render_element, render_elements
from scriptcraft.core.generator.templates import get_template
from scriptcraft.core.model.factory import create_element, create_project, make_element
from scriptcraft.core.model.models import (
    ActionType,
    ClassKind,
    ElementType,
    FontStyle,
    TextAlignment,
)

EW = ClassKind.EDITOR_WINDOW


def _project(kind=EW, class_name="Foo"):
    project = create_project(class_name)
    project.class_kind = kind
    project.settings.class_name = class_name
    return project


def _text_field(var="userName"):
    element = create_element(ElementType.TEXT_FIELD)
    element.variable_name = var
    element.default_value = None
    return element


# =========================================================================
# Element rendering
# =========================================================================

class TestRenderDefaults:

    def test_toggle(self):
        element = create_element(ElementType.TOGGLE)
        var = element.variable_name
        assert render_element(element, 0, EW) == f'{var} = EditorGUILayout.Toggle("Toggle", {var});'
        assert variable_declarations([element], 0) == [f"private bool {var} = false;"]

    def test_slider(self):
        element = create_element(ElementType.SLIDER)
        var = element.variable_name
        assert render_element(element, 0, EW) == f'{var} = EditorGUILayout.Slider("Slider", {var}, 0f, 1f);'
        assert variable_declarations([element], 0) == [f"private float {var} = 0.5f;"]

    def test_object_field(self):
        element = create_element(ElementType.OBJECT_FIELD)
        var = element.variable_name
        assert render_element(element, 0, EW) == (
            f'{var} = (Object)EditorGUILayout.ObjectField("ObjectField", {var}, typeof(Object), true);'
        )
        assert variable_declarations([element], 0) == [f"private Object {var} = null;"]

    def test_text_field_without_default_is_empty_string(self):
        assert variable_declarations([_text_field()], 1) == ['    private string userName = "";']

    def test_string_default_is_quoted(self):
        element = _text_field()
        element.default_value = 'say "hi"'
        assert variable_declarations([element], 0) == ['private string userName = "say \\"hi\\"";']

    def test_popup_options(self):
        element = create_element(ElementType.POPUP)
        var = element.variable_name
        assert render_element(element, 0, EW) == (
            f'{var} = EditorGUILayout.Popup("Popup", {var}, new string[] {{ "Option 1", "Option 2", "Option 3" }});'
        )

    def test_display_elements_bind_no_variable(self):
        elements = [create_element(t) for t in (ElementType.LABEL, ElementType.SPACE, ElementType.BUTTON)]
        assert variable_declarations(elements, 0) == []

    def test_space_and_help_box(self):
        assert render_element(create_element(ElementType.SPACE), 0, EW) == "EditorGUILayout.Space(10);"
        assert render_element(create_element(ElementType.HELP_BOX), 0, EW) == (
            'EditorGUILayout.HelpBox("Enter a message here", MessageType.Info);'
        )

    def test_progress_bar_declaration(self):
        element = create_element(ElementType.PROGRESS_BAR)
        assert variable_declarations([element], 0) == [f"private float {element.variable_name} = 0.5f;"]

    def test_scroll_view_adds_scroll_position(self):
        scroll = create_element(ElementType.SCROLL_VIEW)
        assert variable_declarations([scroll], 0) == ["private Vector2 scrollPosition;"]

    def test_enum_popup_casts_to_enum_type(self):
        element = create_element(ElementType.ENUM_POPUP)
        var = element.variable_name
        assert render_element(element, 0, EW) == f'{var} = (Space)EditorGUILayout.EnumPopup("EnumPopup", {var});'
        assert variable_declarations([element], 0) == [f"private Space {var} = 0;"]

        element.object_type = "Mode"
        element.default_value = "Mode.Full"
        assert render_element(element, 0, EW) == f'{var} = (Mode)EditorGUILayout.EnumPopup("EnumPopup", {var});'
        assert variable_declarations([element], 0) == [f"private Mode {var} = Mode.Full;"]

    def test_shared_variable_declared_once(self):
        slider = create_element(ElementType.SLIDER)
        field = create_element(ElementType.FLOAT_FIELD)
        slider.variable_name = field.variable_name = "speed"
        assert variable_declarations([slider, field], 0) == ["private float speed = 0.5f;"]
        assert accessor_declarations([slider, field], 1) == ["    public float Speed => speed;"]

    def test_declared_names_are_skipped(self):
        toggle = create_element(ElementType.TOGGLE)
        toggle.variable_name = "bakeLights"
        scroll = create_element(ElementType.SCROLL_VIEW)
        scroll.children = [toggle]
        assert variable_declarations([scroll], 0, declared={"bakeLights", "scrollPosition"}) == []
        assert variable_declarations([scroll], 0, declared={"scrollPosition"}) == ["private bool bakeLights = false;"]


class TestRenderContainers:

    def test_box_with_two_labels(self):
        box = make_element(ElementType.BOX, "Box")
        box.children = [make_element(ElementType.LABEL, "One"), make_element(ElementType.LABEL, "Two")]

        lines = render_element(box, 2, EW).split("\n")

        assert lines == [
            '        EditorGUILayout.BeginVertical("box");',
            '            EditorGUILayout.LabelField("One");',
            '            EditorGUILayout.LabelField("Two");',
            "        EditorGUILayout.EndVertical();",
        ]

    def test_nested_groups(self):
        horizontal = make_element(ElementType.HORIZONTAL_GROUP, "Row")
        vertical = make_element(ElementType.VERTICAL_GROUP, "Column")
        vertical.children = [make_element(ElementType.SEPARATOR, "Separator")]
        horizontal.children = [vertical]

        assert render_element(horizontal, 0, EW).split("\n") == [
            "EditorGUILayout.BeginHorizontal();",
            "    EditorGUILayout.BeginVertical();",
            '        EditorGUILayout.LabelField("", GUI.skin.horizontalSlider);',
            "    EditorGUILayout.EndVertical();",
            "EditorGUILayout.EndHorizontal();",
        ]

    def test_foldout_guard(self):
        foldout = make_element(ElementType.FOLDOUT, "Advanced", "showAdvanced")
        foldout.children = [make_element(ElementType.LABEL, "Inside")]

        assert render_element(foldout, 0, EW).split("\n") == [
            'showAdvanced = EditorGUILayout.Foldout(showAdvanced, "Advanced", true);',
            "if (showAdvanced)",
            "{",
            "    EditorGUI.indentLevel++;",
            '    EditorGUILayout.LabelField("Inside");',
            "    EditorGUI.indentLevel--;",
            "}",
        ]

    def test_tab_group_cases_are_empty(self):
        tabs = make_element(ElementType.TAB_GROUP, "Tabs", "tab")
        tabs.tabs = ["General", "Advanced"]
        tabs.children = [make_element(ElementType.LABEL, "Never rendered")]

        text = render_element(tabs, 0, EW)

        assert 'tab = GUILayout.Toolbar(tab, new string[] { "General", "Advanced" });' in text
        assert "case 0: // General" in text
        assert "case 1: // Advanced" in text
        assert "Never rendered" not in text

    def test_disabled_group_condition(self):
        group = make_element(ElementType.DISABLED_GROUP, "Locked")
        group.disable_condition = "!isEditable"
        assert render_element(group, 0, EW).split("\n")[0] == "EditorGUI.BeginDisabledGroup(!isEditable);"

    def test_root_elements_separated_by_blank_line(self):
        elements = [make_element(ElementType.LABEL, "A"), make_element(ElementType.LABEL, "B")]
        assert render_elements(elements, 0, EW) == (
            'EditorGUILayout.LabelField("A");\n\nEditorGUILayout.LabelField("B");'
        )


class TestStyles:

    def test_size_then_alignment(self):
        label = make_element(ElementType.LABEL, "Title")
        label.font_size = 14
        label.text_alignment = TextAlignment.CENTER

        style = gui_style_code(label, "EditorStyles.label")

        assert style == "new GUIStyle(EditorStyles.label) { fontSize = 14, alignment = TextAnchor.MiddleCenter }"

    def test_normal_font_style_is_not_written(self):
        label = make_element(ElementType.LABEL, "Title")
        label.font_style = FontStyle.NORMAL
        assert gui_style_code(label, "EditorStyles.label") is None

    def test_all_three_initializers_in_order(self):
        button = make_element(ElementType.BUTTON, "Go")
        button.font_size = 12
        button.font_style = FontStyle.BOLD
        button.text_alignment = TextAlignment.LEFT
        assert gui_style_code(button, '"button"') == (
            'new GUIStyle("button") { fontSize = 12, fontStyle = FontStyle.Bold, alignment = TextAnchor.MiddleLeft }'
        )

    def test_box_style_name_replaces_base(self):
        box = make_element(ElementType.BOX, "Box")
        box.box_style = "window"
        assert render_element(box, 0, EW).split("\n")[0] == 'EditorGUILayout.BeginVertical("window");'

    def test_unstyleable_type(self):
        toggle = make_element(ElementType.TOGGLE, "On", "on")
        toggle.font_size = 20
        assert gui_style_code(toggle, "EditorStyles.toggle") is None


class TestButtonActions:

    def _button(self, action, param=None):
        button = make_element(ElementType.BUTTON, "Save")
        button.action = action
        button.action_param = param
        return button

    def test_no_action_writes_placeholder(self):
        text = render_element(self._button(ActionType.NONE), 0, EW)
        assert text.split("\n") == ['if (GUILayout.Button("Save"))', "{", "    // Button action", "}"]

    def test_debug_log_falls_back_to_label(self):
        assert action_code(self._button(ActionType.DEBUG_LOG), 0, EW) == 'Debug.Log("Save");'

    def test_set_dirty_target_depends_on_kind(self):
        button = self._button(ActionType.SET_DIRTY)
        assert action_code(button, 0, ClassKind.CUSTOM_EDITOR) == "EditorUtility.SetDirty(target);"
        assert action_code(button, 0, ClassKind.PROPERTY_DRAWER) == (
            "EditorUtility.SetDirty(property.serializedObject.targetObject);"
        )
        assert action_code(button, 0, EW) == "EditorUtility.SetDirty(this);"

    def test_custom_code_is_reindented(self):
        button = self._button(ActionType.CUSTOM_CODE, "if (ok)\n{\n    Run();\n}")
        assert action_code(button, 1, EW).split("\n") == ["    if (ok)", "    {", "        Run();", "    }"]

    def test_opaque_element_renders_verbatim(self):
        opaque = make_element(ElementType.BUTTON, "Custom Code")
        opaque.opaque = True
        opaque.action_param = "DrawCustomThing();"
        assert render_element(opaque, 2, EW) == "        DrawCustomThing();"


# =========================================================================
# Class templates
# =========================================================================

class TestTemplates:

    def test_editor_window_end_to_end(self):
        project = _project()
        project.elements = [_text_field()]

        code = generate_code(project)

        assert "public class Foo : EditorWindow" in code
        assert '    private string userName = "";' in code
        assert '        userName = EditorGUILayout.TextField("TextField", userName);' in code
        assert '[MenuItem("Tools/My Tool")]' in code
        assert 'GetWindow<Foo>("My Tool");' in code
        assert code.index("private void OnGUI()") < code.index("userName = EditorGUILayout")
        assert code.endswith("}\n")

    def test_empty_gui_placeholder(self):
        code = generate_code(_project())
        assert "// Add UI elements from the palette" in code

    def test_raw_body_used_when_no_elements(self):
        project = _project()
        project.raw_gui_method_body = "if (x)\n{\n    DoIt();\n}"
        code = generate_code(project)
        assert "        if (x)\n        {\n            DoIt();\n        }" in code

    def test_custom_editor(self):
        project = _project(ClassKind.CUSTOM_EDITOR, "SpawnerEditor")
        project.settings.target_type_name = "Spawner"
        project.elements = [make_element(ElementType.LABEL, "Hi")]

        code = generate_code(project)

        assert "[CustomEditor(typeof(Spawner))]\npublic class SpawnerEditor : Editor" in code
        assert "public override void OnInspectorGUI()" in code
        update = code.index("serializedObject.Update();")
        label = code.index('EditorGUILayout.LabelField("Hi");')
        apply = code.index("serializedObject.ApplyModifiedProperties();")
        assert update < label < apply

    def test_custom_editor_raw_body_is_not_wrapped(self):
        project = _project(ClassKind.CUSTOM_EDITOR)
        project.raw_gui_method_body = "DrawDefaultInspector();"
        assert "serializedObject.Update();" not in generate_code(project)

    def test_mono_behaviour(self):
        project = _project(ClassKind.MONO_BEHAVIOUR)
        project.settings.require_components = ["Rigidbody"]
        project.settings.add_help_url = True
        project.settings.help_url = "https://example.com/docs"
        toggle = make_element(ElementType.TOGGLE, "Active", "active")
        project.elements = [toggle]

        code = generate_code(project)

        assert code.startswith("using UnityEngine;\n\n")
        assert "UnityEditor" not in code
        assert '[RequireComponent(typeof(Rigidbody))]\n[HelpURL("https://example.com/docs")]\npublic class Foo : MonoBehaviour' in code
        assert "[SerializeField] private bool active = false;" in code
        assert "private void Start()" in code
        assert "// Per-frame logic" in code
        assert "OnGUI" not in code

    def test_mono_behaviour_keeps_preserved_lifecycle_instead_of_stubs(self):
        project = _project(ClassKind.MONO_BEHAVIOUR)
        project.lifecycle_methods = ["void Awake()\n{\n    Init();\n}"]
        code = generate_code(project)
        assert "// Initialization" not in code
        assert "    void Awake()\n    {\n        Init();\n    }" in code

    def test_scriptable_object(self):
        project = _project(ClassKind.SCRIPTABLE_OBJECT, "WaveData")
        project.elements = [make_element(ElementType.INT_FIELD, "Count", "count")]

        code = generate_code(project)

        assert '[CreateAssetMenu(fileName = "NewWaveData", menuName = "ScriptCraft/My Data")]' in code
        assert "[SerializeField] private int count = 0;" in code
        assert "public int Count => count;" in code

    def test_settings_provider(self):
        project = _project(ClassKind.SETTINGS_PROVIDER, "MySettings")
        project.settings.settings_path = "Project/My Settings"

        code = generate_code(project)

        assert "public MySettings(string path, SettingsScope scope = SettingsScope.User)" in code
        assert "        : base(path, scope) { }" in code
        assert "public override void OnGUI(string searchContext)" in code
        assert "[SettingsProvider]\n    public static SettingsProvider CreateMySettings()" in code
        assert 'return new MySettings("Project/My Settings");' in code
        assert code.index(": base(path, scope)") < code.index("OnGUI") < code.index("CreateMySettings")

    def test_property_drawer(self):
        project = _project(ClassKind.PROPERTY_DRAWER, "RangeDrawer")
        project.settings.target_attribute_name = "Range"

        code = generate_code(project)

        assert "public class RangeAttribute : PropertyAttribute\n{\n}" in code
        assert "[CustomPropertyDrawer(typeof(RangeAttribute))]\npublic class RangeDrawer : PropertyDrawer" in code
        assert "EditorGUI.BeginProperty(position, label, property);" in code
        assert "EditorGUI.EndProperty();" in code

    def test_property_drawer_marker_skipped_when_preserved(self):
        project = _project(ClassKind.PROPERTY_DRAWER, "RangeDrawer")
        project.settings.target_attribute_name = "Range"
        project.outer_code = ["public class RangeAttribute : PropertyAttribute\n{\n    public float min;\n}"]

        code = generate_code(project)

        assert code.count("class RangeAttribute") == 1
        assert "public float min;" in code

    def test_namespace_indents_class(self):
        project = _project()
        project.settings.namespace_name = "Studio.Tools"
        code = generate_code(project)
        assert "namespace Studio.Tools\n{\n    public class Foo : EditorWindow\n    {" in code
        assert code.endswith("    }\n}\n")

    def test_interfaces_and_class_attributes(self):
        project = _project()
        project.settings.interfaces = ["IHasCustomMenu"]
        project.settings.class_attributes = ["[System.Serializable]"]
        code = generate_code(project)
        assert "[System.Serializable]\npublic class Foo : EditorWindow, IHasCustomMenu" in code

    def test_preserved_sections_order(self):
        project = _project()
        project.field_declarations = ["private int counter;"]
        project.inner_types = ["private enum Mode { A, B }"]
        project.lifecycle_methods = ["private void OnEnable()\n{\n}"]
        project.custom_methods = ["private void Helper()\n{\n}"]
        project.outer_code = ["public class Extra\n{\n}"]

        code = generate_code(project)

        order = [
            "// === Preserved field declarations ===",
            "private int counter;",
            "// === Preserved inner types ===",
            "private enum Mode { A, B }",
            "private void OnGUI()",
            "private void OnEnable()",
            "private void Helper()",
            "// === Preserved outer code ===",
            "public class Extra",
        ]
        positions = [code.index(marker) for marker in order]
        assert positions == sorted(positions)

    def test_suggested_file_name(self):
        assert suggested_file_name(_project(class_name="Baker")) == "Baker.cs"


class TestUsings:

    def test_preserved_first_then_missing_defaults(self):
        project = _project()
        project.using_statements = ["using System.Linq;", "using UnityEngine;"]
        assert merge_using_statements(project, ["using UnityEditor;", "using UnityEngine;"]) == [
            "using System.Linq;",
            "using UnityEngine;",
            "using UnityEditor;",
        ]


class TestRegistry:

    def test_lookup_by_value(self):
        assert get_template("CustomEditor").kind == ClassKind.CUSTOM_EDITOR

    def test_unknown_kind(self):
        with pytest.raises(UnknownClassKindError):
            get_template("GraphView")

    def test_unknown_kind_is_value_error(self):
        with pytest.raises(ValueError):
            get_template("GraphView")
