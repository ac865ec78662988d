"""Lossless persisted form of a ScriptProject.

``dump_project`` / ``load_project`` round-trip a project exactly (deep
equality), independent of the C# generator. Validation is delegated to a
pydantic ``TypeAdapter`` over the model dataclasses, so older exports with
missing fields load with the dataclass defaults.
"""

import logging
from typing import Any, Dict

from pydantic import TypeAdapter, ValidationError

from .factory import is_layout
from .models import ScriptProject, UIElement

logger = logging.getLogger(__name__)

_PROJECT_ADAPTER = TypeAdapter(ScriptProject)
_ELEMENT_ADAPTER = TypeAdapter(UIElement)


class ProjectLoadError(ValueError):
    """The input cannot be read as a project. Fatal to the caller."""


def project_to_dict(project: ScriptProject) -> Dict[str, Any]:
    """JSON-compatible dict (enums as their string values)."""
    return _PROJECT_ADAPTER.dump_python(project, mode="json")


def project_from_dict(data: Any) -> ScriptProject:
    try:
        project = _PROJECT_ADAPTER.validate_python(data)
    except ValidationError as e:
        raise ProjectLoadError(f"Invalid project data: {e.error_count()} validation error(s)\n{e}") from e
    _check_children(project.elements)
    return project


def dump_project(project: ScriptProject, indent: int = 2) -> str:
    return _PROJECT_ADAPTER.dump_json(project, indent=indent).decode("utf-8")


def load_project(text: str) -> ScriptProject:
    """Parse a persisted project.

    Raises:
        ProjectLoadError: on malformed JSON, schema mismatch or an element
            tree where a non-layout element has children.
    """
    try:
        project = _PROJECT_ADAPTER.validate_json(text)
    except ValidationError as e:
        raise ProjectLoadError(f"Invalid project file: {e.error_count()} validation error(s)\n{e}") from e
    _check_children(project.elements)
    logger.debug(f"Loaded project {project.name!r} ({len(project.elements)} root elements)")
    return project


def element_to_dict(element: UIElement) -> Dict[str, Any]:
    return _ELEMENT_ADAPTER.dump_python(element, mode="json")


def _check_children(elements) -> None:
    for element in elements:
        if is_layout(element.type):
            if element.children is None:
                element.children = []
            _check_children(element.children)
        elif element.children is not None:
            raise ProjectLoadError(
                f"Element {element.id} of type {element.type.value} cannot have children"
            )


__all__ = [
    "ProjectLoadError",
    "dump_project",
    "load_project",
    "project_to_dict",
    "project_from_dict",
    "element_to_dict",
]
