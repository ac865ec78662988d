"""Code generator: ScriptProject -> C# source text.

Example:
    from scriptcraft.core.generator import generate_code
    source = generate_code(project)
"""

import logging

from ..model.models import ScriptProject
from .templates import UnknownClassKindError, get_template

logger = logging.getLogger(__name__)

__all__ = ["UnknownClassKindError", "generate_code", "suggested_file_name"]


def generate_code(project: ScriptProject) -> str:
    """Render the complete C# class for a project.

    Args:
        project: Document to render

    Returns:
        Source text of one class file

    Raises:
        UnknownClassKindError: If the project's class kind has no template
    """
    template = get_template(project.class_kind)
    source = template.render(project)
    logger.info(
        f"Generated {project.class_kind.value} '{project.settings.class_name}': "
        f"{len(project.elements)} root elements, {len(source.splitlines())} lines"
    )
    return source


def suggested_file_name(project: ScriptProject) -> str:
    return f"{project.settings.class_name or 'MyTool'}.cs"
