"""Generate and parse routes.

Thin wrappers over the core: the request body carries the persisted
project form, so the API holds no per-user state.
"""

import logging

from fastapi import APIRouter, HTTPException

from scriptcraft.core.cs_parser import check_syntax, parse_csharp_file, parse_csharp_folder
from scriptcraft.core.generator import UnknownClassKindError, generate_code, suggested_file_name
from scriptcraft.core.model.factory import create_element
from scriptcraft.core.model.models import ElementType
from scriptcraft.core.model.serialization import (
    ProjectLoadError,
    element_to_dict,
    project_from_dict,
    project_to_dict,
)
from ..schemas import (
    ElementResponse,
    FolderParseRequest,
    GenerateRequest,
    GenerateResponse,
    ParseRequest,
    ParseResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["scripts"])


@router.post("/generate", response_model=GenerateResponse)
async def generate(data: GenerateRequest):
    """Render a project to C#."""
    try:
        project = project_from_dict(data.project)
        code = generate_code(project)
    except (ProjectLoadError, UnknownClassKindError) as e:
        logger.warning(f"Generate rejected: {e}")
        raise HTTPException(status_code=400, detail=str(e))

    return GenerateResponse(
        success=True,
        file_name=suggested_file_name(project),
        code=code,
        syntax_warnings=check_syntax(code),
    )


@router.post("/parse", response_model=ParseResponse)
async def parse(data: ParseRequest):
    """Recover a project from one C# file."""
    result = parse_csharp_file(data.file_name, data.content)
    return ParseResponse(success=True, project=project_to_dict(result.project), warnings=result.warnings)


@router.post("/parse-folder", response_model=ParseResponse)
async def parse_folder(data: FolderParseRequest):
    """Recover a project from several files; the best-scoring one is primary."""
    result = parse_csharp_folder([(f.name, f.content) for f in data.files])
    return ParseResponse(success=True, project=project_to_dict(result.project), warnings=result.warnings)


@router.get("/elements/{element_type}/default", response_model=ElementResponse)
async def default_element(element_type: str):
    """Return a new element of the given type with its defaults."""
    try:
        kind = ElementType(element_type)
    except ValueError:
        raise HTTPException(status_code=404, detail=f"Unknown element type: {element_type}")
    return ElementResponse(success=True, element=element_to_dict(create_element(kind)))
