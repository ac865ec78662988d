"""Generate/parse request and response schemas."""

from typing import List, Optional

from pydantic import BaseModel, Field


class GenerateRequest(BaseModel):
    """Generate C# from a persisted project."""
    project: dict = Field(..., description="Project in its persisted JSON form")


class GenerateResponse(BaseModel):
    success: bool = Field(..., description="Whether request succeeded")
    file_name: str = Field(..., description="Suggested file name, {ClassName}.cs")
    code: str = Field(..., description="Generated C# source")
    syntax_warnings: List[str] = Field(default_factory=list, description="Advisory tree-sitter findings")


class ParseRequest(BaseModel):
    """Parse one C# file."""
    file_name: str = Field(..., description="File name; seeds the project name", min_length=1)
    content: str = Field(..., description="C# source text")


class SourceFile(BaseModel):
    name: str = Field(..., description="File name", min_length=1)
    content: str = Field(..., description="File text")


class FolderParseRequest(BaseModel):
    """Parse several files as one script."""
    files: List[SourceFile] = Field(default_factory=list, description="Files in upload order")


class ParseResponse(BaseModel):
    success: bool = Field(..., description="Whether request succeeded")
    project: Optional[dict] = Field(None, description="Recovered project in its persisted JSON form")
    warnings: List[str] = Field(default_factory=list, description="Warnings in discovery order")


class ElementResponse(BaseModel):
    success: bool = Field(..., description="Whether request succeeded")
    element: dict = Field(..., description="Element with type-driven defaults")
