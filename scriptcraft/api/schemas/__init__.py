"""Pydantic schemas for API request/response models."""

from .scripts import (
    ElementResponse,
    FolderParseRequest,
    GenerateRequest,
    GenerateResponse,
    ParseRequest,
    ParseResponse,
    SourceFile,
)

__all__ = [
    'ElementResponse',
    'FolderParseRequest',
    'GenerateRequest',
    'GenerateResponse',
    'ParseRequest',
    'ParseResponse',
    'SourceFile',
]
