"""
Use Cases package - Business logic layer.

Modules:
- base: Base use case abstract class
- generation_use_case: Script submission and keyword inspection
"""

from .base import UseCase
from .generation_use_case import SubmitGenerationUseCase, KeywordInspectionUseCase

__all__ = [
    "UseCase",
    "SubmitGenerationUseCase",
    "KeywordInspectionUseCase",
]
