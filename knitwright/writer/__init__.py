"""Instruction writer: templates, abbreviation pass and the row-by-row generator."""

from .generator import GeneratorOutput, InstructionGenerator, InstructionWriter
from .terminology import abbreviate, abbreviation_glossary, apply_terminology

__all__ = [
    "InstructionGenerator",
    "InstructionWriter",
    "GeneratorOutput",
    "abbreviate",
    "abbreviation_glossary",
    "apply_terminology",
]
