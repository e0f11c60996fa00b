"""Core structify functionality: IR, front end, transformation pipeline, configuration."""

from . import ir
from .classifier import ClassifiedAttributes, check_variant_attributes, classify_attributes
from .config import TransformConfig, find_config, load_config
from .consistency import check_consistency
from .discriminants import assign_discriminants, check_discriminant_range
from .errors import (
    ConfigError,
    ConflictingRepresentation,
    DiscriminantOutOfRange,
    DuplicateVariant,
    ErrorContext,
    ParseError,
    ReservedVariantName,
    StructifyError,
    TransformError,
    UnsupportedAttribute,
    UnsupportedCapability,
    UnsupportedVariantShape,
)
from .parser import load_declarations, parse_declarations
from .pipeline import Analysis, analyze, render_module, structify, structify_all
from .representation import resolve_representation
from .synthesizer import CodeSynthesizer

__all__ = [
    "ir",
    # Errors
    "StructifyError",
    "ParseError",
    "ConfigError",
    "TransformError",
    "UnsupportedAttribute",
    "UnsupportedCapability",
    "ConflictingRepresentation",
    "UnsupportedVariantShape",
    "DuplicateVariant",
    "ReservedVariantName",
    "DiscriminantOutOfRange",
    "ErrorContext",
    # Pipeline stages
    "ClassifiedAttributes",
    "classify_attributes",
    "check_variant_attributes",
    "resolve_representation",
    "assign_discriminants",
    "check_discriminant_range",
    "CodeSynthesizer",
    "Analysis",
    "analyze",
    "structify",
    "structify_all",
    "render_module",
    "check_consistency",
    # Front end and configuration
    "parse_declarations",
    "load_declarations",
    "TransformConfig",
    "load_config",
    "find_config",
]
