"""Sanitization of free-form documentation text."""

from .pipeline import DEFAULT_STAGES, SanitizationPipeline, default_pipeline, sanitize, sanitize_arguments
from .stages import (
    AutolinkStage,
    BalanceTagsStage,
    ConvertCharsStage,
    KsesStage,
    SmiliesStage,
    Stage,
    StripSlashesStage,
    TexturizeStage,
)

__all__ = [
    "AutolinkStage",
    "BalanceTagsStage",
    "ConvertCharsStage",
    "DEFAULT_STAGES",
    "KsesStage",
    "SanitizationPipeline",
    "SmiliesStage",
    "Stage",
    "StripSlashesStage",
    "TexturizeStage",
    "default_pipeline",
    "sanitize",
    "sanitize_arguments",
]
