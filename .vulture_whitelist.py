"""Vulture whitelist — methods called by frameworks, not direct code."""

# Pydantic validators: called by Pydantic, not our code
from docref_core.entities.models import Entity, SourceReference

SourceReference.validate_path
Entity.validate_title

from docref_core.schema.models import EntityKind, RelationshipCategory

EntityKind.validate_name
RelationshipCategory.validate_name

# Hook modules loaded through [tool.docref] hooks
from docref_core.hooks import load_hooks

load_hooks
