"""Template models, built-in GIF templates, and the registry."""

from ace.templates.models import FieldDefinition, Template
from ace.templates.registry import TemplateRegistry

__all__ = ["FieldDefinition", "Template", "TemplateRegistry"]
