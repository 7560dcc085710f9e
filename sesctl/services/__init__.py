"""Operation handlers for sesctl."""

from .template_service import TemplateService, collect_template_names

__all__ = ["TemplateService", "collect_template_names"]
