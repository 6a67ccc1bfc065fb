"""
TemplateRegistry: process-wide catalog of templates.

Append-only: templates are never mutated or removed once registered.
Writes are serialised by a single lock; reads take a snapshot.
"""

from __future__ import annotations

import threading
from datetime import datetime, timezone
from typing import Iterable

from ace.core.errors import DuplicateTemplateIdError
from ace.core.logging import get_logger
from ace.templates.builtin import BUILTIN_TEMPLATES
from ace.templates.models import Template

logger = get_logger(__name__)


class TemplateRegistry:
    """Insertion-ordered map of template id to Template."""

    def __init__(self, templates: Iterable[Template] = ()) -> None:
        self._lock = threading.Lock()
        self._templates: dict[str, Template] = {}
        for template in templates:
            self._insert(template)

    @classmethod
    def with_builtins(cls) -> TemplateRegistry:
        return cls(BUILTIN_TEMPLATES)

    def list_templates(self) -> list[Template]:
        with self._lock:
            return list(self._templates.values())

    def get_template(self, template_id: str) -> Template | None:
        with self._lock:
            return self._templates.get(template_id)

    def __contains__(self, template_id: str) -> bool:
        return self.get_template(template_id) is not None

    def __len__(self) -> int:
        with self._lock:
            return len(self._templates)

    def add_template(self, template: Template) -> Template:
        """
        Register a runtime template and stamp its generation time.

        Raises:
            DuplicateTemplateIdError: the id is taken; the registry is unchanged.
        """
        stamped = template.model_copy(update={"generated_at": datetime.now(timezone.utc)})
        self._insert(stamped)
        logger.info(
            "Template registered",
            template_id=stamped.id,
            field_count=len(stamped.fields),
        )
        return stamped

    def _insert(self, template: Template) -> None:
        with self._lock:
            if template.id in self._templates:
                raise DuplicateTemplateIdError(template.id)
            self._templates[template.id] = template
