"""
ModelStore: model instances created from templates, and their records.

A model is a template applied under a model id ("one-click rigor").
Records are appended only after validation and never change.
"""

from __future__ import annotations

import threading
import uuid
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Mapping

from ace.core.errors import ModelNotFoundError, RecordNotFoundError
from ace.core.logging import get_logger
from ace.templates.models import Template

logger = get_logger(__name__)


@dataclass(frozen=True)
class ModelInstance:
    """A template bound to a model id and display title."""

    model_id: str
    title: str
    template: Template


@dataclass(frozen=True)
class Record:
    """A validated record; `values` is read-only."""

    id: str
    values: Mapping[str, Any]

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, **self.values}


class ModelStore:
    """Model instances and the append-only record list of each model."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._models: dict[str, ModelInstance] = {}
        self._records: dict[str, list[Record]] = {}

    def instantiate(self, model_id: str, template: Template, title: str | None = None) -> ModelInstance:
        """Apply `template` as `model_id`.  Re-applying resets its records."""
        model = ModelInstance(model_id=model_id, title=title or template.label, template=template)
        with self._lock:
            self._models[model_id] = model
            self._records[model_id] = []
        logger.info("Model instantiated", model_id=model_id, template_id=template.id)
        return model

    def get_model(self, model_id: str) -> ModelInstance | None:
        with self._lock:
            return self._models.get(model_id)

    def add_record(self, model_id: str, values: Mapping[str, Any]) -> Record:
        record = Record(id=str(uuid.uuid4()), values=MappingProxyType(dict(values)))
        with self._lock:
            self._records.setdefault(model_id, []).append(record)
        logger.info("Record stored", model_id=model_id, record_id=record.id)
        return record

    def list_records(self, model_id: str) -> list[Record]:
        with self._lock:
            return list(self._records.get(model_id, []))

    def get_record(self, model_id: str, record_id: str) -> Record:
        for record in self.list_records(model_id):
            if record.id == record_id:
                return record
        raise RecordNotFoundError(model_id, record_id)

    def require_model(self, model_id: str) -> ModelInstance:
        model = self.get_model(model_id)
        if model is None:
            raise ModelNotFoundError(model_id)
        return model
