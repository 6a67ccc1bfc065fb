"""
Stores package: in-memory state for the process lifetime.

Each store owns one aggregate (model instances and their records,
heavy-file assets).  Stores do NOT handle HTTP concerns or validation;
callers hand them already-validated values.

Convention:
    - One instance per application, created in main.create_app() and
      reached through the dependencies in ace.api.deps
    - Every write happens under the store's own lock
    - Returned objects are immutable or copies
"""

from ace.stores.assets import AssetStore
from ace.stores.models import ModelInstance, ModelStore, Record

__all__ = ["AssetStore", "ModelInstance", "ModelStore", "Record"]
