"""Tests for the model/record store and the asset store."""

import uuid

import pytest

from ace.core.errors import ModelNotFoundError, RecordNotFoundError
from ace.stores import AssetStore, ModelStore


@pytest.fixture
def store():
    return ModelStore()


@pytest.fixture
def template(registry):
    return registry.get_template("public-facilities")


class TestModelStore:

    def test_instantiate_uses_template_label_by_default(self, store, template):
        model = store.instantiate("facilities", template)
        assert model.title == template.label
        assert store.get_model("facilities") is model

    def test_add_record_generates_uuid(self, store, template):
        store.instantiate("facilities", template)
        record = store.add_record("facilities", {"name": "中央図書館"})
        uuid.UUID(record.id)
        assert record.to_dict() == {"id": record.id, "name": "中央図書館"}

    def test_records_are_read_only(self, store, template):
        store.instantiate("facilities", template)
        record = store.add_record("facilities", {"name": "A"})
        with pytest.raises(TypeError):
            record.values["name"] = "B"

    def test_reapply_resets_records(self, store, template):
        store.instantiate("facilities", template)
        store.add_record("facilities", {"name": "A"})
        store.instantiate("facilities", template, title="Again")
        assert store.list_records("facilities") == []
        assert store.get_model("facilities").title == "Again"

    def test_list_records_in_insertion_order(self, store):
        first = store.add_record("m", {"n": 1})
        second = store.add_record("m", {"n": 2})
        assert [r.id for r in store.list_records("m")] == [first.id, second.id]

    def test_list_unknown_model_is_empty(self, store):
        assert store.list_records("nothing") == []

    def test_get_record_not_found(self, store):
        with pytest.raises(RecordNotFoundError):
            store.get_record("m", "missing")

    def test_require_model(self, store):
        with pytest.raises(ModelNotFoundError):
            store.require_model("missing")


class TestAssetStore:

    def test_add_asset_stamps_id_and_created_at(self):
        assets = AssetStore()
        asset = assets.add_asset({"title": "Chiyoda LOD2", "assetType": "CityGML"})
        assert asset["id"]
        assert asset["createdAt"]
        assert assets.list_assets() == [asset]

    def test_list_returns_copies(self):
        assets = AssetStore()
        assets.add_asset({"title": "A"})
        assets.list_assets()[0]["title"] = "changed"
        assert assets.list_assets()[0]["title"] == "A"
