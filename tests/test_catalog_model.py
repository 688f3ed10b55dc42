from datetime import datetime

import pytest
from bson import ObjectId
from pydantic import ValidationError

from domain.models.catalog import Part, Service


def test_strings_are_stripped_and_blank_category_is_none():
    part = Part(name="  Brake disc ", category="   ", description=None)

    assert part.name == "Brake disc"
    assert part.category is None
    assert part.description == ""
    assert isinstance(part.created_at, datetime)


def test_blank_name_is_rejected():
    with pytest.raises(ValidationError):
        Service(name="   ")


def test_to_mongo_converts_id_and_drops_none():
    oid = ObjectId()
    doc = Part(_id=str(oid), name="Clutch").to_mongo()

    assert doc["_id"] == oid
    assert "category" not in doc
    assert "updated_at" not in doc


def test_from_mongo_ignores_unknown_fields():
    oid = ObjectId()
    part = Part.from_mongo({"_id": oid, "name": "Gasket", "created_at": datetime(2024, 1, 1), "__v": 0})

    assert part.id == str(oid)
    assert Part.from_mongo(None) is None
