from typing import Any

from pydantic import BaseModel, ConfigDict


class MongoModel(BaseModel):
    """Base for documents stored in MongoDB.

    Subclasses that own their identifier declare ``id`` with ``alias="_id"``.
    """

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_serialization_defaults_required=True,
    )

    def to_mongo(self) -> dict[str, Any]:
        """Convert the model to a dictionary for MongoDB storage with _id field."""
        data = self.model_dump()
        if "id" in data:
            data["_id"] = data.pop("id")  # Rename id → _id for MongoDB
        return data
