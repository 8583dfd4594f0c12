"""
User Domain Model

Field names match the stored documents and the JSON bodies exactly.
"""
from datetime import date, datetime, time
from typing import Annotated, Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

STORE_ID_FIELD = "_id"

# BSON integers are signed 64-bit.
INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1

UserId = Annotated[int, Field(ge=INT64_MIN, le=INT64_MAX)]


class UserFields(BaseModel):
    """Optional attributes shared by full users and partial updates."""
    model_config = ConfigDict(extra="ignore")

    Name: Optional[str] = None
    Email: Optional[str] = None
    City: Optional[str] = None
    Enabled: Optional[bool] = None
    Gender: Optional[str] = None
    Profession: Optional[str] = None
    Description: Optional[str] = None
    Birthdate: Optional[date] = None

    @field_validator("Birthdate", mode="before")
    @classmethod
    def _date_from_datetime(cls, value: Any) -> Any:
        # Stored as a BSON datetime at midnight.
        if isinstance(value, datetime):
            return value.date()
        return value

    def to_document(self) -> Dict[str, Any]:
        """Supplied fields only, in a form the store can encode."""
        document = self.model_dump(exclude_unset=True)
        birthdate = document.get("Birthdate")
        if isinstance(birthdate, date):
            document["Birthdate"] = datetime.combine(birthdate, time())
        return document

    def to_response(self) -> Dict[str, Any]:
        """JSON-ready dict of the supplied fields."""
        return self.model_dump(mode="json", exclude_unset=True)


class User(UserFields):
    """User domain model."""
    Id: UserId

    @classmethod
    def from_document(cls, document: Dict[str, Any]) -> "User":
        """Create User from a store document, dropping the store-internal id."""
        data = {key: value for key, value in document.items() if key != STORE_ID_FIELD}
        return cls.model_validate(data)


class UserUpdate(UserFields):
    """Partial user for set-updates; Id is optional here."""
    Id: Optional[UserId] = None

    @field_validator("Id")
    @classmethod
    def _id_not_null(cls, value: Optional[int]) -> int:
        # Omitting Id is allowed, an explicit null is not.
        if value is None:
            raise ValueError("Id cannot be null")
        return value
