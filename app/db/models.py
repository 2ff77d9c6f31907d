"""
Data models: the Person record and the SQLModel table backing the durable slot.
"""
from datetime import datetime, timezone
from pydantic import BaseModel, ConfigDict, Field as PydanticField, TypeAdapter, field_validator
from sqlmodel import SQLModel, Field, Column, Text


def utc_now() -> datetime:
    """Get current UTC timestamp."""
    return datetime.now(timezone.utc)


class Person(BaseModel):
    """
    A single person record.

    Serialized with the `createdAt` key so the stored payload keeps the
    {id, name, age, createdAt} shape. Records are immutable; the store
    swaps in a new instance when name or age is edited.
    """
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: str = PydanticField(min_length=1)
    name: str = PydanticField(min_length=1)
    age: int = PydanticField(ge=0, strict=True)
    created_at: str = PydanticField(alias="createdAt")

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        """Ensure name is not just whitespace."""
        if not v.strip():
            raise ValueError("Name cannot be empty or whitespace only")
        return v


# Whole-collection codec for the slot value
PeopleAdapter = TypeAdapter(list[Person])


class StorageSlot(SQLModel, table=True):
    """
    One key-value slot.

    The people collection lives in a single row, rewritten as a whole on
    every change (last write wins).
    """
    __tablename__ = "storage_slots"

    key: str = Field(primary_key=True, max_length=200)
    value: str = Field(sa_column=Column(Text, nullable=False))
    updated_at: datetime = Field(default_factory=utc_now, nullable=False)
