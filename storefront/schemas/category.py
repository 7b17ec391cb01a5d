from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class CategoryCreate(BaseModel):
    name: Optional[str] = None
    subcategories: list[str] = Field(default_factory=list)

    @field_validator("subcategories", mode="before")
    @classmethod
    def coerce_subcategories(cls, value):
        if value is None:
            return []
        if isinstance(value, str):
            return [value]
        return value


class CategoryRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: Optional[str] = None
    subcategories: list[str] = Field(default_factory=list)
