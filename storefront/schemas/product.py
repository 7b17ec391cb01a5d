from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ProductFields(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: Optional[str] = None
    code: Optional[str] = None
    price: Optional[float] = None
    categories: Optional[str] = None
    more_details: Optional[str] = Field(default=None, alias="moreDetails")
    reviews: Optional[str] = None
    shipping_time: Optional[str] = Field(default=None, alias="shippingTime")
    url: Optional[str] = None

    @field_validator("price", mode="before")
    @classmethod
    def blank_price_is_missing(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value


class ProductCreate(ProductFields):
    pass


class ProductUpdate(ProductFields):
    images: Optional[list[str]] = None

    @field_validator("images", mode="before")
    @classmethod
    def single_reference_as_list(cls, value):
        if isinstance(value, str):
            return [value]
        return value


class ProductRead(ProductFields):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: str
    images: list[str] = Field(default_factory=list)
