"""Listing models - normalized petting zoo (and legacy property) documents."""

from typing import Any, Literal, Optional
from pydantic import BaseModel, ConfigDict, Field


class CMSModel(BaseModel):
    """Base for models that mirror CMS documents (camelCase / underscore aliases on the wire)."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    def to_cms(self) -> dict:
        """Dump using CMS field names."""
        return self.model_dump(by_alias=True)


class Slug(CMSModel):
    """URL slug object."""
    current: Optional[str] = Field(None, description="URL-safe identifier, null when unusable")
    type: str = Field("slug", alias="_type")


class Location(CMSModel):
    """Geopoint with optional postal details."""
    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = Field(None, alias="zipCode")


class Image(CMSModel):
    """CMS image with its asset reference."""
    asset: Any = Field(..., description="Asset reference object, usually {'_ref': 'image-...'}")
    alt: str = Field("Petting zoo image", description="Alt text")
    caption: Optional[str] = None
    hotspot: Optional[Any] = None
    crop: Optional[Any] = None
    type: str = Field("image", alias="_type")


class AdmissionPrice(CMSModel):
    """Admission prices; fields that did not parse are left unset."""
    adult: Optional[float] = Field(None, ge=0)
    child: Optional[float] = Field(None, ge=0)
    senior: Optional[float] = Field(None, ge=0)
    group: Optional[float] = Field(None, ge=0)
    currency: str = Field("USD", description="ISO currency code")

    def to_cms(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)


class Listing(CMSModel):
    """Normalized petting zoo listing. Always safe to render."""
    id: str = Field(..., alias="_id", description="Document ID (synthesized when missing)")
    item_type: Literal["pettingZoo", "property"] = Field("pettingZoo", alias="itemType")
    name: str = Field(..., description="Display name")
    slug: Slug = Field(default_factory=Slug)
    description: str = Field("No description available")
    location: Optional[Location] = None
    address: Optional[str] = None
    zoo_type: Optional[str] = Field(None, alias="zooType")
    main_image: Optional[Image] = Field(None, alias="mainImage")
    images: list[Image] = Field(default_factory=list)
    admission_price: Optional[AdmissionPrice] = Field(None, alias="admissionPrice")
    price_per_night: Optional[float] = Field(None, alias="pricePerNight", description="Legacy flat price")
    reviews: list[Any] = Field(default_factory=list)
    amenities: list[Any] = Field(default_factory=list)
    animals: list[Any] = Field(default_factory=list)
    contact_info: dict = Field(default_factory=dict, alias="contactInfo")
    hours: dict = Field(default_factory=dict, description="Operating hours by weekday")
    website: Optional[str] = None
    phone: Optional[str] = None

    def to_cms(self) -> dict:
        data = self.model_dump(by_alias=True)
        if self.admission_price is not None:
            data["admissionPrice"] = self.admission_price.to_cms()
        return data
