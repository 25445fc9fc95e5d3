"""Typed views of documents referenced from a listing (reviews, animals, amenities).

Filters read only a few fields of each document; the rest are kept as-is,
whatever their type.
"""

from typing import Any, Optional
from pydantic import BaseModel, ConfigDict, Field


class Review(BaseModel):
    """Visitor review embedded in a listing."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    rating: Optional[Any] = Field(None, description="1-5 stars; anything else is ignored when averaging")
    is_approved: Optional[Any] = Field(None, alias="isApproved", description="Only an explicit False excludes the review")
    review_text: Optional[Any] = Field(None, alias="reviewText", description="Plain text or rich-text blocks")
    visit_date: Optional[Any] = Field(None, alias="visitDate")


class Animal(BaseModel):
    """Animal reference document."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: Optional[Any] = Field(None, alias="_id")
    name: Optional[Any] = None
    species: Optional[Any] = None
    category: Optional[Any] = None
    description: Optional[Any] = None
    can_pet: Optional[Any] = Field(None, alias="canPet")
    can_feed: Optional[Any] = Field(None, alias="canFeed")
    age_group: Optional[Any] = Field(None, alias="ageGroup")
    temperament: Optional[Any] = None


class Amenity(BaseModel):
    """Amenity reference document."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: Optional[Any] = Field(None, alias="_id")
    name: Optional[Any] = None
    description: Optional[Any] = None
    icon: Optional[Any] = None
    category: Optional[Any] = None
    is_available: Optional[Any] = Field(None, alias="isAvailable")
