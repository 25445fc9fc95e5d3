"""Filter specification models."""

from typing import Any, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator


def _as_str_list(value: Any) -> list[str]:
    if isinstance(value, str):
        return [value] if value else []
    if not isinstance(value, (list, tuple, set)):
        return []
    return [str(v) for v in value if v is not None and v != ""]


def _as_choice(value: Any) -> str:
    if value is None or value == "":
        return "all"
    if isinstance(value, bool):
        return "all"
    return str(value)


class FilterSpec(BaseModel):
    """User-selected criteria. Defaults mean "no constraint"."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    zoo_types: list[str] = Field(default_factory=list, alias="zooTypes")
    animal_types: list[str] = Field(default_factory=list, alias="animalTypes")
    amenities: list[str] = Field(default_factory=list)
    distance: str = Field("all", description="Maximum miles, e.g. '25'")
    price_range: str = Field("all", alias="priceRange", description="free|low|medium|high")
    rating: str = Field("all", description="Minimum stars, e.g. '4+'")

    @field_validator("zoo_types", "animal_types", "amenities", mode="before")
    @classmethod
    def _lists(cls, value: Any) -> list[str]:
        return _as_str_list(value)

    @field_validator("distance", "price_range", "rating", mode="before")
    @classmethod
    def _choices(cls, value: Any) -> str:
        return _as_choice(value)

    def is_default(self) -> bool:
        return not self.active_fields()

    def active_fields(self) -> dict:
        """Non-default criteria keyed by their URL (camelCase) names."""
        active = {}
        for name, field in type(self).model_fields.items():
            value = getattr(self, name)
            if isinstance(value, list):
                if value:
                    active[field.alias or name] = value
            elif value != "all":
                active[field.alias or name] = value
        return active


class UserLocation(BaseModel):
    """Visitor position supplied by the browser."""
    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)


class FilterOptions(BaseModel):
    """Distinct values available for the filter dropdowns."""
    model_config = ConfigDict(populate_by_name=True)

    zoo_types: list[str] = Field(default_factory=list, alias="zooTypes")
    animal_types: list[str] = Field(default_factory=list, alias="animalTypes")
    amenities: list[str] = Field(default_factory=list)


class UrlState(BaseModel):
    """Search term and filters recovered from a URL."""
    search: str = ""
    filters: FilterSpec = Field(default_factory=FilterSpec)
    user_location: Optional[UserLocation] = None
