"""Test data factories using Faker."""

from faker import Faker
from typing import Optional

fake = Faker()

ZOO_TYPES = ["Farm", "Children's Zoo", "Wildlife Park", "Mobile Petting Zoo"]


def create_review_data(rating: Optional[float] = None, is_approved: Optional[bool] = True) -> dict:
    """Create raw review data as the CMS returns it."""
    return {
        "rating": rating if rating is not None else fake.random_int(min=1, max=5),
        "isApproved": is_approved,
        "reviewText": fake.sentence(nb_words=8),
        "visitDate": fake.date(),
    }


def create_animal_data(species: str = "Goat", category: str = "farm") -> dict:
    """Create raw animal reference data."""
    return {
        "_id": f"animal-{fake.uuid4()[:8]}",
        "name": fake.first_name(),
        "species": species,
        "category": category,
        "canPet": True,
        "canFeed": fake.boolean(),
    }


def create_amenity_data(name: str = "Parking") -> dict:
    """Create raw amenity reference data."""
    return {
        "_id": f"amenity-{fake.uuid4()[:8]}",
        "name": name,
        "description": f"{name} available on site",
        "isAvailable": True,
    }


def create_image_data(alt: Optional[str] = "A goat", ref: Optional[str] = None) -> dict:
    """Create raw image data with a CDN-style asset reference."""
    image = {
        "_type": "image",
        "asset": {"_ref": ref or f"image-{fake.hexify(text='^' * 12)}-800x600-jpg", "_type": "reference"},
    }
    if alt is not None:
        image["alt"] = alt
    return image


def create_zoo_data(
    name: Optional[str] = None,
    slug: Optional[str] = None,
    zoo_type: Optional[str] = None,
    adult_price: Optional[float] = 8.5,
    lat: float = 51.5074,
    lng: float = -0.1278,
    reviews: Optional[list] = None,
) -> dict:
    """Create raw petting zoo data as the CMS returns it."""
    name = name or f"{fake.last_name()} Farm"
    return {
        "_id": f"zoo-{fake.uuid4()[:8]}",
        "_type": "pettingZoo",
        "name": name,
        "slug": {"_type": "slug", "current": slug or fake.slug(name)},
        "description": fake.paragraph(nb_sentences=2),
        "location": {
            "lat": lat,
            "lng": lng,
            "address": fake.street_address(),
            "city": fake.city(),
        },
        "zooType": zoo_type or fake.random_element(ZOO_TYPES),
        "mainImage": create_image_data(),
        "images": [create_image_data(), None],
        "admissionPrice": {"adult": adult_price, "child": 5, "currency": "GBP"},
        "animals": [create_animal_data()],
        "amenities": [create_amenity_data()],
        "reviews": reviews if reviews is not None else [create_review_data(rating=4)],
        "contactInfo": {"email": fake.email(), "phone": "+44 20 7946 0958"},
        "operatingHours": {"monday": "9:00-17:00"},
        "website": fake.url(),
    }


def create_property_data(title: Optional[str] = None, price_per_night: float = 30) -> dict:
    """Create raw legacy property data."""
    title = title or fake.street_name()
    return {
        "_id": f"property-{fake.uuid4()[:8]}",
        "_type": "property",
        "title": title,
        "slug": {"current": fake.slug(title)},
        "description": fake.sentence(),
        "propertyType": "Cottage",
        "pricePerNight": price_per_night,
    }
