"""GROQ queries sent to the content store."""

ZOO_FIELDS = """
  _id,
  _type,
  name,
  slug,
  description,
  location,
  address,
  phone,
  website,
  zooType,
  mainImage,
  images,
  admissionPrice,
  operatingHours,
  contactInfo,
  animals[]->{_id, name, species, category, description, canPet, canFeed, ageGroup, temperament},
  amenities[]->{_id, name, description, icon, category, isAvailable},
  reviews[]{rating, isApproved, reviewText, visitDate}
"""

PROPERTY_FIELDS = """
  _id,
  _type,
  title,
  slug,
  description,
  location,
  propertyType,
  mainImage,
  images,
  pricePerNight,
  reviews[]{rating, isApproved, reviewText, visitDate}
"""

ALL_LISTINGS_QUERY = f"""{{
  "pettingZoos": *[_type == "pettingZoo"] | order(name asc) {{{ZOO_FIELDS}, "itemType": "pettingZoo"}},
  "properties": *[_type == "property"] | order(title asc) {{{PROPERTY_FIELDS}, "itemType": "property"}}
}}"""

LISTING_BY_SLUG_QUERY = f"""coalesce(
  *[_type == "pettingZoo" && slug.current == $slug][0]{{{ZOO_FIELDS}, "itemType": "pettingZoo"}},
  *[_type == "property" && slug.current == $slug][0]{{{PROPERTY_FIELDS}, "itemType": "property"}}
)"""
