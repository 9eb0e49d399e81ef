"""
Category normalization for imported points of interest.

OpenStreetMap tags (amenity, tourism, leisure, shop) are mapped onto the
catalog's French category labels. Tables are tried in order; the first tag
whose value is known wins.
"""
from pathlib import Path
from typing import Any, Mapping, Optional, Union

FALLBACK_CATEGORY = "autre"

AMENITY_CATEGORIES = {
    "nightclub": "vie nocturne",
    "restaurant": "restaurant",
    "cafe": "café",
    "bar": "bar",
    "pub": "pub",
    "cinema": "cinéma",
    "theatre": "théâtre",
    "museum": "musée",
    "gallery": "galerie",
    "library": "bibliothèque",
    "arts_centre": "centre culturel",
    "community_centre": "centre communautaire",
    "social_facility": "social",
    "place_of_worship": "lieu de culte",
    "hospital": "santé",
    "pharmacy": "pharmacie",
    "doctors": "médecin",
    "dentist": "dentiste",
    "veterinary": "vétérinaire",
    "school": "école",
    "university": "université",
    "college": "collège",
    "kindergarten": "maternelle",
    "parking": "parking",
    "fuel": "station-service",
    "charging_station": "borne électrique",
    "bicycle_rental": "location vélo",
    "car_rental": "location voiture",
    "taxi": "taxi",
    "bank": "banque",
    "atm": "distributeur",
    "post_office": "poste",
    "police": "police",
    "fire_station": "pompiers",
    "townhall": "mairie",
    "courthouse": "tribunal",
}

TOURISM_CATEGORIES = {
    "attraction": "attraction",
    "museum": "musée",
    "gallery": "galerie",
    "artwork": "art public",
    "viewpoint": "point de vue",
    "zoo": "zoo",
    "theme_park": "parc d'attractions",
    "hotel": "hôtel",
    "hostel": "auberge",
    "guest_house": "maison d'hôtes",
    "motel": "motel",
    "apartment": "appartement",
    "camp_site": "camping",
    "caravan_site": "camping-car",
    "information": "information touristique",
    "picnic_site": "aire de pique-nique",
}

LEISURE_CATEGORIES = {
    "park": "parc",
    "garden": "jardin",
    "playground": "aire de jeux",
    "sports_centre": "centre sportif",
    "stadium": "stade",
    "swimming_pool": "piscine",
    "fitness_centre": "salle de sport",
    "golf_course": "golf",
    "pitch": "terrain de sport",
    "track": "piste",
    "water_park": "parc aquatique",
    "marina": "marina",
    "beach_resort": "station balnéaire",
    "nature_reserve": "réserve naturelle",
    "fishing": "pêche",
    "horse_riding": "équitation",
    "ice_rink": "patinoire",
    "miniature_golf": "mini-golf",
}

SHOP_CATEGORIES = {
    "mall": "centre commercial",
    "supermarket": "supermarché",
    "bakery": "boulangerie",
    "butcher": "boucherie",
    "clothes": "vêtements",
    "shoes": "chaussures",
    "books": "librairie",
    "toys": "jouets",
    "sports": "sport",
    "electronics": "électronique",
    "furniture": "meubles",
    "florist": "fleuriste",
    "gift": "cadeaux",
    "jewelry": "bijouterie",
    "beauty": "beauté",
    "hairdresser": "coiffeur",
    "chemist": "droguerie",
    "optician": "opticien",
    "pet": "animalerie",
}

# Precedence order matters: amenity=museum beats tourism=museum
TAG_TABLES = (
    ("amenity", AMENITY_CATEGORIES),
    ("tourism", TOURISM_CATEGORIES),
    ("leisure", LEISURE_CATEGORIES),
    ("shop", SHOP_CATEGORIES),
)

CATEGORY_TAGS = tuple(tag for tag, _ in TAG_TABLES)


def normalize_category(tags: Optional[Mapping[str, Any]], override: Optional[str] = None) -> str:
    """
    Derive a category from OSM-style tags.

    Args:
        tags: Feature properties
        override: Batch-level label; when given it wins over every tag

    Returns:
        The explicit ``type`` tag, a mapped label, the raw unmapped tag
        value, or ``FALLBACK_CATEGORY``, in that order of precedence.
    """
    if override is not None:
        return override

    tags = tags or {}
    explicit = tags.get("type")
    if explicit:
        return explicit

    for tag, table in TAG_TABLES:
        value = tags.get(tag)
        if isinstance(value, str) and value in table:
            return table[value]

    for tag in CATEGORY_TAGS:
        value = tags.get(tag)
        if value:
            return value

    return FALLBACK_CATEGORY


def category_from_filename(path: Union[str, Path]) -> str:
    """``laser-game.geojson`` -> ``"laser game"``"""
    stem = Path(path).stem
    return stem.replace("-", " ").replace("_", " ").strip().lower()


def format_osm_address(tags: Mapping[str, Any]) -> Optional[str]:
    """Join ``addr:*`` tags into ``"12, Rue de Rivoli, 75001 Paris"``."""
    parts = [str(tags[k]) for k in ("addr:housenumber", "addr:street") if tags.get(k)]

    city = [str(tags[k]) for k in ("addr:postcode", "addr:city") if tags.get(k)]
    if city:
        parts.append(" ".join(city))

    return ", ".join(parts) if parts else None
