"""Curated places in Playa del Carmen, Mexico."""
from typing import Any, Dict, List


def _place(
    id: str,
    name: str,
    category: str,
    description: str,
    address: str,
    lat: float,
    lng: float,
    rating: float,
    price_level: int,
    hours: str,
    highlights: List[str],
) -> Dict[str, Any]:
    return {
        "id": id,
        "name": name,
        "category": category,
        "description": description,
        "address": address,
        "coordinates": {"lat": lat, "lng": lng},
        "rating": rating,
        "priceLevel": price_level,
        "hours": hours,
        "highlights": highlights,
    }


PLAYA_DEL_CARMEN_CENTER = {"lat": 20.6296, "lng": -87.0739}

PLACES: List[Dict[str, Any]] = [
    # Restaurants
    _place(
        "rest-001", "Alux Restaurant", "restaurant",
        "Fine dining inside a natural cave system, international cuisine with Mexican influences.",
        "Avenida Juarez, Manzana 21, Playa del Carmen",
        20.6257, -87.0725, 4.5, 4, "6:00 PM - 12:00 AM",
        ["Cave Dining", "Fine Dining", "Romantic", "Unique Experience"],
    ),
    _place(
        "rest-002", "La Cueva del Chango", "restaurant",
        "Jungle-themed garden restaurant serving Mexican breakfast and lunch.",
        "Calle 38 between 5th Ave and the beach, Playa del Carmen",
        20.6336, -87.0753, 4.7, 2, "8:00 AM - 2:00 PM",
        ["Mexican Cuisine", "Garden Setting", "Breakfast", "Local Favorite"],
    ),
    _place(
        "rest-003", "El Fogon", "restaurant",
        "Local taqueria known for al pastor tacos, a budget street food classic.",
        "Calle 30 and Constituyentes Ave, Playa del Carmen",
        20.6188, -87.0676, 4.8, 1, "6:00 PM - 2:00 AM",
        ["Tacos", "Street Food", "Budget-Friendly", "Local Favorite"],
    ),
    _place(
        "rest-004", "Axiote", "restaurant",
        "Rooftop modern Mexican kitchen with craft cocktails.",
        "Calle 34 Norte, Playa del Carmen",
        20.6275, -87.0744, 4.6, 3, "1:00 PM - 11:00 PM",
        ["Rooftop", "Cocktails", "Modern Mexican", "Romantic"],
    ),
    # Beaches
    _place(
        "beach-001", "Playa Mamitas", "beach",
        "Lively beach club strip with water sports and music.",
        "Calle 28 and the beach, Playa del Carmen",
        20.6318, -87.0764, 4.4, 3, "8:00 AM - 7:00 PM",
        ["Beach Club", "Water Sports", "Music", "Lively Atmosphere"],
    ),
    _place(
        "beach-002", "Playacar Beach", "beach",
        "Quiet white sand beach with calm water, good for families.",
        "Playacar, Playa del Carmen",
        20.6175, -87.0702, 4.7, 2, "Open 24 hours",
        ["Family-Friendly", "Quiet", "White Sand", "Calm Waters"],
    ),
    _place(
        "beach-003", "Punta Esmeralda", "beach",
        "Free public beach where a cenote meets the sea.",
        "Calle 88 and the beach, Playa del Carmen",
        20.6405, -87.0779, 4.6, 1, "Open 24 hours",
        ["Cenote", "Free Beach", "Budget", "Natural Beauty"],
    ),
    # Activities
    _place(
        "act-001", "Xcaret Park", "activity",
        "Eco-archaeological park with underground rivers and an evening cultural show.",
        "Carretera Chetumal-Puerto Juarez Km 282",
        20.5791, -87.1197, 4.8, 4, "8:30 AM - 10:30 PM",
        ["Theme Park", "Underground Rivers", "Cultural Show", "Family-Friendly"],
    ),
    _place(
        "act-002", "Rio Secreto", "activity",
        "Guided tours through a flooded underground cave system.",
        "Carretera Federal 307 Km 283.5",
        20.5519, -87.1091, 4.8, 4, "9:00 AM - 2:00 PM",
        ["Cave System", "Underground River", "Unique Experience", "Guided Tours"],
    ),
    _place(
        "act-003", "Cozumel Snorkeling", "activity",
        "Day trip by ferry to snorkel the reefs off Cozumel.",
        "Ferry pier, Calle 1 Sur, Playa del Carmen",
        20.5083, -86.9458, 4.9, 3, "7:00 AM - 6:00 PM",
        ["Snorkeling", "Day Trip", "Coral Reef", "Ferry Ride"],
    ),
    # Nightlife
    _place(
        "night-001", "Coco Bongo", "nightlife",
        "Show nightclub with acrobatics, live performances and open bar.",
        "10th Avenue and Calle 12, Playa del Carmen",
        20.6268, -87.0733, 4.5, 4, "10:30 PM - 3:30 AM",
        ["Nightclub", "Live Shows", "Acrobatics", "Open Bar"],
    ),
    _place(
        "night-002", "Santino Beach Club", "nightlife",
        "Beachfront club with electronic music and fire shows.",
        "Calle 12 and the beach, Playa del Carmen",
        20.6263, -87.0757, 4.4, 3, "11:00 AM - 3:00 AM",
        ["Beach Club", "Electronic Music", "Fire Shows", "Beachfront"],
    ),
    # Shopping
    _place(
        "shop-001", "5th Avenue (Quinta Avenida)", "shopping",
        "Pedestrian street lined with shops, restaurants and entertainment.",
        "Quinta Avenida, Playa del Carmen",
        20.6285, -87.0749, 4.5, 2, "9:00 AM - 11:00 PM",
        ["Pedestrian Street", "Shopping", "Dining", "Entertainment"],
    ),
    _place(
        "shop-002", "Paseo del Carmen", "shopping",
        "Open-air mall near the ferry pier with boutiques and cafes.",
        "10th Avenue and Calle 1 Sur, Playa del Carmen",
        20.6206, -87.0696, 4.3, 3, "10:00 AM - 10:00 PM",
        ["Open-Air Mall", "Boutiques", "Cafes", "Luxury"],
    ),
    # Hotels
    _place(
        "hotel-001", "The Fives Beach Hotel", "hotel",
        "Beachfront resort with suites, pools and a spa.",
        "Xcalacoco Beach, Playa del Carmen",
        20.6569, -87.0625, 4.6, 4, "Check-in 3:00 PM",
        ["Beachfront", "Spa", "Luxury", "Family-Friendly"],
    ),
    _place(
        "hotel-002", "Hotel Aventura Mexicana", "hotel",
        "Adults-only boutique hotel a few blocks from 5th Avenue.",
        "Calle 24 and 10th Avenue, Playa del Carmen",
        20.6325, -87.0719, 4.4, 2, "Check-in 3:00 PM",
        ["Adults Only", "Boutique", "Pool", "Budget"],
    ),
]

# Tool categories are plural; places are stored with a singular category
CATEGORY_ALIASES = {
    "restaurants": "restaurant",
    "beaches": "beach",
    "activities": "activity",
    "nightlife": "nightlife",
    "shopping": "shopping",
    "hotels": "hotel",
}


def get_places_by_category(category: str, limit: int = 10) -> List[Dict[str, Any]]:
    if category == "all":
        return PLACES[:limit]
    stored = CATEGORY_ALIASES.get(category, category)
    return [place for place in PLACES if place["category"] == stored][:limit]


def matches_preferences(place: Dict[str, Any], preferences: str) -> bool:
    keywords = [word for word in preferences.lower().split() if word]
    search_text = " ".join([place["description"], *place.get("highlights", [])]).lower()
    return any(keyword in search_text for keyword in keywords)
