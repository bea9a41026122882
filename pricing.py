TICKET_TIERS = {
    "silver": {
        "id": "silver",
        "name": "Silver Ticket",
        "description": "Standard seating with great view",
        "price": 250,
        "features": [
            "Standard seating",
            "Great view of the screen",
            "Comfortable chairs",
            "Standard sound quality",
        ],
    },
    "gold": {
        "id": "gold",
        "name": "Gold Ticket",
        "description": "Premium balcony seating with luxury experience",
        "price": 450,
        "features": [
            "Premium balcony seating",
            "Best view of the screen",
            "Recliner chairs",
            "Premium sound quality",
            "Extra legroom",
            "Priority entry",
        ],
    },
}

DEFAULT_TIER = "silver"


def get_ticket_tier(tier_id):
    # Unknown tiers are priced as silver
    return TICKET_TIERS.get(tier_id) or TICKET_TIERS[DEFAULT_TIER]


def price_for_tier(tier_id) -> int:
    return get_ticket_tier(tier_id)["price"]


def calculate_total_amount(tier_id, number_of_tickets: int) -> int:
    return price_for_tier(tier_id) * number_of_tickets


def calculate_seat_total(gold_count: int, silver_count: int) -> int:
    """Total for a seat-map selection, where each seat is priced by its own section."""
    return gold_count * price_for_tier("gold") + silver_count * price_for_tier("silver")
