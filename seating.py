import random

GOLD_ROWS = ["A", "B", "C"]
GOLD_SEATS_PER_ROW = 9
SILVER_ROWS = ["D", "E", "F", "G", "H", "I", "J", "K", "L", "M"]
SILVER_SEATS_PER_ROW = [15, 15, 16, 16, 16, 16, 16, 15, 15, 15]

# Demo occupancy, not real availability
GOLD_BOOKED_RATIO = 0.2
SILVER_BOOKED_RATIO = 0.25

MAX_SEATS = 10


def seat_id_for(tier, row, number):
    return f"{tier.upper()}-{row}{number}"


def _build_seats(rng, booked_ids=None):
    seats = []
    layout = [
        ("gold", GOLD_ROWS, [GOLD_SEATS_PER_ROW] * len(GOLD_ROWS), GOLD_BOOKED_RATIO),
        ("silver", SILVER_ROWS, SILVER_SEATS_PER_ROW, SILVER_BOOKED_RATIO),
    ]
    for tier, rows, counts, ratio in layout:
        for row, count in zip(rows, counts):
            for number in range(1, count + 1):
                seat_id = seat_id_for(tier, row, number)
                if booked_ids is None:
                    is_booked = rng.random() < ratio
                else:
                    is_booked = seat_id in booked_ids
                seats.append(
                    {
                        "id": seat_id,
                        "row": row,
                        "number": number,
                        "tier": tier,
                        "is_booked": is_booked,
                    }
                )
    return seats


def generate_seat_map(rng=None):
    """Build the gold balcony and silver stalls for one booking session.

    Seat identities are fixed by the layout; occupancy is drawn from ``rng``
    (``random`` module by default) so each session sees a different house.
    """
    return _build_seats(rng or random)


# Every seat id the auditorium has
LAYOUT_SEAT_IDS = frozenset(seat["id"] for seat in _build_seats(None, set()))


def is_valid_seat_id(seat_id) -> bool:
    return isinstance(seat_id, str) and seat_id in LAYOUT_SEAT_IDS


def seat_tier(seat_id):
    if seat_id.startswith("GOLD"):
        return "gold"
    if seat_id.startswith("SILVER"):
        return "silver"
    return None


def derive_counts(selection):
    tiers = [seat_tier(seat_id) for seat_id in selection]
    gold_count = tiers.count("gold")
    silver_count = tiers.count("silver")
    return {"gold_count": gold_count, "silver_count": silver_count}


def derive_tier(selection):
    """Tier reported on a booking made from the seat map.

    A mixed gold and silver selection reports ``silver``.
    """
    counts = derive_counts(selection)
    if counts["gold_count"] and not counts["silver_count"]:
        return "gold"
    return "silver"


class SeatMap:
    def __init__(self, seats):
        self.seats = seats
        self._by_id = {seat["id"]: seat for seat in seats}

    @classmethod
    def generate(cls, rng=None):
        return cls(generate_seat_map(rng))

    @classmethod
    def from_booked_ids(cls, booked_ids):
        # Rebuilds a session's map from the ids that were pre-booked for it
        return cls(_build_seats(None, set(booked_ids)))

    @property
    def booked_ids(self):
        return [seat["id"] for seat in self.seats if seat["is_booked"]]

    def is_booked(self, seat_id) -> bool:
        seat = self._by_id.get(seat_id)
        return bool(seat and seat["is_booked"])

    def rows(self, tier):
        grouped = {}
        for seat in self.seats:
            if seat["tier"] == tier:
                grouped.setdefault(seat["row"], []).append(seat)
        return grouped

    def toggle(self, seat_id, selection, max_seats=MAX_SEATS):
        """Return the selection after a click on ``seat_id``.

        Booked or unknown seats leave the selection as it was, and so does a
        new seat once ``max_seats`` are already held.
        """
        seat = self._by_id.get(seat_id)
        if seat is None or seat["is_booked"]:
            return list(selection)

        if seat_id in selection:
            return [selected for selected in selection if selected != seat_id]

        if len(selection) >= max_seats:
            return list(selection)

        return list(selection) + [seat_id]
