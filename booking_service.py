import random
import string
import time
from datetime import datetime, timezone

from loguru import logger
from marshmallow import ValidationError

from pricing import calculate_seat_total, calculate_total_amount, get_ticket_tier
from schemas import BOOKING_STATUSES, booking_form_schema
from seating import MAX_SEATS, derive_counts, derive_tier, is_valid_seat_id

BOOKING_ID_PREFIX = "SHESH"

# Used only when strict transitions are switched on
ALLOWED_TRANSITIONS = {
    "pending": {"confirmed", "cancelled"},
    "confirmed": {"paid", "cancelled"},
    "paid": set(),
    "cancelled": set(),
}

_ID_ALPHABET = string.ascii_lowercase + string.digits


def generate_booking_id(now=None):
    millis = int((now if now is not None else time.time()) * 1000)
    suffix = "".join(random.choices(_ID_ALPHABET, k=9))
    return f"{BOOKING_ID_PREFIX}-{millis}-{suffix}"


def _utc_now():
    return datetime.now(timezone.utc)


class BookingService:
    def __init__(self, store, notifier, clock=None, id_factory=None, strict_transitions=False):
        self.store = store
        self.notifier = notifier
        self.clock = clock or _utc_now
        self.id_factory = id_factory or generate_booking_id
        self.strict_transitions = strict_transitions

    def _validate(self, form_input, showtimes, booked_seats):
        payload = booking_form_schema.load(form_input or {})

        errors = {}
        if showtimes is not None and payload["showtime"] not in showtimes:
            errors["showtime"] = [f"Showtime must be one of: {', '.join(showtimes)}"]

        seats = payload["seats"]
        seat_errors = []
        if len(set(seats)) != len(seats):
            seat_errors.append("Seats may not be selected twice")
        if len(seats) > MAX_SEATS:
            seat_errors.append(f"At most {MAX_SEATS} seats can be booked at once")
        invalid = [seat_id for seat_id in seats if not is_valid_seat_id(seat_id)]
        if invalid:
            seat_errors.append(f"Unknown seats: {', '.join(invalid)}")
        taken = [seat_id for seat_id in seats if booked_seats and seat_id in booked_seats]
        if taken:
            seat_errors.append(f"Seats already booked: {', '.join(taken)}")
        if seat_errors:
            errors["seats"] = seat_errors

        if errors:
            raise ValidationError(errors)
        return payload

    def _price(self, payload):
        seats = payload["seats"]
        if seats:
            counts = derive_counts(seats)
            total = calculate_seat_total(counts["gold_count"], counts["silver_count"])
            return derive_tier(seats), len(seats), total

        tier_id = get_ticket_tier(payload["ticket_tier"])["id"]
        tickets = payload["tickets"]
        return tier_id, tickets, calculate_total_amount(tier_id, tickets)

    def create_booking(self, form_input, movie_title, movie_id, showtimes=None, booked_seats=None):
        """Validate, price, store and announce a booking.

        ``showtimes`` and ``booked_seats``, when given, restrict the showtime to
        the movie's schedule and reject seats that are already taken. Raises
        ``marshmallow.ValidationError`` before anything is written and
        ``errors.PersistenceError`` when the store cannot save. Notification
        problems never fail the booking.
        """
        payload = self._validate(form_input, showtimes, booked_seats)
        ticket_tier, number_of_tickets, total_amount = self._price(payload)

        booking = {
            "id": self.id_factory(),
            "customer_name": payload["name"],
            "customer_email": payload["email"],
            "customer_phone": payload["phone"],
            "movie_title": movie_title,
            "movie_id": str(movie_id),
            "showtime": payload["showtime"],
            "ticket_tier": ticket_tier,
            "number_of_tickets": number_of_tickets,
            "total_amount": total_amount,
            "booking_date": self.clock().isoformat(),
            "status": "pending",
            "seats": list(payload["seats"]),
            "payment_id": None,
            "qr_code": None,
        }

        self.store.append(booking)
        logger.info(
            f"Booking {booking['id']} created for {movie_title}: "
            f"{number_of_tickets} x {ticket_tier}, total {total_amount}"
        )

        try:
            self.notifier.dispatch(booking)
        except Exception as exc:
            logger.error(f"Booking {booking['id']}: notification dispatch failed: {exc}")

        return booking

    def list_bookings(self, status=None):
        if status is not None and status not in BOOKING_STATUSES:
            raise ValidationError({"status": [f"Status must be one of: {', '.join(BOOKING_STATUSES)}"]})
        return self.store.list_bookings(status)

    def get_booking(self, booking_id):
        return self.store.get_by_id(booking_id)

    def can_transition(self, current, new) -> bool:
        if not self.strict_transitions:
            return True
        return new in ALLOWED_TRANSITIONS.get(current, set())

    def set_status(self, booking_id, status) -> bool:
        if status not in BOOKING_STATUSES:
            raise ValidationError({"status": [f"Status must be one of: {', '.join(BOOKING_STATUSES)}"]})

        if self.strict_transitions:
            booking = self.store.get_by_id(booking_id)
            if booking is None or not self.can_transition(booking["status"], status):
                return False

        updated = self.store.update_status(booking_id, status)
        if updated:
            logger.info(f"Booking {booking_id} status set to {status}")
        else:
            logger.warning(f"Status update for unknown booking {booking_id}")
        return updated

    def booking_summary(self):
        bookings = self.store.get_all()
        by_status = {status: 0 for status in BOOKING_STATUSES}
        for booking in bookings:
            by_status[booking["status"]] = by_status.get(booking["status"], 0) + 1
        revenue = sum(b["total_amount"] for b in bookings if b["status"] != "cancelled")
        return {"total": len(bookings), "by_status": by_status, "revenue": revenue}
