from flask import Blueprint, current_app, jsonify, request, session
from marshmallow import ValidationError

from errors import PersistenceError
from schemas import booking_record_schema, status_update_schema

booking_bp = Blueprint("booking_api", __name__)


def _booking_service():
    return current_app.extensions["booking_service"]


def _error_list(messages):
    errors = []
    if isinstance(messages, dict):
        for field, field_messages in messages.items():
            if isinstance(field_messages, dict):
                # nested list errors are keyed by index
                field_messages = [m for msgs in field_messages.values() for m in msgs]
            for message in field_messages:
                errors.append({"field": field, "msg": message})
    else:
        for message in messages:
            errors.append({"field": "_schema", "msg": message})
    return errors


def _invalid(exc):
    return jsonify({"message": "Invalid input", "errors": _error_list(exc.messages)}), 400


@booking_bp.route("/api/bookings", methods=["POST"])
def post_booking():
    payload = request.get_json(silent=True)
    if payload is None:
        payload = {}
    if not isinstance(payload, dict):
        return jsonify({"message": "Invalid input", "errors": [{"field": "_schema", "msg": "Booking payload must be a JSON object."}]}), 400

    movie_id = payload.get("movie_id")
    if movie_id is None or movie_id == "":
        return jsonify({"message": "Invalid input", "errors": [{"field": "movie_id", "msg": "movie_id is required."}]}), 400

    movie = current_app.extensions["catalog"].fetch_movie_by_id(movie_id)
    if movie:
        movie_title = movie["title"]
        showtimes = movie.get("showtimes")
    else:
        # Movie ids are not checked against the catalog, but a title is needed
        movie_title = payload.get("movie_title")
        showtimes = None
        if not movie_title:
            return jsonify({"message": "Invalid input", "errors": [{"field": "movie_title", "msg": "movie_title is required."}]}), 400

    form_input = dict(payload)
    booked_seats = None
    if payload.get("use_seat_selection"):
        form_input["seats"] = session.get("selected_seats", [])
        if not form_input["seats"]:
            return jsonify({"message": "Invalid input", "errors": [{"field": "seats", "msg": "Please select at least one seat."}]}), 400
    if form_input.get("seats"):
        booked_seats = session.get("booked_seats")

    try:
        booking = _booking_service().create_booking(
            form_input, movie_title, movie_id, showtimes=showtimes, booked_seats=booked_seats
        )
    except ValidationError as exc:
        return _invalid(exc)
    except PersistenceError as exc:
        return jsonify({"message": "Failed to save booking", "error": str(exc)}), 500

    # Seat selection ends with the booking
    session.pop("booked_seats", None)
    session.pop("selected_seats", None)

    return (
        jsonify(
            {
                "message": "Booking stored successfully",
                "booking": booking_record_schema.dump(booking),
            }
        ),
        201,
    )


@booking_bp.route("/api/bookings", methods=["GET"])
def list_bookings():
    service = _booking_service()
    try:
        bookings = service.list_bookings(request.args.get("status") or None)
    except ValidationError as exc:
        return _invalid(exc)

    return jsonify(
        {
            "bookings": booking_record_schema.dump(bookings, many=True),
            "summary": service.booking_summary(),
        }
    )


@booking_bp.route("/api/bookings/<booking_id>", methods=["GET"])
def get_booking(booking_id):
    booking = _booking_service().get_booking(booking_id)
    if not booking:
        return jsonify({"message": "Booking not found"}), 404
    return jsonify({"booking": booking_record_schema.dump(booking)})


@booking_bp.route("/api/bookings/<booking_id>/status", methods=["PUT", "PATCH"])
def update_booking_status(booking_id):
    service = _booking_service()
    try:
        payload = status_update_schema.load(request.get_json(silent=True) or {})
    except ValidationError as exc:
        return _invalid(exc)

    try:
        updated = service.set_status(booking_id, payload["status"])
    except PersistenceError as exc:
        return jsonify({"message": "Failed to update booking", "error": str(exc)}), 500

    booking = service.get_booking(booking_id)
    if not booking:
        return jsonify({"message": "Booking not found"}), 404
    if not updated:
        return jsonify({"message": f"Status cannot change from {booking['status']} to {payload['status']}"}), 409

    return jsonify(
        {
            "message": "Booking status updated",
            "booking": booking_record_schema.dump(booking),
        }
    )
