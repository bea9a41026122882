from flask import Blueprint, jsonify, session

from pricing import calculate_seat_total
from seating import MAX_SEATS, SeatMap, derive_counts

seat_bp = Blueprint("seat_api", __name__)


def selection_summary(selection):
    counts = derive_counts(selection)
    return {
        "selected": selection,
        "gold_count": counts["gold_count"],
        "silver_count": counts["silver_count"],
        "total_amount": calculate_seat_total(counts["gold_count"], counts["silver_count"]),
        "max_seats": MAX_SEATS,
    }


@seat_bp.route("/api/seats", methods=["GET"])
def seat_map():
    # A fresh map (and an empty selection) for every booking session
    seats = SeatMap.generate()
    session["booked_seats"] = seats.booked_ids
    session["selected_seats"] = []

    return jsonify(
        {
            "gold": seats.rows("gold"),
            "silver": seats.rows("silver"),
            **selection_summary([]),
        }
    )


@seat_bp.route("/api/seats/<seat_id>/toggle", methods=["POST"])
def toggle_seat(seat_id):
    if "booked_seats" not in session:
        return jsonify({"message": "Load the seat map first"}), 409

    seats = SeatMap.from_booked_ids(session["booked_seats"])
    selection = seats.toggle(seat_id, session.get("selected_seats", []))
    session["selected_seats"] = selection
    return jsonify(selection_summary(selection))


@seat_bp.route("/api/seats/selection", methods=["DELETE"])
def clear_selection():
    session["selected_seats"] = []
    return jsonify(selection_summary([]))
