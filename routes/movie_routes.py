from flask import Blueprint, current_app, jsonify, request

from catalog import filter_by_genre, filter_by_rating, sort_movies
from pricing import TICKET_TIERS

movie_bp = Blueprint("movie_api", __name__)


@movie_bp.route("/api/movies", methods=["GET"])
def list_movies():
    catalog = current_app.extensions["catalog"]
    query = request.args.get("q", "")
    movies = catalog.search_movies(query) if query.strip() else catalog.fetch_catalog()

    movies = filter_by_genre(movies, request.args.get("genre"))

    min_rating = request.args.get("min_rating")
    if min_rating:
        try:
            movies = filter_by_rating(movies, float(min_rating))
        except ValueError:
            return jsonify({"message": "min_rating must be a number"}), 400

    sort_by = request.args.get("sort")
    if sort_by:
        if sort_by not in ("title", "rating", "releaseDate"):
            return jsonify({"message": "sort must be one of: title, rating, releaseDate"}), 400
        movies = sort_movies(movies, sort_by)

    return jsonify({"movies": movies})


@movie_bp.route("/api/movies/upcoming", methods=["GET"])
def upcoming_movies():
    catalog = current_app.extensions["catalog"]
    return jsonify({"movies": catalog.fetch_upcoming_movies()})


@movie_bp.route("/api/movies/<movie_id>", methods=["GET"])
def get_movie(movie_id):
    movie = current_app.extensions["catalog"].fetch_movie_by_id(movie_id)
    if not movie:
        return jsonify({"message": "Movie not found"}), 404
    return jsonify({"movie": movie})


@movie_bp.route("/api/tiers", methods=["GET"])
def list_tiers():
    return jsonify({"tiers": list(TICKET_TIERS.values())})
