from datetime import date

import pytest
import requests

from catalog import (
    CatalogProvider,
    fallback_movies,
    filter_by_genre,
    filter_by_rating,
    movie_from_tmdb,
    sort_movies,
)


class FakeResponse:
    def __init__(self, payload, status_code=200):
        self.payload = payload
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")

    def json(self):
        return self.payload


class FakeSession:
    def __init__(self, payload=None, error=None):
        self.payload = payload
        self.error = error
        self.calls = []

    def get(self, url, params=None, timeout=None):
        self.calls.append({"url": url, "params": params})
        if self.error:
            raise self.error
        return FakeResponse(self.payload)


TMDB_MOVIE = {
    "id": 550,
    "title": "Pathaan",
    "poster_path": "/p.jpg",
    "vote_average": 7.3,
    "runtime": 146,
    "genre_ids": [28, 53],
    "overview": "",
    "release_date": "2023-01-25",
    "original_language": "hi",
}


def test_no_api_key_uses_fallback():
    session = FakeSession()
    movies = CatalogProvider(api_key=None, session=session).fetch_catalog()
    assert [m["id"] for m in movies] == ["1", "2", "3", "4"]
    assert session.calls == []


def test_fallback_copies_are_independent():
    movies = CatalogProvider().fetch_catalog()
    movies[0]["showtimes"].append("1:00AM")
    assert "1:00AM" not in fallback_movies[0]["showtimes"]


def test_fetch_catalog_from_tmdb():
    session = FakeSession(payload={"results": [TMDB_MOVIE]})
    movies = CatalogProvider(api_key="key", session=session).fetch_catalog()

    assert movies == [
        {
            "id": "550",
            "title": "Pathaan",
            "poster": "https://image.tmdb.org/t/p/w500/p.jpg",
            "rating": 3.6,
            "duration": "2h 26min",
            "genre": "28, 53",
            "showtimes": ["12:00PM", "3:00PM", "6:00PM", "9:00PM"],
            "description": "Experience the magic of cinema with this latest release.",
            "releaseDate": "2023-01-25",
            "language": "Hindi",
        }
    ]
    assert session.calls[0]["url"].endswith("/discover/movie")
    assert session.calls[0]["params"]["api_key"] == "key"


def test_provider_error_falls_back():
    session = FakeSession(error=requests.ConnectionError("offline"))
    provider = CatalogProvider(api_key="key", session=session)
    assert [m["title"] for m in provider.fetch_catalog()] == [m["title"] for m in fallback_movies]
    assert provider.fetch_movie_by_id("3")["title"] == "Brahmastra Part 2: Dev"
    assert [m["title"] for m in provider.search_movies("rama")] == ["Ramayana"]


def test_fetch_movie_by_id_details():
    detail = dict(TMDB_MOVIE, genres=[{"name": "Action"}, {"name": "Thriller"}],
                  credits={"cast": [{"name": "Shah Rukh Khan"}, {"name": "Deepika Padukone"}]})
    movie = CatalogProvider(api_key="key", session=FakeSession(payload=detail)).fetch_movie_by_id(550)
    assert movie["genre"] == "Action, Thriller"
    assert movie["cast"] == ["Shah Rukh Khan", "Deepika Padukone"]


def test_fallback_lookup_and_search():
    provider = CatalogProvider()
    assert provider.fetch_movie_by_id(1)["title"] == "Saiyaara"
    assert provider.fetch_movie_by_id("99") is None
    assert [m["title"] for m in provider.search_movies("WAR")] == ["War 2"]
    assert len(provider.search_movies("  ")) == 4


def test_upcoming_from_fallback():
    provider = CatalogProvider()
    upcoming = provider.fetch_upcoming_movies(today=date(2025, 5, 1))
    assert [m["title"] for m in upcoming] == ["Brahmastra Part 2: Dev", "War 2"]
    assert provider.fetch_upcoming_movies(today=date(2026, 10, 18)) == []


def test_movie_from_tmdb_without_runtime():
    movie = movie_from_tmdb({"id": 1, "title": "X", "original_language": "en"})
    assert movie["duration"] == ""
    assert movie["language"] == "English"
    assert movie["rating"] == 0


@pytest.mark.parametrize(
    "genre, titles",
    [
        ("Drama", ["Saiyaara", "Ramayana"]),
        ("action", ["War 2"]),
        ("All", ["Saiyaara", "Ramayana", "Brahmastra Part 2: Dev", "War 2"]),
        (None, ["Saiyaara", "Ramayana", "Brahmastra Part 2: Dev", "War 2"]),
    ],
)
def test_filter_by_genre(genre, titles):
    assert [m["title"] for m in filter_by_genre(fallback_movies, genre)] == titles


def test_filter_by_rating():
    assert [m["title"] for m in filter_by_rating(fallback_movies, 8.5)] == [
        "Saiyaara",
        "Ramayana",
        "Brahmastra Part 2: Dev",
    ]


def test_sort_movies():
    assert [m["title"] for m in sort_movies(fallback_movies, "title")] == [
        "Brahmastra Part 2: Dev",
        "Ramayana",
        "Saiyaara",
        "War 2",
    ]
    assert sort_movies(fallback_movies, "rating")[0]["title"] == "Ramayana"
    by_date = sort_movies(fallback_movies + [{"title": "Undated", "rating": 1}], "releaseDate")
    assert [m["title"] for m in by_date] == ["War 2", "Brahmastra Part 2: Dev", "Ramayana", "Saiyaara", "Undated"]
