import copy
from datetime import date

import requests
from loguru import logger

TMDB_BASE_URL = "https://api.themoviedb.org/3"
TMDB_IMAGE_URL = "https://image.tmdb.org/t/p/w500"
DEFAULT_SHOWTIMES = ["12:00PM", "3:00PM", "6:00PM", "9:00PM"]

fallback_movies = [
    {
        "id": "1",
        "title": "Saiyaara",
        "poster": "https://images.moneycontrol.com/static-mcnews/2025/07/20250718081410_saiyaara.jpg",
        "rating": 8.5,
        "duration": "2h 20min",
        "genre": "Drama",
        "showtimes": DEFAULT_SHOWTIMES,
        "description": "A heart-touching drama that explores the journey of love, loss, and hope.",
        "releaseDate": "2025-01-15",
        "director": "Imtiaz Ali",
        "cast": ["Kartik Aaryan", "Sara Ali Khan"],
        "language": "Hindi",
    },
    {
        "id": "2",
        "title": "Ramayana",
        "poster": "https://images.ctfassets.net/3sjsytt3tkv5/4TZbGmtfPDnaK6oUTvpn55/1920X1080_DNEG_RD_With_Logo.jpg",
        "rating": 9.0,
        "duration": "2h 40min",
        "genre": "Mythology, Drama",
        "showtimes": DEFAULT_SHOWTIMES,
        "description": "A grand retelling of the epic Ramayana.",
        "releaseDate": "2025-03-21",
        "director": "Nitesh Tiwari",
        "cast": ["Ranbir Kapoor", "Sai Pallavi", "Yash"],
        "language": "Hindi",
    },
    {
        "id": "3",
        "title": "Brahmastra Part 2: Dev",
        "poster": "https://preview.redd.it/brahmastra-2-poster.jpeg",
        "rating": 8.5,
        "duration": "2h 45min",
        "genre": "Fantasy, Adventure",
        "showtimes": DEFAULT_SHOWTIMES,
        "description": "The next chapter in the Astraverse, exploring the story of Dev and the mysteries of the Brahmastra.",
        "releaseDate": "2025-06-20",
        "director": "Ayan Mukerji",
        "cast": ["Ranbir Kapoor", "Alia Bhatt", "Ranveer Singh"],
        "language": "Hindi",
    },
    {
        "id": "4",
        "title": "War 2",
        "poster": "https://www.yashrajfilms.com/images/default-source/movies/war2/war2_767x430.jpg",
        "rating": 8.4,
        "duration": "2h 35min",
        "genre": "Action, Thriller",
        "showtimes": DEFAULT_SHOWTIMES,
        "description": "Hrithik Roshan returns in this high-stakes action thriller, continuing the War franchise.",
        "releaseDate": "2025-08-15",
        "director": "Ayan Mukerji",
        "cast": ["Hrithik Roshan", "Kiara Advani", "NTR Jr"],
        "language": "Hindi",
    },
]


def _duration(runtime):
    if not runtime:
        return ""
    return f"{runtime // 60}h {runtime % 60}min"


def movie_from_tmdb(data, default_description="Experience the magic of cinema with this latest release."):
    """Map a TMDB movie (list or detail shape) onto our movie dict."""
    if data.get("genres"):
        genre = ", ".join(g.get("name", "") for g in data["genres"])
    else:
        genre = ", ".join(str(g) for g in data.get("genre_ids", []))

    movie = {
        "id": str(data["id"]),
        "title": data.get("title", ""),
        "poster": f"{TMDB_IMAGE_URL}{data.get('poster_path') or ''}",
        # TMDB rates out of 10, the catalog shows out of 5
        "rating": round((data.get("vote_average") or 0) / 2, 1),
        "duration": _duration(data.get("runtime")),
        "genre": genre,
        "showtimes": list(DEFAULT_SHOWTIMES),
        "description": data.get("overview") or default_description,
        "releaseDate": data.get("release_date"),
        "language": "Hindi" if data.get("original_language", "hi") == "hi" else "English",
    }
    if "credits" in data:
        movie["cast"] = [c.get("name") for c in data["credits"].get("cast", [])[:5]]
    return movie


class CatalogProvider:
    """Movie list from TMDB, or the built-in list when TMDB can't be used."""

    def __init__(self, api_key=None, base_url=TMDB_BASE_URL, session=None, timeout=10):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout

    @property
    def use_local_data(self) -> bool:
        return not self.api_key

    def _get(self, path, **params):
        params.update({"api_key": self.api_key, "language": "en-US"})
        res = self.session.get(f"{self.base_url}{path}", params=params, timeout=self.timeout)
        res.raise_for_status()
        return res.json()

    def fetch_catalog(self):
        if self.use_local_data:
            logger.info("Using local movie data (no API key configured)")
            return copy.deepcopy(fallback_movies)

        try:
            data = self._get(
                "/discover/movie",
                with_origin_country="IN",
                sort_by="popularity.desc",
                include_adult="false",
                page=1,
            )
            return [movie_from_tmdb(m) for m in data.get("results", [])[:8]]
        except (requests.RequestException, ValueError, KeyError) as exc:
            logger.error(f"Error fetching movies from API: {exc}")
            return copy.deepcopy(fallback_movies)

    def fetch_movie_by_id(self, movie_id):
        movie_id = str(movie_id)
        if self.use_local_data:
            return self._fallback_by_id(movie_id)

        try:
            return movie_from_tmdb(self._get(f"/movie/{movie_id}", append_to_response="credits"))
        except (requests.RequestException, ValueError, KeyError) as exc:
            logger.error(f"Error fetching movie details for {movie_id}: {exc}")
            return self._fallback_by_id(movie_id)

    def search_movies(self, query):
        query = (query or "").strip()
        if not query:
            return self.fetch_catalog()

        if self.use_local_data:
            return self._fallback_search(query)

        try:
            data = self._get("/search/movie", query=query, page=1, include_adult="false")
            return [movie_from_tmdb(m) for m in data.get("results", [])[:8]]
        except (requests.RequestException, ValueError, KeyError) as exc:
            logger.error(f"Error searching movies: {exc}")
            return self._fallback_search(query)

    def fetch_upcoming_movies(self, today=None):
        today = today or date.today()
        if self.use_local_data:
            return self._fallback_upcoming(today)

        try:
            data = self._get("/movie/upcoming", page=1, region="IN")
            return [
                movie_from_tmdb(m, "Coming soon to theaters near you.")
                for m in data.get("results", [])[:6]
            ]
        except (requests.RequestException, ValueError, KeyError) as exc:
            logger.error(f"Error fetching upcoming movies: {exc}")
            return self._fallback_upcoming(today)

    def _fallback_by_id(self, movie_id):
        for movie in fallback_movies:
            if movie["id"] == movie_id:
                return copy.deepcopy(movie)
        return None

    def _fallback_search(self, query):
        query = query.lower()
        return [copy.deepcopy(m) for m in fallback_movies if query in m["title"].lower()]

    def _fallback_upcoming(self, today):
        return [
            copy.deepcopy(m)
            for m in fallback_movies
            if m.get("releaseDate") and date.fromisoformat(m["releaseDate"]) > today
        ]


def filter_by_genre(movies, genre):
    if not genre or genre == "All":
        return list(movies)
    return [m for m in movies if genre.lower() in m.get("genre", "").lower()]


def filter_by_rating(movies, min_rating):
    return [m for m in movies if m.get("rating", 0) >= min_rating]


def sort_movies(movies, sort_by):
    if sort_by == "title":
        return sorted(movies, key=lambda m: m.get("title", "").lower())
    if sort_by == "rating":
        return sorted(movies, key=lambda m: m.get("rating", 0), reverse=True)
    if sort_by == "releaseDate":
        # Movies without a release date go last
        dated = [m for m in movies if m.get("releaseDate")]
        undated = [m for m in movies if not m.get("releaseDate")]
        return sorted(dated, key=lambda m: m["releaseDate"], reverse=True) + undated
    return list(movies)
