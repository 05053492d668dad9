from __future__ import annotations

import os
from typing import Any, Dict

import requests


TMDB_BASE = "https://api.themoviedb.org/3"
TRENDING_MEDIA_TYPES = ("movie", "tv")


class TMDbClient:
    def __init__(self, api_key: str | None = None, timeout: float = 20,
                 session: requests.Session | None = None):
        self.api_key = api_key or os.getenv("TMDB_API_KEY")
        if not self.api_key:
            raise RuntimeError("TMDB_API_KEY is required. Put it in your environment or .env file.")
        self.timeout = timeout
        self.session = session or requests.Session()

    def _get(self, path: str, params: Dict[str, Any] | None = None) -> Dict[str, Any]:
        params = {**(params or {}), "api_key": self.api_key}
        url = f"{TMDB_BASE}{path}"
        r = self.session.get(url, params=params, timeout=self.timeout)
        r.raise_for_status()
        return r.json()

    # ----- public helpers -----
    def popular_people(self, page: int = 1) -> Dict[str, Any]:
        return self._get("/person/popular", {"page": page})

    def trending(self, media_type: str, window: str = "week", page: int = 1) -> Dict[str, Any]:
        if media_type not in TRENDING_MEDIA_TYPES:
            raise ValueError(f"Unsupported trending media type: {media_type}")
        return self._get(f"/trending/{media_type}/{window}", {"page": page})
