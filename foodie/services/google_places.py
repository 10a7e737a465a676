"""Google Places client: nearby search, photo redirects and place details."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import aiohttp

from foodie.core.config import settings
from foodie.core.errors import PlacesApiError

logger = logging.getLogger(__name__)

PHOTO_MAX_WIDTH = 400


class GooglePlacesClient:
    """Fetches raw Places documents; normalization happens elsewhere."""

    def __init__(
        self,
        api_url: str | None = None,
        api_key: str | None = None,
        timeout_sec: float | None = None,
        photo_url: str | None = None,
        details_url: str | None = None,
    ) -> None:
        self.api_url = api_url or settings.google_maps_api_url
        self.photo_api_url = photo_url or settings.google_places_photo_url
        self.details_api_url = details_url or settings.google_places_details_url
        self.api_key = api_key if api_key is not None else settings.google_api_key
        self.timeout = aiohttp.ClientTimeout(total=timeout_sec or settings.places_http_timeout_sec)
        if not self.api_key:
            logger.warning("GOOGLE_API_KEY is not configured; places search will be rejected upstream")

    async def _get_json(self, url: str, params: dict[str, str], what: str) -> dict[str, Any]:
        try:
            async with aiohttp.ClientSession(timeout=self.timeout) as session:
                async with session.get(url, params=params) as response:
                    if response.status != 200:
                        body = await response.text()
                        raise PlacesApiError(f"{what} returned HTTP {response.status}: {body[:200]}")
                    return await response.json(content_type=None)
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as exc:
            logger.warning("Failed to query places api for %s due to: %s", what, exc)
            raise PlacesApiError(f"{what} failed: {exc}") from exc

    async def nearby_search(
        self,
        location: str,
        radius: str,
        place_type: str = "restaurant",
        minprice: str = "0",
    ) -> dict[str, Any]:
        """Return the parsed JSON body of a nearby search."""
        params = {
            # clients sometimes send the comma url-encoded twice
            "location": location.replace("%2C", ","),
            "radius": radius,
            "type": place_type,
            "minprice": minprice,
            "key": self.api_key or "",
        }
        return await self._get_json(self.api_url, params, "places search")

    async def place_details(self, place_id: str) -> dict[str, Any]:
        """Return the parsed JSON body of a place details lookup."""
        params = {"place_id": place_id, "key": self.api_key or ""}
        return await self._get_json(self.details_api_url, params, "place details")

    async def photo_url(self, photo_reference: str) -> str:
        """Follow the photo redirect and return the image's ``host/path``."""
        params = {
            "maxwidth": str(PHOTO_MAX_WIDTH),
            "photoreference": photo_reference,
            "key": self.api_key or "",
        }
        try:
            async with aiohttp.ClientSession(timeout=self.timeout) as session:
                async with session.get(self.photo_api_url, params=params) as response:
                    if response.status != 200:
                        raise PlacesApiError(f"places photo returned HTTP {response.status}")
                    final_url = response.url
        except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
            logger.warning("Failed to query places api for photo due to: %s", exc)
            raise PlacesApiError(f"places photo failed: {exc}") from exc
        if not final_url.host:
            raise PlacesApiError(f"places photo redirected to an unusable url: {final_url}")
        return f"{final_url.host}{final_url.path}"


def get_places_client() -> GooglePlacesClient:
    """FastAPI dependency for the places client."""
    return GooglePlacesClient()
