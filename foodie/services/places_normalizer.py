"""Normalize places search results into Restaurant records."""

from __future__ import annotations

import logging
from typing import Any, Mapping

from pydantic import ValidationError

from foodie.core.errors import NormalizationSkip
from foodie.schemas.restaurant import Location, Photo, Restaurant

logger = logging.getLogger(__name__)

QUOTE_CHARS = ('"', "'")
ACCEPTED_STATUSES = ("OK", "ZERO_RESULTS")


def _strip_quotes(value: str) -> str:
    for quote in QUOTE_CHARS:
        value = value.replace(quote, "")
    return value


def _require(container: Any, key: str, path: str) -> Any:
    if not isinstance(container, Mapping):
        raise NormalizationSkip(f"{path} is not an object")
    value = container.get(key)
    if value is None:
        raise NormalizationSkip(f"missing {path}.{key}" if path else f"missing {key}")
    return value


def _text(value: Any, field: str, strip_quotes: bool = False) -> str:
    if isinstance(value, (dict, list, bool)):
        raise NormalizationSkip(f"{field} is not text: {value!r}")
    text = str(value)
    if strip_quotes:
        text = _strip_quotes(text)
    text = text.strip()
    if not text:
        raise NormalizationSkip(f"{field} is empty")
    return text


def _number(value: Any, field: str) -> float:
    # Numbers sometimes arrive as strings.
    if isinstance(value, bool):
        raise NormalizationSkip(f"{field} is not numeric: {value!r}")
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise NormalizationSkip(f"{field} is not numeric: {value!r}") from exc


def _integer(value: Any, field: str) -> int:
    number = _number(value, field)
    if not number.is_integer():
        raise NormalizationSkip(f"{field} is not an integer: {value!r}")
    return int(number)


def normalize_place(raw: Any) -> Restaurant:
    """Convert one search result into a Restaurant or raise NormalizationSkip."""
    if not isinstance(raw, Mapping):
        raise NormalizationSkip("result is not an object")

    place_id = _text(_require(raw, "place_id", ""), "place_id")
    try:
        name = _text(_require(raw, "name", ""), "name", strip_quotes=True)

        photos = _require(raw, "photos", "")
        if not isinstance(photos, list) or not photos:
            raise NormalizationSkip("photos is empty")
        photo = photos[0]

        location = _require(_require(raw, "geometry", ""), "location", "geometry")

        return Restaurant(
            place_id=place_id,
            name=name,
            photos=Photo(
                height=_integer(_require(photo, "height", "photos[0]"), "photos[0].height"),
                width=_integer(_require(photo, "width", "photos[0]"), "photos[0].width"),
                photo_reference=_text(
                    _require(photo, "photo_reference", "photos[0]"), "photos[0].photo_reference"
                ),
            ),
            rating=_number(_require(raw, "rating", ""), "rating"),
            vicinity=_text(_require(raw, "vicinity", ""), "vicinity"),
            geometry=Location(
                lat=_number(_require(location, "lat", "geometry.location"), "lat"),
                lng=_number(_require(location, "lng", "geometry.location"), "lng"),
            ),
        )
    except NormalizationSkip as exc:
        exc.place_id = place_id
        raise
    except ValidationError as exc:
        raise NormalizationSkip(f"invalid place: {exc.errors()[0]['msg']}", place_id) from exc


def normalize_places(payload: Any) -> list[Restaurant]:
    """Normalize a ``{"results": [...]}`` document, skipping malformed entries.

    Order follows the input. Duplicate place_ids are kept; the store ignores
    conflicting inserts.
    """
    if not isinstance(payload, Mapping):
        logger.warning("Places payload is not an object, nothing to normalize")
        return []

    status = payload.get("status")
    if status is not None and status not in ACCEPTED_STATUSES:
        logger.warning("Places search returned status=%s: %s", status, payload.get("error_message", ""))

    results = payload.get("results")
    if not isinstance(results, list):
        logger.warning("Places payload has no results array")
        return []

    restaurants: list[Restaurant] = []
    skipped = 0
    for index, raw in enumerate(results):
        try:
            restaurants.append(normalize_place(raw))
        except NormalizationSkip as exc:
            skipped += 1
            logger.warning(
                "Skipping place result #%d (place_id=%s): %s",
                index,
                exc.place_id or "?",
                exc.reason,
            )

    if skipped:
        logger.info("Normalized %d places, skipped %d", len(restaurants), skipped)
    return restaurants
