"""Mapping between stored rows and domain records."""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Mapping

from foodie.schemas.bookmark import Bookmark
from foodie.schemas.reservation import Reservation
from foodie.schemas.restaurant import Location, Photo, Restaurant
from foodie.schemas.review import RestaurantRating
from foodie.schemas.vote import VoteHistory

CALENDAR_FORMAT = "%Y-%m-%d %H:%M:%S"
CALENDAR_FORMAT_LENGTH = 19

INT32_MIN = -(2**31)
INT32_MAX = 2**31 - 1


class TimestampFormat(str, Enum):
    EPOCH = "epoch"
    CALENDAR = "calendar"


def narrow_int32(value: Any, field: str) -> int:
    """Convert to an int that fits a 32-bit column, refusing to wrap."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{field} must be an integer, got {value!r}")
    if not INT32_MIN <= value <= INT32_MAX:
        raise ValueError(f"{field}={value} does not fit a 32-bit column")
    return value


def widen_int(value: Any, field: str) -> int:
    """Read a stored 32-bit integer into a Python int."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"stored {field} is not an integer: {value!r}")
    return int(value)


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class TimestampCodec:
    """Encodes timestamps in the single representation a deployment uses.

    ``epoch`` stores whole seconds as a 32-bit integer; ``calendar`` stores a
    ``YYYY-MM-DD HH:MM:SS`` string in UTC. Decoding a value in the other
    representation is an error: one deployment never mixes them.
    """

    def __init__(self, timestamp_format: TimestampFormat = TimestampFormat.EPOCH) -> None:
        self.timestamp_format = TimestampFormat(timestamp_format)

    @classmethod
    def from_name(cls, name: str) -> "TimestampCodec":
        try:
            return cls(TimestampFormat(name.strip().lower()))
        except ValueError as exc:
            raise ValueError(f"Unknown timestamp format: {name!r} (expected 'epoch' or 'calendar')") from exc

    def now(self) -> datetime:
        return datetime.now(timezone.utc).replace(microsecond=0)

    def encode(self, value: datetime) -> int | str:
        value = _as_utc(value)
        if self.timestamp_format is TimestampFormat.CALENDAR:
            return value.strftime(CALENDAR_FORMAT)
        return narrow_int32(int(value.timestamp()), "timestamp")

    def decode(self, raw: Any) -> datetime:
        if self.timestamp_format is TimestampFormat.CALENDAR:
            if not isinstance(raw, str):
                raise ValueError(f"expected calendar timestamp string, got {raw!r}")
            return datetime.strptime(raw, CALENDAR_FORMAT).replace(tzinfo=timezone.utc)
        return datetime.fromtimestamp(widen_int(raw, "timestamp"), tz=timezone.utc)


def _mapping(row: Any) -> Mapping[str, Any]:
    return row._mapping if hasattr(row, "_mapping") else row


def restaurant_from_row(row: Any) -> Restaurant:
    m = _mapping(row)
    return Restaurant(
        place_id=m["place_id"],
        name=m["name"],
        photos=Photo(
            height=widen_int(m["photo_height"], "photo_height"),
            width=widen_int(m["photo_width"], "photo_width"),
            photo_reference=m["photo_reference"],
        ),
        rating=float(m["rating"]),
        vicinity=m["vicinity"],
        geometry=Location(lat=float(m["lat"]), lng=float(m["lng"])),
    )


def restaurant_to_params(restaurant: Restaurant) -> dict[str, Any]:
    return {
        "place_id": restaurant.place_id,
        "name": restaurant.name,
        "photo_height": narrow_int32(restaurant.photos.height, "photo_height"),
        "photo_width": narrow_int32(restaurant.photos.width, "photo_width"),
        "photo_reference": restaurant.photos.photo_reference,
        "rating": float(restaurant.rating),
        "vicinity": restaurant.vicinity,
        "lat": float(restaurant.geometry.lat),
        "lng": float(restaurant.geometry.lng),
    }


def bookmark_from_row(row: Any, codec: TimestampCodec) -> Bookmark:
    m = _mapping(row)
    return Bookmark(
        user_id=m["user_id"],
        place_id=m["place_id"],
        created_at=codec.decode(m["created_at"]),
    )


def bookmark_to_params(bookmark: Bookmark, codec: TimestampCodec) -> dict[str, Any]:
    return {
        "user_id": bookmark.user_id,
        "place_id": bookmark.place_id,
        "created_at": codec.encode(bookmark.created_at),
    }


def review_from_row(row: Any, codec: TimestampCodec) -> RestaurantRating:
    m = _mapping(row)
    return RestaurantRating(
        user_id=m["user_id"],
        place_id=m["place_id"],
        rating=float(m["rating"]),
        description=m["description"],
        timestamp=codec.decode(m["timestamp"]),
    )


def review_to_params(review: RestaurantRating, codec: TimestampCodec) -> dict[str, Any]:
    return {
        "user_id": review.user_id,
        "place_id": review.place_id,
        "rating": float(review.rating),
        "description": review.description,
        "timestamp": codec.encode(review.timestamp),
    }


def reservation_from_row(row: Any, codec: TimestampCodec) -> Reservation:
    m = _mapping(row)
    return Reservation(
        user_id=m["user_id"],
        place_id=m["place_id"],
        reservation_timestamp=codec.decode(m["reservation_timestamp"]),
        reservation_pax=widen_int(m["reservation_pax"], "reservation_pax"),
    )


def reservation_to_params(reservation: Reservation, codec: TimestampCodec) -> dict[str, Any]:
    return {
        "user_id": reservation.user_id,
        "place_id": reservation.place_id,
        "reservation_timestamp": codec.encode(reservation.reservation_timestamp),
        "reservation_pax": narrow_int32(reservation.reservation_pax, "reservation_pax"),
    }


def vote_history_from_row(row: Any, codec: TimestampCodec) -> VoteHistory:
    m = _mapping(row)
    return VoteHistory(
        user_ids=list(m["user_ids"]),
        voted_places=list(m["voted_places"]),
        vote_timestamp=codec.decode(m["vote_timestamp"]),
    )


def vote_history_to_params(history: VoteHistory, codec: TimestampCodec) -> dict[str, Any]:
    return {
        # participants form a set; keep first-seen order
        "user_ids": list(dict.fromkeys(history.user_ids)),
        "voted_places": list(history.voted_places),
        "vote_timestamp": codec.encode(history.vote_timestamp),
    }
