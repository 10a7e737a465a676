"""Repository operations for places, bookmarks, reviews, reservations and votes.

Each operation checks one connection out of the pool, runs one parameterized
statement and maps the rows back into pydantic records. Execution errors are
rolled back and raised as :class:`StorageFailure`; nothing is swallowed.
"""

from __future__ import annotations

import logging
import threading
from datetime import datetime
from typing import Any, Callable, Iterable, Sequence, TypeVar

from sqlalchemy import delete, func, literal, select, type_coerce, update
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.engine import Row
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.sql import Executable

from foodie.core.config import settings
from foodie.core.errors import StorageFailure
from foodie.db.pool import ConnectionAccessor
from foodie.models import Place, UserFavouritePlace, UserReservation, UserReview, VotingHistory
from foodie.schemas.bookmark import Bookmark
from foodie.schemas.reservation import Reservation
from foodie.schemas.restaurant import Restaurant
from foodie.schemas.review import RestaurantRating
from foodie.schemas.vote import VoteHistory
from foodie.services import codec as row_codec
from foodie.services.codec import TimestampCodec

logger = logging.getLogger(__name__)

T = TypeVar("T")

places = Place.__table__
favourites = UserFavouritePlace.__table__
reviews = UserReview.__table__
reservations = UserReservation.__table__
voting_history = VotingHistory.__table__

LIKE_ESCAPE = "\\"


def _escape_like(value: str) -> str:
    return (
        value.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )


class PlacesRepository:
    """Data access for the five tables behind the REST endpoints."""

    def __init__(self, accessor: ConnectionAccessor, timestamp_codec: TimestampCodec | None = None) -> None:
        self.accessor = accessor
        self.codec = timestamp_codec or TimestampCodec.from_name(settings.timestamp_format)

    def with_cancellation(self, cancel_event: threading.Event) -> "PlacesRepository":
        """Return a repository whose connection acquisition stops once ``cancel_event`` is set."""
        return PlacesRepository(self.accessor.with_cancellation(cancel_event), self.codec)

    # -- plumbing ---------------------------------------------------------

    def _insert_ignore(self, table):
        """INSERT ... ON CONFLICT DO NOTHING for the active dialect."""
        dialect = self.accessor.dialect_name
        if dialect == "postgresql":
            return postgresql.insert(table).on_conflict_do_nothing()
        if dialect == "sqlite":
            return sqlite.insert(table).on_conflict_do_nothing()
        raise NotImplementedError(f"upsert-or-ignore is not supported on {dialect}")

    def _execute(self, operation: str, statement: Executable) -> int:
        """Run a write statement, commit it and return the affected row count."""
        with self.accessor.acquire() as conn:
            try:
                result = conn.execute(statement)
                conn.commit()
                return result.rowcount
            except SQLAlchemyError as exc:
                conn.rollback()
                logger.error("%s failed: %s", operation, exc)
                raise StorageFailure(operation, exc) from exc

    def _fetch(self, operation: str, statement: Executable, decode: Callable[[Row], T]) -> list[T]:
        """Run a read statement and decode every row while the connection is held."""
        with self.accessor.acquire() as conn:
            try:
                rows = conn.execute(statement).fetchall()
            except SQLAlchemyError as exc:
                conn.rollback()
                logger.error("%s failed: %s", operation, exc)
                raise StorageFailure(operation, exc) from exc
        try:
            return [decode(row) for row in rows]
        except (ValueError, KeyError, TypeError) as exc:
            logger.error("%s returned undecodable rows: %s", operation, exc)
            raise StorageFailure(operation, exc) from exc

    def _encode(self, operation: str, encode: Callable[[], Any]) -> Any:
        try:
            return encode()
        except ValueError as exc:
            raise StorageFailure(operation, exc) from exc

    # -- restaurants ------------------------------------------------------

    def store_browsed_places(self, restaurants: Iterable[Restaurant]) -> int:
        """Cache a normalized batch in one statement; existing place_ids are kept."""
        batch = list(restaurants)
        if not batch:
            return 0
        values = self._encode(
            "store_browsed_places",
            lambda: [row_codec.restaurant_to_params(restaurant) for restaurant in batch],
        )
        inserted = self._execute("store_browsed_places", self._insert_ignore(places).values(values))
        logger.info("Stored %d of %d browsed places", inserted, len(batch))
        return inserted

    def get_restaurant(self, place_id: str) -> Restaurant | None:
        stmt = select(places).where(places.c.place_id == place_id)
        found = self._fetch("get_restaurant", stmt, row_codec.restaurant_from_row)
        return found[0] if found else None

    def search_restaurants(self, name: str, limit: int | None = None) -> list[Restaurant]:
        """Case-insensitive substring match on the restaurant name."""
        pattern = f"%{_escape_like(name)}%"
        stmt = (
            select(places)
            .where(places.c.name.ilike(pattern, escape=LIKE_ESCAPE))
            .order_by(places.c.name, places.c.place_id)
        )
        if limit is not None:
            stmt = stmt.limit(limit)
        return self._fetch("search_restaurants", stmt, row_codec.restaurant_from_row)

    # -- bookmarks --------------------------------------------------------

    def bookmark_place(self, user_id: str, place_id: str) -> None:
        """Bookmark a place; bookmarking it again is a no-op."""
        bookmark = Bookmark(user_id=user_id, place_id=place_id, created_at=self.codec.now())
        params = self._encode("bookmark_place", lambda: row_codec.bookmark_to_params(bookmark, self.codec))
        self._execute("bookmark_place", self._insert_ignore(favourites).values(**params))

    def remove_bookmark(self, user_id: str, place_id: str) -> None:
        stmt = delete(favourites).where(
            favourites.c.user_id == user_id,
            favourites.c.place_id == place_id,
        )
        self._execute("remove_bookmark", stmt)

    def list_bookmarks(self, user_id: str) -> list[Bookmark]:
        stmt = (
            select(favourites)
            .where(favourites.c.user_id == user_id)
            .order_by(favourites.c.created_at.desc(), favourites.c.place_id)
        )
        return self._fetch("list_bookmarks", stmt, lambda row: row_codec.bookmark_from_row(row, self.codec))

    def get_bookmarked_restaurants(self, user_id: str) -> list[Restaurant]:
        """Bookmarked places that are present in the places cache, newest first."""
        stmt = (
            select(places)
            .join(favourites, favourites.c.place_id == places.c.place_id)
            .where(favourites.c.user_id == user_id)
            .order_by(favourites.c.created_at.desc(), places.c.place_id)
        )
        return self._fetch("get_bookmarked_restaurants", stmt, row_codec.restaurant_from_row)

    # -- reviews ----------------------------------------------------------

    def add_user_review(
        self,
        user_id: str,
        place_id: str,
        rating: float,
        description: str | None = None,
    ) -> None:
        """Insert a review. A second review for the same pair is a StorageFailure."""
        review = RestaurantRating(
            user_id=user_id,
            place_id=place_id,
            rating=rating,
            description=description,
            timestamp=self.codec.now(),
        )
        params = self._encode("add_user_review", lambda: row_codec.review_to_params(review, self.codec))
        self._execute("add_user_review", reviews.insert().values(**params))

    def update_user_review(
        self,
        user_id: str,
        place_id: str,
        rating: float,
        description: str | None = None,
    ) -> bool:
        """Update rating (and description, when given) in place; False if no review exists."""
        values: dict[str, Any] = {
            "rating": float(rating),
            "timestamp": self._encode("update_user_review", lambda: self.codec.encode(self.codec.now())),
        }
        if description is not None:
            values["description"] = description
        stmt = (
            update(reviews)
            .where(reviews.c.user_id == user_id, reviews.c.place_id == place_id)
            .values(**values)
        )
        return self._execute("update_user_review", stmt) > 0

    def remove_user_review(self, user_id: str, place_id: str) -> None:
        stmt = delete(reviews).where(reviews.c.user_id == user_id, reviews.c.place_id == place_id)
        self._execute("remove_user_review", stmt)

    def get_restaurant_reviews(self, place_id: str) -> list[RestaurantRating]:
        stmt = (
            select(reviews)
            .where(reviews.c.place_id == place_id)
            .order_by(reviews.c.timestamp.desc(), reviews.c.user_id)
        )
        return self._fetch("get_restaurant_reviews", stmt, lambda row: row_codec.review_from_row(row, self.codec))

    def get_user_reviews(self, user_id: str) -> list[RestaurantRating]:
        stmt = (
            select(reviews)
            .where(reviews.c.user_id == user_id)
            .order_by(reviews.c.timestamp.desc(), reviews.c.place_id)
        )
        return self._fetch("get_user_reviews", stmt, lambda row: row_codec.review_from_row(row, self.codec))

    # -- reservations -----------------------------------------------------

    def add_reservation(
        self,
        user_id: str,
        place_id: str,
        reservation_timestamp: datetime,
        reservation_pax: int,
    ) -> None:
        reservation = Reservation(
            user_id=user_id,
            place_id=place_id,
            reservation_timestamp=reservation_timestamp,
            reservation_pax=reservation_pax,
        )
        params = self._encode(
            "add_reservation", lambda: row_codec.reservation_to_params(reservation, self.codec)
        )
        self._execute("add_reservation", reservations.insert().values(**params))

    def remove_reservation(
        self,
        user_id: str,
        place_id: str,
        reservation_timestamp: datetime | None = None,
    ) -> int:
        """Delete the pair's reservations, or only the one at ``reservation_timestamp``."""
        stmt = delete(reservations).where(
            reservations.c.user_id == user_id,
            reservations.c.place_id == place_id,
        )
        if reservation_timestamp is not None:
            stored = self._encode("remove_reservation", lambda: self.codec.encode(reservation_timestamp))
            stmt = stmt.where(reservations.c.reservation_timestamp == stored)
        return self._execute("remove_reservation", stmt)

    def _reservations(self, operation: str, user_id: str, upcoming_only: bool) -> list[Reservation]:
        stmt = select(reservations).where(reservations.c.user_id == user_id)
        if upcoming_only:
            now = self._encode(operation, lambda: self.codec.encode(self.codec.now()))
            stmt = stmt.where(reservations.c.reservation_timestamp > now)
        stmt = stmt.order_by(reservations.c.reservation_timestamp, reservations.c.id)
        return self._fetch(operation, stmt, lambda row: row_codec.reservation_from_row(row, self.codec))

    def get_valid_reservations(self, user_id: str) -> list[Reservation]:
        """Reservations whose time has not yet passed, soonest first."""
        return self._reservations("get_valid_reservations", user_id, upcoming_only=True)

    def get_all_reservations(self, user_id: str) -> list[Reservation]:
        return self._reservations("get_all_reservations", user_id, upcoming_only=False)

    # -- voting history ---------------------------------------------------

    def store_vote_history(
        self,
        user_ids: Sequence[str],
        voted_places: Sequence[Any],
        vote_timestamp: datetime,
    ) -> None:
        history = VoteHistory(
            user_ids=list(user_ids),
            voted_places=list(voted_places),
            vote_timestamp=vote_timestamp,
        )
        params = self._encode(
            "store_vote_history", lambda: row_codec.vote_history_to_params(history, self.codec)
        )
        self._execute("store_vote_history", voting_history.insert().values(**params))

    def _participant_filter(self, user_id: str):
        if self.accessor.dialect_name == "postgresql":
            return type_coerce(voting_history.c.user_ids, JSONB).contains([user_id])
        members = func.json_each(voting_history.c.user_ids).table_valued("value")
        return (
            select(literal(1))
            .select_from(members)
            .where(members.c.value == user_id)
            .correlate(voting_history)
            .exists()
        )

    def get_user_vote_history(self, user_id: str) -> list[VoteHistory]:
        """Voting sessions the user took part in, newest first."""
        stmt = (
            select(voting_history)
            .where(self._participant_filter(user_id))
            .order_by(voting_history.c.vote_timestamp.desc(), voting_history.c.id.desc())
        )
        return self._fetch(
            "get_user_vote_history", stmt, lambda row: row_codec.vote_history_from_row(row, self.codec)
        )
