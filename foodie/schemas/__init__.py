"""Expose schemas for easier import."""

from foodie.schemas.bookmark import Bookmark, BookmarkRequest  # noqa: F401
from foodie.schemas.reservation import Reservation, ReservationRequest  # noqa: F401
from foodie.schemas.restaurant import Location, Photo, PlacesSearchParams, Restaurant, RestaurantImage  # noqa: F401
from foodie.schemas.review import RestaurantRating, ReviewRequest  # noqa: F401
from foodie.schemas.vote import VoteHistory, VoteHistoryRequest  # noqa: F401
