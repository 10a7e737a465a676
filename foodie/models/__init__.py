"""Expose ORM models so the metadata knows every table."""

from foodie.models.bookmark import UserFavouritePlace  # noqa: F401
from foodie.models.place import Place  # noqa: F401
from foodie.models.reservation import UserReservation  # noqa: F401
from foodie.models.review import UserReview  # noqa: F401
from foodie.models.vote import VotingHistory  # noqa: F401
