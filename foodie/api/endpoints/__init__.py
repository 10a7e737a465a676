"""Expose API endpoint routers."""

from foodie.api.endpoints import bookmarks, places, reservations, restaurants, reviews, votes

__all__ = ["bookmarks", "places", "reservations", "restaurants", "reviews", "votes"]
