import asyncio
import time
from unittest.mock import AsyncMock, Mock

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.exc import TimeoutError as PoolTimeoutError

from foodie.api.endpoints.places import search_nearby_places
from foodie.core.errors import PlacesApiError, PoolExhausted, StorageFailure
from foodie.db.pool import ConnectionAccessor
from foodie.db.session import get_repository
from foodie.main import WRONG_ENDPOINT_DETAIL, app
from foodie.schemas.restaurant import PlacesSearchParams
from foodie.services.codec import TimestampCodec
from foodie.services.google_places import get_places_client
from foodie.services.repository import PlacesRepository

SEARCH_RESPONSE = {
    "status": "OK",
    "results": [
        {
            "place_id": "p1",
            "name": "Tom's Diner",
            "photos": [{"height": 100, "width": 100, "photo_reference": "ref1"}],
            "rating": 4.5,
            "vicinity": "Main St",
            "geometry": {"location": {"lat": 1.23, "lng": 4.56}},
        },
        {"place_id": "p2", "name": "No Photos", "rating": 3.0},
    ],
}


@pytest.fixture
def places_client():
    client = Mock()
    client.nearby_search = AsyncMock(return_value=SEARCH_RESPONSE)
    return client


@pytest.fixture
def client(repo, places_client):
    app.dependency_overrides[get_repository] = lambda: repo
    app.dependency_overrides[get_places_client] = lambda: places_client
    # no context manager: skip lifespan schema creation against the default engine
    yield TestClient(app)
    app.dependency_overrides.clear()


class TestPlacesEndpoint:
    def test_search_normalizes_and_caches(self, client, repo, places_client):
        response = client.get(
            "/places",
            params={"location": "1.23%2C4.56", "radius": "500", "type": "restaurant", "minprice": "1"},
        )

        assert response.status_code == 200
        body = response.json()
        assert [r["place_id"] for r in body] == ["p1"]
        assert body[0]["name"] == "Toms Diner"
        assert repo.get_restaurant("p1") is not None
        places_client.nearby_search.assert_awaited_once_with(
            location="1.23%2C4.56", radius="500", place_type="restaurant", minprice="1"
        )

    def test_upstream_failure_is_bad_gateway(self, client, places_client):
        places_client.nearby_search.side_effect = PlacesApiError("timeout")

        response = client.get("/places", params={"location": "1,2", "radius": "500"})

        assert response.status_code == 502

    def test_photo_proxy_returns_image_url(self, client, places_client):
        places_client.photo_url = AsyncMock(return_value="lh3.googleusercontent.com/p/abc")

        response = client.get("/places/photo", params={"photo_reference": "ref1"})

        assert response.status_code == 200
        assert response.json() == {"image_url": "lh3.googleusercontent.com/p/abc"}
        places_client.photo_url.assert_awaited_once_with("ref1")

    def test_place_details_are_passed_through(self, client, places_client):
        document = {"status": "OK", "result": {"place_id": "p1", "opening_hours": {"open_now": True}}}
        places_client.place_details = AsyncMock(return_value=document)

        response = client.get("/places/place-details", params={"place_id": "p1"})

        assert response.json() == document

    def test_photo_upstream_failure_is_bad_gateway(self, client, places_client):
        places_client.photo_url = AsyncMock(side_effect=PlacesApiError("denied"))

        assert client.get("/places/photo", params={"photo_reference": "ref1"}).status_code == 502

    def test_cancelled_search_stops_retrying_the_cache_write(self):
        engine = Mock()
        engine.dialect.name = "sqlite"
        engine.connect.side_effect = PoolTimeoutError("busy")
        repo = PlacesRepository(ConnectionAccessor(engine, retry_delay=30), TimestampCodec())
        places_client = Mock()
        places_client.nearby_search = AsyncMock(return_value=SEARCH_RESPONSE)
        params = PlacesSearchParams(location="1,2", radius="500")

        async def cancel_mid_backoff():
            task = asyncio.create_task(search_nearby_places(params, places_client, repo))
            await asyncio.sleep(0.2)
            task.cancel()
            with pytest.raises(asyncio.CancelledError):
                await task

        started = time.monotonic()
        # asyncio.run also waits for the worker thread to finish
        asyncio.run(cancel_mid_backoff())

        assert time.monotonic() - started < 5
        assert engine.connect.call_count == 1


class TestRestaurantEndpoints:
    def test_unknown_restaurant_is_empty_object(self, client):
        response = client.get("/restaurants", params={"place_id": "missing"})
        assert response.status_code == 200
        assert response.json() == {}

    def test_lookup_and_search(self, client, repo, restaurant_factory):
        repo.store_browsed_places([restaurant_factory("p1", name="Golden Dragon")])

        assert client.get("/restaurants", params={"place_id": "p1"}).json()["name"] == "Golden Dragon"
        found = client.get("/restaurants/search", params={"name": "dragon"}).json()
        assert [r["place_id"] for r in found] == ["p1"]


class TestBookmarkEndpoints:
    def test_bookmark_flow(self, client, repo, restaurant_factory):
        repo.store_browsed_places([restaurant_factory("p1")])

        for _ in range(2):
            assert client.post("/bookmarks", json={"user_id": "u1", "place_id": "p1"}).status_code == 200

        assert len(client.get("/bookmarks", params={"user_id": "u1"}).json()) == 1
        favourites = client.get("/bookmarks/restaurants", params={"user_id": "u1"}).json()
        assert [r["place_id"] for r in favourites] == ["p1"]

        removed = client.delete("/bookmarks/remove", params={"user_id": "u1", "place_id": "p1"})
        assert removed.status_code == 200
        assert client.get("/bookmarks", params={"user_id": "u1"}).json() == []

    def test_invalid_body_is_rejected(self, client):
        assert client.post("/bookmarks", json={"user_id": "", "place_id": "p1"}).status_code == 422


class TestReviewEndpoints:
    def test_review_lifecycle(self, client):
        review = {"user_id": "u1", "place_id": "p1", "rating": 3, "description": "fine"}
        assert client.post("/reviews", json=review).status_code == 200
        assert client.put("/reviews", json={**review, "rating": 5}).status_code == 200

        reviews = client.get("/reviews/user", params={"user_id": "u1"}).json()
        assert [(r["place_id"], r["rating"]) for r in reviews] == [("p1", 5.0)]

        assert client.delete("/reviews", params={"user_id": "u1", "place_id": "p1"}).status_code == 200
        assert client.get("/reviews/restaurant", params={"place_id": "p1"}).json() == []

    def test_update_missing_review_is_not_found(self, client):
        response = client.put("/reviews", json={"user_id": "u1", "place_id": "p1", "rating": 4})
        assert response.status_code == 404

    def test_duplicate_review_is_server_error(self, client):
        review = {"user_id": "u1", "place_id": "p1", "rating": 3}
        client.post("/reviews", json=review)
        assert client.post("/reviews", json=review).status_code == 500


class TestReservationEndpoints:
    def test_valid_versus_all(self, client):
        client.post(
            "/reservations",
            json={"user_id": "u1", "place_id": "p1", "reservation_time": 946684800, "reservation_pax": 2},
        )
        client.post(
            "/reservations",
            json={"user_id": "u1", "place_id": "p2", "reservation_time": 2000000000, "reservation_pax": 4},
        )

        valid = client.get("/reservations", params={"user_id": "u1"}).json()
        assert [r["place_id"] for r in valid] == ["p2"]
        assert len(client.get("/reservations/list", params={"user_id": "u1"}).json()) == 2

        removed = client.delete("/reservations", params={"user_id": "u1", "place_id": "p2"}).json()
        assert removed["removed"] == 1


class TestVoteEndpoints:
    def test_persist_and_retrieve(self, client):
        payload = {
            "user_ids": ["u1", "u2"],
            "voted_places": [{"place_id": "p1", "name": "Toms Diner"}],
            "vote_timestamp": 1700000000,
        }
        assert client.post("/votes", json=payload).status_code == 200

        history = client.get("/votes", params={"user_id": "u2"}).json()
        assert len(history) == 1
        assert history[0]["voted_places"] == payload["voted_places"]


class TestErrorMapping:
    @pytest.mark.parametrize("error", [PoolExhausted(5), StorageFailure("get_user_reviews", RuntimeError("boom"))])
    def test_repository_errors_are_server_errors(self, error):
        failing = Mock()
        failing.get_user_reviews.side_effect = error
        app.dependency_overrides[get_repository] = lambda: failing
        try:
            response = TestClient(app).get("/reviews/user", params={"user_id": "u1"})
        finally:
            app.dependency_overrides.clear()

        assert response.status_code == 500
        assert "detail" in response.json()

    def test_unknown_route_gets_json_not_found(self, client):
        response = client.get("/no-such-endpoint")

        assert response.status_code == 404
        assert response.json() == {"detail": WRONG_ENDPOINT_DETAIL}

    def test_explicit_not_found_keeps_its_detail(self, client):
        response = client.put("/reviews", json={"user_id": "u1", "place_id": "p1", "rating": 4})

        assert response.json() == {"detail": "No review found for this restaurant"}
