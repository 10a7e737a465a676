import copy
import logging

import pytest

from foodie.core.errors import NormalizationSkip
from foodie.services.places_normalizer import normalize_place, normalize_places

PAYLOAD = {
    "results": [
        {
            "place_id": "p1",
            "name": "Tom's Diner",
            "photos": [{"height": 100, "width": 100, "photo_reference": "ref1"}],
            "rating": 4.5,
            "vicinity": "Main St",
            "geometry": {"location": {"lat": 1.23, "lng": 4.56}},
        }
    ]
}


def _place(place_id, **overrides):
    place = copy.deepcopy(PAYLOAD["results"][0])
    place["place_id"] = place_id
    place.update(overrides)
    return place


class TestNormalizePlaces:
    def test_single_result(self):
        restaurants = normalize_places(PAYLOAD)

        assert len(restaurants) == 1
        restaurant = restaurants[0]
        assert restaurant.place_id == "p1"
        assert restaurant.rating == 4.5
        assert (restaurant.geometry.lat, restaurant.geometry.lng) == (1.23, 4.56)
        assert restaurant.photos.photo_reference == "ref1"
        assert restaurant.name == "Toms Diner"

    def test_missing_rating_skips_only_that_entry(self, caplog):
        broken = _place("p2")
        del broken["rating"]
        payload = {"results": [_place("p1"), broken, _place("p3")]}

        with caplog.at_level(logging.WARNING):
            restaurants = normalize_places(payload)

        assert [r.place_id for r in restaurants] == ["p1", "p3"]
        assert "place_id=p2" in caplog.text
        assert "rating" in caplog.text

    def test_order_and_duplicates_are_kept(self):
        payload = {"results": [_place("b"), _place("a"), _place("b")]}
        assert [r.place_id for r in normalize_places(payload)] == ["b", "a", "b"]

    def test_numeric_strings_are_accepted(self):
        place = _place(
            "p1",
            rating="3.9",
            photos=[{"height": "400", "width": 300, "photo_reference": "r"}],
            geometry={"location": {"lat": "1.5", "lng": -2}},
        )
        restaurant = normalize_place(place)
        assert restaurant.rating == 3.9
        assert restaurant.photos.height == 400
        assert restaurant.geometry.lng == -2.0

    @pytest.mark.parametrize(
        "overrides",
        [
            {"photos": []},
            {"photos": None},
            {"rating": "n/a"},
            {"rating": 7},
            {"rating": True},
            {"geometry": {"viewport": {}}},
            {"vicinity": ""},
            {"name": "''"},
            {"name": " \"' "},
            {"photos": [{"height": 1.5, "width": 2, "photo_reference": "r"}]},
        ],
    )
    def test_malformed_entries_raise_skip(self, overrides):
        with pytest.raises(NormalizationSkip) as exc_info:
            normalize_place(_place("bad", **overrides))
        assert exc_info.value.place_id == "bad"

    def test_entry_without_place_id(self):
        place = _place("p1")
        del place["place_id"]
        assert normalize_places({"results": [place, "junk", None]}) == []

    @pytest.mark.parametrize("payload", [None, [], {"status": "REQUEST_DENIED"}, {"results": {}}])
    def test_unusable_payloads_yield_nothing(self, payload):
        assert normalize_places(payload) == []

    def test_zero_results(self):
        assert normalize_places({"status": "ZERO_RESULTS", "results": []}) == []
