import os

# Settings are read at import time; point them at SQLite before foodie loads.
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("AUTO_CREATE_SCHEMA", "false")
os.environ.setdefault("TIMESTAMP_FORMAT", "epoch")

import pytest
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from foodie.db.init_db import init_db
from foodie.db.pool import ConnectionAccessor
from foodie.schemas.restaurant import Location, Photo, Restaurant
from foodie.services.codec import TimestampCodec
from foodie.services.repository import PlacesRepository


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def repo(engine):
    return PlacesRepository(ConnectionAccessor(engine, retry_delay=0), TimestampCodec())


def make_restaurant(place_id: str = "p1", name: str = "Toms Diner", rating: float = 4.5) -> Restaurant:
    return Restaurant(
        place_id=place_id,
        name=name,
        photos=Photo(height=100, width=100, photo_reference=f"ref-{place_id}"),
        rating=rating,
        vicinity="Main St",
        geometry=Location(lat=1.23, lng=4.56),
    )


@pytest.fixture
def restaurant_factory():
    return make_restaurant
