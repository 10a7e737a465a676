"""Place model."""

from sqlalchemy import Column, Float, Integer, String, Text

from foodie.db.base import Base


class Place(Base):
    """Cached restaurant from the external places search."""

    __tablename__ = "places"

    place_id = Column(String(255), primary_key=True)
    name = Column(String(255), nullable=False, index=True)
    photo_height = Column(Integer, nullable=False)
    photo_width = Column(Integer, nullable=False)
    photo_reference = Column(Text, nullable=False)
    rating = Column(Float, nullable=False)  # 0-5
    vicinity = Column(Text, nullable=False)
    lat = Column(Float, nullable=False)
    lng = Column(Float, nullable=False)
