"""Pydantic schemas for cached restaurants."""

from pydantic import BaseModel, Field


class Photo(BaseModel):
    height: int
    width: int
    photo_reference: str


class Location(BaseModel):
    lat: float
    lng: float


class Restaurant(BaseModel):
    place_id: str = Field(..., min_length=1, description="External place identifier")
    name: str
    photos: Photo = Field(..., description="Representative photo")
    rating: float = Field(..., ge=0, le=5)
    vicinity: str
    geometry: Location

    model_config = {"from_attributes": True}


class PlacesSearchParams(BaseModel):
    location: str = Field(..., description="'lat,lng'")
    radius: str
    type: str = "restaurant"
    minprice: str = "0"


class RestaurantImage(BaseModel):
    image_url: str = Field(..., description="Host and path the photo reference redirects to")
