"""
Restaurant endpoint for the signed-in owner.
"""

from fastapi import APIRouter, Depends

from rest_api.models import Restaurant
from rest_api.routers.owner._base import current_restaurant
from rest_api.routers.schemas import RestaurantOutput


router = APIRouter(tags=["restaurant"])


@router.get("/restaurant", response_model=RestaurantOutput)
def get_restaurant(restaurant: Restaurant = Depends(current_restaurant)) -> RestaurantOutput:
    """The owner's restaurant, created with a default name on first access."""
    return RestaurantOutput.from_domain(restaurant)
