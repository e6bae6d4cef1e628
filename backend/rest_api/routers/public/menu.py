"""
Public menu shared by link: a restaurant's available dishes by slug.
"""

from fastapi import APIRouter, Depends

from rest_api.repositories import DocumentStore, get_document_store
from rest_api.routers.schemas import PublicMenuOutput, PublicRestaurantOutput, grouped_menu_output
from rest_api.services.domain import public_menu


router = APIRouter(prefix="/api/public", tags=["public"])


@router.get("/restaurants/{slug}/menu", response_model=PublicMenuOutput)
def get_public_menu(
    slug: str,
    store: DocumentStore = Depends(get_document_store),
) -> PublicMenuOutput:
    restaurant, grouped = public_menu(store, slug)
    return PublicMenuOutput(
        restaurant=PublicRestaurantOutput(name=restaurant.name, slug=restaurant.slug),
        categories=grouped_menu_output(grouped),
    )
