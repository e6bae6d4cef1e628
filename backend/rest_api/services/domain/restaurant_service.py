"""
Restaurant Domain Service.

A restaurant is created the first time its owner signs in and is found
by slug for the public menu.
"""

from datetime import datetime, timezone

from shared.config.constants import RESTAURANTS_COLLECTION, restaurant_path
from shared.config.logging import get_logger, mask_user_id
from shared.utils.exceptions import RestaurantNotFoundError
from rest_api.models import Restaurant, default_restaurant_name, generate_slug
from rest_api.repositories import DocumentStore

logger = get_logger(__name__)


class RestaurantService:
    """Lookup and lazy creation of restaurant documents."""

    def __init__(self, store: DocumentStore):
        self._store = store

    def get(self, restaurant_id: str) -> Restaurant:
        data = self._store.get_document(restaurant_path(restaurant_id))
        if data is None:
            raise RestaurantNotFoundError(restaurant_id)
        return Restaurant.from_document(restaurant_id, data)

    def ensure_restaurant(self, owner_id: str, email: str | None = None) -> Restaurant:
        """
        Return the owner's restaurant, creating it on first use.

        The restaurant id is the owner's user id and the initial name is
        derived from the email's local part.
        """
        path = restaurant_path(owner_id)
        data = self._store.get_document(path)
        if data is not None:
            return Restaurant.from_document(owner_id, data)

        name = default_restaurant_name(email)
        restaurant = Restaurant(
            id=owner_id,
            name=name,
            slug=generate_slug(name),
            owner_id=owner_id,
            created_at=datetime.now(timezone.utc),
        )
        self._store.set_document(path, restaurant.to_document())

        logger.info(
            "Restaurant created",
            restaurant_id=mask_user_id(owner_id),
            slug=restaurant.slug,
        )
        return restaurant

    def find_by_slug(self, slug: str) -> Restaurant:
        """
        Find a restaurant by its public slug.

        Slugs are not unique; the first match wins.
        """
        matches = self._store.query_collection(RESTAURANTS_COLLECTION, "slug", slug)
        if not matches:
            raise RestaurantNotFoundError(slug)
        first = matches[0]
        return Restaurant.from_document(first.id, first.data)
