"""
Menu Catalog Domain Service.

Dishes with two independent price tiers and an availability flag. Every
screen consumes the catalog grouped by category; order building only
sees available dishes.
"""

from datetime import datetime, timezone

from shared.config.constants import Limits, menu_collection_path
from shared.config.logging import get_logger, mask_user_id
from shared.utils.exceptions import ConfirmationRequiredError, MenuItemNotFoundError
from shared.utils.validators import (
    format_decimal,
    sanitize_search_term,
    validate_price,
    validate_text,
)
from rest_api.models import MenuItem, Restaurant
from rest_api.repositories import DocumentNotFoundError, DocumentStore
from rest_api.services.domain.restaurant_service import RestaurantService

logger = get_logger(__name__)


def group_by_category(items: list[MenuItem]) -> dict[str, list[MenuItem]]:
    """Group items by category, categories in first-seen order."""
    grouped: dict[str, list[MenuItem]] = {}
    for item in items:
        grouped.setdefault(item.category, []).append(item)
    return grouped


def search_items(items: list[MenuItem], term: str | None) -> list[MenuItem]:
    """Case-insensitive substring match on the dish name. Blank terms match everything."""
    needle = sanitize_search_term(term)
    if not needle:
        return list(items)
    return [item for item in items if needle in item.name.lower()]


class MenuService:
    """Domain service for one restaurant's menu."""

    def __init__(self, store: DocumentStore, restaurant_id: str):
        self._store = store
        self._restaurant_id = restaurant_id
        self._collection = menu_collection_path(restaurant_id)

    @property
    def collection_path(self) -> str:
        return self._collection

    def _item_path(self, item_id: str) -> str:
        return f"{self._collection}/{item_id}"

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def get_item(self, item_id: str) -> MenuItem:
        data = self._store.get_document(self._item_path(item_id))
        if data is None:
            raise MenuItemNotFoundError(item_id, restaurant_id=mask_user_id(self._restaurant_id))
        return MenuItem.from_document(item_id, data)

    def list_items(self) -> list[MenuItem]:
        """Every dish, available or not."""
        return [
            MenuItem.from_document(snapshot.id, snapshot.data)
            for snapshot in self._store.list_collection(self._collection)
        ]

    def list_grouped_by_category(self, available_only: bool = False) -> dict[str, list[MenuItem]]:
        """
        Catalog grouped by category.

        available_only=True is the order-building view; the management
        listing keeps unavailable dishes.
        """
        items = self.list_items()
        if available_only:
            items = [item for item in items if item.available]
        return group_by_category(items)

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    def add_item(self, name, price_half, price_full, category) -> MenuItem:
        """
        Create an available dish.

        Raises:
            ValidationError: If any field is empty, non-numeric or negative
        """
        item = MenuItem(
            id="",
            name=validate_text(name, "name", Limits.MAX_NAME_LENGTH),
            category=validate_text(category, "category", Limits.MAX_CATEGORY_LENGTH),
            price_half=validate_price(price_half, "priceHalf"),
            price_full=validate_price(price_full, "priceFull"),
            available=True,
            created_at=datetime.now(timezone.utc),
        )
        item.id = self._store.create_document(self._collection, item.to_document())

        logger.info(
            "Menu item added",
            restaurant_id=mask_user_id(self._restaurant_id),
            item_id=item.id,
            category=item.category,
        )
        return item

    def edit_item(self, item_id: str, name, price_half, price_full) -> MenuItem:
        """Overwrite name and prices; category and availability are untouched."""
        fields = {
            "name": validate_text(name, "name", Limits.MAX_NAME_LENGTH),
            "priceHalf": format_decimal(validate_price(price_half, "priceHalf")),
            "priceFull": format_decimal(validate_price(price_full, "priceFull")),
        }
        self._update(item_id, fields)
        logger.info(
            "Menu item edited",
            restaurant_id=mask_user_id(self._restaurant_id),
            item_id=item_id,
        )
        return self.get_item(item_id)

    def toggle_availability(self, item_id: str) -> MenuItem:
        item = self.get_item(item_id)
        self._update(item_id, {"available": not item.available})
        item.available = not item.available

        logger.info(
            "Menu item availability toggled",
            restaurant_id=mask_user_id(self._restaurant_id),
            item_id=item_id,
            available=item.available,
        )
        return item

    def delete_item(self, item_id: str, confirmed: bool = False) -> None:
        """
        Hard delete a dish. Orders already placed keep their own line copies.

        Raises:
            ConfirmationRequiredError: If not explicitly confirmed
            MenuItemNotFoundError: If the dish is already gone
        """
        if not confirmed:
            raise ConfirmationRequiredError("delete menu item", item_id=item_id)
        if not self._store.delete_document(self._item_path(item_id)):
            raise MenuItemNotFoundError(item_id, restaurant_id=mask_user_id(self._restaurant_id))

        logger.info(
            "Menu item deleted",
            restaurant_id=mask_user_id(self._restaurant_id),
            item_id=item_id,
        )

    def _update(self, item_id: str, fields: dict) -> None:
        try:
            self._store.update_fields(self._item_path(item_id), fields)
        except DocumentNotFoundError:
            raise MenuItemNotFoundError(item_id, restaurant_id=mask_user_id(self._restaurant_id))


def public_menu(store: DocumentStore, slug: str) -> tuple[Restaurant, dict[str, list[MenuItem]]]:
    """Restaurant found by slug and its available dishes grouped by category."""
    restaurant = RestaurantService(store).find_by_slug(slug)
    menu = MenuService(store, restaurant.id).list_grouped_by_category(available_only=True)
    return restaurant, menu
