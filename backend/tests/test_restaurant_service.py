"""
Tests for restaurant lookup and creation.
"""

import pytest

from rest_api.models import Restaurant, default_restaurant_name, generate_slug
from rest_api.services.domain import RestaurantService
from shared.utils.exceptions import RestaurantNotFoundError


class TestSlugs:

    @pytest.mark.parametrize(
        "name,slug",
        [
            ("Spice Hut", "spice-hut"),
            ("priya's Restaurant", "priya-s-restaurant"),
            ("Dosa  &  Co.", "dosa-co-"),
            ("  Trim Me  ", "trim-me"),
        ],
    )
    def test_generate_slug(self, name, slug):
        assert generate_slug(name) == slug

    def test_default_name_from_email(self):
        assert default_restaurant_name("priya@example.com") == "priya's Restaurant"

    def test_default_name_without_email(self):
        assert default_restaurant_name(None) == "My's Restaurant"


class TestEnsureRestaurant:

    def test_created_on_first_use(self, memory_store):
        restaurant = RestaurantService(memory_store).ensure_restaurant("u1", "chef@example.com")
        assert restaurant.id == "u1"
        assert restaurant.owner_id == "u1"
        assert restaurant.name == "chef's Restaurant"
        assert restaurant.slug == "chef-s-restaurant"
        assert memory_store.get_document("restaurants/u1")["slug"] == "chef-s-restaurant"

    def test_existing_restaurant_is_returned_unchanged(self, memory_store):
        memory_store.set_document(
            "restaurants/u1",
            Restaurant(id="u1", name="Spice Hut", slug="spice-hut", owner_id="u1").to_document(),
        )
        restaurant = RestaurantService(memory_store).ensure_restaurant("u1", "other@example.com")
        assert restaurant.name == "Spice Hut"

    def test_get_missing(self, memory_store):
        with pytest.raises(RestaurantNotFoundError):
            RestaurantService(memory_store).get("nobody")


class TestFindBySlug:

    def test_find(self, any_store):
        service = RestaurantService(any_store)
        service.ensure_restaurant("u1", "chef@example.com")
        assert service.find_by_slug("chef-s-restaurant").id == "u1"

    def test_first_match_wins(self, memory_store):
        service = RestaurantService(memory_store)
        service.ensure_restaurant("u1", "chef@example.com")
        service.ensure_restaurant("u2", "chef@elsewhere.com")
        assert service.find_by_slug("chef-s-restaurant").id == "u1"

    def test_unknown_slug(self, memory_store):
        with pytest.raises(RestaurantNotFoundError):
            RestaurantService(memory_store).find_by_slug("nope")
