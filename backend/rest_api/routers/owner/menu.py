"""
Menu catalog endpoints.
"""

from fastapi import APIRouter, Depends, Query, status

from rest_api.routers.owner._base import get_menu_service
from rest_api.routers.schemas import (
    MenuCategoryOutput,
    MenuItemCreate,
    MenuItemOutput,
    MenuItemUpdate,
    grouped_menu_output,
)
from rest_api.services.domain import MenuService, group_by_category, search_items


router = APIRouter(tags=["menu"])


@router.get("/menu", response_model=list[MenuItemOutput])
def list_menu(service: MenuService = Depends(get_menu_service)) -> list[MenuItemOutput]:
    """Every dish, including unavailable ones."""
    return [MenuItemOutput.from_domain(item) for item in service.list_items()]


@router.get("/menu/grouped", response_model=list[MenuCategoryOutput])
def list_menu_grouped(service: MenuService = Depends(get_menu_service)) -> list[MenuCategoryOutput]:
    return grouped_menu_output(service.list_grouped_by_category())


@router.get("/menu/orderable", response_model=list[MenuCategoryOutput])
def list_orderable_menu(
    search: str | None = Query(default=None, max_length=100),
    service: MenuService = Depends(get_menu_service),
) -> list[MenuCategoryOutput]:
    """Available dishes grouped by category, optionally narrowed by name."""
    available = [item for item in service.list_items() if item.available]
    return grouped_menu_output(group_by_category(search_items(available, search)))


@router.post("/menu", response_model=MenuItemOutput, status_code=status.HTTP_201_CREATED)
def add_menu_item(
    body: MenuItemCreate,
    service: MenuService = Depends(get_menu_service),
) -> MenuItemOutput:
    item = service.add_item(body.name, body.price_half, body.price_full, body.category)
    return MenuItemOutput.from_domain(item)


@router.put("/menu/{item_id}", response_model=MenuItemOutput)
def edit_menu_item(
    item_id: str,
    body: MenuItemUpdate,
    service: MenuService = Depends(get_menu_service),
) -> MenuItemOutput:
    item = service.edit_item(item_id, body.name, body.price_half, body.price_full)
    return MenuItemOutput.from_domain(item)


@router.post("/menu/{item_id}/toggle", response_model=MenuItemOutput)
def toggle_menu_item(
    item_id: str,
    service: MenuService = Depends(get_menu_service),
) -> MenuItemOutput:
    return MenuItemOutput.from_domain(service.toggle_availability(item_id))


@router.delete("/menu/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_menu_item(
    item_id: str,
    confirm: bool = False,
    service: MenuService = Depends(get_menu_service),
) -> None:
    """Hard delete; requires ?confirm=true."""
    service.delete_item(item_id, confirmed=confirm)
