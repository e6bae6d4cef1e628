"""
Realtime endpoints: full snapshots of a restaurant's orders or menu pushed
over a WebSocket every time the collection changes.

Frames are complete replacements of the previous state; a client that
misses one loses nothing once the next arrives.

Authentication uses the JWT in the `token` query parameter; an invalid
token closes the socket with 1008 before it is accepted.
"""

from __future__ import annotations

import asyncio
from datetime import datetime, timezone
from typing import Any, Callable

from fastapi import APIRouter, Depends, Query, WebSocket, WebSocketDisconnect, status

from shared.config.constants import menu_collection_path, orders_collection_path
from shared.config.logging import realtime_logger as logger, mask_user_id
from shared.config.settings import settings
from shared.security.auth import verify_jwt
from shared.utils.exceptions import AppException, AuthRequiredError
from rest_api.models import MenuItem, Order
from rest_api.repositories import DocumentSnapshot, DocumentStore, get_document_store
from rest_api.routers.schemas import OrderOutput, RevenueSummaryOutput, grouped_menu_output
from rest_api.services.analytics import (
    new_pending_order_ids,
    status_counts,
    summarize,
    today_revenue,
)
from rest_api.services.domain import RestaurantService, group_by_category


router = APIRouter(prefix="/ws", tags=["realtime"])

FrameBuilder = Callable[[list[DocumentSnapshot]], dict[str, Any]]


class OrdersFrameBuilder:
    """Builds order frames and remembers which ids the client has already seen."""

    def __init__(self) -> None:
        self._seen_ids: set[str] | None = None

    def __call__(self, snapshots: list[DocumentSnapshot]) -> dict[str, Any]:
        orders = [Order.from_document(s.id, s.data) for s in snapshots]
        orders.sort(key=lambda o: o.order_number, reverse=True)

        new_pending = new_pending_order_ids(self._seen_ids, orders)
        self._seen_ids = {order.id for order in orders}

        now = datetime.now(timezone.utc)
        return {
            "type": "orders",
            "orders": [OrderOutput.from_domain(o).model_dump(mode="json") for o in orders],
            "summary": RevenueSummaryOutput.from_domain(summarize(orders)).model_dump(mode="json"),
            "today_revenue": str(today_revenue(orders, now, settings.local_timezone)),
            "status_counts": status_counts(orders),
            "new_pending_order_ids": new_pending,
        }


def build_menu_frame(snapshots: list[DocumentSnapshot]) -> dict[str, Any]:
    items = [MenuItem.from_document(s.id, s.data) for s in snapshots]
    return {
        "type": "menu",
        "categories": [c.model_dump(mode="json") for c in grouped_menu_output(group_by_category(items))],
    }


async def _authenticate(websocket: WebSocket, token: str | None) -> dict[str, Any] | None:
    if not token:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return None
    try:
        return verify_jwt(token)
    except AuthRequiredError:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return None


async def _stream_collection(
    websocket: WebSocket,
    store: DocumentStore,
    collection_path: str,
    build_frame: FrameBuilder,
) -> None:
    """
    Subscribe to a collection and forward each snapshot as a JSON frame
    until the client disconnects.
    """
    loop = asyncio.get_running_loop()
    queue: asyncio.Queue[list[DocumentSnapshot]] = asyncio.Queue()

    def on_snapshot(snapshots: list[DocumentSnapshot]) -> None:
        # Store writes notify from worker threads
        loop.call_soon_threadsafe(queue.put_nowait, snapshots)

    try:
        unsubscribe = await asyncio.to_thread(
            store.subscribe_to_collection, collection_path, on_snapshot
        )
    except AppException:
        await websocket.close(code=status.WS_1011_INTERNAL_ERROR)
        return

    await websocket.accept()

    async def send_frames() -> None:
        while True:
            snapshots = await queue.get()
            # Only the latest snapshot matters
            while not queue.empty():
                snapshots = queue.get_nowait()
            await websocket.send_json(build_frame(snapshots))

    async def wait_for_disconnect() -> None:
        while True:
            await websocket.receive_text()

    sender = asyncio.create_task(send_frames())
    receiver = asyncio.create_task(wait_for_disconnect())
    try:
        done, pending = await asyncio.wait({sender, receiver}, return_when=asyncio.FIRST_COMPLETED)
        for task in pending:
            task.cancel()
        for task in done:
            error = task.exception()
            if error is not None and not isinstance(error, WebSocketDisconnect):
                logger.error("Realtime stream failed", collection=collection_path, error=str(error))
    finally:
        unsubscribe()
        logger.debug("Realtime subscriber left", collection=collection_path)


@router.websocket("/orders")
async def orders_stream(
    websocket: WebSocket,
    token: str | None = Query(default=None),
    store: DocumentStore = Depends(get_document_store),
) -> None:
    """Live order list with summary figures and newly arrived pending orders."""
    ctx = await _authenticate(websocket, token)
    if ctx is None:
        return
    restaurant = await asyncio.to_thread(
        RestaurantService(store).ensure_restaurant, ctx["sub"], ctx.get("email")
    )
    logger.info("Orders subscriber connected", restaurant_id=mask_user_id(restaurant.id))
    await _stream_collection(
        websocket, store, orders_collection_path(restaurant.id), OrdersFrameBuilder()
    )


@router.websocket("/menu")
async def menu_stream(
    websocket: WebSocket,
    token: str | None = Query(default=None),
    store: DocumentStore = Depends(get_document_store),
) -> None:
    """Live menu grouped by category (unavailable dishes included)."""
    ctx = await _authenticate(websocket, token)
    if ctx is None:
        return
    restaurant = await asyncio.to_thread(
        RestaurantService(store).ensure_restaurant, ctx["sub"], ctx.get("email")
    )
    logger.info("Menu subscriber connected", restaurant_id=mask_user_id(restaurant.id))
    await _stream_collection(
        websocket, store, menu_collection_path(restaurant.id), build_menu_frame
    )
