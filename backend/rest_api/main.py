"""
REST API main application.
Entry point for the FastAPI REST server.
"""

from fastapi import FastAPI

from shared.config.settings import settings
from rest_api.core.lifespan import lifespan
from rest_api.core.cors import configure_cors
from rest_api.core.middlewares import register_middlewares
from rest_api.routers.owner import router as owner_router
from rest_api.routers.public import health_router, menu_router as public_menu_router
from rest_api.routers.realtime import router as realtime_router


app = FastAPI(
    title="Restaurant POS Core API",
    description="Menu catalog, order lifecycle and sales reporting for restaurant owners",
    version="0.1.0",
    lifespan=lifespan,
)

register_middlewares(app)
configure_cors(app)

app.include_router(health_router)
app.include_router(public_menu_router)
app.include_router(owner_router)
app.include_router(realtime_router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("rest_api.main:app", host="0.0.0.0", port=settings.rest_api_port, reload=settings.debug)
