# routes.py
from fastapi import FastAPI
from controller.api_controller import api_router
from controller.asset_controller import asset_router
from controller.ui_controller import ui_router


def register_routes(app: FastAPI) -> None:
    """Register & Access control controllers here."""
    # Fixed paths first: "/{key}" would otherwise shadow them
    app.include_router(asset_router)
    app.include_router(api_router)
    app.include_router(ui_router)
