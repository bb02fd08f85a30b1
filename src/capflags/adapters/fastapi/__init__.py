"""FastAPI adapter for capflags.

Example:
    from fastapi import FastAPI
    from capflags.adapters.fastapi import create_capabilities_router

    app = FastAPI()
    app.include_router(create_capabilities_router())
"""

from capflags.adapters.fastapi.router import create_capabilities_router

__all__ = ["create_capabilities_router"]
