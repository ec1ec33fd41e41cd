# app/api/__init__.py
from fastapi import FastAPI
from app.api.routers import auth, carts, health, products, users


def create_app(**kwargs) -> FastAPI:
    app = FastAPI(title="Cart Service", version="1.0.0", **kwargs)

    # Include routers
    app.include_router(health.router)
    app.include_router(auth.router)
    app.include_router(users.router)
    app.include_router(products.router)
    app.include_router(carts.router)

    return app
