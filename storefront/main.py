# storefront/main.py
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from storefront.api.routers import auth, carts, health, products, users
from storefront.data.database import Base, engine
from storefront.data.seed import seed
from storefront.domain.errors import ApiError, ErrorKind
from storefront.utils.logging import configure_logging, get_logger

# import all models before create_all
import storefront.data.models  # noqa: F401

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"Creating tables: {list(Base.metadata.tables.keys())}")
    try:
        Base.metadata.create_all(bind=engine)
    except Exception as e:
        logger.error(f"Failed to create tables: {e}")
        raise
    seed()
    yield


async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    if exc.kind is ErrorKind.INTERNAL:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"code": exc.status_code, "message": exc.message},
    )


def create_app(with_lifespan: bool = True) -> FastAPI:
    configure_logging()

    app = FastAPI(
        title="Storefront Service",
        version="1.0.0",
        lifespan=lifespan if with_lifespan else None,
    )

    app.add_exception_handler(ApiError, api_error_handler)

    # Include routers
    app.include_router(health.router)
    app.include_router(auth.router)
    app.include_router(users.router)
    app.include_router(products.router)
    app.include_router(carts.router)

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run("storefront.main:app", host="0.0.0.0", port=8000, reload=False)
