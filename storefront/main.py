# storefront/main.py
from fastapi import FastAPI
from storefront.data.database import Base, engine
from storefront.api import api_router
from storefront.utils.logging import get_logger
import uvicorn

logger = get_logger(__name__)

# import wszystkich modeli przed create_all
import storefront.data.models  # noqa: F401

logger.info(f"Initializing database, tables: {list(Base.metadata.tables.keys())}")

try:
    Base.metadata.create_all(bind=engine)
    logger.info("Database tables ready")
except Exception as e:
    logger.error(f"Failed to create tables: {e}")
    raise


def create_app() -> FastAPI:
    app = FastAPI(
        title="Storefront Cart Service",
        version="1.0.0",
    )

    app.include_router(api_router)

    return app


app = create_app()

if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)
