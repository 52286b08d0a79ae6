from contextlib import asynccontextmanager
from fastapi import FastAPI

from time_tracking.db import close_db, init_db
from time_tracking.middleware.error_handler import ErrorHandlerMiddleware, register_exception_handlers
from time_tracking.middleware.rate_limiter import RateLimiterMiddleware
from time_tracking.routes import admin, clock, health, staff
from time_tracking.utils.logger import logger


def create_app(connect_db: bool = True) -> FastAPI:
    """Build the API. Tests pass ``connect_db=False`` and put their own store on app.state."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Application startup completed")
        yield
        if connect_db:
            close_db(app)
        logger.info("Application shutdown completed")

    app = FastAPI(
        title="POS Staff Time Tracking API",
        description="Clock-in/out endpoints and admin analytics for point-of-sale staff",
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan
    )

    if connect_db:
        init_db(app)

    register_exception_handlers(app)

    # CORS headers are set per route (utils/cors.py) so each OPTIONS answer lists its own methods
    app.add_middleware(ErrorHandlerMiddleware)
    app.add_middleware(RateLimiterMiddleware)

    app.include_router(health.router, tags=["Health"])
    app.include_router(clock.router, prefix="/api/time-tracking", tags=["Time Tracking"])
    app.include_router(admin.router, prefix="/api/time-tracking", tags=["Admin Dashboard"])
    app.include_router(staff.router, prefix="/api/staff", tags=["Staff"])

    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
