from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from core.exceptions import TournamentException

from db import Base, engine
from core.config import settings
from core.logging import logger

from models.group import Group  # noqa: F401
from models.team import Team  # noqa: F401
from models.round import Round  # noqa: F401
from models.match import Match  # noqa: F401

# ROUTES
from api.routers.groups import router as groups_router
from api.routers.teams import router as teams_router
from api.routers.rounds import router as rounds_router
from api.routers.matches import router as matches_router
from api.routers.courts import router as courts_router
from api.routers.standings import router as standings_router
from api.routers.websocket import router as websocket_router
from services.websocket_manager import websocket_manager


app = FastAPI(title="Tournament API", version="1.0.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(TournamentException)
async def tournament_exception_handler(request: Request, exc: TournamentException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail, "type": "tournament_error"}
    )


@app.exception_handler(ValueError)
async def value_error_handler(request: Request, exc: ValueError):
    return JSONResponse(
        status_code=400,
        content={"detail": str(exc), "type": "validation_error"}
    )


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled exception on {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error", "type": type(exc).__name__}
    )


@app.on_event("startup")
async def startup_event():
    logger.info("Starting up application...")

    if settings.run_migrations:
        import subprocess
        logger.info("Running database migrations...")
        try:
            result = subprocess.run(
                ["python3", "-m", "alembic", "upgrade", "head"],
                capture_output=True,
                text=True,
                check=True
            )
            logger.info(f"Migrations completed successfully: {result.stdout}")
        except subprocess.CalledProcessError as e:
            logger.error(f"Migration failed: {e.stderr}")
            raise RuntimeError(f"Database migration failed: {e.stderr}")

    Base.metadata.create_all(bind=engine)
    logger.info("Database tables ready")


@app.on_event("shutdown")
async def shutdown_event():
    logger.info("Shutting down application...")


@app.get("/health", tags=["Health"])
async def health():
    return {"status": "ok", "websocket_connections": websocket_manager.get_connection_count()}


app.include_router(groups_router)
app.include_router(teams_router)
app.include_router(rounds_router)
app.include_router(matches_router)
app.include_router(courts_router)
app.include_router(standings_router)
app.include_router(websocket_router)
