from fastapi.middleware.cors import CORSMiddleware
from kanban.routers.boards import router as board_router
from kanban.routers.board_lists import router as board_list_router
from kanban.routers.cards import router as card_router
from kanban.routers.labels import router as label_router
from kanban.routers.members import router as member_router
from kanban.routers.checklist import router as checklist_router

from fastapi import Request, FastAPI
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select
import logging
from contextlib import asynccontextmanager
from dotenv import load_dotenv
import os
import uvicorn

from .database import engine, init_db
from .exceptions import NotFoundError, InvalidPositionError, ConflictError
from .models import Board
from .seed import seed_database

load_dotenv()

# Logger
logger = logging.getLogger("uvicorn.error")


@asynccontextmanager
async def schema_lifespan(app: FastAPI):
    """Create missing tables if enabled via env var."""
    if os.getenv("CREATE_TABLES", "true").lower() == "true":
        init_db()
        logger.info("Database tables ready.")

    yield


@asynccontextmanager
async def seed_lifespan(app: FastAPI):
    """Load sample data into an empty database if enabled via env var."""
    if os.getenv("SEED_DATABASE", "false").lower() == "true":
        with Session(engine) as session:
            if session.exec(select(Board)).first():
                logger.info("Database already has boards, skipping seed.")
            else:
                seed_database(session)
                logger.info("Sample data seeded.")

    yield


# Combine lifespans into one
@asynccontextmanager
async def lifespan(app: FastAPI):
    async with schema_lifespan(app):
        async with seed_lifespan(app):
            yield


# App instance
app = FastAPI(title="Kanban Board API", lifespan=lifespan)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=[origin.strip() for origin in os.getenv("CORS_ORIGINS", "*").split(",")],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def describe_validation_error(exc: RequestValidationError) -> str:
    messages = []
    for error in exc.errors():
        field = error.get("loc", ())[-1] if error.get("loc") else None
        if error.get("type") == "missing":
            messages.append(f"{field} is required")
        elif isinstance(field, str) and field not in ("body", "query", "path"):
            messages.append(f"{field}: {error.get('msg')}")
        else:
            messages.append(str(error.get("msg")).removeprefix("Value error, "))
    return "; ".join(messages) or "Invalid request"


# Custom HTTP exception handler
@app.exception_handler(StarletteHTTPException)
async def custom_http_exception_handler(request: Request, exc: StarletteHTTPException):
    logger.warning(f"HTTPException on {request.url}: {exc.detail}")
    return error_response(exc.status_code, str(exc.detail))


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    message = describe_validation_error(exc)
    logger.warning(f"Invalid request on {request.url}: {message}")
    return error_response(400, message)


@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError):
    logger.warning(f"NotFound on {request.url}: {exc}")
    return error_response(404, str(exc))


@app.exception_handler(InvalidPositionError)
async def invalid_position_handler(request: Request, exc: InvalidPositionError):
    logger.warning(f"Invalid position on {request.url}: {exc}")
    return error_response(400, str(exc))


@app.exception_handler(ConflictError)
async def conflict_handler(request: Request, exc: ConflictError):
    logger.warning(f"Conflict on {request.url}: {exc}")
    return error_response(400, str(exc))


@app.exception_handler(IntegrityError)
async def integrity_error_handler(request: Request, exc: IntegrityError):
    logger.warning(f"Integrity error on {request.url}: {exc.orig}")
    return error_response(400, "Request conflicts with existing data")


@app.exception_handler(Exception)
async def unexpected_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unexpected error on {request.url}")
    return error_response(500, "Internal server error")


# API routers
prefix = "/api"

app.include_router(board_router, prefix=prefix)
app.include_router(board_list_router, prefix=prefix)
app.include_router(card_router, prefix=prefix)
app.include_router(label_router, prefix=prefix)
app.include_router(member_router, prefix=prefix)
app.include_router(checklist_router, prefix=prefix)


@app.get("/health")
@app.get(f"{prefix}/health")
async def health():
    return {"status": "ok"}


def run():
    uvicorn.run(
        "kanban.main:app",
        host=os.getenv("HOST", "127.0.0.1"),
        port=int(os.getenv("PORT", "8000")),
    )


if __name__ == "__main__":
    run()
