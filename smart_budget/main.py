import logging
import os

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .controllers import admin, auth, budgets, expenses, realtime, users
from .database import engine, Base
from .services.realtime import ConnectionManager

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Smart Budget Tracker API")

# Configure CORS - explicit origins required when allow_credentials=True
origins = [
    origin.strip()
    for origin in os.getenv("CORS_ORIGINS", "http://localhost:3000,http://localhost:5173").split(",")
    if origin.strip()
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# One registry per process; handlers reach it through dependencies.get_notifier
app.state.notifier = ConnectionManager()


def readable_error(error: dict) -> str:
    """Turn one pydantic error into a message fit for the client."""
    message = error.get("msg", "Invalid request")
    if message.startswith("Value error, "):
        return message[len("Value error, "):]
    field = ".".join(
        str(part) for part in error.get("loc", ())
        if not isinstance(part, int) and part not in ("body", "query", "path", "header")
    )
    return f"{field}: {message}" if field else message


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    detail = readable_error(errors[0]) if errors else "Invalid request"
    logger.info(f"Rejected {request.method} {request.url.path}: {detail}")
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": detail})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


# Create database tables
Base.metadata.create_all(bind=engine)

# Include routers
app.include_router(auth.router, prefix="/api/auth", tags=["auth"])
app.include_router(expenses.router, prefix="/api/expenses", tags=["expenses"])
app.include_router(budgets.router, prefix="/api/budgets", tags=["budgets"])
app.include_router(admin.router, prefix="/api/admin", tags=["admin"])
app.include_router(users.router, prefix="/api/users", tags=["users"])
app.include_router(realtime.router, tags=["realtime"])
