import logging

import uvicorn
from fastapi import FastAPI, Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.core.config import settings
from app.database import Base, engine
from app.models import connected_game, follower, user  # noqa: F401  (register tables)
from app.routers import auth, follow_routes, games, user_routes

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)


class EmptyPreflightCORSMiddleware(CORSMiddleware):
    """CORSMiddleware whose preflight replies carry headers only, no body."""

    def preflight_response(self, request_headers):
        response = super().preflight_response(request_headers)
        headers = {
            k: v for k, v in response.headers.items() if k not in ("content-length", "content-type")
        }
        return Response(status_code=response.status_code, headers=headers)


app = FastAPI(title=settings.APP_NAME)


# Registered before CORS so that CORS stays the outer layer, even for 500s
@app.middleware("http")
async def unhandled_error_middleware(request: Request, call_next):
    try:
        return await call_next(request)
    except Exception as exc:
        logger.exception("Unhandled exception on %s %s: %s", request.method, request.url.path, exc)
        return JSONResponse(status_code=500, content={"detail": "Internal server error"})


# CORS headers go out on every response, 401s and 500s included
app.add_middleware(
    EmptyPreflightCORSMiddleware,
    allow_origins=settings.ALLOW_ORIGINS,
    allow_credentials=settings.ALLOW_CREDENTIALS,
    allow_methods=settings.ALLOW_METHODS,
    allow_headers=settings.ALLOW_HEADERS,
    expose_headers=["Authorization"],
)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    logger.info("Invalid request body on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": "Invalid request body"})


@app.on_event("startup")
def startup_event():
    # Create DB tables
    Base.metadata.create_all(bind=engine)
    logger.info("Application startup")


@app.get("/")
def read_root():
    return {"message": "Pixel & Chill backend running"}


@app.get("/health")
def health():
    return {"status": "healthy"}


# Routers
app.include_router(auth.router)
app.include_router(user_routes.router)
app.include_router(follow_routes.router)
app.include_router(games.router)


# Bare OPTIONS (no preflight headers) on any path answers 200 with an empty body
@app.options("/{full_path:path}", include_in_schema=False)
def options_any(full_path: str):
    return Response(status_code=status.HTTP_200_OK)


def run():
    uvicorn.run("app.main:app", host=settings.HOST, port=settings.PORT)
