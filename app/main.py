from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response
from .api.api import api_router
from .core.config import get_settings
from .core.logging_config import configure_logging
from .db.database import create_tables
import logging
import json
import traceback

REDACTED = "***"
SENSITIVE_HEADERS = {"authorization", "cookie"}
SENSITIVE_PATHS = ("/api/v1/login",)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    configure_logging(get_settings())
    # make sure tables are created
    create_tables()
    logger.info("application started")
    yield


logger = logging.getLogger("app")

app = FastAPI(title="Blog API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _request_info(request: Request, body: bytes) -> dict:
    headers = {
        k: (REDACTED if k.lower() in SENSITIVE_HEADERS else v)
        for k, v in request.headers.items()
    }
    if request.url.path in SENSITIVE_PATHS:
        logged_body = REDACTED if body else None
    else:
        logged_body = body.decode(errors="replace") if body else None
    return {
        "url": str(request.url),
        "method": request.method,
        "headers": headers,
        "body": logged_body,
        "path_params": request.path_params,
        "query_params": dict(request.query_params)
    }


@app.middleware("http")
async def log_requests(request: Request, call_next):
    body = await request.body()
    request_info = _request_info(request, body)

    try:
        # execute the request
        response = await call_next(request)

        if response.status_code >= 400:
            response_body = b""
            async for chunk in response.body_iterator:
                response_body += chunk

            log = logger.error if response.status_code >= 500 else logger.info
            log(
                f"Request failed with status {response.status_code}\n"
                f"Request: {json.dumps(request_info, indent=2, default=str)}\n"
                f"Response: {response_body.decode(errors='replace')}\n"
            )
            return Response(
                content=response_body,
                status_code=response.status_code,
                headers=dict(response.headers),
                media_type=response.media_type
            )

        return response

    except Exception as e:
        logger.error(
            f"Request failed with exception\n"
            f"Request: {json.dumps(request_info, indent=2, default=str)}\n"
            f"Error: {str(e)}\n"
            f"Traceback: {traceback.format_exc()}"
        )
        raise


@app.get("/")
def root():
    return {"message": "hello world"}


# register the API router
app.include_router(api_router, prefix="/api/v1")
