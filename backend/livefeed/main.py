# livefeed/main.py
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from livefeed.config import settings
from livefeed.core.db import init_db, close_db
from livefeed.core.errors import InvalidInput, ServiceError
from livefeed.core.pubsub import BroadcastHub
from livefeed.core.security import build_token_service
from livefeed.services.turnstile import ChallengeGate

from livefeed.api.v1.routers import auth, posts
from livefeed.api.v1.routers.ws_posts import router as ws_posts_router

logger = logging.getLogger("uvicorn.error")

app = FastAPI(title=settings.APP_NAME)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Process-wide collaborators, handed to routes through livefeed.api.v1.deps
app.state.hub = BroadcastHub(queue_size=settings.observer_queue_size)
app.state.tokens = build_token_service()
app.state.challenge_gate = ChallengeGate()

@app.exception_handler(ServiceError)
async def service_error_handler(request: Request, exc: ServiceError):
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "error": exc.to_dict()},
    )

@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    # Wrong types or a non-JSON body: same envelope as every other rejection
    err = InvalidInput("Malformed request body")
    return JSONResponse(
        status_code=err.status_code,
        content={"success": False, "error": err.to_dict()},
    )

@app.on_event("startup")
async def on_startup():
    await init_db()
    logger.info("[startup] %s ready (env=%s)", settings.APP_NAME, settings.env)

@app.on_event("shutdown")
async def on_shutdown():
    await close_db()

# REST
app.include_router(auth.router, prefix="/api/v1")
app.include_router(posts.router, prefix="/api/v1")

# WebSocket
app.include_router(ws_posts_router)

@app.get("/healthz")
def healthz():
    return {"ok": True}
