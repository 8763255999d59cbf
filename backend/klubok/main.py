# klubok/main.py
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from klubok.config import settings
from klubok.core.bootstrap import create_user_repository, seed_test_accounts
from klubok.core.errors import register_error_handlers
from klubok.services.auth import SessionAuthenticator
from klubok.services.stats import CallStatsRecorder

from klubok.api.v1.routers import auth, stats, token, users

logger = logging.getLogger("uvicorn.error")

app = FastAPI(title=settings.APP_NAME)

# CORS (with Cookie)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)


@app.on_event("startup")
async def on_startup():
    repository = await create_user_repository()
    app.state.auth = SessionAuthenticator(repository)
    app.state.stats = CallStatsRecorder()
    if settings.SEED_TEST_ACCOUNTS:
        await seed_test_accounts(app.state.auth)
    if not settings.LIVEKIT_API_KEY or not settings.LIVEKIT_API_SECRET:
        logger.warning("[livekit] LIVEKIT_API_KEY / LIVEKIT_API_SECRET not set -> /token will fail")


@app.on_event("shutdown")
async def on_shutdown():
    auth_service = getattr(app.state, "auth", None)
    if auth_service is not None:
        await auth_service.users.close()


# REST
app.include_router(auth.router, prefix=settings.API_PREFIX)
app.include_router(token.router, prefix=settings.API_PREFIX)
app.include_router(users.router, prefix=settings.API_PREFIX)
app.include_router(stats.router, prefix=settings.API_PREFIX)
app.include_router(users.avatars_router)


@app.get("/healthz")
def healthz():
    return {"ok": True}
