import logging
import time

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from core.config import settings
from core.database import engine
from core.errors import MatchError
from models import Base

from routers.health import router as health_router
from routers.needs import router as needs_router
from routers.wrestlers import router as wrestlers_router
from routers.interests import router as interests_router
from routers.match import router as match_router
from routers.messages import router as messages_router, threads_router
from routers.dashboard import router as dashboard_router
from routers.team import router as team_router

app = FastAPI(
    title="Mat Match Backend",
    version="0.1.0",
    description="Backend подбора борцов под запросы команд на турниры",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

logger = logging.getLogger("uvicorn.error")


@app.middleware("http")
async def log_request_time(request: Request, call_next):
    start_time = time.perf_counter()
    response = await call_next(request)
    process_time = (time.perf_counter() - start_time) * 1000
    logger.info(
        f"{request.method} {request.url.path} completed in {process_time:.2f} ms"
    )
    return response


@app.exception_handler(MatchError)
async def match_error_handler(request: Request, exc: MatchError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"ok": False, "message": exc.message},
    )


app.include_router(health_router)
app.include_router(needs_router)
app.include_router(wrestlers_router)
app.include_router(interests_router)
app.include_router(match_router)
app.include_router(messages_router)
app.include_router(threads_router)
app.include_router(dashboard_router)
app.include_router(team_router)


@app.on_event("startup")
async def on_startup():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


@app.get("/")
async def root():
    return {"message": "Mat Match Backend"}


@app.on_event("shutdown")
async def shutdown():
    # Закрываем все соединения пула
    await engine.dispose()
