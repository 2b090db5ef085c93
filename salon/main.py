import time
import asyncio
import logging
from fastapi import FastAPI, Request
from dotenv import load_dotenv

# Load environment variables from .env file before anything else
load_dotenv()

from salon.core.config import settings
from salon.core.logging import setup_logging, request_id_ctx
from salon.core.errors import register_error_handlers
from salon.core.db import init_models
from salon.api.router import api_router
from salon.modules.events.outbox import run_outbox_relay
from salon.platform.provider_registry import registry

setup_logging()
logger = logging.getLogger(__name__)

app = FastAPI(title=settings.APP_NAME)
register_error_handlers(app)

@app.middleware("http")
async def log_requests(request: Request, call_next):
    start_time = time.time()
    response = await call_next(request)
    process_time = (time.time() - start_time) * 1000
    logger.info(
        f"Request: {request.method} {request.url.path} - Response: {response.status_code} - Time: {process_time:.2f}ms"
    )
    return response

# registered last so it runs first and the request log line carries the id
@app.middleware("http")
async def add_request_id(request: Request, call_next):
    token = request_id_ctx.set(request.headers.get("x-request-id", "-"))
    try:
        return await call_next(request)
    finally:
        request_id_ctx.reset(token)

@app.on_event("startup")
async def on_startup():
    await init_models()
    app.state.outbox_task = asyncio.create_task(run_outbox_relay())

@app.on_event("shutdown")
async def on_shutdown():
    task = getattr(app.state, "outbox_task", None)
    if task:
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            logger.info("Outbox relay stopped")
    await registry.shutdown()

app.include_router(api_router, prefix=settings.API_PREFIX)
