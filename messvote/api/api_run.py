from typing import Optional
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from messvote.api.deps import AppContext, build_context
from messvote.utilities.config import MEDIA_URL
from messvote.utilities.errors import MessVoteError

# Routers
from messvote.api.routes import complaints, dashboard, menu, plans, results, settings, students, votes

# Logging
logger = logging.getLogger("messvote_app")


def _error_body(message: str, code: str, details: Optional[dict] = None) -> dict:
    body = {"error": message, "code": code}
    if details:
        body["details"] = details
    return body


def create_app(context: Optional[AppContext] = None) -> FastAPI:
    """Build the API around an AppContext (a fresh default one when omitted)."""
    ctx = context or build_context()
    app = FastAPI(title="Mess Vote API")
    app.state.context = ctx

    # Include routers
    for module in (menu, plans, votes, results, settings, students, complaints, dashboard):
        app.include_router(module.router)

    # Uploaded images
    app.mount(MEDIA_URL, StaticFiles(directory=str(ctx.blobs.root_dir)), name="media")

    @app.exception_handler(MessVoteError)
    async def _domain_error(request: Request, exc: MessVoteError):
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        return JSONResponse(status_code=exc.status_code, content=_error_body(exc.message, exc.error_code, exc.details))

    @app.exception_handler(RequestValidationError)
    async def _request_error(request: Request, exc: RequestValidationError):
        errors = [{"loc": [str(p) for p in e.get("loc", ())], "msg": e.get("msg", "")} for e in exc.errors()]
        message = errors[0]["msg"] if errors else "Invalid request"
        return JSONResponse(status_code=400, content=_error_body(message, "ValidationError", {"errors": errors}))

    @app.get("/health")
    def health():
        return {"status": "ok", "time": ctx.clock().isoformat()}

    # Feed must see events from the first request on
    ctx.feed.start(ctx.bus)
    logger.info("Event feed started")

    @app.on_event("shutdown")
    def _close_subscriptions():
        """Tear down any plan subscriptions still open."""
        ctx.subscriptions.close_all()
        ctx.feed.stop()

    return app
