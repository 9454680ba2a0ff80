# clearance_watch/api/app.py

"""HTTP trigger endpoints: run a cycle and mute an item."""

import logging
from collections.abc import Callable

from fastapi import FastAPI
from fastapi.responses import JSONResponse, PlainTextResponse

from clearance_watch.services.watch_orchestrator import (
    SETUP_STAGE,
    CycleResult,
    MuteResult,
    WatchOrchestrator,
    build_guarded,
)

logger = logging.getLogger("clearance_watch.api")


def create_app(
    orchestrator_factory: Callable[
        [], WatchOrchestrator
    ] = WatchOrchestrator.from_settings,
) -> FastAPI:
    """Build the API.

    A new orchestrator is created per request; requests share no
    in-process state.  If it cannot be built, the request fails with
    stage ``setup`` instead of an unhandled server error.
    """
    app = FastAPI(title="clearance_watch")

    @app.get("/healthz", response_class=PlainTextResponse)
    def healthz() -> str:
        return "ok"

    @app.get("/api/run")
    def run_cycle() -> JSONResponse:
        """Run one cycle and return the detected differences."""
        orchestrator, error = build_guarded(orchestrator_factory)
        if orchestrator is None:
            result = CycleResult(stage=SETUP_STAGE, error=error)
        else:
            result = orchestrator.run_cycle()
        if not result.ok:
            logger.warning("HTTP-triggered cycle failed: %s", result.message)
            return JSONResponse(
                {"error": result.message, "stage": result.stage},
                status_code=502,
            )
        return JSONResponse(result.differences_as_dicts())

    @app.get("/api/mute/{item_id}", response_class=PlainTextResponse)
    def mute_item(item_id: str) -> PlainTextResponse:
        """Mute an item; this is the target of the email Ignore links."""
        orchestrator, error = build_guarded(orchestrator_factory)
        if orchestrator is None:
            result = MuteResult(item_id=item_id, error=error)
        else:
            result = orchestrator.mute(item_id)
        status = 200 if result.ok else 500
        return PlainTextResponse(result.message, status_code=status)

    return app
