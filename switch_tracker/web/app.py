from contextlib import asynccontextmanager
from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
from fastapi.templating import Jinja2Templates
from pydantic import BaseModel
from typing import List, Optional
import logging
from pathlib import Path

from switch_tracker.config.settings import settings
from switch_tracker.models.session import SessionSummary
from switch_tracker.services.display import format_duration
from switch_tracker.services.notifier import NullNotifier
from switch_tracker.services.scheduler import AsyncioScheduler
from switch_tracker.services.tracker import SessionStateMachine

logger = logging.getLogger(__name__)

templates = Jinja2Templates(directory=str(Path(__file__).parent / "templates"))

class VisibilityEvent(BaseModel):
    """Body of a visibilitychange report from the dashboard page"""
    hidden: bool

def session_payload(machine: SessionStateMachine) -> dict:
    snapshot = machine.snapshot()
    payload = snapshot.model_dump(mode="json")
    payload["elapsed"] = format_duration(snapshot.elapsed_ms)
    return payload

def create_app(machine: Optional[SessionStateMachine] = None) -> FastAPI:
    """Build the dashboard app around a state machine

    The browser plays the switch cue itself, so the default machine
    gets a no-op notifier.
    """
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        app.state.machine.close()

    app = FastAPI(title="Context Switch Tracker", lifespan=lifespan)
    app.state.machine = machine or SessionStateMachine(
        notifier=NullNotifier(),
        scheduler=AsyncioScheduler()
    )

    @app.get("/")
    async def dashboard(request: Request):
        """Main dashboard view"""
        return templates.TemplateResponse(
            request,
            "dashboard.html",
            {
                "poll_interval_ms": settings.WEB_POLL_INTERVAL_MS
            }
        )

    @app.get("/api/session")
    async def get_session():
        """Current session state"""
        return session_payload(app.state.machine)

    @app.post("/api/session/start")
    async def start_session():
        """Start a new session"""
        machine = app.state.machine
        if not machine.can_start:
            raise HTTPException(status_code=409, detail="Session already active")
        machine.start()
        return session_payload(machine)

    @app.post("/api/session/stop", response_model=SessionSummary)
    async def stop_session():
        """Stop the active session and return its summary"""
        machine = app.state.machine
        if not machine.can_stop:
            raise HTTPException(status_code=409, detail="No active session")
        return machine.stop()

    @app.post("/api/visibility")
    async def report_visibility(event: VisibilityEvent):
        """Forward a page visibility change to the state machine"""
        logger.debug(f"Visibility report: hidden={event.hidden}")
        machine = app.state.machine
        if event.hidden:
            machine.on_visibility_hidden()
        else:
            machine.on_visibility_visible()
        return {"switch_count": machine.switch_count}

    @app.get("/api/history", response_model=List[SessionSummary])
    async def get_history():
        """Completed sessions, most recent first"""
        return list(app.state.machine.history.all())

    @app.exception_handler(404)
    async def not_found_handler(request: Request, exc: HTTPException):
        return JSONResponse(
            status_code=404,
            content={"detail": "Not found"}
        )

    return app

app = create_app()
