"""Main FastAPI application for the study session."""
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.routes import session
from api.services.session_service import shutdown_runner
from core.logging_setup import setup_console_logging

setup_console_logging()

app = FastAPI(title="Study Session API")

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


# Shutdown events
@app.on_event("shutdown")
def shutdown_events() -> None:
    """Stop the countdown thread on shutdown."""
    shutdown_runner()


# Include routers
app.include_router(session.router)
