import os
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from config.settings import settings
from api.routes.interview import router as interview_router
from api.routes.automation import router as automation_router
from api.routes.candidate import router as candidate_router
from api.routes.email import router as email_router

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

DESCRIPTION = """
Hiring pipeline API: interview scheduling with conflict detection, time-based
pipeline automation, and templated candidate emails delivered through a
durable outbox.

## Authentication

All endpoints (except `/ping` and `/health`) require an API key via the `X-API-Key` header.
Every key belongs to one employer and all data is scoped to it.
Automation rules are shared by all employers; activating or deactivating one
requires an admin key.

## Quick Start

1. **Find a slot** → `GET /interviews/suggestions?preferred_date=...&duration=60`
2. **Book it** → `POST /interviews` (409 on conflict unless `force` is set)
3. **Let automation run** → rules fire on the beat schedule, or `POST /automation/sweep`
4. **Watch the outbox** → `GET /email/queue` and `GET /email/queue/dead`

## Automation rules

| Trigger | When it runs |
|---------|--------------|
| `time_based` | Every sweep (beat-scheduled) |
| `status_change` | When a candidate enters the rule's status |
| `manual` | Only via `POST /automation/rules/{id}/trigger` |
"""

tags_metadata = [
    {
        "name": "Health",
        "description": "Health check endpoints. No authentication required.",
    },
    {
        "name": "Interviews",
        "description": "Schedule interviews, detect conflicts and suggest free slots.",
    },
    {
        "name": "Automation",
        "description": "Pipeline automation rules: list, toggle, trigger and sweep.",
    },
    {
        "name": "Candidates",
        "description": "Candidate pipeline status changes.",
    },
    {
        "name": "Email",
        "description": "Email templates and the outbound email queue.",
    },
]

app = FastAPI(
    title="Hiring Pipeline API",
    description=DESCRIPTION,
    version="1.0.0",
    openapi_tags=tags_metadata,
)

# Configure CORS
ALLOWED_ORIGINS = os.getenv("ALLOWED_ORIGINS", "*").split(",")

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/", tags=["Root"])
def root():
    """Root endpoint with API information and documentation links"""
    return {
        "message": "Welcome to the Hiring Pipeline API",
        "version": "1.0.0",
        "documentation": {
            "swagger": "/docs",
            "redoc": "/redoc"
        },
        "authentication": {
            "type": "API Key",
            "header": "X-API-Key",
            "note": "Required for all endpoints except /ping and /health"
        },
        "endpoints": {
            "health": "/health",
            "ping": "/ping",
            "interviews": "/interviews",
            "automation": "/automation",
            "candidates": "/candidates",
            "email": "/email"
        }
    }


# Health check endpoints (public - no authentication required)
@app.get("/ping", tags=["Health"])
def ping():
    """Simple ping endpoint to check if API is responding. No authentication required."""
    return {"message": "pong"}


@app.get("/health", tags=["Health"])
def health():
    """Health check endpoint with basic status information. No authentication required."""
    return {
        "status": "healthy",
        "service": "Hiring Pipeline API",
        "version": "1.0.0"
    }


# Register routers
app.include_router(interview_router)
app.include_router(automation_router)
app.include_router(candidate_router)
app.include_router(email_router)
