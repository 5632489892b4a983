"""Router registration.

Questionnaire routers live under ``/api/v1``; the health probe stays at
the root so load balancers need no version knowledge.
"""

from fastapi import FastAPI

from riskcheck_server.routes import health, questions, reference, sessions

API_PREFIX = "/api/v1"

_VERSIONED = (sessions.router, questions.router, reference.router)


def register_routes(app: FastAPI) -> None:
    app.include_router(health.router)
    for router in _VERSIONED:
        app.include_router(router, prefix=API_PREFIX)
