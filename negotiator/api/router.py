"""Root API router for the negotiator endpoints."""

from __future__ import annotations

from fastapi import APIRouter

from negotiator.api import call_results, call_sessions, health, negotiation, users, vapi

api_router = APIRouter(prefix="/api")
api_router.include_router(health.router)
api_router.include_router(users.router)
api_router.include_router(negotiation.router)
api_router.include_router(call_results.router)
api_router.include_router(call_sessions.router)
api_router.include_router(vapi.router)


def get_api_router() -> APIRouter:
    return api_router
