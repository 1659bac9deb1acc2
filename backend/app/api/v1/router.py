"""API v1 router combining all endpoint routers."""

from fastapi import APIRouter

from app.api.v1 import questionnaires

api_router = APIRouter()

api_router.include_router(
    questionnaires.router, prefix="/questionnaires", tags=["questionnaires"]
)
