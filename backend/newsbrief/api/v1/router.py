"""API v1 main router - aggregates all endpoint routers."""

from fastapi import APIRouter

from newsbrief.api.v1 import admin, categories, logs, news

api_router = APIRouter()

api_router.include_router(news.router, prefix="/news", tags=["news"])
api_router.include_router(categories.router, prefix="/categories", tags=["categories"])
api_router.include_router(admin.router, prefix="/admin", tags=["admin"])
api_router.include_router(logs.router, prefix="/logs", tags=["logs"])
