"""API v1 router aggregating all endpoint routers.

Activities:
  /api/v1/activities (weekly page, create, mock data)
"""

from fastapi import APIRouter

from runlog.api.v1.endpoints import activities

api_router = APIRouter()

api_router.include_router(activities.router, prefix="/activities", tags=["activities"])
