# repair_cafe/api/v1/api.py

from fastapi import APIRouter
from repair_cafe.api.v1.endpoints import (
    auth,
    events,
    venues,
    registrations,
    items,
    fixer_queue,
    check_in,
    reports,
    fixers,
    helpers,
    notification_preferences,
)

# This is the main router for the v1 API.
# It will include all the specific endpoint routers.
api_router = APIRouter()

api_router.include_router(auth.router)
api_router.include_router(events.router)
api_router.include_router(venues.router)
api_router.include_router(registrations.router)
api_router.include_router(items.router)
api_router.include_router(fixer_queue.router)
api_router.include_router(check_in.router)
api_router.include_router(reports.router)
api_router.include_router(fixers.router)
api_router.include_router(helpers.router)
api_router.include_router(notification_preferences.router)
