from fastapi import APIRouter

from src.workflow_alerts.api.v1 import alerts, workflows

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(alerts.router)
api_router.include_router(workflows.router)
