"""
FastAPI dependencies for API routes.

Settings, the monitoring service and the subscriber store are set once by
create_app() and held on app.state; routes reach them only through these functions.
"""

from fastapi import Request

from stormwatch.config import Settings
from stormwatch.monitoring.service import StormMonitorService
from stormwatch.services.subscribers import SubscriberStore


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_monitor_service(request: Request) -> StormMonitorService:
    return request.app.state.monitor_service


def get_subscriber_store(request: Request) -> SubscriberStore:
    return request.app.state.subscriber_store
