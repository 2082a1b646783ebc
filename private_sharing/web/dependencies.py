"""FastAPI dependencies exposing the objects built at startup."""

from fastapi import Request

from private_sharing.core.config import AppCredentials, Settings
from private_sharing.services.session_registry import SessionRegistry
from private_sharing.sharing.base import DataSharingClient


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_credentials(request: Request) -> AppCredentials:
    return request.app.state.credentials


def get_sharing_client(request: Request) -> DataSharingClient:
    return request.app.state.sharing_client


def get_session_registry(request: Request) -> SessionRegistry:
    return request.app.state.session_registry
