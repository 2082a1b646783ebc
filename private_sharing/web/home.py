"""Start of the private sharing flow and general web routes"""

import logging

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import HTMLResponse

from private_sharing.core.config import AppCredentials, Settings
from private_sharing.core.templates import templates
from private_sharing.services.session_registry import SessionRegistry
from private_sharing.sharing.base import DataSharingClient
from private_sharing.sharing.exceptions import SharingClientError
from private_sharing.web.dependencies import (
    get_app_settings,
    get_credentials,
    get_session_registry,
    get_sharing_client,
)
from private_sharing.web.utils.urls import build_callback_url, get_base_path

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/", response_class=HTMLResponse)
async def index(
    request: Request,
    settings: Settings = Depends(get_app_settings),
    credentials: AppCredentials = Depends(get_credentials),
    client: DataSharingClient = Depends(get_sharing_client),
    registry: SessionRegistry = Depends(get_session_registry),
) -> HTMLResponse:
    """Landing page offering the two ways to share data with us"""
    try:
        session = await client.establish_session(
            credentials.application_id, credentials.contract_id
        )
    except SharingClientError as e:
        logger.error("Could not establish a sharing session: %s", e)
        return templates.TemplateResponse(
            request,
            "pages/error.html",
            {"message": "We could not reach digi.me. Please try again later."},
            status_code=status.HTTP_502_BAD_GATEWAY,
        )

    registry.record(session.session_key)

    # The user comes back to /return with result=SUCCESS or result=CANCELLED
    # appended to this URL; the session key tells us which session to pull.
    callback_url = build_callback_url(
        get_base_path(request, settings.PUBLIC_BASE_URL), session.session_key
    )

    try:
        web_url = client.get_private_share_as_guest_url(session, callback_url)
        app_url = client.get_private_share_consent_url(
            credentials.application_id, session, callback_url
        )
    except SharingClientError as e:
        logger.error("Could not build authorization URLs: %s", e)
        return templates.TemplateResponse(
            request,
            "pages/error.html",
            {"message": "We could not prepare the sharing request."},
            status_code=status.HTTP_502_BAD_GATEWAY,
        )

    return templates.TemplateResponse(
        request,
        "pages/index.html",
        {"web_url": web_url, "app_url": app_url},
    )


@router.get("/health")
def health_check():
    """Basic health check endpoint."""
    return {"status": "healthy"}
