"""Return route the platform redirects the user to after a share request"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, status
from fastapi.responses import HTMLResponse

from private_sharing.core.config import AppCredentials, Settings
from private_sharing.core.templates import templates
from private_sharing.services.retrieval import retrieve_session_files
from private_sharing.services.session_registry import SessionRegistry
from private_sharing.sharing.base import DataSharingClient
from private_sharing.sharing.exceptions import SharingClientError
from private_sharing.sharing.schemas import RESULT_SUCCESS
from private_sharing.web.dependencies import (
    get_app_settings,
    get_credentials,
    get_session_registry,
    get_sharing_client,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def _error_page(request: Request, message: Optional[str] = None, status_code: int = status.HTTP_200_OK):
    return templates.TemplateResponse(
        request,
        "pages/error.html",
        {"message": message},
        status_code=status_code,
    )


@router.get("/return", response_class=HTMLResponse)
async def share_return(
    request: Request,
    result: Optional[str] = Query(None),
    session_id: Optional[str] = Query(None, alias="sessionId"),
    settings: Settings = Depends(get_app_settings),
    credentials: AppCredentials = Depends(get_credentials),
    client: DataSharingClient = Depends(get_sharing_client),
    registry: SessionRegistry = Depends(get_session_registry),
) -> HTMLResponse:
    """Pull and log the shared files once the user approved the request"""
    if result != RESULT_SUCCESS:
        logger.info("Share request not approved (result=%s)", result)
        return _error_page(request)

    if not session_id:
        logger.warning("Share approved but no sessionId was returned")
        return _error_page(
            request, "The sharing session could not be identified.", status.HTTP_400_BAD_REQUEST
        )

    # Claimed before the first await so concurrent returns for one session
    # cannot both pull it.
    if not registry.claim(session_id):
        if settings.VERIFY_RETURNED_SESSIONS:
            logger.warning("Rejecting return for a session not issued by this server")
            return _error_page(
                request, "The sharing session could not be identified.", status.HTTP_400_BAD_REQUEST
            )
        logger.warning("Returned session was not issued by this server process, pulling anyway")

    try:
        await retrieve_session_files(client, session_id, credentials.private_key)
    except SharingClientError as e:
        logger.error("Retrieving shared data failed: %s", e)
        return _error_page(
            request, "We could not retrieve your data from digi.me.", status.HTTP_502_BAD_GATEWAY
        )

    return templates.TemplateResponse(request, "pages/return.html")
