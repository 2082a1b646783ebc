"""digi.me private sharing client (async)"""

import asyncio
import base64
import binascii
import gzip
import logging
import platform
import zlib
from typing import Any, AsyncIterator, Dict, Optional
from urllib.parse import quote, urlencode

import httpx

from private_sharing import __version__
from private_sharing.core.config import Settings
from private_sharing.sharing.base import DataSharingClient
from private_sharing.sharing.crypto import decrypt_file
from private_sharing.sharing.exceptions import (
    PullTimeoutError,
    SharingAPIError,
    SharingClientError,
)
from private_sharing.sharing.schemas import (
    FileFailure,
    FileList,
    FileListEntry,
    FileResult,
    RetrievedFile,
    Session,
)

logger = logging.getLogger(__name__)

CONSENT_APP_URL = "digime://consent-access"
RESULT_VERSION = "2"


class DigiMeClient(DataSharingClient):
    """Service for establishing private sharing sessions and pulling their files"""

    def __init__(
        self,
        base_url: str = "https://api.digi.me/v1.5",
        onboard_url: str = "https://api.digi.me/apps/quark/direct-onboarding",
        timeout: float = 30.0,
        pull_timeout: float = 300.0,
        poll_interval: float = 3.0,
        max_concurrent_downloads: int = 5,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize the client

        Args:
            base_url: Platform API root, without trailing slash
            onboard_url: Web onboarding page used by the guest flow
            timeout: Per-request timeout in seconds
            pull_timeout: Upper bound for a whole pull in seconds
            poll_interval: Delay between file list polls in seconds
            max_concurrent_downloads: Parallel file downloads per poll round
            transport: Optional httpx transport (used for testing)
        """
        self.base_url = base_url.rstrip("/")
        self.onboard_url = onboard_url
        self.pull_timeout = pull_timeout
        self.poll_interval = poll_interval
        self._download_slots = asyncio.Semaphore(max_concurrent_downloads)
        self._http = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            transport=transport,
            headers={"Accept": "application/json"},
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "DigiMeClient":
        return cls(
            base_url=settings.DIGIME_BASE_URL,
            onboard_url=settings.DIGIME_ONBOARD_URL,
            timeout=settings.REQUEST_TIMEOUT,
            pull_timeout=settings.PULL_TIMEOUT,
            poll_interval=settings.POLL_INTERVAL,
            max_concurrent_downloads=settings.MAX_CONCURRENT_DOWNLOADS,
        )

    async def aclose(self) -> None:
        await self._http.aclose()

    async def _request(self, method: str, path: str, **kwargs: Any) -> Dict[str, Any]:
        """Send a request and return the decoded JSON body"""
        try:
            response = await self._http.request(method, path, **kwargs)
        except httpx.TimeoutException as e:
            raise SharingClientError(f"Timed out calling {method} {path}") from e
        except httpx.HTTPError as e:
            raise SharingClientError(f"Could not reach data-sharing platform: {e}") from e

        if response.is_error:
            raise self._api_error(response)

        try:
            body = response.json()
        except ValueError as e:
            raise SharingClientError(f"Invalid JSON returned by {method} {path}") from e
        if not isinstance(body, dict):
            raise SharingClientError(f"Unexpected response body from {method} {path}")
        return body

    @staticmethod
    def _api_error(response: httpx.Response) -> SharingAPIError:
        code = None
        message = response.reason_phrase or "Request failed"
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict) and isinstance(body.get("error"), dict):
            code = body["error"].get("code")
            message = body["error"].get("message", message)
        return SharingAPIError(response.status_code, message, code=code)

    async def establish_session(self, application_id: str, contract_id: str) -> Session:
        logger.info("Establishing session for contract %s", contract_id)
        body = await self._request(
            "POST",
            "/permission-access/session",
            json={
                "appId": application_id,
                "contractId": contract_id,
                "accept": {"compression": "gzip"},
                "sdkAgent": {
                    "name": "python",
                    "version": __version__,
                    "meta": {"python": platform.python_version()},
                },
            },
        )
        try:
            session = Session.model_validate(body)
        except ValueError as e:
            raise SharingClientError("Session response is missing a session key") from e
        logger.debug("Session established, expires at %s", session.expiry)
        return session

    def get_private_share_as_guest_url(self, session: Session, callback_url: str) -> str:
        if not session.session_exchange_token:
            raise SharingClientError("Session has no exchange token for the guest flow")
        query = urlencode(
            {
                "sessionExchangeToken": session.session_exchange_token,
                "callbackUrl": callback_url,
            }
        )
        return f"{self.onboard_url}?{query}"

    def get_private_share_consent_url(
        self, application_id: str, session: Session, callback_url: str
    ) -> str:
        query = urlencode(
            {
                "sessionKey": session.session_key,
                "callbackUrl": callback_url,
                "appId": application_id,
                "sdkVersion": __version__,
                "resultVersion": RESULT_VERSION,
            }
        )
        return f"{CONSENT_APP_URL}?{query}"

    async def get_file_list(self, session_key: str) -> FileList:
        body = await self._request("GET", f"/permission-access/query/{quote(session_key, safe='')}")
        status = body.get("status") or {}
        file_list = body.get("fileList") or []
        if not isinstance(status, dict) or not isinstance(file_list, list):
            raise SharingClientError("Unexpected file list response from the platform")
        try:
            entries = [FileListEntry.model_validate(item) for item in file_list]
            listing = FileList(state=status.get("state", "pending"), files=entries)
        except ValueError as e:
            raise SharingClientError(f"Invalid file list from the platform: {e}") from e
        return listing

    async def _fetch_file(self, session_key: str, file_name: str, private_key: str) -> FileResult:
        """Download and decrypt one file; any failure is returned, not raised"""
        path = (
            f"/permission-access/query/{quote(session_key, safe='')}"
            f"/{quote(file_name, safe='')}"
        )
        async with self._download_slots:
            try:
                body = await self._request("GET", path)
                encrypted = base64.b64decode(body.get("fileContent") or "", validate=True)
                data = decrypt_file(private_key, encrypted)
                data = self._decompress(data, body.get("compression"))
                metadata = body.get("fileMetadata") or {}
                if not isinstance(metadata, dict):
                    raise SharingClientError("File metadata is not an object")
            except (SharingClientError, binascii.Error, TypeError, OSError, EOFError, zlib.error) as e:
                logger.debug("Retrieval of %s failed: %s", file_name, e)
                return FileFailure(file_name=file_name, error=str(e))

        return RetrievedFile(file_name=file_name, file_data=data, file_metadata=metadata)

    @staticmethod
    def _decompress(data: bytes, compression: Optional[str]) -> bytes:
        if compression in (None, "", "no-compression"):
            return data
        if compression == "gzip":
            return gzip.decompress(data)
        raise SharingClientError(f"Unsupported compression: {compression}")

    async def pull_session_data(self, session_key: str, private_key: str) -> AsyncIterator[FileResult]:
        loop = asyncio.get_running_loop()
        deadline = loop.time() + self.pull_timeout
        seen: Dict[str, int] = {}

        while True:
            listing = await self.get_file_list(session_key)
            fresh = [entry for entry in listing.files if seen.get(entry.name) != entry.updated_date]
            for entry in fresh:
                seen[entry.name] = entry.updated_date

            if fresh:
                logger.debug("Downloading %d file(s), state=%s", len(fresh), listing.state)
                results = await asyncio.gather(
                    *(self._fetch_file(session_key, entry.name, private_key) for entry in fresh)
                )
                for result in results:
                    yield result

            if listing.finished:
                logger.info("Pull finished with state %s, %d file(s) seen", listing.state, len(seen))
                return

            if loop.time() + self.poll_interval > deadline:
                raise PullTimeoutError(
                    f"Session did not complete within {self.pull_timeout:.0f} seconds"
                )
            await asyncio.sleep(self.poll_interval)
