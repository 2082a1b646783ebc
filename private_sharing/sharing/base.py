"""Abstract interface for data-sharing platform clients.

The web layer only depends on this contract so that the platform client can
be replaced (for example by a stub in tests) without touching the routes.
"""

from abc import ABC, abstractmethod
from typing import AsyncIterator, Callable

from private_sharing.sharing.schemas import (
    FileFailure,
    FileResult,
    RetrievalOutcome,
    RetrievedFile,
    Session,
)

FileDataCallback = Callable[[RetrievedFile], None]
FileErrorCallback = Callable[[FileFailure], None]


class DataSharingClient(ABC):
    """Client for a personal-data-sharing platform.

    Example usage:
        session = await client.establish_session(app_id, contract_id)
        url = client.get_private_share_as_guest_url(session, callback_url)
        ...
        async for result in client.pull_session_data(session.session_key, key_pem):
            handle(result)
    """

    @abstractmethod
    async def establish_session(self, application_id: str, contract_id: str) -> Session:
        """Start a new share session for the given application and contract.

        Raises:
            SharingClientError: If the platform could not be reached or refused.
        """

    @abstractmethod
    def get_private_share_as_guest_url(self, session: Session, callback_url: str) -> str:
        """URL sending the user through the web (guest) share flow."""

    @abstractmethod
    def get_private_share_consent_url(
        self, application_id: str, session: Session, callback_url: str
    ) -> str:
        """URL sending the user to the consenting application."""

    @abstractmethod
    def pull_session_data(self, session_key: str, private_key: str) -> AsyncIterator[FileResult]:
        """Stream decrypted files for a completed session.

        Yields one ``RetrievedFile`` or ``FileFailure`` per delivered file, in
        no particular order, and finishes once the platform reports that no
        more files will arrive.

        Raises:
            SharingClientError: If the file list cannot be fetched or the pull
                does not finish in time. Per-file problems are yielded as
                ``FileFailure`` instead.
        """

    async def get_session_data(
        self,
        session_key: str,
        private_key: str,
        on_file_data: FileDataCallback,
        on_file_error: FileErrorCallback,
    ) -> RetrievalOutcome:
        """Callback-style pull: dispatch each file result, return when all are delivered.

        ``on_file_data`` may raise ``ValueError`` to reject a file it cannot
        use; the file is then passed to ``on_file_error`` and counted as failed.
        """
        outcome = RetrievalOutcome()
        async for result in self.pull_session_data(session_key, private_key):
            if isinstance(result, RetrievedFile):
                try:
                    on_file_data(result)
                except ValueError as e:
                    result = FileFailure(file_name=result.file_name, error=str(e))
                else:
                    outcome.retrieved.append(result.file_name)
                    continue
            on_file_error(result)
            outcome.failed.append(result.file_name)
        return outcome

    async def aclose(self) -> None:
        """Release network resources held by the client."""
