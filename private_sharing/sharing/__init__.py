"""Client for the digi.me private sharing platform.

Routes depend on the abstract ``DataSharingClient``; ``DigiMeClient`` is the
HTTP implementation used when the application runs.
"""

from private_sharing.sharing.base import DataSharingClient
from private_sharing.sharing.client import DigiMeClient
from private_sharing.sharing.exceptions import (
    FileDecryptionError,
    PullTimeoutError,
    SharingAPIError,
    SharingClientError,
)
from private_sharing.sharing.schemas import (
    RESULT_SUCCESS,
    FileFailure,
    FileResult,
    RetrievalOutcome,
    RetrievedFile,
    Session,
)

__all__ = [
    "DataSharingClient",
    "DigiMeClient",
    "FileDecryptionError",
    "PullTimeoutError",
    "SharingAPIError",
    "SharingClientError",
    "RESULT_SUCCESS",
    "FileFailure",
    "FileResult",
    "RetrievalOutcome",
    "RetrievedFile",
    "Session",
]
