"""Data-sharing session and file schemas"""

from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

# Value of the ``result`` query parameter when the user approved the share
RESULT_SUCCESS = "SUCCESS"

# Pull states after which no further files will be listed
FINISHED_STATES = frozenset({"partial", "completed"})


class Session(BaseModel):
    """Session handed out by the platform when a share is started"""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    session_key: str = Field(..., alias="sessionKey", min_length=1)
    session_exchange_token: Optional[str] = Field(None, alias="sessionExchangeToken")
    expiry: Optional[int] = Field(None, description="Expiry as epoch milliseconds")


class FileListEntry(BaseModel):
    """One entry of the session file list"""

    model_config = ConfigDict(populate_by_name=True)

    name: str
    updated_date: int = Field(0, alias="updatedDate")


class FileList(BaseModel):
    """Session file list together with the pull state"""

    state: str = "pending"
    files: List[FileListEntry] = Field(default_factory=list)

    @property
    def finished(self) -> bool:
        return self.state in FINISHED_STATES


class RetrievedFile(BaseModel):
    """A decrypted file delivered for a session"""

    model_config = ConfigDict(frozen=True)

    file_name: str
    file_data: bytes
    file_metadata: Dict[str, Any] = Field(default_factory=dict)


class FileFailure(BaseModel):
    """A file that could not be downloaded, decrypted or parsed"""

    model_config = ConfigDict(frozen=True)

    file_name: str
    error: str


FileResult = Union[RetrievedFile, FileFailure]


class RetrievalOutcome(BaseModel):
    """Summary of a finished pull"""

    retrieved: List[str] = Field(default_factory=list)
    failed: List[str] = Field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.retrieved) + len(self.failed)
