"""
Consumption of pulled session files.

Each delivered file is decoded as UTF-8 JSON and written to the log together
with its metadata; failures are logged and counted. Nothing is retained once a
file has been logged.
"""

import json
import logging
from typing import Any, Union

from private_sharing.sharing.base import DataSharingClient
from private_sharing.sharing.schemas import FileFailure, RetrievalOutcome, RetrievedFile

logger = logging.getLogger(__name__)

SEPARATOR = "=" * 76


def parse_file_content(file_data: Union[bytes, str]) -> Any:
    """Decode file content as UTF-8 JSON.

    Raises:
        ValueError: If the content is not valid UTF-8 JSON.
    """
    if isinstance(file_data, bytes):
        file_data = file_data.decode("utf-8")
    return json.loads(file_data)


def log_retrieved_file(retrieved: RetrievedFile, content: Any) -> None:
    logger.info(
        "\n".join(
            [
                SEPARATOR,
                f"Retrieved: {retrieved.file_name}",
                SEPARATOR,
                "Metadata:",
                json.dumps(retrieved.file_metadata, indent=2, default=str),
                "Content:",
                json.dumps(content, indent=2, default=str),
                SEPARATOR,
            ]
        ),
        extra={"file_name": retrieved.file_name},
    )


def log_file_failure(failure: FileFailure) -> None:
    logger.warning(
        "\n".join(
            [
                SEPARATOR,
                f"Error retrieving file {failure.file_name}: {failure.error}",
                SEPARATOR,
            ]
        ),
        extra={"file_name": failure.file_name},
    )


async def retrieve_session_files(
    client: DataSharingClient, session_key: str, private_key: str
) -> RetrievalOutcome:
    """Pull every file of a session and log it.

    The pull is started exactly once. Files arrive in whatever order the
    platform delivers them; a file whose content cannot be parsed is logged as
    a failure and does not stop the remaining files.

    Args:
        client: Data-sharing client to pull from.
        session_key: Session identifier echoed back by the platform.
        private_key: Application private key (PEM) used for decryption.

    Returns:
        Names of the files retrieved and of those that failed.

    Raises:
        SharingClientError: If the pull as a whole fails.
    """

    def on_file_data(retrieved: RetrievedFile) -> None:
        try:
            content = parse_file_content(retrieved.file_data)
        except ValueError as e:
            raise ValueError(f"Could not parse file content: {e}") from e
        log_retrieved_file(retrieved, content)

    outcome = await client.get_session_data(
        session_key, private_key, on_file_data=on_file_data, on_file_error=log_file_failure
    )

    logger.info(
        "\n".join([SEPARATOR, "Data fetching complete.", SEPARATOR]),
        extra={"retrieved": len(outcome.retrieved), "failed": len(outcome.failed)},
    )
    return outcome
