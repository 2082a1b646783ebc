#!/usr/bin/env python3
"""Run the private sharing example application"""
import logging
import socket

import uvicorn

from private_sharing.core.config import get_settings
from private_sharing.core.logging_config import init_application_logging

logger = logging.getLogger("private_sharing.run")


def get_network_address() -> str:
    """Best guess at this machine's LAN address"""
    with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as probe:
        try:
            # No packets are sent for a UDP connect
            probe.connect(("10.255.255.255", 1))
            return probe.getsockname()[0]
        except OSError:
            return "127.0.0.1"


def main() -> None:
    settings = get_settings()
    init_application_logging(settings)

    logger.info(
        "\n".join(
            [
                "Example app now running on:",
                f"- http://localhost:{settings.PORT}",
                f"- http://{get_network_address()}:{settings.PORT} (probably)",
            ]
        )
    )

    uvicorn.run(
        "private_sharing.main:app",
        host=settings.HOST,
        port=settings.PORT,
        log_level="debug" if settings.DEV_MODE else "info",
        log_config=None,
    )


if __name__ == "__main__":
    main()
