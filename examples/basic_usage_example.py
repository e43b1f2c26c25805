#!/usr/bin/env python3
"""Basic usage example for SFTP Session.

Connects with an account credential set read from environment variables,
uploads a local file and lists the remote directory.

    SFTP_HOST=sftp.example.com SFTP_USER=deploy SFTP_PASS=secret \
        python examples/basic_usage_example.py ./report.csv /upload/report.csv
"""

import os
import sys
import uuid
from datetime import UTC, datetime

import structlog

from sftp_session import configure_logging, create_session, create_session_config

logger = structlog.get_logger(__name__)


def build_credentials() -> dict[str, object]:
    """Build an account credential set from environment variables."""
    return {
        "id": 1,
        "uuid": str(uuid.uuid4()),
        "date": datetime.now(tz=UTC).isoformat(),
        "is_encrypted": "no",
        "account_host": os.getenv("SFTP_HOST"),
        "account_options": "",
        "account_username": os.getenv("SFTP_USER"),
        "account_password": os.getenv("SFTP_PASS"),
        "default_directory": os.getenv("SFTP_DIR", "."),
        "is_secure_connection": "yes",
    }


def main(local_path: str, remote_path: str) -> None:
    config = create_session_config()
    configure_logging(log_level=config.log_level, dev_mode=config.dev_mode)

    session = create_session(config).connect(build_credentials())
    logger.info("Connected", pwd=session.get_pwd())

    session.upload_file(remote_path, local_path)
    remote_dir = os.path.dirname(remote_path) or "."
    logger.info(
        "Remote listing",
        directory=remote_dir,
        entries=session.get_ls(remote_dir),
        size=session.get_file_size(remote_path),
    )


if __name__ == "__main__":
    if len(sys.argv) != 3:  # noqa: PLR2004
        sys.exit(f"usage: {sys.argv[0]} LOCAL_PATH REMOTE_PATH")
    main(sys.argv[1], sys.argv[2])
