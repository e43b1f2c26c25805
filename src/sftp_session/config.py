"""Environment-driven configuration for SFTP sessions.

Settings are read from ``SFTP_SESSION_*`` environment variables using
environ-config, for example ``SFTP_SESSION_PORT=2222``.
"""

import os
from collections.abc import Mapping

import environ


@environ.config(prefix="SFTP_SESSION")
class SftpSessionConfig:
    """Configuration for building an `SftpSession`."""

    port: int = environ.var(default=22, converter=int, help="SSH port")
    known_hosts: str | None = environ.var(
        default=None,
        help="Path to a known_hosts file; unset disables host key checking",
    )
    private_key: str | None = environ.var(
        default=None, help="Path to a private key used for login"
    )
    private_key_pass: str | None = environ.var(
        default=None, help="Passphrase for the private key"
    )
    credential_policy: str = environ.var(
        default="legacy",
        help="How to treat incomplete credentials (legacy or strict)",
    )
    log_level: str = environ.var(default="INFO", help="Log level")
    dev_mode: bool = environ.bool_var(
        default=False, help="Enable development mode logging"
    )


def create_session_config(
    env: Mapping[str, str] | None = None,
) -> SftpSessionConfig:
    """Create an SftpSessionConfig from environment variables.

    Args:
        env: Mapping to read from. If None, uses os.environ.

    Returns:
        SftpSessionConfig instance populated from the environment.
    """
    return environ.to_config(
        SftpSessionConfig, environ=os.environ if env is None else env
    )
