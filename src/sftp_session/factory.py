"""Factory functions for creating SFTP sessions from configuration."""

from sftp_session.config import SftpSessionConfig, create_session_config
from sftp_session.error_log import ErrorLogger, StructlogErrorLogger
from sftp_session.session import SftpSession
from sftp_session.transport import PysftpTransport, SftpTransport


def create_transport(config: SftpSessionConfig) -> PysftpTransport:
    """Create the pysftp-backed transport described by `config`."""
    return PysftpTransport(
        port=config.port,
        known_hosts=config.known_hosts,
        private_key=config.private_key,
        private_key_pass=config.private_key_pass,
    )


def create_session(
    config: SftpSessionConfig | None = None,
    transport: SftpTransport | None = None,
    error_logger: ErrorLogger | None = None,
) -> SftpSession:
    """Create an unconnected SftpSession.

    Args:
        config: Session configuration. If None, it is read from the
            environment.
        transport: Transport to use. If None, a PysftpTransport is built
            from `config`.
        error_logger: Sink for logical errors. If None, errors are logged
            through structlog.

    Returns:
        A new SftpSession; call `connect` before using it.
    """
    if config is None:
        config = create_session_config()

    return SftpSession(
        transport=transport or create_transport(config),
        error_logger=error_logger or StructlogErrorLogger(),
        credential_policy=config.credential_policy,
    )
