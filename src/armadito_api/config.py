"""API configuration.

ApiConfig is a frozen dataclass — immutable after creation, IDE-autocompletable,
no string-key dict lookups.
"""

from dataclasses import dataclass

API_TOKEN_HEADER = "X-Armadito-Token"
API_VERSION_HEADER = "X-Armadito-Api-Version"
API_VERSION = "armadito.v0"


@dataclass(frozen=True, slots=True)
class ApiConfig:
    """API configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = ApiConfig(port=9000, event_timeout=5.0)
    """

    # Server
    host: str = "127.0.0.1"
    port: int = 8888
    workers: int = 1
    debug: bool = False

    # Protocol
    token_header: str = API_TOKEN_HEADER
    api_version: str = API_VERSION

    # Limits
    max_content_length: int = 1024 * 1024  # 1 MiB, bodies are buffered JSON
    event_timeout: float = 30.0  # /event long-poll wait, seconds

    # Worker threads, per server worker
    dispatch_threads: int = 40
    long_poll_threads: int = 64  # concurrent /event waits

    # Production settings
    log_level: str = "info"
    request_timeout: float = 60.0
    keep_alive_timeout: float = 5.0
