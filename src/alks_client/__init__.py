"""ALKS client.

Async client for the ALKS REST API, which issues temporary and long-term
AWS credentials, manages custom IAM roles, and handles OAuth2-style token
exchange and revocation.

Exports:
    alks: Default client with no base URL or token; derive from it with
        ``alks.create(...)``.
    Alks: Client class.
    AlksConfig: Immutable client options.
    ApiError: Raised for non-2xx API responses.
    RoleNotFoundError: Raised when a custom role lookup finds nothing.
"""

__version__ = "0.1.0"

from . import types  # noqa: E402
from .client import Alks, httpx_fetch  # noqa: E402
from .config import AlksConfig, merge_config  # noqa: E402
from .errors import AlksClientError, ApiError, RoleNotFoundError  # noqa: E402
from .log import configure_logging  # noqa: E402

alks = Alks()

__all__ = [
    "Alks",
    "AlksClientError",
    "AlksConfig",
    "ApiError",
    "RoleNotFoundError",
    "__version__",
    "alks",
    "configure_logging",
    "httpx_fetch",
    "merge_config",
    "types",
]
