"""ALKS REST API client.

Provides an async client that merges stored configuration with per-call
options, issues one HTTP request per operation, and reshapes response
bodies into result models. Non-2xx responses raise :class:`ApiError`.
"""

import asyncio
import base64
import json
import time
from collections.abc import Awaitable, Mapping
from typing import Any

import httpx

from . import __version__, log
from .config import AlksConfig, merge_config
from .errors import ApiError, RoleNotFoundError
from .types import (
    AccessKeys,
    Account,
    AccessToken,
    Credentials,
    CustomRole,
    LoginRole,
    RefreshToken,
    VersionInfo,
    flatten_account_roles,
    parse_role_types,
    role_names_from_arns,
)

USER_AGENT = f"AlksPy/{__version__}"

# Default transport timeout in seconds, for connect, read, write and pool.
DEFAULT_TIMEOUT = 30.0

# statusMessage returned by a successful revoke
REVOKE_SUCCESS = "Success"

# Options consumed by the client itself; never sent in a request body.
LOCAL_OPTIONS = frozenset({"baseUrl", "fetch", "accessToken", "userid", "password"})

Props = Mapping[str, Any] | AlksConfig | None


async def httpx_fetch(
    url: str,
    *,
    method: str,
    headers: dict[str, str],
    content: str | None = None,
) -> httpx.Response:
    """Default transport: one request on a short-lived httpx.AsyncClient."""
    async with httpx.AsyncClient(timeout=DEFAULT_TIMEOUT) as client:
        return await client.request(method, url, headers=headers, content=content)


async def _read_json(pending: Awaitable[httpx.Response]) -> Any:
    """Parse the response body as JSON, or return None if it is not JSON."""
    response = await pending
    try:
        return response.json()
    except ValueError:
        return None


def _basic_credentials(userid: str | None, password: str | None) -> str:
    raw = f"{userid or ''}:{password or ''}"
    return base64.b64encode(raw.encode()).decode()


def _call_options(props: Props, kwargs: Mapping[str, Any]) -> AlksConfig:
    """Combine a positional options mapping with keyword options."""
    return merge_config(merge_config(AlksConfig(), props), kwargs)


class Alks:
    """Async client for the ALKS REST API.

    Holds an immutable :class:`AlksConfig`. Use :meth:`create` to derive a
    client with additional or replaced options; every operation accepts
    further options (snake_case keywords or a camelCase mapping) that apply
    to that call only.
    """

    def __init__(self, config: Props = None):
        """Initialize the client.

        Args:
            config: Stored options, as an AlksConfig or a plain mapping.
        """
        if not isinstance(config, AlksConfig):
            config = AlksConfig.model_validate(dict(config or {}))
        self.config = config

    def __repr__(self) -> str:
        return f"Alks(base_url={self.config.base_url!r})"

    def create(self, props: Props = None, **kwargs: Any) -> "Alks":
        """Return a new client whose options override this client's.

        Args:
            props: Options mapping (camelCase or snake_case keys).
            **kwargs: Options as keywords; applied after ``props``.

        Returns:
            A new Alks instance. This client is unchanged.
        """
        return Alks(merge_config(self.config, _call_options(props, kwargs)))

    async def execute(
        self,
        path: str,
        payload: Props = None,
        method: str = "POST",
    ) -> Any:
        """Make one request to the ALKS REST API.

        Merges stored options with ``payload``, sets authentication headers,
        and sends the remaining options as the JSON body (except for GET).
        The response and its JSON body are awaited together; a body that is
        not JSON does not affect the outcome, only the HTTP status does.

        Args:
            path: Operation path, e.g. "getKeys".
            payload: Call-specific options; they win over stored options.
            method: HTTP method.

        Returns:
            Parsed JSON body, or None if the body is not JSON.

        Raises:
            ValueError: If no base URL is configured.
            ApiError: If the API answers with a non-2xx status.
        """
        logger = log.get_logger(__name__)
        options = merge_config(self.config, payload).as_options()
        base_url = options.get("baseUrl")
        if not base_url:
            msg = "baseUrl is required"
            raise ValueError(msg)
        method = method.upper()

        headers = {
            "Content-Type": "application/json",
            "User-Agent": USER_AGENT,
        }
        access_token = options.get("accessToken")
        userid = options.get("userid")
        password = options.get("password")
        if access_token:
            headers["Authorization"] = f"Bearer {access_token}"
        elif userid or password:
            logger.warning(
                "The userid and password properties are deprecated and should "
                "be replaced with an access token",
            )
            headers["Authorization"] = f"Basic {_basic_credentials(userid, password)}"

        body = {k: v for k, v in options.items() if k not in LOCAL_OPTIONS}
        content = None if method == "GET" else json.dumps(body)
        url = f"{str(base_url).rstrip('/')}/{path}/"
        fetch = options.get("fetch") or httpx_fetch

        start_time = time.time()
        logger.debug("Making API request", method=method, path=path)
        pending = asyncio.ensure_future(
            fetch(url, method=method, headers=headers, content=content),
        )
        response, data = await asyncio.gather(pending, _read_json(pending))
        logger.debug(
            "API request completed",
            path=path,
            status=response.status_code,
            duration_seconds=round(time.time() - start_time, 3),
        )

        if not response.is_success:
            raise ApiError.from_response(response, data)
        return data

    async def get_accounts(
        self,
        props: Props = None,
        **kwargs: Any,
    ) -> list[Account]:
        """Fetch the AWS accounts (and roles) accessible by the user.

        Returns:
            One Account per account, using its first role record.
        """
        data = await self.execute("getAccounts", _call_options(props, kwargs))
        return flatten_account_roles(data["accountListRole"])

    async def get_keys(self, props: Props = None, **kwargs: Any) -> Credentials:
        """Fetch AWS STS credentials for ``account``/``role``/``session_time``."""
        data = await self.execute("getKeys", _call_options(props, kwargs))
        return Credentials.model_validate(data)

    async def get_iam_keys(self, props: Props = None, **kwargs: Any) -> Credentials:
        """Fetch AWS STS credentials with IAM permissions."""
        data = await self.execute("getIAMKeys", _call_options(props, kwargs))
        return Credentials.model_validate(data)

    async def get_aws_role_types(
        self,
        props: Props = None,
        **kwargs: Any,
    ) -> list[str]:
        """Fetch the available AWS IAM role types."""
        data = await self.execute("getAWSRoleTypes", _call_options(props, kwargs))
        return parse_role_types(data["roleTypes"])

    async def get_non_service_aws_role_types(
        self,
        props: Props = None,
        **kwargs: Any,
    ) -> list[str]:
        """Fetch the available custom (non-service) role types."""
        data = await self.execute(
            "getNonServiceAWSRoleTypes",
            _call_options(props, kwargs),
        )
        return parse_role_types(data["roleTypes"])

    async def create_role(self, props: Props = None, **kwargs: Any) -> CustomRole:
        """Create a custom AWS IAM account role.

        Expects ``role_name``, ``role_type`` and ``include_default_policy``
        (1 or 0) besides the account and role.
        """
        data = await self.execute("createRole", _call_options(props, kwargs))
        return CustomRole.model_validate(data)

    async def create_non_service_role(
        self,
        props: Props = None,
        **kwargs: Any,
    ) -> CustomRole:
        """Create a custom AWS IAM trust role.

        Like :meth:`create_role`, plus ``trust_arn`` and ``trust_type``
        ("Cross Account" or "Inner Account").
        """
        data = await self.execute("createNonServiceRole", _call_options(props, kwargs))
        return CustomRole.model_validate(data)

    async def list_aws_account_roles(
        self,
        props: Props = None,
        **kwargs: Any,
    ) -> list[str]:
        """List the names of custom AWS IAM roles in the account."""
        data = await self.execute("listAWSAccountRoles", _call_options(props, kwargs))
        return role_names_from_arns(data["jsonAWSRoleList"])

    async def get_account_role(self, props: Props = None, **kwargs: Any) -> str:
        """Fetch the ARN of a custom AWS IAM role.

        Raises:
            RoleNotFoundError: If the API reports the role does not exist.
        """
        payload = _call_options(props, kwargs)
        data = await self.execute("getAccountRole", payload)
        if not data.get("roleExists"):
            role_name = merge_config(self.config, payload).role_name
            raise RoleNotFoundError(role_name)
        return data["roleARN"]

    async def delete_role(self, props: Props = None, **kwargs: Any) -> bool:
        """Delete a custom AWS IAM role. Returns True on success."""
        await self.execute("deleteRole", _call_options(props, kwargs))
        return True

    async def create_access_keys(
        self,
        props: Props = None,
        **kwargs: Any,
    ) -> AccessKeys:
        """Create an IAM user named ``iam_user_name`` with long-term keys."""
        data = await self.execute("accessKeys", _call_options(props, kwargs))
        return AccessKeys.model_validate(data)

    async def delete_iam_user(self, props: Props = None, **kwargs: Any) -> bool:
        """Delete an IAM user and its long-term keys. Returns True on success."""
        await self.execute("IAMUser", _call_options(props, kwargs), "DELETE")
        return True

    async def version(self, props: Props = None, **kwargs: Any) -> VersionInfo:
        """Fetch the version of the ALKS REST API."""
        data = await self.execute("version", _call_options(props, kwargs), "GET")
        return VersionInfo.model_validate(data)

    async def get_login_role(self, props: Props = None, **kwargs: Any) -> LoginRole:
        """Fetch information about the login role ``account_id``/``role``.

        The account ID and role only build the path; the request body
        carries the client's stored options alone.
        """
        options = merge_config(self.config, _call_options(props, kwargs))
        path = f"loginRoles/id/{options.account_id}/{options.role}"
        data = await self.execute(path)
        return LoginRole.model_validate(data)

    async def get_access_token(
        self,
        props: Props = None,
        **kwargs: Any,
    ) -> AccessToken:
        """Exchange ``refresh_token`` for an access token."""
        data = await self.execute("accessToken", _call_options(props, kwargs))
        return AccessToken.model_validate(data)

    async def get_refresh_tokens(
        self,
        props: Props = None,
        **kwargs: Any,
    ) -> list[RefreshToken]:
        """List the user's refresh tokens (values are masked)."""
        data = await self.execute("refreshTokens", _call_options(props, kwargs), "GET")
        return [RefreshToken.model_validate(token) for token in data["refreshTokens"]]

    async def revoke(self, props: Props = None, **kwargs: Any) -> bool:
        """Revoke a refresh or access token (``token``) or a refresh token ID.

        Returns:
            True only if the API's ``statusMessage`` is "Success".
        """
        data = await self.execute("revoke", _call_options(props, kwargs))
        return isinstance(data, dict) and data.get("statusMessage") == REVOKE_SUCCESS
