"""Client configuration for the ALKS REST API.

Options are held in an immutable :class:`AlksConfig`. Deriving a client
merges the parent's options with overrides via :func:`merge_config`, which
never mutates the parent.
"""

import os
from collections.abc import Awaitable, Callable, Mapping
from typing import Any

import httpx
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

# Async transport: fetch(url, *, method, headers, content) -> httpx.Response
Fetch = Callable[..., Awaitable[httpx.Response]]

ENV_VARS = {
    "ALKS_BASE_URL": "baseUrl",
    "ALKS_ACCESS_TOKEN": "accessToken",
}


class AlksConfig(BaseModel):
    """Options recognized by the ALKS client.

    Every field is optional and accepts either its snake_case name or its
    camelCase wire alias. Values are not validated or coerced: whatever the
    caller gives (an int account ID, a string session time) is forwarded
    as is. Unknown keys are kept as extras and forwarded to the API
    untouched.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
        frozen=True,
    )

    # Connection
    base_url: Any = None
    fetch: Fetch | None = None

    # Authentication
    access_token: Any = None
    userid: Any = None  # deprecated
    password: Any = None  # deprecated

    # Session
    account: Any = None
    account_id: Any = None
    role: Any = None
    session_time: Any = None  # hours

    # Custom roles
    role_name: Any = None
    role_type: Any = None
    include_default_policy: Any = None  # 1 or 0
    trust_arn: Any = None
    trust_type: Any = None

    # IAM users
    iam_user_name: Any = None

    # Tokens
    refresh_token: Any = None
    token: Any = None
    token_id: Any = None

    def as_options(self) -> dict[str, Any]:
        """Return the explicitly set options keyed by wire name.

        Fields that were never supplied are omitted; fields explicitly set
        to ``None`` are kept. Extra keys keep the name they were given.
        """
        fields = type(self).model_fields
        options = {
            info.alias or name: getattr(self, name)
            for name, info in fields.items()
            if name in self.model_fields_set
        }
        options.update(self.model_extra or {})
        return options

    @classmethod
    def from_env(cls) -> "AlksConfig":
        """Build a config from ``ALKS_BASE_URL`` and ``ALKS_ACCESS_TOKEN``.

        Unset or empty variables are left out.
        """
        values = {
            alias: os.environ[var]
            for var, alias in ENV_VARS.items()
            if os.environ.get(var)
        }
        return cls.model_validate(values)


def merge_config(
    parent: AlksConfig,
    overrides: Mapping[str, Any] | AlksConfig | None = None,
) -> AlksConfig:
    """Merge overrides on top of a parent config.

    Right-biased shallow merge: any key present in ``overrides`` replaces
    the parent's value, every other parent key passes through unchanged.

    Args:
        parent: Inherited configuration.
        overrides: Options to apply, by snake_case name or camelCase alias.

    Returns:
        A new AlksConfig; ``parent`` is left as is.
    """
    if overrides is None:
        return parent
    if not isinstance(overrides, AlksConfig):
        overrides = AlksConfig.model_validate(dict(overrides))
    merged = {**parent.as_options(), **overrides.as_options()}
    return AlksConfig.model_validate(merged)
