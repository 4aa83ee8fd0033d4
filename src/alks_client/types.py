"""Result types for ALKS REST API operations.

Pydantic models exposing only the fields documented for each operation;
anything else in a response body is dropped. ``model_dump(by_alias=True)``
gives the camelCase mapping the API uses. The module-level helpers reshape
raw response fields that are not plain key picks.
"""

import json
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class AlksResult(BaseModel):
    """Base for operation results: camelCase aliases, immutable."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class Account(AlksResult):
    """An AWS account and the user's role in it."""

    account: str
    role: str
    iam_key_active: bool


class Credentials(AlksResult):
    """AWS STS credentials."""

    access_key: str | None = None
    secret_key: str | None = None
    session_token: str | None = None


class CustomRole(AlksResult):
    """Result of creating a custom AWS IAM role.

    ``denyArns`` arrives as a comma-separated string and is split into a list.
    """

    role_arn: str | None = None
    deny_arns: list[str] | None = None
    instance_profile_arn: str | None = None
    added_role_to_instance_profile: bool | None = None

    @field_validator("deny_arns", mode="before")
    @classmethod
    def _split_deny_arns(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.split(",")
        return value


class AccessKeys(AlksResult):
    """A new IAM user with long-term access keys."""

    iam_user_arn: str | None = None
    access_key: str | None = None
    secret_key: str | None = None
    added_iam_user_to_group: bool | None = Field(
        default=None,
        alias="addedIAMUserToGroup",
    )


class VersionInfo(AlksResult):
    """Version of the ALKS REST API."""

    version: str | None = None


class LoginRole(AlksResult):
    """One of the roles used to generate keys."""

    account: str | None = None
    role: str | None = None
    iam_key_active: bool | None = None
    max_key_duration: int | None = None


class AccessToken(AlksResult):
    """Access token obtained from a refresh token exchange."""

    access_token: str | None = None
    expires_in: int | None = None


class RefreshToken(AlksResult):
    """A user's refresh token; ``value`` is masked by the API."""

    client_id: str | None = None
    id: int | str | None = None
    user_id: str | None = None
    value: str | None = None


def flatten_account_roles(
    account_list_role: Mapping[str, list[Mapping[str, Any]]],
) -> list[Account]:
    """Flatten ``accountListRole`` into one Account per account.

    Each account maps to a list of role records; only the first is used.
    """
    accounts = []
    for account, roles in account_list_role.items():
        first = roles[0]
        accounts.append(
            Account(
                account=account,
                role=first["role"],
                iam_key_active=first["iamKeyActive"],
            ),
        )
    return accounts


def parse_role_types(role_types: str) -> list[str]:
    """Decode a JSON-encoded list of role type names."""
    return list(json.loads(role_types))


def role_names_from_arns(json_arn_list: str) -> list[str]:
    """Decode a JSON-encoded list of role ARNs and keep each role name.

    >>> role_names_from_arns('["arn:aws:iam::123:role/acct-managed/r1"]')
    ['r1']
    """
    return [arn.split("/")[-1] for arn in json.loads(json_arn_list)]
