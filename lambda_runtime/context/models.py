"""Invocation metadata models."""

import time
from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ClientApplication(BaseModel):
    """Mobile client application that triggered the invocation."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    installation_id: str = Field(default="", alias="installationId")
    app_title: str = Field(default="", alias="appTitle")
    app_version_name: str = Field(default="", alias="appVersionName")
    app_version_code: str = Field(default="", alias="appVersionCode")
    app_package_name: str = Field(default="", alias="appPackageName")


class ClientContext(BaseModel):
    """Client context passed by the caller through the AWS Mobile SDK."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    client: ClientApplication | None = None
    custom: dict[str, Any] = Field(default_factory=dict)
    env: dict[str, Any] = Field(default_factory=dict)


class CognitoIdentity(BaseModel):
    """Amazon Cognito identity of the caller."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    cognito_identity_id: str = Field(alias="cognitoIdentityId")
    cognito_identity_pool_id: str = Field(alias="cognitoIdentityPoolId")


class InvocationContext(BaseModel):
    """Immutable metadata describing one invocation.

    Built from the response headers of the next-invocation call plus the
    read-only function metadata of the execution environment.
    """

    model_config = ConfigDict(frozen=True)

    request_id: str = Field(min_length=1)
    deadline_ms: int = Field(ge=0)
    invoked_function_arn: str = Field(default="")
    trace_id: str | None = None
    client_context: ClientContext | None = None
    identity: CognitoIdentity | None = None

    # Execution environment metadata
    function_name: str = Field(default="")
    function_version: str = Field(default="$LATEST")
    memory_limit_in_mb: int = Field(default=128, ge=0)
    log_group_name: str = Field(default="")
    log_stream_name: str = Field(default="")

    @property
    def aws_request_id(self) -> str:
        """Alias used by handler code written against the platform's context object."""
        return self.request_id

    @property
    def deadline(self) -> datetime:
        """Deadline as an aware UTC datetime."""
        return datetime.fromtimestamp(self.deadline_ms / 1000, UTC)

    def get_remaining_time_in_millis(self) -> int:
        """Return milliseconds left before the platform stops the invocation.

        Returns:
            Remaining time, never negative.
        """
        now_ms = int(time.time() * 1000)
        return max(self.deadline_ms - now_ms, 0)
