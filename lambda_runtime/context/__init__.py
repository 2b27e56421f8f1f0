"""Invocation context: per-invocation metadata and its header parser."""

from lambda_runtime.context.models import (
    ClientApplication,
    ClientContext,
    CognitoIdentity,
    InvocationContext,
)
from lambda_runtime.context.parser import parse_invocation_context

__all__ = [
    "ClientApplication",
    "ClientContext",
    "CognitoIdentity",
    "InvocationContext",
    "parse_invocation_context",
]
