"""Domain-level error types for use-case and adapter mapping.

Every error here is a :class:`UseCaseError`, so command handlers can surface
``err.message`` directly. The subclasses only tell the caller which side of
the collaborator boundary the failure happened on.
"""

from __future__ import annotations

from .ports import UseCaseError


class ValidationError(UseCaseError):
    """Local input error. Raised before any collaborator call."""


class PreconditionError(UseCaseError):
    """Environment not ready (vault locked, no workspace). No side effects."""


class CollaboratorError(UseCaseError):
    """A collaborator call failed; state keeps its pre-call values."""


class TokenDecodeError(UseCaseError):
    """Access token is malformed or carries no usable user id claim."""

    def __init__(self, message: str):
        super().__init__("TOKEN_DECODE_FAILED", message)


VAULT_LOCKED_MESSAGE = "Vault is locked. Please unlock the app first."


__all__ = [
    "CollaboratorError",
    "PreconditionError",
    "TokenDecodeError",
    "ValidationError",
    "VAULT_LOCKED_MESSAGE",
]
