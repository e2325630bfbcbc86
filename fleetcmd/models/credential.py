"""Credential construction for device sessions."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, SecretStr

from fleetcmd.exceptions import CredentialError


class Credential(BaseModel):
    """Opaque login material handed to the transport.

    The secret is held as a :class:`~pydantic.SecretStr` so it never shows up
    in reprs, logs or serialized results.
    """

    model_config = ConfigDict(frozen=True)

    identity: str
    secret: SecretStr

    def reveal(self) -> str:
        return self.secret.get_secret_value()


def build_credential(identity: str | None, secret: str | SecretStr | None) -> Credential:
    """Build a :class:`Credential` from a plaintext or already-secured secret."""
    if not identity:
        raise CredentialError("A username is required to build a credential")
    if secret is None:
        raise CredentialError(f"No password supplied for user {identity!r}")
    if not isinstance(secret, SecretStr):
        secret = SecretStr(secret)
    if not secret.get_secret_value():
        raise CredentialError(f"No password supplied for user {identity!r}")
    return Credential(identity=identity, secret=secret)
