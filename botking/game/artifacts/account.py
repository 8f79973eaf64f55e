"""Account artifact: a user's credential binding to an identity provider."""

from __future__ import annotations

import json
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Any

from ...structured_logging.logging_processors import REDACTED_PLACEHOLDER
from ...utils.clock import ensure_utc

# Provider id used for username/password accounts
CREDENTIAL_PROVIDER = "credential"

SECRET_FIELDS = ("password", "access_token", "refresh_token", "id_token")


@dataclass(frozen=True, slots=True)
class AccountArtifact:
    """
    Account bound to one (provider_id, account_id) pair.

    Secrets are held as plain values; only to_json() and serialize() redact
    them. Persistence projections keep the real values.
    """

    user_id: str
    provider_id: str
    account_id: str
    password: str | None = None
    access_token: str | None = None
    refresh_token: str | None = None
    id_token: str | None = None
    access_token_expires_at: datetime | None = None
    refresh_token_expires_at: datetime | None = None
    id: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def is_persisted(self) -> bool:
        return self.id is not None

    @property
    def has_password(self) -> bool:
        return self.password is not None

    @property
    def is_oauth(self) -> bool:
        """True for accounts issued by an external OAuth provider."""
        return self.provider_id != CREDENTIAL_PROVIDER and self.password is None

    def is_access_token_expired(self, now: datetime) -> bool:
        """An access token without an expiry never expires."""
        if self.access_token_expires_at is None:
            return False
        return ensure_utc(self.access_token_expires_at) <= ensure_utc(now)

    def is_refresh_token_expired(self, now: datetime) -> bool:
        if self.refresh_token_expires_at is None:
            return False
        return ensure_utc(self.refresh_token_expires_at) <= ensure_utc(now)

    def with_tokens(
        self,
        *,
        access_token: str | None = None,
        refresh_token: str | None = None,
        access_token_expires_at: datetime | None = None,
        refresh_token_expires_at: datetime | None = None,
    ) -> AccountArtifact:
        """Return a copy with rotated tokens; omitted tokens keep their current value."""
        return replace(
            self,
            access_token=access_token if access_token is not None else self.access_token,
            refresh_token=refresh_token if refresh_token is not None else self.refresh_token,
            access_token_expires_at=access_token_expires_at or self.access_token_expires_at,
            refresh_token_expires_at=refresh_token_expires_at or self.refresh_token_expires_at,
        )

    def to_json(self, placeholder: str = REDACTED_PLACEHOLDER) -> dict[str, Any]:
        """JSON-safe view with every present secret replaced by the placeholder."""
        payload: dict[str, Any] = {
            "id": self.id,
            "user_id": self.user_id,
            "provider_id": self.provider_id,
            "account_id": self.account_id,
        }
        for secret in SECRET_FIELDS:
            payload[secret] = placeholder if getattr(self, secret) is not None else None
        for stamp in ("access_token_expires_at", "refresh_token_expires_at", "created_at", "updated_at"):
            value = getattr(self, stamp)
            payload[stamp] = value.isoformat() if value is not None else None
        return payload

    def serialize(self, placeholder: str = REDACTED_PLACEHOLDER) -> str:
        return json.dumps(self.to_json(placeholder), sort_keys=True)
