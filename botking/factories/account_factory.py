"""Account factory for OAuth and password accounts."""

from __future__ import annotations

import json
from collections.abc import Mapping
from datetime import datetime
from typing import Any

from ..dto.converters import AccountConverter
from ..game.artifacts import CREDENTIAL_PROVIDER, AccountArtifact
from ..structured_logging.enhanced_logging_config import get_logger
from ..structured_logging.logging_processors import REDACTED_PLACEHOLDER
from ..utils.clock import ensure_utc
from ..validators.result import FieldError
from .base import ArtifactContext, ArtifactFactory, blank

logger = get_logger(__name__)

_DATETIME_FIELDS = ("access_token_expires_at", "refresh_token_expires_at", "created_at", "updated_at")


class AccountFactory(ArtifactFactory[AccountArtifact]):
    """Factory for user accounts."""

    factory_name = "account"

    def __init__(self, context: ArtifactContext | None = None):
        super().__init__(context)
        self.converter = AccountConverter()

    def create_account_artifact(
        self, user_id: str, provider_id: str, account_id: str, **secrets: Any
    ) -> AccountArtifact:
        """
        Create an account.

        Args:
            user_id: Owning user
            provider_id: Identity provider ("credential" for password accounts)
            account_id: Account id at the provider
            **secrets: password, tokens and token expiry datetimes

        Raises:
            ConstructionError: On unknown keyword arguments or wrongly typed values
        """
        return self.create_artifact(user_id=user_id, provider_id=provider_id, account_id=account_id, **secrets)

    def create_oauth_account(  # pylint: disable=too-many-arguments
        self,
        user_id: str,
        provider_id: str,
        account_id: str,
        *,
        access_token: str | None = None,
        refresh_token: str | None = None,
        id_token: str | None = None,
        access_token_expires_at: datetime | None = None,
        refresh_token_expires_at: datetime | None = None,
    ) -> AccountArtifact:
        return self.create_account_artifact(
            user_id,
            provider_id,
            account_id,
            access_token=access_token,
            refresh_token=refresh_token,
            id_token=id_token,
            access_token_expires_at=access_token_expires_at,
            refresh_token_expires_at=refresh_token_expires_at,
        )

    def create_password_account(self, user_id: str, account_id: str, password: str) -> AccountArtifact:
        return self.create_account_artifact(user_id, CREDENTIAL_PROVIDER, account_id, password=password)

    def from_json(self, payload: str | Mapping[str, Any]) -> AccountArtifact:
        """
        Rebuild an account from its JSON form.

        Redacted secrets cannot be recovered and come back as None.

        Raises:
            ConstructionError: If the payload is not valid JSON or lacks fields
        """
        if isinstance(payload, str):
            try:
                data = json.loads(payload)
            except json.JSONDecodeError as exc:
                self.construction_failed(f"Account JSON is malformed: {exc}")
        else:
            data = dict(payload)
        if not isinstance(data, dict):
            self.construction_failed("Account JSON must be an object")

        for secret in ("password", "access_token", "refresh_token", "id_token"):
            if data.get(secret) == REDACTED_PLACEHOLDER:
                data[secret] = None
        for stamp in _DATETIME_FIELDS:
            if isinstance(data.get(stamp), str):
                try:
                    data[stamp] = datetime.fromisoformat(data[stamp])
                except ValueError as exc:
                    self.construction_failed(f"Invalid {stamp}: {exc}", field=stamp)
        return self.converter.from_dto(data)

    def _build(  # pylint: disable=too-many-arguments
        self,
        *,
        user_id: Any,
        provider_id: Any,
        account_id: Any,
        password: Any = None,
        access_token: Any = None,
        refresh_token: Any = None,
        id_token: Any = None,
        access_token_expires_at: Any = None,
        refresh_token_expires_at: Any = None,
    ) -> AccountArtifact:
        for field_name, value in (
            ("password", password),
            ("access_token", access_token),
            ("refresh_token", refresh_token),
            ("id_token", id_token),
        ):
            if value is not None:
                self.require_str(value, field_name)
        for field_name, value in (
            ("access_token_expires_at", access_token_expires_at),
            ("refresh_token_expires_at", refresh_token_expires_at),
        ):
            if value is not None and not isinstance(value, datetime):
                self.construction_failed(f"{field_name} must be a datetime", field=field_name)

        account = AccountArtifact(
            user_id=self.require_str(user_id, "user_id"),
            provider_id=self.require_str(provider_id, "provider_id"),
            account_id=self.require_str(account_id, "account_id"),
            password=password,
            access_token=access_token,
            refresh_token=refresh_token,
            id_token=id_token,
            access_token_expires_at=ensure_utc(access_token_expires_at) if access_token_expires_at else None,
            refresh_token_expires_at=ensure_utc(refresh_token_expires_at) if refresh_token_expires_at else None,
        )
        logger.info(
            "Account artifact created",
            user_id=account.user_id,
            provider_id=account.provider_id,
            has_password=account.has_password,
        )
        return account

    def _rule_violations(self, artifact: AccountArtifact) -> list[FieldError]:
        errors: list[FieldError] = []
        if blank(artifact.user_id):
            errors.append(FieldError("user_id", "User ID is required"))
        if blank(artifact.provider_id):
            errors.append(FieldError("provider_id", "Provider ID is required"))
        if blank(artifact.account_id):
            errors.append(FieldError("account_id", "Account ID is required"))
        if artifact.created_at and artifact.updated_at and artifact.updated_at < artifact.created_at:
            errors.append(FieldError("updated_at", "Update date cannot be before creation date"))
        if artifact.access_token_expires_at is not None and artifact.access_token is None:
            errors.append(FieldError("access_token", "Access token expiry set without an access token"))
        if artifact.refresh_token_expires_at is not None and artifact.refresh_token is None:
            errors.append(FieldError("refresh_token", "Refresh token expiry set without a refresh token"))
        if artifact.provider_id == CREDENTIAL_PROVIDER and artifact.password is None:
            errors.append(FieldError("password", "Credential accounts require a password"))
        return errors
