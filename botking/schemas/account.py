"""Account record schemas."""

from datetime import datetime

from .shared import NonEmptyStr, ReadBaseModel, RecordBaseModel


class AccountCreate(RecordBaseModel):
    user_id: NonEmptyStr
    provider_id: NonEmptyStr
    account_id: NonEmptyStr
    password: str | None = None
    access_token: str | None = None
    refresh_token: str | None = None
    id_token: str | None = None
    access_token_expires_at: datetime | None = None
    refresh_token_expires_at: datetime | None = None


class AccountRead(ReadBaseModel):
    id: str | None = None
    user_id: str | None = None
    provider_id: str | None = None
    account_id: str | None = None


class AccountUpdate(RecordBaseModel):
    id: NonEmptyStr
    user_id: NonEmptyStr | None = None
    provider_id: NonEmptyStr | None = None
    account_id: NonEmptyStr | None = None
    password: str | None = None
    access_token: str | None = None
    refresh_token: str | None = None
    id_token: str | None = None
    access_token_expires_at: datetime | None = None
    refresh_token_expires_at: datetime | None = None


class AccountDelete(RecordBaseModel):
    id: NonEmptyStr
