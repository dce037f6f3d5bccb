from typing import Literal

from pydantic import BaseModel, Field, field_validator


class AppRules(BaseModel):
    base_url: str = "http://127.0.0.1:8000"
    confirmation_path: str = "/subscriptions/confirm"

    @field_validator("base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")


class SubscriptionRules(BaseModel):
    # Attempts at the lookup/insert sequence when a concurrent request wins the race
    max_attempts: int = Field(3, ge=1, le=10)
    confirmation_subject: str = "Welcome!"


class NameRules(BaseModel):
    max_length: int = Field(256, ge=1)
    forbidden_characters: str = '/()"<>\\{}'


class SubscriberRules(BaseModel):
    name: NameRules = Field(default_factory=NameRules)


class EmailRules(BaseModel):
    adapter: Literal["dev", "http"] = "dev"
    sender: str = "newsletter@example.com"
    sender_name: str | None = None
    api_base_url: str = "https://api.postmarkapp.com"
    timeout_seconds: float = Field(10.0, gt=0)


class StorageRules(BaseModel):
    db_filename: str = "newsdesk.db"
    migrations_dir: str = "migrations"
    busy_timeout_seconds: float = Field(5.0, gt=0)


class Rules(BaseModel):
    app: AppRules = Field(default_factory=AppRules)
    subscriptions: SubscriptionRules = Field(default_factory=SubscriptionRules)
    subscribers: SubscriberRules = Field(default_factory=SubscriberRules)
    email: EmailRules = Field(default_factory=EmailRules)
    storage: StorageRules = Field(default_factory=StorageRules)
