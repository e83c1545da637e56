from pydantic import BaseModel, Field
from enum import Enum


class ErrorKind(str, Enum):
    invalid_session = "invalid_session"  # token does not resolve to an account
    duplicate_completion = "duplicate_completion"  # task already completed today
    store_failure = "store_failure"
    catalog_too_small = "catalog_too_small"  # fewer catalog tasks than active slots


class CompletionRequestModel(BaseModel):
    session_id: str
    task: str
    image: str
    reward: float = Field(default=0.0, ge=0.0)


class PurgeResultModel(BaseModel):
    account_id: str
    deleted: int
