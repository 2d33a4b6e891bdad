from datetime import date, datetime, timezone
from typing import Optional
from pydantic import BaseModel, ConfigDict, StrictBool, field_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# -------------------------
# AUTH
# -------------------------
class SignupRequest(CamelModel):
    email: Optional[str] = None
    full_name: Optional[str] = None
    password: Optional[str] = None


class SigninRequest(CamelModel):
    email: Optional[str] = None
    password: Optional[str] = None


class UserOut(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    id: int
    email: str
    full_name: str


class AuthResponse(BaseModel):
    message: str
    token: str
    user: UserOut


# -------------------------
# TASKS
# -------------------------
class TaskCreate(CamelModel):
    title: Optional[str] = None
    description: Optional[str] = None
    due_date: Optional[str] = None
    priority: Optional[str] = None


class TaskUpdate(CamelModel):
    """Only these keys are ever written to a task; anything else is dropped."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    title: Optional[str] = None
    description: Optional[str] = None
    completed: Optional[StrictBool] = None
    due_date: Optional[str] = None
    priority: Optional[str] = None

    def supplied(self) -> dict:
        # distinguishes an explicit null from a key that was never sent
        return {name: getattr(self, name) for name in self.model_fields_set}


class TaskOut(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    id: int
    title: str
    description: str
    completed: bool
    due_date: Optional[date] = None
    priority: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    user_id: int

    @field_validator("created_at", "updated_at")
    @classmethod
    def _as_utc(cls, value: datetime) -> datetime:
        # timestamps are always written in UTC; some stores hand them back naive
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)


class MessageResponse(BaseModel):
    message: str
