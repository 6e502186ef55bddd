"""User Schemas — credentials, partial updates, and the safe projection.

Invariants:
    - UserCredentials.username / password: non-empty strings, no coercion from numbers
    - SafeUser has no password field: a projection built from a stored document
      cannot carry the secret out of the service layer
    - UserUpdate.patch() never contains date_joined or id
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, StrictStr
from pydantic.alias_generators import to_camel


class UserCredentials(BaseModel):
    """Body for signup, login and password reset."""
    username: StrictStr = Field(min_length=1, max_length=100)
    password: StrictStr = Field(min_length=1, max_length=255)


class UserUpdate(BaseModel):
    """Partial field set applied by UserService.update."""
    username: StrictStr | None = Field(None, min_length=1, max_length=100)
    password: StrictStr | None = Field(None, min_length=1, max_length=255)

    def patch(self) -> dict:
        return self.model_dump(exclude_unset=True, exclude_none=True)


class SafeUser(BaseModel):
    """User record as it leaves the service layer."""
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True,
    )

    id: UUID | None = Field(None, alias="_id")
    username: str
    date_joined: datetime
