"""User entities exchanged with the users API."""

from typing import List

from pydantic import BaseModel, ConfigDict, Field


class NewUser(BaseModel):
    """
    Payload for creating a user.

    Serializes with capitalized names in declaration order:
        {"Name":"John Doe","Email":"johndoe@example.com"}
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    name: str = Field(alias="Name")
    email: str = Field(alias="Email")


class User(BaseModel):
    """A user as returned by the users API."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: int = Field(alias="Id")
    name: str = Field(alias="Name")
    email: str = Field(alias="Email")


class UserList(BaseModel):
    """Body of ``GET /api/users``: ``{"Users":[...]}``."""

    model_config = ConfigDict(populate_by_name=True)

    users: List[User] = Field(default_factory=list, alias="Users")
