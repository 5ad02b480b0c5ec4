"""User account service declared as a static endpoint table."""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from .client import TypedApiClient
from .endpoint import Endpoint, HttpMethod
from .result import Result

RepoSort = Literal["created", "updated", "pushed", "full_name"]


class RegisterRequest(BaseModel):
    username: str = Field(min_length=1)
    email: str = Field(min_length=3)
    password: str = Field(min_length=1)


class LoginRequest(BaseModel):
    username: str
    password: str


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: Optional[int] = None


class User(BaseModel):
    """Public profile. Unknown wire fields are ignored."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    id: int
    username: str = Field(alias="login")
    name: Optional[str] = None
    email: Optional[str] = None
    avatar_url: Optional[str] = None


class UserUpdate(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None


class Repo(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: int
    name: str
    full_name: str
    private: bool = False
    description: Optional[str] = None
    stargazers_count: int = 0


REGISTER: Endpoint[None] = Endpoint("register", HttpMethod.POST, "/user/register", expects_body=True)
LOGIN: Endpoint[Token] = Endpoint("login", HttpMethod.POST, "/user/login", response=Token, expects_body=True)
GET_USER: Endpoint[User] = Endpoint("get_user", HttpMethod.GET, "/users/{username}", response=User)
LIST_REPOS: Endpoint[list[Repo]] = Endpoint(
    "list_repos",
    HttpMethod.GET,
    "/users/{username}/repos",
    response=list[Repo],
)
UPDATE_USER: Endpoint[User] = Endpoint(
    "update_user",
    HttpMethod.PUT,
    "/users/{username}",
    response=User,
    expects_body=True,
)
DELETE_USER: Endpoint[None] = Endpoint("delete_user", HttpMethod.DELETE, "/users/{username}")


class UserApi:
    """Typed facade over the user endpoints."""

    ENDPOINTS: tuple[Endpoint, ...] = (REGISTER, LOGIN, GET_USER, LIST_REPOS, UPDATE_USER, DELETE_USER)

    def __init__(self, client: TypedApiClient) -> None:
        self._client = client

    async def register(self, payload: RegisterRequest) -> Result[None]:
        return await self._client.call(REGISTER, payload)

    async def login(self, payload: LoginRequest) -> Result[Token]:
        return await self._client.call(LOGIN, payload)

    async def get_user(self, username: str) -> Result[User]:
        return await self._client.call(GET_USER, path={"username": username})

    async def list_repos(self, username: str, sort: RepoSort | None = None) -> Result[list[Repo]]:
        return await self._client.call(LIST_REPOS, path={"username": username}, query={"sort": sort})

    async def update_user(self, username: str, payload: UserUpdate) -> Result[User]:
        return await self._client.call(UPDATE_USER, payload, path={"username": username})

    async def delete_user(self, username: str, *, token: str | None = None) -> Result[None]:
        headers = {"Authorization": f"Bearer {token}"} if token else None
        return await self._client.call(DELETE_USER, path={"username": username}, headers=headers)
