# thethought/users/schemas.py
from datetime import datetime

from pydantic import EmailStr, Field, AliasChoices

from thethought.core.schemas import CamelModel, AuthorOut
from thethought.posts.schemas import PostOut
from thethought.reels.schemas import ReelOut


class UserCreate(CamelModel):
    username: str = Field(..., min_length=3, max_length=50)
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=128)
    # Acepta displayName | display_name | name
    display_name: str | None = Field(
        default=None,
        max_length=100,
        validation_alias=AliasChoices("displayName", "display_name", "name"),
    )


class TokenOut(CamelModel):
    # convención OAuth2: estas claves van en snake_case
    access_token: str = Field(alias="access_token")
    token_type: str = Field(default="bearer", alias="token_type")
    user: AuthorOut | None = None


class MeOut(CamelModel):
    id: int
    username: str
    email: EmailStr
    display_name: str | None = None
    bio: str | None = None
    profile_pic: str | None = None
    privacy: str
    created_at: datetime | None = None


class ProfilePatch(CamelModel):
    display_name: str | None = Field(default=None, max_length=100)
    bio: str | None = Field(default=None, max_length=500)
    privacy: str | None = None


class AvatarOut(CamelModel):
    avatar: str
    url: str


class PublicUserOut(CamelModel):
    id: int
    username: str
    display_name: str | None = None
    bio: str | None = None
    profile_pic: str | None = None
    privacy: str
    created_at: datetime | None = None


class ProfilePageOut(CamelModel):
    user: PublicUserOut
    posts: list[PostOut]
    reels: list[ReelOut]
    posts_count: int
    reels_count: int
    followers_count: int
    following_count: int
    is_following: bool | None = None


class UserPage(CamelModel):
    users: list[AuthorOut]
    pagination: dict[str, int | bool] = Field(default_factory=dict)


class FollowToggleOut(CamelModel):
    message: str
    is_following: bool
    followers_count: int
