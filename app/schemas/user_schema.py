# schemas/user_schema.py
from typing import Optional
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    # The frontend speaks camelCase on the wire
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class Credentials(BaseModel):
    username: str
    password: str


class RegisterResponse(BaseModel):
    message: str
    username: str


class LoginResponse(BaseModel):
    token: str
    username: str
    message: str


class UserOut(CamelModel):
    id: int
    username: str
    twitch_username: Optional[str] = None
    discord_username: Optional[str] = None
    instagram_handle: Optional[str] = None
    youtube_channel: Optional[str] = None
    connected_games: list[str] = []
    is_private: bool = False


class ProfileOut(UserOut):
    followers_count: int = 0
    following_count: int = 0
    is_following: bool = False


class ReducedProfileOut(CamelModel):
    """What a non-follower sees of a private account."""

    username: str
    is_private: bool
    followers_count: int
    following_count: int
    is_following: bool


class PrivacyUpdate(CamelModel):
    is_private: bool


class TwitchConnect(CamelModel):
    twitch_username: str


class DiscordConnect(CamelModel):
    discord_username: str


class InstagramConnect(CamelModel):
    instagram_handle: str


class YoutubeConnect(CamelModel):
    youtube_channel: str


class GameConnect(CamelModel):
    game_name: str
    game_id: Optional[str] = None


class GameDisconnect(CamelModel):
    game_name: str
