# models/user.py
from sqlalchemy import Boolean, Column, Integer, String
from sqlalchemy.orm import relationship
from app.database import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(255), unique=True, index=True, nullable=False)  # required & unique
    password = Column(String(255), nullable=False)                           # bcrypt hash

    # Linked accounts, each independently settable/clearable
    twitch_username = Column(String(255), nullable=True)
    discord_username = Column(String(255), nullable=True)
    instagram_handle = Column(String(255), nullable=True)
    youtube_channel = Column(String(255), nullable=True)

    is_private = Column(Boolean, default=False, nullable=False)

    games = relationship(
        "ConnectedGame",
        back_populates="user",
        cascade="all, delete-orphan",
        order_by="ConnectedGame.connected_at",
    )

    @property
    def connected_games(self) -> list[str]:
        return [g.game_name for g in self.games]
