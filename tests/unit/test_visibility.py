import pytest
from sqlalchemy.exc import OperationalError

from app.core.errors import InternalError, NotFoundError
from app.schemas.user_schema import ProfileOut, ReducedProfileOut
from app.services import follow_graph, visibility
from app.services import users as user_directory

HIDDEN_KEYS = {"twitchUsername", "discordUsername", "instagramHandle", "youtubeChannel", "connectedGames"}


class TestCanViewFull:
    def test_self_view(self):
        assert visibility.can_view_full("alice", "alice", is_private=True, following=False)

    def test_public_target(self):
        assert visibility.can_view_full(None, "alice", is_private=False, following=False)
        assert visibility.can_view_full("bob", "alice", is_private=False, following=False)

    def test_private_target_with_follow_edge(self):
        assert visibility.can_view_full("bob", "alice", is_private=True, following=True)

    def test_private_target_without_follow_edge(self):
        assert not visibility.can_view_full("bob", "alice", is_private=True, following=False)

    def test_private_target_anonymous(self):
        assert not visibility.can_view_full(None, "alice", is_private=True, following=False)


@pytest.fixture
def private_alice(db):
    user_directory.create_user(db, "alice", "pw1")
    user_directory.create_user(db, "bob", "pw2")
    user_directory.set_linked_account(db, "alice", "twitch_username", "alice_tv")
    user_directory.add_game(db, "alice", "Celeste")
    user_directory.set_privacy(db, "alice", True)


def test_reduced_profile_for_non_follower(db, private_alice):
    profile = visibility.get_profile(db, "alice", "bob")

    assert isinstance(profile, ReducedProfileOut)
    data = profile.model_dump(by_alias=True)
    assert data == {
        "username": "alice",
        "isPrivate": True,
        "followersCount": 0,
        "followingCount": 0,
        "isFollowing": False,
    }
    assert not HIDDEN_KEYS & data.keys()


def test_reduced_profile_for_anonymous(db, private_alice):
    assert isinstance(visibility.get_profile(db, "alice", None), ReducedProfileOut)


def test_full_profile_for_follower(db, private_alice):
    follow_graph.follow(db, "bob", "alice")

    profile = visibility.get_profile(db, "alice", "bob")

    assert isinstance(profile, ProfileOut)
    assert profile.twitch_username == "alice_tv"
    assert profile.connected_games == ["Celeste"]
    assert profile.is_following is True
    assert profile.followers_count == 1


def test_full_profile_for_self(db, private_alice):
    profile = visibility.get_profile(db, "alice", "alice")
    assert isinstance(profile, ProfileOut)
    assert profile.is_following is False


def test_decision_follows_current_state(db, private_alice):
    follow_graph.follow(db, "bob", "alice")
    assert isinstance(visibility.get_profile(db, "alice", "bob"), ProfileOut)

    follow_graph.unfollow(db, "bob", "alice")
    assert isinstance(visibility.get_profile(db, "alice", "bob"), ReducedProfileOut)

    user_directory.set_privacy(db, "alice", False)
    assert isinstance(visibility.get_profile(db, "alice", "bob"), ProfileOut)


def test_missing_target(db):
    with pytest.raises(NotFoundError):
        visibility.get_profile(db, "nobody", None)


def _broken_count(*args):
    raise OperationalError("SELECT count(*)", {}, Exception("connection lost"))


def test_count_failure_is_fatal_for_public_profile(db, private_alice, monkeypatch):
    monkeypatch.setattr(follow_graph, "followers_count", _broken_count)
    with pytest.raises(InternalError):
        visibility.get_profile(db, "alice", "bob")


def test_count_failure_degrades_to_zero_for_own_profile(db, private_alice, monkeypatch):
    follow_graph.follow(db, "bob", "alice")
    monkeypatch.setattr(follow_graph, "followers_count", _broken_count)

    profile = visibility.get_own_profile(db, "alice")

    assert profile.followers_count == 0
    assert profile.following_count == 0
    assert profile.twitch_username == "alice_tv"
