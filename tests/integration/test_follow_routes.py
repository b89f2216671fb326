"""Integration tests for follow/unfollow and the end-to-end visibility scenario."""

from conftest import login_headers, register


class TestFollow:
    def test_follow_requires_auth(self, client):
        register(client, "alice")
        assert client.post("/follow/alice").status_code == 401
        assert client.post("/unfollow/alice").status_code == 401

    def test_follow_unknown_user(self, client):
        bob = login_headers(client, "bob")
        response = client.post("/follow/nobody", headers=bob)
        assert response.status_code == 404

    def test_follow_twice(self, client):
        register(client, "alice")
        bob = login_headers(client, "bob")

        response = client.post("/follow/alice", headers=bob)
        assert response.status_code == 200
        assert response.json() == {"message": "Successfully followed user"}

        response = client.post("/follow/alice", headers=bob)
        assert response.status_code == 400
        assert response.json()["detail"] == "Already following this user"

    def test_unfollow_twice(self, client):
        register(client, "alice")
        bob = login_headers(client, "bob")
        client.post("/follow/alice", headers=bob)

        response = client.post("/unfollow/alice", headers=bob)
        assert response.status_code == 200
        assert response.json() == {"message": "Successfully unfollowed user"}

        response = client.post("/unfollow/alice", headers=bob)
        assert response.status_code == 400
        assert response.json()["detail"] == "Not following this user"

    def test_unfollow_unknown_user(self, client):
        bob = login_headers(client, "bob")
        assert client.post("/unfollow/nobody", headers=bob).status_code == 404


def test_alice_and_bob_scenario(client):
    assert register(client, "alice", "pw1").status_code == 201
    assert register(client, "bob", "pw2").status_code == 201
    alice = login_headers(client, "alice", "pw1")
    bob = login_headers(client, "bob", "pw2")
    client.post("/connect/instagram", json={"instagramHandle": "@alice"}, headers=alice)

    assert client.post("/follow/alice", headers=bob).status_code == 200
    assert client.get("/profile", headers=alice).json()["followersCount"] == 1
    assert client.get("/profile", headers=bob).json()["followingCount"] == 1

    assert client.post("/privacy", json={"isPrivate": True}, headers=alice).status_code == 200

    anonymous = client.get("/profile/alice").json()
    assert anonymous == {
        "username": "alice",
        "isPrivate": True,
        "followersCount": 1,
        "followingCount": 0,
        "isFollowing": False,
    }

    as_bob = client.get("/profile/alice", headers=bob).json()
    assert as_bob["instagramHandle"] == "@alice"
    assert as_bob["connectedGames"] == []
    assert as_bob["isFollowing"] is True
    assert as_bob["followersCount"] == 1
