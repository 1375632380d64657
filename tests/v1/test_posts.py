# tests/v1/test_posts.py
"""Tests for post-related endpoints."""

from fastapi import status

from conftest import auth_headers_for


def _create_post(client, headers, **overrides) -> dict:
    payload = {"title": "Library hours", "body": "Open till midnight during exams"}
    payload.update(overrides)
    response = client.post("/api/v1/posts/", json=payload, headers=headers)
    assert response.status_code == status.HTTP_201_CREATED, response.text
    return response.json()


def test_create_post(client, auth_token, test_student) -> None:
    """Test creating a post copies the author's details."""
    post = _create_post(client, auth_token, visibility={"branches": ["cse"], "graduation_years": ["2026"]})

    assert post["author_uid"] == test_student.uid
    assert post["author_name"] == "Alice"
    assert post["upvotes"] == 0 and post["downvotes"] == 0
    assert post["visibility"] == {"branches": ["CSE"], "graduation_years": [2026], "genders": []}


def test_create_post_requires_token(client) -> None:
    response = client.post("/api/v1/posts/", json={"title": "t", "body": "b"})
    assert response.status_code in {status.HTTP_401_UNAUTHORIZED, status.HTTP_403_FORBIDDEN}


def test_create_post_with_invalid_token(client) -> None:
    response = client.post(
        "/api/v1/posts/",
        json={"title": "t", "body": "b"},
        headers={"Authorization": "Bearer not-a-jwt"},
    )
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_create_post_requires_profile(client) -> None:
    response = client.post(
        "/api/v1/posts/",
        json={"title": "t", "body": "b"},
        headers=auth_headers_for("no-profile-yet"),
    )
    assert response.status_code == status.HTTP_403_FORBIDDEN


def test_create_post_with_bad_visibility(client, auth_token) -> None:
    response = client.post(
        "/api/v1/posts/",
        json={"title": "t", "body": "b", "visibility": {"branches": ["Mechanical"]}},
        headers=auth_token,
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["code"] == "INVALID_ARGUMENT"


def test_feed_respects_visibility(client, auth_token, other_auth_token) -> None:
    """Test that the feed hides posts the caller is not eligible for."""
    _create_post(client, other_auth_token, title="Everyone")
    _create_post(client, other_auth_token, title="ECE only", visibility={"branches": ["ECE"]})

    mine = client.get("/api/v1/posts/", headers=auth_token).json()
    theirs = client.get("/api/v1/posts/", headers=other_auth_token).json()
    anonymous = client.get("/api/v1/posts/").json()

    assert [p["title"] for p in mine] == ["Everyone"]
    assert [p["title"] for p in theirs] == ["ECE only", "Everyone"]
    assert [p["title"] for p in anonymous] == ["Everyone"]


def test_feed_decorates_vote_and_favorite(client, auth_token, other_auth_token) -> None:
    post = _create_post(client, other_auth_token)
    client.post("/api/v1/votes/", json={"post_id": post["id"], "action": "down"}, headers=auth_token)
    client.post(f"/api/v1/posts/{post['id']}/favorite", headers=auth_token)

    feed = client.get("/api/v1/posts/", headers=auth_token).json()

    assert feed[0]["user_vote"] == "down"
    assert feed[0]["is_favorite"] is True
    assert feed[0]["downvotes"] == 1


def test_get_hidden_post_is_not_found(client, auth_token, other_auth_token) -> None:
    post = _create_post(client, other_auth_token, visibility={"genders": ["Male"]})

    assert client.get(f"/api/v1/posts/{post['id']}", headers=auth_token).status_code == 404
    assert client.get(f"/api/v1/posts/{post['id']}", headers=other_auth_token).status_code == 200


def test_get_missing_post(client) -> None:
    response = client.get("/api/v1/posts/99999")
    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json() == {"detail": "Post not found", "code": "POST_NOT_FOUND"}


def test_update_post_by_author_only(client, auth_token, other_auth_token) -> None:
    post = _create_post(client, auth_token)

    forbidden = client.patch(f"/api/v1/posts/{post['id']}", json={"title": "Hijack"}, headers=other_auth_token)
    assert forbidden.status_code == status.HTTP_403_FORBIDDEN

    response = client.patch(
        f"/api/v1/posts/{post['id']}",
        json={"title": "Updated", "visibility": {"genders": ["Female"]}},
        headers=auth_token,
    )
    assert response.status_code == status.HTTP_200_OK
    body = response.json()
    assert body["title"] == "Updated"
    assert body["body"] == post["body"]
    assert body["visibility"]["genders"] == ["Female"]


def test_delete_post(client, auth_token, other_auth_token) -> None:
    post = _create_post(client, auth_token)
    client.post("/api/v1/votes/", json={"post_id": post["id"], "action": "up"}, headers=other_auth_token)

    assert client.delete(f"/api/v1/posts/{post['id']}", headers=other_auth_token).status_code == 403
    response = client.delete(f"/api/v1/posts/{post['id']}", headers=auth_token)

    assert response.status_code == status.HTTP_204_NO_CONTENT
    assert client.get(f"/api/v1/posts/{post['id']}").status_code == 404


def test_favorites_toggle_and_list(client, auth_token, other_auth_token) -> None:
    post = _create_post(client, other_auth_token)

    first = client.post(f"/api/v1/posts/{post['id']}/favorite", headers=auth_token).json()
    assert first == {"post_id": post["id"], "is_favorite": True}
    favorites = client.get("/api/v1/posts/favorites", headers=auth_token).json()
    assert [p["id"] for p in favorites] == [post["id"]]

    second = client.post(f"/api/v1/posts/{post['id']}/favorite", headers=auth_token).json()
    assert second["is_favorite"] is False
    assert client.get("/api/v1/posts/favorites", headers=auth_token).json() == []


def test_list_my_posts_ignores_visibility(client, auth_token) -> None:
    _create_post(client, auth_token, title="For ECE", visibility={"branches": ["ECE"]})
    mine = client.get("/api/v1/posts/mine", headers=auth_token).json()
    assert [p["title"] for p in mine] == ["For ECE"]


def test_hidden_post_cannot_be_favorited(client, auth_token, other_auth_token) -> None:
    post = _create_post(client, auth_token, visibility={"graduation_years": [2026]})

    response = client.post(f"/api/v1/posts/{post['id']}/favorite", headers=other_auth_token)

    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert client.get("/api/v1/posts/favorites", headers=other_auth_token).json() == []
    assert client.post(f"/api/v1/posts/{post['id']}/favorite", headers=auth_token).json()["is_favorite"] is True
