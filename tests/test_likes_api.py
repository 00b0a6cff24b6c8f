from blog_api.models import Like, User
from blog_api.services.like_service import LikeService


def toggle(client, post_id, email="a@x.com", name="A", **kwargs):
    return client.post("/api/likes", json={"postId": post_id, "userEmail": email, "userName": name}, **kwargs)


def test_toggle_like_scenario(client, post):
    resp = toggle(client, post.id)
    assert resp.status_code == 200
    assert resp.json()["data"] == {"action": "liked", "likesCount": 1, "isLiked": True}

    resp = toggle(client, post.id)
    assert resp.json()["data"] == {"action": "unliked", "likesCount": 0, "isLiked": False}


def test_get_likes_count(client, db, post, reader):
    LikeService.toggle(db, post.id, reader)

    resp = client.get("/api/likes", params={"postId": post.id})

    assert resp.status_code == 200
    assert resp.json()["data"]["likesCount"] == 1
    assert resp.json()["data"]["isLiked"] is None


def test_get_likes_reports_status_for_email(client, db, post, reader):
    LikeService.toggle(db, post.id, reader)

    liked = client.get("/api/likes", params={"postId": post.id, "userEmail": "reader@x.com"})
    unknown = client.get("/api/likes", params={"postId": post.id, "userEmail": "nobody@x.com"})

    assert liked.json()["data"]["isLiked"] is True
    assert unknown.json()["data"]["isLiked"] is False
    # Reading never creates identities
    assert db.query(User).filter(User.email == "nobody@x.com").count() == 0


def test_toggle_with_bearer_token(client, post, reader, auth_headers):
    resp = client.post("/api/likes", json={"postId": post.id}, headers=auth_headers(reader))

    assert resp.status_code == 200
    assert resp.json()["data"]["isLiked"] is True

    resp = client.get("/api/likes", params={"postId": post.id}, headers=auth_headers(reader))
    assert resp.json()["data"]["isLiked"] is True


def test_toggle_validation(client, post):
    resp = client.post("/api/likes", json={"postId": post.id, "userName": "A"})
    assert resp.status_code == 400
    assert resp.json()["ok"] is False

    resp = client.post("/api/likes", json={"userEmail": "a@x.com", "userName": "A"})
    assert resp.status_code == 400
    assert resp.json()["detail"][0]["field"] == "postId"

    resp = toggle(client, post.id, email="not-an-email")
    assert resp.status_code == 400


def test_toggle_unknown_post(client, db):
    resp = toggle(client, 999)

    assert resp.status_code == 404
    assert resp.json() == {"ok": False, "error": "Post not found"}
    assert db.query(User).count() == 0


def test_at_most_one_like_row_per_user(client, db, post):
    for _ in range(3):
        toggle(client, post.id)

    assert db.query(Like).filter(Like.post_id == post.id).count() == 1


def test_my_likes(client, db, post, other_post, reader, auth_headers):
    LikeService.toggle(db, post.id, reader)
    LikeService.toggle(db, other_post.id, reader)

    resp = client.get("/api/user/likes", headers=auth_headers(reader))

    assert resp.status_code == 200
    body = resp.json()
    assert body["meta"]["total"] == 2
    assert [item["post"]["slug"] for item in body["data"]] == ["second-post", "hello-world"]


def test_like_and_unlike_endpoints_are_idempotent(client, post, reader, auth_headers):
    headers = auth_headers(reader)
    url = f"/api/posts/{post.id}/like"

    assert client.post(url, headers=headers).json()["data"]["likesCount"] == 1
    assert client.post(url, headers=headers).json()["data"]["likesCount"] == 1

    resp = client.delete(url, headers=headers)
    assert resp.json()["data"] == {"action": "unliked", "likesCount": 0, "isLiked": False}
    assert client.delete(url, headers=headers).status_code == 200


def test_like_endpoint_requires_token(client, post):
    assert client.post(f"/api/posts/{post.id}/like").status_code in (401, 403)
