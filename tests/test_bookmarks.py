def test_bookmark_twice_keeps_single_entry(client, make_user, make_post):
    user = make_user()
    post = make_post(user["id"])

    first = client.post(f"/api/users/bookmark/{post['id']}", json={"userId": user["id"]})
    second = client.post(f"/api/users/bookmark/{post['id']}", json={"userId": user["id"]})

    assert first.status_code == 200
    assert first.json()["message"] == "Post bookmarked."
    assert second.status_code == 200
    assert client.get(f"/api/users/bookmark/{user['id']}").json() == [post["id"]]


def test_bookmark_unknown_user(client):
    response = client.post("/api/users/bookmark/some-post", json={"userId": "ghost"})

    assert response.status_code == 404
    assert response.json() == {"error": "User not found."}


def test_list_bookmarks_unknown_user(client):
    assert client.get("/api/users/bookmark/ghost").status_code == 404


def test_remove_bookmark(client, make_user, make_post):
    user = make_user()
    first = make_post(user["id"], title="one")
    second = make_post(user["id"], title="two")
    client.post(f"/api/users/bookmark/{first['id']}", json={"userId": user["id"]})
    client.post(f"/api/users/bookmark/{second['id']}", json={"userId": user["id"]})

    response = client.post(f"/api/users/remove-bookmark/{first['id']}", json={"userId": user["id"]})

    assert response.status_code == 200
    assert response.json()["user"]["bookmarks"] == [second["id"]]


def test_remove_absent_bookmark_is_a_no_op(client, make_user):
    user = make_user()

    response = client.post("/api/users/remove-bookmark/not-bookmarked", json={"userId": user["id"]})

    assert response.status_code == 200
    assert response.json()["user"]["bookmarks"] == []


def test_deleted_post_stays_in_raw_bookmarks_but_not_in_bookmarked_posts(client, make_user, make_post):
    user = make_user()
    kept = make_post(user["id"], title="kept")
    deleted = make_post(user["id"], title="deleted")
    for post in (kept, deleted):
        client.post(f"/api/users/bookmark/{post['id']}", json={"userId": user["id"]})

    client.delete(f"/api/user/posts/{deleted['id']}")

    assert client.get(f"/api/users/bookmark/{user['id']}").json() == [kept["id"], deleted["id"]]
    posts = client.get(f"/api/users/bookmark/{user['id']}/posts").json()
    assert [post["title"] for post in posts] == ["kept"]
