from blogverse.errors import StorageError
from blogverse.limiter import limiter
from blogverse.repositories import AccountsRepository


BLOG = {
    "title": "My First Post",
    "desc": "Short description",
    "banner": "https://img.example.com/banner.jpeg",
    "tags": ["Intro", "Python"],
    "content": {"blocks": [{"type": "paragraph", "data": {"text": "Hello"}}]},
    "draft": False,
}


async def _signup(client, email="jane@x.com", fullname="Jane Doe", password="Passw0rd"):
    return await client.post("/signup", json={"fullname": fullname, "email": email, "password": password})


def _auth(token):
    return {"Authorization": f"Bearer {token}"}


async def test_health(client):
    response = await client.get("/health")
    assert response.json() == {"status": "ok"}


async def test_signup_then_publish_then_latest(client):
    response = await _signup(client)
    assert response.status_code == 200
    session = response.json()
    assert session["username"] == "jane"
    assert set(session) == {"access_token", "profile_image", "username", "fullname"}

    response = await client.post("/create-blog", json=BLOG, headers=_auth(session["access_token"]))
    assert response.status_code == 200
    public_id = response.json()["id"]

    response = await client.get("/latest-blogs")
    assert response.status_code == 200
    blogs = response.json()["blogs"]
    assert [(b["public_id"], b["title"]) for b in blogs] == [(public_id, "My First Post")]
    assert blogs[0]["tags"] == ["intro", "python"]
    assert blogs[0]["author"]["username"] == "jane"
    assert "content" not in blogs[0]


async def test_second_jane_gets_suffixed_username(client):
    await _signup(client)
    response = await _signup(client, email="jane@y.com")

    assert response.status_code == 200
    assert response.json()["username"].startswith("jane")
    assert response.json()["username"] != "jane"


async def test_signup_validation_error(client):
    response = await _signup(client, password="abcdef")

    assert response.status_code == 403
    assert "error" in response.json()


async def test_signup_duplicate_email(client):
    await _signup(client)
    response = await _signup(client)

    assert response.status_code == 500
    assert response.json() == {"error": "Email already exists"}


async def test_signin(client):
    await _signup(client)

    ok = await client.post("/signin", json={"email": "jane@x.com", "password": "Passw0rd"})
    wrong = await client.post("/signin", json={"email": "jane@x.com", "password": "Wrong0ne"})
    unknown = await client.post("/signin", json={"email": "bob@x.com", "password": "Passw0rd"})

    assert ok.status_code == 200
    assert ok.json()["username"] == "jane"
    assert wrong.status_code == 403
    assert unknown.status_code == 403
    assert unknown.json() == {"error": "Email not found"}


async def test_create_blog_requires_token(client):
    response = await client.post("/create-blog", json=BLOG)

    assert response.status_code == 401
    assert response.json() == {"error": "No access token"}


async def test_create_blog_rejects_bad_token(client):
    bad = await client.post("/create-blog", json=BLOG, headers=_auth("not-a-jwt"))
    wrong_scheme = await client.post("/create-blog", json=BLOG, headers={"Authorization": "Token abc"})

    assert bad.status_code == 403
    assert wrong_scheme.status_code == 403


async def test_create_blog_validation_error(client):
    token = (await _signup(client)).json()["access_token"]

    response = await client.post("/create-blog", json={**BLOG, "banner": ""}, headers=_auth(token))

    assert response.status_code == 403
    assert response.json() == {"error": "You must provide a banner to publish the blog"}


async def test_drafts_stay_out_of_discovery(client):
    token = (await _signup(client)).json()["access_token"]
    await client.post("/create-blog", json={**BLOG, "draft": True}, headers=_auth(token))

    latest = await client.get("/latest-blogs")
    trending = await client.get("/trending-blogs")
    counts = await client.get("/search-blog-counts", params={"tag": "python"})

    assert latest.json() == {"blogs": []}
    assert trending.json() == {"blogs": []}
    assert counts.json() == {"total_docs": 0}


async def test_search_and_count(client):
    token = (await _signup(client)).json()["access_token"]
    for title in ["Python one", "Python two", "Python three"]:
        await client.post("/create-blog", json={**BLOG, "title": title}, headers=_auth(token))

    first = await client.post("/search-blog-posts", json={"query": "python", "page": 1})
    second = await client.post("/search-blog-posts", json={"query": "python", "page": 2})
    by_tag = await client.post("/search-blog-posts", json={"tag": "intro", "page": 1})
    counts = await client.get("/search-blog-counts", params={"query": "PYTHON"})

    assert len(first.json()["blogs"]) == 2
    assert len(second.json()["blogs"]) == 1
    assert len(by_tag.json()["blogs"]) == 2
    assert counts.json() == {"total_docs": 3}


async def test_search_rejects_page_zero(client):
    response = await client.post("/search-blog-posts", json={"query": "x", "page": 0})
    assert response.status_code == 403


async def test_malformed_signup_body_is_a_validation_error(client):
    response = await client.post("/signup", json={"fullname": None, "email": "jane@x.com", "password": "Passw0rd"})

    assert response.status_code == 403
    assert set(response.json()) == {"error"}
    assert "fullname" in response.json()["error"]


async def test_malformed_search_page_is_a_validation_error(client):
    response = await client.post("/search-blog-posts", json={"query": "x", "page": "two"})

    assert response.status_code == 403
    assert "page" in response.json()["error"]


async def test_malformed_blog_content_is_a_validation_error(client):
    token = (await _signup(client)).json()["access_token"]

    response = await client.post(
        "/create-blog",
        json={**BLOG, "content": {"blocks": "nope"}},
        headers=_auth(token),
    )

    assert response.status_code == 403
    assert "content.blocks" in response.json()["error"]


async def test_partial_write_reports_created_id(client, monkeypatch):
    token = (await _signup(client)).json()["access_token"]

    async def failing_append(self, user_id, blog_pk, published):
        raise StorageError("update_author", "connection reset")

    monkeypatch.setattr(AccountsRepository, "append_blog", failing_append)

    response = await client.post("/create-blog", json=BLOG, headers=_auth(token))

    assert response.status_code == 500
    body = response.json()
    assert set(body) == {"error", "id", "succeeded_step", "failed_step"}
    assert body["succeeded_step"] == "create_blog"
    assert body["failed_step"] == "update_author"

    # The post was kept and is discoverable
    latest = (await client.get("/latest-blogs")).json()["blogs"]
    assert [b["public_id"] for b in latest] == [body["id"]]


async def test_signup_is_rate_limited(client):
    limiter.reset()
    limiter.enabled = True
    try:
        statuses = []
        for i in range(11):
            response = await _signup(client, email=f"writer{i}@x.com")
            statuses.append(response.status_code)
    finally:
        limiter.enabled = False
        limiter.reset()

    assert statuses[:10] == [200] * 10
    assert statuses[10] == 429
    assert "error" in response.json()
