from fastapi.testclient import TestClient

from conftest import count_users, create_post, register
from simpleblog.app import create_app
from simpleblog.config import Settings
from simpleblog.infra.db import Database
from simpleblog.infra.posts_repo import get_post

COOKIE = "ourSimpleApp"


def _user_count(settings: Settings) -> int:
    with Database(settings.db_path).connection() as conn:
        return count_users(conn)


def _stored_post(settings: Settings, post_id: int):
    with Database(settings.db_path).connection() as conn:
        return get_post(conn, post_id)


def test_anonymous_home_is_landing_page(client):
    r = client.get("/")
    assert r.status_code == 200
    assert 'action="/register"' in r.text


def test_register_sets_cookie_and_shows_empty_dashboard(client):
    r = register(client, "alice", "password1")
    assert r.status_code == 303
    assert r.headers["location"] == "/"

    set_cookie = r.headers["set-cookie"].lower()
    assert set_cookie.startswith(f"{COOKIE.lower()}=")
    assert "httponly" in set_cookie
    assert "secure" in set_cookie
    assert "samesite=strict" in set_cookie
    assert "max-age=86400" in set_cookie

    r = client.get("/")
    assert "Welcome, alice" in r.text
    assert "You have no posts yet." in r.text


def test_register_errors_render_without_insert(make_client, settings):
    register(make_client(), "alice", "password1")
    before = _user_count(settings)

    other = make_client()
    r = register(other, "alice", "password2")
    assert r.status_code == 200
    assert "Username is already taken" in r.text
    assert COOKIE not in r.headers.get("set-cookie", "")

    r = register(other, "x", "short")
    assert "Username cannot be less than 3 characters" in r.text
    assert "Password cannot be less than 8 characters" in r.text
    assert _user_count(settings) == before


def test_login_and_logout(make_client):
    register(make_client(), "alice", "password1")

    client = make_client()
    r = client.post("/login", data={"username": "alice", "password": "password1"}, follow_redirects=False)
    assert r.status_code == 303
    assert r.headers["location"] == "/"
    assert client.get("/").text.count("Welcome, alice") == 1

    r = client.get("/login", follow_redirects=False)
    assert r.status_code == 303

    r = client.get("/logout", follow_redirects=False)
    assert r.status_code == 303
    assert r.headers["location"] == "/"
    assert 'action="/register"' in client.get("/").text


def test_login_failures_are_generic(make_client):
    register(make_client(), "alice", "password1")
    client = make_client()
    for data in (
        {"username": "alice", "password": "wrongpass"},
        {"username": "nobody", "password": "password1"},
        {"username": "", "password": ""},
    ):
        r = client.post("/login", data=data, follow_redirects=False)
        assert r.status_code == 200
        assert "Invalid username/password" in r.text
        assert "set-cookie" not in r.headers


def test_invalid_cookie_is_anonymous(client):
    r = client.get("/", headers={"cookie": f"{COOKIE}=forged.token.value"})
    assert r.status_code == 200
    assert 'action="/register"' in r.text


def test_create_post_requires_login(client):
    assert client.get("/create-post", follow_redirects=False).headers["location"] == "/"
    r = client.post("/create-post", data={"title": "Hi", "body": "World"}, follow_redirects=False)
    assert r.status_code == 303
    assert r.headers["location"] == "/"


def test_create_and_view_post(client, make_client):
    register(client, "alice", "password1")
    post_id = create_post(client, "Hi", "World")

    r = client.get(f"/post/{post_id}")
    assert r.status_code == 200
    assert "Hi" in r.text
    assert "<p>World</p>" in r.text
    assert f'href="/edit-post/{post_id}"' in r.text

    dash = client.get("/").text
    assert f'href="/post/{post_id}"' in dash

    anon = make_client().get(f"/post/{post_id}")
    assert anon.status_code == 200
    assert "Hi" in anon.text
    assert f'href="/edit-post/{post_id}"' not in anon.text


def test_create_post_validation_rerenders_form(client):
    register(client, "alice", "password1")
    r = client.post("/create-post", data={"title": "  ", "body": "World"}, follow_redirects=False)
    assert r.status_code == 200
    assert "You must provide a title" in r.text
    assert "World" in r.text
    assert "You have no posts yet." in client.get("/").text


def test_view_missing_post_redirects_home(client):
    r = client.get("/post/999", follow_redirects=False)
    assert r.status_code == 303
    assert r.headers["location"] == "/"


def test_owner_can_edit_and_delete(client, settings):
    register(client, "alice", "password1")
    post_id = create_post(client, "Hi", "World")
    created = _stored_post(settings, post_id).created_date

    assert "Edit Post" in client.get(f"/edit-post/{post_id}").text

    r = client.post(f"/edit-post/{post_id}", data={"title": "Hello", "body": "Again"}, follow_redirects=False)
    assert r.headers["location"] == f"/post/{post_id}"
    stored = _stored_post(settings, post_id)
    assert (stored.title, stored.body, stored.created_date) == ("Hello", "Again", created)

    r = client.post(f"/edit-post/{post_id}", data={"title": "Hello", "body": ""}, follow_redirects=False)
    assert r.status_code == 200
    assert "You must provide body content" in r.text
    assert _stored_post(settings, post_id).body == "Again"

    r = client.post(f"/delete-post/{post_id}", follow_redirects=False)
    assert r.headers["location"] == "/"
    assert _stored_post(settings, post_id) is None


def test_other_user_cannot_mutate(make_client, settings):
    alice = make_client()
    register(alice, "alice", "password1")
    post_id = create_post(alice, "Hi", "World")

    bob = make_client()
    register(bob, "bob", "password1")

    r = bob.get(f"/edit-post/{post_id}", follow_redirects=False)
    assert r.headers["location"] == "/"

    r = bob.post(f"/edit-post/{post_id}", data={"title": "Owned", "body": "x"}, follow_redirects=False)
    assert r.status_code == 303
    assert r.headers["location"] == "/"

    r = bob.post(f"/delete-post/{post_id}", follow_redirects=False)
    assert r.headers["location"] == "/"

    stored = _stored_post(settings, post_id)
    assert (stored.title, stored.body) == ("Hi", "World")

    page = bob.get(f"/post/{post_id}").text
    assert f'href="/edit-post/{post_id}"' not in page


def test_missing_post_mutations_go_to_no_post(client, settings):
    register(client, "alice", "password1")
    keep = create_post(client, "Keep", "me")

    for method, path in (("get", "/edit-post/999"), ("post", "/edit-post/999"), ("post", "/delete-post/999")):
        r = client.request(method, path, data={"title": "a", "body": "b"} if method == "post" else None, follow_redirects=False)
        assert r.status_code == 303
        assert r.headers["location"] == "/no-post"

    assert _stored_post(settings, keep).title == "Keep"
    assert "Post not found" in client.get("/no-post").text


def test_anonymous_mutations_redirect_home(make_client, settings):
    alice = make_client()
    register(alice, "alice", "password1")
    post_id = create_post(alice, "Hi", "World")

    anon = make_client()
    r = anon.post(f"/delete-post/{post_id}", follow_redirects=False)
    assert r.headers["location"] == "/"
    assert _stored_post(settings, post_id) is not None


def test_session_survives_app_restart(settings, client):
    register(client, "alice", "password1")
    token = client.cookies.get(COOKIE)

    with TestClient(create_app(settings), base_url="https://testserver") as fresh:
        r = fresh.get("/", headers={"cookie": f"{COOKIE}={token}"})
        assert "Welcome, alice" in r.text


def test_post_page_neutralises_script_links(client, make_client):
    register(client, "alice", "password1")
    post_id = create_post(client, "Hi", "[click](javascript:alert(document.cookie))\n\n> quoted `a < b`")

    for viewer in (client, make_client()):
        page = viewer.get(f"/post/{post_id}").text
        assert "javascript:" not in page.lower()
        assert "<blockquote>" in page
        assert "<code>a &lt; b</code>" in page


def test_templates_see_current_user(client, make_client):
    register(client, "alice", "password1")
    assert "Hello, alice" in client.get("/create-post").text
    assert "Hello," not in make_client().get("/no-post").text
