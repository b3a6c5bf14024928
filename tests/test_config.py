from pathlib import Path

import pytest

from simpleblog.config import Settings


def test_secret_is_required():
    with pytest.raises(RuntimeError):
        Settings.from_env({})


def test_defaults():
    s = Settings.from_env({"JWTSECRET": "abc"})
    assert s.secret_key == "abc"
    assert s.cookie_name == "ourSimpleApp"
    assert s.session_max_age == 86400
    assert s.cookie_secure is True
    assert s.db_path == Path("ourApp.db")
    assert s.port == 3000


def test_overrides():
    s = Settings.from_env(
        {
            "SECRET_KEY": "fallback",
            "BLOG_DB_PATH": "/tmp/x.db",
            "BLOG_COOKIE_SECURE": "false",
            "BLOG_PORT": "8080",
            "BLOG_RELOAD": "yes",
            "BLOG_LOG_LEVEL": "debug",
        }
    )
    assert s.secret_key == "fallback"
    assert s.db_path == Path("/tmp/x.db")
    assert s.cookie_secure is False
    assert s.port == 8080
    assert s.reload is True
    assert s.log_level == "DEBUG"
