"""Tests for pages and assets served from the configured public directory."""

from datetime import timedelta

import pytest
from fastapi.testclient import TestClient

from solosession.app import App
from solosession.config import Config
from solosession.core.core import Core, Services
from solosession.web.server import create_fastapi_app


@pytest.fixture
def public_client(tmp_path, accounts, sessions):
    (tmp_path / "login.html").write_text("<h1>custom login</h1>")
    (tmp_path / "home.html").write_text("<h1>custom home</h1>")
    (tmp_path / "style.css").write_text("body {}")
    config = Config(
        database_url="mongodb://localhost:27017/solosession_test",
        session_secret_key="test-secret",
        public_path=str(tmp_path),
    )
    core = Core(config, Services(accounts, sessions, timedelta(hours=1)))
    return TestClient(create_fastapi_app(App(core), config))


def test_custom_login_page(public_client):
    assert public_client.get("/").text == "<h1>custom login</h1>"


def test_custom_home_page_is_still_guarded(public_client):
    response = public_client.get("/home", follow_redirects=False)
    assert response.headers["location"] == "/?error=unauthenticated"

    public_client.post("/login", data={"username": "alice", "password": "wonderland"})
    assert public_client.get("/home").text == "<h1>custom home</h1>"


def test_static_assets(public_client):
    response = public_client.get("/static/style.css")
    assert response.status_code == 200
    assert response.text == "body {}"
