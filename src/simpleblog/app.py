# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import logging
import sqlite3
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Iterator, Optional

from fastapi import APIRouter, Depends, FastAPI, Form, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates

from simpleblog.auth.session import SessionCodec
from simpleblog.auth.users import INVALID_CREDENTIALS, authenticate
from simpleblog.config import Settings
from simpleblog.core.utils import render_markdown
from simpleblog.infra.db import Database
from simpleblog.infra.posts_repo import Post, get_post, list_posts_by_author
from simpleblog.infra.users_repo import UserRecord
from simpleblog.permissions import (
    HOME_URL,
    CurrentUser,
    cookie_settings,
    current_user_optional,
    load_owned_post,
    load_user_from_cookie,
    require_user,
)
from simpleblog.services import post_service
from simpleblog.services.account_service import register_user

logger = logging.getLogger(__name__)

BASE_DIR = Path(__file__).resolve().parent

templates = Jinja2Templates(directory=str(BASE_DIR / "templates"))
templates.env.filters["md"] = render_markdown

router = APIRouter()


def get_conn(request: Request) -> Iterator[sqlite3.Connection]:
    with request.app.state.db.connection() as conn:
        yield conn


def _render(request: Request, template_name: str, ctx: Optional[dict] = None):
    """TemplateResponse wrapper injecting the auth context and an empty error list."""
    base_ctx = {
        "request": request,
        "current_user": current_user_optional(request),
        "errors": [],
    }
    merged = {**base_ctx, **(ctx or {})}
    return templates.TemplateResponse(request, template_name, merged)


def _redirect(url: str) -> RedirectResponse:
    return RedirectResponse(url=url, status_code=303)


def _logged_in_redirect(request: Request, user: UserRecord) -> RedirectResponse:
    settings: Settings = request.app.state.settings
    codec: SessionCodec = request.app.state.codec
    resp = _redirect(HOME_URL)
    resp.set_cookie(settings.cookie_name, codec.issue(user.id, user.username), **cookie_settings(settings))
    return resp


# ------------------ Routes ------------------


@router.get("/", response_class=HTMLResponse)
def home(request: Request, conn: sqlite3.Connection = Depends(get_conn)):
    user = current_user_optional(request)
    if user:
        posts = list_posts_by_author(conn, user.id)
        return _render(request, "dashboard.html", {"posts": posts})
    return _render(request, "homepage.html")


@router.get("/login", response_class=HTMLResponse)
def login_get(request: Request):
    if current_user_optional(request):
        return _redirect(HOME_URL)
    return _render(request, "login.html")


@router.get("/logout")
def logout(request: Request):
    settings: Settings = request.app.state.settings
    resp = _redirect(HOME_URL)
    resp.delete_cookie(settings.cookie_name, secure=settings.cookie_secure, httponly=True, samesite="strict")
    return resp


@router.post("/login")
def login_post(
    request: Request,
    username: str = Form(""),
    password: str = Form(""),
    conn: sqlite3.Connection = Depends(get_conn),
):
    u = authenticate(conn, username, password)
    if not u:
        logger.info("Failed login for %r", username)
        return _render(request, "login.html", {"errors": [INVALID_CREDENTIALS]})
    logger.info("User %s logged in", u.username)
    return _logged_in_redirect(request, u)


@router.post("/register")
def register_post(
    request: Request,
    username: str = Form(""),
    password: str = Form(""),
    conn: sqlite3.Connection = Depends(get_conn),
):
    u, errors = register_user(conn, username, password)
    if errors:
        return _render(request, "homepage.html", {"errors": errors})
    return _logged_in_redirect(request, u)


@router.get("/create-post", response_class=HTMLResponse)
def create_post_form(request: Request, user: CurrentUser = Depends(require_user)):
    return _render(request, "create-post.html")


@router.post("/create-post")
def create_post_submit(
    request: Request,
    title: str = Form(""),
    body: str = Form(""),
    user: CurrentUser = Depends(require_user),
    conn: sqlite3.Connection = Depends(get_conn),
):
    post_id, draft, errors = post_service.create_post(conn, author_id=user.id, title=title, body=body)
    if errors:
        return _render(request, "create-post.html", {"errors": errors, "post": draft})
    return _redirect(f"/post/{post_id}")


@router.get("/post/{post_id}", response_class=HTMLResponse)
def view_post(request: Request, post_id: int, conn: sqlite3.Connection = Depends(get_conn)):
    post = get_post(conn, post_id)
    if post is None:
        return _redirect(HOME_URL)
    user = current_user_optional(request)
    is_author = user is not None and post.author_id == user.id
    return _render(request, "single-post.html", {"post": post, "is_author": is_author})


@router.get("/edit-post/{post_id}", response_class=HTMLResponse)
def edit_post_form(
    request: Request,
    post_id: int,
    user: CurrentUser = Depends(require_user),
    conn: sqlite3.Connection = Depends(get_conn),
):
    post = load_owned_post(conn, post_id, user)
    return _render(request, "edit-post.html", {"post": post})


@router.post("/edit-post/{post_id}")
def edit_post_submit(
    request: Request,
    post_id: int,
    title: str = Form(""),
    body: str = Form(""),
    user: CurrentUser = Depends(require_user),
    conn: sqlite3.Connection = Depends(get_conn),
):
    post = load_owned_post(conn, post_id, user)
    updated, errors = post_service.edit_post(conn, post, title, body)
    if errors:
        return _render(request, "edit-post.html", {"errors": errors, "post": updated})
    return _redirect(f"/post/{post.id}")


@router.post("/delete-post/{post_id}")
def delete_post_submit(
    post_id: int,
    user: CurrentUser = Depends(require_user),
    conn: sqlite3.Connection = Depends(get_conn),
):
    post: Post = load_owned_post(conn, post_id, user)
    post_service.delete_post(conn, post)
    return _redirect(HOME_URL)


@router.get("/no-post", response_class=HTMLResponse)
def no_post(request: Request):
    return _render(request, "no-post.html")


# ------------------ App factory ------------------


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or Settings.from_env()
    db = Database(settings.db_path)
    codec = SessionCodec(settings.secret_key, salt=settings.session_salt, max_age=settings.session_max_age)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        db.init_schema()
        yield
        logger.info("Shutting down")

    app = FastAPI(lifespan=lifespan)
    app.state.settings = settings
    app.state.db = db
    app.state.codec = codec

    @app.middleware("http")
    async def _auth_middleware(request: Request, call_next):
        request.state.user = load_user_from_cookie(request.cookies.get(settings.cookie_name), codec)
        return await call_next(request)

    app.include_router(router)
    return app
