from __future__ import annotations

from datetime import timedelta

from flask import Flask, session

from ..common.http import SESSION_KEY, acting_account_id, json_body, parse_bool, respond
from ..container import Container
from ..core.constants import DEFAULT_SESSION_DAYS
from ..core.result import run_action


def register(app: Flask, container: Container) -> None:
    auth = container.auth_service
    app.permanent_session_lifetime = timedelta(days=int(app.config.get("SESSION_DAYS", DEFAULT_SESSION_DAYS)))

    @app.route("/api/register", methods=["POST"], endpoint="register")
    def register_account():
        body = json_body()
        result = run_action(
            lambda: auth.register(
                name=body.get("name") or "",
                email=body.get("email") or "",
                password=body.get("password") or "",
            ),
            failure_message="An error occurred during registration",
        )
        return respond(result, status=201)

    @app.route("/api/login", methods=["POST"], endpoint="login")
    def login():
        body = json_body()
        result = run_action(
            lambda: auth.authenticate(body.get("email") or "", body.get("password") or ""),
            failure_message="An error occurred during login",
        )
        if result.success:
            session.clear()
            session.permanent = bool(parse_bool(body.get("remember_me")))
            session[SESSION_KEY] = result.data.account_id
        return respond(result)

    @app.route("/api/logout", methods=["POST"], endpoint="logout")
    def logout():
        session.clear()
        return respond(run_action(lambda: None, failure_message="Logout failed"))

    @app.route("/api/me", methods=["GET"], endpoint="me")
    def me():
        return respond(
            run_action(lambda: auth.current_account(acting_account_id()), failure_message="Failed to load account")
        )
