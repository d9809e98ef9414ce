"""Login page controllers (password form GET + POST)."""

from __future__ import annotations

from flask import Blueprint, make_response, redirect, render_template, request

from termgate.core.auth.login_flow import LoginFlow, LoginOutcome
from termgate.core.auth.messages import LOGIN_PROMPT, message_text
from termgate.core.auth.session_token import set_session_cookie
from termgate.core.gate.middleware import current_policy

auth_pages_bp = Blueprint("auth_pages", __name__)


def _render(outcome: LoginOutcome):
    if outcome.redirect_to:
        response = redirect(outcome.redirect_to, code=302)
        if outcome.session_token:
            set_session_cookie(response, outcome.session_token, secure=request.is_secure)
        return response

    if outcome.form is not None:
        body = render_template(
            "auth/login.html",
            form=outcome.form,
            prompt=LOGIN_PROMPT,
            error=message_text(outcome.error),
        )
    else:
        body = render_template("auth/notice.html", message=message_text(outcome.notice))
    response = make_response(body, outcome.status)
    response.headers["Cache-Control"] = "private, no-store"
    return response


@auth_pages_bp.get("/login")
def login_page():
    flow = LoginFlow(current_policy(), request.host)
    return _render(flow.start(request.args.to_dict()))


@auth_pages_bp.post("/login")
def login_submit():
    flow = LoginFlow(current_policy(), request.host)
    return _render(flow.submit(request.form.to_dict()))
