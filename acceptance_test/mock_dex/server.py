"""Minimal stand-in for the Dex login pages.

Serves the local login form, the approval page and the credential plugin's
success page with the same element ids and classes as Dex, so the browser
flow can be exercised without a cluster.
"""

import html
import os
import uuid

from flask import Flask, Response, abort, redirect, request, url_for

app = Flask(__name__)

# --- Configuration -----------------------------------------------------------

# Dex static password entry
USERNAME = os.environ.get("MOCK_DEX_USERNAME", "admin@example.com")
PASSWORD = os.environ.get("MOCK_DEX_PASSWORD", "password")

SUCCESS_BODY = os.environ.get("MOCK_DEX_SUCCESS_BODY", "OK")

# --- In-memory stores --------------------------------------------------------

# auth request id -> username, set once the password was accepted
_auth_requests: dict[str, str | None] = {}

# --- Pages --------------------------------------------------------------------

_LOGIN_PAGE = """<!DOCTYPE html>
<html>
<head><title>dex</title></head>
<body>
<div class="theme-panel">
  <h2 class="theme-heading">Log in to Your Account</h2>
  <form method="post" action="{action}">
    <div class="theme-form-row">
      <div class="theme-form-label"><label for="userid">Email Address</label></div>
      <input tabindex="1" required id="login" name="login" type="text" class="theme-form-input" value="{login}">
    </div>
    <div class="theme-form-row">
      <div class="theme-form-label"><label for="password">Password</label></div>
      <input tabindex="2" required id="password" name="password" type="password" class="theme-form-input">
    </div>
    {error}
    <button tabindex="3" id="submit-login" type="submit" class="dex-btn theme-btn--primary">Login</button>
  </form>
</div>
</body>
</html>"""

_APPROVAL_PAGE = """<!DOCTYPE html>
<html>
<head><title>dex</title></head>
<body>
<div class="theme-panel">
  <h2 class="theme-heading">Grant Access</h2>
  <form method="post" action="{action}">
    <input type="hidden" name="req" value="{req}">
    <input type="hidden" name="approval" value="approve">
    <button type="submit" class="dex-btn theme-btn--success">Grant Access</button>
  </form>
  <form method="post" action="{action}">
    <input type="hidden" name="req" value="{req}">
    <input type="hidden" name="approval" value="rejected">
    <button type="submit" class="dex-btn theme-btn-provider">Cancel</button>
  </form>
</div>
</body>
</html>"""


def _html(body: str, status: int = 200) -> Response:
    return Response(body, status=status, content_type="text/html")


# --- Endpoints ----------------------------------------------------------------


@app.route("/")
def start():
    """Where the credential plugin sends the browser first."""
    req = uuid.uuid4().hex
    _auth_requests[req] = None
    return redirect(url_for("login_form", req=req))


@app.route("/dex/auth/local", methods=["GET"])
def login_form():
    req = request.args.get("req", "")
    if req not in _auth_requests:
        abort(400)
    action = url_for("login_submit", req=req)
    return _html(_LOGIN_PAGE.format(action=html.escape(action), login="", error=""))


@app.route("/dex/auth/local", methods=["POST"])
def login_submit():
    req = request.args.get("req", "")
    if req not in _auth_requests:
        abort(400)
    username = request.form.get("login", "")
    password = request.form.get("password", "")

    if (username, password) != (USERNAME, PASSWORD):
        action = url_for("login_submit", req=req)
        error = '<div id="login-error" class="dex-error-box">Invalid Email Address and password.</div>'
        page = _LOGIN_PAGE.format(
            action=html.escape(action), login=html.escape(username), error=error
        )
        return _html(page, status=401)

    _auth_requests[req] = username
    return redirect(url_for("approval_form", req=req), code=303)


@app.route("/dex/approval", methods=["GET"])
def approval_form():
    req = request.args.get("req", "")
    if not _auth_requests.get(req):
        abort(400)
    action = url_for("approval_submit")
    return _html(_APPROVAL_PAGE.format(action=html.escape(action), req=html.escape(req)))


@app.route("/dex/approval", methods=["POST"])
def approval_submit():
    req = request.form.get("req", "")
    if not _auth_requests.pop(req, None):
        abort(400)
    if request.form.get("approval") != "approve":
        return _html("access denied", status=403)
    return redirect(url_for("callback", code=uuid.uuid4().hex), code=303)


@app.route("/callback")
def callback():
    """The credential plugin's page after it exchanged the code."""
    if not request.args.get("code"):
        abort(400)
    return _html(SUCCESS_BODY)


@app.route("/stall")
def stall():
    """A page that never shows the login form."""
    return _html("<!DOCTYPE html><html><body><p>waiting for the provider</p></body></html>")


if __name__ == "__main__":
    app.run(host="0.0.0.0", port=8000)
