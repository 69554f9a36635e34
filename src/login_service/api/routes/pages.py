"""Page Routes

Purpose: Server-rendered pages and logout

Key Endpoints:
- GET /: Landing page
- GET /login: Login form
- GET /register: Registration form
- GET /secrets: Protected page (guarded)
- GET /logout: End the session
"""

import logging
from html import escape

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse

from login_service.api.cookies import clear_session_cookie, session_id_from
from login_service.api.deps import get_app_settings, get_session_manager
from login_service.api.guard import is_authenticated, require_user
from login_service.config.settings import Settings
from login_service.core.auth import SessionManager
from login_service.domain.models import User

router = APIRouter(tags=["pages"])
logger = logging.getLogger(__name__)

_STYLE = """
  body { margin:0; font-family: ui-sans-serif, system-ui; background:#f4f6f8; color:#1f2933; }
  .wrap { min-height:100vh; display:flex; align-items:center; justify-content:center; padding:24px; }
  .card { width:100%; max-width:420px; background:#fff; border-radius:12px; padding:28px; box-shadow:0 6px 20px rgba(0,0,0,.08); }
  label { display:block; font-size:13px; color:#52606d; }
  input { width:100%; box-sizing:border-box; padding:10px 12px; margin:6px 0 14px 0; border:1px solid #cbd2d9; border-radius:8px; }
  button, .btn { display:block; width:100%; box-sizing:border-box; padding:10px 12px; border:none; border-radius:8px; background:#1f2933; color:#fff; text-align:center; text-decoration:none; cursor:pointer; margin-top:8px; }
  .btn-light { background:#fff; color:#1f2933; border:1px solid #cbd2d9; }
"""


def render_page(title: str, body: str) -> str:
    """Wrap page content in the shared layout"""
    return f"""<!DOCTYPE html>
<html>
  <head>
    <meta charset="utf-8" />
    <meta name="viewport" content="width=device-width, initial-scale=1" />
    <title>{escape(title)}</title>
    <style>{_STYLE}</style>
  </head>
  <body>
    <div class="wrap"><div class="card">
{body}
    </div></div>
  </body>
</html>
"""


def _credentials_form(action: str, submit_label: str, google_label: str) -> str:
    return f"""
      <form method="post" action="{action}">
        <label for="username">Email</label>
        <input type="email" id="username" name="username" required />
        <label for="password">Password</label>
        <input type="password" id="password" name="password" required />
        <button type="submit">{submit_label}</button>
      </form>
      <a class="btn btn-light" href="/auth/google">{google_label}</a>
"""


@router.get("/", response_class=HTMLResponse)
async def home(request: Request):
    """Landing page"""
    if await is_authenticated(request):
        actions = """
      <a class="btn" href="/secrets">See the Secret</a>
      <a class="btn btn-light" href="/logout">Log Out</a>
"""
    else:
        actions = """
      <a class="btn" href="/register">Register</a>
      <a class="btn btn-light" href="/login">Login</a>
"""
    return render_page("Secrets", """
      <h1>Secrets</h1>
      <p>Don't keep your secrets, share them anonymously!</p>
""" + actions)


@router.get("/login", response_class=HTMLResponse)
async def login_page():
    """Login form"""
    return render_page("Login", "<h1>Login</h1>" + _credentials_form(
        "/login", "Login", "Sign In with Google"
    ))


@router.get("/register", response_class=HTMLResponse)
async def register_page():
    """Registration form"""
    return render_page("Register", "<h1>Register</h1>" + _credentials_form(
        "/register", "Register", "Sign Up with Google"
    ))


@router.get("/secrets", response_class=HTMLResponse)
async def secrets_page(user: User = Depends(require_user)):
    """Protected page, only for authenticated sessions"""
    logger.debug(f"Serving secrets page to user {user.id}")
    return render_page("Secrets", f"""
      <h1>You've discovered my secret!</h1>
      <p>Signed in as {escape(user.email)}</p>
      <a class="btn" href="/logout">Log Out</a>
""")


@router.get("/logout")
async def logout(
    request: Request,
    settings: Settings = Depends(get_app_settings),
    session_manager: SessionManager = Depends(get_session_manager),
):
    """Destroy the current session and return to the landing page"""
    await session_manager.destroy(session_id_from(request, settings))

    response = RedirectResponse(url="/", status_code=status.HTTP_302_FOUND)
    clear_session_cookie(response, settings)
    return response
