"""Authentication routes."""
from fastapi import APIRouter, Depends, Form, Request

from ..application import SessionStore
from ..dependencies import get_alerts, get_navigator, get_session
from ..navigation import LOGIN, REGISTER, Navigator, Route
from ..screens import AlertPresenter, LoginScreen, RegisterScreen
from .deps import redirect_to_current, render

router = APIRouter()


@router.get("/login")
async def login_page(request: Request, navigator: Navigator = Depends(get_navigator)):
    """Show login page."""
    navigator.sync(Route(LOGIN))
    return render(request, "login.html", {"email": ""})


@router.post("/login")
async def login(
    request: Request,
    email: str = Form(""),
    password: str = Form(""),
    session: SessionStore = Depends(get_session),
    navigator: Navigator = Depends(get_navigator),
    alerts: AlertPresenter = Depends(get_alerts)
):
    """Process login form."""
    screen = LoginScreen(session, navigator, alerts)
    await screen.mount()

    if not await screen.submit(email.strip(), password):
        return render(request, "login.html", {"email": email}, status_code=401)

    return redirect_to_current(navigator)


@router.get("/register")
async def register_page(request: Request, navigator: Navigator = Depends(get_navigator)):
    """Show registration page."""
    navigator.sync(Route(REGISTER))
    return render(request, "register.html", {"email": "", "username": ""})


@router.post("/register")
async def register(
    request: Request,
    username: str = Form(""),
    email: str = Form(""),
    password: str = Form(""),
    session: SessionStore = Depends(get_session),
    navigator: Navigator = Depends(get_navigator),
    alerts: AlertPresenter = Depends(get_alerts)
):
    """Process registration form."""
    screen = RegisterScreen(session, navigator, alerts)
    await screen.mount()

    if not await screen.submit(username, email.strip(), password):
        return render(
            request, "register.html",
            {"email": email, "username": username},
            status_code=400
        )

    return redirect_to_current(navigator)


@router.post("/logout")
async def logout(
    session: SessionStore = Depends(get_session),
    navigator: Navigator = Depends(get_navigator)
):
    """Sign out; the shell switches back to the auth flow."""
    await session.logout()
    return redirect_to_current(navigator)
