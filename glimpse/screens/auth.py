"""Login and registration screens."""
import logging
from typing import Optional

from ..application import SessionStore
from ..errors import GlimpseError
from ..infrastructure.auth import AuthError
from ..navigation import LOGIN, REGISTER, Navigator, Route
from .base import AlertPresenter, Screen, ScreenState

logger = logging.getLogger(__name__)


class _AuthScreen(Screen):
    def __init__(
        self,
        session: SessionStore,
        navigator: Navigator,
        alerts: Optional[AlertPresenter] = None
    ):
        super().__init__(navigator, alerts)
        self.session = session
        self.submitting = False

    async def mount(self) -> None:
        self.mounted = True
        self.state = ScreenState.LOADED

    async def _submit(self, action, failure_title: str) -> bool:
        self.submitting = True
        try:
            await action
        except AuthError as e:
            self.alerts.alert(failure_title, e.message)
            return False
        except GlimpseError as e:
            logger.error("%s: %s", failure_title, e)
            self.alerts.alert(failure_title, e.message)
            return False
        finally:
            self.submitting = False
        return True


class LoginScreen(_AuthScreen):
    async def submit(self, email: str, password: str) -> bool:
        if not email or not password:
            self.alerts.alert("Error", "Please fill in all fields")
            return False
        return await self._submit(self.session.login(email, password), "Login Failed")

    def go_to_register(self) -> None:
        self.navigate(REGISTER)


class RegisterScreen(_AuthScreen):
    async def submit(self, username: str, email: str, password: str) -> bool:
        if not username or not email or not password:
            self.alerts.alert("Error", "Please fill in all fields")
            return False
        return await self._submit(
            self.session.register(email, password, username.strip()), "Registration Failed"
        )

    def go_to_login(self) -> None:
        if not self.navigator.go_back():
            self.navigator.reset(Route(LOGIN))
