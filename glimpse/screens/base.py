"""Screen view-model base.

A screen fetches its data on ``mount`` and moves from ``LOADING`` to
``LOADED`` or ``ERROR``. Errors from the backend access layer are caught
here, at the screen boundary, and presented as alerts. Results that
arrive after ``unmount`` are dropped.
"""
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from ..errors import GlimpseError
from ..navigation import Navigator, Route

logger = logging.getLogger(__name__)


class ScreenState(str, Enum):
    LOADING = "loading"
    LOADED = "loaded"
    ERROR = "error"


@dataclass
class Alert:
    title: str
    message: str


class AlertPresenter:
    """Collects alerts until the UI shows them."""

    def __init__(self):
        self.alerts: list[Alert] = []

    def alert(self, title: str, message: str) -> None:
        self.alerts.append(Alert(title, message))

    def drain(self) -> list[Alert]:
        """Return pending alerts and clear them."""
        pending, self.alerts = self.alerts, []
        return pending


class Screen:
    """Base class for screens.

    Subclasses implement ``fetch`` (await backend calls) and ``apply``
    (store the result on the screen).
    """

    def __init__(self, navigator: Navigator, alerts: Optional[AlertPresenter] = None):
        self.navigator = navigator
        self.alerts = alerts or AlertPresenter()
        self.state = ScreenState.LOADING
        self.error: Optional[str] = None
        self.mounted = False

    @property
    def loading(self) -> bool:
        return self.state == ScreenState.LOADING

    async def mount(self) -> None:
        self.mounted = True
        await self.load()

    def unmount(self) -> None:
        self.mounted = False

    async def load(self) -> None:
        """Run ``fetch`` and move to LOADED or ERROR."""
        self.state = ScreenState.LOADING
        self.error = None

        try:
            result = await self.fetch()
        except GlimpseError as e:
            if not self.mounted:
                return
            self.state = ScreenState.ERROR
            self.error = e.message
            self.on_load_error(e)
            return

        if not self.mounted:
            return
        self.apply(result)
        self.state = ScreenState.LOADED
        await self.on_loaded()

    async def fetch(self) -> Any:
        return None

    def apply(self, result: Any) -> None:
        pass

    async def on_loaded(self) -> None:
        pass

    def on_load_error(self, error: GlimpseError) -> None:
        self.alerts.alert("Error", error.message)

    def navigate(self, name: str, **params) -> None:
        self.navigator.navigate(Route(name, params))

    def go_back(self) -> None:
        self.navigator.go_back()

    async def _run_action(self, action) -> bool:
        """Await ``action``; alert and return False on a Glimpse error."""
        try:
            await action
        except GlimpseError as e:
            self.alerts.alert("Error", e.message)
            return False
        return True
