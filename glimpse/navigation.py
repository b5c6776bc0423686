"""Navigation shell.

``Navigator`` keeps a stack of routes. ``AppShell`` follows the session
and switches the navigator between the auth flow and the main flow.

Flows:
    auth:  Login, Register
    main:  tabs Feed (FeedHome > AlbumDetail > PhotoViewer), Create, Profile
"""
import logging
from dataclasses import dataclass, field
from typing import Callable, Optional

logger = logging.getLogger(__name__)

# Route names
LOGIN = "Login"
REGISTER = "Register"
FEED = "Feed"
FEED_HOME = "FeedHome"
ALBUM_DETAIL = "AlbumDetail"
PHOTO_VIEWER = "PhotoViewer"
CREATE = "Create"
PROFILE = "Profile"

AUTH_ROUTES = {LOGIN, REGISTER}

# Tab name -> root route of its stack
TABS = {
    FEED: FEED_HOME,
    CREATE: CREATE,
    PROFILE: PROFILE,
}


@dataclass
class Route:
    name: str
    params: dict = field(default_factory=dict)


def route_url(route: Route) -> str:
    """URL of the page rendering ``route``."""
    if route.name == LOGIN:
        return "/login"
    if route.name == REGISTER:
        return "/register"
    if route.name in (FEED, FEED_HOME):
        return "/feed"
    if route.name == ALBUM_DETAIL:
        return f"/albums/{route.params['album_id']}"
    if route.name == PHOTO_VIEWER:
        return "/viewer"
    if route.name == CREATE:
        return "/create"
    if route.name == PROFILE:
        return "/profile"
    raise ValueError(f"Unknown route: {route.name}")


def _matches(stacked: Route, route: Route) -> bool:
    return stacked.name == route.name and all(
        stacked.params.get(key) == value for key, value in route.params.items()
    )


class Navigator:
    """Stack of routes for the visible flow."""

    def __init__(self, initial: Optional[Route] = None):
        self._stack: list[Route] = [initial or Route(LOGIN)]

    @property
    def current(self) -> Route:
        return self._stack[-1]

    @property
    def stack(self) -> list[Route]:
        return list(self._stack)

    @property
    def can_go_back(self) -> bool:
        return len(self._stack) > 1

    def navigate(self, route: Route) -> None:
        """Open ``route``. Tabs replace the stack with their root route."""
        if route.name in TABS:
            self.reset(Route(TABS[route.name], route.params))
        else:
            self._stack.append(route)
        logger.debug("Navigated to %s", self.current.name)

    def go_back(self) -> bool:
        """Pop the current route.

        Returns:
            False if already at the root
        """
        if not self.can_go_back:
            return False
        self._stack.pop()
        return True

    def reset(self, route: Route) -> None:
        self._stack = [route]

    def set_params(self, **params) -> None:
        """Merge params into the current route."""
        self.current.params.update(params)

    def sync(self, route: Route) -> None:
        """Bring the stack in line with a route opened directly (by URL).

        Pops back to the newest stacked route with the same name and
        params (extra params kept by the stacked route are ignored),
        otherwise opens ``route``.
        """
        for index in range(len(self._stack) - 1, -1, -1):
            if _matches(self._stack[index], route):
                del self._stack[index + 1:]
                return
        if route.name in TABS.values():
            self.reset(route)
        else:
            self.navigate(route)


class AppShell:
    """Routes between the auth flow and the main flow as the session changes."""

    def __init__(self, session, navigator: Navigator):
        self.session = session
        self.navigator = navigator
        self._unsubscribe: Optional[Callable[[], None]] = None

    @property
    def flow(self) -> str:
        """'loading', 'auth' or 'main'."""
        if self.session.loading:
            return "loading"
        return "main" if self.session.user is not None else "auth"

    def start(self) -> None:
        if self._unsubscribe is not None:
            return
        self._unsubscribe = self.session.subscribe(self._on_session_change)
        self._apply(self.session.user)

    def stop(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    async def _on_session_change(self, user) -> None:
        self._apply(user)

    def _apply(self, user) -> None:
        in_auth_flow = self.navigator.current.name in AUTH_ROUTES
        if user is None and not in_auth_flow:
            self.navigator.reset(Route(LOGIN))
        elif user is not None and in_auth_flow:
            self.navigator.reset(Route(FEED_HOME))
