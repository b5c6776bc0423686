"""Tests for the navigator and the auth/main flow switch."""
import pytest

from glimpse.navigation import (
    ALBUM_DETAIL,
    CREATE,
    FEED,
    FEED_HOME,
    LOGIN,
    PHOTO_VIEWER,
    PROFILE,
    REGISTER,
    AppShell,
    Navigator,
    Route,
    route_url,
)


class TestNavigator:

    def test_starts_at_login(self):
        navigator = Navigator()

        assert navigator.current == Route(LOGIN)
        assert navigator.can_go_back is False

    def test_push_and_go_back(self):
        navigator = Navigator(Route(FEED_HOME))
        navigator.navigate(Route(ALBUM_DETAIL, {"album_id": "a1"}))
        navigator.navigate(Route(PHOTO_VIEWER, {"initial_index": 0}))

        assert [r.name for r in navigator.stack] == [FEED_HOME, ALBUM_DETAIL, PHOTO_VIEWER]
        assert navigator.go_back() is True
        assert navigator.current.name == ALBUM_DETAIL

    def test_go_back_at_root(self):
        navigator = Navigator(Route(FEED_HOME))

        assert navigator.go_back() is False
        assert navigator.current.name == FEED_HOME

    @pytest.mark.parametrize("tab, root", [(FEED, FEED_HOME), (CREATE, CREATE), (PROFILE, PROFILE)])
    def test_tabs_reset_stack(self, tab, root):
        navigator = Navigator(Route(FEED_HOME))
        navigator.navigate(Route(ALBUM_DETAIL, {"album_id": "a1"}))

        navigator.navigate(Route(tab))

        assert navigator.stack == [Route(root)]

    def test_set_params_updates_current(self):
        navigator = Navigator(Route(PROFILE))

        navigator.set_params(tab="photos")

        assert navigator.current.params == {"tab": "photos"}

    def test_sync_pops_back_to_known_route(self):
        navigator = Navigator(Route(FEED_HOME))
        navigator.navigate(Route(ALBUM_DETAIL, {"album_id": "a1"}))
        navigator.navigate(Route(PHOTO_VIEWER))

        navigator.sync(Route(ALBUM_DETAIL, {"album_id": "a1"}))

        assert [r.name for r in navigator.stack] == [FEED_HOME, ALBUM_DETAIL]

    def test_sync_keeps_params_of_stacked_route(self):
        navigator = Navigator(Route(PROFILE))
        navigator.set_params(tab="photos")

        navigator.sync(Route(PROFILE))

        assert navigator.stack == [Route(PROFILE, {"tab": "photos"})]

    def test_sync_pushes_new_route(self):
        navigator = Navigator(Route(FEED_HOME))

        navigator.sync(Route(ALBUM_DETAIL, {"album_id": "a2"}))

        assert [r.name for r in navigator.stack] == [FEED_HOME, ALBUM_DETAIL]

    def test_sync_tab_root_resets(self):
        navigator = Navigator(Route(FEED_HOME))
        navigator.navigate(Route(ALBUM_DETAIL, {"album_id": "a1"}))

        navigator.sync(Route(PROFILE))

        assert navigator.stack == [Route(PROFILE)]


class TestRouteUrl:

    @pytest.mark.parametrize("route, url", [
        (Route(LOGIN), "/login"),
        (Route(REGISTER), "/register"),
        (Route(FEED), "/feed"),
        (Route(FEED_HOME), "/feed"),
        (Route(ALBUM_DETAIL, {"album_id": "a1"}), "/albums/a1"),
        (Route(PHOTO_VIEWER), "/viewer"),
        (Route(CREATE), "/create"),
        (Route(PROFILE), "/profile"),
    ])
    def test_urls(self, route, url):
        assert route_url(route) == url

    def test_unknown_route(self):
        with pytest.raises(ValueError):
            route_url(Route("Settings"))


class TestAppShell:

    @pytest.mark.asyncio
    async def test_follows_session(self, session):
        navigator = Navigator()
        shell = AppShell(session, navigator)
        shell.start()

        assert shell.flow == "auth"
        assert navigator.current.name == LOGIN

        await session.register("alice@example.com", "secret123", "alice")
        assert shell.flow == "main"
        assert navigator.stack == [Route(FEED_HOME)]

        navigator.navigate(Route(ALBUM_DETAIL, {"album_id": "a1"}))
        await session.logout()
        assert shell.flow == "auth"
        assert navigator.stack == [Route(LOGIN)]

        shell.stop()

    @pytest.mark.asyncio
    async def test_loading_flow_before_start(self, auth_provider, backend):
        from glimpse.application import SessionStore

        session = SessionStore(auth_provider, backend.users)
        shell = AppShell(session, Navigator())

        assert shell.flow == "loading"

    @pytest.mark.asyncio
    async def test_stop_detaches(self, session):
        navigator = Navigator()
        shell = AppShell(session, navigator)
        shell.start()
        shell.stop()

        await session.register("alice@example.com", "secret123", "alice")

        assert navigator.current.name == LOGIN

    @pytest.mark.asyncio
    async def test_register_screen_switches_to_feed(self, session):
        navigator = Navigator()
        navigator.navigate(Route(REGISTER))
        shell = AppShell(session, navigator)
        shell.start()

        await session.register("alice@example.com", "secret123", "alice")

        assert navigator.stack == [Route(FEED_HOME)]
