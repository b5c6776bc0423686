"""Shared FastAPI dependencies.

Everything lives on ``app.state``, built by the app lifespan.
"""
from fastapi import Request

from .application import Backend, SessionStore
from .navigation import Navigator
from .screens import AlertPresenter


def get_backend(request: Request) -> Backend:
    return request.app.state.backend


def get_session(request: Request) -> SessionStore:
    return request.app.state.session


def get_navigator(request: Request) -> Navigator:
    return request.app.state.navigator


def get_alerts(request: Request) -> AlertPresenter:
    return request.app.state.alerts
