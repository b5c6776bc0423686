"""Screen view-models."""
from .base import Alert, AlertPresenter, Screen, ScreenState
from .auth import LoginScreen, RegisterScreen
from .feed import FeedScreen
from .album_detail import AlbumDetailScreen
from .create_album import CreateAlbumScreen, SelectedImage
from .photo_viewer import PhotoInteractions, PhotoViewerScreen
from .profile import ProfileScreen

__all__ = [
    "Alert",
    "AlertPresenter",
    "Screen",
    "ScreenState",
    "LoginScreen",
    "RegisterScreen",
    "FeedScreen",
    "AlbumDetailScreen",
    "CreateAlbumScreen",
    "SelectedImage",
    "PhotoInteractions",
    "PhotoViewerScreen",
    "ProfileScreen",
]
