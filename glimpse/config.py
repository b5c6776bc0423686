"""Application configuration and constants."""
import os
from pathlib import Path

# Directory paths
BASE_DIR = Path(__file__).resolve().parent.parent
TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"

# Document store configuration
# Set via GLIMPSE_DOCUMENT_BACKEND: "memory" or "sqlite"
DOCUMENT_BACKEND = os.environ.get("GLIMPSE_DOCUMENT_BACKEND", "sqlite").lower()
DATABASE_PATH = Path(os.environ.get("GLIMPSE_DATABASE_PATH", str(BASE_DIR / "glimpse.db")))

# Object storage configuration (see infrastructure.storage.factory for S3 settings)
STORAGE_BACKEND = os.environ.get("STORAGE_BACKEND", "local").lower()
STORAGE_BASE_PATH = Path(os.environ.get("STORAGE_BASE_PATH", str(BASE_DIR / "media")))
STORAGE_PUBLIC_URL = "/" + os.environ.get("STORAGE_PUBLIC_URL", "/media").strip("/")

# Feed
FEED_LIMIT = int(os.environ.get("GLIMPSE_FEED_LIMIT", "50"))

# Logging
LOG_LEVEL = os.environ.get("GLIMPSE_LOG_LEVEL", "INFO").upper()

# Document collections
USERS_COLLECTION = "users"
ALBUMS_COLLECTION = "albums"
PHOTOS_COLLECTION = "photos"
COMMENTS_COLLECTION = "comments"
ACCOUNTS_COLLECTION = "accounts"

# Object storage key prefix for photos: photos/{photoId}
PHOTOS_FOLDER = "photos"

# Input limits
ALBUM_TITLE_MAX_LENGTH = 50
ALBUM_DESCRIPTION_MAX_LENGTH = 200
COMMENT_MAX_LENGTH = 200
MAX_SELECTED_IMAGES = 10
MIN_PASSWORD_LENGTH = 6
# bcrypt only hashes the first 72 bytes
MAX_PASSWORD_BYTES = 72

# Allowed media types for album uploads
ALLOWED_IMAGE_TYPES = {"image/jpeg", "image/png", "image/gif", "image/webp", "image/heic"}

# Paths reachable without a signed-in user
PUBLIC_PATHS = {"/login", "/register", "/favicon.ico"}
PUBLIC_PREFIXES = (STORAGE_PUBLIC_URL + "/",)

# Transaction primitive
TRANSACTION_MAX_ATTEMPTS = 5
