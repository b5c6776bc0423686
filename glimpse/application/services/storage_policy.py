"""Best-effort removal of storage objects.

Cascading deletes remove documents first and storage objects second.
A storage failure at that point is logged and dropped: the documents are
already gone and are not restored.
"""
import logging

from ...infrastructure.storage import ObjectStorage

logger = logging.getLogger(__name__)


async def best_effort_delete(storage: ObjectStorage, url: str) -> bool:
    """Delete the object behind ``url``, logging instead of raising.

    Returns:
        True if an object was deleted
    """
    try:
        return await storage.delete_by_url(url)
    except Exception as e:
        logger.warning("Failed to delete storage object %s: %s", url, e)
        return False
