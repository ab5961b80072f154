"""Celery tasks for pushing local writes to the remote sheet store."""
import logging

from ims.workers.celery_app import celery_app, settings
from ims.services.gateway import GatewayError, RemoteGateway
from ims.services.sync import deliver

logger = logging.getLogger(__name__)


@celery_app.task(ignore_result=True, max_retries=0)
def push_to_remote(action: str, endpoint: str, key: str, data):
    """
    Deliver one ``save_record`` or ``bulk_save`` push.

    Failures are logged and dropped; the local write it mirrors has already
    been committed and is never rolled back.
    """
    gateway = RemoteGateway(endpoint, timeout=settings.sync_timeout_seconds)
    try:
        deliver(gateway, action, key, data)
    except GatewayError as e:
        logger.warning(f"Dropped {action} push for {key}: {type(e).__name__}: {e}")
        return {"status": "dropped", "key": key, "error": str(e)}

    logger.info(f"Pushed {action} for {key}")
    return {"status": "sent", "key": key}
