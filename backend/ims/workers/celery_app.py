"""Celery app configuration."""
from celery import Celery

from ims.config import get_settings

settings = get_settings()

celery_app = Celery(
    "ims",
    broker=settings.celery_broker_url,
    backend=settings.celery_result_backend,
    include=["ims.workers.tasks"]
)

celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,
    task_ignore_result=True,
    task_time_limit=120,  # 2 minutes max per push
    worker_prefetch_multiplier=1,
    # At-most-once: a push is acknowledged on receipt and never redelivered
    task_acks_late=False,
)
