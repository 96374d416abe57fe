"""
Celery workers module.

Runs translation jobs on dedicated worker processes when
TRANSLATION_JOBS_DISPATCH_MODE=celery.

Dependencies: celery, i18n_backend.configs
System role: Background task processing
"""

from celery import Celery

from i18n_backend.configs import get_settings

settings = get_settings()
celery_config = settings.celery

celery_app = Celery(
    "i18n_backend",
    broker=celery_config.broker_url,
    backend=celery_config.result_backend_url,
    include=["i18n_backend.workers.tasks.translation"],
)

celery_app.conf.update(
    task_serializer=celery_config.task_serializer,
    result_serializer=celery_config.result_serializer,
    accept_content=celery_config.accept_content,
    timezone=celery_config.timezone,
    task_default_queue=celery_config.task_queue,
    task_acks_late=True,
    worker_prefetch_multiplier=1,
)
