"""Celery application configuration"""

from celery import Celery
from kombu import Exchange, Queue
from shopfront.core.config import settings

# Create Celery app
celery_app = Celery(
    "shopfront",
    broker=settings.CELERY_BROKER_URL,
    backend=settings.CELERY_RESULT_BACKEND,
    include=[
        "shopfront.tasks.email_tasks",
    ]
)

# Configure Celery
celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone=settings.CELERY_TIMEZONE,
    enable_utc=True,
    task_track_started=True,
    task_time_limit=5 * 60,
    task_soft_time_limit=4 * 60,
    task_acks_late=True,
    worker_prefetch_multiplier=1,

    # Task routing; anything unrouted lands on the default queue
    task_default_queue="default",
    task_routes={
        "shopfront.tasks.email_tasks.*": {"queue": "email"},
    },

    # Retry configuration
    task_default_retry_delay=60,  # 1 minute
    task_max_retries=3,

    # Result backend configuration
    result_expires=3600,  # 1 hour

    # Run tasks inline under test so no broker is needed
    task_always_eager=settings.is_test,
    task_eager_propagates=False,
)

# Define queues
celery_app.conf.task_queues = (
    Queue("default", Exchange("default"), routing_key="default"),
    Queue("email", Exchange("email"), routing_key="email"),
)
