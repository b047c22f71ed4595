import os
import logging
from celery import Celery, Task
from celery.signals import task_failure, task_retry
from flask import has_app_context

broker_url = os.environ.get("CELERY_BROKER_URL", "memory://")
backend_url = os.environ.get("CELERY_RESULT_BACKEND", "cache+memory://")

logger = logging.getLogger(__name__)

_flask_app = None


class FlaskTask(Task):
    """Run task bodies inside the Flask app context (reusing one if active)."""

    def __call__(self, *args, **kwargs):
        if has_app_context() or _flask_app is None:
            return self.run(*args, **kwargs)
        with _flask_app.app_context():
            return self.run(*args, **kwargs)


celery_app = Celery(
    "storefront",
    broker=broker_url,
    backend=backend_url,
    task_cls=FlaskTask,
    include=["app.tasks.notifications"],
)
celery_app.conf.task_always_eager = os.environ.get("CELERY_TASK_ALWAYS_EAGER", "0") == "1"
celery_app.conf.task_eager_propagates = True
celery_app.conf.task_store_eager_result = False


def init_celery(flask_app):
    global _flask_app
    _flask_app = flask_app
    if flask_app.config.get("TESTING"):
        celery_app.conf.task_always_eager = True
    celery_app.set_default()
    flask_app.extensions["celery"] = celery_app
    return celery_app

@task_failure.connect
def _log_failure(sender=None, task_id=None, exception=None, **kwargs):
    logger.error("Task %s failed: %s", getattr(sender, 'name', task_id), exception)

@task_retry.connect
def _log_retry(sender=None, request=None, reason=None, **kwargs):
    logger.warning("Task %s retry due to: %s", getattr(sender, 'name', ''), reason)
