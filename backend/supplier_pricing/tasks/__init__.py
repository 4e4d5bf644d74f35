"""
Celery application factory.
"""

from celery import Celery

celery_app = Celery("supplier_pricing")
celery_app.config_from_object("celeryconfig")

celery_app.autodiscover_tasks([
    "supplier_pricing.tasks.processing_tasks",
])
