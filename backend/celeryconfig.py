"""
Celery configuration for the price update workers.

Loaded by `celery_app.config_from_object("celeryconfig")` in
supplier_pricing/tasks/__init__.py.  Broker/result-backend URLs come from
environment variables, defaulting to localhost for local dev.
"""

import os

# ═══════════════════════════════════════════════════════════
#  Broker & Result Backend
# ═══════════════════════════════════════════════════════════

broker_url = os.getenv("CELERY_BROKER_URL", "redis://localhost:6379/0")
result_backend = os.getenv("CELERY_RESULT_BACKEND", "redis://localhost:6379/1")

# ═══════════════════════════════════════════════════════════
#  Serialization — JSON only
# ═══════════════════════════════════════════════════════════

task_serializer = "json"
result_serializer = "json"
accept_content = ["json"]

timezone = "UTC"
enable_utc = True

# ═══════════════════════════════════════════════════════════
#  Task Execution
# ═══════════════════════════════════════════════════════════

# Ack after completion; a crashed worker's job is redelivered and the
# status compare-and-set turns the duplicate into a no-op.
task_acks_late = True
task_reject_on_worker_lost = True

worker_prefetch_multiplier = 1

# The orchestrator enforces PROCESSING_TIMEOUT_SECONDS itself; these are
# the outer guard rails.
task_soft_time_limit = 600
task_time_limit = 660

# No automatic retries: a failed job is terminal and needs a new upload.
task_max_retries = 0

result_expires = 86400

worker_max_tasks_per_child = 200
worker_send_task_events = False
task_send_sent_event = False

# ═══════════════════════════════════════════════════════════
#  Task Routes
# ═══════════════════════════════════════════════════════════
#   celery -A supplier_pricing.tasks worker -Q price_updates

task_routes = {
    "supplier_pricing.tasks.processing_tasks.*": {"queue": "price_updates"},
}

task_default_queue = "default"
