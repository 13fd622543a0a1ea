# Celery instance is defined in hotel_ledger/celery.py
# It points the task queue at the Django settings of this project
from .celery import celery_app

# 'from hotel_ledger import *' only exports celery_app
__all__ = ("celery_app",)

""" Workers are started with "celery -A hotel_ledger worker -l info"
    -A hotel_ledger imports this module, which exposes celery_app. """
