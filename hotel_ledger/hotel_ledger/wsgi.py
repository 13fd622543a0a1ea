"""WSGI config for the hotel_ledger project."""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "hotel_ledger.settings")

application = get_wsgi_application()
