"""WSGI config for the Hiring Decision Engine."""
import os
from django.core.wsgi import get_wsgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'hiring_engine.settings')
application = get_wsgi_application()
