"""
WSGI config for the SmallBeez project.
"""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'SmallBeez.settings')

application = get_wsgi_application()
