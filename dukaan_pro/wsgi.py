"""
WSGI config for dukaan_pro project.
"""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'dukaan_pro.settings')

application = get_wsgi_application()
