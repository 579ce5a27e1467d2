# passenger_wsgi.py

import sys, os

# Ensure current directory is in sys.path
sys.path.insert(0, os.path.dirname(__file__))

from services.db_service import init_db  # noqa: E402
from wsgi_app import app as application  # noqa: E402

# Create tables if not exist
init_db()
