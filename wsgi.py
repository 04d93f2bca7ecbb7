# wsgi.py (at repo root)
from reliefhub import create_app

app = create_app()
