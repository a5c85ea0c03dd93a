# backend/wsgi.py
from lottodesk import create_app

app = create_app()
