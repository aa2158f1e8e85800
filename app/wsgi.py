import atexit

from app.argus import create_app
from app.argus.db import close_db

app = create_app()
atexit.register(close_db, app)
