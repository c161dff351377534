# extensions.py

from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate
from crud.controller import Crud

# Single source of truth for the db object.
# It's initialized here, but not yet connected to a Flask app.
db = SQLAlchemy()
migrate = Migrate()

# CRUD controllers are registered per app through this extension
crud = Crud()
