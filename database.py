from flask_sqlalchemy import SQLAlchemy

# one shared database object, connected to the app in create_app
db = SQLAlchemy()
