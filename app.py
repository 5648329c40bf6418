import logging
import os

from flask import Flask, render_template

from config import Config
from database import db
from data_tables.admin_setting import AdminSetting
from data_tables.feedback import Feedback
from data_tables.place import Place
from data_tables.school import School
from questionnaires.registry import list_selectable
from routes.admin import admin_bp
from routes.api import api_bp
from routes.take_survey import survey_bp
from utils.labels import humanize

logger = logging.getLogger(__name__)


def create_app(config_class=Config):
    app = Flask(__name__)
    app.config.from_object(config_class)

    logging.basicConfig(
        level=app.config.get('LOG_LEVEL', 'INFO'),
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    )

    # connect database to app
    db.init_app(app)

    # register blueprints
    app.register_blueprint(admin_bp)
    app.register_blueprint(survey_bp)
    app.register_blueprint(api_bp)

    app.add_template_filter(humanize, 'humanize')

    # create folders for the database and uploads if they dont exist
    if app.config['SQLALCHEMY_DATABASE_URI'].startswith('sqlite:///'):
        os.makedirs(os.path.dirname(app.config['DATABASE_PATH']), exist_ok=True)
    os.makedirs(app.config['UPLOAD_FOLDER'], exist_ok=True)

    # home route
    @app.route('/')
    def home():
        return render_template('home.html', questionnaires=list_selectable())

    # create database tables when app starts
    with app.app_context():
        db.create_all()
        logger.info('database tables ready (%s)', ', '.join(
            model.__tablename__ for model in (Place, Feedback, School, AdminSetting)))

    return app


if __name__ == '__main__':
    create_app().run(debug=True, port=5001, use_reloader=False)
