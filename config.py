import os
import tempfile

"""
for all the settings for flask stored in one place such as secret key,
database location, admin passcodes, upload limits and logging

every value can be changed with an environment variable of the same name
"""

class Config:

    SECRET_KEY = os.environ.get('SECRET_KEY', 'dev-secret-key-change-later')

    BASE_DIR = os.path.abspath(os.path.dirname(__file__))
    DATABASE_PATH = os.path.join(BASE_DIR, 'database', 'feedback.db')
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL', f'sqlite:///{DATABASE_PATH}')

    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # admin passcodes, the admin one is copied into the database the first time
    # someone logs in and can be changed there afterwards
    ADMIN_PASSCODE = os.environ.get('ADMIN_PASSCODE', '54321')
    SCHOOL_PASSCODE = os.environ.get('SCHOOL_PASSCODE', '67890')

    # upload settings

    UPLOAD_FOLDER = os.environ.get('UPLOAD_FOLDER', 'upload')
    MAX_CONTENT_LENGTH = 16 * 1024 * 1024 #16MB Max
    ALLOWED_FILE_TYPES = ['xlsx', 'xls']

    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')


class TestConfig(Config):

    TESTING = True
    SECRET_KEY = 'test-secret-key'
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    ADMIN_PASSCODE = '54321'
    SCHOOL_PASSCODE = '67890'
    UPLOAD_FOLDER = os.path.join(tempfile.gettempdir(), 'feedback-test-uploads')
    LOG_LEVEL = 'WARNING'
