from database import db
from datetime import datetime

ADMIN_PASSCODE_KEY = 'admin_passcode'


class AdminSetting(db.Model):
    """
    a single key/value setting for the admin area, for now only the passcode
    """

    __tablename__ = 'admin_settings'

    id = db.Column(db.Integer, primary_key=True)
    setting_key = db.Column(db.String(100), unique=True, nullable=False)
    setting_value = db.Column(db.String(200), nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    @classmethod
    def get_or_create(cls, setting_key, default_value):
        """Return the setting, saving the default the first time it is asked for."""
        setting = cls.query.filter_by(setting_key=setting_key).first()

        if setting is None:
            setting = cls(setting_key=setting_key, setting_value=default_value)
            db.session.add(setting)
            db.session.commit()

        return setting

    def __repr__(self):
        return f'<AdminSetting {self.setting_key}>'
