from database import db
from datetime import datetime
import secrets


class Place(db.Model):
    """
    a location or service point with its own feedback link

    For example:
    - "Main Hospital Kitchen" using the food questionnaire
    - "Ward 3 Laundry" using the housekeeping questionnaire

    Switching a place off stops new feedback through its link but keeps
    everything already submitted.
    """

    __tablename__ = 'places'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(200), nullable=False)
    name_ar = db.Column(db.String(200), default='')
    address = db.Column(db.String(300), default='')
    address_ar = db.Column(db.String(300), default='')

    # random token used in the public link so links cannot be guessed
    slug = db.Column(db.String(32), unique=True, nullable=False)

    questionnaire_type = db.Column(db.String(50), default='food')
    active = db.Column(db.Boolean, default=True)

    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def generate_slug(self):
        """Generate the unique token for this place's link."""
        self.slug = secrets.token_hex(6)
        return self.slug

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'name_ar': self.name_ar or '',
            'address': self.address or '',
            'address_ar': self.address_ar or '',
            'slug': self.slug,
            'questionnaire_type': self.questionnaire_type,
            'active': self.active,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None,
        }

    def __repr__(self):
        return f'<Place {self.slug}: {self.name}>'
