from database import db
from datetime import datetime

"""
one person's submitted feedback. only a few columns are fixed (the envelope),
the answers themselves go into a JSON column because every questionnaire type
has its own fields, and older feedback can carry fields no questionnaire has
anymore

"""

ENVELOPE_KEYS = ('id', 'created_at', 'feedback_date', 'questionnaire_type', 'place_id', 'place_slug', 'place_name')


class Feedback(db.Model):
    __tablename__ = 'feedback'

    id = db.Column(db.Integer, primary_key=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    # YYYY-MM-DD text, so comparing strings compares dates
    feedback_date = db.Column(db.String(10), nullable=False, index=True)

    # empty for feedback saved before there was more than one questionnaire
    questionnaire_type = db.Column(db.String(50), nullable=True, index=True)

    # copied from the place at submit time, kept even if the place is deleted
    place_id = db.Column(db.Integer, nullable=True)
    place_slug = db.Column(db.String(32), nullable=True, index=True)
    place_name = db.Column(db.String(200), nullable=True)

    answers = db.Column(db.JSON, nullable=False, default=dict)

    def to_submission(self):
        """The feedback as one flat mapping: envelope keys plus one key per answered field."""
        submission = dict(self.answers or {})
        submission.update({
            'id': self.id,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'feedback_date': self.feedback_date,
            'questionnaire_type': self.questionnaire_type,
            'place_id': self.place_id,
            'place_slug': self.place_slug,
            'place_name': self.place_name,
        })
        return submission

    def __repr__(self):
        return f'<Feedback {self.id} ({self.questionnaire_type or "untyped"}) on {self.feedback_date}>'
