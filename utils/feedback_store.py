import logging
from dataclasses import dataclass
from typing import Optional

from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError

from database import db
from data_tables.feedback import ENVELOPE_KEYS, Feedback
from questionnaires.registry import DEFAULT_QUESTIONNAIRE_TYPE, get_questionnaire
from utils.errors import StoreUnavailable

logger = logging.getLogger(__name__)


@dataclass
class FeedbackFilter:
    """
    which feedback to read. every filter is optional, dates are YYYY-MM-DD
    and both ends of the range are included
    """

    place_slug: Optional[str] = None
    from_date: Optional[str] = None
    to_date: Optional[str] = None
    questionnaire_type: Optional[str] = None
    meal_time: Optional[str] = None
    rating: Optional[str] = None

    @classmethod
    def from_args(cls, args):
        return cls(
            place_slug=args.get('place_slug') or None,
            from_date=args.get('from_date') or None,
            to_date=args.get('to_date') or None,
            questionnaire_type=args.get('questionnaire_type') or None,
            meal_time=args.get('meal_time') or None,
            rating=args.get('rating') or None,
        )


def questionnaire_type_clause(questionnaire_type):
    """
    Feedback from before questionnaire types existed has no type and counts
    as the default questionnaire. Any other type must match exactly.
    """
    if questionnaire_type == DEFAULT_QUESTIONNAIRE_TYPE:
        return or_(
            Feedback.questionnaire_type == DEFAULT_QUESTIONNAIRE_TYPE,
            Feedback.questionnaire_type.is_(None),
        )
    return Feedback.questionnaire_type == questionnaire_type


class SubmissionStore:
    """
    Saves and reads feedback. Every database error comes out as
    StoreUnavailable and is not retried.
    """

    def create(self, submission):
        """Save one submission and return its id."""
        answers = {key: value for key, value in submission.items() if key not in ENVELOPE_KEYS}

        feedback = Feedback(
            feedback_date=submission['feedback_date'],
            questionnaire_type=submission.get('questionnaire_type'),
            place_id=submission.get('place_id'),
            place_slug=submission.get('place_slug'),
            place_name=submission.get('place_name'),
            answers=answers,
        )

        try:
            db.session.add(feedback)
            db.session.commit()
        except SQLAlchemyError as error:
            db.session.rollback()
            logger.exception('Error saving feedback')
            raise StoreUnavailable('Failed to submit feedback') from error

        logger.info('saved feedback %s (%s) for place %s',
                    feedback.id, feedback.questionnaire_type, feedback.place_slug)
        return feedback.id

    def find(self, feedback_filter=None):
        """Return matching submissions, newest first, as flat mappings."""
        feedback_filter = feedback_filter or FeedbackFilter()

        query = Feedback.query

        if feedback_filter.place_slug:
            query = query.filter(Feedback.place_slug == feedback_filter.place_slug)
        if feedback_filter.questionnaire_type:
            query = query.filter(questionnaire_type_clause(feedback_filter.questionnaire_type))
        if feedback_filter.from_date:
            query = query.filter(Feedback.feedback_date >= feedback_filter.from_date)
        if feedback_filter.to_date:
            query = query.filter(Feedback.feedback_date <= feedback_filter.to_date)

        try:
            rows = query.order_by(Feedback.created_at.desc(), Feedback.id.desc()).all()
        except SQLAlchemyError as error:
            db.session.rollback()
            logger.exception('Error fetching feedback')
            raise StoreUnavailable('Failed to fetch feedback') from error

        submissions = [row.to_submission() for row in rows]

        # answers live in the JSON column so these two are checked here
        if feedback_filter.meal_time:
            submissions = [s for s in submissions if s.get('meal_time') == feedback_filter.meal_time]

        if feedback_filter.rating:
            overall_field = get_questionnaire(feedback_filter.questionnaire_type).overall_rating_field_id
            submissions = [s for s in submissions if s.get(overall_field) == feedback_filter.rating]

        return submissions

    def get(self, feedback_id):
        try:
            feedback = db.session.get(Feedback, feedback_id)
        except SQLAlchemyError as error:
            db.session.rollback()
            logger.exception('Error fetching feedback %s', feedback_id)
            raise StoreUnavailable('Failed to fetch feedback') from error

        return feedback.to_submission() if feedback else None

    def delete(self, feedback_id):
        """Delete one submission. Returns False when there was nothing to delete."""
        try:
            feedback = db.session.get(Feedback, feedback_id)
            if feedback is None:
                return False
            db.session.delete(feedback)
            db.session.commit()
        except SQLAlchemyError as error:
            db.session.rollback()
            logger.exception('Error deleting feedback %s', feedback_id)
            raise StoreUnavailable('Failed to delete feedback') from error

        logger.info('deleted feedback %s', feedback_id)
        return True
