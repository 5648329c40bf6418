import logging
from datetime import date

from questionnaires.schema import FieldKind
from utils.errors import InvalidFieldValue, MissingRequiredField

"""
turns a questionnaire into a form that can be filled in, checked and turned
into a submission ready to be saved

a form is either being edited or has been submitted. it only becomes submitted
once it is valid and the store has saved it. starting a new feedback empties
the form again for the same questionnaire
"""

logger = logging.getLogger(__name__)

EDITING = 'editing'
SUBMITTED = 'submitted'

MEAL_TIME_MESSAGE = 'Please select a meal time'
REQUIRED_MESSAGE = 'Please complete all required fields'


class ValidationResult:

    def __init__(self, error=None):
        self.error = error

    @property
    def is_valid(self):
        return self.error is None

    def raise_for_error(self):
        if self.error is not None:
            raise self.error

    def __eq__(self, other):
        return isinstance(other, ValidationResult) and other.error == self.error

    def __repr__(self):
        if self.is_valid:
            return '<ValidationResult valid>'
        return f'<ValidationResult missing {self.error.field_id}>'


SCALAR_TYPES = (str, int, float, bool)


def is_empty(value):
    if value is None:
        return True
    return isinstance(value, str) and value.strip() == ''


def is_scalar(value):
    return value is None or isinstance(value, SCALAR_TYPES)


def initialize_values(config):
    """Every field on the form starts out as an empty string."""
    return {question_field.id: '' for question_field in config.all_fields()}


def validate(config, values):
    """
    go through the sections top to bottom and the fields in each section
    left to right. the first required field without a value is the error,
    nothing after it is checked. a list or object where a single answer
    belongs is an error too, required or not
    """
    for section in config.sections:
        for question_field in section.fields:
            value = values.get(question_field.id)

            if not is_scalar(value):
                return ValidationResult(InvalidFieldValue(question_field.id))

            if not question_field.required:
                continue

            if is_empty(value):
                if question_field.kind == FieldKind.MEAL_TIME:
                    message = MEAL_TIME_MESSAGE
                else:
                    message = REQUIRED_MESSAGE
                return ValidationResult(MissingRequiredField(question_field.id, message))

    return ValidationResult()


def build_submission(config, values, feedback_date=None, place_slug=None, place_name=None):
    """
    Build the record to save from the form values.

    Only fields of this questionnaire are copied. Free text is trimmed and an
    empty text becomes None so "has suggestions" means the value is not None.
    Raises InvalidFieldValue for a value that is not a single answer.
    """
    submission = {}

    for question_field in config.all_fields():
        value = values.get(question_field.id, '')
        if not is_scalar(value):
            raise InvalidFieldValue(question_field.id)

        if question_field.kind == FieldKind.FREE_TEXT:
            value = value.strip() if isinstance(value, str) else value
            submission[question_field.id] = value or None
        else:
            submission[question_field.id] = value

    submission['questionnaire_type'] = config.type
    submission['feedback_date'] = feedback_date or date.today().isoformat()
    submission['place_slug'] = place_slug or None
    submission['place_name'] = place_name or None

    return submission


class FeedbackForm:
    """One person filling in one questionnaire."""

    def __init__(self, config, values=None):
        self.config = config
        self.state = EDITING
        self.values = initialize_values(config)
        self.submitted_id = None

        if values:
            for field_id in self.values:
                if field_id in values:
                    self.values[field_id] = values[field_id]

    @property
    def is_submitted(self):
        return self.state == SUBMITTED

    def set_value(self, field_id, value):
        self.values[field_id] = value

    def validate(self):
        return validate(self.config, self.values)

    def submit(self, store, feedback_date=None, place=None):
        """
        Check the form, build the submission and hand it to the store.

        Raises MissingRequiredField (or InvalidFieldValue) before anything is saved. If the store
        fails the form stays in editing so it can be sent again.
        """
        if self.is_submitted:
            return self.submitted_id

        self.validate().raise_for_error()

        submission = build_submission(
            self.config,
            self.values,
            feedback_date=feedback_date,
            place_slug=place.slug if place else None,
            place_name=place.name if place else None,
        )
        if place is not None:
            submission['place_id'] = place.id

        self.submitted_id = store.create(submission)
        self.state = SUBMITTED
        logger.info('feedback %s submitted for %s', self.submitted_id, self.config.type)

        return self.submitted_id

    def new_feedback(self):
        """Start again with an empty form for the same questionnaire."""
        self.values = initialize_values(self.config)
        self.submitted_id = None
        self.state = EDITING
