"""
Errors raised by the feedback system.

- ValidationError: the form is missing something or holds a value it cannot
  store, caught before anything is saved
- NotFoundError: a place link that does not exist or no longer takes feedback
- StoreUnavailable: the database could not be reached or refused the query
"""


class FeedbackError(Exception):
    """Base class for feedback errors."""


class ValidationError(FeedbackError):
    pass


class FieldError(ValidationError):
    """A validation error that points at one field of the form."""

    def __init__(self, field_id, message):
        super().__init__(message)
        self.field_id = field_id
        self.message = message

    def __eq__(self, other):
        return (
            type(other) is type(self)
            and other.field_id == self.field_id
            and other.message == self.message
        )

    def __hash__(self):
        return hash((type(self), self.field_id, self.message))


class MissingRequiredField(FieldError):

    def __init__(self, field_id, message='Please complete all required fields'):
        super().__init__(field_id, message)


class InvalidFieldValue(FieldError):
    """A list, object or other value that is not a single answer."""

    def __init__(self, field_id, message='Please give a single answer for each question'):
        super().__init__(field_id, message)


class NotFoundError(FeedbackError):
    pass


class PlaceInactiveError(NotFoundError):
    """The place exists but has been switched off by an administrator."""

    def __init__(self, slug):
        super().__init__(f'Place {slug} is no longer accepting feedback')
        self.slug = slug


class StoreUnavailable(FeedbackError):
    pass
