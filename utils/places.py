import logging

from sqlalchemy.exc import SQLAlchemyError

from database import db
from data_tables.place import Place
from questionnaires.registry import DEFAULT_QUESTIONNAIRE_TYPE
from utils.errors import NotFoundError, PlaceInactiveError, StoreUnavailable, ValidationError

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ('name', 'name_ar', 'address', 'address_ar', 'active', 'questionnaire_type')


def _commit(action):
    try:
        db.session.commit()
    except SQLAlchemyError as error:
        db.session.rollback()
        logger.exception('Error %s place', action)
        raise StoreUnavailable(f'Failed to {action} place') from error


def list_places():
    """All places, newest first."""
    try:
        return Place.query.order_by(Place.created_at.desc(), Place.id.desc()).all()
    except SQLAlchemyError as error:
        db.session.rollback()
        logger.exception('Error fetching places')
        raise StoreUnavailable('Failed to fetch places') from error


def get_place_by_slug(slug):
    try:
        place = Place.query.filter_by(slug=slug).first()
    except SQLAlchemyError as error:
        db.session.rollback()
        logger.exception('Error fetching place %s', slug)
        raise StoreUnavailable('Failed to fetch place') from error

    if place is None:
        raise NotFoundError(f'Place {slug} not found')
    return place


def resolve_active_place(slug):
    """
    The place behind a feedback link. A switched off place blocks
    feedback the same way a missing one does.
    """
    place = get_place_by_slug(slug)
    if not place.active:
        raise PlaceInactiveError(slug)
    return place


def create_place(name, name_ar='', address='', address_ar='', questionnaire_type=None):
    if not name or not name.strip():
        raise ValidationError('Place name is required')

    place = Place(
        name=name.strip(),
        name_ar=name_ar or '',
        address=address or '',
        address_ar=address_ar or '',
        questionnaire_type=questionnaire_type or DEFAULT_QUESTIONNAIRE_TYPE,
        active=True,
    )

    # slugs are random, try again in the unlikely case one is taken
    place.generate_slug()
    while Place.query.filter_by(slug=place.slug).first() is not None:
        place.generate_slug()

    db.session.add(place)
    _commit('create')

    logger.info('created place %s (%s)', place.slug, place.name)
    return place


def update_place(place_id, changes):
    """Apply only the fields that were sent. Last write wins."""
    place = db.session.get(Place, place_id)
    if place is None:
        raise NotFoundError(f'Place {place_id} not found')

    for key in EDITABLE_FIELDS:
        if key in changes and changes[key] is not None:
            setattr(place, key, changes[key])

    _commit('update')

    logger.info('updated place %s', place.slug)
    return place


def set_place_active(place_id, active):
    return update_place(place_id, {'active': bool(active)})


def delete_place(place_id):
    """Delete the place. Feedback keeps the slug and name it was saved with."""
    place = db.session.get(Place, place_id)
    if place is None:
        raise NotFoundError(f'Place {place_id} not found')

    slug = place.slug
    db.session.delete(place)
    _commit('delete')

    logger.info('deleted place %s', slug)
