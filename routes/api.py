import logging

from flask import Blueprint, jsonify, request

from data_tables.school import School
from questionnaires.registry import (
    DEFAULT_QUESTIONNAIRE_TYPE,
    get_questionnaire,
    is_known_type,
    list_selectable,
)
from utils.auth import admin_required, allowed_questionnaire_type, log_in, verify_passcode
from utils.errors import FieldError, NotFoundError, PlaceInactiveError, StoreUnavailable, ValidationError
from utils.feedback_store import FeedbackFilter, SubmissionStore
from utils.form_engine import FeedbackForm
from utils.places import (
    create_place,
    delete_place,
    get_place_by_slug,
    list_places,
    resolve_active_place,
    update_place,
)
from utils.stats_aggregator import compute_stats

"""
JSON API for other clients (a single page app, the kiosk tablets).
everything is under '/api'
"""

api_bp = Blueprint('api', __name__, url_prefix='/api')

logger = logging.getLogger(__name__)

store = SubmissionStore()


# errors

@api_bp.errorhandler(FieldError)
def invalid_field(error):
    return jsonify({'error': error.message, 'field': error.field_id}), 400


@api_bp.errorhandler(ValidationError)
def invalid_request(error):
    return jsonify({'error': str(error)}), 400


@api_bp.errorhandler(PlaceInactiveError)
def place_inactive(error):
    return jsonify({'error': 'This location is no longer accepting feedback', 'inactive': True}), 404


@api_bp.errorhandler(NotFoundError)
def not_found(error):
    return jsonify({'error': str(error)}), 404


@api_bp.errorhandler(StoreUnavailable)
def store_unavailable(error):
    return jsonify({'error': f'{error}, please try again'}), 500


@api_bp.route('/health')
def health():
    return jsonify({'status': 'ok', 'database': 'sqlalchemy'})


# questionnaires

@api_bp.route('/questionnaires')
def questionnaires():
    return jsonify([
        {'value': questionnaire_type, 'display_name_key': display_name_key}
        for questionnaire_type, display_name_key in list_selectable()
    ])


@api_bp.route('/questionnaires/<questionnaire_type>')
def questionnaire_schema(questionnaire_type):
    return jsonify(get_questionnaire(questionnaire_type).to_dict())


@api_bp.route('/schools')
def schools():
    active_schools = School.query.filter_by(active=True).order_by(School.name_en).all()
    return jsonify([school.to_dict() for school in active_schools])


# places

@api_bp.route('/places', methods=['POST'])
@admin_required
def add_place():
    data = request.get_json(silent=True) or {}

    place = create_place(
        name=data.get('name'),
        name_ar=data.get('name_ar', ''),
        address=data.get('address', ''),
        address_ar=data.get('address_ar', ''),
        questionnaire_type=data.get('questionnaire_type'),
    )
    return jsonify(place.to_dict()), 201


@api_bp.route('/places')
@admin_required
def all_places():
    return jsonify([place.to_dict() for place in list_places()])


@api_bp.route('/places/slug/<slug>')
def place_by_slug(slug):
    """Public: the feedback page reads the place (and whether it is active) from here."""
    return jsonify(get_place_by_slug(slug).to_dict())


@api_bp.route('/places/<int:place_id>', methods=['PUT'])
@admin_required
def edit_place(place_id):
    data = request.get_json(silent=True) or {}
    update_place(place_id, data)
    return jsonify({'success': True})


@api_bp.route('/places/<int:place_id>', methods=['DELETE'])
@admin_required
def remove_place(place_id):
    delete_place(place_id)
    return jsonify({'success': True})


# feedback

def resolve_questionnaire_type(requested_type, place):
    """
    The type the caller asked for wins. Without one the place's own
    questionnaire is used, and without a place the default one.
    """
    if requested_type:
        return get_questionnaire(requested_type).type
    if place is not None and place.questionnaire_type:
        return get_questionnaire(place.questionnaire_type).type
    return DEFAULT_QUESTIONNAIRE_TYPE


@api_bp.route('/feedback', methods=['POST'])
def submit_feedback():
    data = request.get_json(silent=True)
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ValidationError('Feedback must be sent as a JSON object')

    for key in ('feedback_date', 'questionnaire_type', 'place_slug'):
        if data.get(key) is not None and not isinstance(data[key], str):
            raise ValidationError(f'{key} must be a string')

    place = None
    place_slug = data.get('place_slug')
    if place_slug:
        place = resolve_active_place(place_slug)

    requested_type = data.get('questionnaire_type')
    if requested_type and not is_known_type(requested_type):
        logger.warning('unknown questionnaire type %r, using %s', requested_type, DEFAULT_QUESTIONNAIRE_TYPE)

    config = get_questionnaire(resolve_questionnaire_type(requested_type, place))

    form = FeedbackForm(config, data)
    feedback_id = form.submit(store, feedback_date=data.get('feedback_date'), place=place)

    return jsonify({'id': feedback_id, 'success': True}), 201


@api_bp.route('/feedback')
@admin_required
def list_feedback():
    feedback_filter = FeedbackFilter.from_args(request.args)
    feedback_filter.questionnaire_type = allowed_questionnaire_type(feedback_filter.questionnaire_type)

    return jsonify(store.find(feedback_filter))


@api_bp.route('/feedback/<int:feedback_id>', methods=['DELETE'])
@admin_required
def delete_feedback(feedback_id):
    if not store.delete(feedback_id):
        raise NotFoundError(f'Feedback {feedback_id} not found')
    return jsonify({'success': True})


@api_bp.route('/feedback/stats')
@admin_required
def feedback_stats():
    feedback_filter = FeedbackFilter.from_args(request.args)
    feedback_filter.meal_time = None
    feedback_filter.rating = None
    feedback_filter.questionnaire_type = allowed_questionnaire_type(
        feedback_filter.questionnaire_type or DEFAULT_QUESTIONNAIRE_TYPE)

    submissions = store.find(feedback_filter)
    return jsonify(compute_stats(submissions, feedback_filter.questionnaire_type))


# admin

@api_bp.route('/admin/verify', methods=['POST'])
def verify_admin():
    data = request.get_json(silent=True) or {}

    role = verify_passcode(data.get('passcode'))
    if role is None:
        return jsonify({'valid': False})

    log_in(role)
    return jsonify({'valid': True, 'role': role})
