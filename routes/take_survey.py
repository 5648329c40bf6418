import logging
from datetime import date

from flask import Blueprint, render_template, request, redirect, url_for

from data_tables.school import School
from questionnaires.registry import MEAL_TIMES, get_questionnaire
from questionnaires.schema import FieldKind
from utils.errors import FieldError, NotFoundError, PlaceInactiveError, StoreUnavailable
from utils.feedback_store import SubmissionStore
from utils.form_engine import FeedbackForm
from utils.places import resolve_active_place

survey_bp = Blueprint('survey', __name__, url_prefix='/feedback')

logger = logging.getLogger(__name__)

store = SubmissionStore()


def render_form(form, place=None, error=None, status=200):
    """Show the questionnaire, with the values filled in so far."""

    schools = []
    if any(question_field.kind == FieldKind.ENTITY_SELECT for question_field in form.config.all_fields()):
        schools = School.query.filter_by(active=True).order_by(School.name_en).all()

    error_field = error.field_id if isinstance(error, FieldError) else None
    error_message = error.message if isinstance(error, FieldError) else error

    return render_template('feedback_form.html',
                           config=form.config,
                           values=form.values,
                           place=place,
                           schools=schools,
                           meal_times=MEAL_TIMES,
                           feedback_date=request.form.get('feedback_date') or date.today().isoformat(),
                           error=error_message,
                           error_field=error_field), status


def handle_form(form, place=None):
    """GET shows the empty form, POST validates and saves it."""

    if request.method == 'GET':
        return render_form(form, place)

    for field_id in form.values:
        if field_id in request.form:
            form.set_value(field_id, request.form.get(field_id, ''))

    try:
        form.submit(store, feedback_date=request.form.get('feedback_date') or None, place=place)

    except FieldError as error:
        # re-render the same form with the message, no redirect so nothing typed is lost
        return render_form(form, place, error=error)

    except StoreUnavailable:
        logger.warning('feedback for %s could not be saved', form.config.type)
        return render_form(form, place, error='Failed to submit feedback. Please try again.', status=503)

    return redirect(url_for('survey.thank_you', again=request.full_path.rstrip('?')))


@survey_bp.route('/', methods=['GET', 'POST'])
def general_feedback():
    """Feedback without a place. '?type=' picks the questionnaire."""

    config = get_questionnaire(request.args.get('type'))
    return handle_form(FeedbackForm(config))


@survey_bp.route('/<slug>', methods=['GET', 'POST'])
def place_feedback(slug):
    """Feedback through a place's link, using the place's questionnaire."""

    try:
        place = resolve_active_place(slug)

    except PlaceInactiveError:
        return render_template('place_unavailable.html', reason='inactive'), 404

    except NotFoundError:
        return render_template('place_unavailable.html', reason='not_found'), 404

    except StoreUnavailable:
        return render_template('place_unavailable.html', reason='network'), 503

    config = get_questionnaire(place.questionnaire_type)
    return handle_form(FeedbackForm(config), place)


@survey_bp.route('/thank-you')
def thank_you():
    """Thank you page, with a link back to an empty form for new feedback."""

    again = request.args.get('again', '')
    if not again.startswith('/feedback'):
        again = url_for('survey.general_feedback')

    return render_template('thank_you.html', again=again)
