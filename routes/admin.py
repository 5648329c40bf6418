from flask import Blueprint, render_template, request, redirect, url_for, flash, current_app, send_file
from database import db
from data_tables.place import Place
from data_tables.school import School
from questionnaires.registry import DEFAULT_QUESTIONNAIRE_TYPE, MEAL_TIMES, get_questionnaire, list_selectable
from utils.auth import SCHOOL_ROLE, allowed_questionnaire_type, current_role, is_logged_in, log_in, log_out, verify_passcode
from utils.errors import FeedbackError, StoreUnavailable
from utils.excel_upload import process_school_file, check_if_excel_file
from utils.feedback_store import FeedbackFilter, SubmissionStore
from utils.labels import humanize
from utils.places import create_place, delete_place, list_places, set_place_active, update_place
from utils.stats_aggregator import compute_stats, summarize
from werkzeug.utils import secure_filename
import io
import logging
import os

# Create blueprint for admin routes
"""
a blueprint groups related pages together. This one groups all admin pages.
so all routes will have '/admin' in their name
"""
admin_bp = Blueprint('admin', __name__, url_prefix='/admin')

logger = logging.getLogger(__name__)

store = SubmissionStore()


@admin_bp.route('/login', methods=['GET', 'POST'])
def login():
    """Admin login page."""

    if request.method == 'GET':
        return render_template('admin_login.html')

    passcode = request.form.get('passcode', '').strip()
    role = verify_passcode(passcode)

    if role is None:
        flash('Invalid passcode', 'error')
        return redirect(url_for('admin.login'))

    log_in(role)
    flash('Login successful!', 'success')
    return redirect(url_for('admin.dashboard'))


@admin_bp.route('/logout')
def logout():
    """Logout admin."""
    log_out()
    flash('Logged out successfully', 'success')
    return redirect(url_for('admin.login'))


# Protect all admin routes
@admin_bp.before_request
def check_admin_login():
    """Check if admin is logged in before accessing any admin route."""

    # Allow login and logout routes without authentication
    if request.endpoint in ['admin.login', 'admin.logout']:
        return None

    if not is_logged_in():
        flash('Please login to access admin panel', 'error')
        return redirect(url_for('admin.login'))


def read_filter(default_type=None):
    """The filters from the query string, with school logins pinned to their questionnaire."""
    feedback_filter = FeedbackFilter.from_args(request.args)
    feedback_filter.questionnaire_type = allowed_questionnaire_type(
        feedback_filter.questionnaire_type or default_type)
    return feedback_filter


def filter_options():
    """What the filter bar needs: questionnaires and places this login may pick from."""
    questionnaires = list_selectable()
    if current_role() == SCHOOL_ROLE:
        questionnaires = [q for q in questionnaires if q[0] == 'school_canteen']

    try:
        places = list_places()
    except StoreUnavailable:
        places = []

    return {'questionnaires': questionnaires, 'places': places, 'meal_times': MEAL_TIMES}


# route 1) admin dashboard

@admin_bp.route('/')
def dashboard():
    """
   the admin dashboard shows the feedback list for one questionnaire

   URL: /admin/
    """

    feedback_filter = read_filter(DEFAULT_QUESTIONNAIRE_TYPE)
    config = get_questionnaire(feedback_filter.questionnaire_type)

    try:
        feedbacks = store.find(feedback_filter)
    except StoreUnavailable:
        flash('Failed to load feedback, please try again', 'error')
        feedbacks = []

    overall_field = config.overall_rating_field_id
    rating_counts = {
        'top': sum(1 for f in feedbacks if f.get(overall_field) == config.rating_values()[0]),
        'lowest': sum(1 for f in feedbacks if f.get(overall_field) == config.rating_values()[-1]),
    }

    return render_template('admin_dashboard.html',
                           config=config,
                           feedbacks=feedbacks,
                           feedback_filter=feedback_filter,
                           rating_counts=rating_counts,
                           **filter_options())


@admin_bp.route('/delete-feedback/<int:feedback_id>', methods=['POST'])
def delete_feedback(feedback_id):
    """Delete a single feedback."""
    try:
        if store.delete(feedback_id):
            flash('Feedback deleted successfully', 'success')
        else:
            flash('Feedback not found', 'error')
    except StoreUnavailable as error:
        flash(f'Error deleting feedback: {str(error)}', 'error')

    return redirect(request.referrer or url_for('admin.dashboard'))


# route 2) places

@admin_bp.route('/places', methods=['GET', 'POST'])
def places():
    """List places and add a new one."""

    if request.method == 'POST':
        try:
            place = create_place(
                name=request.form.get('name', ''),
                name_ar=request.form.get('name_ar', ''),
                address=request.form.get('address', ''),
                address_ar=request.form.get('address_ar', ''),
                questionnaire_type=request.form.get('questionnaire_type'),
            )
            flash(f'Place "{place.name}" created', 'success')
        except FeedbackError as error:
            flash(f'Error creating place: {str(error)}', 'error')

        return redirect(url_for('admin.places'))

    return render_template('places.html', **filter_options())


@admin_bp.route('/places/<int:place_id>/update', methods=['POST'])
def edit_place(place_id):
    """Save the edit form of a place."""
    changes = {key: request.form.get(key) for key in ('name', 'name_ar', 'address', 'address_ar', 'questionnaire_type')}

    # a place always keeps a name
    if not (changes['name'] or '').strip():
        changes.pop('name')

    try:
        place = update_place(place_id, changes)
        flash(f'Place "{place.name}" updated', 'success')
    except FeedbackError as error:
        flash(f'Error updating place: {str(error)}', 'error')

    return redirect(url_for('admin.places'))


@admin_bp.route('/places/<int:place_id>/toggle', methods=['POST'])
def toggle_place(place_id):
    """Toggle a place between active and inactive."""

    place = db.get_or_404(Place, place_id)

    try:
        place = set_place_active(place_id, not place.active)
        status_word = 'activated' if place.active else 'deactivated'
        flash(f'Place "{place.name}" has been {status_word}.', 'success')
    except FeedbackError as error:
        flash(f'Error updating place: {str(error)}', 'error')

    return redirect(url_for('admin.places'))


@admin_bp.route('/places/<int:place_id>/delete', methods=['POST'])
def remove_place(place_id):
    """
    Delete a place.
    Feedback sent through it stays, it keeps the place name it was saved with.
    """
    try:
        delete_place(place_id)
        flash('Place deleted successfully', 'success')
    except FeedbackError as error:
        flash(f'Error deleting place: {str(error)}', 'error')

    return redirect(url_for('admin.places'))


# route 3) analytics

def load_stats():
    feedback_filter = read_filter(DEFAULT_QUESTIONNAIRE_TYPE)
    feedback_filter.meal_time = None
    feedback_filter.rating = None

    submissions = store.find(feedback_filter)
    stats = compute_stats(submissions, feedback_filter.questionnaire_type)
    return feedback_filter, stats


@admin_bp.route('/analytics')
def analytics():
    """Charts and scores for one questionnaire."""

    try:
        feedback_filter, stats = load_stats()
    except StoreUnavailable:
        flash('Failed to load statistics, please try again', 'error')
        return redirect(url_for('admin.dashboard'))

    config = get_questionnaire(feedback_filter.questionnaire_type)

    return render_template('analytics.html',
                           config=config,
                           stats=stats,
                           summary=summarize(stats, config.type),
                           feedback_filter=feedback_filter,
                           **filter_options())


def excel_value(value):
    """A cell value for one answer. Anything that is not a single answer is written as text."""
    if value is None or value == '':
        return ''
    if isinstance(value, (str, int, float, bool)):
        return value
    return str(value)


@admin_bp.route('/export-excel')
def export_excel():
    """Export the filtered feedback to an Excel file, one row per feedback."""

    import openpyxl
    from openpyxl.styles import Font, PatternFill, Alignment

    feedback_filter = read_filter(DEFAULT_QUESTIONNAIRE_TYPE)
    config = get_questionnaire(feedback_filter.questionnaire_type)

    try:
        feedbacks = store.find(feedback_filter)
    except StoreUnavailable:
        flash('Failed to export feedback, please try again', 'error')
        return redirect(url_for('admin.dashboard'))

    wb = openpyxl.Workbook()
    ws = wb.active
    ws.title = 'Feedback'

    # the columns come from the questionnaire so every type exports its own fields
    envelope = ['id', 'feedback_date', 'created_at', 'place_name']
    field_ids = config.field_ids()
    ws.append(envelope + field_ids)

    # Style header row
    header_fill = PatternFill(start_color='1B3A5C', end_color='1B3A5C', fill_type='solid')
    header_font = Font(bold=True, color='FFFFFF')
    for cell in ws[1]:
        cell.fill = header_fill
        cell.font = header_font
        cell.alignment = Alignment(horizontal='center', vertical='center', wrap_text=True)

    for feedback in feedbacks:
        ws.append([feedback.get(key) for key in envelope] +
                  [excel_value(feedback.get(field_id)) for field_id in field_ids])

    for i in range(1, len(envelope) + len(field_ids) + 1):
        ws.column_dimensions[openpyxl.utils.get_column_letter(i)].width = 18

    # Wrap text on the free text column
    if config.free_text_field_id:
        text_column = len(envelope) + field_ids.index(config.free_text_field_id)
        ws.column_dimensions[openpyxl.utils.get_column_letter(text_column + 1)].width = 60
        for row in ws.iter_rows(min_row=2):
            row[text_column].alignment = Alignment(wrap_text=True, vertical='top')

    output = io.BytesIO()
    wb.save(output)
    output.seek(0)

    filename = f'{config.type}_feedback.xlsx'
    logger.info('exported %d feedback rows for %s', len(feedbacks), config.type)

    return send_file(
        output,
        mimetype='application/vnd.openxmlformats-officedocument.spreadsheetml.sheet',
        as_attachment=True,
        download_name=filename
    )


@admin_bp.route('/export-pdf')
def export_pdf():
    """Export the analytics summary to a PDF report."""

    from reportlab.lib.pagesizes import A4
    from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
    from reportlab.lib.units import cm
    from reportlab.lib import colors
    from reportlab.platypus import SimpleDocTemplate, Paragraph, Spacer, HRFlowable

    try:
        feedback_filter, stats = load_stats()
    except StoreUnavailable:
        flash('Failed to export statistics, please try again', 'error')
        return redirect(url_for('admin.analytics'))

    config = get_questionnaire(feedback_filter.questionnaire_type)
    summary = summarize(stats, config.type)

    output = io.BytesIO()
    doc = SimpleDocTemplate(
        output,
        pagesize=A4,
        leftMargin=2 * cm,
        rightMargin=2 * cm,
        topMargin=2 * cm,
        bottomMargin=2 * cm,
    )

    styles = getSampleStyleSheet()

    style_title = ParagraphStyle(
        'ReportTitle',
        parent=styles['Title'],
        fontSize=20,
        textColor=colors.HexColor('#1B3A5C'),
        spaceAfter=6,
    )
    style_subtitle = ParagraphStyle(
        'Subtitle',
        parent=styles['Normal'],
        fontSize=11,
        textColor=colors.HexColor('#555555'),
        spaceAfter=16,
    )
    style_section = ParagraphStyle(
        'Section',
        parent=styles['Heading1'],
        fontSize=14,
        textColor=colors.HexColor('#1B3A5C'),
        spaceBefore=18,
        spaceAfter=6,
    )
    style_stats = ParagraphStyle(
        'StatsLine',
        parent=styles['Normal'],
        fontSize=10,
        textColor=colors.HexColor('#444444'),
        spaceAfter=4,
        leftIndent=12,
    )

    story = []

    period = f"{feedback_filter.from_date or 'start'} to {feedback_filter.to_date or 'today'}"
    story.append(Paragraph(f'{humanize(config.type)} Feedback Report', style_title))
    story.append(Paragraph(
        f"Total Responses: {summary['total']} &nbsp;&nbsp;|&nbsp;&nbsp; "
        f"Satisfaction: {summary['satisfaction']}% &nbsp;&nbsp;|&nbsp;&nbsp; "
        f"Average: {summary['average_score']} &nbsp;&nbsp;|&nbsp;&nbsp; Period: {period}",
        style_subtitle
    ))
    story.append(HRFlowable(width='100%', thickness=1, color=colors.HexColor('#DDDDDD'), spaceAfter=10))

    story.append(Paragraph('OVERALL RATING', style_section))
    for row in summary['rating_distribution']:
        story.append(Paragraph(f"{humanize(row['rating'])}: {row['count']} ({row['percentage']}%)", style_stats))

    categories = summary['categories']
    if categories['scores']:
        story.append(Paragraph('CATEGORIES', style_section))
        if categories['best']:
            story.append(Paragraph(
                f"Best: {humanize(categories['best'])} ({categories['best_score']})", style_stats))
        if categories['worst']:
            story.append(Paragraph(
                f"Needs attention: {humanize(categories['worst'])} ({categories['worst_score']})", style_stats))
        story.append(Spacer(1, 6))
        for category, score in categories['scores'].items():
            story.append(Paragraph(f'{humanize(category)}: {score}', style_stats))

    if stats['by_field']:
        story.append(Paragraph('ANSWERS', style_section))
        for field_id, answers in stats['by_field'].items():
            counts = ', '.join(f'{humanize(answer)}: {count}' for answer, count in answers.items()) or 'no answers'
            story.append(Paragraph(f'{humanize(field_id)} &nbsp;&nbsp; {counts}', style_stats))

    story.append(Paragraph('SUGGESTIONS', style_section))
    story.append(Paragraph(f"{summary['with_suggestions']} responses included suggestions", style_stats))

    doc.build(story)
    output.seek(0)

    return send_file(
        output,
        mimetype='application/pdf',
        as_attachment=True,
        download_name=f'{config.type}_report.pdf'
    )


# route 4) school list

@admin_bp.route('/upload-schools', methods=['GET', 'POST'])
def upload_schools():
    """Upload the school list for the school canteen questionnaire."""

    if request.method == 'GET':
        return render_template('upload_schools.html', school_count=School.query.count())

    if 'file' not in request.files:
        flash('No file uploaded', 'error')
        return redirect(request.url)

    uploaded_file = request.files['file']

    if uploaded_file.filename == '':
        flash('No file selected', 'error')
        return redirect(request.url)

    if not check_if_excel_file(uploaded_file.filename):
        flash('Invalid file type. Please upload Excel (.xlsx or .xls)', 'error')
        return redirect(request.url)

    upload_folder = current_app.config['UPLOAD_FOLDER']
    os.makedirs(upload_folder, exist_ok=True)
    temp_file_path = os.path.join(upload_folder, secure_filename(uploaded_file.filename))

    try:
        uploaded_file.save(temp_file_path)
        schools = process_school_file(temp_file_path)

        if len(schools) == 0:
            flash('No schools found in Excel file', 'error')
            return redirect(request.url)

        # the new list replaces the old one
        School.query.delete()
        for school in schools:
            db.session.add(School(**school))
        db.session.commit()

        logger.info('imported %d schools', len(schools))
        flash(f'{len(schools)} schools imported!', 'success')
        return redirect(url_for('admin.upload_schools'))

    except Exception as error:
        db.session.rollback()
        logger.exception('Error importing schools')
        flash(f'Error importing schools: {str(error)}', 'error')
        return redirect(request.url)

    finally:
        if os.path.exists(temp_file_path):
            os.remove(temp_file_path)
