import pytest

from app import create_app
from config import TestConfig
from database import db
from utils.feedback_store import SubmissionStore


@pytest.fixture
def app():
    app = create_app(TestConfig)

    with app.app_context():
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def admin_client(app):
    client = app.test_client()
    with client.session_transaction() as session:
        session['admin_logged_in'] = True
        session['admin_role'] = 'admin'
    return client


@pytest.fixture
def school_client(app):
    client = app.test_client()
    with client.session_transaction() as session:
        session['admin_logged_in'] = True
        session['admin_role'] = 'school'
    return client


@pytest.fixture
def store(app):
    return SubmissionStore()


@pytest.fixture
def food_values():
    return {
        'meal_time': 'lunch',
        'food_temperature': 'good',
        'food_taste': 'excellent',
        'food_aroma': 'very_good',
        'menu_variety': 'average',
        'staff_attitude': 'excellent',
        'service_time': 'good',
        'cleanliness': 'very_good',
        'overall_experience': 'excellent',
        'suggestions': '',
    }


@pytest.fixture
def housekeeping_values():
    return {
        'housekeeping_overall': 'good',
        'toilet_clean_at_use': 'yes',
        'toilet_supplies_available': 'yes',
        'toilet_unpleasant_smell': 'no',
        'toilet_area_needs_cleaning': 'none',
        'toilet_cleaned_frequently': 'not_sure',
        'laundry_properly_cleaned': 'yes',
        'laundry_returned_on_time': 'no',
        'laundry_fresh_no_odor': 'yes',
        'laundry_ironing_folding': 'not_applicable',
        'laundry_issues': 'no_issues',
        'housekeeping_suggestions': 'More towels please',
    }
