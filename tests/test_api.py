from database import db
from data_tables.feedback import Feedback
from data_tables.school import School
from utils.places import create_place, set_place_active


class TestSubmitFeedback:

    def test_food_feedback_shows_up_in_stats(self, client, admin_client, food_values):
        food_values['suggestions'] = ''
        response = client.post('/api/feedback', json=dict(food_values, feedback_date='2024-03-01'))

        assert response.status_code == 201
        feedback_id = response.get_json()['id']
        stored = db.session.get(Feedback, feedback_id)
        assert stored.answers['suggestions'] is None
        assert stored.questionnaire_type == 'food'

        stats = admin_client.get('/api/feedback/stats', query_string={
            'from_date': '2024-03-01', 'to_date': '2024-03-31', 'questionnaire_type': 'food',
        }).get_json()
        assert stats['total'] == 1
        assert stats['by_rating']['excellent'] == 1
        assert stats['with_suggestions'] == 0

    def test_type_defaults_to_food(self, client, food_values):
        response = client.post('/api/feedback', json=food_values)
        stored = db.session.get(Feedback, response.get_json()['id'])
        assert stored.questionnaire_type == 'food'

    def test_place_questionnaire_is_used_without_an_explicit_type(self, client, housekeeping_values):
        place = create_place('Laundry', questionnaire_type='housekeeping')

        response = client.post('/api/feedback', json=dict(housekeeping_values, place_slug=place.slug))

        assert response.status_code == 201
        stored = db.session.get(Feedback, response.get_json()['id'])
        assert stored.questionnaire_type == 'housekeeping'
        assert stored.place_id == place.id
        assert stored.place_name == 'Laundry'
        assert stored.place_slug == place.slug

    def test_explicit_type_wins_over_the_place(self, client, food_values):
        place = create_place('Laundry', questionnaire_type='housekeeping')

        response = client.post('/api/feedback', json=dict(food_values, place_slug=place.slug,
                                                          questionnaire_type='food'))

        stored = db.session.get(Feedback, response.get_json()['id'])
        assert stored.questionnaire_type == 'food'

    def test_inactive_place_is_rejected(self, client, food_values):
        place = create_place('Old Kitchen')
        set_place_active(place.id, False)

        response = client.post('/api/feedback', json=dict(food_values, place_slug=place.slug))

        assert response.status_code == 404
        assert response.get_json()['inactive'] is True
        assert Feedback.query.count() == 0

    def test_unknown_place_is_rejected(self, client, food_values):
        response = client.post('/api/feedback', json=dict(food_values, place_slug='nope'))
        assert response.status_code == 404
        assert Feedback.query.count() == 0

    def test_missing_required_field(self, client, food_values):
        food_values['food_aroma'] = ''

        response = client.post('/api/feedback', json=food_values)

        assert response.status_code == 400
        assert response.get_json()['field'] == 'food_aroma'
        assert Feedback.query.count() == 0

    def test_list_answer_is_rejected_and_stats_keep_working(self, client, admin_client, food_values):
        response = client.post('/api/feedback', json=dict(food_values, overall_experience=['excellent']))

        assert response.status_code == 400
        assert response.get_json()['field'] == 'overall_experience'
        assert Feedback.query.count() == 0

        stats = admin_client.get('/api/feedback/stats?questionnaire_type=food')
        assert stats.status_code == 200

    def test_stored_answers_that_are_not_text_do_not_break_stats(self, admin_client):
        db.session.add(Feedback(feedback_date='2024-03-01', questionnaire_type='food',
                                answers={'overall_experience': ['excellent'], 'meal_time': {'a': 1}}))
        db.session.commit()

        for url in ('/api/feedback/stats', '/admin/', '/admin/analytics', '/admin/export-excel', '/admin/export-pdf'):
            assert admin_client.get(url).status_code == 200

        assert admin_client.get('/api/feedback/stats').get_json()['by_rating'] == {}

    def test_body_must_be_an_object(self, client):
        response = client.post('/api/feedback', json=[1, 2])
        assert response.status_code == 400
        assert client.post('/api/feedback', json='excellent').status_code == 400
        assert Feedback.query.count() == 0

    def test_envelope_values_must_be_text(self, client, food_values):
        assert client.post('/api/feedback', json=dict(food_values, feedback_date=20240301)).status_code == 400
        assert client.post('/api/feedback', json=dict(food_values, questionnaire_type=['food'])).status_code == 400
        assert client.post('/api/feedback', json=dict(food_values, place_slug={'slug': 'x'})).status_code == 400
        assert Feedback.query.count() == 0

    def test_fields_of_other_questionnaires_are_not_stored(self, client, food_values):
        response = client.post('/api/feedback', json=dict(food_values, laundry_issues='missing_items'))
        stored = db.session.get(Feedback, response.get_json()['id'])
        assert 'laundry_issues' not in stored.answers


class TestStats:

    def test_untyped_and_food_feedback_are_counted_together(self, admin_client, food_values):
        db.session.add(Feedback(feedback_date='2024-03-02', questionnaire_type=None,
                                answers={'overall_experience': 'good'}))
        db.session.add(Feedback(feedback_date='2024-03-01', questionnaire_type='food',
                                answers={'overall_experience': 'excellent'}))
        db.session.commit()

        stats = admin_client.get('/api/feedback/stats?questionnaire_type=food').get_json()

        assert stats['total'] == 2
        assert stats['by_rating'] == {'good': 1, 'excellent': 1}
        assert stats['by_date'] == [{'date': '2024-03-01', 'count': 1}, {'date': '2024-03-02', 'count': 1}]

    def test_stats_default_to_food(self, admin_client):
        db.session.add(Feedback(feedback_date='2024-03-02', questionnaire_type=None,
                                answers={'overall_experience': 'good'}))
        db.session.commit()
        assert admin_client.get('/api/feedback/stats').get_json()['total'] == 1

    def test_housekeeping_choice_breakdown(self, client, admin_client, housekeeping_values):
        for answer in ('yes', 'yes', 'yes', 'no'):
            client.post('/api/feedback', json=dict(housekeeping_values, questionnaire_type='housekeeping',
                                                   toilet_clean_at_use=answer))

        stats = admin_client.get('/api/feedback/stats?questionnaire_type=housekeeping').get_json()

        assert stats['by_field']['toilet_clean_at_use'] == {'yes': 3, 'no': 1}
        assert stats['with_suggestions'] == 4

    def test_empty_stats(self, admin_client):
        stats = admin_client.get('/api/feedback/stats?questionnaire_type=school_canteen').get_json()
        assert stats == {
            'total': 0, 'by_rating': {}, 'by_meal_time': {}, 'by_category': {},
            'by_field': {}, 'by_date': [], 'with_suggestions': 0,
        }

    def test_school_login_only_sees_school_canteen(self, school_client, food_values, client):
        client.post('/api/feedback', json=food_values)
        stats = school_client.get('/api/feedback/stats?questionnaire_type=food').get_json()
        assert stats['total'] == 0


class TestAdminAccess:

    def test_admin_endpoints_need_a_login(self, client):
        assert client.get('/api/feedback').status_code == 401
        assert client.get('/api/feedback/stats').status_code == 401
        assert client.get('/api/places').status_code == 401
        assert client.post('/api/places', json={'name': 'x'}).status_code == 401
        assert client.delete('/api/feedback/1').status_code == 401

    def test_verify_admin_passcode(self, client):
        response = client.post('/api/admin/verify', json={'passcode': '54321'})
        assert response.get_json() == {'valid': True, 'role': 'admin'}
        assert client.get('/api/places').status_code == 200

    def test_verify_school_passcode(self, client):
        assert client.post('/api/admin/verify', json={'passcode': '67890'}).get_json()['role'] == 'school'

    def test_wrong_passcode(self, client):
        assert client.post('/api/admin/verify', json={'passcode': '00000'}).get_json() == {'valid': False}
        assert client.get('/api/places').status_code == 401


class TestPlacesApi:

    def test_create_list_update_delete(self, admin_client):
        response = admin_client.post('/api/places', json={'name': 'Canteen', 'questionnaire_type': 'school_canteen'})
        assert response.status_code == 201
        place = response.get_json()
        assert place['active'] is True
        assert len(place['slug']) == 12

        assert [p['name'] for p in admin_client.get('/api/places').get_json()] == ['Canteen']

        admin_client.put(f"/api/places/{place['id']}", json={'active': False})
        public = admin_client.get(f"/api/places/slug/{place['slug']}").get_json()
        assert public['active'] is False
        assert public['name'] == 'Canteen'

        assert admin_client.delete(f"/api/places/{place['id']}").status_code == 200
        assert admin_client.get(f"/api/places/slug/{place['slug']}").status_code == 404

    def test_name_is_required(self, admin_client):
        response = admin_client.post('/api/places', json={'name': ''})
        assert response.status_code == 400

    def test_place_by_slug_is_public(self, client):
        place = create_place('Kiosk')
        assert client.get(f'/api/places/slug/{place.slug}').get_json()['name'] == 'Kiosk'


class TestFeedbackApi:

    def test_list_and_delete(self, client, admin_client, food_values):
        feedback_id = client.post('/api/feedback', json=dict(food_values, meal_time='dinner')).get_json()['id']
        client.post('/api/feedback', json=food_values)

        assert len(admin_client.get('/api/feedback').get_json()) == 2
        dinner = admin_client.get('/api/feedback?meal_time=dinner').get_json()
        assert [f['id'] for f in dinner] == [feedback_id]

        assert admin_client.delete(f'/api/feedback/{feedback_id}').status_code == 200
        assert admin_client.delete(f'/api/feedback/{feedback_id}').status_code == 404
        assert len(admin_client.get('/api/feedback').get_json()) == 1


class TestSchemaApi:

    def test_questionnaire_list(self, client):
        types = [q['value'] for q in client.get('/api/questionnaires').get_json()]
        assert types == ['food', 'housekeeping', 'school_canteen']

    def test_questionnaire_schema(self, client):
        schema = client.get('/api/questionnaires/housekeeping').get_json()
        assert schema['overall_rating_field_id'] == 'housekeeping_overall'
        assert schema['sections'][1]['fields'][0]['options'][0] == {'value': 'yes', 'display_key': 'common.yes'}

    def test_unknown_questionnaire_falls_back(self, client):
        assert client.get('/api/questionnaires/toilet').get_json()['type'] == 'food'

    def test_schools(self, client):
        db.session.add(School(id='hawalli-0', name_en='Al Noor Primary'))
        db.session.add(School(id='jahra-1', name_en='Old School', active=False))
        db.session.commit()

        assert [s['id'] for s in client.get('/api/schools').get_json()] == ['hawalli-0']

    def test_health(self, client):
        assert client.get('/api/health').get_json()['status'] == 'ok'
