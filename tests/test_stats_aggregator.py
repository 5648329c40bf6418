from utils.stats_aggregator import (
    category_scores,
    compute_stats,
    round_half_up,
    satisfaction_percentage,
    summarize,
    weighted_average,
)


def food(overall='good', **answers):
    submission = {
        'questionnaire_type': 'food',
        'feedback_date': '2024-03-01',
        'meal_time': 'lunch',
        'overall_experience': overall,
        'suggestions': None,
    }
    submission.update(answers)
    return submission


def test_no_feedback_gives_empty_stats():
    for questionnaire_type in ('food', 'housekeeping', 'school_canteen'):
        stats = compute_stats([], questionnaire_type)
        assert stats['total'] == 0
        assert stats['by_rating'] == {}
        assert stats['by_category'] == {}
        assert stats['by_field'] == {}
        assert stats['by_date'] == []
        assert satisfaction_percentage(stats, questionnaire_type) == 0
        assert summarize(stats, questionnaire_type)['average_score'] == 0


def test_overall_rating_tally_skips_missing_and_empty():
    submissions = [food('excellent'), food(''), food(None), {'feedback_date': '2024-03-01'}]
    stats = compute_stats(submissions, 'food')
    assert stats['total'] == 4
    assert stats['by_rating'] == {'excellent': 1}


def test_by_date_is_sorted_by_day():
    submissions = [
        food(feedback_date='2024-03-10'),
        food(feedback_date='2024-02-28'),
        food(feedback_date='2024-03-10'),
        food(feedback_date='2024-03-02'),
    ]
    assert compute_stats(submissions, 'food')['by_date'] == [
        {'date': '2024-02-28', 'count': 1},
        {'date': '2024-03-02', 'count': 1},
        {'date': '2024-03-10', 'count': 2},
    ]


def test_food_categories_start_at_zero_for_every_rating():
    stats = compute_stats([food(food_taste='excellent', cleanliness='not_a_rating')], 'food')

    assert stats['by_category']['food_taste'] == {
        'excellent': 1, 'very_good': 0, 'good': 0, 'average': 0, 'dissatisfied': 0,
    }
    assert sum(stats['by_category']['cleanliness'].values()) == 0
    assert len(stats['by_category']) == 7
    assert stats['by_field'] == {}


def test_food_meal_times():
    submissions = [food(meal_time='lunch'), food(meal_time='dinner'), food(meal_time='lunch'), food(meal_time='')]
    assert compute_stats(submissions, 'food')['by_meal_time'] == {'lunch': 2, 'dinner': 1}


def test_school_canteen_uses_its_own_categories():
    submission = {'questionnaire_type': 'school_canteen', 'feedback_date': '2024-03-01',
                  'sc_overall': 'very_good', 'sc_portion_size': 'average'}
    stats = compute_stats([submission], 'school_canteen')
    assert stats['by_rating'] == {'very_good': 1}
    assert stats['by_category']['sc_portion_size']['average'] == 1
    assert 'food_taste' not in stats['by_category']
    assert stats['by_meal_time'] == {}


def test_housekeeping_counts_only_answers_given():
    submissions = [
        {'questionnaire_type': 'housekeeping', 'feedback_date': '2024-03-01', 'toilet_clean_at_use': 'yes'},
        {'questionnaire_type': 'housekeeping', 'feedback_date': '2024-03-01', 'toilet_clean_at_use': 'yes'},
        {'questionnaire_type': 'housekeeping', 'feedback_date': '2024-03-02', 'toilet_clean_at_use': 'yes'},
        {'questionnaire_type': 'housekeeping', 'feedback_date': '2024-03-02', 'toilet_clean_at_use': 'no'},
    ]
    stats = compute_stats(submissions, 'housekeeping')

    assert stats['by_field']['toilet_clean_at_use'] == {'yes': 3, 'no': 1}
    assert stats['by_field']['laundry_issues'] == {}
    assert len(stats['by_field']) == 10
    assert stats['by_category'] == {}


def test_suggestions_counted_once_per_feedback_with_text():
    submissions = [food(suggestions='more salt'), food(suggestions=None), food(suggestions=''), food(suggestions='  ')]
    assert compute_stats(submissions, 'food')['with_suggestions'] == 1


def test_food_feedback_with_excellent_rating_and_no_suggestions():
    stats = compute_stats([food('excellent', suggestions=None)], 'food')
    assert stats['by_rating']['excellent'] == 1
    assert stats['with_suggestions'] == 0


def test_answers_that_are_not_text_are_skipped():
    submissions = [
        food(['excellent'], meal_time={'x': 1}, food_taste=['good'], suggestions=['hi']),
        food(5, feedback_date=20240301, food_taste=3),
        food('good'),
    ]
    stats = compute_stats(submissions, 'food')

    assert stats['total'] == 3
    assert stats['by_rating'] == {'good': 1}
    assert stats['by_meal_time'] == {'lunch': 2}
    assert sum(stats['by_category']['food_taste'].values()) == 0
    assert stats['with_suggestions'] == 0
    assert stats['by_date'] == [{'date': '2024-03-01', 'count': 2}]


def test_choice_answers_that_are_not_text_are_skipped():
    submissions = [
        {'questionnaire_type': 'housekeeping', 'feedback_date': '2024-03-01', 'toilet_clean_at_use': ['yes']},
        {'questionnaire_type': 'housekeeping', 'feedback_date': '2024-03-01', 'toilet_clean_at_use': 'yes'},
    ]
    assert compute_stats(submissions, 'housekeeping')['by_field']['toilet_clean_at_use'] == {'yes': 1}


def test_satisfaction_counts_top_three_ratings():
    submissions = [food(r) for r in ('excellent', 'excellent', 'good', 'average', 'dissatisfied')]
    stats = compute_stats(submissions, 'food')
    assert satisfaction_percentage(stats, 'food') == 60


def test_satisfaction_on_the_five_star_scale():
    submissions = [
        {'questionnaire_type': 'housekeeping', 'feedback_date': '2024-03-01', 'housekeeping_overall': rating}
        for rating in ('excellent', 'average', 'poor', 'very_poor')
    ]
    stats = compute_stats(submissions, 'housekeeping')
    assert satisfaction_percentage(stats, 'housekeeping') == 50


def test_percentages_round_halves_up():
    five_of_eight = [food('excellent')] * 5 + [food('dissatisfied')] * 3
    assert satisfaction_percentage(compute_stats(five_of_eight, 'food'), 'food') == 63

    one_of_eight = [food('excellent')] + [food('good')] * 7
    summary = summarize(compute_stats(one_of_eight, 'food'), 'food')
    assert summary['rating_distribution'][0]['percentage'] == 13


def test_round_half_up():
    assert round_half_up(62.5) == 63
    assert round_half_up(12.5) == 13
    assert round_half_up(0.5) == 1
    assert round_half_up(4.25, 1) == 4.3
    assert round_half_up(4.24, 1) == 4.2


def test_category_scores_round_halves_up():
    # food_taste (5 + 4) / 2 = 4.5, food_aroma (4 + 5 + 4 + 4) / 4 = 4.25
    stats = compute_stats([
        food(food_taste='excellent', food_aroma='very_good'),
        food(food_taste='very_good', food_aroma='excellent'),
        food(food_aroma='very_good'),
        food(food_aroma='very_good'),
    ], 'food')
    scores = category_scores(stats, 'food')
    assert scores['best'] == 'food_taste'
    assert scores['best_score'] == 4.5
    assert scores['worst'] == 'food_aroma'
    assert scores['worst_score'] == 4.3


def test_weighted_average():
    score_map = {'excellent': 5, 'good': 3, 'dissatisfied': 1}
    assert weighted_average({'excellent': 1, 'good': 1}, score_map) == 4
    assert weighted_average({'excellent': 0, 'good': 0}, score_map) == 0
    assert weighted_average({}, score_map) == 0


class TestCategoryScores:

    def test_best_and_worst(self):
        stats = compute_stats([
            food(food_taste='excellent', cleanliness='dissatisfied', food_aroma='good'),
        ], 'food')
        scores = category_scores(stats, 'food')
        assert scores['best'] == 'food_taste'
        assert scores['worst'] == 'cleanliness'
        assert scores['best_score'] == 5
        assert scores['worst_score'] == 1

    def test_ties_keep_the_first_category(self):
        stats = compute_stats([food(food_temperature='good', food_taste='good')], 'food')
        scores = category_scores(stats, 'food')
        assert scores['best'] == 'food_temperature'
        assert scores['worst'] == 'food_temperature'

    def test_unrated_categories_are_never_worst(self):
        stats = compute_stats([food(menu_variety='excellent')], 'food')
        scores = category_scores(stats, 'food')
        assert scores['worst'] == 'menu_variety'
        assert scores['scores']['food_taste'] == 0

    def test_nothing_rated(self):
        scores = category_scores(compute_stats([food()], 'food'), 'food')
        assert scores['best'] is None
        assert scores['worst'] is None

    def test_choice_questionnaires_have_no_categories(self):
        stats = compute_stats([{'questionnaire_type': 'housekeeping', 'feedback_date': '2024-03-01'}], 'housekeeping')
        assert category_scores(stats, 'housekeeping')['scores'] == {}


def test_summary():
    submissions = [food('excellent'), food('excellent'), food('dissatisfied', suggestions='cold')]
    summary = summarize(compute_stats(submissions, 'food'), 'food')

    assert summary['total'] == 3
    assert summary['satisfaction'] == 67
    assert summary['average_score'] == round(11 / 3, 2)
    assert summary['with_suggestions'] == 1
    assert summary['rating_distribution'][0] == {
        'rating': 'excellent', 'display_key': 'ratings.excellent', 'count': 2, 'percentage': 67,
    }
    assert [row['rating'] for row in summary['rating_distribution']] == [
        'excellent', 'very_good', 'good', 'average', 'dissatisfied',
    ]
