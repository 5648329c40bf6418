from decimal import Decimal, ROUND_HALF_UP

from questionnaires.registry import get_questionnaire

"""
statistics for the dashboards. the caller has already picked the feedback
(place, dates, questionnaire), this only counts

what gets counted depends on the questionnaire:
- rating questionnaires (food, school canteen) count every rating for each
  category, including ratings nobody gave
- choice questionnaires (housekeeping) count the answers given to each choice question

stored answers are not checked again when they are read, so anything that is
not a non-empty string is left out of the counts like a missing answer
"""

# best starts below any real average, worst above any real average
BEST_START = 0
WORST_START = 6


def round_half_up(value, digits=0):
    """Round .5 away from zero, 62.5 -> 63 (the built-in round gives 62)."""
    rounded = Decimal(value).quantize(Decimal(1).scaleb(-digits), rounding=ROUND_HALF_UP)
    return int(rounded) if digits == 0 else float(rounded)


def has_text(value):
    return isinstance(value, str) and value.strip() != ''


def answer(submission, field_id):
    """The answer stored for a field, or None when it is missing, empty or not text."""
    value = submission.get(field_id)
    return value if has_text(value) else None


def empty_stats():
    return {
        'total': 0,
        'by_rating': {},
        'by_meal_time': {},
        'by_category': {},
        'by_field': {},
        'by_date': [],
        'with_suggestions': 0,
    }


def compute_stats(submissions, questionnaire_type=None):
    submissions = list(submissions)
    config = get_questionnaire(questionnaire_type)

    stats = empty_stats()
    stats['total'] = len(submissions)

    if stats['total'] == 0:
        return stats

    # feedback per day, sorted on the YYYY-MM-DD text
    by_date = {}
    for submission in submissions:
        feedback_date = answer(submission, 'feedback_date')
        if feedback_date:
            by_date[feedback_date] = by_date.get(feedback_date, 0) + 1
    stats['by_date'] = [{'date': feedback_date, 'count': count} for feedback_date, count in sorted(by_date.items())]

    overall_field = config.overall_rating_field_id
    for submission in submissions:
        rating = answer(submission, overall_field)
        if rating:
            stats['by_rating'][rating] = stats['by_rating'].get(rating, 0) + 1

    if config.free_text_field_id:
        stats['with_suggestions'] = sum(
            1 for submission in submissions if answer(submission, config.free_text_field_id)
        )

    if config.has_meal_time:
        for submission in submissions:
            meal_time = answer(submission, 'meal_time')
            if meal_time:
                stats['by_meal_time'][meal_time] = stats['by_meal_time'].get(meal_time, 0) + 1

    if config.has_category_breakdown:
        rating_values = config.rating_values()
        by_category = {
            category: {rating: 0 for rating in rating_values}
            for category in config.category_field_ids
        }

        for submission in submissions:
            for category in config.category_field_ids:
                rating = answer(submission, category)
                if rating in by_category[category]:
                    by_category[category][rating] += 1

        stats['by_category'] = by_category

    if config.has_choice_breakdown:
        by_field = {field_id: {} for field_id in config.single_choice_field_ids}

        for submission in submissions:
            for field_id in config.single_choice_field_ids:
                choice = answer(submission, field_id)
                if choice:
                    by_field[field_id][choice] = by_field[field_id].get(choice, 0) + 1

        stats['by_field'] = by_field

    return stats


def weighted_average(tally, score_map):
    """Average score of a rating tally, 0 when nothing was rated."""
    total = sum(tally.values())
    if total == 0:
        return 0

    weighted_sum = sum(score_map.get(rating, 0) * count for rating, count in tally.items())
    return weighted_sum / total


def category_scores(stats, questionnaire_type=None):
    """
    The average score of every category plus the best and worst one.

    Ties keep the category listed first. A category nobody rated is never
    the worst one.
    """
    config = get_questionnaire(questionnaire_type)
    score_map = config.rating_score_map()
    by_category = stats.get('by_category') or {}

    scores = {}
    best, worst = None, None
    best_score, worst_score = BEST_START, WORST_START

    if not by_category:
        return {'scores': scores, 'best': best, 'worst': worst, 'best_score': 0, 'worst_score': 0}

    for category in config.category_field_ids:
        tally = by_category.get(category) or {}
        rated = sum(tally.values())
        score = weighted_average(tally, score_map)
        scores[category] = round_half_up(score, 2)

        if score > best_score:
            best_score = score
            best = category
        if score < worst_score and rated > 0:
            worst_score = score
            worst = category

    return {
        'scores': scores,
        'best': best,
        'worst': worst,
        'best_score': round_half_up(best_score, 1),
        'worst_score': round_half_up(worst_score, 1) if worst else 0,
    }


def satisfaction_percentage(stats, questionnaire_type=None):
    """
    share of feedback whose overall rating is one of the top three on the
    scale (or the whole scale if it is shorter than three)
    """
    total = stats.get('total') or 0
    if total == 0:
        return 0

    rating_values = get_questionnaire(questionnaire_type).rating_values()
    top_n = min(3, len(rating_values))
    by_rating = stats.get('by_rating') or {}

    positive = sum(by_rating.get(rating, 0) for rating in rating_values[:top_n])
    return round_half_up(positive / total * 100)


def summarize(stats, questionnaire_type=None):
    """Everything the analytics page and the PDF report show besides the raw counts."""
    config = get_questionnaire(questionnaire_type)
    total = stats.get('total') or 0
    by_rating = stats.get('by_rating') or {}

    rating_distribution = []
    for option in config.rating_scale:
        count = by_rating.get(option.value, 0)
        rating_distribution.append({
            'rating': option.value,
            'display_key': option.display_key,
            'count': count,
            'percentage': round_half_up(count / total * 100) if total else 0,
        })

    return {
        'questionnaire_type': config.type,
        'total': total,
        'satisfaction': satisfaction_percentage(stats, config.type),
        'average_score': round_half_up(weighted_average(by_rating, config.rating_score_map()), 2),
        'with_suggestions': stats.get('with_suggestions', 0),
        'rating_distribution': rating_distribution,
        'categories': category_scores(stats, config.type),
    }
