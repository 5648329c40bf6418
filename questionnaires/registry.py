from typing import Dict, List, Tuple

from questionnaires.schema import (
    FieldKind,
    FieldOption,
    QuestionField,
    QuestionnaireConfig,
    QuestionSection,
    RatingScaleOption,
)

"""
every questionnaire the system knows about. built once when the module is
imported and never changed afterwards

old feedback saved before there was more than one questionnaire has no type,
so anything unknown is treated as the default (food) questionnaire
"""

DEFAULT_QUESTIONNAIRE_TYPE = 'food'

MEAL_TIMES = ('breakfast', 'lunch', 'dinner')


# rating scales

FOOD_RATING_SCALE = (
    RatingScaleOption('excellent', 'ratings.excellent', 5),
    RatingScaleOption('very_good', 'ratings.very_good', 4),
    RatingScaleOption('good', 'ratings.good', 3),
    RatingScaleOption('average', 'ratings.average', 2),
    RatingScaleOption('dissatisfied', 'ratings.dissatisfied', 1),
)

FIVE_STAR_RATING_SCALE = (
    RatingScaleOption('excellent', 'ratings.excellent', 5),
    RatingScaleOption('good', 'ratings.good', 4),
    RatingScaleOption('average', 'ratings.average', 3),
    RatingScaleOption('poor', 'ratings.poor', 2),
    RatingScaleOption('very_poor', 'ratings.very_poor', 1),
)


# common options

YES_NO = (
    FieldOption('yes', 'common.yes'),
    FieldOption('no', 'common.no'),
)

YES_NO_NOTSURE = YES_NO + (FieldOption('not_sure', 'common.notSure'),)

YES_NO_NA = YES_NO + (FieldOption('not_applicable', 'common.notApplicable'),)


def _rating(field_id, display_key, show_label=True):
    return QuestionField(field_id, display_key, FieldKind.RATING_GRID, required=True, show_label=show_label)


def _choice(field_id, display_key, options):
    return QuestionField(field_id, display_key, FieldKind.SINGLE_CHOICE, required=True, options=options)


def _text(field_id, display_key):
    return QuestionField(field_id, display_key, FieldKind.FREE_TEXT)


# food feedback

FOOD = QuestionnaireConfig(
    type='food',
    display_name_key='questionnaire.food.name',
    welcome_key='feedback.welcome',
    subtitle_key='feedback.subtitle',
    rating_scale=FOOD_RATING_SCALE,
    sections=(
        QuestionSection('meal_time', 'feedback.mealTime', (
            QuestionField('meal_time', 'feedback.mealTime', FieldKind.MEAL_TIME, required=True,
                          options=tuple(FieldOption(meal, f'feedback.{meal}') for meal in MEAL_TIMES)),
        )),
        QuestionSection('food_menu', 'feedback.foodMenuRatings', (
            _rating('food_temperature', 'feedback.foodTemperature'),
            _rating('food_taste', 'feedback.foodTaste'),
            _rating('food_aroma', 'feedback.foodAroma'),
            _rating('menu_variety', 'feedback.menuVariety'),
        ), description_key='feedback.selectOne'),
        QuestionSection('service', 'feedback.serviceRatings', (
            _rating('staff_attitude', 'feedback.staffAttitude'),
            _rating('service_time', 'feedback.serviceTime'),
            _rating('cleanliness', 'feedback.cleanliness'),
        ), description_key='feedback.selectOne'),
        QuestionSection('overall', 'feedback.overallExperience', (
            _rating('overall_experience', '', show_label=False),
        )),
        QuestionSection('suggestions', 'feedback.suggestions', (
            _text('suggestions', 'feedback.suggestionsPlaceholder'),
        )),
    ),
    overall_rating_field_id='overall_experience',
    free_text_field_id='suggestions',
    category_field_ids=(
        'food_temperature', 'food_taste', 'food_aroma', 'menu_variety',
        'staff_attitude', 'service_time', 'cleanliness',
    ),
    has_category_breakdown=True,
    has_meal_time=True,
)


# housekeeping (laundry and toilet cleaning) feedback

HOUSEKEEPING = QuestionnaireConfig(
    type='housekeeping',
    display_name_key='questionnaire.housekeeping.name',
    welcome_key='questionnaire.housekeeping.welcome',
    subtitle_key='questionnaire.housekeeping.subtitle',
    rating_scale=FIVE_STAR_RATING_SCALE,
    sections=(
        QuestionSection('overall_rating', 'questionnaire.housekeeping.overallRating', (
            _rating('housekeeping_overall', '', show_label=False),
        )),
        QuestionSection('toilet_questions', 'questionnaire.housekeeping.toiletSection', (
            _choice('toilet_clean_at_use', 'questionnaire.housekeeping.cleanAtUse', YES_NO),
            _choice('toilet_supplies_available', 'questionnaire.housekeeping.suppliesAvailable', YES_NO),
            _choice('toilet_unpleasant_smell', 'questionnaire.housekeeping.unpleasantSmell', YES_NO),
            _choice('toilet_area_needs_cleaning', 'questionnaire.housekeeping.areaNeedsCleaning', (
                FieldOption('toilet_seat', 'questionnaire.housekeeping.toiletSeat'),
                FieldOption('floor', 'questionnaire.housekeeping.floor'),
                FieldOption('wash_basin', 'questionnaire.housekeeping.washBasin'),
                FieldOption('none', 'questionnaire.housekeeping.noneOption'),
            )),
            _choice('toilet_cleaned_frequently', 'questionnaire.housekeeping.cleanedFrequently', YES_NO_NOTSURE),
        )),
        QuestionSection('laundry_questions', 'questionnaire.housekeeping.laundrySection', (
            _choice('laundry_properly_cleaned', 'questionnaire.housekeeping.properlyCleaned', YES_NO),
            _choice('laundry_returned_on_time', 'questionnaire.housekeeping.returnedOnTime', YES_NO),
            _choice('laundry_fresh_no_odor', 'questionnaire.housekeeping.freshNoOdor', YES_NO),
            _choice('laundry_ironing_folding', 'questionnaire.housekeeping.ironingFoldingDone', YES_NO_NA),
            _choice('laundry_issues', 'questionnaire.housekeeping.issuesNoticed', (
                FieldOption('clothes_damaged', 'questionnaire.housekeeping.clothesDamaged'),
                FieldOption('stains_not_removed', 'questionnaire.housekeeping.stainsNotRemoved'),
                FieldOption('missing_items', 'questionnaire.housekeeping.missingItems'),
                FieldOption('no_issues', 'questionnaire.housekeeping.noIssues'),
            )),
        )),
        QuestionSection('suggestions', 'feedback.suggestions', (
            _text('housekeeping_suggestions', 'questionnaire.housekeeping.suggestionsPlaceholder'),
        )),
    ),
    overall_rating_field_id='housekeeping_overall',
    free_text_field_id='housekeeping_suggestions',
    single_choice_field_ids=(
        'toilet_clean_at_use', 'toilet_supplies_available', 'toilet_unpleasant_smell',
        'toilet_area_needs_cleaning', 'toilet_cleaned_frequently',
        'laundry_properly_cleaned', 'laundry_returned_on_time', 'laundry_fresh_no_odor',
        'laundry_ironing_folding', 'laundry_issues',
    ),
    has_choice_breakdown=True,
)


# school canteen feedback

SCHOOL_CANTEEN = QuestionnaireConfig(
    type='school_canteen',
    display_name_key='questionnaire.school_canteen.name',
    welcome_key='questionnaire.school_canteen.welcome',
    subtitle_key='questionnaire.school_canteen.subtitle',
    rating_scale=FOOD_RATING_SCALE,
    sections=(
        QuestionSection('school_selection', 'questionnaire.school_canteen.selectSchool', (
            QuestionField('sc_school', 'questionnaire.school_canteen.selectSchool',
                          FieldKind.ENTITY_SELECT, required=True),
        )),
        QuestionSection('food', 'questionnaire.school_canteen.foodQuality', (
            _rating('sc_food_taste', 'questionnaire.school_canteen.foodTaste'),
            _rating('sc_food_temperature', 'questionnaire.school_canteen.foodTemperature'),
            _rating('sc_food_freshness', 'questionnaire.school_canteen.foodFreshness'),
            _rating('sc_food_variety', 'questionnaire.school_canteen.foodVariety'),
            _rating('sc_portion_size', 'questionnaire.school_canteen.portionSize'),
        ), description_key='feedback.selectOne'),
        QuestionSection('hygiene', 'questionnaire.school_canteen.hygieneCleanliness', (
            _rating('sc_kitchen_cleanliness', 'questionnaire.school_canteen.kitchenCleanliness'),
            _rating('sc_dining_area', 'questionnaire.school_canteen.diningArea'),
            _rating('sc_food_handling', 'questionnaire.school_canteen.foodHandling'),
        ), description_key='feedback.selectOne'),
        QuestionSection('service', 'questionnaire.school_canteen.employeeBehavior', (
            _rating('sc_staff_behavior', 'questionnaire.school_canteen.staffBehavior'),
            _rating('sc_waiting_time', 'questionnaire.school_canteen.waitingTime'),
            _rating('sc_serving_quality', 'questionnaire.school_canteen.servingQuality'),
        ), description_key='feedback.selectOne'),
        QuestionSection('overall', 'questionnaire.school_canteen.overall', (
            _rating('sc_overall', '', show_label=False),
        )),
        QuestionSection('suggestions', 'questionnaire.school_canteen.suggestionsTitle', (
            _text('sc_suggestions', 'questionnaire.school_canteen.suggestionsPlaceholder'),
        ), description_key='questionnaire.school_canteen.suggestionsDesc'),
    ),
    overall_rating_field_id='sc_overall',
    free_text_field_id='sc_suggestions',
    category_field_ids=(
        'sc_food_taste', 'sc_food_temperature', 'sc_food_freshness', 'sc_food_variety', 'sc_portion_size',
        'sc_kitchen_cleanliness', 'sc_dining_area', 'sc_food_handling',
        'sc_staff_behavior', 'sc_waiting_time', 'sc_serving_quality',
    ),
    has_category_breakdown=True,
)


# declaration order is the order shown in pickers
QUESTIONNAIRES: Dict[str, QuestionnaireConfig] = {
    FOOD.type: FOOD,
    HOUSEKEEPING.type: HOUSEKEEPING,
    SCHOOL_CANTEEN.type: SCHOOL_CANTEEN,
}


def get_questionnaire(questionnaire_type) -> QuestionnaireConfig:
    """Look up a questionnaire, falling back to the default one for unknown or missing types."""
    return QUESTIONNAIRES.get(questionnaire_type) or QUESTIONNAIRES[DEFAULT_QUESTIONNAIRE_TYPE]


def is_known_type(questionnaire_type) -> bool:
    return questionnaire_type in QUESTIONNAIRES


def list_selectable() -> List[Tuple[str, str]]:
    return [(config.type, config.display_name_key) for config in QUESTIONNAIRES.values()]
