from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple

"""
the building blocks of a questionnaire. every survey type is described with
these classes once, and the form, the submission and the statistics all read
from that same description
"""


class FieldKind(str, Enum):
    RATING_GRID = 'rating_grid'
    SINGLE_CHOICE = 'single_choice'
    FREE_TEXT = 'free_text'
    MEAL_TIME = 'meal_time'
    ENTITY_SELECT = 'entity_select'


@dataclass(frozen=True)
class RatingScaleOption:
    value: str
    display_key: str
    score: int


@dataclass(frozen=True)
class FieldOption:
    value: str
    display_key: str


@dataclass(frozen=True)
class QuestionField:
    """
    one question on the form. the id is also the key the answer is stored under
    """

    id: str
    display_key: str
    kind: FieldKind
    required: bool = False
    options: Tuple[FieldOption, ...] = ()
    show_label: bool = True


@dataclass(frozen=True)
class QuestionSection:
    """
    A group of questions shown together. The order of the sections is the
    order the form is displayed and validated in.
    """

    id: str
    title_key: str
    fields: Tuple[QuestionField, ...]
    description_key: Optional[str] = None


@dataclass(frozen=True)
class QuestionnaireConfig:
    type: str
    display_name_key: str
    welcome_key: str
    subtitle_key: str
    rating_scale: Tuple[RatingScaleOption, ...]
    sections: Tuple[QuestionSection, ...]
    overall_rating_field_id: str
    free_text_field_id: Optional[str] = None
    single_choice_field_ids: Tuple[str, ...] = ()
    category_field_ids: Tuple[str, ...] = ()

    # which breakdowns the statistics produce for this type
    has_category_breakdown: bool = False
    has_choice_breakdown: bool = False
    has_meal_time: bool = False

    _fields_by_id: Dict[str, QuestionField] = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        fields_by_id = {}
        for section in self.sections:
            for question_field in section.fields:
                fields_by_id[question_field.id] = question_field
        # frozen dataclass, so the lookup table has to be set this way
        object.__setattr__(self, '_fields_by_id', fields_by_id)

    def all_fields(self) -> List[QuestionField]:
        """Get all fields across all sections in order."""
        all_fields = []
        for section in self.sections:
            all_fields.extend(section.fields)
        return all_fields

    def field_ids(self) -> List[str]:
        return [question_field.id for question_field in self.all_fields()]

    def get_field(self, field_id) -> Optional[QuestionField]:
        return self._fields_by_id.get(field_id)

    def rating_values(self) -> List[str]:
        return [option.value for option in self.rating_scale]

    def rating_score_map(self) -> Dict[str, int]:
        return {option.value: option.score for option in self.rating_scale}

    def to_dict(self):
        """
        the full description of the questionnaire so a client can draw the
        form without keeping its own list of fields
        """
        return {
            'type': self.type,
            'display_name_key': self.display_name_key,
            'welcome_key': self.welcome_key,
            'subtitle_key': self.subtitle_key,
            'rating_scale': [
                {'value': option.value, 'display_key': option.display_key, 'score': option.score}
                for option in self.rating_scale
            ],
            'sections': [
                {
                    'id': section.id,
                    'title_key': section.title_key,
                    'description_key': section.description_key,
                    'fields': [
                        {
                            'id': question_field.id,
                            'display_key': question_field.display_key,
                            'kind': question_field.kind.value,
                            'required': question_field.required,
                            'show_label': question_field.show_label,
                            'options': [
                                {'value': option.value, 'display_key': option.display_key}
                                for option in question_field.options
                            ],
                        }
                        for question_field in section.fields
                    ],
                }
                for section in self.sections
            ],
            'overall_rating_field_id': self.overall_rating_field_id,
            'free_text_field_id': self.free_text_field_id,
            'single_choice_field_ids': list(self.single_choice_field_ids),
            'category_field_ids': list(self.category_field_ids),
            'has_category_breakdown': self.has_category_breakdown,
            'has_choice_breakdown': self.has_choice_breakdown,
            'has_meal_time': self.has_meal_time,
        }
