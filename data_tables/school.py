from database import db


class School(db.Model):
    """
    a school that can be picked on the school canteen questionnaire.
    the list is imported by an administrator from a spreadsheet
    """

    __tablename__ = 'schools'

    # short code built from the school name, e.g. 'hawalli-3'
    id = db.Column(db.String(60), primary_key=True)
    name_en = db.Column(db.String(300), nullable=False)
    name_ar = db.Column(db.String(300), default='')
    area = db.Column(db.String(100), default='Unknown')
    academic_stage = db.Column(db.String(30), default='Primary')  # Primary, Intermediate, Secondary, Institute
    gender = db.Column(db.String(10), default='Mixed')  # Male, Female, Mixed
    active = db.Column(db.Boolean, default=True)

    def to_dict(self):
        return {
            'id': self.id,
            'name_en': self.name_en,
            'name_ar': self.name_ar or '',
            'area': self.area,
            'academic_stage': self.academic_stage,
            'gender': self.gender,
            'active': self.active,
        }

    def __repr__(self):
        return f'<School {self.id}: {self.name_en[:50]}>'
