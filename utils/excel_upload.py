import re

import pandas as pd

"""
reads the school list spreadsheet for the school canteen questionnaire

each row has the full school name in the first column, usually written like
"[Hawalli-3] Al Noor Primary School for Girls | مدرسة النور الابتدائية للبنات"
an optional 'is_active' column switches schools off
"""

AREA_CODE = re.compile(r'^\[([^\]]+)\]')
AREA_CODE_PREFIX = re.compile(r'^\[[^\]]+\]\s*')


def make_school_id(full_name, row_number):
    """Build a short code for a school from the area code, or the name when there is none."""
    match = AREA_CODE.match(full_name)
    if match:
        base = re.sub(r'[/\\]', '-', re.sub(r'\s+', '-', match.group(1).lower()))
    else:
        base = re.sub(r'\s+', '-', re.sub(r'[^\w\s-]', '', full_name.lower()))[:30]
    return f'{base}-{row_number}'


def split_names(full_name):
    """
    Split the English and Arabic names.
    Returns (english, arabic), arabic is '' when there is none.
    """
    parts = full_name.split('|')
    if len(parts) == 2:
        return AREA_CODE_PREFIX.sub('', parts[0].strip()), parts[1].strip()

    parts = full_name.split('—', 1)
    if len(parts) == 2:
        return AREA_CODE_PREFIX.sub('', parts[0].strip()), parts[1].strip()

    return AREA_CODE_PREFIX.sub('', full_name.strip()), ''


def extract_area(full_name):
    match = AREA_CODE.match(full_name)
    if not match:
        return 'Unknown'

    code = match.group(1)
    area_match = re.match(r'^[^-]+-\s*\d+\]?\s*(.+)?$', code)
    if area_match and area_match.group(1):
        return area_match.group(1)
    return code.split('-')[0].strip()


def extract_gender(name):
    lowered = name.lower()
    if 'boys' in lowered or 'للبنين' in name:
        return 'Male'
    if 'girls' in lowered or 'للبنات' in name:
        return 'Female'
    return 'Mixed'


def extract_academic_stage(name):
    lowered = name.lower()
    if 'primary' in lowered or 'الابتدائية' in name:
        return 'Primary'
    if 'intermediate' in lowered or 'الإعدادية' in name or 'الاعدادية' in name:
        return 'Intermediate'
    if 'secondary' in lowered or 'الثانوية' in name:
        return 'Secondary'
    if 'institute' in lowered or 'center' in lowered or 'معهد' in name or 'مركز' in name:
        return 'Institute'
    return 'Primary'


def _is_active(value):
    if pd.isna(value):
        return True
    if isinstance(value, str):
        return value.strip().lower() not in {'false', 'no', '0', 'inactive'}
    return bool(value)


def process_school_file(file_path):
    """
    Read a school list spreadsheet.

    Parameters:
        file_path: Path to the Excel file

    Returns:
        List of school dicts ready to be saved, inactive rows left out
    """
    excel_data = pd.read_excel(file_path)

    first_column = excel_data.columns[0]
    has_active_column = 'is_active' in excel_data.columns

    schools = []

    for row_index, row_data in excel_data.iterrows():
        # skip empty rows
        if pd.isna(row_data[first_column]):
            continue

        full_name = str(row_data[first_column]).strip()
        if full_name == '' or full_name == 'nan':
            continue

        if has_active_column and not _is_active(row_data['is_active']):
            continue

        name_en, name_ar = split_names(full_name)
        both_names = f'{name_en} {name_ar}'

        schools.append({
            'id': make_school_id(full_name, len(schools)),
            'name_en': name_en,
            'name_ar': name_ar,
            'area': extract_area(full_name),
            'academic_stage': extract_academic_stage(both_names),
            'gender': extract_gender(both_names),
        })

    return schools


def check_if_excel_file(filename):
    """
    Check if a file is an Excel file (.xlsx or .xls).

    Parameters:
        filename: Name of the file

    Returns:
        True if Excel file, False otherwise
    """
    if '.' not in filename:
        return False

    file_extension = filename.rsplit('.', 1)[1].lower()

    return file_extension in {'xlsx', 'xls'}
