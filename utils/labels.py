def humanize(value):
    """'food_temperature' or 'feedback.foodTemperature' -> 'Food Temperature'"""
    if not value:
        return ''
    last_part = str(value).rsplit('.', 1)[-1]
    spaced = ''.join(f' {char}' if char.isupper() else char for char in last_part)
    return spaced.replace('_', ' ').strip().title()
