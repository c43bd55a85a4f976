import calendar

MONTH_NAMES = [name for name in calendar.month_name if name]


def normalize_month(value):
    '''
    Accept a month name (any case, full or three letter) or number 1-12 and
    return the full English month name. Raises ValueError otherwise.
    '''
    if value is None:
        raise ValueError("Month is required")
    text = str(value).strip()
    if text.isdigit():
        number = int(text)
        if 1 <= number <= 12:
            return MONTH_NAMES[number - 1]
        raise ValueError(f"Invalid month: {value}")
    for name in MONTH_NAMES:
        if text.lower() in (name.lower(), name[:3].lower()):
            return name
    raise ValueError(f"Invalid month: {value}")
