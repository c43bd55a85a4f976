"""
Field sets of the departmental report sections.

Every field has three names: the key clients send and receive (``key``), the
typed column on ``other_reports`` (``column``) and a ``kind`` that decides how
values are converted. Yes/No fields are native booleans in the typed columns
and "Yes"/"No"/None everywhere else (the ``report_data`` blob and the API).
"""

from decimal import Decimal, InvalidOperation
from typing import NamedTuple

INTEGER = "integer"
DECIMAL = "decimal"
YES_NO = "yes_no"

TRUTHY = ("1", "yes", "true")
FALSY = ("0", "no", "false")


class ReportField(NamedTuple):
    key: str
    column: str
    kind: str = INTEGER


TABLIGH = "tabligh"
TABLIGH_DIGITAL = "tabligh_digital"
UMUMI = "umumi"
TALIM_UL_QURAN = "talim_ul_quran"
TALIM = "talim"
ISAAR = "isaar"
SIHAT = "sihat"

SECTIONS = {
    TABLIGH: (
        ReportField("no_of_1_to_1_meeting", "one_to_one_meeting"),
        ReportField("no_under_tabligh", "under_tabligh"),
        ReportField("no_of_book_stall", "book_stall"),
        ReportField("no_of_literature_distributed", "literature_distributed"),
        ReportField("no_of_new_contacts", "new_contacts"),
        ReportField("no_of_exhibitions", "exhibitions"),
        ReportField("no_of_dain_e_ilallah", "dain_e_ilallah"),
        ReportField("no_of_baiats", "baiats"),
        ReportField("no_of_tabligh_days_held", "tabligh_days_held"),
    ),
    TABLIGH_DIGITAL: (
        ReportField("no_of_digital_content_created", "digital_content_created"),
        ReportField("merch_reflector_jackets", "merch_reflector_jackets"),
        ReportField("merch_tshirts", "merch_tshirts"),
        ReportField("merch_caps", "merch_caps"),
        ReportField("merch_stickers", "merch_stickers"),
    ),
    UMUMI: (
        ReportField("monthly_report_yes_no", "monthly_report", YES_NO),
        ReportField("no_of_amila_meeting", "amila_meeting"),
        ReportField("no_of_general_meeting", "general_meeting"),
        ReportField("visited_by_nazm_e_ala_yes_no", "visited_nazm_e_ala", YES_NO),
    ),
    TALIM_UL_QURAN: (
        ReportField("no_of_talim_ul_quran_held", "talim_ul_quran_held"),
        ReportField("no_of_ansar_attending", "ansar_attending"),
        ReportField("avg_no_of_ansar_joining_weekly_quran_class", "avg_ansar_joining_weekly_quran", DECIMAL),
    ),
    TALIM: (
        ReportField("no_of_ansar_reading_book", "ansar_reading_book"),
        ReportField("no_of_ansar_participated_in_exam", "ansar_participated_exam"),
    ),
    ISAAR: (
        ReportField("no_of_ansar_visiting_sick", "ansar_visiting_sick"),
        ReportField("no_of_ansar_visiting_elderly", "ansar_visiting_elderly"),
        ReportField("no_of_feed_the_hungry_program_held", "feed_hungry_program_held"),
        ReportField("no_of_ansar_participated_in_feed_the_hungry", "ansar_participated_feed_hungry"),
    ),
    SIHAT: (
        ReportField("no_of_ansar_regular_in_exercise", "ansar_regular_exercise"),
        ReportField("no_of_ansar_who_owns_bicycle", "ansar_owns_bicycle"),
    ),
}

SECTION_TITLES = {
    TABLIGH: "Tabligh",
    TABLIGH_DIGITAL: "Tabligh (Digital)",
    UMUMI: "Umumi",
    TALIM_UL_QURAN: "Talim-ul-Quran",
    TALIM: "Talim",
    ISAAR: "Isaar",
    SIHAT: "Dhahanat & Sihat-e-Jismani",
}

# keyed by month and year only, never by region/majlis
UNSCOPED_SECTIONS = (TABLIGH_DIGITAL,)

ALL_FIELDS = tuple(field for fields in SECTIONS.values() for field in fields)
TYPED_COLUMNS = tuple(field.column for field in ALL_FIELDS)


def fields_for(part):
    return SECTIONS.get(part, ())


def is_unscoped(part):
    return part in UNSCOPED_SECTIONS


def parse_yes_no(value):
    '''
    True/False for the accepted spellings (true/false, 1/0, yes/no in any
    case); None for anything else, including None and "".
    '''
    if isinstance(value, bool):
        return value
    if value is None:
        return None
    text = str(value).strip().lower()
    if text in TRUTHY:
        return True
    if text in FALSY:
        return False
    return None


def as_yes_no(value):
    parsed = parse_yes_no(value)
    if parsed is None:
        return None
    return "Yes" if parsed else "No"


def parse_number(value, kind):
    '''
    Numeric field value as int (or Decimal for decimal fields). Empty values
    give None; anything unparsable raises ValueError.
    '''
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    if isinstance(value, bool):
        raise ValueError(f"Expected a number, got {value!r}")
    try:
        number = Decimal(str(value).strip())
    except InvalidOperation:
        raise ValueError(f"Expected a number, got {value!r}")
    if not number.is_finite():
        raise ValueError(f"Expected a number, got {value!r}")
    if kind == DECIMAL:
        return number
    if number != number.to_integral_value():
        raise ValueError(f"Expected a whole number, got {value!r}")
    return int(number)


def _blob_number(number):
    if isinstance(number, Decimal):
        return int(number) if number == number.to_integral_value() else float(number)
    return number


def clean_details(part, values):
    '''
    The blob form of a section: exactly the section's keys, numbers as JSON
    numbers and yes/no fields as "Yes"/"No"/None. Keys of other sections are
    dropped; a bad number raises ValueError naming the key.
    '''
    details = {}
    for field in fields_for(part):
        value = values.get(field.key)
        if field.kind == YES_NO:
            details[field.key] = as_yes_no(value)
            continue
        try:
            details[field.key] = _blob_number(parse_number(value, field.kind))
        except ValueError as exc:
            raise ValueError(f"{field.key}: {exc}")
    return details


def details_to_columns(part, details):
    '''
    Typed column values for a section, converted from its blob form.
    '''
    columns = {}
    for field in fields_for(part):
        value = details.get(field.key)
        if field.kind == YES_NO:
            columns[field.column] = parse_yes_no(value)
        else:
            columns[field.column] = parse_number(value, field.kind)
    return columns


def columns_to_details(part, row, available=None):
    '''
    Blob form of the typed columns of ``row``; columns missing from the schema
    (not in ``available``) read as None.
    '''
    details = {}
    for field in fields_for(part):
        if available is not None and field.column not in available:
            details[field.key] = None
            continue
        value = getattr(row, field.column)
        if field.kind == YES_NO:
            details[field.key] = as_yes_no(value)
        else:
            details[field.key] = _blob_number(value)
    return details


def is_empty(details):
    return all(value is None for value in details.values())


def section_view(part, blob):
    '''
    The section's keys out of a stored blob. Older blobs may carry keys of
    every section; those are ignored.
    '''
    view = {}
    for field in fields_for(part):
        value = blob.get(field.key)
        view[field.key] = as_yes_no(value) if field.kind == YES_NO else value
    return view
