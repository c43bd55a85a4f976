'''
Filtering helpers shared by the record filtersets.

Historical rows may reference their region/majlis either by foreign key or
only by a stored name, so every location filter matches on both.
'''
import uuid

from django.db.models import Q

from core.periods import normalize_month

ALL_SENTINELS = ("", "all")


def is_pass_through(value):
    return value is None or str(value).strip().lower() in ALL_SENTINELS


def parse_uuid(value):
    try:
        return uuid.UUID(str(value))
    except (TypeError, ValueError, AttributeError):
        return None


def name_or_id_q(value, model, fk_field, name_field, name_attr="name"):
    '''
    Build a Q matching rows whose ``fk_field`` is the given id OR whose
    denormalized ``name_field`` equals (case-insensitively) the name of the
    referenced object. A value that is not an id is treated as a name.
    '''
    if is_pass_through(value):
        return Q()

    pk = parse_uuid(value)
    if pk is not None:
        q = Q(**{fk_field: pk})
        name = model.objects.filter(pk=pk).values_list(name_attr, flat=True).first()
        if name:
            q |= Q(**{f"{name_field}__iexact": name})
        return q

    value = str(value).strip()
    ids = list(model.objects.filter(**{f"{name_attr}__iexact": value}).values_list("pk", flat=True))
    q = Q(**{f"{name_field}__iexact": value})
    if ids:
        q |= Q(**{f"{fk_field}__in": ids})
    return q


def month_q(value, field):
    '''
    Month names are stored in full ("January"); accept numbers and short
    names too, falling back to a plain case-insensitive match.
    '''
    if is_pass_through(value):
        return Q()
    try:
        month = normalize_month(value)
    except ValueError:
        month = str(value).strip()
    return Q(**{f"{field}__iexact": month})


def year_q(value, field):
    if is_pass_through(value):
        return Q()
    try:
        return Q(**{field: int(str(value).strip())})
    except ValueError:
        return Q(pk__in=[])
