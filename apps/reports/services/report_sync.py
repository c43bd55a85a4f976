"""
Dual-write storage of departmental reports.

A report lives in two places:

- ``other_reports`` (``DepartmentalReport``): one row per report with the
  base key columns and, once migration 0002 has run, one typed column per
  section field.
- ``report_data`` (``ReportData``): the section values as a JSON blob,
  unique on (region, majlis, month, year, section).

Writes try the full normalized row first and fall back to the base columns
when the typed columns are missing, then always mirror the values into the
blob. Reads use the typed columns and fall back to the blob when they are
missing or empty.

The two tables are not written in one transaction. A crash between the
normalized write and the mirror leaves them out of step until the next save
of the same report or a run of ``reconcile`` (see ``apps.reports.tasks``).
"""

import logging
import re
import uuid
from typing import NamedTuple, Optional

from django.db import DatabaseError, connection, transaction
from django.utils import timezone

from apps.reports import sections
from apps.reports.models import DepartmentalReport, ReportData
from core.paging import fetch_in_pages

logger = logging.getLogger(__name__)

# SQLSTATE for "undefined column"
UNDEFINED_COLUMN = "42703"

# only consulted for drivers that report no SQLSTATE
SCHEMA_MISMATCH_PATTERNS = (
    re.compile(r"column .* does not exist", re.IGNORECASE),
    re.compile(r"missing column", re.IGNORECASE),
    re.compile(r"could not find column", re.IGNORECASE),
    re.compile(r"schema cache", re.IGNORECASE),
    re.compile(r"no such column", re.IGNORECASE),
    re.compile(r"has no column named", re.IGNORECASE),
)


class SchemaMismatch(Exception):
    """
    Raised before a normalized write when the table lacks columns it needs.
    """

    def __init__(self, missing):
        self.missing = tuple(sorted(missing))
        super().__init__(f"other_reports is missing columns: {', '.join(self.missing)}")


class ReportConflict(Exception):
    """
    Raised when an update would give a report the natural key of another one.
    """

    def __init__(self, key, existing_pk):
        self.key = key
        self.existing_pk = existing_pk
        super().__init__(f"A report for {key} already exists ({existing_pk}).")


def error_code(exc):
    for candidate in (exc, exc.__cause__):
        code = getattr(candidate, "sqlstate", None) or getattr(candidate, "pgcode", None)
        if code:
            return code
    return None


def is_schema_mismatch(exc):
    '''
    True when ``exc`` means the normalized table is missing columns. Structured
    signals win: our own ``SchemaMismatch``, then the driver's SQLSTATE; the
    message is only matched when the driver gave no code at all.
    '''
    if isinstance(exc, SchemaMismatch):
        return True
    code = error_code(exc)
    if code is not None:
        return code == UNDEFINED_COLUMN
    message = str(exc)
    return any(pattern.search(message) for pattern in SCHEMA_MISMATCH_PATTERNS)


class ReportKey(NamedTuple):
    '''
    Natural key of a report plus the location names stored beside the ids.
    '''
    part: str
    month: str
    year: int
    region_id: Optional[uuid.UUID] = None
    majlis_id: Optional[uuid.UUID] = None
    region_name: Optional[str] = None
    majlis_name: Optional[str] = None

    @classmethod
    def build(cls, part, month, year, region=None, majlis=None):
        if sections.is_unscoped(part):
            region = majlis = None
        return cls(
            part=part,
            month=month,
            year=int(year),
            region_id=region.pk if region else None,
            majlis_id=majlis.pk if majlis else None,
            region_name=region.name if region else None,
            majlis_name=majlis.name if majlis else None,
        )

    @classmethod
    def for_row(cls, row):
        return cls(
            part=row.part,
            month=row.month,
            year=row.year,
            region_id=row.region_id,
            majlis_id=row.majlis_id,
            region_name=row.region_name,
            majlis_name=row.majlis_name,
        )

    def natural(self):
        return (self.region_id, self.majlis_id, self.month.lower(), self.year, self.part)

    def __str__(self):
        scope = self.majlis_name or self.region_name or "national"
        return f"{self.part} {self.month} {self.year} ({scope})"


class NormalizedReportStore:
    '''
    Reads and writes of ``other_reports`` that never name a column the live
    table does not have.
    '''
    model = DepartmentalReport

    def available_columns(self):
        table = self.model._meta.db_table
        with connection.cursor() as cursor:
            description = connection.introspection.get_table_description(cursor, table)
        return {column.name for column in description}

    def typed_columns(self, available):
        return [column for column in sections.TYPED_COLUMNS if column in available]

    def queryset(self, available=None):
        if available is None:
            available = self.available_columns()
        return self.model.objects.only(*self.model.BASE_FIELDS, *self.typed_columns(available))

    def base_values(self, key):
        return {
            "part": key.part,
            "region_id": key.region_id,
            "majlis_id": key.majlis_id,
            "region_name": key.region_name,
            "majlis_name": key.majlis_name,
            "month": key.month,
            "year": key.year,
        }

    def find(self, key, available=None):
        return (
            self.queryset(available)
            .filter(
                part=key.part,
                month__iexact=key.month,
                year=key.year,
                region_id=key.region_id,
                majlis_id=key.majlis_id,
            )
            .order_by("created_at")
            .first()
        )

    def write_full(self, key, typed, available, pk=None):
        '''
        Base and typed columns in one statement. Columns of other sections are
        cleared so a row never carries values of a section it is not.
        '''
        missing = set(sections.TYPED_COLUMNS) - set(available)
        if missing:
            raise SchemaMismatch(missing)

        values = self.base_values(key)
        values.update({column: None for column in sections.TYPED_COLUMNS})
        values.update(typed)

        if pk is None:
            report = self.model(**values)
            report.save(force_insert=True)
            return report.pk

        self.model.objects.filter(pk=pk).update(updated_at=timezone.now(), **values)
        return pk

    def write_base(self, key, pk=None):
        values = self.base_values(key)
        if pk is not None:
            self.model.objects.filter(pk=pk).update(updated_at=timezone.now(), **values)
            return pk
        return self._insert(values)

    def _insert(self, values):
        '''
        INSERT naming only the given columns. ``Model.save`` would list every
        field of the model, typed columns included.
        '''
        now = timezone.now()
        values = {"id": uuid.uuid4(), **values, "created_at": now, "updated_at": now}

        opts = self.model._meta
        fields = [opts.get_field(name) for name in values]
        quote = connection.ops.quote_name
        sql = "INSERT INTO {} ({}) VALUES ({})".format(
            quote(opts.db_table),
            ", ".join(quote(field.column) for field in fields),
            ", ".join(["%s"] * len(fields)),
        )
        params = [field.get_db_prep_save(value, connection) for field, value in zip(fields, values.values())]
        with connection.cursor() as cursor:
            cursor.execute(sql, params)
        return values["id"]

    def update_typed(self, pk, typed):
        return self.model.objects.filter(pk=pk).update(**typed)

    def delete(self, pk):
        deleted, _ = self.model.objects.filter(pk=pk).delete()
        return deleted


class ReportDataStore:
    model = ReportData

    def lookup(self, key):
        return {
            "region_id": key.region_id,
            "majlis_id": key.majlis_id,
            "report_month": key.month,
            "report_year": key.year,
            "section_key": key.part,
        }

    def upsert(self, key, details):
        report, created = self.model.objects.update_or_create(
            **self.lookup(key),
            defaults={
                "details": details,
                "section_title": sections.SECTION_TITLES.get(key.part),
            },
        )
        return report

    def get(self, key):
        return self.model.objects.filter(**self.lookup(key)).first()

    def delete(self, key):
        deleted, _ = self.model.objects.filter(**self.lookup(key)).delete()
        return deleted

    def details_index(self, parts):
        '''
        Blob details of the given sections keyed like ``ReportKey.natural``.
        '''
        index = {}
        for blob in self.model.objects.filter(section_key__in=parts):
            natural = (blob.region_id, blob.majlis_id, blob.report_month.lower(), blob.report_year, blob.section_key)
            index.setdefault(natural, blob.details or {})
        return index


class ReportSynchronizer:
    '''
    Keeps ``other_reports`` and ``report_data`` in step.

    Usage:
        synchronizer = ReportSynchronizer()
        key = ReportKey.build("tabligh", "March", 2025, region, majlis)
        pk = synchronizer.save(key, {"no_of_baiats": 2})
        report = synchronizer.get(pk)
        report.details  # {"no_of_1_to_1_meeting": None, ..., "no_of_baiats": 2, ...}
    '''

    def __init__(self, normalized=None, blobs=None):
        self.normalized = normalized or NormalizedReportStore()
        self.blobs = blobs or ReportDataStore()

    # writes

    def save(self, key, values, pk=None, previous_key=None):
        '''
        Create or update the report for ``key`` and return its id.

        Without ``pk`` an existing row with the same natural key is updated, so
        saving the same report twice never duplicates it. With ``pk`` a change
        of natural key onto another report's key raises ReportConflict. Raises
        ValueError for unparsable field values and propagates database errors
        that are not a schema mismatch, or any error of the base-columns
        fallback.
        '''
        details = sections.clean_details(key.part, values)
        typed = sections.details_to_columns(key.part, details)
        available = self.normalized.available_columns()
        moved = previous_key is not None and previous_key.natural() != key.natural()

        if pk is None:
            existing = self.normalized.find(key, available)
            pk = existing.pk if existing else None
        elif moved:
            existing = self.normalized.find(key, available)
            if existing is not None and existing.pk != pk:
                raise ReportConflict(key, existing.pk)

        try:
            with transaction.atomic():
                pk = self.normalized.write_full(key, typed, available, pk)
        except (SchemaMismatch, DatabaseError) as exc:
            if not is_schema_mismatch(exc):
                raise
            logger.warning(f"Typed columns unavailable for {key}, writing base columns only: {exc}")
            with transaction.atomic():
                pk = self.normalized.write_base(key, pk)

        self.mirror(key, details)
        if moved:
            self.discard_blob(previous_key)
        return pk

    def mirror(self, key, details):
        try:
            with transaction.atomic():
                self.blobs.upsert(key, details)
        except Exception:
            logger.exception(f"Could not mirror {key} into report_data")

    def discard_blob(self, key):
        try:
            with transaction.atomic():
                self.blobs.delete(key)
        except Exception:
            logger.exception(f"Could not remove report_data for {key}")

    def delete(self, report):
        key = ReportKey.for_row(report)
        deleted = self.normalized.delete(report.pk)
        self.discard_blob(key)
        logger.info(f"Deleted departmental report {report.pk} ({key})")
        return deleted

    # reads

    def queryset(self, available=None):
        return self.normalized.queryset(available)

    def get(self, pk):
        available = self.normalized.available_columns()
        report = self.normalized.queryset(available).get(pk=pk)
        return self.attach_details([report], available)[0]

    def attach_details(self, reports, available=None):
        '''
        Set ``details`` (and ``details_source``) on each report: the typed
        columns, or the blob of the same natural key when those are all empty.
        '''
        if available is None:
            available = self.normalized.available_columns()
        index = None
        for report in reports:
            details = sections.columns_to_details(report.part, report, available)
            source = "columns"
            if sections.is_empty(details):
                if index is None:
                    index = self.blobs.details_index({row.part for row in reports})
                blob = index.get(ReportKey.for_row(report).natural())
                if blob is not None:
                    details = sections.section_view(report.part, blob)
                    source = "report_data"
            report.details = details
            report.details_source = source
        return reports

    # repair

    def reconcile(self):
        '''
        Repair rows left out of step by an interrupted save: typed columns that
        are empty while the blob has values are filled from the blob, and
        reports with values but no blob get one. Returns the counts.
        '''
        available = self.normalized.available_columns()
        missing = set(sections.TYPED_COLUMNS) - available
        if missing:
            logger.info(f"Skipping reconciliation, other_reports lacks {len(missing)} typed columns")
            return {"columns_backfilled": 0, "blobs_restored": 0}

        backfilled = restored = 0
        rows = fetch_in_pages(self.normalized.queryset(available).order_by("pk"))
        index = self.blobs.details_index(set(sections.SECTIONS))
        for row in rows:
            key = ReportKey.for_row(row)
            details = sections.columns_to_details(row.part, row, available)
            blob = index.get(key.natural())

            if sections.is_empty(details):
                if not blob:
                    continue
                try:
                    typed = sections.details_to_columns(row.part, sections.section_view(row.part, blob))
                except ValueError as exc:
                    logger.warning(f"Cannot backfill {key} from report_data: {exc}")
                    continue
                if any(value is not None for value in typed.values()):
                    self.normalized.update_typed(row.pk, typed)
                    backfilled += 1
            elif blob is None:
                self.mirror(key, details)
                restored += 1

        logger.info(f"Reconciled departmental reports: {backfilled} backfilled, {restored} blobs restored")
        return {"columns_backfilled": backfilled, "blobs_restored": restored}
