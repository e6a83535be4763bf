"""
Base service class for Reports module

Provides common functionality for all report services: the database
session, the reference clock used for day arithmetic and the generic
query stage that turns a ReportFilter into a SQLAlchemy query.
"""

import enum
import logging
from datetime import datetime
from typing import Any, Iterable, List, Optional, Sequence, Type

from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..exceptions import DataUnavailable
from ..schemas import ReportFilter
from ..utils.calculations import to_utc_naive, utc_now

# Importing the model modules registers every mapper the reports touch
from erp_analytics.modules.customers import models as customer_models  # noqa: F401
from erp_analytics.modules.invoices import models as invoice_models  # noqa: F401
from erp_analytics.modules.products import models as product_models  # noqa: F401
from erp_analytics.modules.suppliers import models as supplier_models  # noqa: F401

logger = logging.getLogger(__name__)


class BaseReportService:
    """Base service class for all report services"""

    def __init__(self, db: Session, now: Optional[datetime] = None):
        self.db = db
        self.now = to_utc_naive(now) if now is not None else utc_now()

    def _fetch(
        self,
        model: Type,
        report_filter: Optional[ReportFilter] = None,
        *,
        date_field=None,
        status_field=None,
        id_field=None,
        location_fields: Sequence = (),
        criteria: Sequence = (),
        includes: Sequence = (),
        order_by: Sequence = (),
        limit: Optional[int] = None
    ) -> List[Any]:
        """
        Fetch records of one entity kind with eager associations.

        Args:
            model: Mapped class to query
            report_filter: Declarative filter; absent options impose no constraint
            date_field: Column the date range applies to
            status_field: Column the status set applies to
            id_field: Column the id match applies to
            location_fields: Columns any of which may match the location
            criteria: Extra fixed SQLAlchemy criteria of the report
            includes: Loader options (selectinload/joinedload)
            order_by: Explicit ordering
            limit: Optional row cap

        Raises:
            DataUnavailable: If the store cannot be queried
        """
        try:
            query = self.db.query(model)

            if includes:
                query = query.options(*includes)
            if criteria:
                query = query.filter(*criteria)
            if report_filter is not None:
                query = self._apply_filter(
                    query,
                    report_filter,
                    date_field=date_field,
                    status_field=status_field,
                    id_field=id_field,
                    location_fields=location_fields
                )
            if order_by:
                query = query.order_by(*order_by)
            if limit is not None:
                query = query.limit(limit)

            return query.all()
        except SQLAlchemyError as e:
            logger.error(f"Error fetching {model.__tablename__}: {e}")
            raise DataUnavailable(model.__tablename__) from e

    def _apply_filter(
        self,
        query,
        report_filter: ReportFilter,
        *,
        date_field=None,
        status_field=None,
        id_field=None,
        location_fields: Sequence = ()
    ):
        """Apply the options of a ReportFilter to the columns a report names"""
        if date_field is not None:
            query = self._apply_date_filter(
                query, date_field, report_filter.date_from, report_filter.date_to
            )

        if status_field is not None and report_filter.status_in is not None:
            query = query.filter(status_field.in_(report_filter.status_in))

        if id_field is not None and report_filter.id_equals:
            query = query.filter(id_field == report_filter.id_equals)

        if location_fields and report_filter.location_equals:
            query = query.filter(
                or_(*[field == report_filter.location_equals for field in location_fields])
            )

        return query

    def _apply_date_filter(
        self,
        query,
        date_field,
        start_date: Optional[datetime],
        end_date: Optional[datetime]
    ):
        """Apply an inclusive date range filter; either bound may be open"""
        if start_date is not None:
            query = query.filter(date_field >= start_date)
        if end_date is not None:
            query = query.filter(date_field <= end_date)
        return query

    @staticmethod
    def _known_statuses(
        enum_cls: Type[enum.Enum],
        values: Optional[Iterable[Any]]
    ) -> Optional[List[enum.Enum]]:
        """
        Keep only values naming a member of enum_cls.

        Returns None (no constraint) when nothing valid remains, so an
        unknown status query parameter is ignored rather than rejected.
        """
        if not values:
            return None
        members = [
            value if isinstance(value, enum_cls) else enum_cls.__members__.get(str(value))
            for value in values
        ]
        members = [member for member in members if member is not None]
        return members or None
