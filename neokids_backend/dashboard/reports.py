"""
Time series and period summaries for the reports screen.

Periods follow the appointment date in the clinic's local time. Start and end
dates are inclusive; periods without appointments are returned as zero.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Mapping, Optional

from django.db.models import Count, Sum
from django.db.models.functions import TruncDay, TruncMonth
from django.utils import timezone

from neokids_backend.appointments.models import Appointment, AppointmentService
from neokids_backend.dashboard.exceptions import InvalidReportParams

logger = logging.getLogger(__name__)

METRIC_REVENUE = 'revenue'
METRIC_APPOINTMENTS = 'appointments'
METRICS = (METRIC_REVENUE, METRIC_APPOINTMENTS)

UNIT_DAY = 'day'
UNIT_MONTH = 'month'
TIME_UNITS = (UNIT_DAY, UNIT_MONTH)

DEFAULT_RANGE_DAYS = 30
MAX_RANGE_DAYS = 366 * 3

ZERO = Decimal('0.00')
CENT = Decimal('0.01')


def _parse_date(value: Optional[str], field: str) -> Optional[date]:
    if not value:
        return None
    try:
        return datetime.strptime(value, '%Y-%m-%d').date()
    except ValueError:
        raise InvalidReportParams(f'{field} must be in format YYYY-MM-DD.', field=field)


def parse_date_range(params: Mapping[str, str]) -> tuple[date, date]:
    """Inclusive (start, end); defaults to the last 30 local days."""
    end = _parse_date(params.get('end_date'), 'end_date') or timezone.localdate()
    start = _parse_date(params.get('start_date'), 'start_date') or end - timedelta(days=DEFAULT_RANGE_DAYS - 1)

    if start > end:
        raise InvalidReportParams('start_date must not be after end_date.', field='start_date')
    if (end - start).days >= MAX_RANGE_DAYS:
        raise InvalidReportParams(f'Date range is limited to {MAX_RANGE_DAYS} days.', field='end_date')
    return start, end


def parse_timeseries_params(params: Mapping[str, str]) -> dict[str, Any]:
    metric = params.get('metric') or METRIC_REVENUE
    if metric not in METRICS:
        raise InvalidReportParams(f'metric must be one of {", ".join(METRICS)}.', field='metric')

    time_unit = params.get('time_unit') or UNIT_DAY
    if time_unit not in TIME_UNITS:
        raise InvalidReportParams(f'time_unit must be one of {", ".join(TIME_UNITS)}.', field='time_unit')

    start, end = parse_date_range(params)
    return {'metric': metric, 'start_date': start, 'end_date': end, 'time_unit': time_unit}


def _period_keys(start: date, end: date, time_unit: str) -> list[date]:
    keys = []
    if time_unit == UNIT_DAY:
        current = start
        while current <= end:
            keys.append(current)
            current += timedelta(days=1)
        return keys

    current = start.replace(day=1)
    while current <= end:
        keys.append(current)
        current = (current + timedelta(days=32)).replace(day=1)
    return keys


def _label(period: date, time_unit: str) -> str:
    if time_unit == UNIT_MONTH:
        return period.strftime('%Y-%m')
    return period.isoformat()


def get_timeseries_stats(*, metric: str, start_date: date, end_date: date, time_unit: str) -> list[dict[str, Any]]:
    """``[{period, value}]`` ordered by period, one entry per day or month."""
    trunc = TruncDay if time_unit == UNIT_DAY else TruncMonth

    if metric == METRIC_REVENUE:
        qs = (
            AppointmentService.objects.filter(
                appointment__appointment_date__date__gte=start_date,
                appointment__appointment_date__date__lte=end_date,
            )
            .annotate(period=trunc('appointment__appointment_date'))
            .values('period')
            .annotate(value=Sum('service__base_price'))
            .order_by('period')
        )
        empty = ZERO
    else:
        qs = (
            Appointment.objects.filter(
                appointment_date__date__gte=start_date,
                appointment_date__date__lte=end_date,
            )
            .annotate(period=trunc('appointment_date'))
            .values('period')
            .annotate(value=Count('id'))
            .order_by('period')
        )
        empty = 0

    values = {}
    for row in qs:
        period = timezone.localtime(row['period']).date()
        values[period] = row['value'] or empty

    return [
        {'period': _label(key, time_unit), 'value': values.get(key, empty)}
        for key in _period_keys(start_date, end_date, time_unit)
    ]


def get_report_summary(*, start_date: date, end_date: date) -> dict[str, Any]:
    """Totals for the period plus a per-service breakdown (highest revenue first)."""
    appointments = Appointment.objects.filter(
        appointment_date__date__gte=start_date,
        appointment_date__date__lte=end_date,
    )
    lines = AppointmentService.objects.filter(appointment__in=appointments)

    total_appointments = appointments.count()
    total_revenue = lines.aggregate(total=Sum('service__base_price'))['total'] or ZERO
    average_ticket = ZERO
    if total_appointments:
        average_ticket = (total_revenue / total_appointments).quantize(CENT, rounding=ROUND_HALF_UP)

    services = [
        {
            'service_id': row['service_id'],
            'code': row['service__code'],
            'name': row['service__name'],
            'count': row['count'],
            'revenue': row['revenue'] or ZERO,
        }
        for row in (
            lines.values('service_id', 'service__code', 'service__name')
            .annotate(count=Count('id'), revenue=Sum('service__base_price'))
            .order_by('-revenue', 'service__code')
        )
    ]

    logger.debug('Report summary %s..%s: %s appointments', start_date, end_date, total_appointments)
    return {
        'start_date': start_date,
        'end_date': end_date,
        'total_appointments': total_appointments,
        'total_revenue': total_revenue,
        'average_ticket': average_ticket,
        'services': services,
    }
