"""
Front-page dashboard figures.

Recomputed on every request. "Today" is the clinic's local date
(settings.TIME_ZONE), not the UTC date.
"""

from __future__ import annotations

from collections import Counter
from datetime import date
from decimal import Decimal
from typing import Any, Iterable, Optional

from django.db.models import DecimalField, Sum, Value
from django.db.models.functions import Coalesce
from django.utils import timezone

from neokids_backend.appointments.models import Appointment

ZERO = Decimal('0.00')


def summarize_appointments(rows: Iterable[tuple], today: Optional[date] = None) -> dict[str, Any]:
    """Single pass over ``(created_at, status, total)`` rows."""
    today = today or timezone.localdate()

    total = 0
    today_count = 0
    revenue = ZERO
    today_revenue = ZERO
    status_counts: Counter = Counter()

    for created_at, status, amount in rows:
        amount = Decimal(amount or 0)
        total += 1
        revenue += amount
        status_counts[status] += 1
        if timezone.localtime(created_at).date() == today:
            today_count += 1
            today_revenue += amount

    return {
        'total_appointments': total,
        'today_appointments': today_count,
        'total_revenue': revenue,
        'today_revenue': today_revenue,
        'status_counts': dict(status_counts),
    }


def appointment_rows():
    """(created_at, status, total) per appointment, total summed in the database."""
    return (
        Appointment.objects.order_by()
        .annotate(
            total=Coalesce(
                Sum('services__base_price'),
                Value(ZERO),
                output_field=DecimalField(max_digits=12, decimal_places=2),
            )
        )
        .values_list('created_at', 'status', 'total')
    )


def get_dashboard_stats() -> dict[str, Any]:
    stats = summarize_appointments(appointment_rows())
    counts = {status: 0 for status, _label in Appointment.STATUS_CHOICES}
    counts.update(stats['status_counts'])
    stats['status_counts'] = counts
    return stats
