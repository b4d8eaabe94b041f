from decimal import Decimal

from django.conf import settings
from django.db import models
from django.utils import timezone


def compute_total(prices) -> Decimal:
    """Sum of service prices; the order of ``prices`` does not matter."""
    return sum((Decimal(p) for p in prices), Decimal('0.00'))


class Appointment(models.Model):
    """One patient visit booking one or more catalog services.

    The total is always derived from the linked services' current base
    price; no price snapshot is stored.

    Lab flow (Kanban):
        awaiting_collection -> in_analysis -> awaiting_report -> completed
    """

    STATUS_SCHEDULED = 'scheduled'
    STATUS_AWAITING_COLLECTION = 'awaiting_collection'
    STATUS_IN_ANALYSIS = 'in_analysis'
    STATUS_AWAITING_REPORT = 'awaiting_report'
    STATUS_COMPLETED = 'completed'
    STATUS_CANCELED = 'canceled'
    STATUS_NO_SHOW = 'no-show'

    STATUS_CHOICES = [
        (STATUS_SCHEDULED, 'Agendado'),
        (STATUS_AWAITING_COLLECTION, 'Aguardando Coleta'),
        (STATUS_IN_ANALYSIS, 'Em Análise'),
        (STATUS_AWAITING_REPORT, 'Aguardando Laudo'),
        (STATUS_COMPLETED, 'Finalizado'),
        (STATUS_CANCELED, 'Cancelado'),
        (STATUS_NO_SHOW, 'Não Compareceu'),
    ]

    LAB_FLOW = (
        STATUS_AWAITING_COLLECTION,
        STATUS_IN_ANALYSIS,
        STATUS_AWAITING_REPORT,
        STATUS_COMPLETED,
    )

    PAYMENT_CASH = 'cash'
    PAYMENT_DEBIT = 'debit'
    PAYMENT_CREDIT = 'credit'
    PAYMENT_PIX = 'pix'
    PAYMENT_TRANSFER = 'transfer'

    PAYMENT_METHOD_CHOICES = [
        (PAYMENT_CASH, 'Dinheiro'),
        (PAYMENT_DEBIT, 'Cartão de Débito'),
        (PAYMENT_CREDIT, 'Cartão de Crédito'),
        (PAYMENT_PIX, 'PIX'),
        (PAYMENT_TRANSFER, 'Transferência'),
    ]

    INSURANCE_PRIVATE = 'private'
    INSURANCE_COVERED = 'insurance'

    INSURANCE_TYPE_CHOICES = [
        (INSURANCE_PRIVATE, 'Particular'),
        (INSURANCE_COVERED, 'Convênio'),
    ]

    patient = models.ForeignKey(
        'patients.Patient',
        on_delete=models.PROTECT,
        related_name='appointments',
    )
    services = models.ManyToManyField(
        'catalog.Service',
        through='AppointmentService',
        related_name='appointments',
    )
    appointment_date = models.DateTimeField(default=timezone.now, db_index=True)
    status = models.CharField(
        max_length=32,
        choices=STATUS_CHOICES,
        default=STATUS_SCHEDULED,
        db_index=True,
    )
    payment_method = models.CharField(max_length=16, choices=PAYMENT_METHOD_CHOICES)
    insurance_type = models.CharField(
        max_length=16,
        choices=INSURANCE_TYPE_CHOICES,
        default=INSURANCE_PRIVATE,
    )
    notes = models.TextField(blank=True, default='')
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+',
    )
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'appointments_appointment'
        ordering = ['-appointment_date', '-id']
        verbose_name = 'Appointment'
        verbose_name_plural = 'Appointments'

    def __str__(self) -> str:
        return f"Appointment #{self.pk} ({self.status})"

    @property
    def total_amount(self) -> Decimal:
        # services.all() uses the prefetch cache when the caller prefetched.
        return compute_total(service.base_price for service in self.services.all())


class AppointmentService(models.Model):
    """Join row between an appointment and a booked service.

    Carries the result payload as entered at the bench; the canonical
    record is the matching ExamResult.
    """

    appointment = models.ForeignKey(
        Appointment,
        on_delete=models.CASCADE,
        related_name='lines',
    )
    service = models.ForeignKey(
        'catalog.Service',
        on_delete=models.PROTECT,
        related_name='appointment_lines',
    )
    result_data = models.JSONField(null=True, blank=True)
    notes = models.TextField(blank=True, default='')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'appointments_appointment_service'
        ordering = ['id']
        verbose_name = 'Appointment Service'
        verbose_name_plural = 'Appointment Services'
        constraints = [
            models.UniqueConstraint(fields=['appointment', 'service'], name='uniq_appointment_service'),
        ]

    def __str__(self) -> str:
        return f"Appointment #{self.appointment_id} / Service #{self.service_id}"


class ExamResult(models.Model):
    """Result of one service within one appointment (one row per pair)."""

    STATUS_PENDING = 'pending'
    STATUS_PRELIMINARY = 'preliminary'
    STATUS_FINAL = 'final'
    STATUS_CORRECTED = 'corrected'

    STATUS_CHOICES = [
        (STATUS_PENDING, 'Pendente'),
        (STATUS_PRELIMINARY, 'Preliminar'),
        (STATUS_FINAL, 'Final'),
        (STATUS_CORRECTED, 'Corrigido'),
    ]

    ISSUED_STATUSES = (STATUS_FINAL, STATUS_CORRECTED)

    appointment = models.ForeignKey(
        Appointment,
        on_delete=models.CASCADE,
        related_name='exam_results',
    )
    service = models.ForeignKey(
        'catalog.Service',
        on_delete=models.PROTECT,
        related_name='exam_results',
    )
    patient = models.ForeignKey(
        'patients.Patient',
        on_delete=models.PROTECT,
        related_name='exam_results',
    )
    result_data = models.JSONField(null=True, blank=True)
    notes = models.TextField(blank=True, default='')
    status = models.CharField(
        max_length=16,
        choices=STATUS_CHOICES,
        default=STATUS_PENDING,
        db_index=True,
    )
    issued_at = models.DateTimeField(null=True, blank=True)
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+',
    )
    updated_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+',
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'appointments_exam_result'
        ordering = ['appointment_id', 'id']
        verbose_name = 'Exam Result'
        verbose_name_plural = 'Exam Results'
        constraints = [
            models.UniqueConstraint(fields=['appointment', 'service'], name='uniq_exam_result_per_service'),
        ]

    def __str__(self) -> str:
        return f"Result appointment #{self.appointment_id} / service #{self.service_id} ({self.status})"
