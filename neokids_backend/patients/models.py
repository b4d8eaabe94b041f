from django.conf import settings
from django.db import models


class Patient(models.Model):
    """A pediatric patient and the adult responsible for them.

    CPF and phone numbers are stored as bare digits. The CPF is fixed once
    the patient is registered, and patients are never deleted through the API.
    """

    name = models.CharField(max_length=100)
    birth_date = models.DateField()
    cpf = models.CharField(max_length=11, unique=True, db_index=True)
    phone = models.CharField(max_length=11)
    email = models.EmailField(blank=True, default='')
    address = models.CharField(max_length=200)
    responsible_name = models.CharField(max_length=100)
    responsible_cpf = models.CharField(max_length=11, blank=True, default='')
    responsible_phone = models.CharField(max_length=11, blank=True, default='')
    special_alert = models.TextField(blank=True, default='')
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+',
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'patients_patient'
        ordering = ['name', 'id']
        verbose_name = 'Patient'
        verbose_name_plural = 'Patients'

    def __str__(self) -> str:
        return f"{self.name} (CPF {self.cpf})"
