import json
import logging

from django.core.serializers.json import DjangoJSONEncoder
from django.db import transaction
from django.forms.models import model_to_dict

from .models import AuditLog

logger = logging.getLogger(__name__)


def snapshot(instance, fields=None, exclude=None):
    """JSON-safe dict of a model instance for the audit trail."""
    if instance is None:
        return None
    return _jsonable(model_to_dict(instance, fields=fields, exclude=exclude))


def _jsonable(data):
    if data is None:
        return None
    return json.loads(json.dumps(data, cls=DjangoJSONEncoder))


def log_audit(user, action, instance=None, *, table_name=None, record_id=None,
              old_data=None, new_data=None):
    """Append one AuditLog row.

    Either pass the changed ``instance`` or an explicit ``table_name`` and
    ``record_id``. Failures are logged and never propagate, so an audit
    problem does not abort the business operation.
    """

    if instance is not None:
        table_name = table_name or instance._meta.db_table
        record_id = record_id if record_id is not None else instance.pk

    role_name = ''
    email = ''
    try:
        role = getattr(user, 'role', None)
        if role is not None:
            role_name = getattr(role, 'name', '') or ''
        email = getattr(user, 'email', '') or ''
    except Exception:
        role_name = ''

    try:
        # Own savepoint so a failed insert leaves the outer transaction usable.
        with transaction.atomic():
            return AuditLog.objects.create(
                user=user if getattr(user, 'is_authenticated', False) else None,
                user_email=email,
                role_name=role_name,
                table_name=table_name or '',
                record_id=str(record_id if record_id is not None else ''),
                action=action,
                old_data=_jsonable(old_data),
                new_data=_jsonable(new_data),
            )
    except Exception:
        logger.exception('AuditLog write failed (action=%s, table=%s, record_id=%s)',
                         action, table_name, record_id)
        return None
