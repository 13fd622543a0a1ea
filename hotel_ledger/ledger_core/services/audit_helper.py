from typing import Optional

from ..models import AuditLog, Hotel


def log_action(
    *,
    action: str,
    instance,
    user=None,
    hotel: Optional[Hotel] = None,
    changes: dict | None = None,
):
    """
    Central audit logger.
    Call inside the same transaction as the change it records.
    """

    if hotel is None:
        hotel = getattr(instance, "hotel", None)

    return AuditLog.objects.create(
        hotel=hotel,
        user=user,
        action=action,
        object_type=instance.__class__.__name__,
        object_id=str(instance.pk),
        changes=changes,
    )
