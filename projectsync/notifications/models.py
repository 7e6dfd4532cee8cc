from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _


class Notification(models.Model):
    class Type(models.TextChoices):
        CREATE = "create", _("Create")
        UPDATE = "update", _("Update")
        DELETE = "delete", _("Delete")

    message = models.TextField()
    notification_type = models.CharField(max_length=20, choices=Type.choices)
    # References only: the project may be deleted while the notification stays.
    project_id = models.BigIntegerField(db_index=True)
    actor_id = models.BigIntegerField()
    is_read = models.BooleanField(default=False)
    created_at = models.DateTimeField(default=timezone.now, db_index=True)

    class Meta:
        ordering = ["-created_at", "-id"]

    def __str__(self):
        return f"{self.notification_type}: {self.message}"
