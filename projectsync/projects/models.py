from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _


class Project(models.Model):
    class Status(models.TextChoices):
        PLANNING = "planning", _("Planning")
        IN_PROGRESS = "in-progress", _("In Progress")
        COMPLETED = "completed", _("Completed")
        ON_HOLD = "on-hold", _("On Hold")

    class Priority(models.TextChoices):
        LOW = "low", _("Low")
        MEDIUM = "medium", _("Medium")
        HIGH = "high", _("High")
        URGENT = "urgent", _("Urgent")

    title = models.CharField(max_length=100)
    description = models.TextField(max_length=1000)
    status = models.CharField(
        max_length=20, choices=Status.choices, default=Status.PLANNING
    )
    priority = models.CharField(
        max_length=20, choices=Priority.choices, default=Priority.MEDIUM
    )
    due_date = models.DateField(null=True, blank=True)
    # Username of the creator; kept as text so it survives user changes.
    created_by = models.CharField(max_length=150)
    # Stamped by the record store, not auto_now, so updates can be forced forward.
    created_at = models.DateTimeField(default=timezone.now, db_index=True)
    updated_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ["-created_at", "-id"]

    def __str__(self):
        return self.title
