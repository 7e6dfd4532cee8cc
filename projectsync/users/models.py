from django.contrib.auth.models import AbstractUser
from django.db import models
from django.utils.translation import gettext_lazy as _


class User(AbstractUser):
    """
    Default custom user model for projectsync.
    Accounts are registered on first login; the role chosen then is kept.
    """

    class Role(models.TextChoices):
        ADMIN = "admin", _("Admin")
        VIEWER = "viewer", _("Viewer")

    role = models.CharField(
        _("Role"),
        max_length=20,
        choices=Role.choices,
        default=Role.VIEWER,
    )
    # Audit timestamps
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self) -> str:
        return self.username
