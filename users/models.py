from django.db import models
from django.contrib.auth.models import AbstractUser


class User(AbstractUser):
    """
    Custom user model with role-based access (citizen vs municipal staff).
    """
    ROLE_CITIZEN = 'citizen'
    ROLE_MUNICIPAL = 'municipal'
    ROLE_CHOICES = [
        (ROLE_CITIZEN, 'Citizen'),
        (ROLE_MUNICIPAL, 'Municipal'),
    ]

    role = models.CharField(
        max_length=20,
        choices=ROLE_CHOICES,
        default=ROLE_CITIZEN,
        help_text="User role: 'municipal' staff can triage any post"
    )

    # Display name shown on posts and comments
    name = models.CharField(max_length=150, blank=True)

    department = models.CharField(
        max_length=100,
        blank=True,
        help_text="Municipal department (staff only)"
    )

    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        indexes = [
            models.Index(fields=['role'], name='users_user_role_idx'),
        ]

    def __str__(self):
        return f"{self.username} ({self.get_role_display()})"

    @property
    def is_municipal(self):
        return self.role == self.ROLE_MUNICIPAL

    @property
    def display_name(self):
        return self.name or self.username
