import uuid
from django.contrib.auth.base_user import BaseUserManager
from django.contrib.auth.models import AbstractUser
from django.db import models


class UserManager(BaseUserManager):
    use_in_migrations = True

    def _create_user(self, email, password, **extra_fields):
        if not email:
            raise ValueError("An email address is required")
        email = self.normalize_email(email).lower()
        user = self.model(email=email, **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_user(self, email, password=None, **extra_fields):
        extra_fields.setdefault("is_staff", False)
        extra_fields.setdefault("is_superuser", False)
        return self._create_user(email, password, **extra_fields)

    def create_superuser(self, email, password=None, **extra_fields):
        extra_fields.setdefault("is_staff", True)
        extra_fields.setdefault("is_superuser", True)
        extra_fields.setdefault("role", User.ROLE_ADMIN)
        extra_fields.setdefault("status", User.STATUS_APPROVED)
        return self._create_user(email, password, **extra_fields)


class User(AbstractUser):
    """
    Account for the tailoring platform.
    Tailors own a private book of customers and orders once an admin
    approves them; admins manage tailor approvals.
    """
    ROLE_ADMIN = 'admin'
    ROLE_TAILOR = 'tailor'
    ROLE_CHOICES = [
        (ROLE_ADMIN, 'Admin'),
        (ROLE_TAILOR, 'Tailor'),
    ]
    STATUS_PENDING = 'pending'
    STATUS_APPROVED = 'approved'
    STATUS_REJECTED = 'rejected'
    STATUS_CHOICES = [
        (STATUS_PENDING, 'Pending'),
        (STATUS_APPROVED, 'Approved'),
        (STATUS_REJECTED, 'Rejected'),
    ]
    GENDER_CHOICES = [
        ('male', 'Male'),
        ('female', 'Female'),
    ]

    username = None
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    email = models.EmailField(unique=True, max_length=255, help_text="Login email address")
    name = models.CharField(max_length=255, help_text="Display name")
    phone = models.CharField(max_length=32, blank=True, default='', help_text="Contact phone number")
    gender = models.CharField(max_length=10, choices=GENDER_CHOICES, blank=True, default='',
                              help_text="Tailoring specialty; selects the default measurement fields")
    role = models.CharField(max_length=10, choices=ROLE_CHOICES, default=ROLE_TAILOR)
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default=STATUS_PENDING)
    created_at = models.DateTimeField(auto_now_add=True, help_text="Account creation timestamp")
    updated_at = models.DateTimeField(auto_now=True)

    USERNAME_FIELD = 'email'
    REQUIRED_FIELDS = ['name']

    objects = UserManager()

    class Meta:
        db_table = 'users'
        verbose_name = 'User'
        verbose_name_plural = 'Users'
        indexes = [
            models.Index(fields=['role', 'status'], name='users_role_status_idx'),
            models.Index(fields=['created_at'], name='users_created_at_idx'),
        ]

    def __str__(self):
        return f"{self.name} ({self.email})"

    @property
    def is_admin(self) -> bool:
        return self.role == self.ROLE_ADMIN

    @property
    def is_approved_tailor(self) -> bool:
        return self.role == self.ROLE_TAILOR and self.status == self.STATUS_APPROVED
