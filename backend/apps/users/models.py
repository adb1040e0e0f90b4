from django.contrib.auth.models import AbstractUser, UserManager as DjangoUserManager
from django.db import models


def normalize_login_email(email):
    """Emails are the login credential; compare them trimmed and lower-cased."""
    return (email or "").strip().lower()


class UserManager(DjangoUserManager):
    def get_by_natural_key(self, username):
        return self.get(**{f"{self.model.USERNAME_FIELD}__iexact": normalize_login_email(username)})

    def create_user(self, username, email=None, password=None, **extra_fields):
        return super().create_user(
            username, normalize_login_email(email), password, **extra_fields
        )

    def create_superuser(self, username, email=None, password=None, **extra_fields):
        return super().create_superuser(
            username, normalize_login_email(email), password, **extra_fields
        )


class User(AbstractUser):
    # id, username, password, first_name, last_name, is_staff, is_superuser are inherited
    email = models.EmailField(unique=True)
    phone = models.CharField(max_length=50, blank=True, null=True)

    USERNAME_FIELD = "email"
    REQUIRED_FIELDS = ["username"]

    objects = UserManager()

    @property
    def display_name(self) -> str:
        full_name = f"{self.first_name or ''} {self.last_name or ''}".strip()
        return full_name or self.email

    @property
    def can_own_cart(self) -> bool:
        return not (self.is_staff or self.is_superuser)

    def __str__(self):
        return self.email
