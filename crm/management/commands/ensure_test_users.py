# crm/management/commands/ensure_test_users.py
from django.core.management.base import BaseCommand
from django.contrib.auth.hashers import make_password
from crm.models import User

TEST_SET = [
    ("super", "super"),
    ("admin1", "admin"),
    ("accountant1", "accountant"),
    ("staff1", "staff"),
]


class Command(BaseCommand):
    help = "Ensure one user per role exists (idempotent)."

    def add_arguments(self, parser):
        parser.add_argument("--password", default="123456", help="Password set on every test user")

    def handle(self, *args, **opts):
        password = make_password(opts["password"])
        for username, role in TEST_SET:
            u, created = User.objects.get_or_create(
                username=username,
                defaults={"role": role, "password": password, "is_active": True},
            )
            if not created:
                # reset password, role and active flag
                u.password = password
                u.role = role
                u.is_active = True
                u.save(update_fields=["password", "role", "is_active"])
            self.stdout.write(self.style.SUCCESS(f"ok: {username} ({role})"))
        self.stdout.write(self.style.SUCCESS("All test users ensured."))
