"""Initial migration for submissions app - the four lead-capture models."""

import uuid

import django.db.models.functions.text
import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="PickupRequest",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                (
                    "created_at",
                    models.DateTimeField(default=django.utils.timezone.now, editable=False, verbose_name="created"),
                ),
                ("name", models.CharField(max_length=100)),
                ("email", models.EmailField(max_length=200)),
                ("phone", models.CharField(blank=True, max_length=20, null=True)),
                ("address", models.CharField(max_length=500)),
                ("scrap_types", models.JSONField(default=list)),
                ("estimated_quantity", models.CharField(blank=True, max_length=50, null=True)),
                ("additional_notes", models.TextField(blank=True, null=True)),
            ],
            options={
                "verbose_name": "pickup request",
                "verbose_name_plural": "pickup requests",
                "db_table": "pickup_requests",
                "ordering": ["-created_at"],
                "abstract": False,
            },
        ),
        migrations.CreateModel(
            name="ContactMessage",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                (
                    "created_at",
                    models.DateTimeField(default=django.utils.timezone.now, editable=False, verbose_name="created"),
                ),
                ("name", models.CharField(max_length=100)),
                ("email", models.EmailField(max_length=200)),
                ("phone", models.CharField(max_length=20)),
                ("subject", models.CharField(max_length=150)),
                ("message", models.TextField()),
            ],
            options={
                "verbose_name": "contact message",
                "verbose_name_plural": "contact messages",
                "db_table": "contact_messages",
                "ordering": ["-created_at"],
                "abstract": False,
            },
        ),
        migrations.CreateModel(
            name="CareerApplication",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                (
                    "created_at",
                    models.DateTimeField(default=django.utils.timezone.now, editable=False, verbose_name="created"),
                ),
                ("name", models.CharField(max_length=100)),
                ("email", models.EmailField(max_length=200)),
                ("phone", models.CharField(max_length=20)),
                ("position", models.CharField(max_length=100)),
                ("cover_letter", models.TextField(blank=True, null=True)),
                ("cv_file_name", models.CharField(blank=True, max_length=255, null=True)),
                ("resume_storage_path", models.CharField(blank=True, max_length=1024, null=True)),
                ("resume_url", models.URLField(blank=True, max_length=2048, null=True)),
            ],
            options={
                "verbose_name": "career application",
                "verbose_name_plural": "career applications",
                "db_table": "career_applications",
                "ordering": ["-created_at"],
                "abstract": False,
            },
        ),
        migrations.CreateModel(
            name="NewsletterSubscription",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                (
                    "created_at",
                    models.DateTimeField(default=django.utils.timezone.now, editable=False, verbose_name="created"),
                ),
                ("email", models.EmailField(max_length=200)),
            ],
            options={
                "verbose_name": "newsletter subscription",
                "verbose_name_plural": "newsletter subscriptions",
                "db_table": "newsletter_subscriptions",
                "ordering": ["-created_at"],
                "abstract": False,
                "constraints": [
                    models.UniqueConstraint(
                        django.db.models.functions.text.Lower("email"),
                        name="newsletter_subscriptions_email_ci_unique",
                    )
                ],
            },
        ),
    ]
