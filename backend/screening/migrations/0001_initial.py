import uuid

from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="AgentSnapshot",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("agent_type", models.CharField(max_length=20, unique=True)),
                ("payload", models.JSONField(blank=True, default=dict)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "db_table": "agent_snapshots",
            },
        ),
        migrations.CreateModel(
            name="HiringDecision",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("candidate_id", models.CharField(max_length=100, unique=True)),
                ("agent_type", models.CharField(db_index=True, max_length=20)),
                ("features", models.JSONField(default=dict)),
                ("job_description", models.TextField(blank=True, null=True)),
                ("state", models.CharField(max_length=100)),
                ("decision", models.CharField(max_length=20)),
                ("confidence", models.FloatField()),
                ("q_value", models.FloatField(default=0.0)),
                ("composite_score", models.FloatField(default=0.0)),
                ("override", models.CharField(blank=True, max_length=50, null=True)),
                ("reasoning", models.JSONField(blank=True, default=list)),
                ("scores", models.JSONField(blank=True, default=dict)),
                ("algorithm_version", models.CharField(max_length=50)),
                ("outcome", models.BooleanField(blank=True, null=True)),
                ("performance_rating", models.FloatField(blank=True, null=True)),
                ("trained_by", models.CharField(blank=True, max_length=20, null=True)),
                ("trained_at", models.DateTimeField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
            options={
                "db_table": "hiring_decisions",
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["agent_type", "created_at"], name="idx_decision_agent_created"),
                ],
            },
        ),
        migrations.CreateModel(
            name="QValue",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("agent_type", models.CharField(default="rl", max_length=20)),
                ("state", models.CharField(db_index=True, max_length=100)),
                ("action", models.CharField(max_length=20)),
                ("q_value", models.FloatField(default=0.0)),
                ("visit_count", models.IntegerField(default=0)),
                ("total_reward", models.FloatField(default=0.0)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "db_table": "q_values",
                "indexes": [
                    models.Index(fields=["agent_type", "state"], name="idx_qvalue_agent_state"),
                ],
                "unique_together": {("agent_type", "state", "action")},
            },
        ),
    ]
