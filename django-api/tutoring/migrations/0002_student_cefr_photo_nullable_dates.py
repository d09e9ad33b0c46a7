from django.db import migrations, models


class Migration(migrations.Migration):

    dependencies = [
        ("tutoring", "0001_initial"),
    ]

    operations = [
        migrations.AddField(
            model_name="studentrecord",
            name="cefr",
            field=models.JSONField(blank=True, default=dict),
        ),
        migrations.AddField(
            model_name="studentrecord",
            name="photo",
            field=models.TextField(blank=True, null=True),
        ),
        migrations.AlterField(
            model_name="studentrecord",
            name="created_at",
            field=models.DateTimeField(blank=True, null=True),
        ),
        migrations.AlterField(
            model_name="contractrecord",
            name="created_at",
            field=models.DateTimeField(blank=True, null=True),
        ),
        migrations.AlterField(
            model_name="lessonrecord",
            name="created_at",
            field=models.DateTimeField(blank=True, null=True),
        ),
    ]
