from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='AuditLog',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('event_type', models.CharField(choices=[('SCORE_CREATE', 'Puntuación cargada'), ('SCORE_VERIFY', 'Puntuación verificada'), ('SCORE_CORRECT', 'Puntuación corregida'), ('SCORE_REJECT', 'Puntuación rechazada'), ('DATA_RETENTION_PURGE', 'Purga por retención')], max_length=40)),
                ('severity', models.CharField(choices=[('INFO', 'Info'), ('WARNING', 'Warning'), ('ALERT', 'Alert'), ('CRITICAL', 'Critical')], default='INFO', max_length=10)),
                ('action', models.CharField(max_length=120)),
                ('actor_id', models.CharField(blank=True, default='', max_length=64)),
                ('actor_role', models.CharField(blank=True, default='', max_length=32)),
                ('target_type', models.CharField(blank=True, default='', max_length=64)),
                ('target_id', models.CharField(blank=True, default='', max_length=64)),
                ('details', models.JSONField(blank=True, default=dict)),
                ('request_path', models.CharField(blank=True, default='', max_length=255)),
                ('request_method', models.CharField(blank=True, default='', max_length=10)),
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True)),
            ],
            options={
                'ordering': ('-created_at', '-id'),
                'indexes': [models.Index(fields=['target_type', 'target_id'], name='audit_target_idx')],
            },
        ),
    ]
