from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion
import django.utils.timezone


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('events', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='PreliminaryScore',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('discipline', models.CharField(choices=[('fencing_ranking', 'Fencing - Ranking'), ('fencing_de', 'Fencing - DE'), ('obstacle', 'Obstacle'), ('swimming', 'Swimming'), ('laser_run', 'Laser Run'), ('riding', 'Riding')], max_length=32)),
                ('data', models.JSONField()),
                ('status', models.CharField(choices=[('pending', 'Pendiente'), ('verified', 'Verificada'), ('corrected', 'Corregida'), ('rejected', 'Rechazada')], default='pending', max_length=16)),
                ('corrected_data', models.JSONField(blank=True, null=True)),
                ('rejection_reason', models.TextField(blank=True, default='')),
                ('submitted_at', models.DateTimeField(default=django.utils.timezone.now, editable=False)),
                ('verified_at', models.DateTimeField(blank=True, null=True)),
                ('athlete', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='preliminary_scores', to='events.athlete')),
                ('event', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='preliminary_scores', to='events.event')),
                ('submitted_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='submitted_scores', to=settings.AUTH_USER_MODEL)),
                ('verified_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='reviewed_scores', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'ordering': ('-submitted_at', 'id'),
                'indexes': [models.Index(fields=['event', 'status'], name='prelim_event_status_idx')],
            },
        ),
    ]
