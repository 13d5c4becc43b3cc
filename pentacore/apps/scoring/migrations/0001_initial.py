from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('events', '0001_initial'),
        ('judging', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='OfficialScore',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('discipline', models.CharField(choices=[('fencing_ranking', 'Fencing - Ranking'), ('fencing_de', 'Fencing - DE'), ('obstacle', 'Obstacle'), ('swimming', 'Swimming'), ('laser_run', 'Laser Run'), ('riding', 'Riding')], max_length=32)),
                ('points', models.PositiveIntegerField()),
                ('input', models.JSONField(help_text='Payload validado que produjo los puntos.')),
                ('age_category', models.CharField(choices=[('U9', 'U9'), ('U11', 'U11'), ('U13', 'U13'), ('U15', 'U15'), ('U17', 'U17'), ('U19', 'U19'), ('Junior', 'Junior'), ('Senior', 'Senior'), ('Masters', 'Masters')], max_length=16)),
                ('is_relay', models.BooleanField(default=False)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('athlete', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='official_scores', to='events.athlete')),
                ('event', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='official_scores', to='events.event')),
                ('source', models.OneToOneField(on_delete=django.db.models.deletion.PROTECT, related_name='promoted', to='judging.preliminaryscore')),
            ],
            options={
                'ordering': ('event_id', '-points'),
                'constraints': [models.UniqueConstraint(fields=('event', 'athlete'), name='official_score_unique_event_athlete')],
            },
        ),
    ]
