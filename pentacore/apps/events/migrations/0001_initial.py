from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='Athlete',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('first_name', models.CharField(max_length=80)),
                ('last_name', models.CharField(max_length=80)),
                ('country', models.CharField(help_text='Código de país (COI), p.ej. CHI.', max_length=3)),
                ('gender', models.CharField(choices=[('M', 'Masculino'), ('F', 'Femenino')], max_length=1)),
                ('date_of_birth', models.DateField(blank=True, null=True)),
                ('club', models.CharField(blank=True, max_length=120)),
            ],
            options={
                'ordering': ('last_name', 'first_name'),
            },
        ),
        migrations.CreateModel(
            name='Competition',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=160)),
                ('slug', models.SlugField(unique=True)),
                ('location', models.CharField(blank=True, max_length=160)),
                ('start_date', models.DateField(blank=True, null=True)),
                ('age_category', models.CharField(choices=[('U9', 'U9'), ('U11', 'U11'), ('U13', 'U13'), ('U15', 'U15'), ('U17', 'U17'), ('U19', 'U19'), ('Junior', 'Junior'), ('Senior', 'Senior'), ('Masters', 'Masters')], default='Senior', max_length=16)),
                ('competition_type', models.CharField(choices=[('individual', 'Individual'), ('relay', 'Relevo'), ('team', 'Equipos')], default='individual', max_length=16)),
                ('status', models.CharField(choices=[('draft', 'Borrador'), ('active', 'En curso'), ('finished', 'Finalizada')], default='draft', max_length=16)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
            ],
            options={
                'ordering': ('-start_date', 'name'),
            },
        ),
        migrations.CreateModel(
            name='Event',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('discipline', models.CharField(choices=[('fencing_ranking', 'Fencing - Ranking'), ('fencing_de', 'Fencing - DE'), ('obstacle', 'Obstacle'), ('swimming', 'Swimming'), ('laser_run', 'Laser Run'), ('riding', 'Riding')], max_length=32)),
                ('order', models.PositiveIntegerField(default=1, help_text='Orden de la disciplina dentro de la competencia.')),
                ('scheduled_at', models.DateTimeField(blank=True, null=True)),
                ('competition', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='events', to='events.competition')),
            ],
            options={
                'ordering': ('competition', 'order'),
                'unique_together': {('competition', 'discipline')},
            },
        ),
    ]
