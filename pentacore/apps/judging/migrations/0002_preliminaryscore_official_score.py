from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    # OfficialScore referencia a PreliminaryScore (source); el enlace inverso
    # se agrega después de crear scoring.OfficialScore.
    dependencies = [
        ('judging', '0001_initial'),
        ('scoring', '0001_initial'),
    ]

    operations = [
        migrations.AddField(
            model_name='preliminaryscore',
            name='official_score',
            field=models.OneToOneField(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name='+', to='scoring.officialscore'),
        ),
        migrations.AddConstraint(
            model_name='preliminaryscore',
            constraint=models.CheckConstraint(
                condition=(
                    models.Q(('status__in', ['verified', 'corrected']), ('official_score__isnull', False))
                    | (~models.Q(('status__in', ['verified', 'corrected'])) & models.Q(('official_score__isnull', True)))
                ),
                name='prelim_official_iff_promoted',
            ),
        ),
    ]
