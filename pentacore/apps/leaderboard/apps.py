import atexit

from django.apps import AppConfig


class LeaderboardConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'pentacore.apps.leaderboard'
    verbose_name = 'Leaderboard'

    channel = None

    def ready(self):
        from .broadcast import ScoreEventChannel

        # Un canal por proceso; se cierra al apagar
        if self.channel is None:
            self.channel = ScoreEventChannel()
            atexit.register(self.channel.close)
