from django.apps import apps
from django.test import SimpleTestCase

from pentacore.apps.leaderboard.broadcast import ScoreEvent, ScoreEventChannel, get_channel


class ScoreEventChannelTest(SimpleTestCase):
    def setUp(self):
        self.channel = ScoreEventChannel()
        self.event = ScoreEvent(competition_id=1, discipline="riding", athlete_ids=(3,))

    def test_publish_and_unsubscribe(self):
        received = []
        unsubscribe = self.channel.subscribe(received.append)
        self.assertEqual(self.channel.publish(self.event), 1)
        self.assertEqual(received, [self.event])

        unsubscribe()
        unsubscribe()  # idempotente
        self.assertEqual(self.channel.listener_count, 0)
        self.assertEqual(self.channel.publish(self.event), 0)
        self.assertEqual(len(received), 1)

    def test_failing_listener_does_not_block_others(self):
        def broken(event):
            raise ValueError("pantalla caída")

        received = []
        self.channel.subscribe(broken)
        self.channel.subscribe(received.append)
        with self.assertLogs("pentacore.apps.leaderboard.broadcast", level="ERROR"):
            delivered = self.channel.publish(self.event)
        self.assertEqual(delivered, 1)
        self.assertEqual(received, [self.event])

    def test_closed_channel(self):
        self.channel.subscribe(lambda e: None)
        self.channel.close()
        self.assertTrue(self.channel.closed)
        self.assertEqual(self.channel.listener_count, 0)
        with self.assertLogs("pentacore.apps.leaderboard.broadcast", level="WARNING"):
            self.assertEqual(self.channel.publish(self.event), 0)
        with self.assertRaises(RuntimeError):
            self.channel.subscribe(lambda e: None)

    def test_process_channel_comes_from_app_config(self):
        channel = get_channel()
        self.assertIsInstance(channel, ScoreEventChannel)
        self.assertIs(channel, apps.get_app_config("leaderboard").channel)
