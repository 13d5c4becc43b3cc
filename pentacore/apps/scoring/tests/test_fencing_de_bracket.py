import json

from django.test import SimpleTestCase

from pentacore.apps.scoring.calculators import (
    DEBracket,
    DESeed,
    advance_winner,
    bracket_stats,
    calculate_final_placements,
    de_points,
    generate_de_bracket,
    generate_seed_positions,
    get_round_name,
    get_tableau_size,
    is_bracket_complete,
)


def seeds(n):
    # athlete_id = 100 + siembra
    return [DESeed(seed=i, athlete_id=100 + i, athlete_name=f"Atleta {i}") for i in range(1, n + 1)]


def next_bout(bracket):
    return next((m for r in bracket.rounds for m in r if m.has_both and m.winner_id is None), None)


class TableauTest(SimpleTestCase):
    def test_tableau_size(self):
        for n, size in ((18, 32), (16, 16), (9, 16), (5, 8), (3, 4), (2, 2), (1, 2), (0, 2)):
            with self.subTest(n=n):
                self.assertEqual(get_tableau_size(n), size)

    def test_seed_positions(self):
        self.assertEqual(generate_seed_positions(2), [1, 2])
        self.assertEqual(generate_seed_positions(4), [1, 4, 2, 3])
        self.assertEqual(generate_seed_positions(8), [1, 8, 4, 5, 2, 7, 3, 6])

    def test_every_first_bout_sums_to_size_plus_one(self):
        positions = generate_seed_positions(32)
        self.assertEqual(sorted(positions), list(range(1, 33)))
        for i in range(0, 32, 2):
            self.assertEqual(positions[i] + positions[i + 1], 33)

    def test_top_two_seeds_in_opposite_halves(self):
        positions = generate_seed_positions(16)
        self.assertIn(1, positions[:8])
        self.assertIn(2, positions[8:])

    def test_round_names(self):
        self.assertEqual(get_round_name(5, 5), "Final")
        self.assertEqual(get_round_name(4, 5), "Semifinal")
        self.assertEqual(get_round_name(3, 5), "Cuartos de final")
        self.assertEqual(get_round_name(1, 5), "Tabla de 32")


class GenerateBracketTest(SimpleTestCase):
    def test_eighteen_in_tableau_of_32(self):
        bracket = generate_de_bracket(seeds(18))
        self.assertEqual(bracket.tableau_size, 32)
        self.assertEqual(bracket.total_rounds, 5)
        self.assertEqual([len(r) for r in bracket.rounds], [16, 8, 4, 2, 1])

        first = bracket.rounds[0]
        self.assertEqual(sum(1 for m in first if m.is_bye), 14)
        bouts = [(m.athlete1_seed, m.athlete2_seed) for m in first if not m.is_bye]
        self.assertEqual(sorted(bouts), [(15, 18), (16, 17)])

        # Seed 1 pasa con bye y ya espera en la ronda de 16
        self.assertEqual(first[0].athlete1_seed, 1)
        self.assertEqual(first[0].winner_id, 101)
        self.assertEqual(first[0].score1, 0)
        self.assertEqual(bracket.rounds[1][0].athlete1_id, 101)

    def test_one_against_n(self):
        bracket = generate_de_bracket(seeds(8))
        pairs = [(m.athlete1_seed, m.athlete2_seed) for m in bracket.rounds[0]]
        self.assertEqual(pairs, [(1, 8), (4, 5), (2, 7), (3, 6)])
        self.assertFalse(any(m.is_bye for m in bracket.rounds[0]))
        self.assertEqual(bracket.rounds[1][0].feeder1_id, "R1-M0")
        self.assertEqual(bracket.rounds[1][0].feeder2_id, "R1-M1")

    def test_invalid_seeds(self):
        with self.assertRaises(ValueError):
            generate_de_bracket([DESeed(1, 10), DESeed(1, 11)])
        with self.assertRaises(ValueError):
            generate_de_bracket([DESeed(1, 10), DESeed(3, 11)])

    def test_single_athlete_wins_by_bye(self):
        bracket = generate_de_bracket(seeds(1))
        self.assertTrue(is_bracket_complete(bracket))
        self.assertEqual(calculate_final_placements(bracket), {101: 1})


class AdvanceWinnerTest(SimpleTestCase):
    def play_four(self):
        bracket = generate_de_bracket(seeds(4))
        bracket = advance_winner(bracket, "R1-M0", 101, 15, 9)
        bracket = advance_winner(bracket, "R1-M1", 103, 12, 15)  # 3 elimina a 2
        return bracket

    def test_full_bracket_placements_and_points(self):
        bracket = self.play_four()
        self.assertIsNone(bracket.placements)
        final = bracket.rounds[1][0]
        self.assertEqual((final.athlete1_id, final.athlete2_id), (101, 103))

        bracket = advance_winner(bracket, "R2-M0", 103, 14, 15)
        self.assertTrue(is_bracket_complete(bracket))
        # Perdedores de semifinal ordenados por siembra: 2 antes que 4
        self.assertEqual(bracket.placements, {103: 1, 101: 2, 102: 3, 104: 4})
        self.assertEqual(de_points(bracket.placements), {103: 250, 101: 244, 102: 238, 104: 236})

    def test_original_is_not_modified(self):
        bracket = generate_de_bracket(seeds(4))
        advance_winner(bracket, "R1-M0", 101)
        self.assertIsNone(bracket.rounds[0][0].winner_id)

    def test_changing_a_result_clears_downstream(self):
        bracket = advance_winner(self.play_four(), "R2-M0", 103)
        bracket = advance_winner(bracket, "R1-M1", 102)

        final = bracket.rounds[1][0]
        self.assertEqual((final.athlete1_id, final.athlete2_id), (101, 102))
        self.assertIsNone(final.winner_id)
        self.assertIsNone(bracket.placements)
        self.assertFalse(is_bracket_complete(bracket))

    def test_winner_must_be_in_the_bout(self):
        bracket = generate_de_bracket(seeds(4))
        with self.assertRaises(ValueError):
            advance_winner(bracket, "R1-M0", 102)
        with self.assertRaises(ValueError):
            # La final aún no tiene rivales
            advance_winner(bracket, "R2-M0", 101)
        with self.assertRaises(KeyError):
            advance_winner(bracket, "R9-M0", 101)

    def test_first_round_losers_of_eighteen_get_17_and_18(self):
        bracket = generate_de_bracket(seeds(18))
        match = next_bout(bracket)
        while match is not None:
            # Gana siempre la mejor siembra
            bracket = advance_winner(bracket, match.match_id, match.athlete1_id)
            match = next_bout(bracket)
        self.assertTrue(is_bracket_complete(bracket))

        # Con la mejor siembra siempre ganando, puesto = siembra
        self.assertEqual(bracket.placements, {100 + s: s for s in range(1, 19)})
        points = de_points(bracket.placements)
        self.assertEqual(points[101], 250)
        self.assertEqual(points[117], 198)
        self.assertEqual(points[118], 196)

    def test_stats(self):
        bracket = generate_de_bracket(seeds(3))
        stats = bracket_stats(bracket)
        self.assertEqual(stats["bye_count"], 1)
        self.assertEqual(stats["total_matches"], 2)
        self.assertEqual(stats["completed_matches"], 1)
        self.assertEqual(stats["current_round"], 1)
        self.assertFalse(stats["is_complete"])


class SerializationTest(SimpleTestCase):
    def test_json_round_trip_keeps_placements(self):
        bracket = generate_de_bracket(seeds(2))
        bracket = advance_winner(bracket, "R1-M0", 102, 13, 15)
        restored = DEBracket.from_dict(json.loads(json.dumps(bracket.to_dict())))
        self.assertEqual(restored, bracket)
        self.assertEqual(restored.placements, {102: 1, 101: 2})
