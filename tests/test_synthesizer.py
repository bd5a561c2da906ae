import unittest

from crossword_synth.core.constants import Orientation
from crossword_synth.core.exceptions import InputError
from crossword_synth.core.models import SynthesisResult, WordEntry
from crossword_synth.engine.synthesizer import (
    GridSynthesizer,
    SynthesizerConfig,
    synthesize_crossword,
    unplaced_summary,
)
from crossword_synth.io.questions import fallback_questions


def entries(*answers: str) -> list:
    return [WordEntry.create(index, f"Clue for {answer}", answer) for index, answer in enumerate(answers, start=1)]


def by_answer(result: SynthesisResult, answer: str):
    return next(word for word in result.placed_words if word.answer == answer)


class SeedTests(unittest.TestCase):
    def test_single_word_is_centred(self) -> None:
        result = GridSynthesizer().synthesize(entries("AST"))

        self.assertEqual(result.placed_count, 1)
        self.assertEqual(result.unplaced_words, ())
        self.assertEqual(result.intersection_count, 0)
        word = result.placed_words[0]
        self.assertEqual((word.start_row, word.start_col), (7, 6))
        self.assertIs(word.orientation, Orientation.ACROSS)
        self.assertEqual(word.clue_number, 1)
        self.assertAlmostEqual(result.density, 3 / 225 * 100)

    def test_longest_word_seeds_and_others_cross_it(self) -> None:
        result = GridSynthesizer().synthesize(entries("TOKEN", "COMPILER", "LEXICAL"))

        seed = by_answer(result, "COMPILER")
        self.assertEqual((seed.start_row, seed.start_col, seed.orientation), (7, 3, Orientation.ACROSS))
        self.assertGreaterEqual(result.intersection_count, 1)
        self.assertEqual(result.placed_count + len(result.unplaced_words), 3)
        self.assertIs(by_answer(result, "LEXICAL").orientation, Orientation.DOWN)

    def test_equal_lengths_seed_alphabetically(self) -> None:
        result = GridSynthesizer().synthesize(entries("BETA", "ALFA"))

        seed = by_answer(result, "ALFA")
        self.assertEqual((seed.start_row, seed.start_col, seed.orientation), (7, 5, Orientation.ACROSS))


class InputTests(unittest.TestCase):
    def test_empty_input_is_rejected(self) -> None:
        with self.assertRaises(InputError):
            GridSynthesizer().synthesize([])

    def test_no_usable_answer_is_rejected(self) -> None:
        with self.assertRaises(InputError):
            GridSynthesizer().synthesize([{"question": "Too short", "answer": "A"}])
        with self.assertRaises(InputError):
            GridSynthesizer().synthesize([{"question": "Digits", "answer": "123"}])

    def test_oversized_answer_is_reported_unplaced(self) -> None:
        result = GridSynthesizer().synthesize(entries("ABCDEFGHIJKLMNOPQRST", "CAT"))

        self.assertEqual(result.placed_count, 1)
        self.assertEqual(result.unplaced_words, ("ABCDEFGHIJKLMNOPQRST",))

    def test_mapping_rows_are_accepted(self) -> None:
        result = GridSynthesizer().synthesize([{"id": "a", "question": "Tree of syntax", "answer": "ast"}])

        word = result.find("a")
        self.assertIsNotNone(word)
        self.assertEqual(word.answer, "AST")
        self.assertEqual(word.clue, "Tree of syntax")
        self.assertIsNone(result.find("missing"))

    def test_grid_too_small_is_rejected(self) -> None:
        with self.assertRaises(InputError):
            GridSynthesizer(SynthesizerConfig(grid_size=0))
        with self.assertRaises(InputError):
            synthesize_crossword(entries("AST"), grid_size=1)

    def test_instances_are_single_use(self) -> None:
        synthesizer = GridSynthesizer()
        synthesizer.synthesize(entries("AST"))
        with self.assertRaises(RuntimeError):
            synthesizer.synthesize(entries("AST"))


class TierTests(unittest.TestCase):
    def test_words_without_shared_letters_are_all_accounted_for(self) -> None:
        result = GridSynthesizer().synthesize(entries("ABCDEFGHIJKLMN", "OPQRSTUVWXYZOP"))

        self.assertEqual(result.placed_count, 2)
        self.assertEqual(result.unplaced_words, ())
        self.assertEqual(result.intersection_count, 0)

    def test_boundary_attachment_leaves_a_gap(self) -> None:
        config = SynthesizerConfig(exhaustive_scan=False)
        result = GridSynthesizer(config).synthesize(entries("ABCD", "XYZ"))

        attached = by_answer(result, "XYZ")
        self.assertEqual((attached.start_row, attached.start_col, attached.orientation), (7, 1, Orientation.ACROSS))
        self.assertTrue(result.grid.cell(7, 4).blocked)
        self.assertEqual(attached.clue_number, 1)
        self.assertEqual(by_answer(result, "ABCD").clue_number, 2)

    def test_disabled_tiers_leave_word_unplaced(self) -> None:
        config = SynthesizerConfig(exhaustive_scan=False, boundary_attachment=False)
        result = GridSynthesizer(config).synthesize(entries("ABCD", "XYZ"))

        self.assertEqual(result.placed_count, 1)
        self.assertEqual(result.unplaced_words, ("XYZ",))
        self.assertEqual(
            unplaced_summary(result),
            "1 clue could not be placed on a 15x15 grid; consider fewer or shorter words",
        )


class RepairTests(unittest.TestCase):
    def test_isolated_word_is_moved_onto_a_crossing(self) -> None:
        synthesizer = GridSynthesizer()
        synthesizer.initialize(entries("ABCDE"))
        self.assertTrue(synthesizer.try_boundary_attachment(WordEntry.create(2, "Filler", "XAY")))
        self.assertTrue(all(synthesizer.is_isolated(word) for word in synthesizer.placed))

        self.assertEqual(synthesizer.repair_isolated_words(), 1)

        moved = next(word for word in synthesizer.placed if word.answer == "ABCDE")
        self.assertEqual((moved.start_row, moved.start_col, moved.orientation), (7, 2, Orientation.DOWN))
        self.assertIsNone(synthesizer.grid.letter_at(7, 9))
        self.assertEqual(synthesizer.grid.intersection_count(), 1)
        self.assertFalse(any(synthesizer.is_isolated(word) for word in synthesizer.placed))

    def test_unbridgeable_word_stays_where_it_was(self) -> None:
        synthesizer = GridSynthesizer()
        synthesizer.initialize(entries("ABCD"))
        synthesizer.try_boundary_attachment(WordEntry.create(2, "Filler", "XYZ"))
        before = list(synthesizer.placed)

        self.assertEqual(synthesizer.repair_isolated_words(), 0)
        self.assertEqual(synthesizer.placed, before)
        self.assertEqual(synthesizer.grid.letter_at(7, 1), "X")


class FinalizeTests(unittest.TestCase):
    def setUp(self) -> None:
        self.result = GridSynthesizer().synthesize(fallback_questions())

    def test_every_entry_is_accounted_for(self) -> None:
        self.assertEqual(self.result.placed_count + len(self.result.unplaced_words), 15)
        self.assertGreater(self.result.placed_count, 1)
        self.assertEqual(self.result.validation_messages, ())

    def test_placed_letters_match_grid(self) -> None:
        grid = self.result.grid
        for word in self.result.placed_words:
            for index, (r, c) in enumerate(word.cells):
                self.assertEqual(grid.cell(r, c).letter, word.answer[index])
                self.assertEqual(grid.cell(r, c).owner(word.orientation), word.id)

    def test_no_same_orientation_overlap(self) -> None:
        for orientation in Orientation:
            seen = set()
            for word in self.result.placed_words:
                if word.orientation is not orientation:
                    continue
                cells = set(word.cells)
                self.assertFalse(seen & cells)
                seen |= cells

    def test_intersections_agree_with_cells(self) -> None:
        expected = sum(1 for row in self.result.grid.cells for cell in row if cell.is_intersection())
        self.assertEqual(self.result.intersection_count, expected)

    def test_words_do_not_run_into_letters(self) -> None:
        grid = self.result.grid
        for word in self.result.placed_words:
            dr, dc = word.orientation.step
            end_row, end_col = word.end
            self.assertFalse(grid.has_letter(word.start_row - dr, word.start_col - dc))
            self.assertFalse(grid.has_letter(end_row + dr, end_col + dc))

    def test_numbering_follows_reading_order(self) -> None:
        starts = sorted({(word.start_row, word.start_col) for word in self.result.placed_words})
        numbers = [self.result.grid.cell(r, c).number for r, c in starts]
        self.assertEqual(numbers, list(range(1, len(starts) + 1)))
        keys = [(word.clue_number, word.orientation.rank) for word in self.result.placed_words]
        self.assertEqual(keys, sorted(keys))

    def test_shared_start_cell_shares_clue_number(self) -> None:
        result = synthesize_crossword(entries("CAT", "COW"), grid_size=5)

        cat = by_answer(result, "CAT")
        cow = by_answer(result, "COW")
        self.assertEqual((cat.start_row, cat.start_col, cat.orientation), (2, 1, Orientation.ACROSS))
        self.assertEqual((cow.start_row, cow.start_col, cow.orientation), (2, 1, Orientation.DOWN))
        self.assertEqual((cat.clue_number, cow.clue_number), (1, 1))
        self.assertEqual([word.answer for word in result.placed_words], ["CAT", "COW"])
        self.assertEqual(result.grid.cell(2, 1).number, 1)

    def test_empty_cells_are_blocked(self) -> None:
        for row in self.result.grid.cells:
            for cell in row:
                self.assertEqual(cell.blocked, cell.letter is None)

    def test_density_is_letter_share(self) -> None:
        letters = self.result.grid.letter_count()
        self.assertAlmostEqual(self.result.density, letters / 225 * 100)

    def test_runs_are_deterministic(self) -> None:
        again = GridSynthesizer().synthesize(fallback_questions())
        self.assertEqual(again.to_dict(), self.result.to_dict())


class ResultTests(unittest.TestCase):
    def test_convenience_wrapper_and_dict_shape(self) -> None:
        result = synthesize_crossword(entries("CAT", "BAD"), grid_size=5)
        payload = result.to_dict()

        self.assertEqual(
            set(payload),
            {
                "grid",
                "placedWords",
                "clues",
                "unplacedWords",
                "placedCount",
                "gridSize",
                "density",
                "intersectionCount",
            },
        )
        self.assertEqual(payload["gridSize"], 5)
        self.assertEqual(len(payload["grid"]), 5)
        self.assertEqual(set(payload["clues"]), {"across", "down"})
        self.assertIsNone(unplaced_summary(result))

        word = payload["placedWords"][0]
        self.assertEqual(word["clueNumber"], word["number"])
        self.assertEqual(word["orientation"], word["direction"])

    def test_answer_matching_ignores_case_and_spacing(self) -> None:
        word = synthesize_crossword(entries("AST")).placed_words[0]
        self.assertTrue(word.matches(" ast "))
        self.assertFalse(word.matches("ASTS"))
        self.assertFalse(word.matches(None))


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
