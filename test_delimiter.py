from __future__ import annotations

import time
import unittest

from silo.delimiter import (
    detect_delimiter,
    find_collision,
    is_ascii_punctuation,
    is_delimiter_char,
    logical_lines,
    select_safe_delimiter,
)
from silo.document import Record
from silo.errors import EmptyLine, EmptyPath, InvalidDeclaration, NoSafeDelimiter


def _records(*contents: str):
    return [Record(f"f{i}.txt", c) for i, c in enumerate(contents)]


class DetectDelimiterTests(unittest.TestCase):
    def test_simple_declaration(self):
        self.assertEqual(detect_delimiter("> a.txt"), (">", "a.txt"))
        self.assertEqual(detect_delimiter("=== src/main.py"), ("===", "src/main.py"))

    def test_path_is_trimmed(self):
        self.assertEqual(detect_delimiter(">>  spaced/name.txt  "), (">>", "spaced/name.txt"))

    def test_unicode_delimiter(self):
        self.assertEqual(detect_delimiter("🐢 file.py"), ("🐢", "file.py"))
        self.assertEqual(detect_delimiter("🌾🌾 a/b"), ("🌾🌾", "a/b"))

    def test_permissive_rule_takes_letters(self):
        # any non-whitespace run counts under the permissive rule
        self.assertEqual(detect_delimiter("hello world"), ("hello", "world"))

    def test_ascii_rule(self):
        self.assertEqual(detect_delimiter("-*- x", ascii_only=True), ("-*-", "x"))
        with self.assertRaises(InvalidDeclaration):
            detect_delimiter("🐢 file.py", ascii_only=True)
        with self.assertRaises(InvalidDeclaration):
            detect_delimiter("abc def", ascii_only=True)

    def test_blank_lines(self):
        for line in ("", "   ", "\t"):
            with self.assertRaises(EmptyLine):
                detect_delimiter(line)

    def test_leading_space_is_invalid(self):
        with self.assertRaises(InvalidDeclaration):
            detect_delimiter(" > a.txt")

    def test_missing_space(self):
        with self.assertRaises(InvalidDeclaration):
            detect_delimiter(">")
        with self.assertRaises(InvalidDeclaration):
            detect_delimiter(">\ta.txt")

    def test_empty_path(self):
        with self.assertRaises(EmptyPath):
            detect_delimiter(">   ")

    def test_classifiers(self):
        self.assertTrue(is_delimiter_char("🐢"))
        self.assertTrue(is_delimiter_char("a"))
        for ch in (" ", "\t", "\n", "\r"):
            self.assertFalse(is_delimiter_char(ch))
        for ch in "!/:@[`{~":
            self.assertTrue(is_ascii_punctuation(ch), ch)
        for ch in "a0 é":
            self.assertFalse(is_ascii_punctuation(ch), ch)


class LogicalLinesTests(unittest.TestCase):
    def test_line_endings(self):
        self.assertEqual(logical_lines("a\r\nb\rc\n"), ["a", "b", "c"])
        self.assertEqual(logical_lines("a\n\n"), ["a", ""])
        self.assertEqual(logical_lines(""), [])
        self.assertEqual(logical_lines("no newline"), ["no newline"])


class SelectSafeDelimiterTests(unittest.TestCase):
    def test_no_content_prefers_gt(self):
        self.assertEqual(select_safe_delimiter([]), ">")
        self.assertEqual(select_safe_delimiter(_records("plain\ntext\n")), ">")

    def test_preference_order(self):
        self.assertEqual(select_safe_delimiter(_records("> x\n")), "=")
        self.assertEqual(select_safe_delimiter(_records("> x\n", "= y\n")), "*")
        self.assertEqual(select_safe_delimiter(_records("> x\n= y\n* z\n")), "-")

    def test_shortest_wins_over_preference(self):
        # every length-1 candidate collides, so length 2 starts over at '>'
        content = "> a\n= b\n* c\n- d\n"
        self.assertEqual(select_safe_delimiter(_records(content)), ">>")
        self.assertEqual(select_safe_delimiter(_records(content + ">> e\n")), "==")

    def test_prefix_exact(self):
        self.assertEqual(select_safe_delimiter(_records(">noSpace\n")), ">")
        self.assertEqual(select_safe_delimiter(_records(">> x\n")), ">")
        self.assertEqual(select_safe_delimiter(_records(" > indented\n")), ">")

    def test_deterministic(self):
        recs = _records("> 1\n= 2\n", "* 3\n")
        picks = {select_safe_delimiter(recs) for _ in range(5)}
        self.assertEqual(picks, {"-"})

    def test_exhaustion(self):
        lines = [f"{ch * n} collide" for ch in ">=*-" for n in range(1, 51)]
        with self.assertRaises(NoSafeDelimiter) as cm:
            select_safe_delimiter(_records("\n".join(lines) + "\n"))
        self.assertIn("1-50", str(cm.exception))

    def test_one_survivor_left(self):
        lines = [f"{ch * n} collide" for ch in ">=*-" for n in range(1, 51)]
        lines.remove("-" * 50 + " collide")
        self.assertEqual(select_safe_delimiter(_records("\n".join(lines))), "-" * 50)

    def test_cr_line_breaks_count_as_lines(self):
        self.assertEqual(select_safe_delimiter(_records("x\r> y\r\n")), "=")

    def test_large_single_file_is_fast(self):
        body = "\n".join(f"> line {i}" if i % 3 == 0 else f"value = {i}" for i in range(50_000))
        recs = _records(body)
        t0 = time.perf_counter()
        self.assertEqual(select_safe_delimiter(recs), "=")
        self.assertLess(time.perf_counter() - t0, 0.2)


class FindCollisionTests(unittest.TestCase):
    def test_collision_names_record(self):
        recs = _records("fine\n", "oops\n> here\n")
        hit = find_collision(recs, ">")
        self.assertIsNotNone(hit)
        self.assertEqual(hit.path, "f1.txt")

    def test_no_space_no_collision(self):
        self.assertIsNone(find_collision(_records(">noSpace\n"), ">"))

    def test_unicode_collision(self):
        recs = _records("🐢 looks like a header\n")
        self.assertIsNotNone(find_collision(recs, "🐢"))
        self.assertIsNone(find_collision(recs, "🐍"))


if __name__ == "__main__":
    unittest.main()
