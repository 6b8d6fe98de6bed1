"""Tests for the CLI helpers in main.py."""

import os
import tempfile
import unittest

from main import _load_urls, _title_parser


class TestTitleParser(unittest.TestCase):
    """Verify page titles are extracted from HTML bodies."""

    def test_plain_title(self):
        """A simple title is returned stripped."""
        self.assertEqual(_title_parser("<html><head><title> Home </title></head></html>"), "Home")

    def test_title_with_attributes(self):
        """Attributes on the title tag do not hide it."""
        self.assertEqual(_title_parser('<title lang="en">Hello</title>'), "Hello")

    def test_entities_are_decoded(self):
        """HTML entities come back as text."""
        self.assertEqual(_title_parser("<title>A &amp; B</title>"), "A & B")

    def test_missing_title(self):
        """Pages without a title give None."""
        self.assertIsNone(_title_parser("<p>no title here</p>"))


class TestLoadUrls(unittest.TestCase):
    """Verify the url list loader."""

    def test_skips_blanks_and_comments(self):
        """Blank lines and comments are ignored and the limit applies."""
        fd, path = tempfile.mkstemp(suffix=".txt")
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write("# seeds\nhttp://a\n\nhttp://b\nhttp://c\n")
        try:
            self.assertEqual(_load_urls(path, limit=2), ["http://a", "http://b"])
        finally:
            os.remove(path)


if __name__ == "__main__":
    unittest.main()
