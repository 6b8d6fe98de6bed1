"""Tests for the JsonlStorage result sink."""

import json
import os
import tempfile
import unittest

from crawlkit.errors import JobError
from crawlkit.models import JobRequest
from crawlkit.storage import JsonlStorage


class TestJsonlStorage(unittest.TestCase):
    """Verify one JSON line is written per outcome."""

    def test_writes_success_and_failure(self):
        """Both outcomes end up in the file after close()."""
        fd, path = tempfile.mkstemp(suffix=".jsonl")
        os.close(fd)
        try:
            storage = JsonlStorage(path)
            storage(None, JobRequest(url="http://a"), {"data": {"title": "A"}, "status_code": 200})
            storage(JobError("HTTP_404", status_code=404), JobRequest(url="http://b"), {"status_code": 404})
            storage.close()

            with open(path, encoding="utf-8") as f:
                rows = [json.loads(line) for line in f]
        finally:
            os.remove(path)

        self.assertEqual(len(rows), 2)
        self.assertEqual(rows[0]["url"], "http://a")
        self.assertTrue(rows[0]["status"])
        self.assertEqual(rows[0]["parsed_data"], {"title": "A"})
        self.assertFalse(rows[1]["status"])
        self.assertIn("HTTP_404", rows[1]["error"])


if __name__ == "__main__":
    unittest.main()
