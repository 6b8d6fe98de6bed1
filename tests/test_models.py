"""Tests for the job factory and data model classes."""

import unittest

from crawlkit.errors import ConfigurationError
from crawlkit.models import FeedSpec, Job, ScraperOptions, create_job, normalize_feed


class TestCreateJob(unittest.TestCase):
    """Verify feeds are normalized into Job records."""

    def test_string_feed_becomes_url(self):
        """A bare string is the job url; data and params default to empty."""
        job = create_job("http://a")
        self.assertEqual(job.req.url, "http://a")
        self.assertEqual(job.req.data, {})
        self.assertEqual(job.req.params, {})
        self.assertEqual(job.req.retries, 0)
        self.assertIsNone(job.req.timeout)
        self.assertEqual(job.res, {})
        self.assertEqual(job.state, {})
        self.assertEqual(job.original, "http://a")

    def test_mapping_feed_copies_fields(self):
        """url, data, params and timeout are copied from a mapping feed."""
        feed = {"url": "http://b", "data": {"id": 3}, "params": {"q": "x"}, "timeout": 500}
        job = create_job(feed)
        self.assertEqual(job.req.url, "http://b")
        self.assertEqual(job.req.data, {"id": 3})
        self.assertEqual(job.req.params, {"q": "x"})
        self.assertEqual(job.req.timeout, 500)
        self.assertIs(job.original, feed)

    def test_mapping_feed_is_not_shared_with_job(self):
        """Mutating the job request must not alter the caller's feed."""
        feed = {"url": "http://b", "data": {"id": 3}}
        job = create_job(feed)
        job.req.data["id"] = 4
        self.assertEqual(feed["data"]["id"], 3)

    def test_missing_url_raises(self):
        """A mapping without url is a configuration error."""
        with self.assertRaises(ConfigurationError) as ctx:
            create_job({})
        self.assertIn("no url provided", str(ctx.exception))

    def test_empty_string_raises(self):
        """An empty url string is rejected."""
        with self.assertRaises(ConfigurationError):
            create_job("")

    def test_wrong_type_raises(self):
        """Numbers and other types are not feeds."""
        with self.assertRaises(ConfigurationError):
            create_job(42)

    def test_non_mapping_data_raises(self):
        """data must be a mapping."""
        with self.assertRaises(ConfigurationError):
            create_job({"url": "http://a", "data": ["x"]})

    def test_feed_spec_is_accepted(self):
        """A FeedSpec is already normalized."""
        job = create_job(FeedSpec(url="http://c", params={"p": 1}))
        self.assertEqual(job.req.url, "http://c")
        self.assertEqual(job.req.params, {"p": 1})

    def test_jobs_have_distinct_ids(self):
        """Every job gets its own identifier."""
        ids = {create_job("http://a").id for _ in range(20)}
        self.assertEqual(len(ids), 20)
        self.assertTrue(all(i.startswith("Job[") for i in ids))

    def test_normalize_feed_returns_feed_spec(self):
        """normalize_feed turns a string into a FeedSpec with defaults."""
        spec = normalize_feed("http://a")
        self.assertEqual(spec, FeedSpec(url="http://a"))


class TestScraperOptions(unittest.TestCase):
    """Verify option defaults and merge semantics."""

    def test_defaults(self):
        """Concurrency defaults to one."""
        options = ScraperOptions()
        self.assertEqual(options.max_concurrency, 1)
        self.assertGreater(options.timeout, 0)
        self.assertEqual(dict(options.engine), {})

    def test_merge_returns_new_value(self):
        """merge never mutates the original options."""
        options = ScraperOptions()
        merged = options.merge({"max_concurrency": 4})
        self.assertEqual(merged.max_concurrency, 4)
        self.assertEqual(options.max_concurrency, 1)

    def test_merge_engine_settings_key_by_key(self):
        """Engine settings are merged rather than replaced."""
        options = ScraperOptions().merge({"engine": {"method": "POST"}})
        options = options.merge({"engine": {"impersonate": "chrome120"}})
        self.assertEqual(dict(options.engine), {"method": "POST", "impersonate": "chrome120"})

    def test_unknown_key_raises(self):
        """Unknown options are rejected."""
        with self.assertRaises(ConfigurationError):
            ScraperOptions().merge({"retries": 3})

    def test_bad_values_raise(self):
        """Wrongly shaped values are rejected."""
        with self.assertRaises(ConfigurationError):
            ScraperOptions().merge({"max_concurrency": 0})
        with self.assertRaises(ConfigurationError):
            ScraperOptions().merge({"timeout": "fast"})
        with self.assertRaises(ConfigurationError):
            ScraperOptions().merge("max_concurrency=2")

    def test_options_are_immutable(self):
        """Frozen dataclass should raise on attribute assignment."""
        with self.assertRaises(AttributeError):
            ScraperOptions().timeout = 10


class TestJob(unittest.TestCase):
    """Verify the Job record itself."""

    def test_res_and_state_are_per_job(self):
        """Two jobs never share result or state mappings."""
        a, b = create_job("http://a"), create_job("http://b")
        a.res["x"] = 1
        a.state["y"] = 2
        self.assertEqual(b.res, {})
        self.assertEqual(b.state, {})
        self.assertIsInstance(a, Job)


if __name__ == "__main__":
    unittest.main()
