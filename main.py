from __future__ import annotations

import argparse
import logging
from typing import Optional

from bs4 import BeautifulSoup

from crawlkit import static_scraper
from crawlkit.metrics import MetricsCollector
from crawlkit.storage import JsonlStorage

DEFAULT_URL_LIST_PATH = "urls.txt"


def _load_urls(path: str, limit: int = 100) -> list[str]:
    urls: list[str] = []
    with open(path, "r", encoding="utf-8") as f:
        for line in f:
            url = line.strip()
            if not url or url.startswith("#"):
                continue
            urls.append(url)
            if len(urls) >= limit:
                break
    if not urls:
        raise ValueError(f"No urls found in {path}")
    return urls


def _title_parser(body: str, req=None) -> Optional[str]:
    title = BeautifulSoup(body, "html.parser").title
    if title is None:
        return None
    return title.get_text(strip=True)


def run_crawl(
    url_path: str,
    results_path: str,
    limit: int,
    concurrency: int,
    timeout_ms: int,
    impersonate: Optional[str],
) -> None:
    metrics = MetricsCollector()
    storage = JsonlStorage(results_path)

    engine_settings = {"impersonate": impersonate} if impersonate else {}
    scraper = (
        static_scraper("cli")
        .configure({"max_concurrency": concurrency, "engine": engine_settings})
        .set_timeout(timeout_ms)
        .set_parser(_title_parser)
        .use(metrics)
        .add_feeds(_load_urls(url_path, limit=limit))
    )

    def print_result(err, req, res) -> None:
        print(
            f"url={req.url} success={err is None} status={res.get('status_code')} "
            f"latency_ms={res.get('latency_ms')} title={res.get('data')!r} error={err!r}"
        )

    scraper.on_result(storage).on_result(print_result)
    scraper.run()
    storage.close()

    snap = metrics.snapshot(window_secs=24 * 3600)
    print(f"\nDONE: success={snap.success_count} fail={snap.failure_count} total={snap.total_jobs}")


def main() -> None:
    parser = argparse.ArgumentParser(description="Fetch a list of pages and store page titles as JSON Lines.")
    parser.add_argument("--urls", default=DEFAULT_URL_LIST_PATH, help="Path to a file with one url per line")
    parser.add_argument("--results", default="results.jsonl", help="Output JSONL file path")
    parser.add_argument("--limit", type=int, default=100, help="Max number of urls to load")
    parser.add_argument("--concurrency", type=int, default=1, help="Max jobs running at once")
    parser.add_argument("--timeout", type=int, default=20000, help="Per-job timeout in milliseconds")
    parser.add_argument("--impersonate", default=None, help="curl_cffi browser profile, e.g. chrome120")
    parser.add_argument("--verbose", action="store_true", help="Debug logging")

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    run_crawl(
        url_path=args.urls,
        results_path=args.results,
        limit=args.limit,
        concurrency=args.concurrency,
        timeout_ms=args.timeout,
        impersonate=args.impersonate,
    )


if __name__ == "__main__":
    main()
