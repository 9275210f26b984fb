"""Integration tests — E2E via subprocess against sample.log."""

import json
import os
import subprocess
import sys
import unittest

SAMPLE_LOG = os.path.join(os.path.dirname(__file__), "..", "logs", "sample.log")
MAIN_PY = os.path.join(os.path.dirname(__file__), "..", "main.py")


def _run(*args: str, env=None) -> subprocess.CompletedProcess:
    """Run main.py with given args, return CompletedProcess."""
    return subprocess.run(
        [sys.executable, MAIN_PY, *args],
        capture_output=True,
        text=True,
        env=env,
    )


def _listed(stdout: str) -> int:
    """Number of records in the plain per-record listing."""
    return sum(1 for line in stdout.splitlines() if line.startswith("IP: "))


def _json(*args: str) -> dict:
    result = _run("-i", SAMPLE_LOG, "-o", "json", *args)
    assert result.returncode == 0, result.stderr
    return json.loads(result.stdout)


class TestPlainOutput(unittest.TestCase):
    def test_all_records_listed(self):
        result = _run("-i", SAMPLE_LOG)
        self.assertEqual(result.returncode, 0)
        self.assertEqual(_listed(result.stdout), 7)
        self.assertIn("Requests per IP address:", result.stdout)

    def test_skipped_lines_warned(self):
        result = _run("-i", SAMPLE_LOG)
        self.assertIn("too_few_fields", result.stderr)
        self.assertIn("bad_timestamp", result.stderr)

    def test_summary_only(self):
        result = _run("-i", SAMPLE_LOG, "--summary-only")
        self.assertEqual(result.returncode, 0)
        self.assertEqual(_listed(result.stdout), 0)
        self.assertIn("Total requests: 7", result.stdout)


class TestFilters(unittest.TestCase):
    def test_method(self):
        doc = _json("-m", "GET")
        self.assertEqual(len(doc["records"]), 4)

    def test_ip_and_status(self):
        doc = _json("-f", "127.0.0.1", "-c", "404")
        self.assertEqual([r["url"] for r in doc["records"]], ["/missing"])

    def test_date_range(self):
        doc = _json("-d", "01/Jan/2021,31/Dec/2021")
        self.assertEqual(len(doc["records"]), 2)

    def test_pattern(self):
        doc = _json("-p", "curl")
        self.assertEqual({r["ip"] for r in doc["records"]}, {"10.0.0.5"})

    def test_min_size(self):
        doc = _json("-z", "2000")
        self.assertEqual(sorted(r["size"] for r in doc["records"]), [2048, 20480])


class TestSorting(unittest.TestCase):
    def test_sort_by_size(self):
        sizes = [r["size"] for r in _json("-s", "size")["records"]]
        self.assertEqual(sizes, sorted(sizes))

    def test_unknown_sort_keeps_order(self):
        plain = [r["url"] for r in _json()["records"]]
        unknown = [r["url"] for r in _json("-s", "bogus")["records"]]
        self.assertEqual(plain, unknown)


class TestErrors(unittest.TestCase):
    def test_bad_date_range_exit_2(self):
        result = _run("-i", SAMPLE_LOG, "-d", "not,dates")
        self.assertEqual(result.returncode, 2)
        self.assertIn("Error:", result.stderr)
        self.assertEqual(result.stdout, "")

    def test_no_input_exit_2(self):
        result = _run()
        self.assertEqual(result.returncode, 2)

    def test_missing_file_continues(self):
        result = _run("-i", f"/nonexistent/missing.log,{SAMPLE_LOG}")
        self.assertEqual(result.returncode, 1)
        self.assertIn("does not exist", result.stdout)
        self.assertEqual(result.stdout.count("Requests per IP address:"), 1)

    def test_missing_file_halts(self):
        result = _run("-i", f"/nonexistent/missing.log,{SAMPLE_LOG}", "--on-error", "halt")
        self.assertEqual(result.returncode, 1)
        self.assertNotIn("Requests per IP address:", result.stdout)


class TestCsvOutput(unittest.TestCase):
    def test_csv_header(self):
        result = _run("-i", SAMPLE_LOG, "-o", "csv")
        self.assertEqual(result.returncode, 0)
        self.assertTrue(result.stdout.startswith("ip,date,method,url,status,size,referer,agent"))


if __name__ == "__main__":
    unittest.main()
