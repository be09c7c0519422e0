"""Tests for the worker pool and the pipeline logger."""

import time

import pytest

from business_dna.utils.logger import PipelineLogger
from business_dna.utils.worker_pool import WorkerPool


class TestWorkerPool:
    def test_results_in_input_order(self):
        def slow_for_small(n):
            time.sleep(0.01 * (5 - n))
            return n * 10

        results = WorkerPool(max_workers=3).map(slow_for_small, [1, 2, 3, 4])
        assert results == [(True, 1, 10), (True, 2, 20), (True, 3, 30), (True, 4, 40)]

    def test_failure_isolated(self):
        def boom_on_two(n):
            if n == 2:
                raise RuntimeError("boom")
            return n

        pool = WorkerPool(max_workers=2)
        results = pool.map(boom_on_two, [1, 2, 3])

        assert [ok for ok, _, _ in results] == [True, False, True]
        assert isinstance(results[1][2], RuntimeError)
        assert pool.get_stats()["total_failed"] == 1

    def test_empty(self):
        assert WorkerPool().map(lambda x: x, []) == []

    def test_invalid_workers(self):
        with pytest.raises(ValueError):
            WorkerPool(max_workers=0)


class TestPipelineLogger:
    def test_tracks_warnings_and_errors(self):
        logger = PipelineLogger("business_dna.tests.logger")
        logger.warning("Page skipped", url="https://peakfitness.com/team", reason="HTTP 500")
        logger.error("No pages extracted", exception=ValueError("empty"))

        summary = logger.get_error_summary()
        assert summary["total_warnings"] == 1
        assert summary["total_errors"] == 1
        assert summary["warnings"][0]["message"] == (
            "Page skipped [url=https://peakfitness.com/team reason=HTTP 500]"
        )
        assert summary["warnings"][0]["data"]["reason"] == "HTTP 500"

        logger.clear_tracking()
        assert logger.get_error_summary()["total_warnings"] == 0

    def test_time_stage_records_failure_and_reraises(self):
        logger = PipelineLogger("business_dna.tests.logger")

        with pytest.raises(RuntimeError):
            with logger.time_stage("crawl", url="https://peakfitness.com"):
                raise RuntimeError("browser crashed")

        assert "Failed crawl" in logger.errors[0]["message"]

    def test_file_output(self, tmp_path):
        logger = PipelineLogger("business_dna.tests.file", log_file="run.log", log_dir=tmp_path)
        logger.info("hello", pages=3)

        for handler in logger.logger.handlers:
            handler.flush()
        assert "hello [pages=3]" in (tmp_path / "run.log").read_text()
