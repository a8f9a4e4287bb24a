"""Tests for the thread fan-out helpers."""

import threading

import numpy as np
import pytest

from seam_shrink.parallel import resolve_workers, row_bands, run_phase, stripes


class TestResolveWorkers:
    def test_capped_by_extent(self):
        """Test that there are never more workers than lines."""
        assert resolve_workers(3, max_workers=8) == 3

    def test_capped_by_max_workers(self):
        """Test that the explicit cap is honoured."""
        assert resolve_workers(100, max_workers=4) == 4

    def test_at_least_one(self):
        """Test that an empty extent still gets one worker."""
        assert resolve_workers(0, max_workers=4) == 1

    def test_defaults_to_cpu_count(self, monkeypatch):
        """Test that the CPU count is used when nothing is configured."""
        monkeypatch.setattr("seam_shrink.parallel.os.cpu_count", lambda: 6)
        monkeypatch.setattr(
            "seam_shrink.parallel.get_settings",
            lambda: type("S", (), {"max_workers": None})(),
        )

        assert resolve_workers(100) == 6


class TestPartitions:
    @pytest.mark.parametrize("n,workers", [(10, 3), (7, 7), (100, 8), (5, 1)])
    def test_row_bands_cover_range_once(self, n, workers):
        """Test that bands are contiguous and cover every row once."""
        bands = row_bands(n, workers)

        covered = [i for start, stop in bands for i in range(start, stop)]
        assert covered == list(range(n))
        assert len(bands) == workers

    @pytest.mark.parametrize("n,workers", [(10, 3), (4, 4), (9, 2)])
    def test_stripes_cover_range_once(self, n, workers):
        """Test that stripes cover every index once."""
        parts = stripes(n, workers)

        assert sorted(np.concatenate(parts).tolist()) == list(range(n))
        assert parts[1].tolist() == list(range(1, n, workers))


class TestRunPhase:
    def test_runs_every_part(self):
        """Test that each part is handed to a worker."""
        seen = []
        lock = threading.Lock()

        def work(part):
            with lock:
                seen.append(part)

        run_phase(work, [1, 2, 3, 4])

        assert sorted(seen) == [1, 2, 3, 4]

    def test_single_part_runs_inline(self):
        """Test that one part runs on the calling thread."""
        threads = []

        run_phase(lambda part: threads.append(threading.current_thread()), [0])

        assert threads == [threading.current_thread()]

    def test_worker_exception_propagates(self):
        """Test that a failing worker raises in the caller."""
        def work(part):
            if part == 2:
                raise RuntimeError("boom")

        with pytest.raises(RuntimeError, match="boom"):
            run_phase(work, [1, 2, 3])
