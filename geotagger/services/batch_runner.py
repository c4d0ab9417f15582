"""Run one geotag operation over many photos, synchronously or as a background job."""
from __future__ import annotations

import logging
import threading
import uuid
from typing import Any, Callable, Dict, List, Optional

from geotagger.clearer import clear_geotag
from geotagger.coordinates import Coordinate
from geotagger.errors import GeotagError
from geotagger.services.job_store import batch_jobs, now_ts
from geotagger.writer import write_geotag

Result = Dict[str, Optional[str]]
ResultCallback = Callable[[int, Result], None]


def run_batch(paths: List[str], operation: Callable[[Any], None],
              result_cb: ResultCallback | None = None) -> List[Result]:
    """Call `operation` on every path, one after the other.

    A failure on one path does not stop the others. Each result is
    ``{"path": ..., "error": None}`` on success or carries the user-facing
    error message.
    """
    results = []
    for idx, path in enumerate(paths, start=1):
        try:
            operation(path)
            result = {"path": str(path), "error": None}
        except GeotagError as exc:
            logging.warning("Geotag operation failed for %s: %s", path, exc)
            result = {"path": str(path), "error": exc.describe()}
        results.append(result)
        if result_cb:
            result_cb(idx, result)
    return results


def apply_geotag(paths: List[str], coordinate: Coordinate,
                 result_cb: ResultCallback | None = None) -> List[Result]:
    """Write `coordinate` to every path."""
    return run_batch(paths, lambda path: write_geotag(path, coordinate), result_cb)


def clear_geotags(paths: List[str], result_cb: ResultCallback | None = None) -> List[Result]:
    """Remove the geotag from every path."""
    return run_batch(paths, clear_geotag, result_cb)


def _run(job_id: str, paths: List[str], operation: Callable[[Any], None]):
    batch_jobs.update(job_id, state="running", total=len(paths), start_time=now_ts())

    def record(done: int, result: Result):
        job = batch_jobs.get(job_id) or {}
        if result["error"]:
            batch_jobs.append(job_id, "errors", result)
            batch_jobs.update(job_id, failed=(job.get("failed") or 0) + 1)
        else:
            batch_jobs.update(job_id, succeeded=(job.get("succeeded") or 0) + 1)
        batch_jobs.update(job_id, processed=done, current_file=result["path"], last_update=now_ts())

    try:
        run_batch(paths, operation, result_cb=record)
    except Exception as exc:
        logging.exception("Batch job %s crashed", job_id)
        batch_jobs.update(job_id, state="error", error=str(exc), finished_time=now_ts())
        return
    batch_jobs.update(job_id, state="done", current_file=None, finished_time=now_ts())


def _start_job(paths: List[str], run: Callable[[Any], None], **info) -> str:
    job_id = uuid.uuid4().hex
    batch_jobs.create(job_id, {
        "state": "pending",
        "total": len(paths),
        "processed": 0,
        "succeeded": 0,
        "failed": 0,
        "errors": [],
        **info,
    })
    threading.Thread(target=_run, args=(job_id, list(paths), run), daemon=True).start()
    return job_id


def start_apply_job(paths: List[str], coordinate: Coordinate) -> str:
    return _start_job(paths, lambda path: write_geotag(path, coordinate),
                      operation="apply", geotag=coordinate.to_dict())


def start_clear_job(paths: List[str]) -> str:
    return _start_job(paths, clear_geotag, operation="clear")
