"""Thread-safe job store for background geotag jobs."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Any
import threading
import time


def now_ts() -> int:
    return int(time.time())


@dataclass
class Job:
    job_id: str
    data: Dict[str, Any] = field(default_factory=dict)


class JobStore:
    def __init__(self):
        self._jobs: Dict[str, Job] = {}
        self._lock = threading.Lock()

    def create(self, job_id: str, initial: Dict[str, Any] | None = None) -> Job:
        with self._lock:
            job = Job(job_id=job_id, data=initial.copy() if initial else {})
            self._jobs[job_id] = job
            return job

    def update(self, job_id: str, **kwargs) -> None:
        with self._lock:
            job = self._jobs.get(job_id)
            if not job:
                return
            job.data.update(kwargs)

    def append(self, job_id: str, key: str, item: Any) -> None:
        """Append `item` to the list stored under `key`."""
        with self._lock:
            job = self._jobs.get(job_id)
            if not job:
                return
            job.data.setdefault(key, []).append(item)

    def get(self, job_id: str) -> Dict[str, Any] | None:
        with self._lock:
            job = self._jobs.get(job_id)
            if not job:
                return None
            data = job.data.copy()
            for key, value in data.items():
                if isinstance(value, list):
                    data[key] = list(value)
            return data


batch_jobs = JobStore()
