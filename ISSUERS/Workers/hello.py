"""
Hello workers: the smallest multiprocessing example.

Each task runs in a separate process, so CPU-bound work is not serialized
by the GIL the way thread pool work is.
"""

import multiprocessing
import os
from typing import List, Optional

import structlog

__all__ = ["run_hello_workers", "greet"]

logger = structlog.get_logger()


def greet(worker_number: int) -> str:
	return f"Hello from worker {worker_number} (pid {os.getpid()})"


def run_hello_workers(count: int, processes: Optional[int] = None) -> List[str]:
	"""Run greet() for 1..count in a process pool; results keep submission order."""
	if isinstance(count, bool) or not isinstance(count, int) or count < 1:
		raise ValueError("count must be a positive integer")
	if processes is not None and processes < 1:
		raise ValueError("processes must be a positive integer")

	processes = processes or min(count, os.cpu_count() or 1)
	logger.info("hello_workers_started", count=count, processes=processes)

	with multiprocessing.Pool(processes=processes) as pool:
		messages = pool.map(greet, range(1, count + 1))

	logger.info("hello_workers_finished", count=len(messages))
	return messages
