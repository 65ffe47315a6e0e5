"""
Shell Phenotyping System - Analysis Session Module
Runs analyses off the calling thread and keeps only the newest image's result.

Each submission is tagged with a generation number. When a run finishes after
a newer image has been submitted, its output is discarded instead of being
published, so a slow analysis of an old image can never overwrite the result
of the current one.
"""

import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Callable, NamedTuple, Optional

import numpy as np

from .phenotype_analysis import PhenotypicData, analyze
from .view_rendering import ViewMode


class SessionResult(NamedTuple):
    generation: int
    mode: ViewMode
    output_image: np.ndarray
    phenotypes: Optional[PhenotypicData]


class AnalysisSession:
    """Latest-wins wrapper around the pipeline for interactive hosts."""

    def __init__(self, max_workers: int = 2, passes: int = 1,
                 analyze_fn: Callable = analyze):
        self.passes = passes
        self._analyze = analyze_fn
        self._executor = ThreadPoolExecutor(max_workers=max_workers)
        self._lock = threading.Lock()
        self._generation = 0
        self._latest: Optional[SessionResult] = None

    @property
    def latest_result(self) -> Optional[SessionResult]:
        with self._lock:
            return self._latest

    @property
    def current_generation(self) -> int:
        with self._lock:
            return self._generation

    def submit(self, pixels, width: int, height: int, mode='overlay',
               callback: Optional[Callable[[SessionResult], None]] = None) -> Future:
        """
        Queue an analysis. Newer submissions supersede older ones.

        Returns:
            Future resolving to the SessionResult, or None if superseded
        """
        mode = ViewMode.parse(mode)
        with self._lock:
            self._generation += 1
            generation = self._generation
            # Results shown so far belong to an older image
            self._latest = None

        return self._executor.submit(self._run, generation, pixels, width, height,
                                     mode, callback)

    def _run(self, generation, pixels, width, height, mode, callback):
        output, phenotypes = self._analyze(pixels, width, height, mode, passes=self.passes)
        result = SessionResult(generation, mode, output, phenotypes)

        with self._lock:
            if generation != self._generation:
                return None
            self._latest = result

        if callback is not None:
            callback(result)
        return result

    def shutdown(self, wait: bool = True):
        self._executor.shutdown(wait=wait)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.shutdown()
