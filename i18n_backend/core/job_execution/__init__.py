"""
Translation job execution loop.

Exports:
  - TranslationJobExecutor: Runs one job to a terminal state
  - JobRunSummary: Result of one run
"""

from i18n_backend.core.job_execution.executor import TranslationJobExecutor
from i18n_backend.core.job_execution.outcomes import JobRunSummary

__all__ = ["JobRunSummary", "TranslationJobExecutor"]
