from __future__ import annotations

from typing import List


class SavetrackError(Exception):
    pass


class PlanLoadError(SavetrackError):
    """The plan document could not be found or parsed."""


class PlanValidationError(SavetrackError):
    def __init__(self, issues: List[str]):
        self.issues = list(issues)
        super().__init__("; ".join(self.issues))
