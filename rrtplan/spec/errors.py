# Copyright 2025-2026 Dimensional Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Exceptions raised by the planning functions."""


class PlanningError(Exception):
    """Base class for recoverable planning failures."""


class ExhaustedBudgetError(PlanningError):
    """The iteration budget ran out before a solution was found.

    Retrying with a fresh random source, a larger budget or a larger step
    length may succeed.
    """

    def __init__(self, iterations: int, message: str | None = None) -> None:
        self.iterations = iterations
        if message is None:
            message = f"No path found after {iterations} iterations"
        super().__init__(message)
