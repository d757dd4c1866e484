# Copyright 2010-2025 Google LLC
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

"""Errors raised while translating problems to and from the LP text format.

We use the standard Python errors where they fit: an inconsistent problem or
an invalid option set is a ValueError, a solver failure is a RuntimeError.
Solver statuses like "Infeasible" are not errors, see result.py.
"""

import dataclasses
from typing import Optional, Sequence, Tuple, Union

Path = Tuple[Union[str, int], ...]


@dataclasses.dataclass(frozen=True)
class Diagnostic:
    """One structural defect found in a problem or an option set.

    Attributes:
      path: The field path of the offending value, e.g.
        ("constraints", "dense", 2).
      message: A human readable description of the defect.
      actual: The count (or value) that was found, if relevant.
      expected: The count (or value) that was expected, if relevant.
    """

    path: Path
    message: str
    actual: Optional[object] = None
    expected: Optional[object] = None

    def path_string(self) -> str:
        """Returns the path as a dotted string, e.g. 'constraints.dense[2]'."""
        result = ""
        for part in self.path:
            if isinstance(part, int):
                result += f"[{part}]"
            elif result:
                result += f".{part}"
            else:
                result = part
        return result

    def __str__(self) -> str:
        return self.message


def _join(diagnostics: Sequence[Diagnostic]) -> str:
    return "; ".join(d.message for d in diagnostics)


class InvalidProblemError(ValueError):
    """The problem description is not consistent.

    Contains all the defects found, not only the first one.
    """

    def __init__(self, diagnostics: Sequence[Diagnostic]):
        super().__init__(f"Invalid parameters: {_join(diagnostics)}")
        self.diagnostics: Tuple[Diagnostic, ...] = tuple(diagnostics)


class InvalidOptionsError(ValueError):
    """The solver options contain unknown names, bad types or bad values."""

    def __init__(self, diagnostics: Sequence[Diagnostic]):
        super().__init__(f"Invalid parameters: {_join(diagnostics)}")
        self.diagnostics: Tuple[Diagnostic, ...] = tuple(diagnostics)


class SolverError(RuntimeError):
    """The external solver failed to produce a result.

    This is raised when the solver itself breaks (e.g. it could not parse the
    LP text), never because the problem is infeasible or unbounded.
    """
