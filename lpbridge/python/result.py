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

"""The output from solving a Problem encoded by lp_format.py.

The solver reports its result keyed by column (variable) name, with one entry
per row (constraint):

  {
    "Status": "Optimal",
    "ObjectiveValue": 6.5,
    "Columns": {"x": {"Primal": 1.5, "Dual": 0.2}, "y": {"Primal": 2.0}},
    "Rows": [{"Dual": 0.5}]
  }

decode() maps it back to arrays in the order of the original Problem.
"""

import dataclasses
import math
import re
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from lpbridge.python import problem

OPTIMAL_STATUS = "Optimal"

_WHITESPACE = re.compile(r"\s+")


@dataclasses.dataclass(frozen=True)
class ColumnValues:
    """The values reported by the solver for one variable.

    Attributes:
      primal: The value of the variable, None if not reported.
      dual: The reduced cost of the variable, None if not reported.
    """

    primal: Optional[float] = None
    dual: Optional[float] = None


@dataclasses.dataclass(frozen=True)
class RowValues:
    """The values reported by the solver for one constraint.

    Attributes:
      dual: The shadow price of the constraint, None if not reported.
    """

    dual: Optional[float] = None


@dataclasses.dataclass(frozen=True)
class SolverOutput:
    """The raw result of a solver run.

    Attributes:
      status: The solver's model status, e.g. "Optimal" or "Time limit reached".
      objective_value: The objective value, possibly infinite or NaN.
      columns: The values of each variable, keyed by the variable's LP name.
      rows: The values of each constraint, in constraint order.
    """

    status: str
    objective_value: float = 0.0
    columns: Mapping[str, ColumnValues] = dataclasses.field(default_factory=dict)
    rows: Tuple[RowValues, ...] = ()


def _get(data: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in data:
            return data[key]
    return None


def _optional_float(value: Any) -> Optional[float]:
    return None if value is None else float(value)


def parse_solver_output(data: Mapping[str, Any]) -> SolverOutput:
    """Returns the SolverOutput for a mapping as returned by a HiGHS binding.

    Both the HiGHS spelling ("Status", "ObjectiveValue", "Columns", "Rows",
    "Primal", "Dual") and the lower case one ("status", "objective_value",
    "columns", "rows", "primal", "dual") are accepted.

    Raises:
      ValueError: If the status is missing.
    """
    status = _get(data, "Status", "status")
    if not isinstance(status, str):
        raise ValueError(f"solver output has no status string: {status!r}")
    objective_value = _get(data, "ObjectiveValue", "objective_value")
    columns = {}
    for name, column in (_get(data, "Columns", "columns") or {}).items():
        columns[name] = ColumnValues(
            primal=_optional_float(_get(column, "Primal", "primal")),
            dual=_optional_float(_get(column, "Dual", "dual")),
        )
    rows = tuple(
        RowValues(dual=_optional_float(_get(row, "Dual", "dual")))
        for row in (_get(data, "Rows", "rows") or ())
    )
    return SolverOutput(
        status=status,
        objective_value=(
            math.nan if objective_value is None else float(objective_value)
        ),
        columns=columns,
        rows=rows,
    )


@dataclasses.dataclass(frozen=True)
class OptimalResult:
    """The solver found an optimal solution.

    Attributes:
      objective_value: The optimal objective value.
      solution: The value of each variable, in problem order.
      dual_solution: The shadow price of each constraint, in constraint order.
      variable_duals: The reduced cost of each variable, in problem order.
    """

    objective_value: float
    solution: Tuple[float, ...]
    dual_solution: Tuple[float, ...]
    variable_duals: Tuple[float, ...]

    @property
    def status(self) -> str:
        return "optimal"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": self.status,
            "objective_value": self.objective_value,
            "solution": list(self.solution),
            "dual_solution": list(self.dual_solution),
            "variable_duals": list(self.variable_duals),
        }


@dataclasses.dataclass(frozen=True)
class NonOptimalResult:
    """The solve ended without an optimal solution (infeasible, limit...).

    Attributes:
      status: The normalized solver status, e.g. "time_limit_reached".
      message: A human readable message with the solver's own status text.
      objective_value: The objective value as reported, possibly infinite (for
        unbounded problems) or NaN.
    """

    status: str
    message: str
    objective_value: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": self.status,
            "message": self.message,
            "objective_value": self.objective_value,
        }


DecodedResult = Union[OptimalResult, NonOptimalResult]


def normalize_status(status: str) -> str:
    """Returns `status` lower cased, with runs of whitespace replaced by "_".

    E.g. "Time Limit Reached" becomes "time_limit_reached".
    """
    return _WHITESPACE.sub("_", status.lower())


def decode(
    output: Union[SolverOutput, Mapping[str, Any]], prob: problem.Problem
) -> DecodedResult:
    """Returns the result of `output` with values in the order of `prob`.

    Variables are looked up by their resolved name (see
    problem.resolve_variable()). Values the solver did not report default to
    zero: solvers may omit columns that do not appear in any term.

    Args:
      output: The raw solver output, parsed or as a mapping.
      prob: The problem that was encoded and solved.

    Returns:
      An OptimalResult if the status is exactly "Optimal", otherwise a
      NonOptimalResult.
    """
    if not isinstance(output, SolverOutput):
        output = parse_solver_output(output)
    if output.status != OPTIMAL_STATUS:
        return NonOptimalResult(
            status=normalize_status(output.status),
            message=f"Problem status: {output.status}",
            objective_value=output.objective_value,
        )
    solution: List[float] = []
    variable_duals: List[float] = []
    for index in range(prob.num_variables or 0):
        column = output.columns.get(prob.variable_name(index), ColumnValues())
        solution.append(column.primal or 0.0)
        variable_duals.append(column.dual or 0.0)
    return OptimalResult(
        objective_value=output.objective_value,
        solution=tuple(solution),
        dual_solution=tuple(row.dual or 0.0 for row in output.rows),
        variable_duals=tuple(variable_duals),
    )
