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

"""Structural validation of a Problem before it is encoded.

Every check runs, whatever the result of the others, so that a caller building
problems programmatically sees all the shape mismatches at once:

  diagnostics = validate.validate_problem(my_problem)
  for d in diagnostics:
    print(d.path_string(), d.message)

The number of variables is derived once from the objective (the length of the
linear coefficients, or the dimension of the quadratic matrix when there are no
linear coefficients); every other array is checked against it. Checks that need
it are skipped when it cannot be derived, that failure being reported itself.
"""

from typing import Dict, List, Optional

from lpbridge.python import errors
from lpbridge.python import problem


class _Collector:
    """Accumulates the diagnostics of the independent checks."""

    def __init__(self):
        self.diagnostics: List[errors.Diagnostic] = []

    def add(
        self,
        path: errors.Path,
        message: str,
        *,
        actual: Optional[object] = None,
        expected: Optional[object] = None,
    ) -> None:
        self.diagnostics.append(
            errors.Diagnostic(
                path=path, message=message, actual=actual, expected=expected
            )
        )


def _check_objective(prob: problem.Problem, collector: _Collector) -> Optional[int]:
    """Checks the objective and returns the number of variables it implies."""
    objective = prob.objective
    if objective.linear is None and objective.quadratic is None:
        collector.add(
            ("objective",),
            "Objective must have linear coefficients, a quadratic term, or both",
        )
        return None
    num_vars = prob.num_variables
    if num_vars == 0:
        collector.add(
            ("objective", "linear" if objective.linear is not None else "quadratic"),
            "At least one objective coefficient is required",
            actual=0,
            expected=1,
        )
        return None
    if objective.quadratic is not None:
        _check_quadratic(objective.quadratic, collector)
        if objective.linear is not None:
            dimension = problem.matrix_dimension(objective.quadratic)
            if dimension != num_vars:
                collector.add(
                    ("objective", "quadratic"),
                    f"Quadratic matrix has dimension {dimension} but the linear"
                    f" objective has {num_vars} coefficients",
                    actual=dimension,
                    expected=num_vars,
                )
    return num_vars


def _check_quadratic(matrix: problem.Matrix, collector: _Collector) -> None:
    path = ("objective", "quadratic")
    if isinstance(matrix, problem.DenseMatrix):
        size = len(matrix.rows)
        for index, row in enumerate(matrix.rows):
            if len(row) != size:
                collector.add(
                    path + ("matrix", index),
                    f"Quadratic matrix row {index} has {len(row)} entries but"
                    f" expected {size} (the matrix must be square)",
                    actual=len(row),
                    expected=size,
                )
    elif isinstance(matrix, problem.SparseMatrix):
        num_rows, num_cols = matrix.shape
        if num_rows != num_cols:
            collector.add(
                path + ("shape",),
                f"Quadratic matrix shape [{num_rows}, {num_cols}] must be square",
                actual=num_cols,
                expected=num_rows,
            )
        _check_coordinates(matrix, path, "rows", "columns", collector)
    else:
        raise TypeError(f"unsupported matrix format: {type(matrix).__name__}")


def _check_coordinates(
    matrix: problem.SparseMatrix,
    path: errors.Path,
    row_noun: str,
    col_noun: str,
    collector: _Collector,
) -> None:
    """Checks the COO arrays agree in length and stay within the shape."""
    lengths = (len(matrix.rows), len(matrix.cols), len(matrix.values))
    if len(set(lengths)) != 1:
        collector.add(
            path,
            "Sparse matrix arrays must have equal length (rows: %d, cols: %d,"
            " values: %d)" % lengths,
            actual=lengths,
        )
    num_rows, num_cols = matrix.shape
    for index, row in enumerate(matrix.rows):
        if row < 0:
            collector.add(
                path + ("rows", index), f"Row index {row} must be non-negative"
            )
        elif row >= num_rows:
            collector.add(
                path + ("rows", index),
                f"Row index {row} exceeds number of {row_noun} ({num_rows})",
                actual=row,
                expected=num_rows,
            )
    for index, col in enumerate(matrix.cols):
        if col < 0:
            collector.add(
                path + ("cols", index), f"Column index {col} must be non-negative"
            )
        elif col >= num_cols:
            collector.add(
                path + ("cols", index),
                f"Column index {col} exceeds number of {col_noun} ({num_cols})",
                actual=col,
                expected=num_cols,
            )


def _check_miqp(prob: problem.Problem, collector: _Collector) -> None:
    if prob.objective.quadratic is None:
        return
    discrete = [
        resolved.name
        for resolved in prob.resolved_variables()
        if resolved.variable_type != problem.VariableType.CONTINUOUS
    ]
    if discrete:
        collector.add(
            ("variables",),
            "Quadratic objectives are incompatible with integer/binary variables"
            f" (MIQP not supported): {', '.join(discrete)}",
            actual=len(discrete),
            expected=0,
        )


def _check_constraints(
    prob: problem.Problem, num_vars: Optional[int], collector: _Collector
) -> None:
    constraints = prob.constraints
    matrix = constraints.matrix
    if isinstance(matrix, problem.DenseMatrix):
        if num_vars is not None:
            for index, row in enumerate(matrix.rows):
                if len(row) != num_vars:
                    collector.add(
                        ("constraints", "dense", index),
                        f"Constraint row {index} has {len(row)} coefficients but"
                        f" expected {num_vars} (matching the number of variables"
                        " in the objective function)",
                        actual=len(row),
                        expected=num_vars,
                    )
    elif isinstance(matrix, problem.SparseMatrix):
        path = ("constraints", "sparse")
        if num_vars is not None and matrix.shape[1] != num_vars:
            collector.add(
                path + ("shape",),
                f"Sparse matrix shape [{matrix.shape[0]}, {matrix.shape[1]}]"
                f" doesn't match number of variables ({num_vars})",
                actual=matrix.shape[1],
                expected=num_vars,
            )
        _check_coordinates(matrix, path, "constraints", "variables", collector)
    else:
        raise TypeError(f"unsupported matrix format: {type(matrix).__name__}")

    num_constraints = constraints.num_constraints
    if num_constraints == 0:
        collector.add(
            ("constraints",),
            "At least one constraint is required",
            actual=0,
            expected=1,
        )
    for field, values in (("sense", constraints.sense), ("rhs", constraints.rhs)):
        if len(values) != num_constraints:
            collector.add(
                ("constraints", field),
                f"Constraint {field} array has {len(values)} elements but expected"
                f" {num_constraints} (matching the number of constraints)",
                actual=len(values),
                expected=num_constraints,
            )


def _check_variables(
    prob: problem.Problem, num_vars: Optional[int], collector: _Collector
) -> None:
    if num_vars is not None and len(prob.variables) != num_vars:
        collector.add(
            ("variables",),
            f"Variables array has {len(prob.variables)} elements but expected"
            f" {num_vars} (matching the number of variables in the objective"
            " function)",
            actual=len(prob.variables),
            expected=num_vars,
        )
    first_use: Dict[str, int] = {}
    for index, resolved in enumerate(prob.resolved_variables()):
        if resolved.name in first_use:
            collector.add(
                ("variables", index, "name"),
                f"Variable name '{resolved.name}' is used by variables"
                f" {first_use[resolved.name]} and {index}",
            )
        else:
            first_use[resolved.name] = index


def validate_problem(prob: problem.Problem) -> List[errors.Diagnostic]:
    """Returns every structural defect of `prob`, an empty list if it is valid.

    Diagnostics are ordered: objective, quadratic/variable type compatibility,
    constraints, variables.
    """
    collector = _Collector()
    num_vars = _check_objective(prob, collector)
    _check_miqp(prob, collector)
    _check_constraints(prob, num_vars, collector)
    _check_variables(prob, num_vars, collector)
    return collector.diagnostics


def check_problem(prob: problem.Problem) -> None:
    """Raises InvalidProblemError listing all defects if `prob` is not valid."""
    diagnostics = validate_problem(prob)
    if diagnostics:
        raise errors.InvalidProblemError(diagnostics)
