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

"""Encodes a Problem in the CPLEX LP text format read by HiGHS.

The text has five sections, in this order:

  Minimize
   obj: x1 + 2 x2 + [ 2 x1^2 + 2 x1 * x2 + 4 x2^2 ] / 2
  Subject To
   c1: x1 + x2 >= 1
  Bounds
   0 <= x1 <= +inf
   x2 free
  General
   x1
  Binary
   ...
  End

The General and Binary sections are omitted when empty. The quadratic part of
the objective is the LP format's "[ ... ] / 2" expression, so the entries of Q
are written as given and not halved.

encode() expects a Problem that passed validate.check_problem(); it does not
check dimensions again.
"""

import math
from typing import List, Sequence

import numpy as np

from lpbridge.python import problem
from lpbridge.python import sparse_containers

INFINITY_TOKEN = "inf"


def format_number(value: float) -> str:
    """Formats a coefficient, bound or right hand side for the LP text.

    Integral values are written without a decimal point ("2", not "2.0"),
    infinite values as "+inf"/"-inf", everything else with the shortest
    representation that reads back to the same float.
    """
    value = float(value)
    if math.isinf(value):
        return f"+{INFINITY_TOKEN}" if value > 0 else f"-{INFINITY_TOKEN}"
    if value.is_integer() and abs(value) < 1e16:
        return str(int(value))
    return repr(value)


def _linear_term(coefficient: float, name: str, first: bool) -> str:
    if coefficient == 1:
        return name if first else f"+ {name}"
    if coefficient == -1:
        return f"- {name}"
    if coefficient > 0:
        term = f"{format_number(coefficient)} {name}"
        return term if first else f"+ {term}"
    return f"- {format_number(-coefficient)} {name}"


def format_linear_expression(
    coefficients: Sequence[float], names: Sequence[str]
) -> str:
    """Returns the terms of sum(coefficients[i] * names[i]), zeros omitted.

    The first term has no leading "+", e.g. "x1 - x2 + 2.5 x3".
    """
    terms = []
    for coefficient, name in zip(coefficients, names):
        if coefficient == 0:
            continue
        terms.append(_linear_term(coefficient, name, first=not terms))
    return " ".join(terms)


def _quadratic_term(coefficient: float, expression: str) -> str:
    if coefficient == 1:
        return expression
    return f"{format_number(coefficient)} {expression}"


def quadratic_terms(quadratic: problem.Matrix, names: Sequence[str]) -> List[str]:
    """Returns the terms of x'Qx, to be wrapped in "[ ... ] / 2".

    For a dense Q, each unordered pair {i, j} is written once, with the
    coefficient Q[i][j] + Q[j][i] (so Q and its transpose give the same text).
    For a sparse Q, each stored non-zero entry is written as its own term.
    """
    terms = []
    if isinstance(quadratic, problem.DenseMatrix):
        dense = sparse_containers.to_dense(quadratic)
        for i in range(dense.shape[0]):
            if dense[i, i] != 0:
                terms.append(_quadratic_term(dense[i, i], f"{names[i]}^2"))
            for j in range(i + 1, dense.shape[0]):
                coefficient = dense[i, j] + dense[j, i]
                if coefficient != 0:
                    terms.append(
                        _quadratic_term(coefficient, f"{names[i]} * {names[j]}")
                    )
    elif isinstance(quadratic, problem.SparseMatrix):
        for row, col, value in quadratic.entries():
            if value == 0:
                continue
            if row == col:
                terms.append(_quadratic_term(value, f"{names[row]}^2"))
            else:
                terms.append(_quadratic_term(value, f"{names[row]} * {names[col]}"))
    else:
        raise TypeError(f"unsupported matrix format: {type(quadratic).__name__}")
    return terms


def _objective_section(prob: problem.Problem, names: Sequence[str]) -> List[str]:
    header = "Minimize" if prob.sense == problem.ObjectiveSense.MINIMIZE else "Maximize"
    expression = ""
    if prob.objective.linear is not None:
        expression = format_linear_expression(prob.objective.linear, names)
    if prob.objective.quadratic is not None:
        terms = quadratic_terms(prob.objective.quadratic, names)
        if terms:
            bracket = f"[ {' + '.join(terms)} ] / 2"
            expression = f"{expression} + {bracket}" if expression else bracket
    return [header, f" obj: {expression}"]


def _constraints_section(
    constraints: problem.Constraints, matrix: np.ndarray, names: Sequence[str]
) -> List[str]:
    lines = ["Subject To"]
    for index, row in enumerate(matrix):
        expression = format_linear_expression(row, names)
        sense = constraints.sense[index].value
        rhs = format_number(constraints.rhs[index])
        lines.append(f" c{index + 1}: {expression} {sense} {rhs}")
    return lines


def _bounds_section(variables: Sequence[problem.ResolvedVariable]) -> List[str]:
    lines = ["Bounds"]
    for variable in variables:
        lb, ub, name = variable.lb, variable.ub, variable.name
        if lb == -math.inf and ub == math.inf:
            lines.append(f" {name} free")
        else:
            lines.append(f" {format_number(lb)} <= {name} <= {format_number(ub)}")
    return lines


def _integrality_sections(
    variables: Sequence[problem.ResolvedVariable],
) -> List[str]:
    lines = []
    for heading, variable_type in (
        ("General", problem.VariableType.INTEGER),
        ("Binary", problem.VariableType.BINARY),
    ):
        names = [v.name for v in variables if v.variable_type == variable_type]
        if names:
            lines.append(heading)
            lines.append(" " + " ".join(names))
    return lines


def encode(prob: problem.Problem) -> str:
    """Returns `prob` in LP format, one section after the other.

    Args:
      prob: A problem that passed validate.check_problem().

    Returns:
      The LP text, ending with "End\\n".

    Raises:
      TypeError: If a matrix is neither a DenseMatrix nor a SparseMatrix.
    """
    variables = [
        problem.resolve_variable(
            prob.variables[i] if i < len(prob.variables) else None, i
        )
        for i in range(prob.num_variables)
    ]
    names = [v.name for v in variables]
    matrix = sparse_containers.constraint_matrix(prob.constraints, len(names))
    lines = []
    lines.extend(_objective_section(prob, names))
    lines.extend(_constraints_section(prob.constraints, matrix, names))
    lines.extend(_bounds_section(variables))
    lines.extend(_integrality_sections(variables))
    lines.append("End")
    return "\n".join(lines) + "\n"
