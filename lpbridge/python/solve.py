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

"""Solve functions: validate, encode, call a solver and decode its result."""

from typing import Any, Callable, Dict, Mapping, Optional

from absl import logging

from lpbridge.python import errors
from lpbridge.python import lp_format
from lpbridge.python import parameters
from lpbridge.python import problem
from lpbridge.python import result
from lpbridge.python import validate

# Takes the LP text and the HiGHS options, returns the raw result structure
# (see result.parse_solver_output()).
Solver = Callable[[str, Dict[str, Any]], Mapping[str, Any]]


def encode_problem(prob: problem.Problem) -> str:
    """Validates `prob` and returns it in LP format.

    Raises:
      InvalidProblemError: If `prob` has structural defects.
    """
    try:
        validate.check_problem(prob)
    except errors.InvalidProblemError as e:
        logging.warning("rejecting problem: %s", e)
        raise
    logging.info(
        "encoding %s problem with %d variables and %d constraints",
        prob.sense.value,
        prob.num_variables,
        prob.constraints.num_constraints,
    )
    lp_text = lp_format.encode(prob)
    logging.vlog(1, "LP text:\n%s", lp_text)
    return lp_text


def solve(
    prob: problem.Problem,
    solver: Solver,
    *,
    options: Optional[parameters.SolverOptions] = None,
) -> result.DecodedResult:
    """Solves an optimization problem.

    Args:
      prob: The optimization problem.
      solver: The function running the solver on the LP text, e.g. a
        highs_solver.HighsSolver.
      options: Configuration of the underlying solver.

    Returns:
      An OptimalResult, or a NonOptimalResult for any other solver status
      (infeasible, unbounded, limit reached...).

    Raises:
      InvalidProblemError: If `prob` has structural defects. The solver is not
        called.
      SolverError: If the solver itself failed.
    """
    options = options or parameters.SolverOptions()
    lp_text = encode_problem(prob)
    try:
        raw = solver(lp_text, options.to_dict())
        output = result.parse_solver_output(raw)
    except errors.SolverError:
        raise
    except Exception as e:  # pylint: disable=broad-exception-caught
        raise errors.SolverError(f"solver failed: {e}") from e
    logging.info("solver status: %s", output.status)
    return result.decode(output, prob)


def solve_json(arguments: Mapping[str, Any], solver: Solver) -> Dict[str, Any]:
    """Solves the JSON-shaped request {"problem": ..., "options": ...}.

    Args:
      arguments: The request. "options" is optional.
      solver: The function running the solver on the LP text.

    Returns:
      The JSON-shaped result, see OptimalResult.to_dict() and
      NonOptimalResult.to_dict().

    Raises:
      InvalidProblemError: If the problem is malformed or inconsistent.
      InvalidOptionsError: If the options are invalid.
      SolverError: If the solver itself failed.
    """
    if "problem" not in arguments:
        raise errors.InvalidProblemError(
            [errors.Diagnostic(("problem",), "problem is required")]
        )
    prob = problem.parse_problem(arguments["problem"])
    options = parameters.SolverOptions.from_dict(arguments.get("options"))
    return solve(prob, solver, options=options).to_dict()
