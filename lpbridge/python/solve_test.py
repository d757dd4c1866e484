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

from typing import Any, Dict, List, Mapping

from absl.testing import absltest
from absl.testing import parameterized
from lpbridge.python import errors
from lpbridge.python import parameters
from lpbridge.python import problem
from lpbridge.python import result
from lpbridge.python import solve


def _request() -> Dict[str, Any]:
    return {
        "sense": "maximize",
        "objective": {"linear": [3, 1, 2]},
        "constraints": {
            "dense": [[1, 1, 0], [0, 1, 1]],
            "sense": ["<=", "<="],
            "rhs": [4, 5],
        },
        "variables": [{"name": "a"}, {}, {"name": "c", "type": "int"}],
    }


def _bound_names(lp_text: str) -> List[str]:
    """Returns the variable names of the Bounds section, in order."""
    lines = lp_text.split("\n")
    names = []
    for line in lines[lines.index("Bounds") + 1 :]:
        if not line.startswith(" "):
            break
        tokens = line.split()
        names.append(tokens[0] if tokens[1] == "free" else tokens[2])
    return names


class _EchoSolver:
    """Reports value 10 * (i + 1) for the i-th variable of the LP text."""

    def __init__(self, status: str = "Optimal"):
        self.status = status
        self.calls: List[Mapping[str, Any]] = []

    def __call__(self, lp_text: str, options: Dict[str, Any]) -> Dict[str, Any]:
        self.calls.append({"lp_text": lp_text, "options": options})
        names = _bound_names(lp_text)
        return {
            "Status": self.status,
            "ObjectiveValue": 42,
            "Columns": {
                name: {"Primal": 10.0 * (i + 1), "Dual": -float(i)}
                for i, name in enumerate(names)
            },
            "Rows": [{"Dual": 1.0}, {"Dual": 2.0}],
        }


class SolveTest(parameterized.TestCase):

    def test_values_follow_problem_order(self) -> None:
        solver = _EchoSolver()
        res = solve.solve(problem.parse_problem(_request()), solver)
        self.assertEqual(
            res,
            result.OptimalResult(
                objective_value=42.0,
                solution=(10.0, 20.0, 30.0),
                dual_solution=(1.0, 2.0),
                variable_duals=(0.0, -1.0, -2.0),
            ),
        )
        self.assertLen(solver.calls, 1)
        self.assertStartsWith(solver.calls[0]["lp_text"], "Maximize\n obj: 3 a + x2 + 2 c")
        self.assertEqual(solver.calls[0]["options"], {})

    def test_options_passed_to_solver(self) -> None:
        solver = _EchoSolver()
        solve.solve(
            problem.parse_problem(_request()),
            solver,
            options=parameters.SolverOptions(
                time_limit=5.0, presolve=parameters.Emphasis.OFF
            ),
        )
        self.assertEqual(
            solver.calls[0]["options"], {"time_limit": 5.0, "presolve": "off"}
        )

    def test_non_optimal(self) -> None:
        res = solve.solve(
            problem.parse_problem(_request()), _EchoSolver("Time limit reached")
        )
        self.assertEqual(res.status, "time_limit_reached")
        self.assertEqual(res.message, "Problem status: Time limit reached")

    def test_invalid_problem_not_solved(self) -> None:
        request = _request()
        request["constraints"]["rhs"] = [4]
        solver = _EchoSolver()
        with self.assertLogs(level="WARNING"):
            with self.assertRaisesRegex(
                errors.InvalidProblemError, "Constraint rhs array has 1 elements"
            ):
                solve.solve(problem.parse_problem(request), solver)
        self.assertEmpty(solver.calls)

    def test_solver_failure_wrapped(self) -> None:
        def failing_solver(lp_text: str, options: Dict[str, Any]) -> Dict[str, Any]:
            del lp_text, options  # Unused.
            raise OSError("cannot start")

        with self.assertRaisesRegex(errors.SolverError, "cannot start") as cm:
            solve.solve(problem.parse_problem(_request()), failing_solver)
        self.assertIsInstance(cm.exception.__cause__, OSError)

    def test_solver_error_not_rewrapped(self) -> None:
        def failing_solver(lp_text: str, options: Dict[str, Any]) -> Dict[str, Any]:
            del lp_text, options  # Unused.
            raise errors.SolverError("bad model")

        with self.assertRaisesRegex(errors.SolverError, "^bad model$"):
            solve.solve(problem.parse_problem(_request()), failing_solver)

    def test_malformed_solver_output(self) -> None:
        with self.assertRaises(errors.SolverError):
            solve.solve(
                problem.parse_problem(_request()), lambda lp_text, options: {}
            )


class SolveJsonTest(absltest.TestCase):

    def test_solve(self) -> None:
        res = solve.solve_json(
            {"problem": _request(), "options": {"time_limit": 1}}, _EchoSolver()
        )
        self.assertEqual(res["status"], "optimal")
        self.assertEqual(res["solution"], [10.0, 20.0, 30.0])

    def test_options_optional(self) -> None:
        res = solve.solve_json({"problem": _request()}, _EchoSolver("Infeasible"))
        self.assertEqual(
            res,
            {
                "status": "infeasible",
                "message": "Problem status: Infeasible",
                "objective_value": 42.0,
            },
        )

    def test_missing_problem(self) -> None:
        with self.assertRaisesRegex(errors.InvalidProblemError, "problem is required"):
            solve.solve_json({}, _EchoSolver())

    def test_invalid_options(self) -> None:
        with self.assertRaisesRegex(errors.InvalidOptionsError, "Unknown option"):
            solve.solve_json(
                {"problem": _request(), "options": {"bogus": 1}}, _EchoSolver()
            )


class EncodeProblemTest(absltest.TestCase):

    def test_returns_lp_text(self) -> None:
        text = solve.encode_problem(problem.parse_problem(_request()))
        self.assertTrue(text.endswith("General\n c\nEnd\n"), text)


if __name__ == "__main__":
    absltest.main()
