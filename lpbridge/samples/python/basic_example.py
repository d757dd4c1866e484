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

"""Solves a small mixed integer problem with HiGHS."""

from collections.abc import Sequence

from absl import app

from lpbridge.python import highs_solver
from lpbridge.python import parameters
from lpbridge.python import problem
from lpbridge.python import solve


# Model the problem:
#   max 2.0 * x + y
#   s.t. x + y <= 1.5
#            x in {0.0, 1.0}
#            y in [0.0, 2.5]
#
def main(argv: Sequence[str]) -> None:
    del argv  # Unused.

    prob = problem.parse_problem(
        {
            "sense": "maximize",
            "objective": {"linear": [2.0, 1.0]},
            "constraints": {"dense": [[1.0, 1.0]], "sense": ["<="], "rhs": [1.5]},
            "variables": [
                {"name": "x", "type": "bin"},
                {"name": "y", "lb": 0.0, "ub": 2.5},
            ],
        }
    )
    print(solve.encode_problem(prob))

    # May raise a SolverError if HiGHS itself fails.
    res = solve.solve(
        prob,
        highs_solver.HighsSolver(),
        options=parameters.SolverOptions(time_limit=10.0, output_flag=False),
    )
    if res.status != "optimal":
        raise RuntimeError(f"problem failed to solve: {res.message}")

    print(f"Objective value: {res.objective_value}")
    print(f"Value for variable x: {res.solution[0]}")


if __name__ == "__main__":
    app.run(main)
