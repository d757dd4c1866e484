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

"""Minimal binary solving a JSON problem file with HiGHS."""

from collections.abc import Sequence
import json
from typing import Optional

from absl import app
from absl import flags

from lpbridge.python import parameters
from lpbridge.python import problem
from lpbridge.python import result
from lpbridge.python import solve

_INPUT = flags.DEFINE_string("input", "", "JSON problem file to solve.")
_OPTIONS = flags.DEFINE_string("options", "", "JSON file with HiGHS options.")
_LP_ONLY = flags.DEFINE_bool(
    "lp_only", False, "Print the LP text instead of solving the problem."
)


def _load_json(path: str):
    with open(path) as f:
        return json.load(f)


def run(input_path: str, options_path: Optional[str], lp_only: bool) -> str:
    """Returns the LP text, or the JSON result of solving, for a problem file."""
    prob = problem.parse_problem(_load_json(input_path))
    if lp_only:
        return solve.encode_problem(prob)
    options = parameters.SolverOptions.from_dict(
        _load_json(options_path) if options_path else None
    )
    # Only needed when solving, so that --lp_only works without highspy.
    from lpbridge.python import highs_solver  # pylint: disable=g-import-not-at-top

    res: result.DecodedResult = solve.solve(
        prob, highs_solver.HighsSolver(), options=options
    )
    return json.dumps(res.to_dict(), indent=2)


def main(argv: Sequence[str]) -> None:
    """Loads a problem and prints its LP text or its solution."""
    if len(argv) > 1:
        raise app.UsageError("Too many command-line arguments.")
    if not _INPUT.value:
        raise app.UsageError("--input is required.")
    print(run(_INPUT.value, _OPTIONS.value, _LP_ONLY.value))


def _run() -> None:
    app.run(main)


if __name__ == "__main__":
    _run()
