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

"""Runs HiGHS on LP text through the highspy bindings.

Requires the `highs` extra (pip install lpbridge[highs]). Typical usage:

  solver = highs_solver.HighsSolver()
  res = solve.solve(my_problem, solver, options=parameters.SolverOptions(
      time_limit=10.0))
"""

import os
import tempfile
from typing import Any, Dict, Mapping

from absl import logging
import highspy

from lpbridge.python import errors


class HighsSolver:
    """A solve.Solver backed by a fresh highspy.Highs instance per call.

    HiGHS only reads models from files, so the LP text is written to a
    temporary ".lp" file which is removed once the model is loaded.
    """

    def __call__(self, lp_text: str, options: Mapping[str, Any]) -> Dict[str, Any]:
        highs = highspy.Highs()
        for name, value in options.items():
            if highs.setOptionValue(name, value) == highspy.HighsStatus.kError:
                raise errors.SolverError(f"HiGHS rejected option {name}={value!r}")
        self._read_model(highs, lp_text)
        if highs.run() == highspy.HighsStatus.kError:
            raise errors.SolverError("HiGHS failed to run")
        status = highs.modelStatusToString(highs.getModelStatus())
        logging.info("HiGHS model status: %s", status)
        return self._result(highs, status)

    def _read_model(self, highs: "highspy.Highs", lp_text: str) -> None:
        with tempfile.TemporaryDirectory() as directory:
            path = os.path.join(directory, "problem.lp")
            with open(path, "w") as f:
                f.write(lp_text)
            status = highs.readModel(path)
        # HiGHS may accept unparsable text and load an empty model instead.
        if status == highspy.HighsStatus.kError or highs.getNumCol() == 0:
            raise errors.SolverError("HiGHS could not read the LP text")

    def _result(self, highs: "highspy.Highs", status: str) -> Dict[str, Any]:
        solution = highs.getSolution()
        names = highs.getLp().col_names_
        columns = {}
        for index, name in enumerate(names):
            column = {}
            if solution.value_valid:
                column["Primal"] = solution.col_value[index]
            if solution.dual_valid:
                column["Dual"] = solution.col_dual[index]
            columns[name] = column
        rows = []
        for index in range(highs.getNumRow()):
            row = {}
            if solution.dual_valid:
                row["Dual"] = solution.row_dual[index]
            rows.append(row)
        return {
            "Status": status,
            "ObjectiveValue": highs.getInfo().objective_function_value,
            "Columns": columns,
            "Rows": rows,
        }
