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

import math
from typing import Any, Dict, List

from absl.testing import absltest
from absl.testing import parameterized
from lpbridge.python import lp_format
from lpbridge.python import problem


def _encode(data: Dict[str, Any]) -> str:
    return lp_format.encode(problem.parse_problem(data))


def _lines(data: Dict[str, Any]) -> List[str]:
    return _encode(data).split("\n")


def _request() -> Dict[str, Any]:
    return {
        "sense": "minimize",
        "objective": {"linear": [1, 2]},
        "constraints": {"dense": [[1, 1]], "sense": [">="], "rhs": [1]},
        "variables": [{}, {}],
    }


class FormatNumberTest(parameterized.TestCase):

    @parameterized.named_parameters(
        ("integer", 2.0, "2"),
        ("negative_integer", -3.0, "-3"),
        ("zero", 0.0, "0"),
        ("fraction", 2.5, "2.5"),
        ("small", 1e-7, "1e-07"),
        ("plus_infinity", math.inf, "+inf"),
        ("minus_infinity", -math.inf, "-inf"),
    )
    def test_format(self, value: float, expected: str) -> None:
        self.assertEqual(lp_format.format_number(value), expected)


class LinearExpressionTest(parameterized.TestCase):

    @parameterized.named_parameters(
        ("unit", [1, 1], "x + y"),
        ("first_negative_unit", [-1, 1], "- x + y"),
        ("negative_unit", [1, -1], "x - y"),
        ("coefficients", [2, 3.5], "2 x + 3.5 y"),
        ("negative_coefficients", [-2, -3.5], "- 2 x - 3.5 y"),
        ("zero_first", [0, 4], "4 y"),
        ("zero_last", [4, 0], "4 x"),
        ("all_zero", [0, 0], ""),
    )
    def test_expression(self, coefficients: List[float], expected: str) -> None:
        self.assertEqual(
            lp_format.format_linear_expression(coefficients, ["x", "y"]), expected
        )


class EncodeTest(parameterized.TestCase):

    def test_basic(self) -> None:
        self.assertEqual(
            _encode(_request()),
            "Minimize\n"
            " obj: x1 + 2 x2\n"
            "Subject To\n"
            " c1: x1 + x2 >= 1\n"
            "Bounds\n"
            " 0 <= x1 <= +inf\n"
            " 0 <= x2 <= +inf\n"
            "End\n",
        )

    def test_maximize(self) -> None:
        request = _request()
        request["sense"] = "maximize"
        self.assertEqual(_lines(request)[0], "Maximize")

    def test_named_variables_and_signs(self) -> None:
        request = _request()
        request["objective"]["linear"] = [-1, -2.5]
        request["constraints"] = {
            "dense": [[3, -1], [0, 1]],
            "sense": ["<=", "="],
            "rhs": [-4, 2.5],
        }
        request["variables"] = [{"name": "a"}, {"name": "b"}]
        lines = _lines(request)
        self.assertEqual(lines[1], " obj: - a - 2.5 b")
        self.assertEqual(lines[3], " c1: 3 a - b <= -4")
        self.assertEqual(lines[4], " c2: b = 2.5")

    def test_zero_row_still_emitted(self) -> None:
        request = _request()
        request["constraints"] = {
            "dense": [[1, 1], [0, 0]],
            "sense": [">=", "<="],
            "rhs": [1, 0],
        }
        self.assertIn(" c2:  <= 0", _lines(request))

    def test_bounds(self) -> None:
        request = _request()
        request["objective"]["linear"] = [1, 1, 1, 1]
        request["constraints"]["dense"] = [[1, 1, 1, 1]]
        request["variables"] = [
            {"lb": "-inf", "ub": "inf"},
            {"lb": -1e30, "ub": 5},
            {"lb": -2},
            {"lb": 1.5, "ub": 2.5},
        ]
        lines = _lines(request)
        start = lines.index("Bounds")
        self.assertEqual(
            lines[start + 1 : start + 5],
            [" x1 free", " -inf <= x2 <= 5", " -2 <= x3 <= +inf", " 1.5 <= x4 <= 2.5"],
        )

    def test_integrality_sections(self) -> None:
        request = _request()
        request["objective"]["linear"] = [1, 1, 1]
        request["constraints"]["dense"] = [[1, 1, 1]]
        request["variables"] = [{"type": "int"}, {"type": "bin"}, {"type": "int"}]
        text = _encode(request)
        self.assertTrue(
            text.endswith(
                " 0 <= x1 <= +inf\n"
                " 0 <= x2 <= 1\n"
                " 0 <= x3 <= +inf\n"
                "General\n"
                " x1 x3\n"
                "Binary\n"
                " x2\n"
                "End\n"
            ),
            text,
        )

    def test_binary_bounds_can_be_overridden(self) -> None:
        request = _request()
        request["variables"] = [{"type": "bin", "ub": 0.5}, {}]
        self.assertIn(" 0 <= x1 <= 0.5", _lines(request))

    def test_integrality_sections_omitted_when_empty(self) -> None:
        text = _encode(_request())
        self.assertNotIn("General", text)
        self.assertNotIn("Binary", text)

    def test_sparse_matches_dense(self) -> None:
        dense = _request()
        dense["objective"]["linear"] = [1, 2, 3]
        dense["constraints"] = {
            "dense": [[1, 0, -2], [0, 0, 0], [0, 4, 0]],
            "sense": ["<=", ">=", "="],
            "rhs": [1, 2, 3],
        }
        dense["variables"] = [{}, {}, {}]
        sparse = dict(dense)
        sparse["constraints"] = {
            "sparse": {
                "rows": [0, 0, 2],
                "cols": [0, 2, 1],
                "values": [1, -2, 4],
                "shape": [3, 3],
            },
            "sense": ["<=", ">=", "="],
            "rhs": [1, 2, 3],
        }
        self.assertEqual(_encode(dense), _encode(sparse))
        self.assertIn(" c1: x1 - 2 x3 <= 1", _lines(sparse))
        self.assertIn(" c2:  >= 2", _lines(sparse))

    def test_unknown_matrix_format(self) -> None:
        prob = problem.parse_problem(_request())
        broken = problem.Problem(
            sense=prob.sense,
            objective=prob.objective,
            constraints=problem.Constraints(
                matrix=[[1.0, 1.0]], sense=prob.constraints.sense, rhs=(1.0,)
            ),
            variables=prob.variables,
        )
        with self.assertRaises(TypeError):
            lp_format.encode(broken)


class QuadraticEncodeTest(parameterized.TestCase):

    def _quadratic(self, quadratic: Dict[str, Any], **objective: Any) -> str:
        request = _request()
        request["objective"] = dict(quadratic=quadratic, **objective)
        return _lines(request)[1]

    def test_dense_quadratic_only(self) -> None:
        line = self._quadratic({"format": "dense", "matrix": [[2, 1], [1, 4]]})
        self.assertEqual(line, " obj: [ 2 x1^2 + 2 x1 * x2 + 4 x2^2 ] / 2")

    def test_dense_with_linear(self) -> None:
        line = self._quadratic(
            {"format": "dense", "matrix": [[2, 1], [1, 4]]}, linear=[1, -1]
        )
        self.assertEqual(
            line, " obj: x1 - x2 + [ 2 x1^2 + 2 x1 * x2 + 4 x2^2 ] / 2"
        )

    def test_unit_and_negative_coefficients(self) -> None:
        line = self._quadratic({"format": "dense", "matrix": [[1, 0], [0, -2]]})
        self.assertEqual(line, " obj: [ x1^2 + -2 x2^2 ] / 2")

    def test_transpose_gives_same_text(self) -> None:
        matrix = [[2, 1, 0], [3, 4, -1], [0, 5, 6]]
        transpose = [list(column) for column in zip(*matrix)]
        request = _request()
        request["objective"] = {"linear": [0, 0, 0]}
        request["constraints"]["dense"] = [[1, 1, 1]]
        request["variables"] = [{}, {}, {}]
        request["objective"]["quadratic"] = {"format": "dense", "matrix": matrix}
        original = _encode(request)
        request["objective"]["quadratic"] = {"format": "dense", "matrix": transpose}
        self.assertEqual(original, _encode(request))
        self.assertIn("[ 2 x1^2 + 4 x1 * x2 + 4 x2^2 + 4 x2 * x3 + 6 x3^2 ] / 2", original)

    def test_sparse_entries_are_literal(self) -> None:
        line = self._quadratic(
            {
                "format": "sparse",
                "rows": [0, 1, 1, 0],
                "cols": [0, 0, 1, 1],
                "values": [2, 1, 4, 0],
                "shape": [2, 2],
            }
        )
        self.assertEqual(line, " obj: [ 2 x1^2 + x2 * x1 + 4 x2^2 ] / 2")

    def test_zero_quadratic_omitted(self) -> None:
        line = self._quadratic(
            {"format": "dense", "matrix": [[0, 0], [0, 0]]}, linear=[1, 1]
        )
        self.assertEqual(line, " obj: x1 + x2")


if __name__ == "__main__":
    absltest.main()
