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

"""An optimization problem as described by a caller, before encoding.

A Problem is the in-memory form of the JSON-shaped request:

  {
    "sense": "minimize",
    "objective": {"linear": [1, 2]},
    "constraints": {"dense": [[1, 1]], "sense": [">="], "rhs": [1]},
    "variables": [{}, {"name": "y", "ub": 10, "type": "int"}]
  }

Constraint matrices and quadratic objective terms come either dense (a list of
rows) or sparse (COO: parallel rows/cols/values arrays plus a shape). Both
forms are kept as given; sparse_containers.py normalizes them to dense arrays.

parse_problem() only checks types (numbers are numbers, enums are known
tokens...). Dimensional consistency is checked by validate.py.

Infinite bounds cannot be written in JSON, so any number whose magnitude is at
least INFINITY_SENTINEL, or one of the strings "inf", "+inf", "-inf",
"infinity" (any case), is read as an infinite value.
"""

import dataclasses
import enum
import math
import numbers
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, Union

from lpbridge.python import errors

INFINITY_SENTINEL = 1e30

_INFINITY_STRINGS = {
    "inf": math.inf,
    "+inf": math.inf,
    "infinity": math.inf,
    "+infinity": math.inf,
    "-inf": -math.inf,
    "-infinity": -math.inf,
}


@enum.unique
class ObjectiveSense(enum.Enum):
    """The optimization direction."""

    MINIMIZE = "minimize"
    MAXIMIZE = "maximize"


@enum.unique
class VariableType(enum.Enum):
    """The domain of a variable.

    Attributes:
      CONTINUOUS: A real valued variable.
      INTEGER: An integer valued variable (LP "General" section).
      BINARY: A 0/1 variable (LP "Binary" section). Its bounds default to [0, 1].
    """

    CONTINUOUS = "cont"
    INTEGER = "int"
    BINARY = "bin"


@enum.unique
class ConstraintSense(enum.Enum):
    """The relation between a constraint's terms and its right hand side."""

    LESS_EQUAL = "<="
    GREATER_EQUAL = ">="
    EQUAL = "="


@dataclasses.dataclass(frozen=True)
class DenseMatrix:
    """A row-major matrix; rows may have different lengths until validated."""

    rows: Tuple[Tuple[float, ...], ...] = ()

    @property
    def num_rows(self) -> int:
        return len(self.rows)


@dataclasses.dataclass(frozen=True)
class SparseMatrix:
    """A matrix in coordinate (COO) format.

    Attributes:
      rows: The row index of each entry.
      cols: The column index of each entry.
      values: The value of each entry.
      shape: The (number of rows, number of columns) of the full matrix.
    """

    rows: Tuple[int, ...] = ()
    cols: Tuple[int, ...] = ()
    values: Tuple[float, ...] = ()
    shape: Tuple[int, int] = (0, 0)

    @property
    def num_rows(self) -> int:
        return self.shape[0]

    def entries(self) -> List[Tuple[int, int, float]]:
        return list(zip(self.rows, self.cols, self.values))


Matrix = Union[DenseMatrix, SparseMatrix]


@dataclasses.dataclass(frozen=True)
class Objective:
    """The objective c'x + 0.5 x'Qx.

    Attributes:
      linear: The coefficients c, one per variable, or None.
      quadratic: The matrix Q, or None. Entries are used as given: for x'Qx to
        contribute q * xi * xj, Q[i][j] + Q[j][i] must equal 2 * q.
    """

    linear: Optional[Tuple[float, ...]] = None
    quadratic: Optional[Matrix] = None


@dataclasses.dataclass(frozen=True)
class Constraints:
    """The linear constraints A x (sense) rhs, one row per constraint."""

    matrix: Matrix
    sense: Tuple[ConstraintSense, ...] = ()
    rhs: Tuple[float, ...] = ()

    @property
    def num_constraints(self) -> int:
        return self.matrix.num_rows


@dataclasses.dataclass(frozen=True)
class Variable:
    """A decision variable as given by the caller, all fields optional.

    Use resolve_variable() to get the effective name, bounds and type.
    """

    name: Optional[str] = None
    lb: Optional[float] = None
    ub: Optional[float] = None
    variable_type: Optional[VariableType] = None


@dataclasses.dataclass(frozen=True)
class ResolvedVariable:
    """A variable with every default applied."""

    name: str
    lb: float
    ub: float
    variable_type: VariableType


def default_variable_name(index: int) -> str:
    """Returns the positional name of the variable at `index`: x1, x2..."""
    return f"x{index + 1}"


def resolve_variable(variable: Optional[Variable], index: int) -> ResolvedVariable:
    """Applies the naming, bound and type defaults to a variable.

    This is the only place defaults are decided; the encoder, the decoder and
    the validator diagnostics all go through it.

    Args:
      variable: The variable as given, None is treated as `Variable()`.
      index: The 0-based position of the variable in the problem.

    Returns:
      The name (explicit or x<index + 1>), lb (default 0), ub (default +inf, or 1
      for binary variables) and type (default continuous).
    """
    if variable is None:
        variable = Variable()
    variable_type = variable.variable_type or VariableType.CONTINUOUS
    default_ub = 1.0 if variable_type == VariableType.BINARY else math.inf
    return ResolvedVariable(
        name=variable.name if variable.name else default_variable_name(index),
        lb=0.0 if variable.lb is None else variable.lb,
        ub=default_ub if variable.ub is None else variable.ub,
        variable_type=variable_type,
    )


def matrix_dimension(matrix: Matrix) -> int:
    """Returns the number of rows of a (square) quadratic matrix."""
    if isinstance(matrix, DenseMatrix):
        return len(matrix.rows)
    if isinstance(matrix, SparseMatrix):
        return matrix.shape[0]
    raise TypeError(f"unsupported matrix format: {type(matrix).__name__}")


@dataclasses.dataclass(frozen=True)
class Problem:
    """A complete optimization problem.

    Attributes:
      sense: Minimize or maximize the objective.
      objective: The objective, with at least one of linear/quadratic set.
      constraints: The linear constraints.
      variables: One entry per variable, in column order.
    """

    sense: ObjectiveSense
    objective: Objective
    constraints: Constraints
    variables: Tuple[Variable, ...] = ()

    @property
    def num_variables(self) -> Optional[int]:
        """The number of variables implied by the objective, None if neither
        linear nor quadratic terms are given."""
        if self.objective.linear is not None:
            return len(self.objective.linear)
        if self.objective.quadratic is not None:
            return matrix_dimension(self.objective.quadratic)
        return None

    def resolved_variables(self) -> List[ResolvedVariable]:
        """Returns the resolved variables, one per entry of `variables`."""
        return [resolve_variable(v, i) for i, v in enumerate(self.variables)]

    def variable_name(self, index: int) -> str:
        variable = self.variables[index] if index < len(self.variables) else None
        return resolve_variable(variable, index).name

    def to_dict(self) -> Dict[str, Any]:
        """Returns the JSON-shaped description accepted by parse_problem()."""
        objective: Dict[str, Any] = {}
        if self.objective.linear is not None:
            objective["linear"] = [_number_to_json(c) for c in self.objective.linear]
        if self.objective.quadratic is not None:
            quadratic = self.objective.quadratic
            if isinstance(quadratic, DenseMatrix):
                objective["quadratic"] = {
                    "format": "dense",
                    "matrix": [[_number_to_json(v) for v in r] for r in quadratic.rows],
                }
            else:
                objective["quadratic"] = {"format": "sparse"}
                objective["quadratic"].update(_sparse_to_dict(quadratic))
        constraints: Dict[str, Any] = {}
        matrix = self.constraints.matrix
        if isinstance(matrix, DenseMatrix):
            constraints["dense"] = [[_number_to_json(v) for v in r] for r in matrix.rows]
        else:
            constraints["sparse"] = _sparse_to_dict(matrix)
        constraints["sense"] = [s.value for s in self.constraints.sense]
        constraints["rhs"] = [_number_to_json(v) for v in self.constraints.rhs]
        variables = []
        for variable in self.variables:
            entry: Dict[str, Any] = {}
            if variable.name is not None:
                entry["name"] = variable.name
            if variable.lb is not None:
                entry["lb"] = _number_to_json(variable.lb)
            if variable.ub is not None:
                entry["ub"] = _number_to_json(variable.ub)
            if variable.variable_type is not None:
                entry["type"] = variable.variable_type.value
            variables.append(entry)
        return {
            "sense": self.sense.value,
            "objective": objective,
            "constraints": constraints,
            "variables": variables,
        }


def _number_to_json(value: float) -> float:
    if math.isinf(value):
        return INFINITY_SENTINEL if value > 0 else -INFINITY_SENTINEL
    return value


def _sparse_to_dict(matrix: SparseMatrix) -> Dict[str, Any]:
    return {
        "rows": list(matrix.rows),
        "cols": list(matrix.cols),
        "values": [_number_to_json(v) for v in matrix.values],
        "shape": list(matrix.shape),
    }


class _Parser:
    """Converts JSON-shaped data to a Problem, collecting type errors."""

    def __init__(self):
        self.diagnostics: List[errors.Diagnostic] = []

    def error(self, path: errors.Path, message: str) -> None:
        self.diagnostics.append(errors.Diagnostic(path=path, message=message))

    def mapping(self, value: Any, path: errors.Path) -> Optional[Mapping[str, Any]]:
        if not isinstance(value, Mapping):
            self.error(path, f"{_describe(path)} must be an object")
            return None
        return value

    def sequence(self, value: Any, path: errors.Path) -> Optional[Sequence[Any]]:
        if isinstance(value, (str, bytes)) or not isinstance(value, Sequence):
            self.error(path, f"{_describe(path)} must be an array")
            return None
        return value

    def number(self, value: Any, path: errors.Path) -> float:
        if isinstance(value, str):
            infinity = _INFINITY_STRINGS.get(value.strip().lower())
            if infinity is not None:
                return infinity
        elif isinstance(value, numbers.Real) and not isinstance(value, bool):
            value = float(value)
            if math.isinf(value) or abs(value) >= INFINITY_SENTINEL:
                return math.inf if value > 0 else -math.inf
            return value
        self.error(path, f"{_describe(path)} must be a number, got {value!r}")
        return math.nan

    def integer(self, value: Any, path: errors.Path) -> int:
        if isinstance(value, numbers.Integral) and not isinstance(value, bool):
            return int(value)
        if isinstance(value, float) and value.is_integer():
            return int(value)
        self.error(path, f"{_describe(path)} must be an integer, got {value!r}")
        return 0

    def numbers(self, value: Any, path: errors.Path) -> Tuple[float, ...]:
        items = self.sequence(value, path)
        if items is None:
            return ()
        return tuple(self.number(v, path + (i,)) for i, v in enumerate(items))

    def integers(self, value: Any, path: errors.Path) -> Tuple[int, ...]:
        items = self.sequence(value, path)
        if items is None:
            return ()
        return tuple(self.integer(v, path + (i,)) for i, v in enumerate(items))

    def enum_value(self, enum_type, value: Any, path: errors.Path):
        for member in enum_type:
            if member.value == value:
                return member
        valid = ", ".join(f"'{m.value}'" for m in enum_type)
        self.error(path, f"{_describe(path)} must be one of {valid}, got {value!r}")
        return None

    def dense(self, value: Any, path: errors.Path) -> DenseMatrix:
        rows = self.sequence(value, path)
        if rows is None:
            return DenseMatrix()
        return DenseMatrix(
            rows=tuple(self.numbers(r, path + (i,)) for i, r in enumerate(rows))
        )

    def sparse(self, value: Mapping[str, Any], path: errors.Path) -> SparseMatrix:
        for key in ("rows", "cols", "values", "shape"):
            if key not in value:
                self.error(path + (key,), f"{_describe(path + (key,))} is required")
        shape = self.integers(value.get("shape", []), path + ("shape",))
        if "shape" in value and len(shape) != 2:
            self.error(
                path + ("shape",),
                f"{_describe(path + ('shape',))} must have exactly 2 elements",
            )
        return SparseMatrix(
            rows=self.integers(value.get("rows", []), path + ("rows",)),
            cols=self.integers(value.get("cols", []), path + ("cols",)),
            values=self.numbers(value.get("values", []), path + ("values",)),
            shape=(tuple(shape) + (0, 0))[:2],
        )

    def objective(self, value: Any) -> Objective:
        path = ("objective",)
        data = self.mapping(value, path)
        if data is None:
            return Objective()
        linear = None
        if data.get("linear") is not None:
            linear = self.numbers(data["linear"], path + ("linear",))
        quadratic = None
        if data.get("quadratic") is not None:
            quadratic = self.quadratic(data["quadratic"], path + ("quadratic",))
        return Objective(linear=linear, quadratic=quadratic)

    def quadratic(self, value: Any, path: errors.Path) -> Optional[Matrix]:
        data = self.mapping(value, path)
        if data is None:
            return None
        matrix_format = data.get("format")
        if matrix_format == "dense":
            return self.dense(data.get("matrix", []), path + ("matrix",))
        if matrix_format == "sparse":
            return self.sparse(data, path)
        self.error(
            path + ("format",),
            f"{_describe(path + ('format',))} must be 'dense' or 'sparse', "
            f"got {matrix_format!r}",
        )
        return None

    def constraints(self, value: Any) -> Constraints:
        path = ("constraints",)
        data = self.mapping(value, path)
        if data is None:
            return Constraints(matrix=DenseMatrix())
        matrix: Matrix = DenseMatrix()
        if "dense" in data and "sparse" in data:
            self.error(path, "constraints must have either 'dense' or 'sparse', not both")
        elif "dense" in data:
            matrix = self.dense(data["dense"], path + ("dense",))
        elif "sparse" in data:
            sparse = self.mapping(data["sparse"], path + ("sparse",))
            if sparse is not None:
                matrix = self.sparse(sparse, path + ("sparse",))
        else:
            self.error(path, "constraints must have either 'dense' or 'sparse'")
        senses = self.sequence(data.get("sense", []), path + ("sense",)) or ()
        return Constraints(
            matrix=matrix,
            sense=tuple(
                self.enum_value(ConstraintSense, s, path + ("sense", i))
                for i, s in enumerate(senses)
            ),
            rhs=self.numbers(data.get("rhs", []), path + ("rhs",)),
        )

    def variable(self, value: Any, index: int) -> Variable:
        path = ("variables", index)
        data = self.mapping(value, path)
        if data is None:
            return Variable()
        name = data.get("name")
        if name is not None and not isinstance(name, str):
            self.error(path + ("name",), f"{_describe(path + ('name',))} must be a string")
            name = None
        lb = None if data.get("lb") is None else self.number(data["lb"], path + ("lb",))
        ub = None if data.get("ub") is None else self.number(data["ub"], path + ("ub",))
        variable_type = None
        if data.get("type") is not None:
            variable_type = self.enum_value(VariableType, data["type"], path + ("type",))
        return Variable(name=name, lb=lb, ub=ub, variable_type=variable_type)

    def problem(self, value: Any) -> Optional[Problem]:
        data = self.mapping(value, ("problem",))
        if data is None:
            return None
        for key in ("sense", "objective", "constraints", "variables"):
            if key not in data:
                self.error((key,), f"{key} is required")
        sense = None
        if "sense" in data:
            sense = self.enum_value(ObjectiveSense, data["sense"], ("sense",))
        objective = self.objective(data.get("objective", {}))
        constraints = self.constraints(data.get("constraints", {}))
        variables = self.sequence(data.get("variables", []), ("variables",)) or ()
        return Problem(
            sense=sense,
            objective=objective,
            constraints=constraints,
            variables=tuple(self.variable(v, i) for i, v in enumerate(variables)),
        )


def _describe(path: errors.Path) -> str:
    return errors.Diagnostic(path=path, message="").path_string() or "value"


def parse_problem(data: Mapping[str, Any]) -> Problem:
    """Returns the Problem described by JSON-shaped `data`.

    Only types are checked here; call validate.check_problem() on the result to
    check dimensions.

    Raises:
      InvalidProblemError: listing every type error found.
    """
    parser = _Parser()
    result = parser.problem(data)
    if parser.diagnostics:
        raise errors.InvalidProblemError(parser.diagnostics)
    return result
