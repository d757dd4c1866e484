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

"""Configures the HiGHS solve of an encoded problem."""

import dataclasses
import enum
import math
import numbers
from typing import Any, Dict, List, Mapping, Optional, Tuple

from lpbridge.python import errors


@enum.unique
class Emphasis(enum.Enum):
    """Whether a solver feature is used.

    Attributes:
      OFF: Disable the feature.
      CHOOSE: Let HiGHS decide.
      ON: Enable the feature.
    """

    OFF = "off"
    CHOOSE = "choose"
    ON = "on"


@enum.unique
class LPAlgorithm(enum.Enum):
    """Selects an algorithm for solving linear programs.

    Attributes:
      SIMPLEX: The (dual or primal) simplex method.
      CHOOSE: Let HiGHS decide, typically dual simplex.
      IPM: The interior point method.
      PDLP: The first order primal dual hybrid gradient method.
    """

    SIMPLEX = "simplex"
    CHOOSE = "choose"
    IPM = "ipm"
    PDLP = "pdlp"


@enum.unique
class _Kind(enum.Enum):
    BOOL = "a boolean"
    INT = "an integer"
    FLOAT = "a number"
    CHOICE = "a string"


@dataclasses.dataclass(frozen=True)
class _OptionSpec:
    """The accepted values of one HiGHS option.

    Bounds are inclusive, except `minimum` when `exclusive_minimum` is set.
    """

    kind: _Kind
    minimum: Optional[float] = None
    maximum: Optional[float] = None
    exclusive_minimum: bool = False
    choices: Optional[type] = None


_POSITIVE_FLOAT = _OptionSpec(_Kind.FLOAT, minimum=0, exclusive_minimum=True)
_NON_NEGATIVE_FLOAT = _OptionSpec(_Kind.FLOAT, minimum=0)
_ANY_FLOAT = _OptionSpec(_Kind.FLOAT)
_NON_NEGATIVE_INT = _OptionSpec(_Kind.INT, minimum=0)
_LIMIT = _OptionSpec(_Kind.INT, minimum=1)
_BOOL = _OptionSpec(_Kind.BOOL)


def _int_range(minimum: int, maximum: int) -> _OptionSpec:
    return _OptionSpec(_Kind.INT, minimum=minimum, maximum=maximum)


_OPTION_SPECS: Dict[str, _OptionSpec] = {
    "time_limit": _POSITIVE_FLOAT,
    "presolve": _OptionSpec(_Kind.CHOICE, choices=Emphasis),
    "solver": _OptionSpec(_Kind.CHOICE, choices=LPAlgorithm),
    "parallel": _OptionSpec(_Kind.CHOICE, choices=Emphasis),
    "threads": _NON_NEGATIVE_INT,
    "random_seed": _NON_NEGATIVE_INT,
    "primal_feasibility_tolerance": _POSITIVE_FLOAT,
    "dual_feasibility_tolerance": _POSITIVE_FLOAT,
    "ipm_optimality_tolerance": _POSITIVE_FLOAT,
    "infinite_cost": _POSITIVE_FLOAT,
    "infinite_bound": _POSITIVE_FLOAT,
    "objective_bound": _ANY_FLOAT,
    "objective_target": _ANY_FLOAT,
    "simplex_strategy": _int_range(0, 4),
    "simplex_scale_strategy": _int_range(0, 5),
    "simplex_dual_edge_weight_strategy": _int_range(-1, 2),
    "simplex_primal_edge_weight_strategy": _int_range(-1, 2),
    "simplex_iteration_limit": _LIMIT,
    "simplex_update_limit": _LIMIT,
    "ipm_iteration_limit": _LIMIT,
    "mip_max_nodes": _LIMIT,
    "mip_max_leaves": _LIMIT,
    "mip_max_stall_nodes": _LIMIT,
    "mip_rel_gap": _NON_NEGATIVE_FLOAT,
    "mip_abs_gap": _NON_NEGATIVE_FLOAT,
    "mip_feasibility_tolerance": _POSITIVE_FLOAT,
    "mip_detect_symmetry": _BOOL,
    "output_flag": _BOOL,
    "log_to_console": _BOOL,
    "highs_debug_level": _int_range(0, 3),
    "log_dev_level": _int_range(0, 3),
    "write_solution_to_file": _BOOL,
    "write_solution_style": _int_range(-1, 4),
}


@dataclasses.dataclass(frozen=True)
class SolverOptions:
    """Options passed to HiGHS for a single solve.

    Every option is optional; None means the HiGHS default is used. Option names
    are the HiGHS option names, so to_dict() can be handed to
    Highs.setOptionValue() as is.

    Attributes:
      time_limit: The maximum time in seconds HiGHS spends on the problem. On
        expiry the result has the status "time_limit_reached".
      presolve: Whether to run presolve.
      solver: The LP algorithm.
      parallel: Whether to use parallel simplex.
      threads: The number of threads, 0 lets HiGHS decide.
      random_seed: The seed of HiGHS's random number generator.
      primal_feasibility_tolerance: Tolerance on primal constraint violations.
      dual_feasibility_tolerance: Tolerance on dual constraint violations.
      ipm_optimality_tolerance: Relative duality gap for the interior point
        method.
      infinite_cost: Objective coefficients at least this large are infinite.
      infinite_bound: Bounds at least this large are infinite.
      objective_bound: Stop when the objective is proven no better than this.
      objective_target: Stop when the objective is at least this good.
      simplex_strategy: 0 choose, 1 dual serial, 2 dual PAMI, 3 dual SIP,
        4 primal.
      simplex_scale_strategy: 0 off to 5 max value scaling.
      simplex_dual_edge_weight_strategy: -1 choose, 0 Dantzig, 1 Devex, 2 steepest
        edge.
      simplex_primal_edge_weight_strategy: Same values as the dual strategy.
      simplex_iteration_limit: Maximum number of simplex iterations.
      simplex_update_limit: Maximum number of basis updates between
        reinversions.
      ipm_iteration_limit: Maximum number of interior point iterations.
      mip_max_nodes: Maximum number of branch and bound nodes.
      mip_max_leaves: Maximum number of branch and bound leaves.
      mip_max_stall_nodes: Maximum number of nodes without improvement.
      mip_rel_gap: Stop when the relative MIP gap is below this.
      mip_abs_gap: Stop when the absolute MIP gap is below this.
      mip_feasibility_tolerance: Tolerance on integrality violations.
      mip_detect_symmetry: Whether to detect symmetries in MIPs.
      output_flag: Whether HiGHS produces any output.
      log_to_console: Whether HiGHS logs to the console.
      highs_debug_level: Amount of internal debugging, 0 to 3.
      log_dev_level: Amount of developer logging, 0 to 3.
      write_solution_to_file: Whether HiGHS writes the solution to a file.
      write_solution_style: The solution file format, -1 to 4.
    """

    time_limit: Optional[float] = None
    presolve: Optional[Emphasis] = None
    solver: Optional[LPAlgorithm] = None
    parallel: Optional[Emphasis] = None
    threads: Optional[int] = None
    random_seed: Optional[int] = None
    primal_feasibility_tolerance: Optional[float] = None
    dual_feasibility_tolerance: Optional[float] = None
    ipm_optimality_tolerance: Optional[float] = None
    infinite_cost: Optional[float] = None
    infinite_bound: Optional[float] = None
    objective_bound: Optional[float] = None
    objective_target: Optional[float] = None
    simplex_strategy: Optional[int] = None
    simplex_scale_strategy: Optional[int] = None
    simplex_dual_edge_weight_strategy: Optional[int] = None
    simplex_primal_edge_weight_strategy: Optional[int] = None
    simplex_iteration_limit: Optional[int] = None
    simplex_update_limit: Optional[int] = None
    ipm_iteration_limit: Optional[int] = None
    mip_max_nodes: Optional[int] = None
    mip_max_leaves: Optional[int] = None
    mip_max_stall_nodes: Optional[int] = None
    mip_rel_gap: Optional[float] = None
    mip_abs_gap: Optional[float] = None
    mip_feasibility_tolerance: Optional[float] = None
    mip_detect_symmetry: Optional[bool] = None
    output_flag: Optional[bool] = None
    log_to_console: Optional[bool] = None
    highs_debug_level: Optional[int] = None
    log_dev_level: Optional[int] = None
    write_solution_to_file: Optional[bool] = None
    write_solution_style: Optional[int] = None

    def __post_init__(self):
        diagnostics = []
        for field in dataclasses.fields(self):
            value = getattr(self, field.name)
            if value is not None:
                diagnostics.extend(
                    _check_option(field.name, _OPTION_SPECS[field.name], value)
                )
        if diagnostics:
            raise errors.InvalidOptionsError(diagnostics)

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "SolverOptions":
        """Returns the options named in the JSON-shaped `data`.

        None values are ignored. All problems (unknown names, wrong types,
        out of range values) are reported together.

        Raises:
          InvalidOptionsError: If any option is invalid.
        """
        if data is None:
            return cls()
        if not isinstance(data, Mapping):
            raise errors.InvalidOptionsError(
                [errors.Diagnostic(("options",), "options must be an object")]
            )
        diagnostics: List[errors.Diagnostic] = []
        kwargs: Dict[str, Any] = {}
        for name, value in data.items():
            spec = _OPTION_SPECS.get(name)
            if spec is None:
                diagnostics.append(
                    errors.Diagnostic(("options", name), f"Unknown option '{name}'")
                )
                continue
            if value is None:
                continue
            problems = _check_option(name, spec, value)
            if problems:
                diagnostics.extend(problems)
            elif spec.kind == _Kind.CHOICE:
                kwargs[name] = spec.choices(value)
            elif spec.kind == _Kind.FLOAT:
                kwargs[name] = float(value)
            else:
                kwargs[name] = value
        if diagnostics:
            raise errors.InvalidOptionsError(diagnostics)
        return cls(**kwargs)

    def to_dict(self) -> Dict[str, Any]:
        """Returns the options that are set, keyed by their HiGHS name."""
        result = {}
        for field in dataclasses.fields(self):
            value = getattr(self, field.name)
            if value is None:
                continue
            result[field.name] = value.value if isinstance(value, enum.Enum) else value
        return result


def option_names() -> Tuple[str, ...]:
    """Returns the names of all the supported options."""
    return tuple(_OPTION_SPECS)


def _check_option(name: str, spec: _OptionSpec, value: Any) -> List[errors.Diagnostic]:
    """Returns the problems with `value` for option `name`, [] if it is valid."""
    path = ("options", name)
    if spec.kind == _Kind.CHOICE:
        if isinstance(value, spec.choices):
            return []
        valid = [member.value for member in spec.choices]
        if value not in valid:
            choices = ", ".join(f"'{v}'" for v in valid)
            return [
                errors.Diagnostic(
                    path,
                    f"Option '{name}' must be one of {choices}, got {value!r}",
                    actual=value,
                    expected=valid,
                )
            ]
        return []
    if spec.kind == _Kind.BOOL:
        ok = isinstance(value, bool)
    elif spec.kind == _Kind.INT:
        ok = isinstance(value, numbers.Integral) and not isinstance(value, bool)
    else:
        ok = isinstance(value, numbers.Real) and not isinstance(value, bool)
    if not ok:
        return [
            errors.Diagnostic(
                path,
                f"Option '{name}' must be {spec.kind.value}, got {value!r}",
                actual=value,
            )
        ]
    if spec.kind == _Kind.FLOAT and math.isnan(value):
        return [
            errors.Diagnostic(path, f"Option '{name}' must not be NaN", actual=value)
        ]
    if spec.minimum is not None:
        if spec.exclusive_minimum and value <= spec.minimum:
            return [
                errors.Diagnostic(
                    path,
                    f"Option '{name}' must be > {spec.minimum}, got {value!r}",
                    actual=value,
                    expected=spec.minimum,
                )
            ]
        if not spec.exclusive_minimum and value < spec.minimum:
            return [
                errors.Diagnostic(
                    path,
                    f"Option '{name}' must be >= {spec.minimum}, got {value!r}",
                    actual=value,
                    expected=spec.minimum,
                )
            ]
    if spec.maximum is not None and value > spec.maximum:
        return [
            errors.Diagnostic(
                path,
                f"Option '{name}' must be <= {spec.maximum}, got {value!r}",
                actual=value,
                expected=spec.maximum,
            )
        ]
    return []
