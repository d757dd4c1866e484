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

"""Dense views of the sparse (COO) matrices used in Problem.

The functions here assume the matrix was validated (see validate.py); indices
are not checked.
"""

from absl import logging
import numpy as np

from lpbridge.python import problem


def sparse_to_dense(matrix: problem.SparseMatrix) -> np.ndarray:
    """Expands a COO matrix into a zero-initialized dense array of its shape.

    Entries are written in storage order, so for duplicated coordinates the
    last value wins (values are not summed).

    Args:
      matrix: The sparse matrix, with indices within `matrix.shape`.

    Returns:
      A float64 array of shape `matrix.shape`.
    """
    result = np.zeros(matrix.shape, dtype=np.float64)
    seen = set()
    for row, col, value in matrix.entries():
        if (row, col) in seen:
            logging.warning(
                "duplicate sparse entry at (%d, %d), keeping the last value %r",
                row,
                col,
                value,
            )
        seen.add((row, col))
        result[row, col] = value
    return result


def to_dense(matrix: problem.Matrix) -> np.ndarray:
    """Returns `matrix` as a 2D float64 array, whatever its format."""
    if isinstance(matrix, problem.DenseMatrix):
        if not matrix.rows:
            return np.zeros((0, 0), dtype=np.float64)
        return np.array(matrix.rows, dtype=np.float64)
    if isinstance(matrix, problem.SparseMatrix):
        return sparse_to_dense(matrix)
    raise TypeError(f"unsupported matrix format: {type(matrix).__name__}")


def constraint_matrix(
    constraints: problem.Constraints, num_variables: int
) -> np.ndarray:
    """Returns the num_constraints x num_variables dense constraint matrix."""
    dense = to_dense(constraints.matrix)
    if dense.size == 0:
        return np.zeros((constraints.num_constraints, num_variables), dtype=np.float64)
    return dense
