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

"""Lets pytest run the absltest modules.

absltest.main() parses the absl flags (e.g. --test_tmpdir, read by
create_tempfile()) before running tests; pytest never does, so the defaults
are marked as parsed here.
"""

from absl import flags


def pytest_configure(config) -> None:
    del config  # Unused.
    flags.FLAGS.mark_as_parsed()
