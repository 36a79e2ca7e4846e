# Copyright (c) 2024, NVIDIA CORPORATION. All rights reserved.
#
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
"""Constants for tritoninfer."""
import os
import warnings

DEFAULT_GRPC_PORT = 8001
DEFAULT_MODEL_NAME = os.getenv("TRITONINFER_MODEL_NAME", "simple")
DEFAULT_URL = os.getenv("TRITONINFER_URL", f"grpc://localhost:{DEFAULT_GRPC_PORT}")

_DEFAULT_NETWORK_TIMEOUT_S = 60.0


def _timeout_from_env(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        timeout_s = float(value)
    except ValueError:
        timeout_s = -1.0
    if timeout_s <= 0:
        warnings.warn(
            f"{name}={value!r} is not a positive number of seconds. Using {default} s.", RuntimeWarning, stacklevel=2
        )
        return default
    return timeout_s


DEFAULT_NETWORK_TIMEOUT_S = _timeout_from_env("TRITONINFER_TIMEOUT_S", _DEFAULT_NETWORK_TIMEOUT_S)

LATEST_MODEL_VERSION = "<latest>"
