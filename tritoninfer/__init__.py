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
# noqa: D104
from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("tritoninfer")
except PackageNotFoundError:
    __version__ = "unknown"

from tritoninfer.client import InferenceServiceClient, TritonUrl, create_channel  # noqa: F401,E402
from tritoninfer.metadata import ModelMetadata  # noqa: F401,E402
from tritoninfer.request import build_infer_request  # noqa: F401,E402
from tritoninfer.response import decode_named_outputs, decode_outputs  # noqa: F401,E402
from tritoninfer.tensor import InputTensor, OutputTensor, TensorSpec  # noqa: F401,E402
