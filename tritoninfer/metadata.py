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
"""Model metadata as declared by the inference server."""
import dataclasses
from typing import Optional, Tuple

from tritonclient.grpc import service_pb2

from tritoninfer.tensor import OutputTensor, TensorSpec


@dataclasses.dataclass(frozen=True)
class ModelMetadata:
    """Input/output schema of a model served by the inference server.

    Args:
        name: Name of the model.
        versions: Versions of the model available on the server.
        platform: Framework/backend the model runs on, e.g. `tensorflow_graphdef`.
        inputs: Input tensors declared by the model.
        outputs: Output tensors declared by the model.
    """

    name: str
    versions: Tuple[str, ...]
    platform: str
    inputs: Tuple[TensorSpec, ...]
    outputs: Tuple[TensorSpec, ...]

    @property
    def version(self) -> Optional[str]:
        """Latest of the reported model versions or None if server did not report any."""
        return self.versions[-1] if self.versions else None

    @classmethod
    def from_response(cls, response: service_pb2.ModelMetadataResponse) -> "ModelMetadata":
        """Create ModelMetadata from ModelMetadataResponse message."""

        def _specs(tensors):
            return tuple(TensorSpec(name=spec.name, datatype=spec.datatype, shape=spec.shape) for spec in tensors)

        return cls(
            name=response.name,
            versions=tuple(response.versions),
            platform=response.platform,
            inputs=_specs(response.inputs),
            outputs=_specs(response.outputs),
        )

    def requested_outputs(self) -> Tuple[OutputTensor, ...]:
        """Output tensors requesting every declared model output with its declared datatype and shape."""
        return tuple(OutputTensor(name=spec.name, datatype=spec.datatype, shape=spec.shape) for spec in self.outputs)
