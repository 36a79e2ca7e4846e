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
"""Tensor descriptors exchanged with the inference server.

Describe inputs sent to the model, outputs requested from it and the tensor
schema declared in model metadata.

    Examples of use:

        # Input with value
        tensor = InputTensor(name="INPUT0", datatype="INT32", shape=(1, 16), value=np.arange(16))

        # Output decoded as scalar
        tensor = OutputTensor(name="OUTPUT0", datatype=np.int32)

        # Output decoded as array of given shape
        tensor = OutputTensor(name="OUTPUT0", datatype="INT32", shape=(1, 16))
"""

import dataclasses
from typing import Any, Optional, Tuple

from tritoninfer.codec import DatatypeLike


def _freeze_shape(instance, shape):
    if shape is not None:
        object.__setattr__(instance, "shape", tuple(int(dim) for dim in shape))


@dataclasses.dataclass(frozen=True)
class TensorSpec:
    """Tensor schema as declared by model metadata.

    Args:
        name: Name of the input/output of model.
        datatype: Datatype tag, e.g. `INT32`.
        shape: Shape of the tensor; `-1` marks a dynamic dimension.
    """

    name: str
    datatype: str
    shape: Tuple[int, ...]

    def __post_init__(self):
        """Override object values on post init or field override."""
        _freeze_shape(self, self.shape)


@dataclasses.dataclass(frozen=True)
class InputTensor:
    """Input tensor to be sent in inference request.

    Args:
        name: Name of model input.
        datatype: Datatype tag or numpy dtype.
        shape: Shape of the tensor.
        value: Scalar or array-like value holding `product(shape)` elements.
    """

    name: str
    datatype: DatatypeLike
    shape: Tuple[int, ...]
    value: Any

    def __post_init__(self):
        """Override object values on post init or field override."""
        _freeze_shape(self, self.shape)


@dataclasses.dataclass(frozen=True)
class OutputTensor:
    """Output tensor requested from the model.

    Args:
        name: Name of model output.
        datatype: Datatype tag or numpy dtype used to decode raw content.
        shape: Shape used to decode raw content. If None output is decoded as a scalar.
    """

    name: str
    datatype: DatatypeLike
    shape: Optional[Tuple[int, ...]] = None

    def __post_init__(self):
        """Override object values on post init or field override."""
        _freeze_shape(self, self.shape)
