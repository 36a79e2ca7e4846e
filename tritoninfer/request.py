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
"""Construction of ModelInferRequest messages.

Input tensor bytes travel exclusively in `raw_input_contents`: the descriptor
at `inputs[i]` never has its `contents` set and its bytes are found at
`raw_input_contents[i]`. Both sequences are only ever appended together,
by `_append_input`.

Typical use:

    request = build_infer_request(
        "simple",
        "",
        [
            InputTensor("INPUT0", "INT32", (1, 16), np.arange(16)),
            InputTensor("INPUT1", "INT32", (1, 16), np.ones(16, dtype=np.int32)),
        ],
        ["OUTPUT0", "OUTPUT1"],
    )
"""
import logging
from typing import Mapping, Optional, Sequence, Union

from tritonclient.grpc import service_pb2

from tritoninfer.codec import datatype_tag, encode_tensor, expected_byte_size
from tritoninfer.constants import LATEST_MODEL_VERSION
from tritoninfer.exceptions import EmptyInputsError, InvalidTensorError, ShapeMismatchError, UnknownDatatypeError
from tritoninfer.tensor import InputTensor

_LOGGER = logging.getLogger(__name__)

ParametersType = Mapping[str, Union[str, int, bool]]


def _append_input(request: service_pb2.ModelInferRequest, input_tensor: InputTensor):
    name = input_tensor.name
    if not name:
        raise InvalidTensorError("Input tensor name must be a non-empty string")
    if any(dim < 1 for dim in input_tensor.shape):
        raise InvalidTensorError(f"Input {name!r} shape {input_tensor.shape} must contain positive dimensions only")
    try:
        tag = datatype_tag(input_tensor.datatype)
    except UnknownDatatypeError as e:
        raise InvalidTensorError(f"Input {name!r}: {e.message}") from e

    try:
        raw_content = encode_tensor(input_tensor.value, tag)
    except (TypeError, ValueError, OverflowError) as e:
        raise InvalidTensorError(f"Input {name!r} value cannot be encoded as {tag}: {e}") from e
    expected_size = expected_byte_size(tag, input_tensor.shape)
    if len(raw_content) != expected_size:
        raise ShapeMismatchError(
            f"Input {name!r} of shape {input_tensor.shape} and datatype {tag} should have {expected_size} bytes "
            f"of raw content, but value encodes to {len(raw_content)} bytes"
        )

    descriptor = request.inputs.add()
    descriptor.name = name
    descriptor.datatype = tag
    descriptor.shape.extend(input_tensor.shape)
    request.raw_input_contents.append(raw_content)


def _set_parameters(request: service_pb2.ModelInferRequest, parameters: ParametersType):
    for key, value in parameters.items():
        if not isinstance(key, str):
            raise InvalidTensorError("Parameter key must be a string")
        # bool is checked first as it is a subclass of int
        if isinstance(value, bool):
            request.parameters[key].bool_param = value
        elif isinstance(value, int):
            request.parameters[key].int64_param = value
        elif isinstance(value, str):
            request.parameters[key].string_param = value
        else:
            raise InvalidTensorError("Parameter value must be a string, integer or boolean")


def build_infer_request(
    model_name: str,
    model_version: str,
    input_tensors: Sequence[InputTensor],
    requested_outputs: Sequence[str],
    request_id: str = "",
    parameters: Optional[ParametersType] = None,
) -> service_pb2.ModelInferRequest:
    """Assemble inference request for given model.

    Args:
        model_name: name of the model to run inference on.
        model_version: version of the model. Empty string selects the latest version.
        input_tensors: input tensors in the order they will be placed in the request.
        requested_outputs: names of outputs to return, in the order raw contents are expected in the response.
        request_id: opaque identifier passed through to the server; empty by default.
        parameters: optional inference request parameters.

    Returns:
        ModelInferRequest with inputs and raw input contents positionally aligned.

    Raises:
        EmptyInputsError: if no input tensor is given.
        ShapeMismatchError: if any input value does not encode to `product(shape) * size_of(datatype)` bytes.
        InvalidTensorError: if model name or any tensor name is empty, output name is repeated,
            datatype is unsupported, value cannot be cast to datatype without loss or parameters are malformed.
    """
    if not model_name:
        raise InvalidTensorError("Model name must be a non-empty string")
    if not input_tensors:
        raise EmptyInputsError(f"Inference request for model {model_name} requires at least one input tensor")

    request = service_pb2.ModelInferRequest(
        model_name=model_name,
        model_version=model_version or "",
        id=request_id or "",
    )
    for input_tensor in input_tensors:
        _append_input(request, input_tensor)
    for output_name in requested_outputs:
        if not output_name:
            raise InvalidTensorError("Requested output name must be a non-empty string")
        if any(output.name == output_name for output in request.outputs):
            raise InvalidTensorError(f"Output {output_name!r} is requested more than once")
        request.outputs.add(name=output_name)
    if parameters:
        _set_parameters(request, parameters)

    _LOGGER.debug(
        f"Built inference request for {model_name}/{model_version or LATEST_MODEL_VERSION} "
        f"inputs={[tensor.name for tensor in request.inputs]} outputs={list(requested_outputs)}"
    )
    return request
