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
"""Decoding of ModelInferResponse raw output contents into typed values.

Raw output contents carry no shape or datatype: `raw_output_contents[i]`
belongs to the i-th requested output and is decoded with the type the caller
expects for it.
"""
import logging
from typing import Any, Dict, List, Sequence, Union

from tritonclient.grpc import service_pb2

from tritoninfer.codec import DatatypeLike, decode_scalar, decode_tensor
from tritoninfer.exceptions import CountMismatchError, SizeMismatchError
from tritoninfer.tensor import OutputTensor, TensorSpec

_LOGGER = logging.getLogger(__name__)

ExpectedType = Union[DatatypeLike, OutputTensor, TensorSpec]


def _decode_output(raw_content: bytes, expected_type: ExpectedType):
    if isinstance(expected_type, (OutputTensor, TensorSpec)):
        if expected_type.shape is None:
            return decode_scalar(raw_content, expected_type.datatype)
        return decode_tensor(raw_content, expected_type.datatype, expected_type.shape)
    return decode_scalar(raw_content, expected_type)


def decode_outputs(response: service_pb2.ModelInferResponse, expected_types: Sequence[ExpectedType]) -> List[Any]:
    """Decode raw output contents of inference response.

    Decoding is all-or-nothing: the first failing output, in output order, is reported.

    Args:
        response: inference response
        expected_types: for each requested output, in request order, a numpy dtype or datatype tag
            (output decoded as a scalar) or `OutputTensor`/`TensorSpec` (output decoded as an array of its shape)

    Returns:
        list of decoded values in order of requested outputs

    Raises:
        CountMismatchError: if number of raw output contents differs from number of expected types.
        SizeMismatchError: if raw content of an output has unexpected length; `index` attribute points the output.
        UnknownDatatypeError: if expected type is not a fixed-width numeric datatype.
    """
    raw_output_contents = response.raw_output_contents
    if len(raw_output_contents) != len(expected_types):
        raise CountMismatchError(
            f"Response holds {len(raw_output_contents)} raw output contents, but {len(expected_types)} were expected"
        )

    outputs = []
    for idx, (raw_content, expected_type) in enumerate(zip(raw_output_contents, expected_types)):
        try:
            outputs.append(_decode_output(raw_content, expected_type))
        except SizeMismatchError as e:
            raise SizeMismatchError(f"Output at index {idx}: {e.message}", index=idx) from e
    _LOGGER.debug(f"Decoded {len(outputs)} outputs")
    return outputs


def decode_named_outputs(
    response: service_pb2.ModelInferResponse, requested_outputs: Sequence[OutputTensor]
) -> Dict[str, Any]:
    """Decode raw output contents of inference response into dictionary keyed by requested output names."""
    outputs = decode_outputs(response, requested_outputs)
    return {output.name: value for output, value in zip(requested_outputs, outputs)}
