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
import numpy as np
import pytest
from tritonclient.grpc import service_pb2

from tritoninfer.exceptions import CountMismatchError, SizeMismatchError, UnknownDatatypeError
from tritoninfer.response import decode_named_outputs, decode_outputs
from tritoninfer.tensor import OutputTensor, TensorSpec


def _response(*raw_contents):
    return service_pb2.ModelInferResponse(model_name="simple", raw_output_contents=list(raw_contents))


def test_decode_outputs_returns_scalars_in_requested_order():
    response = _response(bytes([5, 0, 0, 0]), bytes([7, 0, 0, 0]))

    assert decode_outputs(response, [np.int32, np.int32]) == [5, 7]
    assert decode_outputs(response, ["INT32", "INT32"]) == [5, 7]


def test_decode_outputs_raise_error_with_index_on_size_mismatch():
    response = _response(bytes([1, 2, 3]))

    with pytest.raises(SizeMismatchError) as exc_info:
        decode_outputs(response, [np.int32])

    assert exc_info.value.index == 0
    assert exc_info.value.stage == "decode"


def test_decode_outputs_reports_lowest_failing_index():
    response = _response(bytes(4), bytes(3), bytes(5))

    with pytest.raises(SizeMismatchError) as exc_info:
        decode_outputs(response, ["INT32", "INT32", "INT32"])

    assert exc_info.value.index == 1


@pytest.mark.parametrize("n_raw,n_expected", [(0, 1), (1, 0), (2, 1), (1, 3)])
def test_decode_outputs_raise_error_when_counts_differ(n_raw, n_expected):
    response = _response(*[bytes(4)] * n_raw)

    with pytest.raises(CountMismatchError):
        decode_outputs(response, [np.int32] * n_expected)


def test_decode_outputs_of_empty_response_and_no_expected_types():
    assert decode_outputs(_response(), []) == []


def test_decode_outputs_decodes_arrays_for_output_tensors_and_specs():
    add = np.arange(16, dtype=np.int32).reshape(1, 16)
    sub = -add
    response = _response(add.astype("<i4").tobytes(), sub.astype("<i4").tobytes())

    outputs = decode_outputs(
        response,
        [OutputTensor(name="OUTPUT0", datatype="INT32", shape=(1, 16)), TensorSpec("OUTPUT1", "INT32", (-1, 16))],
    )

    np.testing.assert_array_equal(outputs[0], add)
    np.testing.assert_array_equal(outputs[1], sub)


def test_decode_outputs_decodes_output_tensor_without_shape_as_scalar():
    response = _response(np.float64(2.5).tobytes())

    assert decode_outputs(response, [OutputTensor(name="OUTPUT0", datatype=np.float64)]) == [2.5]


def test_decode_outputs_raise_error_on_unknown_datatype():
    with pytest.raises(UnknownDatatypeError):
        decode_outputs(_response(bytes(4)), ["BYTES"])


def test_decode_named_outputs_keys_by_requested_names():
    response = _response(bytes([5, 0, 0, 0]), bytes([7, 0, 0, 0]))

    outputs = decode_named_outputs(
        response, [OutputTensor(name="OUTPUT0", datatype="INT32"), OutputTensor(name="OUTPUT1", datatype="INT32")]
    )

    assert outputs == {"OUTPUT0": 5, "OUTPUT1": 7}
