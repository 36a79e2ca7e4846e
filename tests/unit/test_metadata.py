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
import dataclasses

import pytest
from tritonclient.grpc import service_pb2

from tritoninfer.metadata import ModelMetadata
from tritoninfer.tensor import OutputTensor, TensorSpec

from .common import SIMPLE_MODEL_METADATA_RESPONSE


def test_model_metadata_from_response():
    metadata = ModelMetadata.from_response(SIMPLE_MODEL_METADATA_RESPONSE)

    assert metadata.name == "simple"
    assert metadata.versions == ("1",)
    assert metadata.version == "1"
    assert metadata.platform == "tensorflow_graphdef"
    assert metadata.inputs == (
        TensorSpec(name="INPUT0", datatype="INT32", shape=(-1, 16)),
        TensorSpec(name="INPUT1", datatype="INT32", shape=(-1, 16)),
    )
    assert [spec.name for spec in metadata.outputs] == ["OUTPUT0", "OUTPUT1"]


def test_model_metadata_version_is_none_when_server_reports_no_versions():
    metadata = ModelMetadata.from_response(service_pb2.ModelMetadataResponse(name="simple"))

    assert metadata.versions == ()
    assert metadata.version is None
    assert metadata.inputs == ()


def test_model_metadata_requested_outputs_follow_declared_outputs():
    metadata = ModelMetadata.from_response(SIMPLE_MODEL_METADATA_RESPONSE)

    assert metadata.requested_outputs() == (
        OutputTensor(name="OUTPUT0", datatype="INT32", shape=(-1, 16)),
        OutputTensor(name="OUTPUT1", datatype="INT32", shape=(-1, 16)),
    )


def test_model_metadata_is_immutable():
    metadata = ModelMetadata.from_response(SIMPLE_MODEL_METADATA_RESPONSE)

    with pytest.raises(dataclasses.FrozenInstanceError):
        metadata.name = "other"
