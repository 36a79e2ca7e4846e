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
import grpc
from tritonclient.grpc import service_pb2

SIMPLE_MODEL_METADATA_RESPONSE = service_pb2.ModelMetadataResponse(
    name="simple",
    versions=["1"],
    platform="tensorflow_graphdef",
    inputs=[
        service_pb2.ModelMetadataResponse.TensorMetadata(name="INPUT0", datatype="INT32", shape=[-1, 16]),
        service_pb2.ModelMetadataResponse.TensorMetadata(name="INPUT1", datatype="INT32", shape=[-1, 16]),
    ],
    outputs=[
        service_pb2.ModelMetadataResponse.TensorMetadata(name="OUTPUT0", datatype="INT32", shape=[-1, 16]),
        service_pb2.ModelMetadataResponse.TensorMetadata(name="OUTPUT1", datatype="INT32", shape=[-1, 16]),
    ],
)

GRPC_LOCALHOST_URL = "grpc://localhost:8001"


class FakeRpcError(grpc.RpcError):
    """Error with the interface of errors raised by gRPC calls."""

    def __init__(self, code: grpc.StatusCode, details: str = ""):
        super().__init__(details)
        self._code = code
        self._details = details

    def code(self):
        return self._code

    def details(self):
        return self._details


def patch_stub(mocker, **responses):
    """Replace GRPCInferenceServiceStub with mock returning given responses (or raising given errors).

    Keyword arguments are RPC method names, e.g. `ServerLive=service_pb2.ServerLiveResponse(live=True)`.
    """
    stub = mocker.MagicMock()
    for method_name, response in responses.items():
        if isinstance(response, BaseException):
            setattr(stub, method_name, mocker.AsyncMock(side_effect=response))
        else:
            setattr(stub, method_name, mocker.AsyncMock(return_value=response))
    mocker.patch("tritoninfer.client.client.service_pb2_grpc.GRPCInferenceServiceStub", return_value=stub)
    return stub
