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
"""Client for the inference service exposed over gRPC.

Typical usage example:

```python
channel = create_channel("grpc://localhost:8001")
client = InferenceServiceClient(channel)
live = await client.check_live()
outputs = await client.infer(
    "simple",
    "",
    [InputTensor("INPUT0", "INT32", (1, 16), a), InputTensor("INPUT1", "INT32", (1, 16), b)],
    [OutputTensor("OUTPUT0", "INT32", (1, 16)), OutputTensor("OUTPUT1", "INT32", (1, 16))],
)
await channel.close()
```

The client borrows the channel: it never closes it and keeps no state between calls,
so it may be used concurrently from many tasks.
"""

import logging
from typing import Any, Dict, Optional, Sequence

import grpc
from tritonclient.grpc import service_pb2, service_pb2_grpc

from tritoninfer.client.utils import translate_rpc_error
from tritoninfer.constants import DEFAULT_NETWORK_TIMEOUT_S, LATEST_MODEL_VERSION
from tritoninfer.metadata import ModelMetadata
from tritoninfer.request import ParametersType, build_infer_request
from tritoninfer.response import decode_named_outputs
from tritoninfer.tensor import InputTensor, OutputTensor

_LOGGER = logging.getLogger(__name__)


class InferenceServiceClient:
    """Asyncio client for the inference server health, metadata and inference RPCs."""

    def __init__(self, channel: grpc.aio.Channel, *, timeout_s: Optional[float] = None):
        """Inits InferenceServiceClient for an already established channel.

        Args:
            channel: gRPC asyncio channel to the inference server. Not closed by the client.
            timeout_s: deadline in seconds for each RPC. If not passed, the default timeout of 60 seconds will be used.
        """
        self._timeout_s = DEFAULT_NETWORK_TIMEOUT_S if timeout_s is None else timeout_s
        self._stub = service_pb2_grpc.GRPCInferenceServiceStub(channel)

    async def _call(self, method_name: str, request, description: str):
        method = getattr(self._stub, method_name)
        try:
            _LOGGER.debug(f"Sending {method_name} request (timeout={self._timeout_s})")
            response = await method(request, timeout=self._timeout_s)
        except grpc.RpcError as e:
            error = translate_rpc_error(e, description)
            _LOGGER.error(error.message)
            raise error from e
        _LOGGER.debug(f"Received {method_name} response")
        return response

    async def check_live(self) -> bool:
        """Check if inference server is live.

        Returns:
            True if server reports it is live. False is a valid answer, not an error.

        Raises:
            TransportError: If server could not be reached or rejected the request.
        """
        response = await self._call("ServerLive", service_pb2.ServerLiveRequest(), "server liveness check")
        return response.live

    async def check_ready(self) -> bool:
        """Check if inference server is ready to serve inference requests.

        Raises:
            TransportError: If server could not be reached or rejected the request.
        """
        response = await self._call("ServerReady", service_pb2.ServerReadyRequest(), "server readiness check")
        return response.ready

    async def check_model_ready(self, model_name: str, model_version: str = "") -> bool:
        """Check if given model version is ready for inference on the server."""
        request = service_pb2.ModelReadyRequest(name=model_name, version=model_version or "")
        response = await self._call(
            "ModelReady", request, f"model {model_name}/{model_version or LATEST_MODEL_VERSION} readiness check"
        )
        return response.ready

    async def fetch_metadata(self, model_name: str, model_version: str = "") -> ModelMetadata:
        """Obtain metadata of model deployed on the inference server.

        Metadata is fetched on each call, never cached.

        Args:
            model_name: name of the model.
            model_version: version of the model. Empty string selects the latest version.

        Returns:
            Model metadata with declared inputs and outputs.

        Raises:
            ModelNotFoundError: If server does not know the model name and version pair.
            TransportError: If server could not be reached or rejected the request.
        """
        request = service_pb2.ModelMetadataRequest(name=model_name, version=model_version or "")
        response = await self._call(
            "ModelMetadata", request, f"model {model_name}/{model_version or LATEST_MODEL_VERSION} metadata fetch"
        )
        metadata = ModelMetadata.from_response(response)
        _LOGGER.debug(f"Model metadata: {metadata}")
        return metadata

    async def infer(
        self,
        model_name: str,
        model_version: str,
        inputs: Sequence[InputTensor],
        requested_outputs: Sequence[OutputTensor],
        request_id: str = "",
        parameters: Optional[ParametersType] = None,
    ) -> Dict[str, Any]:
        """Run inference on the model.

        Builds the request, sends it and decodes the response, in that order. Failure of any step aborts the call;
        there is no retry.

        Args:
            model_name: name of the model to run inference on.
            model_version: version of the model. Empty string selects the latest version.
            inputs: input tensors with values.
            requested_outputs: outputs to return, with datatype and shape used to decode them.
            request_id: opaque identifier passed through to the server.
            parameters: optional inference request parameters.

        Returns:
            Dictionary mapping requested output names to decoded values.

        Raises:
            BuildError: If request could not be constructed. Nothing is sent.
            TransportError: If the RPC failed.
            DecodeError: If response raw contents do not match requested outputs.
        """
        request = build_infer_request(
            model_name,
            model_version,
            inputs,
            [output.name for output in requested_outputs],
            request_id=request_id,
            parameters=parameters,
        )
        response = await self._call(
            "ModelInfer", request, f"inference request to model {model_name}/{model_version or LATEST_MODEL_VERSION}"
        )
        return decode_named_outputs(response, requested_outputs)
