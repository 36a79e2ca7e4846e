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
"""Utility module supporting inference service client."""
import dataclasses
import logging
import urllib.parse

import grpc

from tritoninfer.constants import DEFAULT_GRPC_PORT
from tritoninfer.exceptions import InvalidUrlError, ModelNotFoundError, TransportError, TransportTimeoutError

_LOGGER = logging.getLogger(__name__)

# http scheme is accepted as gRPC runs over HTTP/2, e.g. `http://localhost:8001`
_SUPPORTED_SCHEMES = ("grpc", "http")


@dataclasses.dataclass(frozen=True)
class TritonUrl:
    """gRPC endpoint of the inference server parsed from `[scheme://]hostname[:port]`.

    Examples:
        TritonUrl.from_url("localhost")
        >>> TritonUrl(scheme="grpc", hostname="localhost", port=8001)
        TritonUrl.from_url("http://localhost:8001").target
        >>> "localhost:8001"
    """

    scheme: str
    hostname: str
    port: int

    @classmethod
    def from_url(cls, url: str) -> "TritonUrl":
        """Parse url; missing scheme defaults to grpc and missing port to 8001.

        Raises:
            InvalidUrlError: If url is not a string, has unsupported scheme, no hostname or invalid port.
        """
        if not isinstance(url, str):
            raise InvalidUrlError(f"Invalid url {url}. Url must be a string.")
        scheme, separator, netloc = url.partition("://")
        if not separator:
            scheme, netloc = "grpc", url
        scheme = scheme.lower()
        if scheme not in _SUPPORTED_SCHEMES:
            raise InvalidUrlError(f"Invalid url {url}. Only {' and '.join(_SUPPORTED_SCHEMES)} schemes are supported.")
        try:
            parsed_url = urllib.parse.urlsplit(f"//{netloc}")
            port = parsed_url.port or DEFAULT_GRPC_PORT
        except ValueError as e:
            raise InvalidUrlError(f"Invalid url {url}") from e
        if not parsed_url.hostname:
            raise InvalidUrlError(f"Invalid url {url}. Missing hostname.")
        return cls(scheme, parsed_url.hostname, port)

    @property
    def target(self) -> str:
        """Channel target `hostname:port`."""
        return f"{self.hostname}:{self.port}"


def create_channel(url: str) -> grpc.aio.Channel:
    """Open insecure asyncio gRPC channel to the inference server.

    Args:
        url: url of the server, e.g. `grpc://localhost:8001`, `localhost:8001` or `localhost`.

    Returns:
        gRPC channel. Caller owns it and is responsible for closing it.

    Raises:
        InvalidUrlError: If provided inference server url is invalid.
    """
    target = TritonUrl.from_url(url).target
    _LOGGER.debug(f"Creating gRPC channel for {target}")
    return grpc.aio.insecure_channel(target)


def translate_rpc_error(error: grpc.RpcError, description: str) -> TransportError:
    """Wrap gRPC error into TransportError matching its status code.

    Args:
        error: error raised by gRPC call
        description: description of the failed call used in error message

    Returns:
        ModelNotFoundError for unknown model, TransportTimeoutError for exceeded deadline,
        TransportError otherwise.
    """
    status_code = error.code() if hasattr(error, "code") else None
    details = error.details() if hasattr(error, "details") else str(error)
    message = f"Error occurred during {description}. Status: {status_code}. Message: {details}"

    if status_code == grpc.StatusCode.DEADLINE_EXCEEDED:
        return TransportTimeoutError(message, status_code=status_code)
    # Triton reports unknown model as UNAVAILABLE/INVALID_ARGUMENT with "unknown model" in details
    if status_code == grpc.StatusCode.NOT_FOUND or "unknown model" in (details or "").lower():
        return ModelNotFoundError(message, status_code=status_code)
    return TransportError(message, status_code=status_code)
