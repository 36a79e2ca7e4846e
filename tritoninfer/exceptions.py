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
"""Exceptions thrown in tritoninfer.

Every error carries the stage of the inference call it was raised in:
``build`` for local request construction, ``send`` for the RPC round trip,
``decode`` for unpacking the response and ``connect`` for channel bootstrap.
"""
from typing import Optional


class TritonInferError(Exception):
    """Generic tritoninfer exception."""

    stage = "unknown"

    def __init__(self, message: str):
        """Initialize exception with message.

        Args:
            message: Error message
        """
        self._message = message

    def __str__(self) -> str:
        """String representation of error.

        Returns:
            Message content
        """
        return self._message

    @property
    def message(self):
        """Get the exception message.

        Returns:
            The message associated with this exception, or None if no message.

        """
        return self._message


class InvalidUrlError(TritonInferError):
    """Error raised when provided inference server url is invalid."""

    stage = "connect"


class BuildError(TritonInferError):
    """Inference request could not be constructed. Nothing was sent."""

    stage = "build"


class EmptyInputsError(BuildError):
    """Inference request was built without any input tensor."""

    pass


class ShapeMismatchError(BuildError):
    """Encoded input value does not match the declared shape and datatype."""

    pass


class InvalidTensorError(BuildError):
    """Input tensor or request field is malformed (empty name, unsupported datatype, bad parameter)."""

    pass


class DecodeError(TritonInferError):
    """Response was received but could not be unpacked into typed values."""

    stage = "decode"


class SizeMismatchError(DecodeError):
    """Raw buffer length does not match the expected element count and size."""

    def __init__(self, message: str, index: Optional[int] = None):
        """Initialize exception with message and the position of failing output.

        Args:
            message: Error message
            index: position of the output in the requested outputs, if known
        """
        super().__init__(message)
        self.index = index


class UnknownDatatypeError(DecodeError):
    """Datatype tag is not a fixed-width numeric type."""

    pass


class CountMismatchError(DecodeError):
    """Number of raw output buffers differs from number of expected outputs."""

    pass


class TransportError(TritonInferError):
    """RPC to the inference server failed (unreachable, timeout, rejected request)."""

    stage = "send"

    def __init__(self, message: str, status_code=None):
        """Initialize exception with message and gRPC status code.

        Args:
            message: Error message
            status_code: `grpc.StatusCode` reported by the transport, if any
        """
        super().__init__(message)
        self.status_code = status_code


class ModelNotFoundError(TransportError):
    """Server does not know the requested model name and version."""

    pass


class TransportTimeoutError(TransportError):
    """Deadline exceeded while waiting for the inference server."""

    pass
