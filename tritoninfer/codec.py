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
"""Conversion of typed tensor values to raw little-endian buffers and back.

Raw tensor content travels without any self description: the datatype tag
and the shape are carried next to the bytes, in the request or response
envelope. The byte order is always little-endian.

    Examples of use:

        encode_scalar(5, np.int32)
        >>> b"\\x05\\x00\\x00\\x00"
        decode_scalar(b"\\x05\\x00\\x00\\x00", "INT32")
        >>> 5
        decode_tensor(raw, "FP32", (1, 16))
"""
import logging
from typing import Sequence, Union

import numpy as np
from tritonclient import utils as client_utils

from tritoninfer.exceptions import SizeMismatchError, UnknownDatatypeError

_LOGGER = logging.getLogger(__name__)

DatatypeLike = Union[str, np.dtype, type]

FIXED_WIDTH_DATATYPES = (
    "BOOL",
    "UINT8",
    "UINT16",
    "UINT32",
    "UINT64",
    "INT8",
    "INT16",
    "INT32",
    "INT64",
    "FP16",
    "FP32",
    "FP64",
)


def dtype_from_tag(datatype: str) -> np.dtype:
    """Map protocol datatype tag to little-endian numpy dtype.

    Args:
        datatype: datatype tag, e.g. `INT32`

    Returns:
        numpy dtype with little-endian byte order

    Raises:
        UnknownDatatypeError: if tag is not one of fixed-width numeric datatypes
    """
    if datatype not in FIXED_WIDTH_DATATYPES:
        raise UnknownDatatypeError(f"Unknown datatype {datatype!r}. Supported: {', '.join(FIXED_WIDTH_DATATYPES)}")
    return np.dtype(client_utils.triton_to_np_dtype(datatype)).newbyteorder("<")


def datatype_tag(dtype: DatatypeLike) -> str:
    """Map numpy dtype (or protocol datatype tag) to protocol datatype tag.

    Raises:
        UnknownDatatypeError: if dtype has no fixed-width datatype tag
    """
    if isinstance(dtype, str) and dtype in FIXED_WIDTH_DATATYPES:
        return dtype
    try:
        np_dtype = np.dtype(dtype)
    except TypeError as e:
        raise UnknownDatatypeError(f"Unknown datatype {dtype!r}") from e
    tag = client_utils.np_to_triton_dtype(np_dtype.newbyteorder("="))
    if tag not in FIXED_WIDTH_DATATYPES:
        raise UnknownDatatypeError(f"Datatype {np_dtype} has no fixed-width datatype tag (got {tag})")
    return tag


def resolve_dtype(dtype: DatatypeLike) -> np.dtype:
    """Obtain little-endian numpy dtype for numpy dtype or datatype tag."""
    return dtype_from_tag(datatype_tag(dtype))


def element_size(dtype: DatatypeLike) -> int:
    """Size in bytes of single element of given datatype."""
    return resolve_dtype(dtype).itemsize


def expected_byte_size(dtype: DatatypeLike, shape: Sequence[int]) -> int:
    """Number of bytes of raw content for tensor of given datatype and shape."""
    return int(np.prod(shape, dtype=np.int64)) * element_size(dtype)


def encode_scalar(value, dtype: DatatypeLike = np.int32) -> bytes:
    """Encode single value as little-endian bytes of exactly `element_size(dtype)` length."""
    return np.array(value, dtype=resolve_dtype(dtype)).reshape(()).tobytes()


def decode_scalar(buffer: bytes, dtype: DatatypeLike):
    """Decode single little-endian value.

    Args:
        buffer: raw content
        dtype: numpy dtype or datatype tag of encoded value

    Returns:
        numpy scalar of given dtype

    Raises:
        SizeMismatchError: if buffer length differs from the datatype size
    """
    np_dtype = resolve_dtype(dtype)
    if len(buffer) != np_dtype.itemsize:
        raise SizeMismatchError(
            f"Expected {np_dtype.itemsize} bytes for {datatype_tag(np_dtype)} scalar, got {len(buffer)}"
        )
    return np.frombuffer(buffer, dtype=np_dtype)[0]


def encode_tensor(value, dtype: DatatypeLike) -> bytes:
    """Encode scalar or array-like value as flat little-endian bytes in C order.

    Raises:
        TypeError: if value cannot be cast to the datatype without changing its kind (e.g. float to integer)
    """
    np_dtype = resolve_dtype(dtype)
    value_dtype = np.asarray(value).dtype
    if not np.can_cast(value_dtype, np_dtype, casting="same_kind"):
        raise TypeError(f"Cannot cast {value_dtype} value to {datatype_tag(np_dtype)} without loss")
    return np.ascontiguousarray(value, dtype=np_dtype).tobytes()


def decode_tensor(buffer: bytes, dtype: DatatypeLike, shape: Sequence[int]) -> np.ndarray:
    """Decode flat little-endian raw content into array of given shape.

    Single `-1` dimension is inferred from buffer length.

    Raises:
        SizeMismatchError: if buffer does not hold exactly `product(shape)` elements
    """
    np_dtype = resolve_dtype(dtype)
    shape = tuple(int(dim) for dim in shape)
    if len(buffer) % np_dtype.itemsize:
        raise SizeMismatchError(f"Buffer of {len(buffer)} bytes is not a multiple of {np_dtype.itemsize} bytes")
    count = len(buffer) // np_dtype.itemsize

    if shape.count(-1) > 1:
        raise SizeMismatchError(f"Shape {shape} has more than one dynamic dimension")
    if -1 in shape:
        known = int(np.prod([dim for dim in shape if dim != -1], dtype=np.int64))
        if known == 0 or count % known:
            raise SizeMismatchError(f"Cannot fit {count} elements into shape {shape}")
        shape = tuple(count // known if dim == -1 else dim for dim in shape)
    elif int(np.prod(shape, dtype=np.int64)) != count:
        raise SizeMismatchError(f"Expected {np.prod(shape, dtype=np.int64)} elements of shape {shape}, got {count}")

    _LOGGER.debug(f"Decoding {count} elements of {np_dtype} into shape {shape}")
    return np.frombuffer(buffer, dtype=np_dtype).reshape(shape).astype(np_dtype.newbyteorder("="))
