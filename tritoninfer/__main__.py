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
"""Inference client command line tool.

Checks server health, fetches model metadata and runs a single inference on a model
taking two INT32 inputs `INPUT0`/`INPUT1` of shape [1, 16] and returning `OUTPUT0`/`OUTPUT1`,
e.g. the `simple` add/sub model from the Triton model repository examples.
"""

import asyncio
import logging

import numpy as np
import typer
from typing_extensions import Annotated

from tritoninfer.client import InferenceServiceClient, create_channel
from tritoninfer.constants import DEFAULT_MODEL_NAME, DEFAULT_NETWORK_TIMEOUT_S, DEFAULT_URL
from tritoninfer.exceptions import TritonInferError
from tritoninfer.tensor import InputTensor, OutputTensor
from tritoninfer.utils.logging import silence_3rd_party_loggers

_LOGGER = logging.getLogger("tritoninfer")

TENSOR_SHAPE = (1, 16)

app = typer.Typer(help="Inference client.\n\nThis tool checks server health and runs inference over gRPC.")


async def run_inference(url: str, model_name: str, model_version: str, timeout_s: float):
    """Check server health, log model metadata and run single inference.

    Args:
        url: inference server url
        model_name: name of the model
        model_version: version of the model, empty for the latest
        timeout_s: deadline for each RPC

    Returns:
        Dictionary with decoded `OUTPUT0` and `OUTPUT1` arrays.
    """
    channel = create_channel(url)
    try:
        client = InferenceServiceClient(channel, timeout_s=timeout_s)

        live = await client.check_live()
        _LOGGER.info(f"Triton Health - Live: {live}")

        ready = await client.check_ready()
        _LOGGER.info(f"Triton Health - Ready: {ready}")

        metadata = await client.fetch_metadata(model_name, model_version)
        _LOGGER.info(f"{metadata}")

        inputs = [
            InputTensor(name="INPUT0", datatype="INT32", shape=TENSOR_SHAPE, value=np.arange(16, dtype=np.int32)),
            InputTensor(name="INPUT1", datatype="INT32", shape=TENSOR_SHAPE, value=np.ones(16, dtype=np.int32)),
        ]
        requested_outputs = [
            OutputTensor(name="OUTPUT0", datatype="INT32", shape=TENSOR_SHAPE),
            OutputTensor(name="OUTPUT1", datatype="INT32", shape=TENSOR_SHAPE),
        ]
        outputs = await client.infer(model_name, model_version, inputs, requested_outputs)
        _LOGGER.info(f"{outputs['OUTPUT0']} {outputs['OUTPUT1']}")
        return outputs
    finally:
        await channel.close()


@app.command()
def main(
    model_name: Annotated[
        str, typer.Option("--model-name", "-m", help="Name of model being served.")
    ] = DEFAULT_MODEL_NAME,
    model_version: Annotated[
        str, typer.Option("--model-version", "-x", help="Version of model. [default: Latest Version]")
    ] = "",
    url: Annotated[str, typer.Option("--url", "-u", help="Inference Server URL.")] = DEFAULT_URL,
    timeout_s: Annotated[
        float, typer.Option("--timeout-s", help="Deadline in seconds for each RPC.")
    ] = DEFAULT_NETWORK_TIMEOUT_S,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging.")] = False,
):
    """Run health checks, metadata fetch and inference against the inference server."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s - %(levelname)s - %(name)s: %(message)s",
    )
    silence_3rd_party_loggers()

    try:
        asyncio.run(run_inference(url, model_name, model_version, timeout_s))
    except TritonInferError as e:
        _LOGGER.error(f"Inference failed at {e.stage} stage: {e.message}")
        raise typer.Exit(code=1) from e


if __name__ == "__main__":
    app()
