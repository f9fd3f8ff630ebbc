# This file is part of lsst-edf.
#
# Developed for the LSST Data Management System.
# This product includes software developed by the LSST Project
# (https://www.lsst.org).
# See the COPYRIGHT file at the top-level directory of this distribution
# for details of code ownership.
#
# Use of this source code is governed by a 3-clause BSD-style
# license that can be found in the LICENSE file.

"""Command-line front end that converts ``.npy`` arrays to EDF files."""

from __future__ import annotations

__all__ = ("main", "parse_attribute")

import logging

import click
import numpy as np
import pydantic

from ._config import SessionConfig
from ._errors import FrameFileError
from ._frame import Attribute, Frame
from ._source import IterableFrameSource, write_frames


def parse_attribute(text: str) -> Attribute:
    """Parse a ``NAME=VALUE`` command-line argument into an `Attribute`.

    The value is interpreted as an integer if possible, then as a float, and
    is otherwise kept as text.
    """
    name, sep, raw = text.partition("=")
    if not sep or not name.strip():
        raise ValueError(f"Attribute {text!r} is not of the form NAME=VALUE.")
    value: int | float | str
    try:
        value = int(raw)
    except ValueError:
        try:
            value = float(raw)
        except ValueError:
            value = raw
    return Attribute.infer(name.strip(), value)


def _parse_attributes(ctx: click.Context, param: click.Parameter, values: tuple[str, ...]) -> list[Attribute]:
    try:
        return [parse_attribute(v) for v in values]
    except ValueError as err:
        raise click.BadParameter(str(err)) from None


@click.command("edf-write")
@click.argument("input_path", type=click.Path(exists=True, dir_okay=False))
@click.argument("output_path")
@click.option(
    "-a",
    "--attribute",
    "attributes",
    multiple=True,
    callback=_parse_attributes,
    help="Header attribute as NAME=VALUE; may be repeated.",
)
@click.option(
    "-m", "--min-header-size", type=click.IntRange(min=0), default=None, help="Minimum header size in bytes."
)
@click.option("--stack", is_flag=True, help="Write axis 0 of the input as a sequence of frames.")
@click.option(
    "-c", "--config", "config_path", type=click.Path(exists=True, dir_okay=False), help="JSON session config."
)
@click.option("-v", "--verbose", is_flag=True, help="Log the open/write/close flow.")
def main(
    input_path: str,
    output_path: str,
    attributes: list[Attribute],
    min_header_size: int | None,
    stack: bool,
    config_path: str | None,
    verbose: bool,
) -> None:
    """Write the array in INPUT_PATH (a .npy file) to an EDF file at
    OUTPUT_PATH.
    """
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING)
    config = SessionConfig()
    if config_path is not None:
        with open(config_path, "rb") as stream:
            try:
                config = SessionConfig.model_validate_json(stream.read())
            except pydantic.ValidationError as err:
                raise click.ClickException(f"Invalid config {config_path!r}:\n{err}") from None
    array = np.load(input_path)
    if stack:
        if array.ndim < 2 or len(array) == 0:
            raise click.UsageError("--stack requires a non-empty input with at least two dimensions.")
        frames = [Frame(a, attributes) for a in array]
        config = config.model_copy(update={"multi_frame": True, "num_capture": len(frames)})
    else:
        frames = [Frame(array, attributes)]
    if min_header_size is not None:
        config = config.model_copy(update={"minimum_header_size": min_header_size})
    try:
        n = write_frames(output_path, IterableFrameSource(frames), config)
    except FrameFileError as err:
        raise click.ClickException(str(err)) from err
    click.echo(f"Wrote {n} frame(s) to {output_path}.")


if __name__ == "__main__":
    main()
