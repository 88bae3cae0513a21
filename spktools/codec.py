"""Decode oracle seam.

The binary record format belongs to an external format library. The tools
only need something with a ``decode(stream)`` method: it reads one record
starting at the stream's current position and either returns it or raises.
Any exception other than OSError marks the attempted bytes as corrupt;
OSError is an I/O failure and aborts the batch.
How far the stream moved tells the scanner how many bytes the attempt
consumed.

Decoders and rules engines are plugged in by import path, e.g.
``--codec mypkg.stoatpack:StoatpackDecoder``.
"""

from __future__ import annotations

import importlib
import logging
from typing import Any, BinaryIO, Protocol, runtime_checkable

from spktools.errors import ComponentLoadError
from spktools.models import GameRecord

logger = logging.getLogger(__name__)

__all__ = ["RecordDecoder", "load_component", "load_decoder"]


@runtime_checkable
class RecordDecoder(Protocol):
    def decode(self, stream: BinaryIO) -> GameRecord:
        ...


def load_component(target: str) -> Any:
    """Resolve a ``package.module:attr`` path.

    Classes are instantiated with no arguments; any other attribute is
    returned as-is.
    """
    module_name, sep, attr = target.partition(":")
    if not sep or not module_name or not attr:
        raise ComponentLoadError(
            "Expected an import path of the form 'package.module:attr'",
            target=target,
        )

    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise ComponentLoadError(f"Cannot import {module_name}: {e}", target=target) from e

    obj: Any = module
    for part in attr.split("."):
        try:
            obj = getattr(obj, part)
        except AttributeError as e:
            raise ComponentLoadError(f"{module_name} has no attribute {attr}", target=target) from e

    if isinstance(obj, type):
        try:
            obj = obj()
        except TypeError as e:
            raise ComponentLoadError(f"Cannot instantiate {attr}: {e}", target=target) from e
    logger.debug(f"Loaded component {target} -> {type(obj).__name__}")
    return obj


def load_decoder(target: str) -> RecordDecoder:
    decoder = load_component(target)
    if not isinstance(decoder, RecordDecoder):
        raise ComponentLoadError(f"{target} does not provide decode(stream)", target=target)
    return decoder
