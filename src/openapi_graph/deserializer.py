"""Entry point: turn an OpenAPI 3.1 document into a resolved Document graph.

Usage::

    from openapi_graph.deserializer import deserialize

    with open("petstore.json", "rb") as stream:
        result = deserialize(stream, strict=False)
    for diagnostic in result.diagnostics:
        print(diagnostic)
    document = result.document
"""

import asyncio
import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import IO, Any

from openapi_graph.diagnostics import Diagnostics
from openapi_graph.loader import load_path, load_stream, load_text
from openapi_graph.model.document import Document
from openapi_graph.options import ReaderOptions, RefSiblingPolicy
from openapi_graph.parser.context import DeserializationContext
from openapi_graph.parser.document import parse_document

logger = logging.getLogger("openapi_graph.deserializer")


@dataclass
class DeserializationResult:
    """The Document together with everything noticed while reading it."""

    document: Document
    diagnostics: Diagnostics

    @property
    def success(self) -> bool:
        return not self.diagnostics.has_errors


class Deserializer:
    """Reads documents with a fixed set of options.

    Each call builds its own context and graph; nothing is shared between
    calls.
    """

    def __init__(self, options: ReaderOptions | None = None):
        self.options = options or ReaderOptions()

    def deserialize(self, stream: IO) -> DeserializationResult:
        return self.deserialize_tree(load_stream(stream))

    def deserialize_text(self, text: str) -> DeserializationResult:
        return self.deserialize_tree(load_text(text))

    def deserialize_path(self, file_path: Path) -> DeserializationResult:
        return self.deserialize_tree(load_path(file_path))

    def deserialize_tree(self, tree: Any) -> DeserializationResult:
        """Deserialize an already parsed JSON tree.

        Raises:
            MissingRequiredPropertyError: strict mode, a REQUIRED property is absent.
            UnsupportedRootShapeError: strict mode, the root is not a JSON object.
        """
        started = time.perf_counter()
        context = DeserializationContext(self.options)
        document = parse_document(tree, context)
        logger.debug(
            "Deserialized document in %.1f ms (%d references, %d diagnostics)",
            (time.perf_counter() - started) * 1000,
            len(context.slots),
            len(context.diagnostics),
        )
        return DeserializationResult(document=document, diagnostics=context.diagnostics)


def deserialize(
    stream: IO,
    strict: bool = True,
    ref_siblings: RefSiblingPolicy = RefSiblingPolicy.IGNORE,
) -> DeserializationResult:
    """Read one document from a binary or text stream."""
    options = ReaderOptions(strict=strict, ref_siblings=ref_siblings)
    return Deserializer(options).deserialize(stream)


async def deserialize_async(
    stream: IO,
    strict: bool = True,
    ref_siblings: RefSiblingPolicy = RefSiblingPolicy.IGNORE,
) -> DeserializationResult:
    """Run deserialize() in a worker thread."""
    return await asyncio.to_thread(deserialize, stream, strict, ref_siblings)
