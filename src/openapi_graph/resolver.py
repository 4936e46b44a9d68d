"""Reference index and resolver.

Resolution runs after the whole document has been deserialized:

1. ReferenceIndex maps every ``#/components/<collection>/<name>`` pointer to
   the entity stored there.
2. ReferenceResolver visits every registered slot once, in the order the
   placeholders were created, and replaces the placeholder with the indexed
   entity.

Because slots are rewritten with direct links and resolved targets are never
walked again, self- and mutually-referencing schemas turn into cyclic object
graphs without any risk of unbounded recursion.
"""

import logging
from typing import Any

from openapi_graph import pointer
from openapi_graph.diagnostics import DiagnosticKind, Severity
from openapi_graph.exceptions import MalformedPointerError
from openapi_graph.model.document import Components, Document
from openapi_graph.model.schema import Reference
from openapi_graph.parser.context import ComponentKind, DeserializationContext, ReferenceSlot

logger = logging.getLogger("openapi_graph.resolver")


class ReferenceIndex:
    """Lookup from canonical pointer tokens to component entities."""

    def __init__(self) -> None:
        self._entries: dict[tuple[str, ...], tuple[ComponentKind, Any]] = {}

    @classmethod
    def build(cls, components: Components) -> "ReferenceIndex":
        index = cls()
        for kind in ComponentKind:
            for name, entity in getattr(components, kind.attribute).items():
                index._entries[("components", kind.value, name)] = (kind, entity)
        logger.debug("Indexed %d components", len(index))
        return index

    def lookup(self, tokens: tuple[str, ...]) -> tuple[ComponentKind, Any] | None:
        return self._entries.get(tokens)

    def __contains__(self, tokens: tuple[str, ...]) -> bool:
        return tokens in self._entries

    def __len__(self) -> int:
        return len(self._entries)


class ReferenceResolver:
    """Replaces every registered Reference placeholder with its target.

    Slots that cannot be resolved keep their Reference placeholder and an
    error diagnostic is recorded; the rest of the document is unaffected.
    """

    def __init__(self, context: DeserializationContext):
        self.context = context

    def resolve(self, document: Document) -> int:
        """Resolve all slots of the context against ``document.components``.

        Returns the number of slots that were resolved.
        """
        index = ReferenceIndex.build(document.components)
        resolved = 0
        for slot in self.context.slots:
            target = self._target(slot.reference, slot.kind, index, slot.location)
            if target is not None:
                slot.fill(target)
                resolved += 1
        logger.debug("Resolved %d of %d references", resolved, len(self.context.slots))
        return resolved

    def unresolved(self) -> list[ReferenceSlot]:
        """Slots still holding their placeholder."""
        return [slot for slot in self.context.slots if self._current(slot) is slot.reference]

    @staticmethod
    def _current(slot: ReferenceSlot) -> Any:
        if slot.key is None:
            return getattr(slot.owner, slot.field)
        return getattr(slot.owner, slot.field)[slot.key]

    def _target(self, reference: Reference, kind: ComponentKind, index: ReferenceIndex, location: str) -> Any:
        seen: set[str] = set()
        while True:
            ref = reference.ref
            if ref in seen:
                self._error(DiagnosticKind.CYCLIC_REFERENCE, f"Reference chain through '{ref}' loops back on itself", location, ref)
                return None
            seen.add(ref)

            tokens = self._parse(ref, location)
            if tokens is None:
                return None

            entry = index.lookup(tokens)
            if entry is None:
                self._error(DiagnosticKind.UNRESOLVED_REFERENCE, f"'{ref}' does not name a component", location, ref)
                return None

            target_kind, target = entry
            if target_kind != kind:
                self._error(
                    DiagnosticKind.UNRESOLVED_REFERENCE,
                    f"'{ref}' names a {target_kind.value} entry where {kind.value} is expected",
                    location,
                    ref,
                )
                return None

            if not isinstance(target, Reference):
                return target
            # the component is itself an alias for another one
            reference = target

    def _parse(self, ref: str, location: str) -> tuple[str, ...] | None:
        if pointer.is_external(ref):
            self._error(
                DiagnosticKind.UNRESOLVED_REFERENCE,
                f"'{ref}' points outside the document; external references are not supported",
                location,
                ref,
            )
            return None
        try:
            return pointer.parse_pointer(ref)
        except MalformedPointerError as e:
            self._error(DiagnosticKind.MALFORMED_POINTER, e.message, location, ref)
            return None

    def _error(self, kind: DiagnosticKind, message: str, location: str, ref: str) -> None:
        self.context.diagnostics.add(kind, message, location, severity=Severity.ERROR, pointer=ref)
