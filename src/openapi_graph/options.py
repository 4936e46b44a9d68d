"""Reader configuration."""

from enum import Enum

from pydantic import BaseModel


class RefSiblingPolicy(str, Enum):
    """How keywords next to ``$ref`` inside a schema are treated.

    IGNORE: the schema becomes a bare reference and its siblings are dropped.
    MERGE: the siblings are kept on an ObjectSchema whose ``ref`` slot holds
    the reference (JSON Schema 2020-12 semantics).
    """

    IGNORE = "ignore"
    MERGE = "merge"


class ReaderOptions(BaseModel):
    """Options controlling a single deserialization run."""

    strict: bool = True
    ref_siblings: RefSiblingPolicy = RefSiblingPolicy.IGNORE
