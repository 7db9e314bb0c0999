"""Trust record model and the on-disk ledger file shape.

On disk the ledger is a JSON object keyed by lower-case hex digest::

    {"<hex-digest>": [<bool trusted>, ["name@version", ...]], ...}

Element 0 is the trust flag, element 1 the unordered list of associated
package identities.
"""

from __future__ import annotations

from pydantic import BaseModel, Field, TypeAdapter

# Shape of the serialized ledger file, validated on every load.
LedgerFileShape = dict[str, tuple[bool, list[str]]]
LEDGER_FILE_ADAPTER: TypeAdapter[LedgerFileShape] = TypeAdapter(LedgerFileShape)


class TrustRecord(BaseModel):
    """Trust decision for one digest, shared by every package hashing to it."""

    trusted: bool = False
    associates: set[str] = Field(default_factory=set)

    @classmethod
    def default(cls) -> TrustRecord:
        """The record a never-seen digest starts from: untrusted, no associates."""
        return cls(trusted=False, associates=set())

    def to_wire(self) -> tuple[bool, list[str]]:
        return (self.trusted, sorted(self.associates))

    @classmethod
    def from_wire(cls, value: tuple[bool, list[str]]) -> TrustRecord:
        trusted, associates = value
        return cls(trusted=trusted, associates=set(associates))
