"""Content-addressed trust ledger.

Maps build hook digests to trust decisions. The ledger is loaded fresh from
the archive at the start of every run, mutated in memory, and persisted at
most once per run by the review workflow.

A digest's ``trusted`` flag is the single source of truth for every package
whose hook hashes to it.
"""

from __future__ import annotations

import json
import logging
import re
from collections.abc import Iterator

from pydantic import ValidationError

from buildtrust.core.archive import LEDGER_FILE, VersionedArchive
from buildtrust.core.errors import SerializationError
from buildtrust.models.ledger import LEDGER_FILE_ADAPTER, TrustRecord

logger = logging.getLogger(__name__)

SAVE_COMMIT_MESSAGE = "buildtrust: update trust store"

DIGEST_RE = re.compile(r"[0-9a-f]{64}")


class TrustLedger:
    """In-memory decision map ``digest -> TrustRecord``.

    Parameters
    ----------
    records:
        Initial records, keyed by lower-case hex digest.
    """

    def __init__(self, records: dict[str, TrustRecord] | None = None) -> None:
        self._records: dict[str, TrustRecord] = dict(records or {})

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    @classmethod
    def load(cls, archive: VersionedArchive) -> TrustLedger:
        """Load the ledger file from *archive*.

        Raises ``StorageIOError`` if the file is missing or unreadable and
        ``SerializationError`` if it does not parse. A broken ledger is never
        silently reset.
        """
        logger.debug("read trust store: %s", archive.root / LEDGER_FILE)
        return cls.from_json_bytes(archive.read_bytes(LEDGER_FILE))

    def save(self, archive: VersionedArchive) -> None:
        """Serialize to the archive, stage, and commit unless already clean."""
        logger.debug("save trust store: %s", archive.root / LEDGER_FILE)
        archive.write_bytes(LEDGER_FILE, self.to_json_bytes())
        archive.stage(LEDGER_FILE)
        if not archive.is_clean():
            archive.commit(LEDGER_FILE, SAVE_COMMIT_MESSAGE)

    @classmethod
    def from_json_bytes(cls, data: bytes) -> TrustLedger:
        try:
            raw = LEDGER_FILE_ADAPTER.validate_json(data)
        except ValidationError as exc:
            raise SerializationError(f"failed to parse trust store: {exc}") from exc
        records: dict[str, TrustRecord] = {}
        for key, value in raw.items():
            digest = key.lower()
            if not DIGEST_RE.fullmatch(digest):
                raise SerializationError(f"invalid digest key in trust store: {key!r}")
            if digest in records:
                raise SerializationError(f"duplicate digest in trust store: {digest}")
            records[digest] = TrustRecord.from_wire(value)
        return cls(records)

    def to_json_bytes(self) -> bytes:
        """Canonical form: sorted digests, sorted associates, 2-space indent."""
        wire = {digest: list(record.to_wire()) for digest, record in self._records.items()}
        return (json.dumps(wire, sort_keys=True, indent=2) + "\n").encode("utf-8")

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def is_trusted(self, digest: str) -> bool:
        """Return the trust flag for *digest*; ``False`` for never-seen digests."""
        record = self._records.get(digest)
        return record.trusted if record is not None else False

    def get(self, digest: str) -> TrustRecord | None:
        record = self._records.get(digest)
        return record.model_copy(deep=True) if record is not None else None

    def packages_for(self, digest: str) -> set[str]:
        record = self._records.get(digest)
        return set(record.associates) if record is not None else set()

    def digests(self) -> list[str]:
        return sorted(self._records)

    def items(self) -> Iterator[tuple[str, TrustRecord]]:
        for digest in self.digests():
            yield digest, self._records[digest]

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, digest: object) -> bool:
        return digest in self._records

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TrustLedger):
            return NotImplemented
        return self._records == other._records

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def _record(self, digest: str) -> TrustRecord:
        record = self._records.get(digest)
        if record is None:
            record = TrustRecord.default()
            self._records[digest] = record
        return record

    def record_association(self, digest: str, pkg_id: str) -> bool:
        """Associate *pkg_id* with *digest*. Returns whether the set grew."""
        record = self._record(digest)
        if pkg_id in record.associates:
            return False
        record.associates.add(pkg_id)
        return True

    def set_trust(self, digest: str, trusted: bool, pkg_id: str) -> bool:
        """Set the trust flag and associate *pkg_id*.

        Returns whether the flag changed. A new digest is compared against
        the default record, so recording ``False`` for it is not a change.
        """
        record = self._record(digest)
        changed = record.trusted != trusted
        record.trusted = trusted
        record.associates.add(pkg_id)
        return changed
