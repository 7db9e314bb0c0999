"""Review workflow — drives each discovered build hook through the trust ledger.

For each hook, in provider order::

    CHECK_TRUST -> SKIP ------------------> NEXT
                -> REVIEW -> RECORD ------> NEXT
    NEXT -> CHECK_TRUST | DONE

Any failure moves the machine to ABORTED and propagates. Snapshots committed
before the failure stay in the archive; ledger changes made in memory since
the last save are lost. The ledger itself is committed at most once, after
DONE, and only when some record changed.
"""

from __future__ import annotations

import logging

from buildtrust.core.archive import VersionedArchive
from buildtrust.core.capabilities import (
    ConfirmationPrompt,
    EditorLauncher,
    MetadataProvider,
    parse_confirmation,
)
from buildtrust.core.errors import SubprocessError
from buildtrust.core.hasher import digest_file, read_hook_bytes
from buildtrust.core.review_machine import ReviewMachine
from buildtrust.core.trust_ledger import TrustLedger
from buildtrust.models.packages import BuildHook
from buildtrust.models.review import ReviewState, ReviewSummary

logger = logging.getLogger(__name__)


def snapshot_commit_message(pkg_id: str) -> str:
    return f"buildtrust: add build hook for {pkg_id}"


def confirmation_message(pkg_id: str) -> str:
    return f"Do you trust the build hook in {pkg_id}? [y/N]"


class ReviewWorkflow:
    """Reviews every build hook of a dependency tree against the trust ledger.

    Parameters
    ----------
    archive:
        The versioned archive holding the ledger and snapshots.
    provider:
        Yields the build hooks to review, in order.
    launcher:
        Opens a hook in the operator's editor.
    prompt:
        Asks the operator for the trust decision.
    """

    def __init__(
        self,
        archive: VersionedArchive,
        provider: MetadataProvider,
        launcher: EditorLauncher,
        prompt: ConfirmationPrompt,
    ) -> None:
        self._archive = archive
        self._provider = provider
        self._launcher = launcher
        self._prompt = prompt
        self.machine = ReviewMachine()
        self.ledger: TrustLedger | None = None

        self._changes = 0
        self._skipped = 0
        self._trusted = 0
        self._untrusted = 0

    # ------------------------------------------------------------------
    # Run
    # ------------------------------------------------------------------

    def run(self) -> ReviewSummary:
        """Review all hooks and persist the ledger if anything changed."""
        current: str | None = None
        try:
            logger.debug("start audit: %s", self._archive.root)
            self._archive.ensure_initialized()
            self.ledger = TrustLedger.load(self._archive)
            hooks = self._provider.build_hooks()

            for hook in hooks:
                current = hook.pkg_id
                self.machine.transition(ReviewState.CHECK_TRUST, current)
                self._process(self.ledger, hook)
                self.machine.transition(ReviewState.NEXT, current)
            current = None
            self.machine.transition(ReviewState.DONE)

            saved = False
            if self._changes > 0:
                self.ledger.save(self._archive)
                saved = True
            else:
                logger.debug("no trust changes, ledger left untouched")
        except Exception:
            self.machine.abort(current)
            raise

        return ReviewSummary(
            hooks=len(hooks),
            skipped=self._skipped,
            reviewed=self._trusted + self._untrusted,
            trusted=self._trusted,
            untrusted=self._untrusted,
            changes=self._changes,
            ledger_saved=saved,
        )

    # ------------------------------------------------------------------
    # Per-hook steps
    # ------------------------------------------------------------------

    def _process(self, ledger: TrustLedger, hook: BuildHook) -> None:
        pkg_id = hook.pkg_id
        logger.debug("build hook for %s is %s", pkg_id, hook.hook_path)
        digest = digest_file(hook.hook_path)

        if ledger.is_trusted(digest):
            self.machine.transition(ReviewState.SKIP, pkg_id)
            if ledger.record_association(digest, pkg_id):
                self._changes += 1
            self._skipped += 1
            logger.info("build hook for %s is already trusted, skipping", pkg_id)
            return

        self.machine.transition(ReviewState.REVIEW, pkg_id)
        trusted = self._review(hook)

        self.machine.transition(ReviewState.RECORD, pkg_id)
        self._archive_snapshot(hook)
        if ledger.set_trust(digest, trusted, pkg_id):
            self._changes += 1
        if trusted:
            self._trusted += 1
        else:
            self._untrusted += 1
        logger.info("build hook for %s marked %s", pkg_id, "trusted" if trusted else "untrusted")

    def _review(self, hook: BuildHook) -> bool:
        status = self._launcher.launch(hook.hook_path)
        if status != 0:
            raise SubprocessError(f"the editor exited with code {status} while reviewing {hook.pkg_id}")
        answer = self._prompt.ask(confirmation_message(hook.pkg_id))
        return parse_confirmation(answer)

    def _archive_snapshot(self, hook: BuildHook) -> None:
        """Copy the hook's current bytes into the archive and commit them.

        A package identity's snapshot is written once and never rewritten.
        When the hook bytes under an already archived identity have changed,
        the original snapshot is kept and the new decision is still recorded
        in the ledger under the new digest. Identical bytes are only
        re-staged, which covers a snapshot left uncommitted by a failed run.
        """
        name = hook.pkg_id
        data = read_hook_bytes(hook.hook_path)

        if self._archive.exists(name):
            if self._archive.read_bytes(name) != data:
                logger.warning(
                    "snapshot %s already exists with different content; keeping the original",
                    name,
                )
                return
        else:
            self._archive.write_bytes(name, data)

        self._archive.stage(name)
        if not self._archive.is_clean():
            self._archive.commit(name, snapshot_commit_message(name))
