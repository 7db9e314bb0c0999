"""buildtrust: review third-party build hooks before they run.

Keeps a content-addressed trust ledger of review decisions in a
git-controlled archive, so a hook with identical bytes is reviewed once
no matter how many packages or versions ship it.
"""

__version__ = "0.1.0"

from buildtrust.core.trust_ledger import TrustLedger
from buildtrust.core.workflow import ReviewWorkflow

__all__ = ["TrustLedger", "ReviewWorkflow", "__version__"]
