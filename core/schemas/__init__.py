"""
Schemas for the full binary hash tree.

Exports:
- Error taxonomy (ErrorCodes, TreeError and the exception hierarchy)
- Verification result models
- Commitment payload models
"""

from .errors import (
    ErrorCodes,
    TreeError,
    HashTreeException,
    ConfigurationException,
    NotFoundException,
    MalformedProofException,
    VerificationFailureException,
    IllegalStateException,
)
from .verification import (
    CheckSeverity,
    CheckResult,
    VerificationResult,
)
from .commitment import (
    SCHEMA_VERSION,
    RootAnnouncement,
    SliceEnvelope,
    CommitmentDocument,
)

__all__ = [
    # Errors
    "ErrorCodes",
    "TreeError",
    "HashTreeException",
    "ConfigurationException",
    "NotFoundException",
    "MalformedProofException",
    "VerificationFailureException",
    "IllegalStateException",
    # Verification
    "CheckSeverity",
    "CheckResult",
    "VerificationResult",
    # Commitment
    "SCHEMA_VERSION",
    "RootAnnouncement",
    "SliceEnvelope",
    "CommitmentDocument",
]
