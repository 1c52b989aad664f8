"""
Slice Verification
Caller-side checks that turn an evaluated slice into an accept/reject decision.

eval_root_hash_from_slice() only recomputes a root. Deciding whether that
root is the one the auditor trusts (typically taken from a previously signed
RootAnnouncement) happens here.

This module provides:
- verify_slice: raise VerificationFailureException on any mismatch
- check_slice: run the same checks and return a VerificationResult report
"""
from __future__ import annotations

import hmac
import logging
from typing import Optional, Union

from core.crypto.hashing import HashFunction, from_hex, sha256, to_hex
from core.merkle.indexing import calc_leaf_index
from core.merkle.slice_codec import ParsedSlice, parse_slice
from core.schemas.errors import (
    ErrorCodes,
    MalformedProofException,
    VerificationFailureException,
)
from core.schemas.verification import CheckResult, VerificationResult


logger = logging.getLogger(__name__)

RootLike = Union[bytes, str]


def _normalize_root(trusted_root: RootLike) -> bytes:
    if isinstance(trusted_root, str):
        try:
            return from_hex(trusted_root)
        except ValueError as e:
            raise VerificationFailureException(
                f"Trusted root is not valid hex: {e}",
                details={"trusted_root": trusted_root},
            ) from e
    return bytes(trusted_root)


def _check_root(computed: bytes, trusted: bytes) -> CheckResult:
    if hmac.compare_digest(computed, trusted):
        return CheckResult.passed("root_match", "Slice evaluates to the trusted root")
    return CheckResult.failed(
        "root_match",
        "Slice does not evaluate to the trusted root",
        details={"computed_root": to_hex(computed), "trusted_root": to_hex(trusted)},
    )


def _check_value(parsed: ParsedSlice, value: Optional[bytes]) -> CheckResult:
    if value is None:
        return CheckResult.skipped("value_present", "No value supplied")
    if any(hmac.compare_digest(v, value) for v in parsed.values):
        return CheckResult.passed("value_present", "Value is listed in the slice leaf")
    return CheckResult.failed(
        "value_present",
        "Value is not listed in the slice leaf",
        details={"value": to_hex(value)},
    )


def _check_position(
    parsed: ParsedSlice,
    key: Optional[str],
    height: Optional[int],
    hash_fn: HashFunction,
) -> CheckResult:
    if key is None or height is None:
        return CheckResult.skipped("leaf_position", "Key and height not both supplied")

    expected = calc_leaf_index(key, height, hash_fn)
    details = {"expected_leaf": expected, "slice_depth": parsed.depth}
    if parsed.depth != height - 1:
        return CheckResult.failed(
            "leaf_position",
            f"Slice depth {parsed.depth} does not match tree height {height}",
            details=details,
        )
    actual = parsed.leaf_index()
    details["slice_leaf"] = actual
    if actual != expected:
        return CheckResult.failed(
            "leaf_position",
            f"Slice proves leaf {actual} but key routes to leaf {expected}",
            details=details,
        )
    return CheckResult.passed("leaf_position", "Slice position matches key routing", details)


_FAILURE_CODES = {
    "root_match": ErrorCodes.ROOT_MISMATCH,
    "value_present": ErrorCodes.VALUE_MISSING,
    "leaf_position": ErrorCodes.LEAF_POSITION_MISMATCH,
}


def _run_checks(
    parsed: ParsedSlice,
    trusted: bytes,
    key: Optional[str],
    value: Optional[bytes],
    height: Optional[int],
    hash_fn: HashFunction,
) -> tuple[bytes, list[CheckResult]]:
    computed = parsed.root_digest(hash_fn)
    checks = [
        _check_root(computed, trusted),
        _check_value(parsed, value),
        _check_position(parsed, key, height, hash_fn),
    ]
    return computed, checks


def verify_slice(
    proof: str,
    trusted_root: RootLike,
    *,
    key: Optional[str] = None,
    value: Optional[bytes] = None,
    height: Optional[int] = None,
    hash_fn: HashFunction = sha256,
) -> bytes:
    """
    Verify a slice against a trusted root.

    Args:
        proof: Slice text
        trusted_root: Root digest the verifier already trusts (bytes or hex)
        key: If given with ``height``, the slice must sit at the key's leaf
        value: If given, must be one of the slice's leaf values
        height: Height of the tree the root belongs to
        hash_fn: Hashing capability the tree was built with

    Returns:
        The recomputed root digest

    Raises:
        MalformedProofException: If the slice does not parse
        VerificationFailureException: On the first failed check
    """
    trusted = _normalize_root(trusted_root)
    parsed = parse_slice(proof)
    computed, checks = _run_checks(parsed, trusted, key, value, height, hash_fn)

    for check in checks:
        if not check.ok:
            logger.warning(f"Slice verification failed: {check.message}")
            raise VerificationFailureException(
                check.message,
                code=_FAILURE_CODES[check.check_id],
                details=check.details,
            )

    logger.debug(f"Slice verified against root {to_hex(trusted)}")
    return computed


def check_slice(
    proof: str,
    trusted_root: RootLike,
    *,
    key: Optional[str] = None,
    value: Optional[bytes] = None,
    height: Optional[int] = None,
    hash_fn: HashFunction = sha256,
) -> VerificationResult:
    """
    Run every slice check and collect the outcome instead of raising.

    A slice that does not parse, or a trusted root that is not valid hex,
    produces a failed result carrying the error model.
    """
    try:
        trusted = _normalize_root(trusted_root)
    except VerificationFailureException as e:
        result = VerificationResult.from_error(e.to_error_model())
        result.add_check(CheckResult.failed("trusted_root", e.message))
        return result

    try:
        parsed = parse_slice(proof)
    except MalformedProofException as e:
        logger.warning(f"Slice rejected: {e.message}")
        result = VerificationResult.from_error(e.to_error_model())
        result.add_check(CheckResult.failed("slice_parse", e.message, details=e.details))
        return result

    result = VerificationResult(ok=True)
    result.add_check(
        CheckResult.passed(
            "slice_parse",
            "Slice follows the slice grammar",
            details={"depth": parsed.depth, "values": len(parsed.values)},
        )
    )

    computed, checks = _run_checks(parsed, trusted, key, value, height, hash_fn)
    result.computed_root = to_hex(computed)
    for check in checks:
        result.add_check(check)

    if not result.ok:
        logger.warning(f"Slice verification failed: {'; '.join(result.get_error_messages())}")
    return result


__all__ = [
    "RootLike",
    "verify_slice",
    "check_slice",
]
