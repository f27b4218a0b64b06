"""Deterministic classification of git fetch failures for diagnostics."""

from __future__ import annotations

from dataclasses import dataclass

from git_auto_fetch.sync.models import FetchFailureClass

FETCH_FAILURE_CLASSIFIER_VERSION = 1

_AUTH_PATTERNS: tuple[str, ...] = (
    "authentication failed",
    "permission denied",
    "could not read username",
    "could not read password",
    "access denied",
    "returned error: 403",
    "returned error: 401",
    "host key verification failed",
)
_UNKNOWN_REF_PATTERNS: tuple[str, ...] = (
    "couldn't find remote ref",
    "could not find remote ref",
    "invalid refspec",
    "not our ref",
)
_PROTOCOL_PATTERNS: tuple[str, ...] = (
    "does not appear to be a git repository",
    "repository not found",
    "protocol error",
    "unsupported protocol",
    "transport '",
    "unexpected disconnect",
    "early eof",
    "the remote end hung up",
)
_NETWORK_PATTERNS: tuple[str, ...] = (
    "could not resolve host",
    "connection refused",
    "connection timed out",
    "connection reset",
    "network is unreachable",
    "operation timed out",
    "failed to connect",
    "temporary failure in name resolution",
)


@dataclass(slots=True)
class FetchFailureClassification:
    """Normalized fetch failure classification result."""

    failure_class: FetchFailureClass
    matched_rule: str
    matched_pattern: str | None


def classify_fetch_failure(cause: str) -> FetchFailureClassification:
    """Classify git's fetch error text; first matching rule wins."""

    haystack = cause.lower()

    for failure_class, rule, patterns in (
        (FetchFailureClass.AUTH, "auth", _AUTH_PATTERNS),
        (FetchFailureClass.UNKNOWN_REF, "unknown_ref", _UNKNOWN_REF_PATTERNS),
        (FetchFailureClass.PROTOCOL, "protocol", _PROTOCOL_PATTERNS),
        (FetchFailureClass.NETWORK, "network", _NETWORK_PATTERNS),
    ):
        pattern = _first_match(haystack, patterns)
        if pattern is not None:
            return FetchFailureClassification(
                failure_class=failure_class,
                matched_rule=rule,
                matched_pattern=pattern,
            )

    return FetchFailureClassification(
        failure_class=FetchFailureClass.UNKNOWN,
        matched_rule="fallback_unknown",
        matched_pattern=None,
    )


def _first_match(haystack: str, patterns: tuple[str, ...]) -> str | None:
    for pattern in patterns:
        if pattern in haystack:
            return pattern
    return None
