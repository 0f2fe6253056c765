from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable


MAX_LENGTH = 253
MAX_LABEL_LENGTH = 63

_HOSTNAME_RE = re.compile(
    r"[a-zA-Z0-9]([a-zA-Z0-9\-]{0,61}[a-zA-Z0-9])?(\.[a-zA-Z0-9]([a-zA-Z0-9\-]{0,61}[a-zA-Z0-9])?)*"
)

RESERVED_WORDS = (
    "www", "ftp", "mail", "smtp", "pop", "imap", "admin", "root",
    "administrator", "test", "dev", "development", "staging", "prod",
    "production", "localhost", "local", "internal", "private",
)

GENERIC_NAMES = ("server", "host", "machine", "computer", "node", "box")

# Evaluated in order; each match contributes its own error
PROBLEMATIC_PATTERNS = (
    (re.compile(r"^[0-9]+\Z"), "Hostname cannot contain only digits"),
    (re.compile(r"^[0-9]+-"), "Avoid starting with digits followed by a hyphen"),
    (re.compile(r"--+"), "Avoid consecutive hyphens"),
    (re.compile(r"^-"), "Hostname cannot start with a hyphen"),
    (re.compile(r"-\Z"), "Hostname cannot end with a hyphen"),
    (re.compile(r"\.\Z"), "Hostname cannot end with a dot"),
    (re.compile(r"^\."), "Hostname cannot start with a dot"),
)

MAX_SPECIFIC_LABELS = 4
MAX_SPECIFIC_LENGTH = 30


@dataclass(frozen=True)
class ValidationReport:
    is_valid: bool
    errors: tuple[str, ...]
    warnings: tuple[str, ...]
    suggestions: tuple[str, ...]


@dataclass(frozen=True)
class ValidatedHostname:
    hostname: str
    report: ValidationReport


@dataclass(frozen=True)
class DuplicateFinding:
    hostname: str
    index: int
    first_index: int
    message: str


class HostnameValidator:
    """
    Checks hostnames against RFC 1123 structure plus naming conventions.

    Structural failures (length, character set, labels, problematic patterns)
    go to `errors` and make the hostname invalid. Conventions (reserved words,
    generic or overly specific names, case, underscores, leading digits) only
    add warnings and suggestions.

    validate() never raises: every input, including non-strings, yields a report.
    """

    def validate(self, hostname: object) -> ValidationReport:
        errors: list[str] = []
        warnings: list[str] = []
        suggestions: list[str] = []

        if not hostname or not isinstance(hostname, str):
            return ValidationReport(
                is_valid=False,
                errors=("Hostname is required",),
                warnings=(),
                suggestions=(),
            )

        if not hostname.strip():
            errors.append("Hostname cannot be blank")

        if len(hostname) > MAX_LENGTH:
            errors.append(f"Hostname too long (maximum {MAX_LENGTH} characters)")

        if _HOSTNAME_RE.fullmatch(hostname) is None:
            errors.append("Invalid hostname format")

        for pattern, message in PROBLEMATIC_PATTERNS:
            if pattern.search(hostname):
                errors.append(message)

        labels = hostname.split(".")
        for label in labels:
            if len(label) > MAX_LABEL_LENGTH:
                errors.append(f'Label "{label}" too long (maximum {MAX_LABEL_LENGTH} characters)')
            if len(label) == 0:
                errors.append("Empty label found")

        first_label = labels[0]
        if first_label.lower() in RESERVED_WORDS:
            warnings.append(f'"{first_label}" is a commonly reserved word')
            suggestions.append(f'Consider adding a prefix, e.g. "my-{first_label}"')

        if self.is_too_generic(hostname):
            warnings.append("Hostname is too generic")
            suggestions.append("Consider adding more context (environment, location, etc.)")

        if self.is_too_specific(hostname):
            warnings.append("Hostname is too specific")
            suggestions.append("Consider simplifying for better readability")

        self._check_naming_conventions(hostname, warnings, suggestions)

        return ValidationReport(
            is_valid=len(errors) == 0,
            errors=tuple(errors),
            warnings=tuple(warnings),
            suggestions=tuple(suggestions),
        )

    @staticmethod
    def is_too_generic(hostname: str) -> bool:
        return hostname.lower() in GENERIC_NAMES

    @staticmethod
    def is_too_specific(hostname: str) -> bool:
        return len(hostname.split(".")) > MAX_SPECIFIC_LABELS or len(hostname) > MAX_SPECIFIC_LENGTH

    @staticmethod
    def _check_naming_conventions(hostname: str, warnings: list[str], suggestions: list[str]) -> None:
        if re.search(r"[A-Z]", hostname):
            warnings.append("Hostnames should use lowercase letters only")
            suggestions.append(f"Convert to lowercase: {hostname.lower()}")

        if "_" in hostname:
            warnings.append("Hostnames should use hyphens instead of underscores")
            suggestions.append(f"Replace underscores with hyphens: {hostname.replace('_', '-')}")

        if re.match(r"[0-9]", hostname):
            warnings.append("Avoid starting hostnames with a digit")
            suggestions.append("Add an alphabetic prefix")

    def validate_multiple(self, hostnames: Iterable[object]) -> list[ValidatedHostname]:
        return [ValidatedHostname(hostname=h, report=self.validate(h)) for h in hostnames]

    @staticmethod
    def check_duplicates(hostnames: Iterable[object]) -> list[DuplicateFinding]:
        first_seen: dict[str, int] = {}
        duplicates: list[DuplicateFinding] = []

        for index, hostname in enumerate(hostnames):
            # Non-strings are reported by validate(), not here
            if not isinstance(hostname, str):
                continue
            normalized = hostname.lower()
            if normalized in first_seen:
                duplicates.append(
                    DuplicateFinding(
                        hostname=hostname,
                        index=index,
                        first_index=first_seen[normalized],
                        message="Duplicate hostname found",
                    )
                )
            else:
                first_seen[normalized] = index

        return duplicates

    def generate_suggestions(self, hostname: str) -> list[str]:
        report = self.validate(hostname)
        suggestions: list[str] = []

        if report.warnings:
            suggestions.extend(report.suggestions)

        if not isinstance(hostname, str):
            return suggestions

        if len(hostname) > 20:
            suggestions.append("Consider abbreviating for better readability")

        if "-" not in hostname and len(hostname) > 8:
            suggestions.append("Consider using hyphens to separate words")

        return suggestions
