#!/usr/bin/env python3
"""Log hygiene gate for runtime code under src/.

Fails if:
- print( is used instead of the logger
- a logger call mentions a contact-data keyword (phone, email, message
  content, raw webhook payload) without going through the redaction helpers

Contact phone numbers, e-mail addresses and message text must only reach
the logs through safe_log_context / redact_value / redact_string.

Usage:
    python scripts/gate_security_pii.py
"""

import re
import sys
from pathlib import Path

SENSITIVE_KEYWORDS = (
    "payload",
    "request.body",
    "request.json",
    "webhook",
    "phone",
    "email",
    "content",
    "sender",
)

PRINT_PATTERN = re.compile(r"\bprint\s*\(")

LOGGER_CALL_PATTERN = re.compile(
    r"logger\.(debug|info|warning|error|critical|exception)\s*\("
)

REDACTION_PATTERNS = (
    "safe_log_context",
    "redact_value",
    "redact_string",
)


def _code_part(line: str) -> str:
    return line.split("#", 1)[0]


def check_source(text: str, label: str) -> list[str]:
    """Return one error string per violation found in ``text``."""
    errors = []
    for lineno, line in enumerate(text.splitlines(), start=1):
        code = _code_part(line)
        if not code.strip():
            continue

        if PRINT_PATTERN.search(code):
            errors.append(f"{label}:{lineno}: print() not allowed in runtime code")

        if LOGGER_CALL_PATTERN.search(code):
            lowered = code.lower()
            redacted = any(pattern in code for pattern in REDACTION_PATTERNS)
            for keyword in SENSITIVE_KEYWORDS:
                if keyword in lowered and not redacted:
                    errors.append(
                        f"{label}:{lineno}: logger call with '{keyword}' "
                        "must use redaction (safe_log_context/redact_value)"
                    )
    return errors


def check_file(filepath: Path) -> list[str]:
    try:
        text = filepath.read_text(encoding="utf-8")
    except UnicodeDecodeError:
        return []
    return check_source(text, str(filepath))


def main() -> int:
    src_dir = Path("src")
    if not src_dir.exists():
        src_dir = Path(__file__).parent.parent / "src"
    if not src_dir.exists():
        sys.stderr.write("Error: src directory not found\n")
        return 1

    all_errors: list[str] = []
    for pyfile in sorted(src_dir.rglob("*.py")):
        all_errors.extend(check_file(pyfile))

    if all_errors:
        sys.stderr.write("Log hygiene gate FAILED:\n")
        for err in all_errors:
            sys.stderr.write(f"  {err}\n")
        return 1

    sys.stdout.write("Log hygiene gate PASSED\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
