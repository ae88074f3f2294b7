"""Field-level rules for uploaded crate metadata."""

from __future__ import annotations

import re
from urllib.parse import urlsplit

import semver

MAX_KEYWORDS = 5
MAX_KEYWORD_LENGTH = 20
ZERO_VERSION = "0.0.0"
NON_STANDARD_LICENSE = "non-standard"

_COMPARATOR = re.compile(
    r"^(?P<op>=|>=|<=|>|<|~|\^)?\s*"
    r"(?:\*|(?P<major>\d+)(?:\.(?P<minor>\d+|\*|x|X)(?:\.(?P<patch>\d+|\*|x|X)"
    r"(?:-(?P<pre>[0-9A-Za-z.-]+))?(?:\+(?P<build>[0-9A-Za-z.-]+))?)?)?)$"
)

_LICENSE_OPERATORS = {"AND", "OR", "WITH"}

# Common SPDX identifiers; the `-only`/`-or-later` and `+` forms are accepted on top.
KNOWN_LICENSES = {
    "0BSD",
    "AFL-3.0",
    "AGPL-3.0",
    "Apache-1.1",
    "Apache-2.0",
    "Artistic-2.0",
    "BSD-2-Clause",
    "BSD-3-Clause",
    "BSD-4-Clause",
    "BSL-1.0",
    "CC-BY-4.0",
    "CC-BY-SA-4.0",
    "CC0-1.0",
    "CDDL-1.0",
    "EPL-1.0",
    "EPL-2.0",
    "EUPL-1.2",
    "GPL-2.0",
    "GPL-3.0",
    "ISC",
    "LGPL-2.0",
    "LGPL-2.1",
    "LGPL-3.0",
    "LLVM-exception",
    "MIT",
    "MIT-0",
    "MPL-1.1",
    "MPL-2.0",
    "MS-PL",
    "NCSA",
    "OFL-1.1",
    "OpenSSL",
    "PostgreSQL",
    "Python-2.0",
    "Unicode-DFS-2016",
    "Unlicense",
    "WTFPL",
    "Zlib",
    "zlib-acknowledgement",
}


def canonical_crate_name(name: str) -> str:
    """Case and separator insensitive identity of a crate name."""
    return name.lower().replace("-", "_")


def valid_crate_name(name: str) -> bool:
    if not name or not name.isascii():
        return False
    if not name[0].isalpha():
        return False
    return all(ch.isalnum() or ch in "_-" for ch in name)


def valid_feature_name(name: str) -> bool:
    parts = name.split("/")
    if len(parts) > 2:
        return False
    return all(_valid_ident(part) for part in parts)


def _valid_ident(name: str) -> bool:
    return bool(name) and name.isascii() and all(ch.isalnum() or ch in "_-" for ch in name)


def valid_keyword(keyword: str) -> bool:
    if not keyword or len(keyword) > MAX_KEYWORD_LENGTH or not keyword.isascii():
        return False
    if not keyword[0].isalnum():
        return False
    return all(ch.isalnum() or ch in "_-+" for ch in keyword)


def parse_version(value: str) -> semver.Version:
    """Parse a strict semantic version; raises ValueError on malformed input."""
    return semver.Version.parse(value.strip())


def is_newer_version(candidate: str, current: str | None) -> bool:
    """Whether `candidate` should replace `current` as a crate's max version."""
    if not current or current == ZERO_VERSION:
        return True
    try:
        current_version = parse_version(current)
    except ValueError:
        return True
    return parse_version(candidate).compare(current_version) > 0


def valid_version_req(value: str) -> bool:
    """Comma separated comparator list, e.g. `^1.2`, `>= 1.0, < 2`, `1.*` or `*`."""
    if not value or not value.strip():
        return False
    for comparator in value.split(","):
        match = _COMPARATOR.match(comparator.strip())
        if match is None:
            return False
        if match.group("op") and match.group("major") is None:
            return False
    return True


def url_problem(field: str, value: str | None) -> str | None:
    if value is None:
        return None
    parts = urlsplit(value)
    if not parts.scheme:
        return f"`{field}` is not a valid url: `{value}`"
    if parts.scheme not in {"http", "https"}:
        return f"`{field}` has an invalid url scheme: `{parts.scheme}`"
    if not parts.netloc:
        return f"`{field}` must have relative scheme data: {value}"
    return None


def _known_license_id(token: str) -> bool:
    if token.endswith("+"):
        token = token[:-1]
    for suffix in ("-only", "-or-later"):
        if token.endswith(suffix):
            token = token[: -len(suffix)]
            break
    return token in KNOWN_LICENSES


def license_problem(license_value: str) -> str | None:
    for part in license_value.split("/"):
        expression = part.strip()
        invalid = f"invalid license expression `{expression}`"
        tokens = expression.replace("(", " ( ").replace(")", " ) ").split()
        depth = 0
        expect_id = True
        for token in tokens:
            if token == "(":
                if not expect_id:
                    return invalid
                depth += 1
            elif token == ")":
                if expect_id or depth == 0:
                    return invalid
                depth -= 1
            elif token in _LICENSE_OPERATORS:
                if expect_id:
                    return invalid
                expect_id = True
            elif not expect_id:
                return invalid
            elif not _known_license_id(token):
                return (
                    f"unknown license `{expression}`, see http://opensource.org/licenses "
                    "for options, and http://spdx.org/licenses/ for their identifiers"
                )
            else:
                expect_id = False
        if depth or expect_id:
            return invalid
    return None
