import pytest

from registry_api.validation import (
    canonical_crate_name,
    is_newer_version,
    license_problem,
    url_problem,
    valid_crate_name,
    valid_feature_name,
    valid_keyword,
    valid_version_req,
)


def test_canonical_crate_name():
    assert canonical_crate_name("Foo-Bar") == "foo_bar"
    assert canonical_crate_name("foo_bar") == canonical_crate_name("FOO-BAR")


@pytest.mark.parametrize("name", ["foo", "foo-bar", "foo_bar", "Foo9"])
def test_valid_crate_names(name):
    assert valid_crate_name(name)


@pytest.mark.parametrize("name", ["", "9foo", "-foo", "foo bar", "föo", "foo.bar"])
def test_invalid_crate_names(name):
    assert not valid_crate_name(name)


def test_feature_names():
    assert valid_feature_name("std")
    assert valid_feature_name("serde/derive")
    assert not valid_feature_name("a/b/c")
    assert not valid_feature_name("has space")
    assert not valid_feature_name("")


def test_keywords():
    assert valid_keyword("cli")
    assert valid_keyword("c++")
    assert valid_keyword("x" * 20)
    assert not valid_keyword("x" * 21)
    assert not valid_keyword("_leading")
    assert not valid_keyword("")


@pytest.mark.parametrize("req", ["1", "^1.2", "~1.2.3", ">= 1.0, < 2", "=1.0.0-beta.1", "1.*", "*"])
def test_valid_version_reqs(req):
    assert valid_version_req(req)


@pytest.mark.parametrize("req", ["", "latest", ">=", "1.0.0.0", "^"])
def test_invalid_version_reqs(req):
    assert not valid_version_req(req)


def test_is_newer_version_uses_semver_precedence():
    assert is_newer_version("1.0.0", "0.0.0")
    assert is_newer_version("1.10.0", "1.9.0")
    assert is_newer_version("1.0.0", "1.0.0-rc.1")
    assert not is_newer_version("1.0.0-rc.1", "1.0.0")
    assert not is_newer_version("1.0.0", "1.0.0")


def test_url_problem():
    assert url_problem("homepage", None) is None
    assert url_problem("homepage", "https://example.com") is None
    assert url_problem("homepage", "example.com") == "`homepage` is not a valid url: `example.com`"
    assert url_problem("repository", "git://example.com/x") == "`repository` has an invalid url scheme: `git`"


@pytest.mark.parametrize(
    "value",
    ["MIT", "MIT/Apache-2.0", "MIT OR Apache-2.0", "(MIT OR Apache-2.0) AND Zlib", "GPL-3.0-or-later"],
)
def test_accepted_licenses(value):
    assert license_problem(value) is None


@pytest.mark.parametrize("value", ["Proprietary", "MIT OR", "(MIT", "MIT Apache-2.0"])
def test_rejected_licenses(value):
    assert license_problem(value) is not None
