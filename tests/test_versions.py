"""
Tests for version tags, naming forms and per-version helper dispatch.

Run with: python -m pytest tests/ -v --tb=short
"""

import pytest

from rpc_codegen.errors import UnsupportedVersionError, VersionParseError
from rpc_codegen.generators.helpers import HELPER_FAMILY_BY_MAJOR, HelperFamily, helper_family
from rpc_codegen.versions import (
    DEFAULT_VERSION,
    SUPPORTED_VERSIONS,
    SupportedMajor,
    Version,
    resolve_version,
    resolve_versions,
    supported_tags,
)


@pytest.mark.parametrize("tag,expected", [
    ("v29", Version(29, 0)),
    ("29", Version(29, 0)),
    ("v29.1", Version(29, 1)),
    ("V17", Version(17, 0)),
    (" 28.2 ", Version(28, 2)),
])
def test_parse(tag, expected):
    assert Version.parse(tag) == expected


@pytest.mark.parametrize("tag", ["", "v", "latest", "v29.1.0", "29.", "v-1"])
def test_parse_errors(tag):
    with pytest.raises(VersionParseError):
        Version.parse(tag)


def test_naming_forms():
    v = Version(29, 1)
    assert v.as_str() == "v29.1"
    assert v.as_module_name() == "v29_1"
    assert v.as_doc_version() == "29.1"
    assert v.as_number() == "29_1"
    assert v.package_version() == "29.1.0"
    assert str(v) == "v29.1"


def test_naming_forms_without_minor():
    v = Version(28)
    assert (v.as_str(), v.as_module_name(), v.as_doc_version(), v.as_number(), v.package_version()) == (
        "v28", "v28", "28", "28", "28.0.0")


def test_ordering():
    assert Version(28) < Version(28, 1) < Version(29)
    assert resolve_versions(["v29", "v28", "29"]) == [Version(28), Version(29)]


def test_registry():
    assert DEFAULT_VERSION == Version(29)
    assert SUPPORTED_VERSIONS[0] == Version(17)
    assert SUPPORTED_VERSIONS[-1] == Version(29)
    assert supported_tags()[-1] == "v29"


def test_unsupported_major():
    with pytest.raises(UnsupportedVersionError):
        resolve_version("v16")
    with pytest.raises(UnsupportedVersionError):
        Version(99).supported_major


def test_minor_versions_resolve_to_their_major():
    assert resolve_version("v29.1").supported_major is SupportedMajor.V29


def test_helper_dispatch_is_exhaustive():
    assert set(HELPER_FAMILY_BY_MAJOR) == set(SupportedMajor)


@pytest.mark.parametrize("tag,family", [
    ("v17", HelperFamily.LEGACY),
    ("v20", HelperFamily.LEGACY),
    ("v21", HelperFamily.MODERN),
    ("v29.1", HelperFamily.MODERN),
])
def test_helper_family(tag, family):
    assert helper_family(Version.parse(tag)) is family


def test_helper_family_rejects_unknown_major():
    with pytest.raises(UnsupportedVersionError):
        helper_family(Version(99))
