import base64

import pytest

from src.nursery_attendance.nursery_attendance.core.exceptions import ChildNotFoundOrInactive, InvalidCodeFormat
from src.nursery_attendance.nursery_attendance.scans.codes import CodeResolver, ScanCodeParser, xor_with_key


def secure_payload(text, key="LPRDS_SECURE_KEY_2024", prefix="LPRDS:"):
    return prefix + base64.b64encode(xor_with_key(text.encode("latin-1"), key)).decode("ascii")


def test_parse_prefixed_code_returns_token():
    assert ScanCodeParser().parse("  LPRDS-001 ").code_qr_id == "001"


def test_parse_custom_prefix():
    parser = ScanCodeParser(prefix="KID:")
    assert parser.parse("KID:A7B").code_qr_id == "A7B"
    assert parser.payload_for("A7B") == "KID:A7B"


@pytest.mark.parametrize("raw", ["", "   ", None])
def test_parse_rejects_empty(raw):
    with pytest.raises(InvalidCodeFormat):
        ScanCodeParser().parse(raw)


@pytest.mark.parametrize("raw", ["001", "XYZ-001", "lprds-001", "[1, 2]"])
def test_parse_rejects_unknown_format(raw):
    with pytest.raises(InvalidCodeFormat):
        ScanCodeParser().parse(raw)


@pytest.mark.parametrize("raw", ["LPRDS-", "LPRDS-00 1", "LPRDS-00?"])
def test_parse_rejects_unreadable_token(raw):
    with pytest.raises(InvalidCodeFormat):
        ScanCodeParser().parse(raw)


def test_parse_legacy_json_payload_is_normalised():
    parser = ScanCodeParser()
    assert parser.parse('{"code": "ab-12"}').code_qr_id == "AB12"
    assert parser.parse('{"code_qr_id": "abcdefgh"}').code_qr_id == "ABCDE"


def test_parse_legacy_json_without_code_is_rejected():
    with pytest.raises(InvalidCodeFormat):
        ScanCodeParser().parse('{"name": "Lina"}')


def test_parse_secure_badge_carries_child_id():
    ref = ScanCodeParser().parse(secure_payload("1:2026-03-02"))
    assert ref.child_id == 1
    assert ref.code_qr_id is None


def test_parse_secure_badge_without_suffix():
    assert ScanCodeParser().parse(secure_payload("42")).child_id == 42


@pytest.mark.parametrize(
    "raw",
    [
        "LPRDS:",
        "LPRDS:not base64!",
        "LPRDS:QUJD=",
    ],
)
def test_parse_secure_badge_rejects_undecodable_payload(raw):
    with pytest.raises(InvalidCodeFormat):
        ScanCodeParser().parse(raw)


@pytest.mark.parametrize("text", ["abc:2026-03-02", "0:x", "-3:x", ":1"])
def test_parse_secure_badge_rejects_non_numeric_id(text):
    with pytest.raises(InvalidCodeFormat):
        ScanCodeParser().parse(secure_payload(text))


def test_parse_secure_badge_uses_configured_key():
    parser = ScanCodeParser(secure_key="another-key")
    assert parser.parse(secure_payload("2:x", key="another-key")).child_id == 2
    with pytest.raises(InvalidCodeFormat):
        # wrong key decodes to garbage
        parser.parse(secure_payload("abc:x"))


def test_resolver_returns_active_child(children_repo):
    child = CodeResolver(children_repo).resolve("LPRDS-001")
    assert child.child_id == 1


def test_resolver_resolves_secure_badge(children_repo):
    child = CodeResolver(children_repo).resolve(secure_payload("1:2026-03-02"))
    assert child.child_id == 1


@pytest.mark.parametrize("text", ["6:2026-03-02", "999:2026-03-02"])
def test_resolver_rejects_secure_badge_for_inactive_or_unknown_child(children_repo, text):
    with pytest.raises(ChildNotFoundOrInactive):
        CodeResolver(children_repo).resolve(secure_payload(text))


def test_resolver_rejects_unknown_code(children_repo):
    with pytest.raises(ChildNotFoundOrInactive):
        CodeResolver(children_repo).resolve("LPRDS-999")


def test_resolver_rejects_inactive_child(children_repo):
    with pytest.raises(ChildNotFoundOrInactive):
        CodeResolver(children_repo).resolve("LPRDS-006")


def test_resolver_surfaces_format_errors_before_lookup(children_repo):
    with pytest.raises(InvalidCodeFormat):
        CodeResolver(children_repo).resolve("not a badge")
