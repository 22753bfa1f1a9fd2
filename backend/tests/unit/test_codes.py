"""Document code rendering, parsing and partition keys."""

import pytest

from app.core.constants import EntityType
from app.core.errors import InvalidSubTypeError, InvalidYearError, MalformedCodeError, UnknownEntityTypeError
from app.numbering import (
    SequenceKey,
    normalize_client_type,
    normalize_sub_type,
    parse_code,
    render_code,
    resolve_entity_type,
)


@pytest.mark.parametrize(
    "entity_type, sub_type, seq, expected",
    [
        ("POLICY", None, 1, "POL/2025/000001"),
        ("ENDORSEMENT", None, 12, "END/2025/000012"),
        ("CLAIM", None, 3, "CLM/2025/000003"),
        ("IMPORT_BATCH", None, 1, "IMP/2025/000001"),
        ("NOTE", "DN", 42, "DN/2025/000042"),
        ("NOTE", "credit", 7, "CN/2025/000007"),
        ("CLIENT", None, 7, "MEIBL/CL/2025/00007"),
        ("AGENT", "CORP", 3, "MEIBL/AG/2025/CORP/00003"),
        ("INSURER", None, 15, "MEIBL/IN/2025/00015"),
        ("BANK", None, 2, "MEIBL/BK/2025/00002"),
        ("SLIP", None, 9, "SLIP/2025/000009"),
    ],
)
def test_render_code(entity_type, sub_type, seq, expected):
    key = SequenceKey.build(entity_type, 2025, sub_type)
    generated = render_code(key, seq)

    assert generated.code == expected
    assert parse_code(expected) == generated


def test_sequence_wider_than_padding_is_written_in_full():
    generated = render_code(SequenceKey.build("POLICY", 2025), 1_000_000)

    assert generated.code == "POL/2025/1000000"
    assert parse_code(generated.code).seq == 1_000_000


def test_parse_with_explicit_entity_type():
    parsed = parse_code("MEIBL/AG/2024/CORP/00031", "AGENT")

    assert parsed.entity_type == EntityType.AGENT
    assert (parsed.year, parsed.sub_type, parsed.seq) == (2024, "CORP", 31)


@pytest.mark.parametrize(
    "code",
    [
        "POL/2025/00001",
        "POL/2025/000000",
        "POL/25/000001",
        "XX/2025/000001",
        "MEIBL/CL/2025/ABC/00001",
        "MEIBL/CL/2025/IND/00001",
        "",
    ],
)
def test_parse_rejects_malformed_codes(code):
    with pytest.raises(MalformedCodeError):
        parse_code(code)


class TestSubTypes:
    @pytest.mark.parametrize(
        "raw, expected",
        [("Individual", "IND"), ("individual", "IND"), ("IND", "IND"), ("Corporate", "CORP"), ("corp", "CORP")],
    )
    def test_party_aliases(self, raw, expected):
        assert normalize_sub_type("AGENT", raw) == expected
        assert normalize_client_type(raw) == expected

    @pytest.mark.parametrize("raw", [None, "", "none"])
    def test_client_type_is_optional(self, raw):
        assert normalize_client_type(raw) is None

    def test_unknown_client_type(self):
        with pytest.raises(InvalidSubTypeError):
            normalize_client_type("Partnership")

    def test_client_codes_take_no_sub_type(self):
        with pytest.raises(InvalidSubTypeError):
            normalize_sub_type("CLIENT", "IND")

    def test_agent_requires_sub_type(self):
        with pytest.raises(InvalidSubTypeError):
            normalize_sub_type("AGENT", None)

    def test_note_requires_sub_type(self):
        with pytest.raises(InvalidSubTypeError):
            normalize_sub_type("NOTE", None)

    def test_unknown_note_type(self):
        with pytest.raises(InvalidSubTypeError):
            normalize_sub_type("NOTE", "XN")

    def test_policy_takes_no_sub_type(self):
        with pytest.raises(InvalidSubTypeError):
            normalize_sub_type("POLICY", "IND")


def test_entity_type_lookup():
    assert resolve_entity_type("policy") is EntityType.POLICY
    with pytest.raises(UnknownEntityTypeError) as exc_info:
        resolve_entity_type("INVOICE")
    assert exc_info.value.http_status == 400


@pytest.mark.parametrize("year", [25, 10000, "2025"])
def test_year_must_be_four_digits(year):
    with pytest.raises(InvalidYearError):
        SequenceKey.build("POLICY", year)


def test_key_storage_uses_empty_sub_type():
    assert SequenceKey.build("POLICY", 2025).storage_sub_type == ""
    assert str(SequenceKey.build("NOTE", 2025, "dn")) == "NOTE/DN@2025"
