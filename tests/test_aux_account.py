"""Tests for auxiliary account code derivation."""

import pytest

from clinicbooks.domain.aux_account import (
    CLIENT_PREFIX,
    PROVIDER_PREFIX,
    _to_int32,
    client_account,
    derive_aux_account,
    name_hash,
    provider_account,
)


def test_same_name_same_code():
    """Repeated calls give the same code."""
    first = derive_aux_account("Juan Pérez", "430")
    second = derive_aux_account("Juan Pérez", "430")
    assert first == second


def test_empty_name_gives_zero_suffix():
    assert derive_aux_account("", "410") == "41000000"
    assert derive_aux_account(None, "430") == "43000000"
    assert derive_aux_account("   ", "430") == "43000000"


@pytest.mark.parametrize(
    "name,prefix",
    [
        ("Juan Pérez", "430"),
        ("Ana Ruiz", "430"),
        ("Lab XY", "410"),
        ("Depósito Dental Sociedad Limitada de Suministros Sanitarios", "410"),
        ("李小龙", "430"),
    ],
)
def test_code_format(name, prefix):
    """Codes are the prefix plus five digits."""
    code = derive_aux_account(name, prefix)
    assert len(code) == 8
    assert code.startswith(prefix)
    assert code[3:].isdigit()


def test_case_and_surrounding_spaces_ignored():
    assert derive_aux_account("  ana ruiz ", "430") == derive_aux_account("ANA RUIZ", "430")


def test_known_short_names():
    """Hand-computed values of the rolling hash."""
    # "A" -> 65 -> "65" padded to "65000"
    assert derive_aux_account("a", "430") == "43065000"
    # "AB" -> 66 + (65 * 32 - 65) = 2081
    assert name_hash("AB") == 2081
    assert derive_aux_account("ab", "430") == "43020810"


def test_prefix_only_changes_prefix():
    client = derive_aux_account("Clínica Norte", CLIENT_PREFIX)
    provider = derive_aux_account("Clínica Norte", PROVIDER_PREFIX)
    assert client[3:] == provider[3:]
    assert client_account("Clínica Norte") == client
    assert provider_account("Clínica Norte") == provider


def test_to_int32_wraps():
    assert _to_int32(2**31 - 1) == 2**31 - 1
    assert _to_int32(2**31) == -(2**31)
    assert _to_int32(2**32 + 5) == 5
    assert _to_int32(-1) == -1


@pytest.mark.parametrize(
    "name,code",
    [
        ("Juan Pérez", "43061464"),
        ("Ana Ruiz", "43028266"),
        ("Lab XY", "43020571"),
        ("Z" * 12, "43088020"),
        ("Depósito Dental Sociedad Limitada de Suministros Sanitarios", "43081306"),
        ("straße müller", "43077009"),
        ("😀 Emoji Clínica", "43036337"),
    ],
)
def test_codes_issued_historically(name, code):
    """Long names overflow 32 bits; only the shift wraps."""
    assert client_account(name) == code


def test_collisions_are_not_resolved():
    """Accepted risk: distinct names can share one auxiliary account."""
    # chr(20810) hashes to 20810, "AB" to 2081; both give suffix "20810"
    assert derive_aux_account(chr(20810), "430") == derive_aux_account("AB", "430")
