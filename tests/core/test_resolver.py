"""Tests for PayloadTagResolver."""

from __future__ import annotations

import pytest
from cbor2 import CBORTag

from provenance_cli.codec.cbor import encode_cbor
from provenance_cli.codec.hex import encode_hex
from provenance_cli.codec.ur import UR
from provenance_cli.core import PayloadTagResolver
from provenance_cli.exceptions import (
    BothDecodeAttemptsFailedError,
    CBORDecodeError,
    ConflictingTagSourceError,
    EmptyPayloadError,
    OverrideNotApplicableError,
    TagMismatchError,
    UnknownTypeNeedsOverrideError,
    URError,
)
from provenance_cli.registry import TagRegistry

SEED_TAG = 40300
SEED_PAYLOAD = {1: b"\x00" * 16}


def _raw_ur(type_name: str, encoded: str) -> str:
    """UR text carrying exactly the given payload bytes."""
    data = bytes.fromhex(encoded)
    return UR(ur_type=type_name, cbor=None, data=data).to_string()


class TestHexPayloads:
    """Hex-encoded CBOR passes through unchanged."""

    def test_plain_hex(self, resolver: PayloadTagResolver) -> None:
        payload = resolver.resolve("6568656c6c6f")

        assert payload.value == "hello"
        assert payload.tag is None

    def test_0x_prefixed_hex(self, resolver: PayloadTagResolver) -> None:
        assert resolver.resolve("0x6568656c6c6f").hex() == "6568656c6c6f"

    def test_tagged_hex_is_not_retagged(self, resolver: PayloadTagResolver) -> None:
        raw = encode_hex(encode_cbor(CBORTag(5000, "x")))

        payload = resolver.resolve(raw)

        assert payload.value == CBORTag(5000, "x")
        assert payload.tag == 5000

    @pytest.mark.parametrize("raw", ["c24101", "d9d9f700", "c100", "d99d6ca10150" + "00" * 16])
    def test_hex_bytes_preserved(self, resolver: PayloadTagResolver, raw: str) -> None:
        # Includes tags cbor2 would otherwise turn into native values
        payload = resolver.resolve(raw)

        assert payload.hex() == raw

    @pytest.mark.parametrize(("raw", "tag"), [("c24101", 2), ("d9d9f700", 55799), ("c100", 1)])
    def test_hex_reports_outer_tag(self, resolver: PayloadTagResolver, raw: str, tag: int) -> None:
        assert resolver.resolve(raw).tag == tag

    @pytest.mark.parametrize("raw", ["1817", "a2616201616101", "9f01ff"])
    def test_non_deterministic_hex_rejected(self, resolver: PayloadTagResolver, raw: str) -> None:
        with pytest.raises(BothDecodeAttemptsFailedError) as exc_info:
            resolver.resolve(raw)

        assert isinstance(exc_info.value.hex_error, CBORDecodeError)

    def test_override_with_hex_rejected(self, resolver: PayloadTagResolver) -> None:
        with pytest.raises(OverrideNotApplicableError) as exc_info:
            resolver.resolve("6568656c6c6f", tag_override=90001)

        assert exc_info.value.tag_override == 90001


class TestRegisteredURPayloads:
    """Registered UR types take their tag from the registry."""

    def test_untagged_payload_gets_registered_tag(self, resolver: PayloadTagResolver) -> None:
        ur = UR.new("seed", SEED_PAYLOAD)

        payload = resolver.resolve(ur.to_string())

        assert payload.value == CBORTag(SEED_TAG, SEED_PAYLOAD)
        assert payload.tag == SEED_TAG
        # Tag head followed by the UR payload bytes, untouched
        assert payload.data == bytes.fromhex("d99d6c") + ur.data

    def test_already_tagged_payload_kept(self, resolver: PayloadTagResolver) -> None:
        ur = UR.new("seed", CBORTag(SEED_TAG, SEED_PAYLOAD))

        payload = resolver.resolve(ur.to_string())

        assert payload.data == ur.data

    def test_uppercase_ur(self, resolver: PayloadTagResolver) -> None:
        text = UR.new("seed", SEED_PAYLOAD).to_string().upper()

        assert resolver.resolve(text).value == CBORTag(SEED_TAG, SEED_PAYLOAD)

    @pytest.mark.parametrize("override", [SEED_TAG, 90001])
    def test_override_conflicts_with_registry(
        self, resolver: PayloadTagResolver, override: int
    ) -> None:
        # Rejected even when the override equals the registered tag
        text = UR.new("seed", SEED_PAYLOAD).to_string()

        with pytest.raises(ConflictingTagSourceError) as exc_info:
            resolver.resolve(text, tag_override=override)

        assert exc_info.value.registered_tag == SEED_TAG
        assert "known CBOR tag" in str(exc_info.value)

    def test_payload_tagged_differently_rejected(self, resolver: PayloadTagResolver) -> None:
        text = UR.new("seed", CBORTag(5000, SEED_PAYLOAD)).to_string()

        with pytest.raises(TagMismatchError) as exc_info:
            resolver.resolve(text)

        assert (exc_info.value.found, exc_info.value.expected) == (5000, SEED_TAG)

    @pytest.mark.parametrize(("encoded", "found"), [("c100", 1), ("c24101", 2), ("d9d9f700", 55799)])
    def test_natively_decoded_tag_still_checked(
        self, resolver: PayloadTagResolver, encoded: str, found: int
    ) -> None:
        with pytest.raises(TagMismatchError) as exc_info:
            resolver.resolve(_raw_ur("seed", encoded))

        assert (exc_info.value.found, exc_info.value.expected) == (found, SEED_TAG)


class TestUnregisteredURPayloads:
    """Unregistered UR types need an explicit tag override."""

    def test_missing_override_names_the_type(self, resolver: PayloadTagResolver) -> None:
        text = UR.new("my-type", "x").to_string()

        with pytest.raises(UnknownTypeNeedsOverrideError, match="my-type"):
            resolver.resolve(text)

    def test_override_applied(self, resolver: PayloadTagResolver) -> None:
        text = UR.new("my-type", "x").to_string()

        assert resolver.resolve(text, tag_override=90001).value == CBORTag(90001, "x")

    def test_override_matching_existing_tag(self, resolver: PayloadTagResolver) -> None:
        text = UR.new("my-type", CBORTag(90001, "x")).to_string()

        assert resolver.resolve(text, tag_override=90001).value == CBORTag(90001, "x")

    def test_override_mismatching_existing_tag(self, resolver: PayloadTagResolver) -> None:
        text = UR.new("my-type", CBORTag(5000, "x")).to_string()

        with pytest.raises(TagMismatchError) as exc_info:
            resolver.resolve(text, tag_override=90001)

        assert exc_info.value.found == 5000
        assert exc_info.value.expected == 90001

    def test_override_against_native_tag(self, resolver: PayloadTagResolver) -> None:
        with pytest.raises(TagMismatchError) as exc_info:
            resolver.resolve(_raw_ur("my-type", "c100"), tag_override=90001)

        assert exc_info.value.found == 1

    def test_configured_type_is_registered(self) -> None:
        registry = TagRegistry.with_defaults().extended({"my-type": 90001})
        text = UR.new("my-type", "x").to_string()

        assert PayloadTagResolver(registry).resolve(text).value == CBORTag(90001, "x")


class TestMalformedPayloads:
    @pytest.mark.parametrize("raw", ["", "   ", "\n\t"])
    def test_empty_payload(self, resolver: PayloadTagResolver, raw: str) -> None:
        with pytest.raises(EmptyPayloadError):
            resolver.resolve(raw)

    @pytest.mark.parametrize("raw", ["zz", "0xa1", "abc"])
    def test_neither_hex_nor_ur(self, resolver: PayloadTagResolver, raw: str) -> None:
        with pytest.raises(BothDecodeAttemptsFailedError) as exc_info:
            resolver.resolve(raw)

        assert exc_info.value.hex_error is not None
        assert isinstance(exc_info.value.token_error, URError)
        assert "hex" in str(exc_info.value) and "UR" in str(exc_info.value)

    def test_ur_scheme_not_retried_as_hex(self, resolver: PayloadTagResolver) -> None:
        with pytest.raises(URError):
            resolver.resolve("ur:seed/zzzz")

    def test_non_deterministic_ur_payload(self, resolver: PayloadTagResolver) -> None:
        with pytest.raises(URError, match="not valid CBOR"):
            resolver.resolve(_raw_ur("seed", "a2616201616101"))
