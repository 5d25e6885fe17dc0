"""Shared fixtures: registries, sample marks, and envelope builders."""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, timedelta, timezone
from typing import Any

import pytest

from provenance_cli.codec.cbor import encode_cbor
from provenance_cli.config import Registries
from provenance_cli.core import ArtifactExtractor, PayloadTagResolver
from provenance_cli.envelope import Envelope, KnownValueEnvelope, Leaf
from provenance_cli.mark import ProvenanceRecord, Resolution
from provenance_cli.registry import KnownValueRegistry, TagRegistry

# Known value for the `provenance` predicate in the default registry
PROVENANCE_KV = 64
# Known value for `signed`, used for wrapper-layer signatures
SIGNED_KV = 3

GENESIS_DATE = datetime(2023, 6, 20, tzinfo=timezone.utc)


@pytest.fixture
def registries() -> Registries:
    """Built-in registries."""
    return Registries(
        tags=TagRegistry.with_defaults(),
        known_values=KnownValueRegistry.with_defaults(),
    )


@pytest.fixture
def resolver(registries: Registries) -> PayloadTagResolver:
    return PayloadTagResolver(registries.tags)


@pytest.fixture
def extractor(registries: Registries) -> ArtifactExtractor:
    return ArtifactExtractor(registries.known_values)


@pytest.fixture
def make_record() -> Callable[..., ProvenanceRecord]:
    """Factory for low-resolution marks with deterministic fields."""

    def _make(
        seq: int = 0,
        chain: int = 1,
        info: Any = None,
    ) -> ProvenanceRecord:
        chain_id = bytes([chain]) * 4
        return ProvenanceRecord(
            resolution=Resolution.LOW,
            key=chain_id if seq == 0 else bytes([seq % 256]) * 4,
            hash=bytes([(seq + 100) % 256, chain, 0xAB, 0xCD]),
            chain_id=chain_id,
            seq=seq,
            date=GENESIS_DATE + timedelta(days=seq),
            info_bytes=encode_cbor(info) if info is not None else b"",
        )

    return _make


@pytest.fixture
def document_with_mark() -> Callable[[ProvenanceRecord], Envelope]:
    """Factory for an unwrapped document carrying one provenance assertion."""

    def _make(record: ProvenanceRecord) -> Envelope:
        return Leaf("XID document").add_assertion(
            KnownValueEnvelope(PROVENANCE_KV), record.to_envelope()
        )

    return _make


@pytest.fixture
def wrap_layers() -> Callable[[Envelope, int], Envelope]:
    """Factory wrapping a document N times, signing each layer."""

    def _wrap(document: Envelope, layers: int) -> Envelope:
        current = document
        for i in range(layers):
            current = current.wrap().add_assertion(
                KnownValueEnvelope(SIGNED_KV), Leaf(f"signature-{i}")
            )
        return current

    return _wrap


# Marks produced by the reference mark tooling. The direct mark and the
# envelope assertion carry the same quartile mark (seq 1); the signed XID
# document carries a high-resolution genesis mark.


@pytest.fixture
def direct_mark_ur() -> str:
    return (
        "ur:provenance/lfaohdftlrcydyoxwfwkolcnnswdzstyimctlyteehynhkckjynysthkdestnlutfmbshppmgm"
        "lsnesggltpspqzpfeemehlssgturbtkkfgtavawnwpfmkbkginlyisecvt"
    )


@pytest.fixture
def envelope_mark_ur() -> str:
    return (
        "ur:envelope/lftpsojnghihjkjycxfejtkoihjzjljoihoycsfztpsotngdgmgwhflfaohdftlrcydyoxwfwkol"
        "cnnswdzstyimctlyteehynhkckjynysthkdestnlutfmbshppmgmlsnesggltpspqzpfeemehlssgturbtkkfg"
        "tavawnwpfmkbkginjzkehgyt"
    )


@pytest.fixture
def xid_mark_ur() -> str:
    return (
        "ur:xid/tpsplstpsotanshdhdcxwsnyfhfdsgrtvyveptftfggdoeaaknldwmbyprvawebztkbyurinvlnltihf"
        "knbeoycsfzlftpsotngdgmgwhflfaxhdimbkfyndgyplolpkosdtbkcmdadyamincymdwnbsfrloglasmhwkry"
        "lkpklthttdzeecjtztjkvynnfsgadrhebdzswlinttsovtbdynrnotenzsflwzhlhfsrkewsehhkhhbnaseydt"
        "bkgavdienloemhgackbsesnsdpceghbachlyjpgafzdngronpabkheftfxhgeyrtdpnbgsmshglfoycsfylntp"
        "sohdcxbkfyndgyplolpkosdtbkcmdadyamincymdwnbsfrloglasmhwkrylkpklthttdzeoytpsoiajpihjktp"
        "soaxoyadtpsojyjojpjlkoihjthsjtiaihdpioihjtihjphsjyjljpoytpsoisjtihksjydpjkihjstpsoadoy"
        "tpsoinjpjtiodpjkjyhsjyihtpsohdcxiozeaaynkihyayjldaihcpwmolbdlapdlofhpfhlonuyaoktbbemca"
        "jtstjynelnoytpsoiejkihihietpsohdcxdlwzfnkkeylnuyrtbyqdsgytbtnlcskkylghclndehammekpaskb"
        "jsgyndahldjyoybstpsotansgmhdcxtojzpkgrtpoxseflttuyhpeemtttaakkjpcmieksdkiasnzsswiokgsg"
        "mujstedmoyaylstpsotansgylftanshfhdcxfwkeryktoncxzmaamnfgtpdybkwywlcywdrnvtceadlgtandmu"
        "ahjnrezsuyaatotansgrhdcxssaakgiojebwdnolpdnswtsfzsrszsbtuepmlsdifeckckfdstlgbttersglwm"
        "bdoycsfncsfglfoycsfptpsotansgtlftansgohdcxcpvlsnwdrefscshyjemoltwydmvlmsskhtbgkbuecnpy"
        "dsetttcamnfzmhoewepftansgehdcxdppsgaatpedsbzpllurtndhtmkmssnsfwkflytascsaeroaomkwzfwol"
        "glkghdweoybstpsotansgmhdcxftwecetnptptnydmoylokiwzteckleolbtaoftmsjlhdrtlffpdmtdmsjegl"
        "wtluwysfcnsr"
    )
