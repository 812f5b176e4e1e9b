import pytest

from digisign.models import SignaturePackage
from digisign.services.extractor import SignatureExtractor
from digisign.services.signer import DocumentSigner
from digisign.storage.framing import frame


def _package(**overrides) -> SignaturePackage:
    values = dict(
        signature="c2ln",
        document_hash="aGFzaA==",
        original_size=3,
        username="alice",
        timestamp="2025-01-31T09:15:02.123Z",
    )
    values.update(overrides)
    return SignaturePackage(**values)


def test_extract_reads_framed_package():
    doc = frame(b"abc", _package().to_json())
    package = SignatureExtractor().extract(doc)
    assert package == _package()
    assert package.algorithm == "ECDSA-P256-SHA256"


def test_extract_is_idempotent():
    doc = frame(b"abc", _package().to_json())
    extractor = SignatureExtractor()
    assert extractor.extract(doc) == extractor.extract(doc)


@pytest.mark.parametrize(
    "document",
    [
        b"",
        b"plain document",
        b"abc\n%DigiSign-Signature-Start\n{}",
        b"abc\n%DigiSign-Signature-End\n",
        b"abc\n%DigiSign-Signature-End\n%DigiSign-Signature-Start\n",
        b"abc\n%DigiSign-Signature-Start\n{not json\n%DigiSign-Signature-End\n",
        b"abc\n%DigiSign-Signature-Start\n[1, 2]\n%DigiSign-Signature-End\n",
        b'abc\n%DigiSign-Signature-Start\n{"username": "alice"}\n%DigiSign-Signature-End\n',
        b"abc\n%DigiSign-Signature-Start\n" + b"[" * 100_000 + b"\n%DigiSign-Signature-End\n",
        b'abc\n%DigiSign-Signature-Start\n{"originalSize": ' + b"1" * 5000 + b"}\n%DigiSign-Signature-End\n",
    ],
    ids=[
        "empty",
        "plain",
        "start-only",
        "end-only",
        "end-before-start",
        "broken-json",
        "json-array",
        "missing-fields",
        "deep-nesting",
        "oversized-integer",
    ],
)
def test_extract_returns_none_instead_of_raising(document):
    assert SignatureExtractor().extract(document) is None


def test_extract_tolerates_legacy_whitespace():
    legacy = (
        b"abc\n%DigiSign-Signature-Start\n  "
        b'{"signature": "c2ln", "documentHash": "aGFzaA==", "originalSize": 3, '
        b'"username": "alice", "timestamp": "2025-01-31T09:15:02.123Z", "algorithm": "ECDSA-P256-SHA256"}'
        b"  \n%DigiSign-Signature-End\n"
    )
    assert SignatureExtractor().extract(legacy) == _package()


def test_extract_survives_binary_content_and_sentinels_in_original():
    original = b"\x00\xff\xfe%DigiSign-Signature-Start\nnot a block\n\x80"
    doc = frame(original, _package(original_size=len(original)).to_json())
    package = SignatureExtractor().extract(doc)
    assert package is not None
    assert package.original_size == len(original)


def test_extract_survives_sentinel_in_username():
    name = "mallory%DigiSign-Signature-Start"
    doc = frame(b"abc", _package(username=name).to_json())
    assert SignatureExtractor().extract(doc).username == name


def test_extract_skips_newer_package_versions():
    doc = frame(b"abc", _package(version=2).to_json())
    assert SignatureExtractor().extract(doc) is None
    assert SignatureExtractor(max_version=2).extract(doc).version == 2


@pytest.mark.asyncio
async def test_extract_after_sign(codec, alice_keys, sample_pdf):
    signed = await DocumentSigner(codec).sign(sample_pdf, alice_keys.private_key, "alice")
    package = SignatureExtractor().extract(signed)
    assert package.original_size == len(sample_pdf)
    assert package.username == "alice"


def test_require_raises_extraction_miss():
    from digisign.exceptions import ExtractionMiss

    with pytest.raises(ExtractionMiss):
        SignatureExtractor().require(b"unsigned")


def test_candidate_scan_is_bounded():
    from digisign.storage.framing import END_SENTINEL, MAX_CANDIDATES, START_SENTINEL, iter_block_candidates

    document = (START_SENTINEL * 20_000 + "x" * 200_000 + END_SENTINEL).encode("utf-8")
    candidates = list(iter_block_candidates(document))
    assert len(candidates) == MAX_CANDIDATES
    assert SignatureExtractor().extract(document) is None


def test_sentinels_in_original_beyond_the_bound_do_not_hide_the_block():
    original = ("%DigiSign-Signature-Start\n" * 50).encode("utf-8")
    doc = frame(original, _package(original_size=len(original)).to_json())
    assert SignatureExtractor().extract(doc).original_size == len(original)
