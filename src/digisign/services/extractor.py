from __future__ import annotations

from typing import Optional

import structlog

from ..exceptions import ExtractionMiss
from ..models import PACKAGE_VERSION, SignaturePackage
from ..storage.framing import iter_block_candidates

logger = structlog.get_logger("digisign.extractor")


class SignatureExtractor:
    """Locate the embedded ``SignaturePackage`` in a document.

    Extraction is advisory: a missing block, malformed JSON or a package with
    an unsupported version all yield ``None``.
    """

    def __init__(self, max_version: int = PACKAGE_VERSION) -> None:
        self.max_version = max_version

    def extract(self, document: bytes) -> Optional[SignaturePackage]:
        for candidate in iter_block_candidates(document):
            try:
                package = SignaturePackage.from_json(candidate)
            # JSONDecodeError and ValidationError are ValueErrors
            except (ValueError, RecursionError, TypeError) as exc:
                logger.debug("signature_block_unparsable", error=str(exc))
                continue
            if package.version > self.max_version:
                logger.debug("signature_block_unsupported", version=package.version)
                continue
            return package
        return None

    def require(self, document: bytes) -> SignaturePackage:
        package = self.extract(document)
        if package is None:
            raise ExtractionMiss("No signature block found")
        return package


__all__ = ["SignatureExtractor"]
