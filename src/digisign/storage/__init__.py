from .file_io import BytesSource, DocumentSink, DocumentSource, FileSink, FileSource, read_document
from .framing import END_SENTINEL, MAX_CANDIDATES, START_SENTINEL, build_block, frame, iter_block_candidates

__all__ = [
    "BytesSource",
    "DocumentSink",
    "DocumentSource",
    "END_SENTINEL",
    "FileSink",
    "FileSource",
    "MAX_CANDIDATES",
    "START_SENTINEL",
    "build_block",
    "frame",
    "iter_block_candidates",
    "read_document",
]
