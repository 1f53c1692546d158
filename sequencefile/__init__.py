from .compression import CODECS, Codec, get_codec
from .errors import (CodecUnavailableError, CorruptFileError, SequenceFileError,
                     UnsupportedWritableError, WriterStateError)
from .fixtures import FIXTURE_RECORDS, generate, generate_all
from .header import Compression, Header
from .reader import SequenceFileReader, open_reader
from .writer import SequenceFileWriter, open_writer

__all__ = [
    "CODECS", "Codec", "get_codec",
    "SequenceFileError", "CorruptFileError", "CodecUnavailableError",
    "WriterStateError", "UnsupportedWritableError",
    "FIXTURE_RECORDS", "generate", "generate_all",
    "Compression", "Header",
    "SequenceFileReader", "open_reader",
    "SequenceFileWriter", "open_writer",
]
