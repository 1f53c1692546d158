"""The Alice/Bob fixture files and the script that writes them."""

from __future__ import annotations

import logging
import runpy
from pathlib import Path

import pytest

import sequencefile
from sequencefile import (FIXTURE_RECORDS, CodecUnavailableError, Compression,
                          SequenceFileError, SequenceFileWriter, generate,
                          generate_all, open_reader)
from sequencefile.const import BYTES_WRITABLE, BZIP2_CODEC
from sequencefile.fixtures import fixture_name
from tests.conftest import codec_params

SCRIPT = Path(sequencefile.__file__).parent / "examples" / "gen_fixtures.py"
EXPECTED = [(b"Alice", b"Practice"), (b"Bob", b"Hope")]


# ===========================================================================
# generate()
# ===========================================================================


class TestGenerate:
    @pytest.mark.parametrize("granularity", [Compression.RECORD, Compression.BLOCK])
    def test_reads_back(self, tmp_path, granularity) -> None:
        path = generate(tmp_path / "out.bin", granularity)
        assert path.stat().st_size > 0
        with open_reader(path) as reader:
            assert reader.header.compression is granularity
            assert reader.header.codec_class_name == BZIP2_CODEC
            assert reader.header.key_class == BYTES_WRITABLE
            assert reader.header.value_class == BYTES_WRITABLE
            assert list(reader) == EXPECTED

    def test_granularity_by_name(self, tmp_path) -> None:
        path = generate(tmp_path / "out.bin", "block")
        assert open_reader(path).compression is Compression.BLOCK

    @pytest.mark.parametrize("codec", codec_params())
    def test_other_codecs(self, tmp_path, codec) -> None:
        path = generate(tmp_path / "out.bin", "record", codec=codec)
        assert list(open_reader(path)) == EXPECTED

    def test_record_and_block_agree(self, tmp_path) -> None:
        record = generate(tmp_path / "out_record.bin", Compression.RECORD)
        block = generate(tmp_path / "out_block.bin", Compression.BLOCK)
        assert record.read_bytes() != block.read_bytes()
        assert list(open_reader(record)) == list(open_reader(block))

    def test_overwrites(self, tmp_path) -> None:
        target = tmp_path / "out.bin"
        target.write_bytes(b"stale" * 1000)
        generate(target, "record")
        assert list(open_reader(target)) == EXPECTED

    def test_fixed_records(self) -> None:
        assert list(FIXTURE_RECORDS) == EXPECTED


class TestFailures:
    def test_missing_parent(self, tmp_path) -> None:
        target = tmp_path / "nope" / "out.bin"
        with pytest.raises(SequenceFileError):
            generate(target, "record")
        assert not target.exists()

    def test_unknown_codec(self, tmp_path) -> None:
        target = tmp_path / "out.bin"
        with pytest.raises(CodecUnavailableError):
            generate(target, "block", codec="brotli")
        assert not target.exists()

    def test_failed_header_removes_partial_file(self, tmp_path, monkeypatch) -> None:
        def boom(self, data):
            raise SequenceFileError("disk full")

        monkeypatch.setattr(SequenceFileWriter, "_write", boom)
        target = tmp_path / "out.bin"
        with pytest.raises(SequenceFileError, match="disk full"):
            generate(target, "record")
        assert not target.exists()

    def test_failed_append_removes_partial_file(self, tmp_path, monkeypatch) -> None:
        def boom(self, key, value):
            raise SequenceFileError("disk full")

        monkeypatch.setattr(SequenceFileWriter, "append", boom)
        target = tmp_path / "out.bin"
        with pytest.raises(SequenceFileError, match="disk full"):
            generate(target, "record")
        assert not target.exists()


# ===========================================================================
# generate_all() and the script
# ===========================================================================


class TestGenerateAll:
    def test_names(self) -> None:
        assert fixture_name("record") == "record_compressed_bzip2.sequencefile"
        assert fixture_name(Compression.BLOCK, "org.apache.hadoop.io.compress.GzipCodec") \
            == "block_compressed_gzip.sequencefile"

    def test_writes_both(self, tmp_path) -> None:
        record, block = generate_all(tmp_path)
        assert record == tmp_path / "record_compressed_bzip2.sequencefile"
        assert block == tmp_path / "block_compressed_bzip2.sequencefile"
        assert open_reader(record).compression is Compression.RECORD
        assert open_reader(block).compression is Compression.BLOCK
        for path in (record, block):
            assert list(open_reader(path)) == EXPECTED


class TestScript:
    def _main(self):
        return runpy.run_path(str(SCRIPT))["main"]

    def test_writes_files(self, tmp_path, capsys) -> None:
        paths = self._main()(["--out-dir", str(tmp_path), "--codec", "zlib"])
        assert [p.name for p in paths] == [
            "record_compressed_zlib.sequencefile",
            "block_compressed_zlib.sequencefile",
        ]
        out = capsys.readouterr().out
        assert out.count("⋄ wrote") == 2
        for path in paths:
            assert list(open_reader(path)) == EXPECTED

    def test_environment_defaults(self, tmp_path, monkeypatch) -> None:
        monkeypatch.setenv("SEQFILE_OUT_DIR", str(tmp_path))
        monkeypatch.setenv("SEQFILE_CODEC", "zstd")
        paths = self._main()([])
        assert paths[0] == tmp_path / "record_compressed_zstd.sequencefile"

    def test_bad_log_level_falls_back(self, tmp_path, monkeypatch) -> None:
        seen = {}
        monkeypatch.setattr(logging, "basicConfig", lambda **kw: seen.update(kw))
        monkeypatch.setenv("SEQFILE_LOG_LEVEL", "chatty")
        self._main()(["--out-dir", str(tmp_path)])
        assert seen["level"] == logging.WARNING

    def test_log_level_from_environment(self, tmp_path, monkeypatch) -> None:
        seen = {}
        monkeypatch.setattr(logging, "basicConfig", lambda **kw: seen.update(kw))
        monkeypatch.setenv("SEQFILE_LOG_LEVEL", "info")
        self._main()(["--out-dir", str(tmp_path)])
        assert seen["level"] == logging.INFO

    def test_missing_directory_exits_nonzero(self, tmp_path, capsys) -> None:
        with pytest.raises(SystemExit) as exc:
            self._main()(["--out-dir", str(tmp_path / "nope")])
        assert exc.value.code == 1
        assert "gen_fixtures:" in capsys.readouterr().err
