#!/usr/bin/env python3
# -*- coding: utf-8 -*-

import base64
import io
import json
import tempfile
import unittest
from pathlib import Path
from unittest import mock

import smazTool
from smaz.codec import compress


class SmazToolTests(unittest.TestCase):
    def setUp(self) -> None:
        self._td = tempfile.TemporaryDirectory()
        self.tmp = Path(self._td.name)
        self.cfg = str(self.tmp / "missing_config.json")

    def tearDown(self) -> None:
        self._td.cleanup()

    def _run(self, *argv: str, config: str = ""):
        stdout = io.StringIO()
        stderr = io.StringIO()
        with mock.patch("sys.stdout", stdout), mock.patch("sys.stderr", stderr):
            rc = smazTool.main(["--config", config or self.cfg, *argv])
        return rc, stdout.getvalue(), stderr.getvalue()

    def test_compress_hex(self) -> None:
        rc, out, err = self._run("compress", "the end")
        self.assertEqual(rc, 0, err)
        self.assertEqual(out.strip(), compress(b"the end").hex())

    def test_compress_b64_from_file(self) -> None:
        src = self.tmp / "in.txt"
        src.write_bytes(b"http://github.com/antirez/smaz")
        rc, out, _err = self._run("compress", "-f", str(src), "--format", "b64")
        self.assertEqual(rc, 0)
        self.assertEqual(base64.b64decode(out.strip()), compress(src.read_bytes()))

    def test_compress_raw_to_file_then_decompress(self) -> None:
        packed = self.tmp / "line.smaz"
        plain = self.tmp / "line.txt"
        rc, _out, _err = self._run("compress", "Mi illumino di immenso", "--format", "raw", "-o", str(packed))
        self.assertEqual(rc, 0)
        self.assertEqual(packed.read_bytes(), compress(b"Mi illumino di immenso"))
        rc, _out, _err = self._run("decompress", "-f", str(packed), "--format", "raw", "-o", str(plain))
        self.assertEqual(rc, 0)
        self.assertEqual(plain.read_bytes(), b"Mi illumino di immenso")

    def test_decompress_hex_argument(self) -> None:
        dest = self.tmp / "out.bin"
        hex_stream = compress(b"foobar").hex()
        rc, _out, _err = self._run("decompress", hex_stream, "-o", str(dest))
        self.assertEqual(rc, 0)
        self.assertEqual(dest.read_bytes(), b"foobar")

    def test_decompress_malformed_stream_fails(self) -> None:
        rc, _out, err = self._run("decompress", "ff05", "-o", str(self.tmp / "never.bin"))
        self.assertEqual(rc, 1)
        self.assertIn("malformed smaz stream", err)
        self.assertFalse((self.tmp / "never.bin").exists())

    def test_decompress_invalid_hex_is_usage_error(self) -> None:
        rc, _out, err = self._run("decompress", "zz", "-o", str(self.tmp / "never.bin"))
        self.assertEqual(rc, 2)
        self.assertIn("invalid hex input", err)

    def test_raw_format_needs_file(self) -> None:
        rc, _out, err = self._run("decompress", "abc", "--format", "raw")
        self.assertEqual(rc, 2)
        self.assertIn("raw format", err)

    def test_missing_input_file(self) -> None:
        rc, _out, err = self._run("compress", "-f", str(self.tmp / "nope.txt"))
        self.assertEqual(rc, 1)
        self.assertIn("error:", err)

    def test_stats_single_input(self) -> None:
        rc, out, _err = self._run("stats", "the end")
        self.assertEqual(rc, 0)
        self.assertIn("plain_bytes: 7", out)
        self.assertIn(f"compressed_bytes: {len(compress(b'the end'))}", out)
        self.assertIn("worth_compressing: True", out)

    def test_stats_lines(self) -> None:
        src = self.tmp / "corpus.txt"
        src.write_bytes(b"the end\n\x00\x01\x02\x03\nfoobar\n")
        rc, out, _err = self._run("stats", "--lines", "-f", str(src))
        self.assertEqual(rc, 0)
        lines = out.strip().splitlines()
        self.assertEqual(len(lines), 4)
        self.assertIn("compressed by", lines[0])
        self.assertIn("enlarged by", lines[1])
        self.assertTrue(lines[-1].startswith("total: 17 -> "))

    def test_compare_lists_every_codec(self) -> None:
        rc, out, _err = self._run("compare", "the end")
        self.assertEqual(rc, 0)
        for name in ("smaz", "deflate", "zlib", "bz2", "lzma", "zstd"):
            self.assertIn(name, out)
        smaz_line = [line for line in out.splitlines() if line.startswith("smaz")][0]
        self.assertTrue(smaz_line.endswith("*"))

    def test_dump_lists_tokens(self) -> None:
        rc, out, _err = self._run("dump", compress(b"\x00the").hex())
        self.assertEqual(rc, 0)
        lines = out.strip().splitlines()
        self.assertEqual(len(lines), 2)
        self.assertIn("byte", lines[0])
        self.assertIn("code", lines[1])

    def test_config_sets_default_format_and_runtime_log(self) -> None:
        cfg_path = self.tmp / "smaz_config.json"
        log_path = self.tmp / "logs" / "runtime.log"
        cfg_path.write_text(
            json.dumps({"format": "b64", "runtime_log": True, "runtime_log_file": str(log_path)}),
            encoding="utf-8",
        )
        rc, out, _err = self._run("compress", "the end", config=str(cfg_path))
        self.assertEqual(rc, 0)
        self.assertEqual(base64.b64decode(out.strip()), compress(b"the end"))
        self.assertIn("compress in=7 out=", log_path.read_text(encoding="utf-8"))

    def test_runtime_log_option_records_errors(self) -> None:
        log_path = self.tmp / "runtime.log"
        rc, _out, _err = self._run("--runtime-log", str(log_path), "decompress", "fe", "-o", str(self.tmp / "x"))
        self.assertEqual(rc, 1)
        self.assertIn("error decompress:", log_path.read_text(encoding="utf-8"))

    def test_stdin_input(self) -> None:
        fake_stdin = mock.Mock()
        fake_stdin.buffer = io.BytesIO(b"try it against urls")
        with mock.patch("sys.stdin", fake_stdin):
            rc, out, _err = self._run("compress")
        self.assertEqual(rc, 0)
        self.assertEqual(out.strip(), compress(b"try it against urls").hex())


if __name__ == "__main__":
    unittest.main()
