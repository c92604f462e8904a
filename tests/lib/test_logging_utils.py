# SPDX-FileCopyrightText: 2025-2026 Jiri Vyskocil <jiri@vyskocil.com>
#
# SPDX-License-Identifier: Apache-2.0

import io
import os
import tempfile
import unittest
import unittest.mock
from pathlib import Path

from tagbuild.lib.util.logging_utils import ConsoleLog, RecordingLog


class ConsoleLogTests(unittest.TestCase):
    def test_streams_and_colors(self) -> None:
        out, err = io.StringIO(), io.StringIO()
        with unittest.mock.patch.dict(os.environ, {"FORCE_COLOR": "1"}, clear=False):
            os.environ.pop("NO_COLOR", None)
            log = ConsoleLog(out, err, debug_file=False)
            log.info("building")
            log.warn("careful")
            log.error("broken")
        self.assertEqual(out.getvalue(), "building\n")
        self.assertIn("\x1b[33mcareful\x1b[0m", err.getvalue())
        self.assertIn("\x1b[31mbroken\x1b[0m", err.getvalue())

    def test_no_color(self) -> None:
        err = io.StringIO()
        with unittest.mock.patch.dict(os.environ, {"NO_COLOR": "1"}):
            ConsoleLog(io.StringIO(), err, debug_file=False).warn("plain")
        self.assertEqual(err.getvalue(), "plain\n")

    def test_debug_file(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            with unittest.mock.patch.dict(os.environ, {"TAGBUILD_STATE_DIR": td, "NO_COLOR": "1"}):
                ConsoleLog(io.StringIO(), io.StringIO()).error("boom")
            content = (Path(td) / "tagbuild.log").read_text(encoding="utf-8")
            self.assertIn("ERROR: boom", content)


class RecordingLogTests(unittest.TestCase):
    def test_messages_by_level(self) -> None:
        log = RecordingLog()
        log.info("a")
        log.warn("b")
        log.info("c")
        self.assertEqual(log.messages("info"), ["a", "c"])
        self.assertEqual(log.records[1], ("warn", "b"))
