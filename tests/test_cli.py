"""
Tests for the venti command-line interface and configuration.

Author: xwest
"""

import unittest
import sys
import os
import io
import tempfile
from contextlib import redirect_stdout, redirect_stderr
from unittest import mock

# Add the project root to the Python path
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
sys.path.insert(0, project_root)

from venti.cli import main
from venti.config import CompilerConfig

TRIPLE = "x86_64-unknown-linux-gnu"


class TestCompilerConfig(unittest.TestCase):
    """Configuration defaults and overrides."""

    def test_defaults(self):
        config = CompilerConfig()
        self.assertEqual(config.output_path, "output.ll")
        self.assertEqual(config.module_name, "venti")
        self.assertIsNone(config.target_triple)

    def test_from_env(self):
        config = CompilerConfig.from_env({
            "VENTI_OUTPUT": "out.ll",
            "VENTI_MODULE_NAME": "demo",
            "VENTI_TARGET_TRIPLE": TRIPLE,
        })
        self.assertEqual(config.output_path, "out.ll")
        self.assertEqual(config.module_name, "demo")
        self.assertEqual(config.resolve_target_triple(), TRIPLE)

    def test_empty_triple_means_host(self):
        config = CompilerConfig.from_env({"VENTI_TARGET_TRIPLE": ""})
        self.assertIsNone(config.target_triple)
        self.assertTrue(config.resolve_target_triple())

    def test_overrides_skip_none(self):
        config = CompilerConfig(module_name="a").with_overrides(module_name=None, output_path="x.ll")
        self.assertEqual(config.module_name, "a")
        self.assertEqual(config.output_path, "x.ll")


class TestCommandLine(unittest.TestCase):
    """Exit codes and output of ``venti``."""

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmp.cleanup)
        self.output = os.path.join(self.tmp.name, "out.ll")

        patcher = mock.patch.dict(os.environ, {}, clear=False)
        patcher.start()
        self.addCleanup(patcher.stop)
        for name in ("VENTI_OUTPUT", "VENTI_MODULE_NAME", "VENTI_TARGET_TRIPLE"):
            os.environ.pop(name, None)

    def write_source(self, text: str) -> str:
        path = os.path.join(self.tmp.name, "prog.vt")
        with open(path, "w", encoding="utf-8") as f:
            f.write(text)
        return path

    def run_cli(self, *args):
        stdout, stderr = io.StringIO(), io.StringIO()
        with redirect_stdout(stdout), redirect_stderr(stderr):
            status = main(list(args))
        return status, stdout.getvalue(), stderr.getvalue()

    def test_success(self):
        source = self.write_source("declare x = 2; print x;")
        status, stdout, stderr = self.run_cli(source, "-o", self.output,
                                              "--target-triple", TRIPLE, "--module-name", "demo")
        self.assertEqual(status, 0)
        self.assertEqual(stderr, "")
        with open(self.output, encoding="utf-8") as f:
            ir = f.read()
        self.assertIn(TRIPLE, ir)
        self.assertIn('"demo"', ir)

    def test_output_from_environment(self):
        source = self.write_source("print 1;")
        os.environ["VENTI_OUTPUT"] = self.output
        status, _, _ = self.run_cli(source)
        self.assertEqual(status, 0)
        self.assertTrue(os.path.exists(self.output))

    def test_dumps(self):
        source = self.write_source("print 1;")
        status, stdout, _ = self.run_cli(source, "-o", self.output, "--tokens", "--ast")
        self.assertEqual(status, 0)
        self.assertIn("PRINT('print')", stdout)
        self.assertIn("Program", stdout)
        self.assertIn("NumberLiteral(1)", stdout)

    def test_compile_error(self):
        source = self.write_source("print missing;")
        status, stdout, stderr = self.run_cli(source, "-o", self.output)
        self.assertEqual(status, 1)
        self.assertTrue(stderr.startswith("Codegen Error: undefined variable 'missing'"))
        self.assertIn("prog.vt:1:7", stderr)
        self.assertFalse(os.path.exists(self.output))

    def test_syntax_error(self):
        source = self.write_source("declare x = 1")
        status, _, stderr = self.run_cli(source, "-o", self.output)
        self.assertEqual(status, 1)
        self.assertTrue(stderr.startswith("Syntax Error: "))

    def test_missing_source(self):
        status, _, stderr = self.run_cli(os.path.join(self.tmp.name, "nope.vt"), "-o", self.output)
        self.assertEqual(status, 1)
        self.assertTrue(stderr.startswith("IO Error: "))


if __name__ == '__main__':
    unittest.main()
