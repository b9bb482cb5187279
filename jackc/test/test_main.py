import unittest
import tempfile
from pathlib import Path
from .. import compile_file, compile_path, jack_files
from ..__main__ import main

GOOD = """
class Main {
    function void main() {
        do Output.printInt(1 + 2);
        return;
    }
}
"""

BAD = """
class Broken {
    function void main() {
        do Output.printInt(1);
        let = 2;
    }
}
"""


class TestCase(unittest.TestCase):

    def setUp(self):
        tmp = tempfile.TemporaryDirectory()
        self.addCleanup(tmp.cleanup)
        self.dir = Path(tmp.name)

    def write(self, name, text):
        path = self.dir / name
        path.write_text(text)
        return path


class CompileFileTest(TestCase):

    def test_writes_vm_beside_source(self):
        target = compile_file(self.write("Main.jack", GOOD))
        self.assertEqual(target, self.dir / "Main.vm")
        self.assertEqual(target.read_text().splitlines(), [
            "function Main.main 0",
            "push constant 1",
            "push constant 2",
            "add",
            "call Output.printInt 1",
            "pop temp 0",
            "push constant 0",
            "return"])

    def test_truncates_existing_output(self):
        self.write("Main.vm", "stale\n" * 100)
        target = compile_file(self.write("Main.jack", GOOD))
        self.assertNotIn("stale", target.read_text())

    def test_output_dir_and_tokens(self):
        out = self.dir / "build"
        compile_file(self.write("Main.jack", "class Main {}"), out, tokens=True)
        self.assertEqual((out / "Main.vm").read_text(), "")
        self.assertEqual((out / "MainT.xml").read_text().splitlines(), [
            "<tokens>",
            "<keyword> class </keyword>",
            "<identifier> Main </identifier>",
            "<symbol> { </symbol>",
            "<symbol> } </symbol>",
            "</tokens>"])

    def test_error_keeps_partial_output(self):
        source = self.write("Broken.jack", BAD)
        with self.assertRaises(SyntaxError) as cm:
            compile_file(source)
        self.assertEqual(cm.exception.lineno, 5)
        self.assertEqual(cm.exception.filename, str(source))
        self.assertEqual((self.dir / "Broken.vm").read_text().splitlines(), [
            "function Broken.main 0",
            "push constant 1",
            "call Output.printInt 1",
            "pop temp 0"])


class CompilePathTest(TestCase):

    def test_directory(self):
        self.write("Main.jack", GOOD)
        self.write("Other.jack", "class Other {}")
        self.write("notes.txt", "class Notes {}")
        self.assertEqual([p.name for p in jack_files(self.dir)], ["Main.jack", "Other.jack"])
        with self.assertLogs('jackc', 'INFO'):
            self.assertEqual(compile_path(self.dir), 0)
        self.assertTrue((self.dir / "Main.vm").exists())
        self.assertTrue((self.dir / "Other.vm").exists())
        self.assertFalse((self.dir / "notes.vm").exists())

    def test_failure_does_not_stop_other_units(self):
        self.write("Broken.jack", BAD)
        self.write("Main.jack", GOOD)
        with self.assertLogs('jackc', 'ERROR') as cm:
            self.assertEqual(compile_path(self.dir), 1)
        self.assertEqual(len(cm.output), 1)
        self.assertIn("Broken.jack:5:", cm.output[0])
        self.assertIn("Expected identifier, got '='", cm.output[0])
        self.assertIn("function Main.main 0", (self.dir / "Main.vm").read_text())

    def test_empty_directory(self):
        with self.assertLogs('jackc', 'ERROR'):
            self.assertEqual(compile_path(self.dir), 1)

    def test_unreadable_unit_does_not_stop_others(self):
        (self.dir / "A.jack").write_bytes(b"class A { \xff\xfe }")
        self.write("B.jack", "class B {}")
        with self.assertLogs('jackc', 'ERROR') as cm:
            self.assertEqual(compile_path(self.dir), 1)
        self.assertIn("A.jack: ", cm.output[0])
        self.assertTrue((self.dir / "B.vm").exists())
        self.assertFalse((self.dir / "A.vm").exists())


class MainTest(TestCase):

    def test_exit_status(self):
        good = self.write("Main.jack", GOOD)
        with self.assertLogs('jackc', 'INFO'):
            self.assertEqual(main([str(good), "-q"]), 0)
        self.write("Broken.jack", BAD)
        with self.assertLogs('jackc', 'ERROR'):
            self.assertEqual(main([str(self.dir), "-o", str(self.dir / "out")]), 1)
        self.assertTrue((self.dir / "out" / "Main.vm").exists())

    def test_missing_path(self):
        with self.assertRaises(SystemExit) as cm:
            main([str(self.dir / "Nope.jack")])
        self.assertEqual(cm.exception.code, 2)
