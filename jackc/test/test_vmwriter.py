import unittest
from io import StringIO
from ..compile.vmwriter import VMWriter


class WriterTest(unittest.TestCase):

    def setUp(self):
        self.out = StringIO()
        self.vm = VMWriter(self.out)

    def assertWritten(self, *lines):
        self.assertEqual(self.out.getvalue().splitlines(), list(lines))

    def test_push_pop(self):
        self.vm.push('constant', 7)
        self.vm.pop('local', 0)
        self.vm.push('that', 0)
        self.assertWritten("push constant 7", "pop local 0", "push that 0")

    def test_arithmetic(self):
        for command in ('add', 'sub', 'neg', 'eq', 'gt', 'lt', 'and', 'or', 'not'):
            self.vm.arithmetic(command)
        self.assertWritten('add', 'sub', 'neg', 'eq', 'gt', 'lt', 'and', 'or', 'not')

    def test_flow(self):
        self.vm.label("run$WHILE_EXP_0")
        self.vm.if_goto("run$WHILE_END_0")
        self.vm.goto("run$WHILE_EXP_0")
        self.assertWritten(
            "label run$WHILE_EXP_0",
            "if-goto run$WHILE_END_0",
            "goto run$WHILE_EXP_0")

    def test_subroutines(self):
        self.vm.function("Main.main", 2)
        self.vm.call("Math.multiply", 2)
        self.vm.return_()
        self.assertWritten("function Main.main 2", "call Math.multiply 2", "return")

    def test_bad_operands(self):
        with self.assertRaises(AssertionError):
            self.vm.push('heap', 0)
        with self.assertRaises(AssertionError):
            self.vm.pop('constant', 0)
        with self.assertRaises(AssertionError):
            self.vm.arithmetic('mul')
        self.assertWritten()
