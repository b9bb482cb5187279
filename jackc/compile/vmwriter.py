SEGMENTS = {'constant', 'argument', 'local', 'static', 'this', 'that', 'pointer', 'temp'}

COMMANDS = {'add', 'sub', 'neg', 'eq', 'gt', 'lt', 'and', 'or', 'not'}


class VMWriter:
    """Renders VM commands, one per line, onto a text stream."""

    def __init__(self, out):
        self.out = out

    def emit(self, *fields):
        self.out.write(" ".join(str(field) for field in fields) + "\n")

    def push(self, segment, index):
        assert segment in SEGMENTS, segment
        self.emit("push", segment, index)

    def pop(self, segment, index):
        assert segment in SEGMENTS and segment != 'constant', segment
        self.emit("pop", segment, index)

    def arithmetic(self, command):
        assert command in COMMANDS, command
        self.emit(command)

    def label(self, name):
        self.emit("label", name)

    def goto(self, name):
        self.emit("goto", name)

    def if_goto(self, name):
        self.emit("if-goto", name)

    def call(self, name, nargs):
        self.emit("call", name, nargs)

    def function(self, name, nlocals):
        self.emit("function", name, nlocals)

    def return_(self):
        self.emit("return")
