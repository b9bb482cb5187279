from io import StringIO
from .parse import Lexer, Token, scan
from .engine import CompilationEngine
from .vmwriter import VMWriter
from .dump import tokens_to_xml

def compile(text, filename="<stdin>", out=None):
    """Compile one class to VM code.

    Instructions are written to ``out`` as they are generated, so on a
    SyntaxError whatever came before the bad token is already there.
    """
    if out is None:
        out = StringIO()
    try:
        lexer = Lexer(filename)
        engine = CompilationEngine(filename, text, lexer.scan(text), VMWriter(out))
        engine.compile()
        return out
    except SyntaxError as e:
        raise e.with_traceback(None)
