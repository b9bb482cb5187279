import re
import typing
import logging
import sly

log = logging.getLogger(__name__)


class Token(typing.NamedTuple):
    """A lexeme with its decoded value.

    ``index``/``end`` are character offsets into the source; ``column`` and
    ``end_column`` are the 1-based columns of its first character and of the
    position just past its last one.
    """
    kind: str
    lexeme: str
    value: typing.Union[int, str, None]
    lineno: int
    index: int
    end: int
    column: int
    end_column: int

    def __str__(self):
        return f"{self.kind} {self.lexeme} {self.lineno}:{self.column}:{self.end_column}"


KINDS = {
    'IDENTIFIER': 'identifier',
    'INT_CONST': 'integerConstant',
    'KEYWORD': 'keyword',
    'STRING_CONST': 'stringConstant',
}


class Lexer(sly.Lexer):
    reflags = re.UNICODE

    tokens = {
        IDENTIFIER,
        INT_CONST,
        KEYWORD,
        STRING_CONST,
    }

    literals = {"{", "}", "(", ")", "[", "]", ".", ",", ";",
                "+", "-", "*", "/", "&", "|", "<", ">", "~", "="}

    ignore = ' \t\r'
    ignore_comment = r'//[^\n]*'

    @_(r'/\*[\s\S]*?(?:\*/|\Z)')
    def ignore_block_comment(self, t):
        self.lineno += t.value.count('\n')

    STRING_CONST = r'"[^"\n]*"'
    INT_CONST = r'[0-9]+'

    IDENTIFIER = r'[a-zA-Z_][a-zA-Z0-9_]*'
    IDENTIFIER['class'] = KEYWORD
    IDENTIFIER['constructor'] = KEYWORD
    IDENTIFIER['function'] = KEYWORD
    IDENTIFIER['method'] = KEYWORD
    IDENTIFIER['field'] = KEYWORD
    IDENTIFIER['static'] = KEYWORD
    IDENTIFIER['var'] = KEYWORD
    IDENTIFIER['int'] = KEYWORD
    IDENTIFIER['char'] = KEYWORD
    IDENTIFIER['boolean'] = KEYWORD
    IDENTIFIER['void'] = KEYWORD
    IDENTIFIER['true'] = KEYWORD
    IDENTIFIER['false'] = KEYWORD
    IDENTIFIER['null'] = KEYWORD
    IDENTIFIER['this'] = KEYWORD
    IDENTIFIER['let'] = KEYWORD
    IDENTIFIER['do'] = KEYWORD
    IDENTIFIER['if'] = KEYWORD
    IDENTIFIER['else'] = KEYWORD
    IDENTIFIER['while'] = KEYWORD
    IDENTIFIER['return'] = KEYWORD

    @_(r'\n+')
    def ignore_NEWLINE(self, t):
        self.lineno += len(t.value)

    def __init__(self, filename):
        super().__init__()
        self.filename = filename

    def error(self, t):
        # unknown characters are dropped, the scan goes on
        log.debug("%s:%d: skipping %r", self.filename, self.lineno, t.value[0])
        self.index += 1

    def scan(self, text):
        return tuple(self.freeze(text, t) for t in self.tokenize(text))

    def freeze(self, text, t):
        column = t.index - text.rfind('\n', 0, t.index)
        return Token(KINDS.get(t.type, 'symbol'), t.value, self.decode(t),
                     t.lineno, t.index, t.end, column, column + t.end - t.index)

    @staticmethod
    def decode(t):
        if t.type == 'INT_CONST':
            return int(t.value)
        if t.type == 'STRING_CONST':
            return t.value[1:-1]
        return None


def scan(text, filename="<stdin>"):
    return Lexer(filename).scan(text)
