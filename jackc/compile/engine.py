import typing
import logging
from .error import Error
from .parse import Token
from .symbol import SymbolTable, STATIC, FIELD, ARG, VAR

log = logging.getLogger(__name__)

TOKEN_KINDS = {'keyword', 'symbol', 'identifier', 'integerConstant', 'stringConstant'}

CLASS_VAR_KINDS = {'static': STATIC, 'field': FIELD}

STATEMENTS = ('let', 'if', 'while', 'do', 'return')

BINARY_OPS = {
    '+': 'add',
    '-': 'sub',
    '&': 'and',
    '|': 'or',
    '<': 'lt',
    '>': 'gt',
    '=': 'eq',
    '*': 'Math.multiply',
    '/': 'Math.divide',
}

UNARY_OPS = {'-': 'neg', '~': 'not'}

TERM_START = ('integerConstant', 'stringConstant', 'true', 'false', 'null', 'this',
              'identifier', '(', '-', '~')


class Mismatch(typing.NamedTuple):
    """Failed match: what was expected, and the token found instead (None at end of input)."""
    expected: str
    token: typing.Optional[Token]

    def __bool__(self):
        return False


def describe(expected):
    return " or ".join(e if e in TOKEN_KINDS else repr(e) for e in expected)


class Context:
    """State of the class being compiled, handed to every production."""

    def __init__(self, class_name):
        self.class_name = class_name
        self.symtable = SymbolTable()
        self.subroutine = None
        self.subroutine_kind = None
        self.if_count = 0
        self.while_count = 0

    def start_subroutine(self, kind, name):
        self.symtable.start_subroutine()
        self.subroutine_kind = kind
        self.subroutine = name
        self.if_count = 0
        self.while_count = 0

    @property
    def function_name(self):
        return f"{self.class_name}.{self.subroutine}"

    def labels(self, n, *names):
        return tuple(f"{self.subroutine}${name}_{n}" for name in names)

    def if_labels(self):
        n = self.if_count
        self.if_count += 1
        return self.labels(n, 'IF_TRUE', 'IF_FALSE', 'IF_END')

    def while_labels(self):
        n = self.while_count
        self.while_count += 1
        return self.labels(n, 'WHILE_EXP', 'WHILE_END')


class CompilationEngine(Error):
    """Recursive descent over one class, writing VM code as constructs are recognized."""

    def __init__(self, filename, text, tokens, writer):
        self.filename = filename
        self.text = text
        self.tokens = tokens
        self.current = 0
        self.vm = writer

    def compile(self):
        try:
            ctx = self.compile_class()
        except RecursionError:
            ctx = None
        if ctx is None:
            self.error(self.peek() or self.last(), "Expression nested too deeply")
        if self.peek() is not None:
            self.fail(Mismatch("end of input", self.peek()))
        return ctx

    # class: 'class' className '{' classVarDec* subroutineDec* '}'
    def compile_class(self):
        self.eat('class')
        ctx = Context(self.eat('identifier').lexeme)
        self.eat('{')
        while self.check('static', 'field'):
            self.compile_class_var_dec(ctx)
        while self.check('constructor', 'function', 'method'):
            self.compile_subroutine(ctx)
        self.eat('}')
        return ctx

    # classVarDec: ('static' | 'field') type varName (',' varName)* ';'
    def compile_class_var_dec(self, ctx):
        kind = CLASS_VAR_KINDS[self.eat('static', 'field').lexeme]
        type = self.compile_type()
        self.declare(ctx, self.eat('identifier'), type, kind)
        while self.accept(','):
            self.declare(ctx, self.eat('identifier'), type, kind)
        self.eat(';')

    # type: 'int' | 'char' | 'boolean' | className
    def compile_type(self):
        return self.eat('int', 'char', 'boolean', 'identifier').lexeme

    # subroutineDec: ('constructor' | 'function' | 'method') ('void' | type)
    #                subroutineName '(' parameterList ')' subroutineBody
    def compile_subroutine(self, ctx):
        kind = self.eat('constructor', 'function', 'method').lexeme
        if not self.accept('void'):
            self.compile_type()
        ctx.start_subroutine(kind, self.eat('identifier').lexeme)
        log.debug("compiling %s %s", kind, ctx.function_name)

        # constructors are called without a receiver, so their parameters start at argument 0
        if kind == 'method':
            ctx.symtable.define('this', ctx.class_name, ARG)

        self.eat('(')
        self.compile_parameter_list(ctx)
        self.eat(')')
        self.compile_subroutine_body(ctx)

    # parameterList: ((type varName) (',' type varName)*)?
    def compile_parameter_list(self, ctx):
        if self.check(')'):
            return
        type = self.compile_type()
        self.declare(ctx, self.eat('identifier'), type, ARG)
        while self.accept(','):
            type = self.compile_type()
            self.declare(ctx, self.eat('identifier'), type, ARG)

    # subroutineBody: '{' varDec* statements '}'
    def compile_subroutine_body(self, ctx):
        self.eat('{')
        while self.check('var'):
            self.compile_var_dec(ctx)

        self.vm.function(ctx.function_name, ctx.symtable.var_count(VAR))
        if ctx.subroutine_kind == 'constructor':
            self.vm.push('constant', ctx.symtable.var_count(FIELD))
            self.vm.call('Memory.alloc', 1)
            self.vm.pop('pointer', 0)
        elif ctx.subroutine_kind == 'method':
            self.vm.push('argument', 0)
            self.vm.pop('pointer', 0)

        self.compile_statements(ctx)
        self.eat('}')

    # varDec: 'var' type varName (',' varName)* ';'
    def compile_var_dec(self, ctx):
        self.eat('var')
        type = self.compile_type()
        self.declare(ctx, self.eat('identifier'), type, VAR)
        while self.accept(','):
            self.declare(ctx, self.eat('identifier'), type, VAR)
        self.eat(';')

    # statements: statement*
    def compile_statements(self, ctx):
        while self.check(*STATEMENTS):
            getattr(self, f"compile_{self.peek().lexeme}")(ctx)

    # letStatement: 'let' varName ('[' expression ']')? '=' expression ';'
    def compile_let(self, ctx):
        self.eat('let')
        symbol = self.variable(ctx, self.eat('identifier'))

        if self.accept('['):
            self.vm.push(symbol.segment, symbol.index)
            self.compile_expression(ctx)
            self.eat(']')
            self.vm.arithmetic('add')
            self.eat('=')
            self.compile_expression(ctx)
            self.vm.pop('temp', 0)
            self.vm.pop('pointer', 1)
            self.vm.push('temp', 0)
            self.vm.pop('that', 0)
        else:
            self.eat('=')
            self.compile_expression(ctx)
            self.vm.pop(symbol.segment, symbol.index)

        self.eat(';')

    # ifStatement: 'if' '(' expression ')' '{' statements '}' ('else' '{' statements '}')?
    def compile_if(self, ctx):
        self.eat('if')
        self.eat('(')
        self.compile_expression(ctx)
        self.eat(')')

        if_true, if_false, if_end = ctx.if_labels()
        self.vm.if_goto(if_true)
        self.vm.goto(if_false)
        self.vm.label(if_true)
        self.compile_block(ctx)
        self.vm.goto(if_end)
        self.vm.label(if_false)
        if self.accept('else'):
            self.compile_block(ctx)
        self.vm.label(if_end)

    # whileStatement: 'while' '(' expression ')' '{' statements '}'
    def compile_while(self, ctx):
        self.eat('while')
        while_exp, while_end = ctx.while_labels()
        self.vm.label(while_exp)
        self.eat('(')
        self.compile_expression(ctx)
        self.eat(')')
        self.vm.arithmetic('not')
        self.vm.if_goto(while_end)
        self.compile_block(ctx)
        self.vm.goto(while_exp)
        self.vm.label(while_end)

    def compile_block(self, ctx):
        self.eat('{')
        self.compile_statements(ctx)
        self.eat('}')

    # doStatement: 'do' subroutineCall ';'
    def compile_do(self, ctx):
        self.eat('do')
        self.compile_subroutine_call(ctx, self.eat('identifier'))
        self.eat(';')
        self.vm.pop('temp', 0)

    # returnStatement: 'return' expression? ';'
    def compile_return(self, ctx):
        self.eat('return')
        if self.check(';'):
            self.vm.push('constant', 0)
        else:
            self.compile_expression(ctx)
        self.eat(';')
        self.vm.return_()

    # expression: term (op term)*
    # no precedence, operators apply left to right
    def compile_expression(self, ctx):
        self.compile_term(ctx)
        while self.check(*BINARY_OPS):
            op = self.eat(*BINARY_OPS).lexeme
            self.compile_term(ctx)
            command = BINARY_OPS[op]
            if '.' in command:
                self.vm.call(command, 2)
            else:
                self.vm.arithmetic(command)

    # term: integerConstant | stringConstant | keywordConstant | varName |
    #       varName '[' expression ']' | subroutineCall | '(' expression ')' | unaryOp term
    def compile_term(self, ctx):
        t = self.accept(*TERM_START)
        if not t:
            self.fail(t._replace(expected="term"))

        if t.kind == 'integerConstant':
            self.vm.push('constant', t.value)

        elif t.kind == 'stringConstant':
            self.vm.push('constant', len(t.value))
            self.vm.call('String.new', 1)
            for c in t.value:
                self.vm.push('constant', ord(c))
                self.vm.call('String.appendChar', 2)

        elif t.kind == 'keyword':
            if t.lexeme == 'this':
                self.vm.push('pointer', 0)
            else:
                self.vm.push('constant', 0)
                if t.lexeme == 'true':
                    self.vm.arithmetic('not')

        elif t.kind == 'identifier':
            if self.check('(', '.'):
                self.compile_subroutine_call(ctx, t)
            elif self.accept('['):
                symbol = self.variable(ctx, t)
                self.vm.push(symbol.segment, symbol.index)
                self.compile_expression(ctx)
                self.eat(']')
                self.vm.arithmetic('add')
                self.vm.pop('pointer', 1)
                self.vm.push('that', 0)
            else:
                symbol = self.variable(ctx, t)
                self.vm.push(symbol.segment, symbol.index)

        elif t.lexeme == '(':
            self.compile_expression(ctx)
            self.eat(')')

        else:
            self.compile_term(ctx)
            self.vm.arithmetic(UNARY_OPS[t.lexeme])

    # subroutineCall: subroutineName '(' expressionList ')' |
    #                 (className | varName) '.' subroutineName '(' expressionList ')'
    def compile_subroutine_call(self, ctx, name):
        nargs = 0
        if self.accept('.'):
            subroutine = self.eat('identifier').lexeme
            symbol = ctx.symtable.get(name.lexeme)
            if symbol is None:
                target = f"{name.lexeme}.{subroutine}"
            else:
                self.vm.push(symbol.segment, symbol.index)
                target = f"{symbol.type}.{subroutine}"
                nargs = 1
        else:
            self.vm.push('pointer', 0)
            target = f"{ctx.class_name}.{name.lexeme}"
            nargs = 1

        self.eat('(')
        nargs += self.compile_expression_list(ctx)
        self.eat(')')
        self.vm.call(target, nargs)

    # expressionList: (expression (',' expression)*)?
    def compile_expression_list(self, ctx):
        if self.check(')'):
            return 0
        self.compile_expression(ctx)
        n = 1
        while self.accept(','):
            self.compile_expression(ctx)
            n += 1
        return n

    def declare(self, ctx, name, type, kind):
        if ctx.symtable.is_defined_locally(name.lexeme, kind):
            self.error(name, f"{name.lexeme!r} is already defined")
        ctx.symtable.define(name.lexeme, type, kind)

    def variable(self, ctx, name):
        symbol = ctx.symtable.get(name.lexeme)
        if symbol is None:
            self.error(name, f"Undefined variable {name.lexeme!r}")
        return symbol

    def peek(self):
        if self.current < len(self.tokens):
            return self.tokens[self.current]
        return None

    def last(self):
        if self.tokens:
            return self.tokens[-1]
        return Token('', '', None, 1, 0, 0, 1, 1)

    @staticmethod
    def matches(t, expected):
        if t is None:
            return False
        if t.kind in expected:
            return True
        return t.kind in ('keyword', 'symbol') and t.lexeme in expected

    def check(self, *expected):
        return self.matches(self.peek(), expected)

    def accept(self, *expected):
        t = self.peek()
        if self.matches(t, expected):
            self.current += 1
            return t
        return Mismatch(describe(expected), t)

    def eat(self, *expected):
        result = self.accept(*expected)
        if not result:
            self.fail(result)
        return result

    def fail(self, mismatch):
        self.unexpected(mismatch.token, mismatch.expected, self.last())
