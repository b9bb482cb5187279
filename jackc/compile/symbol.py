from enum import Enum


class Kind(Enum):
    STATIC = 'static'
    FIELD = 'field'
    ARG = 'argument'
    VAR = 'local'

STATIC = Kind.STATIC
FIELD = Kind.FIELD
ARG = Kind.ARG
VAR = Kind.VAR

SEGMENTS = {
    STATIC: 'static',
    FIELD: 'this',
    ARG: 'argument',
    VAR: 'local',
}


def segment_of(kind):
    return SEGMENTS[kind]


class Symbol:

    def __init__(self, name, type, kind, index):
        self.name = name
        self.type = type
        self.kind = kind
        self.index = index

    @property
    def segment(self):
        return segment_of(self.kind)

    def key(self):
        return (self.name, self.type, self.kind, self.index)

    def __eq__(self, other):
        return other.__class__ is Symbol and self.key() == other.key()

    def __hash__(self):
        return hash(self.key())

    def __repr__(self):
        return f"<Symbol {self.name}: {self.type} {self.kind.value} {self.index}>"


class Scope:
    """One level of names; lookups fall back to ``parent``, which is never written to."""

    def __init__(self, kinds, parent=None):
        self.parent = parent
        self.table = {}
        self.counts = dict.fromkeys(kinds, 0)

    def __contains__(self, name):
        if name in self.table:
            return True
        if self.parent is not None:
            return name in self.parent
        return False

    def __getitem__(self, name):
        if name in self.table:
            return self.table[name]
        if self.parent is not None:
            return self.parent[name]
        raise KeyError(name)

    def declare(self, name, type, kind):
        assert name not in self.table
        symbol = Symbol(name, type, kind, self.counts[kind])
        self.counts[kind] += 1
        self.table[name] = symbol
        return symbol


class SymbolTable:
    """Class scope and subroutine scope of one compilation unit.

    Statics and fields go to the class scope, which lives as long as the
    table.  Arguments and locals go to the subroutine scope, which
    ``start_subroutine`` replaces with an empty one.  Lookups try the
    subroutine scope first.
    """

    def __init__(self):
        self.class_scope = Scope((STATIC, FIELD))
        self.start_subroutine()

    def start_subroutine(self):
        self.subroutine_scope = Scope((ARG, VAR), self.class_scope)

    def scope_for(self, kind):
        if kind in self.class_scope.counts:
            return self.class_scope
        return self.subroutine_scope

    def define(self, name, type, kind):
        return self.scope_for(kind).declare(name, type, kind)

    def is_defined_locally(self, name, kind):
        return name in self.scope_for(kind).table

    def var_count(self, kind):
        return self.scope_for(kind).counts[kind]

    def __contains__(self, name):
        return name in self.subroutine_scope

    def __getitem__(self, name):
        return self.subroutine_scope[name]

    def get(self, name):
        if name in self:
            return self[name]
        return None

    def kind_of(self, name):
        symbol = self.get(name)
        return symbol and symbol.kind

    def type_of(self, name):
        symbol = self.get(name)
        return symbol and symbol.type

    def index_of(self, name):
        symbol = self.get(name)
        return symbol and symbol.index

    segment_of = staticmethod(segment_of)
