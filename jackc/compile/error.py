
class Error:
    """Raises SyntaxError located at a token of ``self.text``."""

    def line_of(self, t):
        start = self.text.rfind('\n', 0, t.index) + 1
        end = self.text.find('\n', t.index)
        if end < 0:
            return self.text[start:]
        return self.text[start:end]

    def col_offset(self, t):
        return t.column

    def error(self, t, msg):
        raise SyntaxError(msg, (self.filename, t.lineno, self.col_offset(t), self.line_of(t)))

    def unexpected(self, t, expected, at_end):
        if t is None:
            self.error(at_end, f"Expected {expected}, got end of input")
        self.error(t, f"Expected {expected}, got {t.lexeme!r}")
