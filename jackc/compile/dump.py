from xml.sax.saxutils import escape

ENTITIES = {'"': '&quot;'}


def tokens_to_xml(tokens):
    lines = ["<tokens>"]
    for t in tokens:
        text = t.value if t.kind == 'stringConstant' else t.lexeme
        lines.append(f"<{t.kind}> {escape(text, ENTITIES)} </{t.kind}>")
    lines.append("</tokens>")
    return "\n".join(lines) + "\n"
