"""
Canonical formatter for generated ShallowCopy files.

The source is tokenized (with Go's automatic semicolon rule), parsed into a
small syntax tree and printed back in one canonical layout: tab indentation,
one keyed element per line, values aligned the way gofmt aligns them.  Only
the Go subset the emitter produces is accepted; anything else is a
GoSyntaxError.

Accepted grammar::

    File      = { Comment } "package" ident ";" { { Comment } FuncDecl ";" }
    FuncDecl  = "func" "(" ident TypeName ")" ident "(" ")" TypeName Block
    Block     = "{" "return" CompositeLit [ ";" ] "}"
    Composite = TypeName "{" [ Element { "," Element } [ "," ] ] "}"
    Element   = ident ":" ident "." ident
    TypeName  = ident [ "." ident ]
"""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import List, Optional

# Token kinds
TK_IDENT = "IDENT"
TK_KEYWORD = "KEYWORD"
TK_PUNCT = "PUNCT"
TK_SEMI = "SEMI"
TK_COMMENT = "COMMENT"
TK_EOF = "EOF"

KEYWORDS = frozenset({
    "break", "case", "chan", "const", "continue", "default", "defer", "else",
    "fallthrough", "for", "func", "go", "goto", "if", "import", "interface",
    "map", "package", "range", "return", "select", "struct", "switch", "type", "var",
})

PUNCT = frozenset("(){}[],:.*=")

# a newline after one of these ends the statement
_SEMI_KEYWORDS = frozenset({"break", "continue", "fallthrough", "return"})
_SEMI_PUNCT = frozenset(")]}")

INDENT = "\t"

# gofmt breaks key alignment when key sizes differ by this ratio
_ALIGN_RATIO = 2.5
_ALIGN_SMALL_SIZE = 40


class GoSyntaxError(Exception):
    def __init__(self, message: str, line: int = 0, column: int = 0) -> None:
        super().__init__(message)
        self.message = message
        self.line = line
        self.column = column

    def __str__(self) -> str:
        if self.line:
            return f"{self.line}:{self.column}: {self.message}"
        return self.message


@dataclass(frozen=True)
class Token:
    kind: str
    value: str
    line: int
    column: int

    def describe(self) -> str:
        if self.kind == TK_EOF:
            return "EOF"
        if self.kind == TK_SEMI:
            return "newline" if self.value == "\n" else "';'"
        if self.kind == TK_COMMENT:
            return "comment"
        return repr(self.value)


def _is_ident_start(ch: str) -> bool:
    return ch == "_" or ch.isalpha()


def _is_ident_part(ch: str) -> bool:
    return ch == "_" or ch.isalnum()


def tokenize(src: str) -> List[Token]:
    """Split ``src`` into tokens, inserting semicolons like the Go scanner."""
    tokens: List[Token] = []
    src = src.replace("\r\n", "\n")
    i, n = 0, len(src)
    line, col = 1, 1
    last: Optional[Token] = None

    def needs_semi() -> bool:
        if last is None:
            return False
        if last.kind == TK_IDENT:
            return True
        if last.kind == TK_KEYWORD:
            return last.value in _SEMI_KEYWORDS
        return last.kind == TK_PUNCT and last.value in _SEMI_PUNCT

    def insert_semi(at_line: int, at_col: int) -> None:
        nonlocal last
        if needs_semi():
            tokens.append(Token(TK_SEMI, "\n", at_line, at_col))
        last = None

    while i < n:
        ch = src[i]
        if ch == "\n":
            insert_semi(line, col)
            i += 1
            line, col = line + 1, 1
            continue
        if ch in " \t":
            i += 1
            col += 1
            continue
        if src.startswith("//", i):
            end = src.find("\n", i)
            if end < 0:
                end = n
            insert_semi(line, col)
            tokens.append(Token(TK_COMMENT, src[i:end].rstrip(), line, col))
            col += end - i
            i = end
            continue
        if src.startswith("/*", i):
            end = src.find("*/", i + 2)
            if end < 0:
                raise GoSyntaxError("comment not terminated", line, col)
            text = src[i:end + 2]
            if "\n" in text:
                insert_semi(line, col)
            tokens.append(Token(TK_COMMENT, text, line, col))
            newlines = text.count("\n")
            if newlines:
                line += newlines
                col = len(text) - text.rfind("\n")
            else:
                col += len(text)
            i = end + 2
            continue
        if _is_ident_start(ch):
            j = i + 1
            while j < n and _is_ident_part(src[j]):
                j += 1
            word = src[i:j]
            kind = TK_KEYWORD if word in KEYWORDS else TK_IDENT
            last = Token(kind, word, line, col)
            tokens.append(last)
            col += j - i
            i = j
            continue
        if ch == ";":
            tokens.append(Token(TK_SEMI, ";", line, col))
            last = None
            i += 1
            col += 1
            continue
        if ch in PUNCT:
            last = Token(TK_PUNCT, ch, line, col)
            tokens.append(last)
            i += 1
            col += 1
            continue
        raise GoSyntaxError(f"unexpected character {ch!r}", line, col)

    insert_semi(line, col)
    tokens.append(Token(TK_EOF, "", line, col))
    return tokens


# ---------- Syntax tree ----------

@dataclass(frozen=True)
class TypeRef:
    name: str
    package: Optional[str] = None

    def __str__(self) -> str:
        return f"{self.package}.{self.name}" if self.package else self.name


@dataclass(frozen=True)
class KeyedElement:
    key: str
    operand: str
    selector: str

    @property
    def value(self) -> str:
        return f"{self.operand}.{self.selector}"


@dataclass
class CompositeLit:
    type: TypeRef
    elements: List[KeyedElement] = field(default_factory=list)


@dataclass
class FuncDecl:
    receiver_name: str
    receiver_type: TypeRef
    name: str
    result: TypeRef
    body: CompositeLit
    doc: List[str] = field(default_factory=list)


@dataclass
class SourceFile:
    package: str
    comment_groups: List[List[str]] = field(default_factory=list)
    decls: List[FuncDecl] = field(default_factory=list)
    trailing_comments: List[str] = field(default_factory=list)


# ---------- Parser ----------

class Parser:
    def __init__(self, tokens: List[Token]) -> None:
        self.tokens = tokens
        self.pos = 0

    @property
    def tok(self) -> Token:
        return self.tokens[self.pos]

    def _advance(self) -> Token:
        t = self.tokens[self.pos]
        if t.kind != TK_EOF:
            self.pos += 1
        return t

    def _error(self, expected: str) -> GoSyntaxError:
        t = self.tok
        return GoSyntaxError(f"expected {expected}, found {t.describe()}", t.line, t.column)

    def _expect(self, kind: str, value: Optional[str] = None) -> Token:
        t = self.tok
        if t.kind != kind or (value is not None and t.value != value):
            raise self._error(repr(value) if value is not None else kind.lower())
        return self._advance()

    def _accept(self, kind: str, value: Optional[str] = None) -> bool:
        t = self.tok
        if t.kind == kind and (value is None or t.value == value):
            self._advance()
            return True
        return False

    def _comment_groups(self) -> List[List[str]]:
        groups: List[List[str]] = []
        prev_line = -2
        while self.tok.kind == TK_COMMENT:
            t = self._advance()
            if not groups or t.line > prev_line + 1:
                groups.append([])
            groups[-1].append(t.value)
            prev_line = t.line + t.value.count("\n")
        return groups

    def parse_file(self) -> SourceFile:
        groups = self._comment_groups()
        self._expect(TK_KEYWORD, "package")
        name = self._expect(TK_IDENT).value
        if name == "_":
            raise GoSyntaxError("invalid package name _", self.tok.line, self.tok.column)
        self._expect_semi()
        out = SourceFile(package=name, comment_groups=groups)
        while True:
            doc = [c for g in self._comment_groups() for c in g]
            if self.tok.kind == TK_EOF:
                out.trailing_comments = doc
                break
            decl = self._parse_func()
            decl.doc = doc
            out.decls.append(decl)
            if self.tok.kind != TK_EOF:
                self._expect_semi()
        return out

    def _expect_semi(self) -> None:
        if not self._accept(TK_SEMI):
            raise self._error("';' or newline")

    def _parse_type_ref(self) -> TypeRef:
        first = self._expect(TK_IDENT).value
        if self._accept(TK_PUNCT, "."):
            return TypeRef(self._expect(TK_IDENT).value, package=first)
        return TypeRef(first)

    def _parse_func(self) -> FuncDecl:
        self._expect(TK_KEYWORD, "func")
        self._expect(TK_PUNCT, "(")
        receiver_name = self._expect(TK_IDENT).value
        receiver_type = self._parse_type_ref()
        self._expect(TK_PUNCT, ")")
        name = self._expect(TK_IDENT).value
        self._expect(TK_PUNCT, "(")
        self._expect(TK_PUNCT, ")")
        result = self._parse_type_ref()
        self._expect(TK_PUNCT, "{")
        self._expect(TK_KEYWORD, "return")
        body = self._parse_composite()
        self._accept(TK_SEMI)
        self._expect(TK_PUNCT, "}")
        return FuncDecl(receiver_name, receiver_type, name, result, body)

    def _parse_composite(self) -> CompositeLit:
        lit = CompositeLit(self._parse_type_ref())
        self._expect(TK_PUNCT, "{")
        seen = set()
        while not self._accept(TK_PUNCT, "}"):
            key_tok = self._expect(TK_IDENT)
            if key_tok.value in seen:
                raise GoSyntaxError(f"duplicate field name {key_tok.value} in struct literal",
                                    key_tok.line, key_tok.column)
            seen.add(key_tok.value)
            self._expect(TK_PUNCT, ":")
            operand = self._expect(TK_IDENT).value
            self._expect(TK_PUNCT, ".")
            selector = self._expect(TK_IDENT).value
            lit.elements.append(KeyedElement(key_tok.value, operand, selector))
            if self._accept(TK_PUNCT, ","):
                continue
            if self.tok.kind == TK_PUNCT and self.tok.value == "}":
                continue
            raise self._error("',' or '}' in composite literal")
        return lit


def parse(src: str) -> SourceFile:
    return Parser(tokenize(src)).parse_file()


# ---------- Printer ----------

def _alignment_sections(sizes: List[int]) -> List[List[int]]:
    """Group element indexes into runs that share one value column."""
    sections: List[List[int]] = []
    lnsum = 0.0
    count = 0
    prev_size = -1
    for i, size in enumerate(sizes):
        use_ff = False
        if prev_size > 0 and size > 0 and count > 0:
            if not (prev_size <= _ALIGN_SMALL_SIZE and size <= _ALIGN_SMALL_SIZE):
                ratio = size / math.exp(lnsum / count)
                use_ff = _ALIGN_RATIO * ratio <= 1 or _ALIGN_RATIO <= ratio
        if use_ff or not sections:
            sections.append([])
            lnsum, count = 0.0, 0
        sections[-1].append(i)
        if size > 0:
            lnsum += math.log(size)
            count += 1
        prev_size = size
    return sections


def _print_elements(elements: List[KeyedElement], depth: int) -> List[str]:
    prefix = INDENT * depth
    lines: List[str] = [""] * len(elements)
    for section in _alignment_sections([len(e.key) for e in elements]):
        width = max(len(elements[i].key) + 1 for i in section)
        for i in section:
            cell = elements[i].key + ":"
            lines[i] = f"{prefix}{cell}{' ' * (width - len(cell) + 1)}{elements[i].value},"
    return lines


def _print_func(decl: FuncDecl) -> List[str]:
    lines = list(decl.doc)
    lines.append(f"func ({decl.receiver_name} {decl.receiver_type}) {decl.name}() {decl.result} {{")
    lit = decl.body
    if not lit.elements:
        lines.append(f"{INDENT}return {lit.type}{{}}")
    else:
        lines.append(f"{INDENT}return {lit.type}{{")
        lines.extend(_print_elements(lit.elements, 2))
        lines.append(f"{INDENT}}}")
    lines.append("}")
    return lines


def print_file(f: SourceFile) -> str:
    out: List[str] = []
    for group in f.comment_groups:
        out.extend(group)
        out.append("")
    out.append(f"package {f.package}")
    for decl in f.decls:
        out.append("")
        out.extend(_print_func(decl))
    if f.trailing_comments:
        out.append("")
        out.extend(f.trailing_comments)
    return "\n".join(out) + "\n"


def format_source(src: str) -> str:
    """Parse ``src`` and print it back canonically.

    Raises GoSyntaxError when ``src`` is not in the accepted subset.
    """
    return print_file(parse(src))


__all__ = [
    "GoSyntaxError", "Token", "tokenize",
    "TypeRef", "KeyedElement", "CompositeLit", "FuncDecl", "SourceFile",
    "Parser", "parse", "print_file", "format_source",
]
