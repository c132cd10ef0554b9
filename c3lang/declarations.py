"""Parse and serialize class declaration files.

A declaration file lists classes with their parents in local precedence
order, and the functions and variables each class contributes directly:

    # ERC20 and friends
    class Context {}
    class IERC20 { fn transfer; fn balance_of; }
    class IERC20Metadata(IERC20) { fn name; }
    class ERC20(Context, IERC20Metadata, IERC20) {
        fn transfer;
        var total_supply;
    }

Bodies are never part of the format. When loaded into a Hierarchy, each
function gets the opaque implementation handle "Class.name" so dispatch
chains can be inspected without any code behind them.
"""

from dataclasses import dataclass, field

from c3lang.hierarchy import Hierarchy


@dataclass
class ClassDecl:
    name: str
    parents: list[str] = field(default_factory=list)
    functions: list[str] = field(default_factory=list)
    variables: list[str] = field(default_factory=list)


# --- Parser ---

class _Parser:
    def __init__(self, s: str):
        self.s = s
        self.pos = 0

    def skip(self) -> None:
        """Skip whitespace and # comments."""
        while self.pos < len(self.s):
            ch = self.s[self.pos]
            if ch.isspace():
                self.pos += 1
            elif ch == '#':
                end = self.s.find('\n', self.pos)
                self.pos = len(self.s) if end == -1 else end
            else:
                return

    def at_end(self) -> bool:
        self.skip()
        return self.pos >= len(self.s)

    def peek(self) -> str:
        self.skip()
        if self.pos >= len(self.s):
            raise ValueError("unexpected end of input")
        return self.s[self.pos]

    def expect(self, ch: str) -> None:
        if self.peek() != ch:
            raise ValueError(f"expected {ch!r} at pos {self.pos}, got {self.s[self.pos]!r}")
        self.pos += 1

    def parse_ident(self) -> str:
        self.skip()
        start = self.pos
        if self.pos < len(self.s) and (self.s[self.pos].isalpha() or self.s[self.pos] == '_'):
            self.pos += 1
            while self.pos < len(self.s) and (self.s[self.pos].isalnum() or self.s[self.pos] == '_'):
                self.pos += 1
        if start == self.pos:
            got = self.s[self.pos] if self.pos < len(self.s) else "end of input"
            raise ValueError(f"expected identifier at pos {start}, got {got!r}")
        return self.s[start:self.pos]

    def expect_keyword(self, *keywords: str) -> str:
        start = self.pos
        word = self.parse_ident()
        if word not in keywords:
            raise ValueError(f"expected {' or '.join(keywords)} at pos {start}, got {word!r}")
        return word

    def parse_parents(self) -> list[str]:
        if self.peek() != '(':
            return []
        self.expect('(')
        parents = []
        while self.peek() != ')':
            if parents:
                self.expect(',')
            parents.append(self.parse_ident())
        self.expect(')')
        return parents

    def parse_class(self) -> ClassDecl:
        self.expect_keyword("class")
        decl = ClassDecl(self.parse_ident())
        decl.parents = self.parse_parents()
        self.expect('{')
        while self.peek() != '}':
            kind = self.expect_keyword("fn", "var")
            name = self.parse_ident()
            self.expect(';')
            if kind == "fn":
                decl.functions.append(name)
            else:
                decl.variables.append(name)
        self.expect('}')
        return decl


def parse(text: str) -> list[ClassDecl]:
    """Parse a declaration file into ClassDecls, in file order."""
    p = _Parser(text)
    decls = []
    while not p.at_end():
        decls.append(p.parse_class())
    return decls


def serialize(decls: list[ClassDecl]) -> str:
    """Serialize ClassDecls in file order, one member per line."""
    parts = []
    for decl in decls:
        head = f"class {decl.name}"
        if decl.parents:
            head += "(" + ", ".join(decl.parents) + ")"
        members = [f"    fn {f};" for f in decl.functions] + [f"    var {v};" for v in decl.variables]
        if members:
            parts.append(head + " {\n" + "\n".join(members) + "\n}\n")
        else:
            parts.append(head + " {}\n")
    return "".join(parts)


def load(decls: list[ClassDecl], hierarchy: Hierarchy | None = None) -> Hierarchy:
    """Declare every class of decls in hierarchy (a new one by default)."""
    hierarchy = hierarchy or Hierarchy()
    for decl in decls:
        hierarchy.declare(decl.name, decl.parents)
        for fun in decl.functions:
            hierarchy.contribute_function(decl.name, fun, f"{decl.name}.{fun}")
        for var in decl.variables:
            hierarchy.contribute_variable(decl.name, var)
    return hierarchy
