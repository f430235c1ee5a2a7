"""Parse boolean search queries into a small expression tree.

Precedence, lowest first: OR, AND, NOT. Keywords are case-insensitive
whole words; quoted text is never an operator.

    solar OR wind AND storage   ->  Or(solar, And(wind, storage))
    solar NOT rooftop           ->  Not(include=solar, exclude=rooftop)
    NOT wind                    ->  Not(include=None, exclude=wind)
    "solar energy"              ->  Term("solar energy", phrase=True)
"""

from dataclasses import dataclass

OPERATORS = ("AND", "OR", "NOT")


@dataclass(frozen=True)
class Term:
    """Words that must all match; a phrase must match contiguously."""

    text: str
    phrase: bool = False


@dataclass(frozen=True)
class Not:
    """Include minus exclude; no include means every document."""

    include: "Expression | None"
    exclude: Term


@dataclass(frozen=True)
class And:
    operands: tuple["Expression", ...]


@dataclass(frozen=True)
class Or:
    operands: tuple["Expression", ...]


Expression = Term | Not | And | Or


def tokenize_query(query: str) -> list[str]:
    """Split a query into words, quoted segments and upper-cased operators.

    An unterminated quote runs to the end of the query.
    """
    tokens: list[str] = []
    i = 0
    while i < len(query):
        if query[i] == '"':
            end = query.find('"', i + 1)
            if end == -1:
                end = len(query)
            tokens.append(query[i : end + 1])
            i = end + 1
        elif query[i].isspace():
            i += 1
        else:
            end = i
            while end < len(query) and not query[end].isspace() and query[end] != '"':
                end += 1
            word = query[i:end]
            i = end
            tokens.append(word.upper() if word.upper() in OPERATORS else word)
    return tokens


def _is_quoted(token: str) -> bool:
    return len(token) >= 2 and token.startswith('"') and token.endswith('"')


def _split(tokens: list[str], operator: str) -> list[list[str]]:
    parts: list[list[str]] = [[]]
    for token in tokens:
        if token == operator:
            parts.append([])
        else:
            parts[-1].append(token)
    return parts


def make_term(tokens: list[str]) -> Term:
    """Build a term, dropping stray operators and collapsing whitespace."""
    words = [t for t in tokens if t not in OPERATORS]
    if len(words) == 1 and _is_quoted(words[0]):
        phrase = " ".join(words[0][1:-1].split())
        return Term(phrase, phrase=bool(phrase))
    text = " ".join(w.replace('"', " ") for w in words)
    return Term(" ".join(text.split()))


def _combine(kind: type[And] | type[Or], operands: list[Expression]) -> Expression:
    if not operands:
        return Term("")
    if len(operands) == 1:
        return operands[0]
    return kind(tuple(operands))


def _parse_not(tokens: list[str]) -> Expression:
    if "NOT" not in tokens:
        return make_term(tokens)
    split = tokens.index("NOT")
    include = tokens[:split]
    # The exclude side is a single term; later NOTs are stray operators.
    return Not(
        include=make_term(include) if include else None,
        exclude=make_term(tokens[split + 1 :]),
    )


def _parse_and(tokens: list[str]) -> Expression:
    return _combine(And, [_parse_not(part) for part in _split(tokens, "AND") if part])


def parse_query(query: str) -> Expression:
    """Parse a query string. Empty operands (e.g. a trailing OR) are dropped."""
    tokens = tokenize_query(query)
    return _combine(Or, [_parse_and(part) for part in _split(tokens, "OR") if part])
