"""
Parser for the ``jwt_signer`` directive.

The directive uses the block syntax common to reverse proxy configuration
files::

    jwt_signer 15m {env.JWT_SECRET} {
        sub {http.request.header.X-User}
        profile {
            name {query.name}
        }
    }

The two positional arguments are the token lifetime and the signing secret.
The optional block describes the claim template. Values stay raw here:
placeholders are only resolved per request.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from jwt_signer.errors import ConfigurationError
from jwt_signer.template import ClaimNode, ClaimTemplate, NestedNode, StringLeaf

DIRECTIVE_NAME = "jwt_signer"


@dataclass(frozen=True)
class Token:
    text: str
    line: int
    quoted: bool = False

    @property
    def opens_block(self) -> bool:
        return not self.quoted and self.text == "{"

    @property
    def closes_block(self) -> bool:
        return not self.quoted and self.text == "}"


@dataclass(frozen=True)
class SignerDirective:
    duration: str
    secret: str
    claims: ClaimTemplate = field(default_factory=NestedNode)


def tokenize(text: str) -> List[List[Token]]:
    """Split directive text into lines of tokens, dropping blank lines and comments."""
    lines: List[List[Token]] = []
    current: List[Token] = []
    buf: List[str] = []
    quote: Optional[str] = None
    quote_line = 0
    in_token = False
    line = 1
    i = 0

    def flush(quoted: bool = False):
        nonlocal buf, in_token
        if in_token or quoted:
            current.append(Token("".join(buf), quote_line if quoted else line, quoted))
        buf = []
        in_token = False

    while i < len(text):
        ch = text[i]

        if quote is not None:
            if ch == "\\" and quote == '"' and i + 1 < len(text) and text[i + 1] in '"\\':
                buf.append(text[i + 1])
                i += 2
                continue
            if ch == quote:
                flush(quoted=True)
                quote = None
                i += 1
                continue
            if ch == "\n":
                line += 1
            buf.append(ch)
            i += 1
            continue

        if ch in '"`' and not in_token:
            quote = ch
            quote_line = line
            i += 1
            continue

        if ch == "#" and not in_token:
            while i < len(text) and text[i] != "\n":
                i += 1
            continue

        if ch == "\n":
            flush()
            if current:
                lines.append(current)
                current = []
            line += 1
            i += 1
            continue

        if ch.isspace():
            flush()
            i += 1
            continue

        buf.append(ch)
        in_token = True
        i += 1

    if quote is not None:
        raise ConfigurationError(f"line {quote_line}: unterminated quoted string")

    flush()
    if current:
        lines.append(current)

    return lines


class _LineReader:
    def __init__(self, lines: List[List[Token]]):
        self._lines = lines
        self._pos = 0

    def next_line(self) -> Optional[List[Token]]:
        if self._pos >= len(self._lines):
            return None
        line = self._lines[self._pos]
        self._pos += 1
        return line


def _split_block_opener(tokens: List[Token]) -> Tuple[List[Token], bool]:
    if tokens and tokens[-1].opens_block:
        return tokens[:-1], True
    return tokens, False


def _parse_block(reader: _LineReader, opened_at: int) -> Dict[str, ClaimNode]:
    claims: Dict[str, ClaimNode] = {}

    while True:
        tokens = reader.next_line()
        if tokens is None:
            raise ConfigurationError(f"line {opened_at}: unclosed block")

        first = tokens[0]
        if first.closes_block:
            if len(tokens) > 1:
                raise ConfigurationError(
                    f"line {first.line}: unexpected token after closing brace: {tokens[1].text}"
                )
            return claims

        if first.opens_block:
            raise ConfigurationError(f"line {first.line}: malformed claims: no key found")

        key = first.text
        if key == "":
            raise ConfigurationError(f"line {first.line}: malformed claims: no key found")
        if key in claims:
            raise ConfigurationError(f"line {first.line}: duplicate claim {key}")

        args, has_block = _split_block_opener(tokens[1:])

        if has_block:
            if args:
                raise ConfigurationError(
                    f"line {first.line}: too many arguments after key: {key}"
                )
            try:
                nested = _parse_block(reader, first.line)
            except ConfigurationError as e:
                raise ConfigurationError(f"nested under key {key}: {e.message}") from e
            if not nested:
                raise ConfigurationError(f"line {first.line}: malformed claim {key}: no value")
            claims[key] = NestedNode(nested)
            continue

        if not args:
            raise ConfigurationError(f"line {first.line}: malformed claim {key}: no value")
        if len(args) > 1:
            raise ConfigurationError(f"line {first.line}: too many arguments after key: {key}")
        if args[0].text == "":
            raise ConfigurationError(f"line {first.line}: malformed claim {key}: value is empty")
        if args[0].text == "{}" and not args[0].quoted:
            raise ConfigurationError(f"line {first.line}: malformed claim {key}: no value")
        if args[0].closes_block:
            raise ConfigurationError(f"line {first.line}: malformed claim {key}: no value")

        claims[key] = StringLeaf(args[0].text)


def parse_directive(text: str) -> SignerDirective:
    """
    Parse a ``jwt_signer`` directive.

    Args:
        text: The directive text, starting with the directive name

    Returns:
        SignerDirective: Raw duration and secret plus the claim template

    Raises:
        ConfigurationError: If the directive is malformed
    """
    reader = _LineReader(tokenize(text))

    head = reader.next_line()
    if head is None:
        raise ConfigurationError(f"missing {DIRECTIVE_NAME} directive")
    if head[0].text != DIRECTIVE_NAME or head[0].quoted:
        raise ConfigurationError(
            f"line {head[0].line}: expected {DIRECTIVE_NAME} directive, got {head[0].text}"
        )

    args, has_block = _split_block_opener(head[1:])
    if len(args) != 2 or any(arg.opens_block or arg.closes_block for arg in args):
        raise ConfigurationError(
            f"line {head[0].line}: wrong argument count or unexpected line ending: "
            f"expected <duration> <secret>"
        )

    claims: Dict[str, ClaimNode] = {}
    if has_block:
        claims = _parse_block(reader, head[0].line)

    trailing = reader.next_line()
    if trailing is not None:
        raise ConfigurationError(
            f"line {trailing[0].line}: unexpected token after directive: {trailing[0].text}"
        )

    return SignerDirective(
        duration=args[0].text,
        secret=args[1].text,
        claims=NestedNode(claims),
    )
