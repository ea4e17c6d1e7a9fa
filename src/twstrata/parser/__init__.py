"""CSS parser: lark grammar and transformer producing a twstrata tree."""

from twstrata.parser.errors import ParseError
from twstrata.parser.transformer import parse_css

__all__ = ["ParseError", "parse_css"]
