"""DTD element declaration compilation."""

from .compiler import ContentModelCompiler, parse_mixed_children
from .content_model import ContentModelMatcher, Token, TokenKind, compile_content_model, tokenize

__all__ = [
    'ContentModelCompiler',
    'parse_mixed_children',
    'ContentModelMatcher',
    'Token',
    'TokenKind',
    'compile_content_model',
    'tokenize',
]
