"""docmark - render rich-text document trees into textual syntaxes."""

__version__ = "0.1.0"

from docmark.core.transformer import (
    ContentTransformer,
    InvalidDocumentStructureError,
    TransformationError,
    render,
)
from docmark.formatting.decoder import DocumentDecodeError, decode_document
from docmark.formatting.ir import DocumentNode, Mark, TextRun
from docmark.rules import (
    CallbackRuleSet,
    FormattingRuleSet,
    GFM_RULE_SET,
    HTML_RULE_SET,
    get_rule_set,
)

__all__ = [
    "__version__",
    "ContentTransformer",
    "InvalidDocumentStructureError",
    "TransformationError",
    "render",
    "DocumentDecodeError",
    "decode_document",
    "DocumentNode",
    "Mark",
    "TextRun",
    "CallbackRuleSet",
    "FormattingRuleSet",
    "GFM_RULE_SET",
    "HTML_RULE_SET",
    "get_rule_set",
]
