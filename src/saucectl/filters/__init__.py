"""Tag and grep filters that narrow spec files before sharding."""

from saucectl.filters.cucumber_tags import combine_tags
from saucectl.filters.cypress_grep import parse_grep_exp, parse_grep_tags_exp
from saucectl.filters.expression import All, Any, Exact, Expression, Partial
from saucectl.filters.tag_expression import Evaluatable, TagExpressionError, parse

__all__ = [
    "All",
    "Any",
    "Evaluatable",
    "Exact",
    "Expression",
    "Partial",
    "TagExpressionError",
    "combine_tags",
    "parse",
    "parse_grep_exp",
    "parse_grep_tags_exp",
]
