"""
Writing rules built on spaCy parses.
"""

from .base_rule import BaseRule
from .language_and_grammar.adverbs_style_rule import AdverbsStyleRule

__all__ = ['BaseRule', 'AdverbsStyleRule']
