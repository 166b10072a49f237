"""
Base Rule Class - Abstract interface for all writing rules built on spaCy parses.
All rules must inherit from this class and implement the required methods.
Provides exception handling and the standard error dictionary.
"""

from abc import ABC, abstractmethod
from typing import List, Dict, Any, Optional
import logging
import os

import numpy as np
import yaml

logger = logging.getLogger(__name__)

# Block types that hold code or literal text rather than prose
NON_PROSE_BLOCK_TYPES = ['listing', 'literal', 'code_block', 'inline_code']


class BaseRule(ABC):
    """
    Abstract base class for all writing rules.
    """

    # Class-level cache for exceptions to avoid reading the file for every rule instance.
    _exceptions = None

    def __init__(self) -> None:
        """Initializes the rule and loads the exception configuration."""
        self.rule_type = self._get_rule_type()
        self.severity_levels = ['low', 'medium', 'high']

        # Load exceptions once and cache them at the class level.
        if BaseRule._exceptions is None:
            BaseRule._load_exceptions()

    @classmethod
    def _load_exceptions(cls, path: Optional[str] = None):
        """
        Loads the exceptions.yaml file and caches it.
        This method is called only once to optimize performance.
        """
        # Assumed structure: rules/base_rule.py and rules/config/exceptions.yaml
        path = path or os.path.join(os.path.dirname(__file__), 'config', 'exceptions.yaml')
        try:
            with open(path, 'r', encoding='utf-8') as f:
                cls._exceptions = yaml.safe_load(f)
            if not isinstance(cls._exceptions, dict):
                logger.warning(f"exceptions.yaml at {path} is not a valid dictionary. Disabling exceptions.")
                cls._exceptions = {}
        except FileNotFoundError:
            logger.warning(f"exceptions.yaml not found at {path}. No exceptions will be applied.")
            cls._exceptions = {}
        except yaml.YAMLError as e:
            logger.error(f"Error parsing exceptions.yaml: {e}")
            cls._exceptions = {}

    def _is_excepted(self, text_span: str) -> bool:
        """
        Checks if a given text span is in the global or rule-specific exception list.
        The check is case-insensitive.

        Args:
            text_span: The word or phrase to check (e.g., "quickly").

        Returns:
            True if the text_span is an exception, False otherwise.
        """
        if not self._exceptions or not text_span:
            return False

        text_span_lower = text_span.lower().strip()

        global_exceptions = self._exceptions.get('global_exceptions', [])
        if isinstance(global_exceptions, list):
            if text_span_lower in [str(exc).lower() for exc in global_exceptions]:
                return True

        rule_specifics = self._exceptions.get('rule_specific_exceptions', {})
        if isinstance(rule_specifics, dict):
            rule_exceptions = rule_specifics.get(self.rule_type, [])
            if isinstance(rule_exceptions, list):
                if text_span_lower in [str(exc).lower() for exc in rule_exceptions]:
                    return True

        return False

    @abstractmethod
    def _get_rule_type(self) -> str:
        """Return the rule type identifier (e.g., 'adverbs_style')."""
        pass

    @abstractmethod
    def analyze(self, text: str, sentences: List[str], nlp=None, context=None) -> List[Dict[str, Any]]:
        """
        Analyze text and return list of errors found.

        Args:
            text: Full text to analyze
            sentences: List of sentences
            nlp: SpaCy nlp object (optional)
            context: Optional context information about the block being analyzed

        Returns:
            List of error dictionaries.
        """
        pass

    def _skips_context(self, context: Optional[Dict[str, Any]]) -> bool:
        """Code blocks, listings, and literal blocks are technical syntax, not prose."""
        return bool(context) and context.get('block_type') in NON_PROSE_BLOCK_TYPES

    def _make_serializable(self, data: Any) -> Any:
        """Recursively convert data structure to be JSON serializable."""
        if data is None:
            return None

        if isinstance(data, dict):
            return {str(key): self._make_serializable(value) for key, value in data.items()}

        if isinstance(data, (list, tuple, set)):
            return [self._make_serializable(item) for item in data]

        # numpy scalars and arrays
        if isinstance(data, np.generic):
            return data.item()
        if isinstance(data, np.ndarray):
            return data.tolist()

        if isinstance(data, (str, int, float, bool)):
            return data

        # Enum members
        if hasattr(data, 'value') and hasattr(data, 'name'):
            return self._make_serializable(data.value)

        return str(data)

    def _create_error(self, sentence: str, sentence_index: int, message: str,
                      suggestions: List[str], severity: str = 'medium',
                      text: Optional[str] = None, context: Optional[Dict[str, Any]] = None,
                      **extra_data) -> Dict[str, Any]:
        """
        Create standardized error dictionary.

        Args:
            sentence: The sentence containing the error
            sentence_index: Index of the sentence
            message: Error message
            suggestions: List of suggestions for fixing the error
            severity: Error severity level ('low', 'medium', 'high')
            text: Full text context
            context: Additional context information
            **extra_data: Additional error data to include

        Returns:
            Error dictionary
        """
        if severity not in self.severity_levels:
            severity = 'medium'

        error = {
            'type': self.rule_type,
            'message': str(message),
            'suggestions': [str(s) for s in suggestions],
            'sentence': str(sentence),
            'sentence_index': int(sentence_index),
            'severity': severity
        }

        if context and context.get('block_type'):
            error['block_type'] = context['block_type']

        for key, value in extra_data.items():
            error[str(key)] = self._make_serializable(value)

        return error
