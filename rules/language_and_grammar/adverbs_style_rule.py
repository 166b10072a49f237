"""
Adverbs Style Rule
Flags rare manner adverbs that prop up evocative speech verbs ("pleaded abjectly",
"muttered darkly"), using corpus frequency and word-vector similarity.
"""
import logging
import threading
from pathlib import Path
from typing import List, Dict, Any, Optional

from config import Config
from lexicon import (
    LexiconError, LexiconStore, PrototypeVector,
    build_prototype, load_from_spacy_vocab, load_probability_table, load_prototype, rarity_threshold
)
from ..base_rule import BaseRule
from .adverb_classifier import FlagDecision, classify, flagged, tokens_from_span
from .services.language_vocabulary_service import get_adverbs_style_vocabulary

logger = logging.getLogger(__name__)

DEFAULT_SEED_VERBS = ['pleaded', 'confessed', 'remonstrated', 'begged', 'bragged', 'confided', 'requested']


class AdverbsStyleRule(BaseRule):
    """Checks for rare adverbs modifying verbs of evocative communication."""

    def __init__(self, store: Optional[LexiconStore] = None,
                 prototype: Optional[PrototypeVector] = None,
                 threshold: Optional[float] = None,
                 config: Optional[Dict[str, Any]] = None):
        """
        Args:
            store: Shared lexicon. Built from the pipeline vocabulary on first use when omitted.
            prototype: Prototype of the speech-verb class. Built from ``seed_verbs`` when omitted.
            threshold: Rarity threshold. Derived from ``rarity_top_n`` when omitted.
            config: Overrides for the YAML configuration.
        """
        super().__init__()
        self.vocab_service = get_adverbs_style_vocabulary()
        self.config = self._build_config(config)
        self.store = store
        self.prototype = prototype
        self.threshold = threshold
        self._lexicon_lock = threading.Lock()

    def _get_rule_type(self) -> str:
        return 'adverbs_style'

    def _build_config(self, overrides: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        config = {
            'rarity_top_n': Config.ADVERB_RARITY_TOP_N,
            'similarity_tolerance': Config.ADVERB_SIMILARITY_TOLERANCE,
            'seed_verbs': DEFAULT_SEED_VERBS,
            'severity': 'low',
            'messages': {},
            'suggestions': [],
            'strong_similarity': 1.0,
        }
        config.update(self.vocab_service.get_adverbs_style_config())
        config.update(Config.env_overrides())
        config.update(overrides or {})
        return config

    def _ensure_lexicon(self, nlp) -> bool:
        """Build whatever part of the lexicon state was not supplied. Returns False if it cannot be built."""
        if self.store is not None and self.threshold is not None and self.prototype is not None:
            return True

        with self._lexicon_lock:
            try:
                if self.store is None:
                    self.store = self._load_store(nlp.vocab)
                if self.threshold is None:
                    self.threshold = rarity_threshold(self.store, int(self.config['rarity_top_n']))
                if self.prototype is None:
                    self.prototype = (self._load_cached_prototype()
                                      or build_prototype(self.store, self.config['seed_verbs']))
            except LexiconError as e:
                logger.error(f"Adverbs style rule disabled, lexicon unavailable: {e}")
                return False
        return True

    def _load_store(self, vocab) -> LexiconStore:
        probability_file = self.config.get('probability_file') or Config.LEXICON_PROBABILITY_FILE
        probabilities = load_probability_table(probability_file) if probability_file else None
        return load_from_spacy_vocab(vocab, oov_log_prob=Config.LEXICON_OOV_LOG_PROB,
                                     probability_table=probabilities)

    def _load_cached_prototype(self) -> Optional[PrototypeVector]:
        """Prototype written by scripts/precompute_prototype.py, if it matches the current seeds."""
        path = Path(self.config.get('prototype_cache_dir') or Config.PROTOTYPE_CACHE_DIR) / 'prototype.npz'
        if not path.exists():
            return None
        try:
            prototype = load_prototype(path)
        except (OSError, ValueError, KeyError) as e:
            logger.warning(f"Ignoring unreadable prototype cache {path}: {e}")
            return None
        if list(prototype.seed_words) != list(self.config['seed_verbs']):
            return None
        if prototype.dimension != self.store.dimension:
            return None
        return prototype

    def analyze(self, text: str, sentences: List[str], nlp=None, context=None) -> List[Dict[str, Any]]:
        """Analyze sentences for rare adverbs attached to speech verbs."""
        if self._skips_context(context):
            return []

        errors = []
        if not nlp or not text.strip():
            return errors
        if not self._ensure_lexicon(nlp):
            return errors

        doc = nlp(text)
        for i, sent in enumerate(doc.sents):
            for decision in flagged(self.classify_sentence(sent)):
                if self._is_excepted(decision.text):
                    continue
                token = doc[decision.index]
                errors.append(self._create_error(
                    sentence=sent.text,
                    sentence_index=i,
                    message=self._get_contextual_message(decision),
                    suggestions=self._generate_suggestions(decision),
                    severity=self.config['severity'],
                    text=text,
                    context=context,
                    span=(token.idx, token.idx + len(token.text)),
                    flagged_text=token.text,
                    head_verb=decision.head_text,
                    similarity_score=decision.score
                ))
        return errors

    def classify_sentence(self, sent) -> List[FlagDecision]:
        """Decisions for every token of a parsed sentence."""
        tokens = tokens_from_span(sent, self.store)
        return classify(tokens, self.threshold, self.prototype, float(self.config['similarity_tolerance']))

    def explain(self, text: str, nlp) -> List[List[FlagDecision]]:
        """Decisions for every sentence of ``text``, flagged or not."""
        if not nlp or not self._ensure_lexicon(nlp):
            return []
        return [self.classify_sentence(sent) for sent in nlp(text).sents]

    def _get_contextual_message(self, decision: FlagDecision) -> str:
        messages = self.config.get('messages') or {}
        if decision.score is not None and decision.score >= self.config['strong_similarity'] and 'strong' in messages:
            template = messages['strong']
        else:
            template = messages.get('default', "The adverb '{adverb}' weakens the verb '{verb}'.")
        return template.format(adverb=decision.text, verb=decision.head_text)

    def _generate_suggestions(self, decision: FlagDecision) -> List[str]:
        templates = self.config.get('suggestions') or ["Consider removing '{adverb}'."]
        return [template.format(adverb=decision.text, verb=decision.head_text) for template in templates]
