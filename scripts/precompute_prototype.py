#!/usr/bin/env python
"""
Pre-compute the speech-verb prototype vector and rarity threshold.

Loads the configured spaCy model once, builds the lexicon from its vocabulary and
caches the prototype as an .npz file so the adverbs style rule can start without
averaging seed vectors again.
"""

import json
import logging
import os
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

# Set up logging
logging.basicConfig(level=logging.INFO, format='%(levelname)s: %(message)s')
logger = logging.getLogger(__name__)


def precompute_prototype() -> bool:
    """Build and cache the prototype vector. Returns True on success."""
    import spacy

    from config import Config
    from lexicon import (
        LexiconError, build_prototype, load_from_spacy_vocab, load_probability_table, rank_by_similarity,
        rarity_threshold, save_prototype
    )
    from rules.language_and_grammar.adverbs_style_rule import DEFAULT_SEED_VERBS
    from rules.language_and_grammar.services.language_vocabulary_service import get_adverbs_style_vocabulary

    settings = Config.get_analysis_config()
    rule_config = get_adverbs_style_vocabulary().get_adverbs_style_config()
    seed_verbs = rule_config.get('seed_verbs', DEFAULT_SEED_VERBS)
    top_n = int(Config.env_overrides().get('rarity_top_n', rule_config.get('rarity_top_n', settings['rarity_top_n'])))

    try:
        nlp = spacy.load(settings['spacy_model'])
    except OSError as e:
        logger.error(f"spaCy model '{settings['spacy_model']}' is not installed: {e}")
        return False

    try:
        probabilities = (load_probability_table(settings['probability_file'])
                         if settings['probability_file'] else None)
        store = load_from_spacy_vocab(nlp.vocab, oov_log_prob=settings['oov_log_prob'],
                                      probability_table=probabilities)
        threshold = rarity_threshold(store, top_n)
        prototype = build_prototype(store, seed_verbs)
    except LexiconError as e:
        logger.error(f"Pre-computation failed: {e}")
        return False

    nearest = rank_by_similarity(store, prototype, workers=settings['ranking_workers']).top(10)
    logger.info("Nearest words to the prototype: " + ', '.join(f"{word} ({score:.3f})" for word, score in nearest))

    cache_dir = Path(settings['prototype_cache_dir'])
    os.makedirs(cache_dir, exist_ok=True)
    save_prototype(prototype, cache_dir / 'prototype.npz')
    with open(cache_dir / 'prototype.json', 'w', encoding='utf-8') as f:
        json.dump({
            'spacy_model': settings['spacy_model'],
            'seed_verbs': list(prototype.seed_words),
            'rarity_top_n': top_n,
            'rarity_threshold': threshold,
        }, f, indent=2)

    logger.info(f"Cached prototype ({prototype.dimension} dimensions) in {cache_dir}")
    return True


if __name__ == '__main__':
    success = precompute_prototype()
    sys.exit(0 if success else 1)
