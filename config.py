"""
Configuration for the Adverb Style Flagger.
"""

import os
import logging
from pathlib import Path
from dotenv import load_dotenv
from typing import Dict, Any

# Load environment variables (optional - only if .env file exists)
load_dotenv()


class Config:
    """Application configuration."""

    # SpaCy model settings - the lexicon needs a model that ships word vectors
    SPACY_MODEL = os.environ.get('SPACY_MODEL', 'en_core_web_lg')

    # Adverb rule thresholds
    ADVERB_RARITY_TOP_N = int(os.environ.get('ADVERB_RARITY_TOP_N', 1000))
    ADVERB_SIMILARITY_TOLERANCE = float(os.environ.get('ADVERB_SIMILARITY_TOLERANCE', 0.5))

    # Lexicon settings
    LEXICON_OOV_LOG_PROB = float(os.environ.get('LEXICON_OOV_LOG_PROB', -20.0))
    # JSON or YAML word -> log-probability file; when unset, spaCy lookups tables are used
    LEXICON_PROBABILITY_FILE = os.environ.get('LEXICON_PROBABILITY_FILE')
    RANKING_WORKERS = int(os.environ.get('RANKING_WORKERS', 1))

    # Prototype cache written by scripts/precompute_prototype.py
    PROTOTYPE_CACHE_DIR = os.environ.get(
        'PROTOTYPE_CACHE_DIR', str(Path.home() / '.cache' / 'adverb_style')
    )

    # Logging Configuration
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')

    @classmethod
    def configure_logging(cls, logger: logging.Logger = None) -> logging.Logger:
        """Attach a stream handler to ``logger`` (the root logger by default)."""
        logger = logger or logging.getLogger()
        if not logger.handlers:
            handler = logging.StreamHandler()
            handler.setLevel(cls.LOG_LEVEL.upper())
            formatter = logging.Formatter(
                '[%(asctime)s] %(levelname)s in %(module)s: %(message)s'
            )
            handler.setFormatter(formatter)
            logger.addHandler(handler)
        logger.setLevel(cls.LOG_LEVEL.upper())
        return logger

    @classmethod
    def get_analysis_config(cls) -> Dict[str, Any]:
        """Get adverb analysis configuration."""
        return {
            'spacy_model': cls.SPACY_MODEL,
            'rarity_top_n': cls.ADVERB_RARITY_TOP_N,
            'similarity_tolerance': cls.ADVERB_SIMILARITY_TOLERANCE,
            'oov_log_prob': cls.LEXICON_OOV_LOG_PROB,
            'probability_file': cls.LEXICON_PROBABILITY_FILE,
            'ranking_workers': cls.RANKING_WORKERS,
            'prototype_cache_dir': cls.PROTOTYPE_CACHE_DIR,
        }

    @staticmethod
    def env_overrides() -> Dict[str, Any]:
        """Analysis settings explicitly set in the environment."""
        overrides = {}
        if 'ADVERB_RARITY_TOP_N' in os.environ:
            overrides['rarity_top_n'] = int(os.environ['ADVERB_RARITY_TOP_N'])
        if 'ADVERB_SIMILARITY_TOLERANCE' in os.environ:
            overrides['similarity_tolerance'] = float(os.environ['ADVERB_SIMILARITY_TOLERANCE'])
        return overrides


class TestingConfig(Config):
    """Testing configuration."""
    LOG_LEVEL = 'DEBUG'
    RANKING_WORKERS = 1
