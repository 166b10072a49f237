"""
Unit tests for the adverbs style configuration layer.
Covers the YAML vocabulary service and environment overrides in Config.
"""

import logging

import pytest

from config import Config, TestingConfig
from rules.language_and_grammar.services.language_vocabulary_service import (
    LanguageVocabularyService, get_adverbs_style_vocabulary
)


@pytest.mark.unit
class TestLanguageVocabularyService:

    def test_bundled_config_has_rule_settings(self):
        config = get_adverbs_style_vocabulary().get_adverbs_style_config()
        assert config['rarity_top_n'] == 1000
        assert config['similarity_tolerance'] == 0.5
        assert 'pleaded' in config['seed_verbs']
        assert '{adverb}' in config['messages']['default']

    def test_singleton(self):
        assert get_adverbs_style_vocabulary() is get_adverbs_style_vocabulary()

    def test_missing_file_gives_empty_vocabulary(self, tmp_path):
        service = LanguageVocabularyService(config_dir=str(tmp_path))
        assert service.get_adverbs_style_config() == {}

    def test_reload_picks_up_changes(self, tmp_path):
        path = tmp_path / 'adverbs_style_config.yaml'
        path.write_text("rarity_top_n: 10\n", encoding='utf-8')
        service = LanguageVocabularyService(config_dir=str(tmp_path))
        assert service.get_adverbs_style_config()['rarity_top_n'] == 10

        path.write_text("rarity_top_n: 20\n", encoding='utf-8')
        assert service.get_adverbs_style_config()['rarity_top_n'] == 10
        service.reload_all_vocabularies()
        assert service.get_adverbs_style_config()['rarity_top_n'] == 20

    def test_invalid_yaml_is_logged(self, tmp_path, caplog):
        (tmp_path / 'adverbs_style_config.yaml').write_text("seed_verbs: [pleaded\n", encoding='utf-8')
        service = LanguageVocabularyService(config_dir=str(tmp_path))
        with caplog.at_level(logging.ERROR):
            assert service.get_adverbs_style_config() == {}
        assert 'Error loading vocabulary file' in caplog.text


@pytest.mark.unit
class TestConfig:

    def test_analysis_config_keys(self):
        config = Config.get_analysis_config()
        assert set(config) == {
            'spacy_model', 'rarity_top_n', 'similarity_tolerance',
            'oov_log_prob', 'probability_file', 'ranking_workers', 'prototype_cache_dir',
        }

    def test_env_overrides_only_explicit_values(self, monkeypatch):
        monkeypatch.delenv('ADVERB_RARITY_TOP_N', raising=False)
        monkeypatch.delenv('ADVERB_SIMILARITY_TOLERANCE', raising=False)
        assert Config.env_overrides() == {}

        monkeypatch.setenv('ADVERB_RARITY_TOP_N', '250')
        monkeypatch.setenv('ADVERB_SIMILARITY_TOLERANCE', '0.65')
        assert Config.env_overrides() == {'rarity_top_n': 250, 'similarity_tolerance': 0.65}

    def test_configure_logging(self):
        logger = logging.getLogger('adverb_style_test')
        TestingConfig.configure_logging(logger)
        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 1
        TestingConfig.configure_logging(logger)
        assert len(logger.handlers) == 1
