"""
Language Vocabulary Service

Service for managing YAML-based vocabularies for language and grammar rules.
Provides centralized, cacheable, and reloadable vocabulary management.
"""

import logging
import threading
from pathlib import Path
from typing import Dict, Any, Set, Optional

import yaml

logger = logging.getLogger(__name__)


class LanguageVocabularyService:
    """
    Service for managing language and grammar vocabularies.

    Features:
    - Lazy loading with caching
    - Thread-safe operations
    - Runtime vocabulary reloads
    """

    def __init__(self, config_dir: Optional[str] = None):
        if config_dir is None:
            # Auto-detect config directory relative to this file
            current_dir = Path(__file__).parent
            config_dir = current_dir.parent / "config"

        self.config_dir = Path(config_dir)
        self._cache: Dict[str, Dict[str, Any]] = {}
        self._loaded_files: Set[str] = set()
        self._lock = threading.Lock()

    def _load_yaml_file(self, filename: str) -> Dict[str, Any]:
        """Load and cache a YAML vocabulary file."""
        with self._lock:
            if filename in self._cache:
                return self._cache[filename]

            file_path = self.config_dir / filename

            if not file_path.exists():
                logger.warning(f"Vocabulary file {file_path} not found. Using empty vocabulary.")
                self._cache[filename] = {}
                return {}

            try:
                with open(file_path, 'r', encoding='utf-8') as f:
                    data = yaml.safe_load(f) or {}
            except (OSError, yaml.YAMLError) as e:
                logger.error(f"Error loading vocabulary file {file_path}: {e}")
                self._cache[filename] = {}
                return {}

            self._cache[filename] = data
            self._loaded_files.add(filename)
            logger.info(f"Loaded language vocabulary: {filename}")
            return data

    def reload_vocabulary(self, filename: str) -> None:
        """Reload a specific vocabulary file (useful for runtime updates)."""
        with self._lock:
            self._cache.pop(filename, None)
        self._load_yaml_file(filename)

    def reload_all_vocabularies(self) -> None:
        """Reload all cached vocabulary files."""
        with self._lock:
            loaded_files = list(self._loaded_files)
            self._cache.clear()
            self._loaded_files.clear()

        for filename in loaded_files:
            self._load_yaml_file(filename)

    # === SPECIFIC VOCABULARY ACCESSORS ===

    def get_adverbs_style_config(self) -> Dict[str, Any]:
        """Get adverbs style configuration vocabulary."""
        return self._load_yaml_file("adverbs_style_config.yaml")


# === GLOBAL SERVICE INSTANCES ===

_adverbs_style_service: Optional[LanguageVocabularyService] = None


def get_adverbs_style_vocabulary() -> LanguageVocabularyService:
    """Get the adverbs style vocabulary service instance."""
    global _adverbs_style_service
    if _adverbs_style_service is None:
        _adverbs_style_service = LanguageVocabularyService()
    return _adverbs_style_service
