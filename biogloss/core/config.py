"""
BioGloss Central Configuration
Contains dictionary modes, API endpoints, timeouts, and other configurable parameters
"""

from dataclasses import dataclass
from typing import Optional
import os

# Dictionary modes in catalog assembly order; "combined" is the union of the others
SOURCE_MODES = ("micro", "genetics", "immunology", "biology", "chemistry")
DICTIONARY_MODES = SOURCE_MODES + ("combined",)

DICT_ENDPOINT = "https://api.dictionaryapi.dev/api/v2/entries/en"


def _env_flag(name: str) -> Optional[bool]:
    """Read a boolean environment variable, None when unset"""
    value = os.getenv(name)
    if value is None or value == "":
        return None
    return value.lower() in ("true", "1", "yes")


@dataclass(frozen=True)
class AnnotationConfig:
    """Inputs that fully determine classification for one annotation run"""

    dictionary_mode: str = "combined"
    scientific_enabled: bool = True
    simple_english_enabled: bool = False

    def __post_init__(self):
        if self.dictionary_mode not in DICTIONARY_MODES:
            raise ValueError(
                f"Unknown dictionary mode: {self.dictionary_mode} "
                f"(expected one of {', '.join(DICTIONARY_MODES)})"
            )


@dataclass
class APIConfig:
    """Configuration for the dictionary service and the tooltip overlay"""

    # Dictionary service
    dict_endpoint: str = DICT_ENDPOINT
    lookup_timeout: float = 5.0

    # Content limits
    max_content_size_mb: int = 50

    # Tooltip placement
    tooltip_offset: int = 10
    tooltip_margin: int = 10


@dataclass
class BioGlossConfig:
    """Main configuration class combining all settings"""

    annotation: AnnotationConfig
    api: APIConfig

    # Optional YAML file with custom dictionaries
    catalog_path: Optional[str] = None

    # Logging
    log_level: str = "INFO"

    def __init__(self,
                 annotation: Optional[AnnotationConfig] = None,
                 api: Optional[APIConfig] = None,
                 catalog_path: Optional[str] = None,
                 log_level: str = "INFO"):
        """Initialize with optional custom configurations"""
        self.annotation = annotation or AnnotationConfig()
        self.api = api or APIConfig()
        self.catalog_path = catalog_path
        self.log_level = log_level

        # Override with environment variables if present
        self._load_env_overrides()

    def _load_env_overrides(self):
        """Load configuration overrides from environment variables"""
        mode = os.getenv("BIOGLOSS_DICTIONARY_MODE") or self.annotation.dictionary_mode
        scientific = _env_flag("BIOGLOSS_SCIENTIFIC")
        simple_english = _env_flag("BIOGLOSS_SIMPLE_ENGLISH")

        self.annotation = AnnotationConfig(
            dictionary_mode=mode,
            scientific_enabled=self.annotation.scientific_enabled if scientific is None else scientific,
            simple_english_enabled=(
                self.annotation.simple_english_enabled if simple_english is None else simple_english
            ),
        )

        if os.getenv("BIOGLOSS_DICT_ENDPOINT"):
            self.api.dict_endpoint = os.getenv("BIOGLOSS_DICT_ENDPOINT")

        if os.getenv("BIOGLOSS_LOOKUP_TIMEOUT"):
            self.api.lookup_timeout = float(os.getenv("BIOGLOSS_LOOKUP_TIMEOUT"))

        if os.getenv("BIOGLOSS_CATALOG"):
            self.catalog_path = os.getenv("BIOGLOSS_CATALOG")

        # Debug override
        if _env_flag("BIOGLOSS_DEBUG"):
            self.log_level = "DEBUG"

    @classmethod
    def load_from_file(cls, config_path: str) -> 'BioGlossConfig':
        """Load configuration from YAML file"""
        import yaml

        try:
            with open(config_path, 'r') as f:
                config_data = yaml.safe_load(f) or {}

            annotation = AnnotationConfig(**config_data.get('annotation', {}))
            api = APIConfig(**config_data.get('api', {}))
        except (OSError, TypeError, yaml.YAMLError) as e:
            raise ValueError(f"Failed to load config from {config_path}: {e}")

        return cls(
            annotation=annotation,
            api=api,
            catalog_path=config_data.get('catalog_path'),
            log_level=config_data.get('log_level', 'INFO'),
        )

    def save_to_file(self, config_path: str):
        """Save configuration to YAML file"""
        import yaml

        config_data = {
            'annotation': {
                'dictionary_mode': self.annotation.dictionary_mode,
                'scientific_enabled': self.annotation.scientific_enabled,
                'simple_english_enabled': self.annotation.simple_english_enabled,
            },
            'api': {
                'dict_endpoint': self.api.dict_endpoint,
                'lookup_timeout': self.api.lookup_timeout,
                'max_content_size_mb': self.api.max_content_size_mb,
                'tooltip_offset': self.api.tooltip_offset,
                'tooltip_margin': self.api.tooltip_margin,
            },
            'catalog_path': self.catalog_path,
            'log_level': self.log_level,
        }

        with open(config_path, 'w') as f:
            yaml.dump(config_data, f, default_flow_style=False, indent=2)
