"""
Stitching configuration management.

Settings live in the ``stitch`` section of ``tracestitch.config.yaml``;
command-line flags override them.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

import yaml

from tracestitch.utils.exceptions import ConfigError

DEFAULT_CONFIG_FILE = "tracestitch.config.yaml"


@dataclass
class StitchConfig:
    """Configuration for a stitch run."""

    # Return the tree with warnings instead of failing on them
    lenient: bool = False
    check_addresses: bool = True
    enrich: bool = True
    abi_paths: List[str] = field(default_factory=list)
    signatures_file: Optional[str] = None

    @classmethod
    def from_config_file(cls, config_file: str = DEFAULT_CONFIG_FILE) -> "StitchConfig":
        """Load configuration from a config file."""
        if not Path(config_file).exists():
            # Return default config if file doesn't exist
            return cls()

        try:
            with open(config_file, 'r') as f:
                config_data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {config_file}: {e}", config_file=config_file)

        if not isinstance(config_data, dict):
            raise ConfigError(f"{config_file} must contain a mapping", config_file=config_file)
        stitch_config = config_data.get('stitch') or {}
        if not isinstance(stitch_config, dict):
            raise ConfigError(f"'stitch' section of {config_file} must be a mapping", config_file=config_file)

        abi_paths = stitch_config.get('abi_paths') or []
        if isinstance(abi_paths, str):
            abi_paths = [abi_paths]

        return cls(
            lenient=bool(stitch_config.get('lenient', False)),
            check_addresses=bool(stitch_config.get('check_addresses', True)),
            enrich=bool(stitch_config.get('enrich', True)),
            abi_paths=list(abi_paths),
            signatures_file=stitch_config.get('signatures_file'),
        )

    def save_to_config_file(self, config_file: str = DEFAULT_CONFIG_FILE):
        """Save configuration, keeping any other sections of the file."""
        config_data = {}
        if Path(config_file).exists():
            with open(config_file, 'r') as f:
                config_data = yaml.safe_load(f) or {}

        config_data['stitch'] = {
            'lenient': self.lenient,
            'check_addresses': self.check_addresses,
            'enrich': self.enrich,
            'abi_paths': list(self.abi_paths),
            'signatures_file': self.signatures_file,
        }

        with open(config_file, 'w') as f:
            yaml.dump(config_data, f, default_flow_style=False, sort_keys=False)
