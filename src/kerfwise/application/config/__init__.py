"""Configuration loading for kerfwise input files.

Example:
    ```python
    from pathlib import Path
    from kerfwise.application.config import load_nesting_job, parts_from_job

    job = load_nesting_job(Path("job.json"))
    parts = parts_from_job(job)
    ```
"""

from .adapters import (
    catalog_from_config,
    cost_model_from_job,
    feature_from_config,
    features_from_config,
    options_from_job,
    parts_from_job,
    paths_from_config,
    sheets_from_job,
    snapshot_from_config,
)
from .loader import (
    ConfigError,
    load_catalog_config,
    load_config_from_dict,
    load_design_config,
    load_nesting_job,
)
from .schemas import (
    SUPPORTED_VERSIONS,
    CatalogConfig,
    DesignConfig,
    NestingJobConfig,
)

__all__ = [
    "CatalogConfig",
    "ConfigError",
    "DesignConfig",
    "NestingJobConfig",
    "SUPPORTED_VERSIONS",
    "catalog_from_config",
    "cost_model_from_job",
    "feature_from_config",
    "features_from_config",
    "load_catalog_config",
    "load_config_from_dict",
    "load_design_config",
    "load_nesting_job",
    "options_from_job",
    "parts_from_job",
    "paths_from_config",
    "sheets_from_job",
    "snapshot_from_config",
]
