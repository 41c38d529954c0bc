"""Application configuration."""
import logging
import math
import os
from dataclasses import dataclass
from typing import Optional

from explain_k8s.introspection.enrichment import FailurePolicy

logger = logging.getLogger(__name__)

_TRUE_VALUES = {"1", "t", "true", "yes", "y", "on"}
_FALSE_VALUES = {"0", "f", "false", "no", "n", "off"}


def _env_bool(name: str, default: bool) -> bool:
    """Read a boolean environment variable, falling back on bad values."""
    value = os.getenv(name)
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    logger.warning(
        f'Value for environment variable "{name}" was not a valid boolean. '
        f'Defaulting to "{default}" instead of provided value, "{value}".'
    )
    return default


def _env_number(name: str, default, cast=int):
    """Read a positive, finite numeric environment variable, falling back on bad values."""
    value = os.getenv(name)
    if value is None:
        return default
    try:
        parsed = cast(value)
    except ValueError:
        parsed = None
    if parsed is None or not math.isfinite(parsed) or parsed <= 0:
        logger.warning(
            f'Value for environment variable "{name}" was not a valid positive number. '
            f'Defaulting to "{default}" instead of provided value, "{value}".'
        )
        return default
    return parsed


@dataclass
class ExplainerConfig:
    """Settings for querying and enriching schemas."""

    kubectl_path: str = "kubectl"
    context: Optional[str] = None
    query_timeout: float = 30.0
    max_workers: int = 8
    failure_policy: FailurePolicy = FailurePolicy.TOLERANT
    description_skip_lines: int = 2

    @classmethod
    def from_env(cls, parallel_mode: bool = True) -> "ExplainerConfig":
        """Load config from environment variables."""
        policy_value = os.getenv("FAILURE_POLICY", FailurePolicy.TOLERANT.value)
        try:
            policy = FailurePolicy(policy_value.strip().lower())
        except ValueError:
            logger.warning(
                f'Value for environment variable "FAILURE_POLICY" must be one of '
                f'{[p.value for p in FailurePolicy]}. Defaulting to "{FailurePolicy.TOLERANT.value}".'
            )
            policy = FailurePolicy.TOLERANT

        max_workers = _env_number("MAX_CONCURRENT_QUERIES", 8)
        if not parallel_mode:
            max_workers = 1

        skip_lines = os.getenv("DESCRIPTION_SKIP_LINES")
        if skip_lines is not None and not skip_lines.strip().isdigit():
            logger.warning(
                f'Value for environment variable "DESCRIPTION_SKIP_LINES" was not a valid count. '
                f'Defaulting to "2" instead of provided value, "{skip_lines}".'
            )
            skip_lines = None

        return cls(
            kubectl_path=os.getenv("KUBECTL_PATH", "kubectl"),
            context=os.getenv("KUBECTL_CONTEXT") or None,
            query_timeout=_env_number("QUERY_TIMEOUT", 30.0, cast=float),
            max_workers=max_workers,
            failure_policy=policy,
            description_skip_lines=int(skip_lines) if skip_lines is not None else 2,
        )


@dataclass
class AppConfig:
    """Application configuration."""

    verbose_mode: bool = True
    resource_names_file: str = "./in/resourceNames.txt"
    output_file: str = "./out/output.json"
    parallel_mode: bool = True
    explainer: ExplainerConfig = None

    def __post_init__(self):
        """Initialize default values."""
        if self.explainer is None:
            self.explainer = ExplainerConfig()
        if not self.parallel_mode:
            self.explainer.max_workers = 1

    @classmethod
    def from_env(cls) -> "AppConfig":
        """Load config from environment variables."""
        parallel_mode = _env_bool("PARALLEL_MODE", True)

        output_file = os.getenv("OUTPUT_FILE_LOCATION", "./out/output.json")
        if not output_file.endswith(".json"):
            logger.info(
                f'OUTPUT_FILE_LOCATION "{output_file}" has no ".json" suffix. '
                f"The output will still be in JSON format."
            )

        return cls(
            verbose_mode=_env_bool("VERBOSE_MODE", True),
            resource_names_file=os.getenv("RESOURCE_NAMES_FILE_LOCATION", "./in/resourceNames.txt"),
            output_file=output_file,
            parallel_mode=parallel_mode,
            explainer=ExplainerConfig.from_env(parallel_mode=parallel_mode),
        )
