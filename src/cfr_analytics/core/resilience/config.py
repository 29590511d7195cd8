"""Endpoint-specific resilience configurations.

Maps endpoint names to tuned ResilienceConfig instances and provides a
lookup function with sensible defaults.
"""

from cfr_analytics.core.resilience.models import ResilienceConfig

SOURCE_CONFIGS: dict[str, ResilienceConfig] = {
    "overview": ResilienceConfig(max_retries=2, base_delay=0.5, max_delay=8.0),
    # Bulk download is a side-effecting POST; never replay it
    "download": ResilienceConfig(max_retries=0),
    "regulation_content": ResilienceConfig(max_retries=2, base_delay=0.5, max_delay=8.0),
    "regulation_history": ResilienceConfig(max_retries=2, base_delay=0.5, max_delay=8.0),
    "word_count": ResilienceConfig(max_retries=1, base_delay=0.5, max_delay=4.0),
    "redundancy": ResilienceConfig(max_retries=1, base_delay=0.5, max_delay=4.0),
    "historical_changes": ResilienceConfig(max_retries=1, base_delay=0.5, max_delay=4.0),
    # Site analysis is slow server-side; a retry would double the wait
    "site_analysis": ResilienceConfig(max_retries=0),
    "health": ResilienceConfig(max_retries=0),
}


def get_source_config(source_name: str) -> ResilienceConfig:
    """Get resilience configuration for an endpoint.

    Args:
        source_name: Name of the endpoint (e.g., 'overview', 'redundancy')

    Returns:
        Endpoint-specific config or default config if name not found
    """
    return SOURCE_CONFIGS.get(source_name, ResilienceConfig())
