"""
envtracing - Resource Management
OpenTelemetry resource creation from service identity, tags and sampler settings
"""

from typing import Dict, Iterable, Tuple, Union
from opentelemetry.sdk.resources import Resource, SERVICE_NAME

AttributeValue = Union[str, bool, int, float]

def get_sampler_resource_attributes(
    sampler_type: str,
    sampler_param: float,
    sampling_server_url: str
) -> Dict[str, AttributeValue]:
    """Attributes describing the sampler choice itself"""
    return {
        "samplerType": sampler_type,
        "samplerParam": float(sampler_param),
        "samplingServerURL": sampling_server_url,
    }

def create_resource(
    service_name: str,
    attributes: Iterable[Tuple[str, AttributeValue]] = ()
) -> Resource:
    """Create the resource descriptor attached to every span of the process.

    Attributes are merged in order, so a later duplicate key wins over an
    earlier one. ``service.name`` is set last and cannot be overridden by tags.
    """

    merged: Dict[str, AttributeValue] = {}
    for key, value in attributes:
        merged[key] = value
    merged[SERVICE_NAME] = service_name

    return Resource.create(merged)
