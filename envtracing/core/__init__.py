"""
envtracing - Core Components
Environment settings and resource management
"""

from .settings import TracingSettings
from .resource_manager import create_resource, get_sampler_resource_attributes

__all__ = [
    'TracingSettings',
    'create_resource',
    'get_sampler_resource_attributes'
]
