"""
Module Package

Knowledge about the attached forwarding module: which variant it is and
how its configuration is edited.

Classes:
    ModuleKind: Recognised module variants
    ModuleProfile: Config fields and chart datasets of a variant
    ModuleTypeDetector: One-shot variant classification
    ConfigEditor: Editable mirror of the module configuration
"""

from .detector import (
    COLLECTOR_PROFILE,
    DISPATCHER_PROFILE,
    ModuleKind,
    ModuleProfile,
    ModuleTypeDetector,
    classify,
    profile_for,
)
from .editor import BoolValue, ConfigEditor, FieldControl, TextValue, config_value

__all__ = [
    'ModuleKind', 'ModuleProfile', 'ModuleTypeDetector', 'classify', 'profile_for',
    'DISPATCHER_PROFILE', 'COLLECTOR_PROFILE',
    'ConfigEditor', 'BoolValue', 'TextValue', 'FieldControl', 'config_value',
]
