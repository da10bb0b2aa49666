"""
Configuration module for the timesheet engine.
"""
from .effort_policy import EffortPolicy
from .settings import (
    TimesheetEngineConfig,
    get_config,
    load_config,
    reload_config
)

__all__ = [
    'EffortPolicy',
    'TimesheetEngineConfig',
    'get_config',
    'load_config',
    'reload_config'
]
