"""
Network Mount Module - SRP Compliant Implementation

Components:
- MountSupervisor: mount, health-check and remount-on-failure for one share
- BaseMounter: Abstract base class for platform operations
- LinuxCifsMounter: Linux mount.cifs implementation
- PlatformFactory: Platform detection and factory
- MountProbe / ReachabilityChecker: bounded health checks
- MountErrorClassifier: maps mount failures to error kinds

Each class has a single, well-defined responsibility.
"""

from .mount_supervisor import MountSupervisor
from .base_mounter import BaseMounter
from .platform_factory import PlatformFactory, UnsupportedPlatformError
from .mount_error_classifier import MountErrorClassifier
from .mount_probe import MountProbe
from .reachability import ReachabilityChecker

__all__ = [
    "MountSupervisor",
    "BaseMounter",
    "PlatformFactory",
    "UnsupportedPlatformError",
    "MountErrorClassifier",
    "MountProbe",
    "ReachabilityChecker",
]
