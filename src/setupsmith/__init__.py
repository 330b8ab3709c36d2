"""SetupSmith single-host provisioning."""

from .document import load
from .provisioner import Provisioner

__all__ = ["Provisioner", "load"]
