"""dotstate: observable nested state addressed by dot-paths."""

from importlib.metadata import version as _version

__version__ = _version("dotstate")

from dotstate.options import Options, TransformType, UNSET
from dotstate.subscriptions import SubscriptionHandle
from dotstate.state import State
# textual NOT auto-imported — opt-in only

__all__ = [
    "State",
    "Options",
    "TransformType",
    "UNSET",
    "SubscriptionHandle",
]
