# runegather/gathering/__init__.py
from .matcher import matches
from .discovery import DiscoveryGateway, DiscoveryResult, LocalDiscoveryGateway
from .gather_timer import GatherState, GatherTimer
from .session import GatherSession
from .auto_gather import AutoGatherPhase, AutoGatherScheduler, AutoGatherState, AutoGatherStats
from .controller import GatherSessionController

__all__ = [
    "matches",
    "DiscoveryGateway", "DiscoveryResult", "LocalDiscoveryGateway",
    "GatherState", "GatherTimer",
    "GatherSession",
    "AutoGatherPhase", "AutoGatherScheduler", "AutoGatherState", "AutoGatherStats",
    "GatherSessionController",
]
