"""Async hosting for the hold'em engine: decision sources, a hand runner and a websocket table."""

from .decisions import (
    DecisionSource,
    HeuristicDecisionSource,
    QueueDecisionSource,
    RemoteDecisionSource,
    request_decision,
)
from .runner import Seat, TableRunner
from .server import TableServer

__all__ = [
    "DecisionSource",
    "HeuristicDecisionSource",
    "QueueDecisionSource",
    "RemoteDecisionSource",
    "request_decision",
    "Seat",
    "TableRunner",
    "TableServer",
]
