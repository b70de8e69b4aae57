"""
Broker Module
-----------
Holds requests waiting for a human decision and publishes UI notifications.
"""
from geobroker.broker.confirmation import ConfirmationBroker, Outcome, Resolution, WaitHandle
from geobroker.broker.events import EventBuffer, EventBus

__all__ = ["ConfirmationBroker", "Outcome", "Resolution", "WaitHandle", "EventBus", "EventBuffer"]
