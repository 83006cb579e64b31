"""Alert delivery channels."""

from chargealert.notifiers.base import CompositeNotifier, LoggingNotifier, Notifier, close_notifier
from chargealert.notifiers.desktop import DesktopNotifier
from chargealert.notifiers.mqtt import MqttNotifier
from chargealert.notifiers.webhook import WebhookNotifier

__all__ = [
    "CompositeNotifier",
    "DesktopNotifier",
    "LoggingNotifier",
    "MqttNotifier",
    "Notifier",
    "WebhookNotifier",
    "close_notifier",
]
