"""
Interview Generator Client Package

Architecture:
- state.py: Shared application state (interviews, interviewing flag)
- notifications.py: One-shot notifications and sinks
- api.py: Checkout route and generation backend calls
- checkout.py: Checkout initiator and form validation
- jobs.py: Job lifecycle controller (start once, poll to terminal state)
- export.py: Export transport and export actions
- delivery.py: Save or open exported files
- session.py: Wires the above into one client session
"""

from .state import ApplicationState
from .notifications import Notification, NotificationSink, LoggingNotificationSink, QueueNotificationSink
from .api import InterviewApiClient
from .checkout import CheckoutInitiator, validate_profile_form
from .jobs import JobLifecycleController, JobPhase
from .export import ExportTransport, InterviewExporter, extract_filename_from_header
from .delivery import FileDelivery
from .session import InterviewGeneratorClient

__all__ = [
    'ApplicationState',
    'Notification',
    'NotificationSink',
    'LoggingNotificationSink',
    'QueueNotificationSink',
    'InterviewApiClient',
    'CheckoutInitiator',
    'validate_profile_form',
    'JobLifecycleController',
    'JobPhase',
    'ExportTransport',
    'InterviewExporter',
    'extract_filename_from_header',
    'FileDelivery',
    'InterviewGeneratorClient',
]
