"""Common error handling for all services"""

class ServiceError(Exception):
    """Base exception for all service errors"""
    pass

class NotificationError(ServiceError):
    """Raised when a notification sink cannot deliver its cue"""
    pass

class VisibilityError(ServiceError):
    """Raised when no visibility signal is available for the monitored surface"""
    pass

class SchedulerError(ServiceError):
    """Base exception for periodic scheduling errors"""
    pass

class RunnerError(ServiceError):
    """Base exception for service runner errors"""
    pass
