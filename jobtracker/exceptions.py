"""
Custom exceptions for the job tracker application.
Provides specific exception types for better error handling and recovery.
"""


class JobTrackerException(Exception):
    """Base exception for job tracker application"""
    pass


class ApplicationNotFoundException(JobTrackerException):
    """Raised when an application record is not found"""
    def __init__(self, application_id: int):
        self.application_id = application_id
        super().__init__(f"Application with ID {application_id} not found")


class DuplicateUserException(JobTrackerException):
    """Raised when registering an email that already exists"""
    def __init__(self, email: str):
        self.email = email
        super().__init__(f"User with email {email} already exists")


class InvalidTimeFormatException(JobTrackerException):
    """Raised when time format is invalid"""
    def __init__(self, time_str: str):
        self.time_str = time_str
        super().__init__(f"Invalid time format: {time_str}. Expected HH:MM")


class RankTableException(JobTrackerException):
    """Raised when a rank table is misconfigured"""
    def __init__(self, message: str):
        super().__init__(f"Invalid rank table: {message}")


class DatabaseException(JobTrackerException):
    """Raised when database operations fail"""
    def __init__(self, operation: str, details: str):
        self.operation = operation
        self.details = details
        super().__init__(f"Database {operation} failed: {details}")


class ValidationException(JobTrackerException):
    """Raised when data validation fails"""
    def __init__(self, field: str, message: str):
        self.field = field
        super().__init__(f"Validation error for {field}: {message}")
