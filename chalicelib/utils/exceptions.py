from chalicelib.constants.status_codes import http400, http403, http404, http405, http500

__all__ = ["ServiceError", "ValidationError", "NotFoundError", "AuthorizationError", "ConflictError",
           "InfrastructureError", "MethodNotAllowedError"]


class ServiceError(Exception):
    STATUS_CODE = http500
    CODE = 'INTERNAL_ERROR'
    LEVEL = 'exception'


# Validations exceptions
class ValidationError(ServiceError):
    STATUS_CODE = http400
    CODE = 'VALIDATION_ERROR'
    LEVEL = 'warning'


# DynamoDB exceptions
class NotFoundError(ServiceError):
    STATUS_CODE = http404
    CODE = 'NOT_FOUND'
    LEVEL = 'warning'


class AuthorizationError(ServiceError):
    STATUS_CODE = http403
    CODE = 'FORBIDDEN'
    LEVEL = 'warning'


class MethodNotAllowedError(ServiceError):
    STATUS_CODE = http405
    CODE = 'METHOD_NOT_ALLOWED'
    LEVEL = 'warning'


# Referential guard on delete, reported as a bad request
class ConflictError(ServiceError):
    STATUS_CODE = http400
    CODE = 'CONFLICT'
    LEVEL = 'warning'


# Store or notification sink failure, detail stays in the logs
class InfrastructureError(ServiceError):
    STATUS_CODE = http500
    CODE = 'INFRASTRUCTURE_ERROR'
    LEVEL = 'exception'
