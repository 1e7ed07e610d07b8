import functools
from typing import Callable, Dict, Sequence

from chalice import Response, CORSConfig

from chalicelib.constants.constants import GENERIC_ERROR_MESSAGE
from chalicelib.constants.status_codes import http500
from chalicelib.utils.exceptions import ServiceError, MethodNotAllowedError
from chalicelib.utils.logger import logger, log_exception

API_METHODS = ('GET', 'POST', 'PATCH', 'DELETE')


class SharedCORSConfig(CORSConfig):
    """
    Advertises one method list on every route instead of the methods registered for the path.
    Chalice merges these headers into the deployed preflight response and into every route response.
    """
    def __init__(self, allow_methods: Sequence[str] = (*API_METHODS, 'OPTIONS'), **kwargs):
        CORSConfig.__init__(self, **kwargs)
        self.allow_methods = ','.join(allow_methods)

    def get_access_control_headers(self) -> Dict[str, str]:
        headers = CORSConfig.get_access_control_headers(self)
        headers['Access-Control-Allow-Methods'] = self.allow_methods
        return headers


def error_response(error: Exception, msg: str = "", status_code: int = 400, code: str = None, *args, **kwargs):
    log_exception(error=error, msg=msg, status_code=status_code, *args, **kwargs)
    body = {'message': str(error) if status_code < http500 else GENERIC_ERROR_MESSAGE}
    if code:
        body['code'] = code
    return Response(
        body=body,
        status_code=status_code,
        headers={'Content-Type': 'application/json'}
    )


def request_exception_handler(func: Callable):
    @functools.wraps(func)
    def result(*args, **kwargs):
        try:
            logger.info(f'Calling function {func.__name__}')
            return func(*args, **kwargs)
        except ServiceError as service_error:
            return error_response(
                error=service_error,
                msg=f'function = {func.__name__} , error = {service_error}',
                status_code=service_error.STATUS_CODE,
                code=service_error.CODE)
        except Exception as exception:
            return error_response(
                error=exception,
                msg=f'function = {func.__name__}, error = {exception}',
                status_code=http500)
    return result


def log_start_finish(func: Callable):
    @functools.wraps(func)
    def result(*args, **kwargs):
        logger.info(f'{func.__name__} ::: started')
        response = func(*args, **kwargs)
        logger.info(f'{func.__name__} ::: finished')
        return response
    return result


@request_exception_handler
def endpoint_method_not_allowed(request) -> Response:
    raise MethodNotAllowedError(f'Method {request.method} is not allowed on {request.context.get("resourcePath")}')
