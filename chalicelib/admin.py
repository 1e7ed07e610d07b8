import re

from chalice import Response

from chalicelib.constants.db_structure import PARTITION_KEY, SORT_KEY
from chalicelib.constants.keys_structure import public_pk
from chalicelib.constants.status_codes import http200
from chalicelib.utils import auth as utils_auth, data as utils_data, db as utils_db, app as utils_app
from chalicelib.utils.auth import Caller
from chalicelib.utils.exceptions import AuthorizationError, ValidationError
from chalicelib.utils.logger import logger

TENANT_ID_PATTERN = re.compile(r'^tenant:[^\s]+$')


def require_admin(caller: Caller) -> None:
    if not utils_auth.is_admin(caller):
        raise AuthorizationError('Admin access required')


def delete_tenant_partition(tenant_id: str) -> int:
    """
    Deletes every record (patrons and orders) of the tenant partition.
    Irreversible and not transactional, a failed run is resumed by running it again.
    :return:
    number of deleted records, 0 when the partition is already empty
    """
    records = utils_db.query_items(tenant_id)
    if not records:
        logger.info(f"delete_tenant_partition ::: nothing to delete for {tenant_id=}")
        return 0
    keys = [utils_db.make_key(record[PARTITION_KEY], record[SORT_KEY]) for record in records]
    deleted_count = utils_db.batch_delete(keys)
    logger.info(f"delete_tenant_partition ::: {deleted_count} records deleted for {tenant_id=}")
    return deleted_count


def reset_tenant_data(caller: Caller) -> int:
    """
    Wipes the caller's own tenant, the tenant id never comes from the request
    """
    require_admin(caller)
    return delete_tenant_partition(caller.tenant_id)


def validate_tenant_id(tenant_id) -> str:
    if not isinstance(tenant_id, str) or not tenant_id.strip():
        raise ValidationError('TenantId is required')
    tenant_id = tenant_id.strip()
    if not TENANT_ID_PATTERN.match(tenant_id):
        raise ValidationError('TenantId must look like tenant:<id>')
    if tenant_id == public_pk:
        raise ValidationError('The shared menu partition cannot be reset')
    return tenant_id


def reset_specified_tenant(caller: Caller, tenant_id) -> int:
    require_admin(caller)
    tenant_id = validate_tenant_id(tenant_id)
    logger.warning(f"reset_specified_tenant ::: AUDIT admin sub={caller.sub} resets {tenant_id=}")
    return delete_tenant_partition(tenant_id)


@utils_app.request_exception_handler
@utils_app.log_start_finish
@utils_auth.authenticate
def endpoint_reset_all(request) -> Response:
    deleted_count = reset_tenant_data(request.auth_result['caller'])
    if deleted_count == 0:
        return Response(status_code=http200, body={'message': 'No orders found to reset', 'deletedCount': 0})
    return Response(status_code=http200, body={
        'message': 'All orders and patrons reset successfully',
        'deletedCount': deleted_count
    })


@utils_app.request_exception_handler
@utils_app.log_start_finish
@utils_auth.authenticate
def endpoint_reset_tenant(request) -> Response:
    tenant_id = utils_data.parse_raw_body(request).get('tenantId')
    deleted_count = reset_specified_tenant(request.auth_result['caller'], tenant_id)
    if deleted_count == 0:
        return Response(status_code=http200, body={'message': 'No data found to reset', 'deletedCount': 0})
    return Response(status_code=http200, body={
        'message': 'User data reset successfully',
        'deletedCount': deleted_count,
        'tenantId': tenant_id.strip()
    })
