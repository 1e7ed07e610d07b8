import functools
import os
from typing import Dict, NamedTuple, Optional, Tuple

from chalice.app import Request

from chalicelib.constants import keys_structure
from chalicelib.constants.constants import PUBLIC_TENANT, DEFAULT_ADMIN_GROUP
from chalicelib.utils.exceptions import AuthorizationError
from chalicelib.utils.logger import logger, log_request, set_request_id

GROUPS_CLAIM = 'cognito:groups'


class Caller(NamedTuple):
    sub: str
    email: Optional[str]
    groups: Tuple[str, ...]

    @property
    def tenant_id(self) -> str:
        return tenant_id_for(self.sub)


def admin_group() -> str:
    return os.environ.get('ADMIN_GROUP', DEFAULT_ADMIN_GROUP)


def tenant_id_for(sub: str) -> str:
    """
    Tenant partition of the authenticated subject.
    The public menu partition can never be claimed as a tenant.
    """
    if not isinstance(sub, str) or not sub.strip():
        raise AuthorizationError('Authenticated subject is required')
    if sub == PUBLIC_TENANT:
        raise AuthorizationError('Subject is not allowed to own a tenant')
    return keys_structure.tenant_pk.format(tenant_key=sub)


def parse_groups(raw_groups) -> Tuple[str, ...]:
    """
    API Gateway passes cognito:groups as a comma separated string,
    a locally decoded token keeps it as a list
    """
    if not raw_groups:
        return ()
    if isinstance(raw_groups, str):
        raw_groups = raw_groups.strip('[]').split(',')
    return tuple(str(group).strip() for group in raw_groups if str(group).strip())


def caller_from_claims(claims: Dict) -> Caller:
    sub = (claims or {}).get('sub')
    if not sub:
        raise AuthorizationError('Authentication required')
    return Caller(sub=sub, email=claims.get('email'), groups=parse_groups(claims.get(GROUPS_CLAIM)))


def is_admin(caller: Caller) -> bool:
    return admin_group() in caller.groups


def get_claims(request: Request) -> Dict:
    context = request.context or {}
    return (context.get('authorizer') or {}).get('claims') or {}


def authenticate(func):
    """
    Wrapper for endpoint functions which require user's authentication,
    the first positional argument has to be the chalice request
    """

    @functools.wraps(func)
    def result_auth(*args, **kwargs):
        request = args[0]
        set_request_id(request)
        log_request(request)
        caller = caller_from_claims(get_claims(request))
        setattr(request, 'auth_result', {'caller': caller, 'tenant_id': caller.tenant_id})
        logger.info(f'authenticate ::: SUCCESS, func.__name__ {func.__name__}, sub={caller.sub}')
        return func(*args, **kwargs)

    return result_auth


def admin_required(func):
    """
    Wrapper for admin endpoints, should be applied under authenticate
    """

    @functools.wraps(func)
    def result_admin(*args, **kwargs):
        caller: Caller = args[0].auth_result['caller']
        if not is_admin(caller):
            raise AuthorizationError('Admin access required')
        return func(*args, **kwargs)

    return result_admin
