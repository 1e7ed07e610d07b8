from typing import Tuple, List, Dict

from chalice import Response

from chalicelib.base_class_entity import EntityBase
from chalicelib.constants import keys_structure
from chalicelib.constants.constants import MAX_SORT_KEY_BYTES
from chalicelib.constants.db_structure import GSI1_PK, GSI1_SK
from chalicelib.constants.status_codes import http200, http201
from chalicelib.utils import auth as utils_auth, data as utils_data, db as utils_db, app as utils_app
from chalicelib.utils.data import is_non_empty_str, now_iso, new_id
from chalicelib.utils.exceptions import ValidationError
from chalicelib.utils.logger import logger


class Patron(EntityBase):
    sk = keys_structure.patrons_sk
    record_type = 'patron'

    required_immutable_fields_validation = {
        'id_': lambda x: isinstance(x, str),
        'tenant_id': lambda x: isinstance(x, str),
        'date_created': lambda x: isinstance(x, str)
    }

    required_mutable_fields_validation = {
        'name_': is_non_empty_str
    }

    def __init__(self, tenant_id, id_, **kwargs):
        EntityBase.__init__(self, tenant_id, id_)

        name_ = kwargs.get('name_')
        self.name_: str = name_.strip() if isinstance(name_, str) else name_
        self.date_created: str = kwargs.get('date_created') or now_iso()
        self.date_updated: str = kwargs.get('date_updated') or self.date_created

    def _get_pk_sk(self) -> Tuple[str, str]:
        return self.tenant_id, self.sk.format(patron_id=self.id_)

    def _index_attributes(self) -> Dict:
        # gsi1 lists the patrons of a tenant ordered by name
        return {
            GSI1_PK: keys_structure.gsi_tenant_patrons_pk.format(tenant_id=self.tenant_id),
            GSI1_SK: self.name_
        }

    def _to_dict(self) -> Dict:
        return {
            'id_': self.id_,
            'tenant_id': self.tenant_id,
            'name_': self.name_,
            'date_created': self.date_created,
            'date_updated': self.date_updated
        }


def validate_name(name) -> str:
    if not is_non_empty_str(name):
        raise ValidationError('Name is required')
    name = name.strip()
    if len(name.encode('utf-8')) > MAX_SORT_KEY_BYTES:
        raise ValidationError(f'Name must not exceed {MAX_SORT_KEY_BYTES} bytes')
    return name


def get_patron(tenant_id: str, patron_id: str) -> Patron:
    """
    Raises NotFoundError when the patron does not exist under this tenant
    """
    return Patron.init_get_by_id(tenant_id, patron_id)


def list_patrons(tenant_id: str) -> List[Patron]:
    records = utils_db.query_items(
        keys_structure.gsi_tenant_patrons_pk.format(tenant_id=tenant_id),
        index_name=utils_db.gsi1_name()
    )
    patrons = [Patron.from_db_record(record) for record in records]
    return sorted(patrons, key=lambda patron: (patron.name_.casefold(), patron.name_))


def create_patron(tenant_id: str, name) -> Patron:
    patron = Patron(tenant_id, new_id(), name_=validate_name(name))
    patron._create_db_record()
    return patron


def update_patron(tenant_id: str, patron_id: str, name) -> Patron:
    name = validate_name(name)
    patron = get_patron(tenant_id, patron_id)
    patron._update_db_record({'name_': name, GSI1_SK: name})
    return patron


@utils_app.request_exception_handler
@utils_app.log_start_finish
@utils_auth.authenticate
def endpoint_get_patrons(request) -> Response:
    patrons = list_patrons(request.auth_result['tenant_id'])
    logger.info(f"endpoint_get_patrons ::: returning {len(patrons)} patrons")
    return Response(status_code=http200, body={'patrons': [patron.to_ui() for patron in patrons]})


@utils_app.request_exception_handler
@utils_app.log_start_finish
@utils_auth.authenticate
def endpoint_create_patron(request) -> Response:
    request_body = utils_data.parse_raw_body(request)
    patron = create_patron(request.auth_result['tenant_id'], request_body.get('name'))
    return Response(status_code=http201, body={'patron': patron.to_ui()})


@utils_app.request_exception_handler
@utils_app.log_start_finish
@utils_auth.authenticate
def endpoint_update_patron(request, patron_id) -> Response:
    request_body = utils_data.parse_raw_body(request)
    patron = update_patron(request.auth_result['tenant_id'], patron_id, request_body.get('name'))
    return Response(status_code=http200, body={'patron': patron.to_ui()})
