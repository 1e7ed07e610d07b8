from decimal import Decimal
from typing import List, Dict, Tuple

from chalice import Response

from chalicelib.base_class_entity import PublicEntityBase
from chalicelib.categories import sort_by_display_order
from chalicelib.constants import keys_structure
from chalicelib.constants.keys_structure import public_pk
from chalicelib.constants.status_codes import http200, http201
from chalicelib.menu_items import MenuItem
from chalicelib.utils import auth as utils_auth, data as utils_data, app as utils_app
from chalicelib.utils.data import is_non_empty_str, is_number, now_iso, new_id
from chalicelib.utils.exceptions import ConflictError
from chalicelib.utils.logger import logger


class Blend(PublicEntityBase):
    sk = keys_structure.blends_sk
    sk_prefix = keys_structure.blends_prefix
    record_type = 'blend'

    required_immutable_fields_validation = {
        'id_': lambda x: isinstance(x, str),
        'date_created': lambda x: isinstance(x, str)
    }

    required_mutable_fields_validation = {
        'name_': is_non_empty_str,
        'order_': is_number,
        'is_active': lambda x: isinstance(x, bool)
    }

    optional_fields_validation = {
        'description': lambda x: isinstance(x, str)
    }

    def __init__(self, tenant_id, id_, **kwargs):
        PublicEntityBase.__init__(self, tenant_id, id_)

        self.name_: str = kwargs.get('name_')
        self.description: str = kwargs.get('description')
        self.order_: Decimal = kwargs.get('order_')
        self.is_active: bool = kwargs.get('is_active', True)
        self.date_created: str = kwargs.get('date_created') or now_iso()
        self.date_updated: str = kwargs.get('date_updated') or self.date_created

    def _get_pk_sk(self) -> Tuple[str, str]:
        return public_pk, self.sk.format(blend_id=self.id_)

    def _to_dict(self) -> Dict:
        return {
            'id_': self.id_,
            'tenant_id': self.tenant_id,
            'name_': self.name_,
            'description': self.description,
            'order_': self.order_,
            'is_active': self.is_active,
            'date_created': self.date_created,
            'date_updated': self.date_updated
        }


def get_blend(blend_id: str) -> Blend:
    return Blend.get_by_id(blend_id)


def list_blends() -> List[Blend]:
    return sort_by_display_order(Blend.list_all())


def create_blend(fields: Dict) -> Blend:
    blend = Blend(public_pk, new_id())
    validated_fields = blend._get_validated_fields(fields)
    validated_fields['order_'] = Blend.next_display_order()
    blend.__init__(public_pk, blend.id_, **validated_fields)
    blend._create_db_record()
    return blend


def update_blend(blend_id: str, fields: Dict) -> Blend:
    blend = get_blend(blend_id)
    blend._update_db_record(blend._get_validated_fields(fields))
    return blend


def delete_blend(blend_id: str) -> None:
    get_blend(blend_id)
    menu_items = [item for item in MenuItem.list_all() if blend_id in (item.available_blends or [])]
    if menu_items:
        logger.warning(f"delete_blend ::: {blend_id=} is offered by {len(menu_items)} menu items")
        raise ConflictError('Cannot delete blend that is used by menu items')
    Blend(public_pk, blend_id)._delete_db_record()


@utils_app.request_exception_handler
@utils_app.log_start_finish
@utils_auth.authenticate
@utils_auth.admin_required
def endpoint_get_blends(request) -> Response:
    blends = list_blends()
    return Response(status_code=http200, body={'blends': [blend.to_ui() for blend in blends]})


@utils_app.request_exception_handler
@utils_app.log_start_finish
@utils_auth.authenticate
@utils_auth.admin_required
def endpoint_create_blend(request) -> Response:
    blend = create_blend(utils_data.parse_raw_body(request))
    return Response(status_code=http201, body={'blend': blend.to_ui()})


@utils_app.request_exception_handler
@utils_app.log_start_finish
@utils_auth.authenticate
@utils_auth.admin_required
def endpoint_update_blend(request, blend_id) -> Response:
    blend = update_blend(blend_id, utils_data.parse_raw_body(request))
    return Response(status_code=http200, body={'blend': blend.to_ui()})


@utils_app.request_exception_handler
@utils_app.log_start_finish
@utils_auth.authenticate
@utils_auth.admin_required
def endpoint_delete_blend(request, blend_id) -> Response:
    delete_blend(blend_id)
    return Response(status_code=http200, body={'message': 'Blend deleted successfully', 'id': blend_id})
