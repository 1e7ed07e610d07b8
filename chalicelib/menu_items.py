from decimal import Decimal
from typing import List, Dict, Tuple

from chalice import Response

from chalicelib.base_class_entity import PublicEntityBase
from chalicelib.constants import keys_structure
from chalicelib.constants.constants import MAX_PRICE, MAX_PRICE_DECIMAL_PLACES
from chalicelib.constants.keys_structure import public_pk
from chalicelib.constants.status_codes import http200, http201
from chalicelib.utils import auth as utils_auth, data as utils_data, db as utils_db, app as utils_app
from chalicelib.utils.data import is_non_empty_str, is_number, has_max_decimal_places, now_iso, new_id
from chalicelib.utils.exceptions import ValidationError
from chalicelib.utils.logger import logger


class MenuItem(PublicEntityBase):
    sk = keys_structure.menu_items_sk
    sk_prefix = keys_structure.menu_items_prefix
    record_type = 'menu_item'

    required_immutable_fields_validation = {
        'id_': lambda x: isinstance(x, str),
        'date_created': lambda x: isinstance(x, str)
    }

    required_mutable_fields_validation = {
        'name_': is_non_empty_str,
        'price': lambda x: is_number(x) and 0 < x <= MAX_PRICE and has_max_decimal_places(x, MAX_PRICE_DECIMAL_PLACES),
        'category_id': is_non_empty_str,
        'is_active': lambda x: isinstance(x, bool)
    }

    optional_fields_validation = {
        'description': lambda x: isinstance(x, str),
        'recipe': lambda x: isinstance(x, str),
        'thumbnail': lambda x: isinstance(x, str),
        'is_remarks_required': lambda x: isinstance(x, bool),
        'available_blends': lambda x: isinstance(x, list) and all(isinstance(i, str) for i in x)
    }

    def __init__(self, tenant_id, id_, **kwargs):
        PublicEntityBase.__init__(self, tenant_id, id_)

        self.name_: str = kwargs.get('name_')
        self.price: Decimal = kwargs.get('price')
        self.category_id: str = kwargs.get('category_id')
        self.description: str = kwargs.get('description', '')
        self.recipe: str = kwargs.get('recipe', '')
        self.thumbnail: str = kwargs.get('thumbnail')
        self.is_remarks_required: bool = kwargs.get('is_remarks_required', False)
        self.available_blends: List[str] = kwargs.get('available_blends', [])
        self.is_active: bool = kwargs.get('is_active', True)
        self.date_created: str = kwargs.get('date_created') or now_iso()
        self.date_updated: str = kwargs.get('date_updated') or self.date_created

    def _get_pk_sk(self) -> Tuple[str, str]:
        return public_pk, self.sk.format(menu_id=self.id_)

    def is_available(self) -> bool:
        return self.is_active is True

    def _to_dict(self) -> Dict:
        return {
            'id_': self.id_,
            'tenant_id': self.tenant_id,
            'name_': self.name_,
            'price': self.price,
            'category_id': self.category_id,
            'description': self.description,
            'recipe': self.recipe,
            'thumbnail': self.thumbnail,
            'is_remarks_required': self.is_remarks_required,
            'available_blends': self.available_blends,
            'is_active': self.is_active,
            'date_created': self.date_created,
            'date_updated': self.date_updated
        }


def check_category_exists(category_id: str):
    if utils_db.get_db_item(public_pk, keys_structure.categories_sk.format(category_id=category_id)) is None:
        raise ValidationError(f'Category {category_id} does not exist')


def get_menu_item(menu_id: str) -> MenuItem:
    return MenuItem.get_by_id(menu_id)


def list_menu_items() -> List[MenuItem]:
    """
    Admin view, inactive items included
    """
    return sorted(MenuItem.list_all(), key=lambda item: (item.name_ or '').casefold())


def create_menu_item(fields: Dict) -> MenuItem:
    menu_item = MenuItem(public_pk, new_id())
    menu_item.__init__(public_pk, menu_item.id_, **menu_item._get_validated_fields(fields))
    menu_item._init_db_record()
    menu_item._validate_mandatory_fields()
    check_category_exists(menu_item.category_id)
    menu_item._create_db_record()
    return menu_item


def update_menu_item(menu_id: str, fields: Dict) -> MenuItem:
    menu_item = get_menu_item(menu_id)
    update_dict = menu_item._get_validated_fields(fields)
    if 'category_id' in update_dict:
        check_category_exists(update_dict['category_id'])
    menu_item._update_db_record(update_dict)
    return menu_item


def delete_menu_item(menu_id: str) -> None:
    MenuItem(public_pk, menu_id)._delete_db_record()


@utils_app.request_exception_handler
@utils_app.log_start_finish
@utils_auth.authenticate
@utils_auth.admin_required
def endpoint_get_menu_items(request) -> Response:
    menu_items = list_menu_items()
    logger.info(f"endpoint_get_menu_items ::: returning {len(menu_items)} menu items")
    return Response(status_code=http200, body={'items': [item.to_ui() for item in menu_items]})


@utils_app.request_exception_handler
@utils_app.log_start_finish
@utils_auth.authenticate
@utils_auth.admin_required
def endpoint_create_menu_item(request) -> Response:
    menu_item = create_menu_item(utils_data.parse_raw_body(request))
    return Response(status_code=http201, body={'item': menu_item.to_ui()})


@utils_app.request_exception_handler
@utils_app.log_start_finish
@utils_auth.authenticate
@utils_auth.admin_required
def endpoint_update_menu_item(request, menu_id) -> Response:
    menu_item = update_menu_item(menu_id, utils_data.parse_raw_body(request))
    return Response(status_code=http200, body={'item': menu_item.to_ui()})


@utils_app.request_exception_handler
@utils_app.log_start_finish
@utils_auth.authenticate
@utils_auth.admin_required
def endpoint_delete_menu_item(request, menu_id) -> Response:
    delete_menu_item(menu_id)
    return Response(status_code=http200, body={'message': 'Menu item deleted successfully', 'id': menu_id})
