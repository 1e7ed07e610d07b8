from decimal import Decimal
from typing import List, Dict, Tuple

from chalice import Response

from chalicelib.base_class_entity import PublicEntityBase
from chalicelib.constants import keys_structure
from chalicelib.constants.keys_structure import public_pk
from chalicelib.constants.status_codes import http200, http201
from chalicelib.menu_items import MenuItem
from chalicelib.utils import auth as utils_auth, data as utils_data, app as utils_app
from chalicelib.utils.data import is_non_empty_str, is_number, now_iso, new_id
from chalicelib.utils.exceptions import ConflictError
from chalicelib.utils.logger import logger


class Category(PublicEntityBase):
    sk = keys_structure.categories_sk
    sk_prefix = keys_structure.categories_prefix
    record_type = 'category'

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
        'name_en': lambda x: isinstance(x, str),
        'description': lambda x: isinstance(x, str),
        'thumbnail': lambda x: isinstance(x, str),
        'image_url': lambda x: isinstance(x, str)
    }

    def __init__(self, tenant_id, id_, **kwargs):
        PublicEntityBase.__init__(self, tenant_id, id_)

        self.name_: str = kwargs.get('name_')
        self.name_en: str = kwargs.get('name_en')
        self.description: str = kwargs.get('description')
        self.thumbnail: str = kwargs.get('thumbnail')
        self.image_url: str = kwargs.get('image_url')
        self.order_: Decimal = kwargs.get('order_')
        self.is_active: bool = kwargs.get('is_active', True)
        self.date_created: str = kwargs.get('date_created') or now_iso()
        self.date_updated: str = kwargs.get('date_updated') or self.date_created

    def _get_pk_sk(self) -> Tuple[str, str]:
        return public_pk, self.sk.format(category_id=self.id_)

    def _to_dict(self) -> Dict:
        return {
            'id_': self.id_,
            'tenant_id': self.tenant_id,
            'name_': self.name_,
            'name_en': self.name_en,
            'description': self.description,
            'thumbnail': self.thumbnail,
            'image_url': self.image_url,
            'order_': self.order_,
            'is_active': self.is_active,
            'date_created': self.date_created,
            'date_updated': self.date_updated
        }

    def to_ui(self) -> Dict:
        # admin screens still read the legacy visible flag
        return {**self._to_ui(), 'visible': self.is_active}


def sort_by_display_order(entities: List) -> List:
    return sorted(entities, key=lambda entity: (entity.order_ if is_number(entity.order_) else 0,
                                                (entity.name_ or '').casefold()))


def get_category(category_id: str) -> Category:
    return Category.get_by_id(category_id)


def list_categories() -> List[Category]:
    return sort_by_display_order(Category.list_all())


def create_category(fields: Dict) -> Category:
    category = Category(public_pk, new_id())
    validated_fields = category._get_validated_fields(fields)
    validated_fields['order_'] = Category.next_display_order()
    category.__init__(public_pk, category.id_, **validated_fields)
    category._create_db_record()
    return category


def update_category(category_id: str, fields: Dict) -> Category:
    category = get_category(category_id)
    category._update_db_record(category._get_validated_fields(fields))
    return category


def delete_category(category_id: str) -> None:
    get_category(category_id)
    menu_items = [item for item in MenuItem.list_all() if item.category_id == category_id]
    if menu_items:
        logger.warning(f"delete_category ::: {category_id=} is referenced by {len(menu_items)} menu items")
        raise ConflictError('Cannot delete category that contains menu items')
    Category(public_pk, category_id)._delete_db_record()


@utils_app.request_exception_handler
@utils_app.log_start_finish
@utils_auth.authenticate
@utils_auth.admin_required
def endpoint_get_categories(request) -> Response:
    categories = list_categories()
    return Response(status_code=http200, body={'categories': [category.to_ui() for category in categories]})


@utils_app.request_exception_handler
@utils_app.log_start_finish
@utils_auth.authenticate
@utils_auth.admin_required
def endpoint_create_category(request) -> Response:
    category = create_category(utils_data.parse_raw_body(request))
    return Response(status_code=http201, body={'category': category.to_ui()})


@utils_app.request_exception_handler
@utils_app.log_start_finish
@utils_auth.authenticate
@utils_auth.admin_required
def endpoint_update_category(request, category_id) -> Response:
    category = update_category(category_id, utils_data.parse_raw_body(request))
    return Response(status_code=http200, body={'category': category.to_ui()})


@utils_app.request_exception_handler
@utils_app.log_start_finish
@utils_auth.authenticate
@utils_auth.admin_required
def endpoint_delete_category(request, category_id) -> Response:
    delete_category(category_id)
    return Response(status_code=http200, body={'message': 'Category deleted successfully', 'id': category_id})
