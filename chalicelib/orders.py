from decimal import Decimal
from typing import Tuple, List, Dict, Optional

from chalice import Response

from chalicelib.base_class_entity import EntityBase
from chalicelib.blends import Blend
from chalicelib.constants import keys_structure
from chalicelib.constants.constants import ORDER_STATUSES, ORDER_STATUS_PENDING, MAX_ORDER_QUANTITY
from chalicelib.constants.db_structure import GSI2_PK, GSI2_SK
from chalicelib.constants.keys_structure import public_pk
from chalicelib.constants.status_codes import http200, http201
from chalicelib.constants.substitute_keys import from_db
from chalicelib.menu_items import MenuItem
from chalicelib.patrons import get_patron
from chalicelib.utils import auth as utils_auth, \
    data as utils_data, \
    db as utils_db, \
    app as utils_app, \
    notifications as utils_notifications
from chalicelib.utils.data import is_non_empty_str, is_number, now_iso, new_id, to_decimal
from chalicelib.utils.exceptions import ValidationError
from chalicelib.utils.logger import logger


class Order(EntityBase):
    """
    Immutable apart from status_.
    Patron name and every line's menu name, price and recipe are copied at creation,
    later menu or patron edits never change a stored order.
    """
    sk = keys_structure.orders_sk
    record_type = 'order'

    required_immutable_fields_validation = {
        'id_': lambda x: isinstance(x, str),
        'tenant_id': lambda x: isinstance(x, str),
        'patron_id': is_non_empty_str,
        'patron_name': lambda x: isinstance(x, str),
        'items': lambda x: isinstance(x, list) and len(x) > 0,
        'total': is_number,
        'date_created': lambda x: isinstance(x, str)
    }

    required_mutable_fields_validation = {
        'status_': lambda x: x in ORDER_STATUSES
    }

    def __init__(self, tenant_id, id_, **kwargs):
        EntityBase.__init__(self, tenant_id, id_)

        self.patron_id: str = kwargs.get('patron_id')
        self.patron_name: str = kwargs.get('patron_name')
        self.items: List[Dict] = kwargs.get('items', [])
        self.total: Decimal = kwargs.get('total')
        self.status_: str = kwargs.get('status_', ORDER_STATUS_PENDING)
        self.date_created: str = kwargs.get('date_created') or now_iso()

    def _get_pk_sk(self) -> Tuple[str, str]:
        return self.tenant_id, self.sk.format(order_id=self.id_)

    def _index_attributes(self) -> Dict:
        # gsi2 holds the order history of one patron ordered by creation time
        return {
            GSI2_PK: keys_structure.gsi_patron_orders_pk.format(tenant_id=self.tenant_id, patron_id=self.patron_id),
            GSI2_SK: self.date_created
        }

    def _to_dict(self) -> Dict:
        return {
            'id_': self.id_,
            'tenant_id': self.tenant_id,
            'patron_id': self.patron_id,
            'patron_name': self.patron_name,
            'items': self.items,
            'total': self.total,
            'status_': self.status_,
            'date_created': self.date_created
        }

    def to_ui(self) -> Dict:
        order = self._to_ui()
        lines = [dict(line) for line in order.get('items', [])]
        utils_data.substitute_records(lines, from_db)
        order['items'] = lines
        return order


def validate_order_request(patron_id, requested_items) -> None:
    if not is_non_empty_str(patron_id):
        raise ValidationError('PatronId and items are required')
    if not isinstance(requested_items, list) or len(requested_items) == 0:
        raise ValidationError('PatronId and items are required')


def validate_quantity(quantity) -> int:
    if not is_number(quantity) or quantity <= 0 or quantity != int(quantity):
        raise ValidationError('Quantity must be a positive integer')
    if quantity > MAX_ORDER_QUANTITY:
        raise ValidationError(f'Quantity must not exceed {MAX_ORDER_QUANTITY}')
    return int(quantity)


def resolve_blend(menu_item: MenuItem, blend_id) -> Optional[Blend]:
    """
    Blend offered on an order line, None when the line has no blend
    """
    if blend_id in (None, ''):
        return None
    if not isinstance(blend_id, str):
        raise ValidationError('Invalid blendId')
    record = utils_db.get_db_item(public_pk, keys_structure.blends_sk.format(blend_id=blend_id))
    if record is None or record.get('is_active') is False:
        raise ValidationError(f'Blend {blend_id} not found or inactive')
    if menu_item.available_blends and blend_id not in menu_item.available_blends:
        raise ValidationError(f'Blend {blend_id} is not available for menu item {menu_item.id_}')
    return Blend.from_db_record(record)


def build_order_line(requested_item) -> Dict:
    """
    Validates one requested line against the live menu.
    Name, price and recipe always come from the stored menu item,
    any price sent by the client is ignored.
    """
    if not isinstance(requested_item, dict) or not is_non_empty_str(requested_item.get('menuId')):
        raise ValidationError('Invalid item format')
    quantity = validate_quantity(requested_item.get('quantity'))
    menu_id = requested_item['menuId']

    record = utils_db.get_db_item(public_pk, keys_structure.menu_items_sk.format(menu_id=menu_id))
    menu_item = MenuItem.from_db_record(record) if record is not None else None
    if menu_item is None or not menu_item.is_available():
        raise ValidationError(f'Menu item {menu_id} not found or inactive')

    remarks = requested_item.get('remarks') or ''
    if not isinstance(remarks, str):
        raise ValidationError('Remarks must be a string')
    if menu_item.is_remarks_required and not remarks.strip():
        raise ValidationError(f'Remarks are required for {menu_item.name_}')

    price = to_decimal(menu_item.price)
    line = {
        'menu_id': menu_id,
        'name_': menu_item.name_,
        'price': price,
        'quantity': quantity,
        'subtotal': price * quantity,
        'remarks': remarks,
        'recipe': menu_item.recipe or ''
    }
    blend = resolve_blend(menu_item, requested_item.get('blendId'))
    if blend is not None:
        line.update({'blend_id': blend.id_, 'blend_name': blend.name_})
    return line


def create_order(tenant_id: str, patron_id, requested_items) -> Order:
    validate_order_request(patron_id, requested_items)
    patron = get_patron(tenant_id, patron_id)

    lines = [build_order_line(requested_item) for requested_item in requested_items]
    order = Order(
        tenant_id,
        new_id(),
        patron_id=patron.id_,
        patron_name=patron.name_,
        items=lines,
        total=sum((line['subtotal'] for line in lines), Decimal(0)),
        status_=ORDER_STATUS_PENDING
    )
    order._create_db_record()

    notification = utils_notifications.send_order_notification(order.db_record)
    logger.info(f"create_order ::: order {order.id_} notification status={notification.status}")
    return order


def list_orders(tenant_id: str, patron_id: Optional[str] = None) -> List[Order]:
    """
    Newest first. One patron's history comes from gsi2,
    the whole tenant from the tenant partition sorted in process.
    """
    if patron_id:
        records = utils_db.query_items(
            keys_structure.gsi_patron_orders_pk.format(tenant_id=tenant_id, patron_id=patron_id),
            index_name=utils_db.gsi2_name(),
            scan_forward=False
        )
    else:
        records = utils_db.query_items(tenant_id, sort_key_prefix=keys_structure.orders_prefix)
    orders = [Order.from_db_record(record) for record in records]
    return sorted(orders, key=lambda order: order.date_created, reverse=True)


@utils_app.request_exception_handler
@utils_app.log_start_finish
@utils_auth.authenticate
def endpoint_get_orders(request) -> Response:
    patron_id = (request.query_params or {}).get('patronId')
    orders = list_orders(request.auth_result['tenant_id'], patron_id)
    logger.info(f"endpoint_get_orders ::: returning {len(orders)} orders, {patron_id=}")
    return Response(status_code=http200, body={'orders': [order.to_ui() for order in orders]})


@utils_app.request_exception_handler
@utils_app.log_start_finish
@utils_auth.authenticate
def endpoint_create_order(request) -> Response:
    request_body = utils_data.parse_raw_body(request)
    order = create_order(request.auth_result['tenant_id'], request_body.get('patronId'), request_body.get('items'))
    return Response(status_code=http201, body={'order': order.to_ui()})
