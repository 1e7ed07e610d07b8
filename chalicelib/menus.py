from typing import List, Dict

from chalice import Response

from chalicelib.categories import Category, sort_by_display_order
from chalicelib.constants.status_codes import http200
from chalicelib.menu_items import MenuItem
from chalicelib.utils import app as utils_app
from chalicelib.utils.logger import logger, set_request_id


def group_menu(categories: List[Category], menu_items: List[MenuItem]) -> List[Dict]:
    """
    Active items grouped under their category by category id,
    items sorted by name, only active categories in display order
    """
    items_by_category: Dict[str, List[MenuItem]] = {}
    for menu_item in menu_items:
        if menu_item.is_available():
            items_by_category.setdefault(menu_item.category_id, []).append(menu_item)

    menu = []
    for category in sort_by_display_order([category for category in categories if category.is_active is True]):
        items = sorted(items_by_category.get(category.id_, []), key=lambda item: (item.name_ or '').casefold())
        menu.append({**category.to_ui(), 'items': [item.to_ui() for item in items]})
    return menu


def list_menu() -> List[Dict]:
    return group_menu(Category.list_all(), MenuItem.list_all())


@utils_app.request_exception_handler
@utils_app.log_start_finish
def endpoint_get_menu(request) -> Response:
    set_request_id(request)
    categories = list_menu()
    logger.info(f"endpoint_get_menu ::: returning {len(categories)} categories")
    return Response(status_code=http200, body={'categories': categories})
