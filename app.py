import os

from chalice import Chalice, CognitoUserPoolAuthorizer

from chalicelib import patrons, orders, menus, menu_items, categories, blends, admin
from chalicelib.utils import app as utils_app

app = Chalice(app_name='bar-order-system')

cors_config = utils_app.SharedCORSConfig(
    allow_origin='*',
    allow_headers=['Content-Type', 'Authorization']
)


def get_user_pool_arn():
    return os.environ.get('COGNITO_USER_POOL_ARN', '')


cognito_authorizer = CognitoUserPoolAuthorizer('BarOrderUserPool', provider_arns=[get_user_pool_arn()])


# MENU
@app.route('/menus', methods=['GET'], cors=cors_config)
def get_menu():
    """
    public, active categories with their active items
    """
    return menus.endpoint_get_menu(app.current_request)


# PATRONS
@app.route('/patrons', methods=['GET'], authorizer=cognito_authorizer, cors=cors_config)
def get_patrons():
    return patrons.endpoint_get_patrons(app.current_request)


@app.route('/patrons', methods=['POST'], authorizer=cognito_authorizer, cors=cors_config)
def create_patron():
    return patrons.endpoint_create_patron(app.current_request)


@app.route('/patrons/{patron_id}', methods=['PATCH'], authorizer=cognito_authorizer, cors=cors_config)
def update_patron(patron_id):
    return patrons.endpoint_update_patron(app.current_request, patron_id)


# ORDERS
@app.route('/orders', methods=['GET'], authorizer=cognito_authorizer, cors=cors_config)
def get_orders():
    """
    ?patronId= narrows the list to one patron's history
    """
    return orders.endpoint_get_orders(app.current_request)


@app.route('/orders', methods=['POST'], authorizer=cognito_authorizer, cors=cors_config)
def create_order():
    return orders.endpoint_create_order(app.current_request)


# ADMIN
@app.route('/admin/reset-all', methods=['POST'], authorizer=cognito_authorizer, cors=cors_config)
def reset_all():
    """
    admin operation, wipes patrons and orders of the caller's own tenant
    """
    return admin.endpoint_reset_all(app.current_request)


@app.route('/admin/reset', methods=['POST'], authorizer=cognito_authorizer, cors=cors_config)
def reset_tenant():
    """
    admin operation, wipes patrons and orders of the tenant given in the body
    """
    return admin.endpoint_reset_tenant(app.current_request)


# ADMIN MENU ITEMS
@app.route('/admin/menu-items', methods=['GET'], authorizer=cognito_authorizer, cors=cors_config)
def get_menu_items():
    return menu_items.endpoint_get_menu_items(app.current_request)


@app.route('/admin/menu-items', methods=['POST'], authorizer=cognito_authorizer, cors=cors_config)
def create_menu_item():
    return menu_items.endpoint_create_menu_item(app.current_request)


@app.route('/admin/menu-items/{menu_id}', methods=['PATCH'], authorizer=cognito_authorizer, cors=cors_config)
def update_menu_item(menu_id):
    return menu_items.endpoint_update_menu_item(app.current_request, menu_id)


@app.route('/admin/menu-items/{menu_id}', methods=['DELETE'], authorizer=cognito_authorizer, cors=cors_config)
def delete_menu_item(menu_id):
    return menu_items.endpoint_delete_menu_item(app.current_request, menu_id)


# ADMIN CATEGORIES
@app.route('/admin/categories', methods=['GET'], authorizer=cognito_authorizer, cors=cors_config)
def get_categories():
    return categories.endpoint_get_categories(app.current_request)


@app.route('/admin/categories', methods=['POST'], authorizer=cognito_authorizer, cors=cors_config)
def create_category():
    return categories.endpoint_create_category(app.current_request)


@app.route('/admin/categories/{category_id}', methods=['PATCH'], authorizer=cognito_authorizer, cors=cors_config)
def update_category(category_id):
    return categories.endpoint_update_category(app.current_request, category_id)


@app.route('/admin/categories/{category_id}', methods=['DELETE'], authorizer=cognito_authorizer, cors=cors_config)
def delete_category(category_id):
    return categories.endpoint_delete_category(app.current_request, category_id)


# ADMIN BLENDS
@app.route('/admin/blends', methods=['GET'], authorizer=cognito_authorizer, cors=cors_config)
def get_blends():
    return blends.endpoint_get_blends(app.current_request)


@app.route('/admin/blends', methods=['POST'], authorizer=cognito_authorizer, cors=cors_config)
def create_blend():
    return blends.endpoint_create_blend(app.current_request)


@app.route('/admin/blends/{blend_id}', methods=['PATCH'], authorizer=cognito_authorizer, cors=cors_config)
def update_blend(blend_id):
    return blends.endpoint_update_blend(app.current_request, blend_id)


@app.route('/admin/blends/{blend_id}', methods=['DELETE'], authorizer=cognito_authorizer, cors=cors_config)
def delete_blend(blend_id):
    return blends.endpoint_delete_blend(app.current_request, blend_id)


# METHOD NOT ALLOWED
def method_not_allowed(**path_params):
    return utils_app.endpoint_method_not_allowed(app.current_request)


def register_method_not_allowed_routes():
    """
    methods a path does not serve answer 405 with the standard error body
    """
    for path, route_methods in list(app.routes.items()):
        unsupported_methods = [method for method in utils_app.API_METHODS if method not in route_methods]
        if unsupported_methods:
            app.route(path, methods=unsupported_methods, cors=cors_config)(method_not_allowed)


register_method_not_allowed_routes()
