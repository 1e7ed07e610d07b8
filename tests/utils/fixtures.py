from typing import Dict

import pytest
from chalice.config import Config
from chalice.local import LocalGateway

from app import app
from chalicelib import categories, menu_items, blends, patrons
from chalicelib.constants.keys_structure import tenant_pk

tenant_a = tenant_pk.format(tenant_key='sub-a')
tenant_b = tenant_pk.format(tenant_key='sub-b')


def create_test_category(**fields) -> categories.Category:
    return categories.create_category({'name': 'Whisky', **fields})


def create_test_menu_item(category_id: str, **fields) -> menu_items.MenuItem:
    return menu_items.create_menu_item({'name': 'Highball', 'price': 600, 'categoryId': category_id, **fields})


def create_test_blend(**fields) -> blends.Blend:
    return blends.create_blend({'name': 'Smoky', **fields})


def create_test_patron(tenant_id: str = tenant_a, name: str = 'Alice') -> patrons.Patron:
    return patrons.create_patron(tenant_id, name)


def seed_menu() -> Dict:
    category = create_test_category()
    menu_item = create_test_menu_item(category.id_)
    return {'category': category, 'menu_item': menu_item}


def local_gateway() -> LocalGateway:
    config = Config.create(chalice_stage='test', app_name=app.app_name, chalice_app=app)
    return LocalGateway(app, config)


@pytest.fixture
def chalice_gateway(dynamodb_table) -> LocalGateway:
    """
    Bare local API Gateway, answers preflight requests the way the deployed gateway does
    """
    yield local_gateway()
