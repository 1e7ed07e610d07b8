import pytest

from chalicelib import admin, patrons, orders, menus
from chalicelib.utils.auth import Caller
from chalicelib.utils.exceptions import AuthorizationError, ValidationError
from tests.utils.fixtures import tenant_a, tenant_b, create_test_patron, seed_menu

admin_a = Caller(sub='sub-a', email='a@example.com', groups=('admin',))
staff_a = Caller(sub='sub-a', email='a@example.com', groups=('staff',))


@pytest.fixture
def populated(dynamodb_table):
    menu = seed_menu()
    line = [{'menuId': menu['menu_item'].id_, 'quantity': 1}]
    for tenant_id in (tenant_a, tenant_b):
        for name in ('Alice', 'Bob'):
            patron = create_test_patron(tenant_id, name)
            orders.create_order(tenant_id, patron.id_, line)
    return menu


def test_reset_own_tenant_is_idempotent(populated):
    assert admin.reset_tenant_data(admin_a) == 4
    assert admin.reset_tenant_data(admin_a) == 0

    assert patrons.list_patrons(tenant_a) == []
    assert orders.list_orders(tenant_a) == []


def test_reset_leaves_other_tenants_and_menu(populated):
    admin.reset_tenant_data(admin_a)

    assert len(patrons.list_patrons(tenant_b)) == 2
    assert len(orders.list_orders(tenant_b)) == 2
    assert [category['name'] for category in menus.list_menu()] == ['Whisky']


def test_reset_requires_admin(populated):
    with pytest.raises(AuthorizationError):
        admin.reset_tenant_data(staff_a)
    with pytest.raises(AuthorizationError):
        admin.reset_specified_tenant(staff_a, tenant_b)
    assert len(patrons.list_patrons(tenant_a)) == 2


def test_reset_empty_tenant(dynamodb_table):
    assert admin.reset_tenant_data(admin_a) == 0


def test_reset_specified_tenant(populated):
    assert admin.reset_specified_tenant(admin_a, tenant_b) == 4
    assert admin.reset_specified_tenant(admin_a, tenant_b) == 0
    assert len(patrons.list_patrons(tenant_a)) == 2


@pytest.mark.parametrize('tenant_id', [None, '', '   ', 'sub-b', 'tenant:', 'tenant:PUBLIC', 42])
def test_reset_specified_tenant_validation(populated, tenant_id):
    with pytest.raises(ValidationError):
        admin.reset_specified_tenant(admin_a, tenant_id)
    assert len(menus.list_menu()) == 1
