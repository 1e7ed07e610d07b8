from decimal import Decimal

import pytest

from chalicelib import categories, menu_items, blends, menus
from chalicelib.utils.exceptions import ValidationError, NotFoundError, ConflictError
from tests.utils.fixtures import create_test_category, create_test_menu_item, create_test_blend


def test_categories_are_appended_in_display_order(dynamodb_table):
    first = create_test_category(name='Beer')
    second = create_test_category(name='Wine', nameEn='Wine', imageUrl='https://cdn.example.com/wine.png')

    assert first.order_ == 1
    assert second.order_ == 2
    listed = [category.to_ui() for category in categories.list_categories()]
    assert [category['name'] for category in listed] == ['Beer', 'Wine']
    assert listed[1]['imageUrl'] == 'https://cdn.example.com/wine.png'
    assert listed[1]['visible'] is True
    assert listed[1]['isActive'] is True


def test_create_category_requires_name(dynamodb_table):
    with pytest.raises(ValidationError):
        categories.create_category({'name': '  '})
    with pytest.raises(ValidationError):
        categories.create_category({'description': 'no name'})
    assert categories.list_categories() == []


def test_update_category_is_partial(dynamodb_table):
    category = create_test_category(description='Scotch and more')

    updated = categories.update_category(category.id_, {'visible': False, 'order': 5})

    assert updated.is_active is False
    assert updated.order_ == 5
    assert updated.name_ == 'Whisky'
    assert updated.description == 'Scotch and more'
    assert updated.date_updated > category.date_updated


def test_update_unknown_category(dynamodb_table):
    with pytest.raises(NotFoundError):
        categories.update_category('missing', {'name': 'Gin'})


def test_delete_category_guarded_by_menu_items(dynamodb_table):
    category = create_test_category()
    other_category = create_test_category(name='Gin')
    menu_item = create_test_menu_item(category.id_, isActive=False)

    with pytest.raises(ConflictError):
        categories.delete_category(category.id_)

    menu_items.update_menu_item(menu_item.id_, {'categoryId': other_category.id_})
    categories.delete_category(category.id_)

    with pytest.raises(NotFoundError):
        categories.get_category(category.id_)
    with pytest.raises(NotFoundError):
        categories.delete_category(category.id_)


def test_create_menu_item_validation(dynamodb_table):
    category = create_test_category()

    with pytest.raises(ValidationError):
        create_test_menu_item(category.id_, price=0)
    with pytest.raises(ValidationError):
        create_test_menu_item(category.id_, price=-100)
    with pytest.raises(ValidationError):
        create_test_menu_item(category.id_, name=' ')
    with pytest.raises(ValidationError):
        create_test_menu_item('missing-category')
    with pytest.raises(ValidationError):
        menu_items.create_menu_item({'name': 'Highball', 'price': 600})
    assert menu_items.list_menu_items() == []


def test_update_menu_item_is_partial(dynamodb_table):
    category = create_test_category()
    menu_item = create_test_menu_item(category.id_, recipe='Whisky\nSoda', isRemarksRequired=True)

    updated = menu_items.update_menu_item(menu_item.id_, {'price': 650, 'unknownField': 'dropped'})

    assert updated.price == 650
    assert updated.recipe == 'Whisky\nSoda'
    assert updated.is_remarks_required is True
    assert updated.date_updated > menu_item.date_updated
    assert 'unknownField' not in updated.to_ui()


def test_update_menu_item_rejects_bad_values(dynamodb_table):
    category = create_test_category()
    menu_item = create_test_menu_item(category.id_)

    with pytest.raises(ValidationError):
        menu_items.update_menu_item(menu_item.id_, {'price': 0})
    with pytest.raises(ValidationError):
        menu_items.update_menu_item(menu_item.id_, {'categoryId': 'missing'})
    with pytest.raises(ValidationError):
        menu_items.update_menu_item(menu_item.id_, {'price': 10 ** 40})
    assert menu_items.get_menu_item(menu_item.id_).price == 600


@pytest.mark.parametrize('price', [10 ** 40, 10_000_001, Decimal('0.' + '1' * 40), Decimal('12.345')])
def test_create_menu_item_rejects_unstorable_price(dynamodb_table, price):
    category = create_test_category()

    with pytest.raises(ValidationError):
        create_test_menu_item(category.id_, price=price)
    assert menu_items.list_menu_items() == []


def test_price_bounds_are_inclusive(dynamodb_table):
    category = create_test_category()

    menu_item = create_test_menu_item(category.id_, price=10_000_000)
    assert menu_items.get_menu_item(menu_item.id_).price == 10_000_000

    updated = menu_items.update_menu_item(menu_item.id_, {'price': Decimal('480.25')})
    assert updated.price == Decimal('480.25')


def test_delete_menu_item(dynamodb_table):
    category = create_test_category()
    menu_item = create_test_menu_item(category.id_)

    menu_items.delete_menu_item(menu_item.id_)

    assert menu_items.list_menu_items() == []
    with pytest.raises(NotFoundError):
        menu_items.delete_menu_item(menu_item.id_)


def test_blends_order_and_delete_guard(dynamodb_table):
    smoky = create_test_blend()
    sweet = create_test_blend(name='Sweet', description='Honey')
    category = create_test_category()
    menu_item = create_test_menu_item(category.id_, availableBlends=[smoky.id_])

    assert [blend.name_ for blend in blends.list_blends()] == ['Smoky', 'Sweet']
    assert sweet.order_ == 2

    with pytest.raises(ConflictError):
        blends.delete_blend(smoky.id_)
    blends.delete_blend(sweet.id_)

    menu_items.update_menu_item(menu_item.id_, {'availableBlends': []})
    blends.delete_blend(smoky.id_)
    assert blends.list_blends() == []


def test_available_blends_must_be_strings(dynamodb_table):
    category = create_test_category()

    with pytest.raises(ValidationError):
        create_test_menu_item(category.id_, availableBlends='smoky')
    with pytest.raises(ValidationError):
        create_test_menu_item(category.id_, availableBlends=[1, 2])


def test_public_menu_lists_only_active_entries(dynamodb_table):
    beer = create_test_category(name='Beer')
    hidden = create_test_category(name='Secret', visible=False)
    whisky = create_test_category(name='Whisky')
    create_test_menu_item(beer.id_, name='Stout')
    create_test_menu_item(beer.id_, name='Lager')
    create_test_menu_item(beer.id_, name='Old Ale', isActive=False)
    create_test_menu_item(hidden.id_, name='Off menu')
    categories.update_category(beer.id_, {'order': 10})

    menu = menus.list_menu()

    assert [category['name'] for category in menu] == ['Whisky', 'Beer']
    assert menu[0]['items'] == []
    assert [item['name'] for item in menu[1]['items']] == ['Lager', 'Stout']
    assert menu[1]['items'][0]['price'] == 600
    assert whisky.id_ == menu[0]['id']
