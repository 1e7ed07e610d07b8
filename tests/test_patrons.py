import pytest

from chalicelib import patrons
from chalicelib.utils import db
from chalicelib.utils.exceptions import ValidationError, NotFoundError
from tests.utils.fixtures import tenant_a, tenant_b, create_test_patron


def test_create_patron_trims_name(dynamodb_table):
    patron = create_test_patron(name='  Alice  ')

    stored = patrons.get_patron(tenant_a, patron.id_)
    assert stored.name_ == 'Alice'
    assert stored.date_created
    assert patron.to_ui() == {
        'id': patron.id_,
        'name': 'Alice',
        'createdAt': patron.date_created,
        'updatedAt': patron.date_updated
    }


@pytest.mark.parametrize('name', ['   ', '', None, 42])
def test_create_patron_rejects_empty_name(dynamodb_table, name):
    with pytest.raises(ValidationError):
        patrons.create_patron(tenant_a, name)
    assert db.query_items(tenant_a) == []


def test_list_patrons_sorted_by_name(dynamodb_table):
    for name in ('Charlie', 'alice', 'Bob'):
        create_test_patron(name=name)

    assert [patron.name_ for patron in patrons.list_patrons(tenant_a)] == ['alice', 'Bob', 'Charlie']


def test_patrons_are_isolated_per_tenant(dynamodb_table):
    patron = create_test_patron(tenant_a, 'Alice')

    assert patrons.list_patrons(tenant_b) == []
    with pytest.raises(NotFoundError):
        patrons.get_patron(tenant_b, patron.id_)


def test_update_patron_renames_and_reorders(dynamodb_table):
    zed = create_test_patron(name='Zed')
    create_test_patron(name='Mia')

    updated = patrons.update_patron(tenant_a, zed.id_, ' Adam ')

    assert updated.name_ == 'Adam'
    assert updated.date_created == zed.date_created
    assert [patron.name_ for patron in patrons.list_patrons(tenant_a)] == ['Adam', 'Mia']


def test_update_unknown_patron(dynamodb_table):
    with pytest.raises(NotFoundError):
        patrons.update_patron(tenant_a, 'missing', 'Alice')
    assert db.query_items(tenant_a) == []


def test_update_patron_of_other_tenant(dynamodb_table):
    patron = create_test_patron(tenant_b, 'Bob')

    with pytest.raises(NotFoundError):
        patrons.update_patron(tenant_a, patron.id_, 'Mallory')
    assert patrons.get_patron(tenant_b, patron.id_).name_ == 'Bob'


def test_update_patron_rejects_empty_name(dynamodb_table):
    patron = create_test_patron()

    with pytest.raises(ValidationError):
        patrons.update_patron(tenant_a, patron.id_, '  ')


def test_name_up_to_the_sort_key_limit_is_stored(dynamodb_table):
    patron = create_test_patron(name='A' * 1024)

    assert patrons.get_patron(tenant_a, patron.id_).name_ == 'A' * 1024


@pytest.mark.parametrize('name', ['A' * 1025, 'ア' * 342])
def test_create_patron_rejects_name_over_the_sort_key_limit(dynamodb_table, name):
    with pytest.raises(ValidationError):
        patrons.create_patron(tenant_a, name)
    assert db.query_items(tenant_a) == []


def test_update_patron_rejects_name_over_the_sort_key_limit(dynamodb_table):
    patron = create_test_patron()

    with pytest.raises(ValidationError):
        patrons.update_patron(tenant_a, patron.id_, 'A' * 1025)
    assert patrons.get_patron(tenant_a, patron.id_).name_ == 'Alice'
