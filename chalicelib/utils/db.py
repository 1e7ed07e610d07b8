import functools
import os
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from boto3.dynamodb.conditions import Key
from botocore.exceptions import BotoCoreError, ClientError

from chalicelib.constants.constants import BATCH_WRITE_LIMIT
from chalicelib.constants.db_structure import PARTITION_KEY, SORT_KEY, GSI1_PK, GSI1_SK, GSI2_PK, GSI2_SK
from chalicelib.utils.boto_clients import dynamodb_resource
from chalicelib.utils.exceptions import InfrastructureError, NotFoundError, ServiceError
from chalicelib.utils.logger import logger, log_exception

CONDITIONAL_CHECK_FAILED = 'ConditionalCheckFailedException'


def db_operation(func):
    """
    Should wrap every call to the store.
    botocore failures are logged and re-raised as InfrastructureError,
    domain errors raised inside the call pass through untouched.
    """

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        logger.debug(f'{func.__name__}:: args={args}, kwargs={kwargs}')
        try:
            result = func(*args, **kwargs)
        except ServiceError:
            raise
        except (ClientError, BotoCoreError) as error:
            log_exception(error, status_code=500, msg=f'Got exception while trying to {func.__name__}: ')
            raise InfrastructureError(f'{func.__name__} failed') from error
        logger.debug(f'{func.__name__}:: SUCCESS')
        return result

    return wrapper


def gen_table_name() -> str:
    return os.environ['TABLE_NAME']


def gsi1_name() -> str:
    return os.environ.get('GSI1_NAME', 'gsi1')


def gsi2_name() -> str:
    return os.environ.get('GSI2_NAME', 'gsi2')


def get_gen_table():
    return dynamodb_resource().Table(gen_table_name())


def index_key_names(index_name: Optional[str]) -> Tuple[str, str]:
    """
    partition / sort attribute names of the table or of one of its GSIs
    """
    if index_name is None:
        return PARTITION_KEY, SORT_KEY
    if index_name == gsi1_name():
        return GSI1_PK, GSI1_SK
    if index_name == gsi2_name():
        return GSI2_PK, GSI2_SK
    raise ValueError(f'Unknown index {index_name}')


def make_key(partkey: str, sortkey: str) -> Dict:
    return {PARTITION_KEY: partkey, SORT_KEY: sortkey}


def is_conditional_check_failed(error: ClientError) -> bool:
    return error.response.get('Error', {}).get('Code') == CONDITIONAL_CHECK_FAILED


@db_operation
def get_db_item(partkey, sortkey, table=get_gen_table) -> Optional[Dict]:
    result = table().get_item(Key=make_key(partkey, sortkey))
    item = result.get('Item')
    if item is None:
        logger.info(f"get_db_item ::: record partkey={partkey} sortkey={sortkey} not found")
    return item


@db_operation
def put_db_record(item: dict, table=get_gen_table):
    table().put_item(Item=item)


def generate_update_expression(update_body: dict, allowed_attrs_to_update: Iterable[str]):
    """
    Generate SET expression for the whitelisted attributes present in update_body.
    Attribute names go through placeholders, several of ours are reserved words.
    """
    set_parts = []
    expr_attr_names = {}
    expr_attr_values = {}
    for field in allowed_attrs_to_update:
        if field not in update_body:
            continue
        expr_attr_names[f'#{field}'] = field
        expr_attr_values[f':{field}'] = update_body[field]
        set_parts.append(f'#{field} = :{field}')
    if not set_parts:
        return None, {}, {}
    return 'SET ' + ', '.join(set_parts), expr_attr_names, expr_attr_values


@db_operation
def update_db_record(key: dict, update_body: dict, allowed_attrs_to_update: Iterable[str],
                     condition_attrs: Sequence[str] = (PARTITION_KEY,), table=get_gen_table) -> Dict:
    """
    Partial update of the whitelisted attributes, returns the whole updated item.
    Every attribute of condition_attrs has to exist on the item already,
    otherwise NotFoundError is raised and nothing is written.
    """
    set_expr, expr_attr_names, expr_attr_values = generate_update_expression(update_body, allowed_attrs_to_update)
    if set_expr is None:
        raise ValueError('update_db_record ::: nothing to update')
    update_item_dict = {
        'Key': key,
        'UpdateExpression': set_expr,
        'ExpressionAttributeNames': expr_attr_names,
        'ExpressionAttributeValues': expr_attr_values,
        'ReturnValues': 'ALL_NEW'
    }
    if condition_attrs:
        for attr in condition_attrs:
            expr_attr_names[f'#cond_{attr}'] = attr
        update_item_dict['ConditionExpression'] = ' AND '.join(
            f'attribute_exists(#cond_{attr})' for attr in condition_attrs)
    try:
        response = table().update_item(**update_item_dict)
    except ClientError as error:
        if is_conditional_check_failed(error):
            raise NotFoundError(f'record partkey={key.get(PARTITION_KEY)} sortkey={key.get(SORT_KEY)} not found')
        raise
    return response['Attributes']


@db_operation
def delete_db_record(key: dict, must_exist: bool = False, table=get_gen_table):
    kwargs = {'Key': key}
    if must_exist:
        kwargs['ConditionExpression'] = 'attribute_exists(#partkey)'
        kwargs['ExpressionAttributeNames'] = {'#partkey': PARTITION_KEY}
    try:
        table().delete_item(**kwargs)
    except ClientError as error:
        if must_exist and is_conditional_check_failed(error):
            raise NotFoundError(f'record partkey={key.get(PARTITION_KEY)} sortkey={key.get(SORT_KEY)} not found')
        raise


@db_operation
def query_items_paginated(
        key_condition_expression,
        filter_expression=None,
        projection_expression=None,
        table=get_gen_table,
        index_name=None,
        expr_attr_names=None,
        limit=None,
        start_key=None,
        scan_forward=True
):
    kwargs = {'KeyConditionExpression': key_condition_expression, 'ScanIndexForward': scan_forward}
    if filter_expression:
        kwargs.update({'FilterExpression': filter_expression})

    if projection_expression:
        kwargs.update({'ProjectionExpression': projection_expression})

    if expr_attr_names:
        kwargs.update({'ExpressionAttributeNames': expr_attr_names})

    if limit:
        kwargs.update({'Limit': int(limit)})

    if index_name:
        kwargs.update({'IndexName': index_name})

    if start_key:
        kwargs.update({'ExclusiveStartKey': start_key})

    resp = table().query(**kwargs)
    return resp['Items'], resp.get('LastEvaluatedKey')


def query_items_paged(key_condition_expression, filter_expression=None, projection_expression=None,
                      table=get_gen_table, index_name=None, expr_attr_names=None, scan_forward=True):
    """ Follows LastEvaluatedKey until the whole result set is read,
        a single query page stops at 1mb of data"""
    all_items = []
    last_evaluated_key = None
    while True:
        items, last_evaluated_key = query_items_paginated(
            key_condition_expression,
            filter_expression=filter_expression,
            projection_expression=projection_expression,
            table=table,
            index_name=index_name,
            expr_attr_names=expr_attr_names,
            start_key=last_evaluated_key,
            scan_forward=scan_forward
        )
        all_items.extend(items)
        if last_evaluated_key is None:
            return all_items


def query_items(partition_value: str, sort_key_prefix: Optional[str] = None, sort_key_equals: Optional[str] = None,
                index_name: Optional[str] = None, scan_forward: bool = True, table=get_gen_table) -> List[Dict]:
    """
    Query the table or one of its GSIs by partition value,
    optionally narrowed by a sort key prefix or an exact sort key
    """
    pk_name, sk_name = index_key_names(index_name)
    key_condition = Key(pk_name).eq(partition_value)
    if sort_key_equals is not None:
        key_condition = key_condition & Key(sk_name).eq(sort_key_equals)
    elif sort_key_prefix:
        key_condition = key_condition & Key(sk_name).begins_with(sort_key_prefix)
    return query_items_paged(key_condition, table=table, index_name=index_name, scan_forward=scan_forward)


def chunks(items: Sequence, size: int):
    for i in range(0, len(items), size):
        yield items[i:i + size]


@db_operation
def _batch_delete_chunk(keys: Sequence[Dict], table=get_gen_table):
    gen_table = table()
    response = gen_table.meta.client.batch_write_item(
        RequestItems={gen_table.name: [{'DeleteRequest': {'Key': key}} for key in keys]}
    )
    unprocessed = response.get('UnprocessedItems', {}).get(gen_table.name, [])
    if unprocessed:
        raise InfrastructureError(f'batch_delete ::: {len(unprocessed)} delete requests were not processed')


def batch_delete(keys: Sequence[Dict], table=get_gen_table) -> int:
    """
    Deletes keys in chunks of BATCH_WRITE_LIMIT.
    Not atomic: a failing chunk leaves the earlier chunks deleted.
    Deleting an absent key is a no-op, so the caller resumes by calling again with the same keys.
    :return:
    number of keys deleted
    """
    deleted_count = 0
    for chunk in chunks(list(keys), BATCH_WRITE_LIMIT):
        _batch_delete_chunk(chunk, table=table)
        deleted_count += len(chunk)
        logger.info(f'batch_delete ::: deleted {deleted_count}/{len(keys)}')
    return deleted_count
