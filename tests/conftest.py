import os

import boto3
import pytest
from moto import mock_aws

from chalicelib.constants.db_structure import PARTITION_KEY, SORT_KEY, GSI1_PK, GSI1_SK, GSI2_PK, GSI2_SK

TEST_REGION = 'ap-northeast-1'
TEST_TABLE_NAME = 'bar-order-system-test'
WEBHOOK_PARAM = '/bar-order-system/test/slack-webhook-url'
PROJECT_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))


@pytest.fixture(autouse=True)
def aws_env(monkeypatch):
    """Fake AWS credentials and the service settings, every test starts from the same environment"""
    monkeypatch.setenv('AWS_REGION', TEST_REGION)
    monkeypatch.setenv('AWS_DEFAULT_REGION', TEST_REGION)
    monkeypatch.setenv('AWS_ACCESS_KEY_ID', 'testing')
    monkeypatch.setenv('AWS_SECRET_ACCESS_KEY', 'testing')
    monkeypatch.setenv('AWS_SECURITY_TOKEN', 'testing')
    monkeypatch.setenv('AWS_SESSION_TOKEN', 'testing')
    monkeypatch.setenv('TABLE_NAME', TEST_TABLE_NAME)
    monkeypatch.setenv('GSI1_NAME', 'gsi1')
    monkeypatch.setenv('GSI2_NAME', 'gsi2')
    monkeypatch.setenv('ADMIN_GROUP', 'admin')
    monkeypatch.delenv('ENDPOINT_URL', raising=False)
    monkeypatch.delenv('NOTIFICATION_WEBHOOK_PARAM', raising=False)


def create_table(client):
    attribute_names = (PARTITION_KEY, SORT_KEY, GSI1_PK, GSI1_SK, GSI2_PK, GSI2_SK)
    client.create_table(
        TableName=TEST_TABLE_NAME,
        AttributeDefinitions=[{'AttributeName': name, 'AttributeType': 'S'} for name in attribute_names],
        KeySchema=[
            {'AttributeName': PARTITION_KEY, 'KeyType': 'HASH'},
            {'AttributeName': SORT_KEY, 'KeyType': 'RANGE'}
        ],
        GlobalSecondaryIndexes=[
            {
                'IndexName': 'gsi1',
                'KeySchema': [
                    {'AttributeName': GSI1_PK, 'KeyType': 'HASH'},
                    {'AttributeName': GSI1_SK, 'KeyType': 'RANGE'}
                ],
                'Projection': {'ProjectionType': 'ALL'}
            },
            {
                'IndexName': 'gsi2',
                'KeySchema': [
                    {'AttributeName': GSI2_PK, 'KeyType': 'HASH'},
                    {'AttributeName': GSI2_SK, 'KeyType': 'RANGE'}
                ],
                'Projection': {'ProjectionType': 'ALL'}
            }
        ],
        BillingMode='PAY_PER_REQUEST'
    )


@pytest.fixture
def dynamodb_table(aws_env):
    """
    The single table with both GSIs, in-process through moto
    """
    with mock_aws():
        create_table(boto3.client('dynamodb', region_name=TEST_REGION))
        yield boto3.resource('dynamodb', region_name=TEST_REGION).Table(TEST_TABLE_NAME)


@pytest.fixture
def webhook_param(dynamodb_table, monkeypatch):
    """
    Webhook url in the parameter store, shares the moto context of dynamodb_table
    """
    monkeypatch.setenv('NOTIFICATION_WEBHOOK_PARAM', WEBHOOK_PARAM)
    boto3.client('ssm', region_name=TEST_REGION).put_parameter(
        Name=WEBHOOK_PARAM, Value='https://hooks.example.com/services/T000/B000/XXXX', Type='SecureString')
    return WEBHOOK_PARAM
