import os

import boto3
from botocore.config import Config


def aws_region():
    return os.environ.get('AWS_REGION') or os.environ.get('AWS_DEFAULT_REGION', 'us-east-1')


def aws_config_ddb():
    # a single attempt, store failures surface to the caller unretried
    return Config(retries={'mode': 'standard', 'max_attempts': 1}, region_name=aws_region())


# Clients are built per call: every invocation is independent and keeps no pooled state.
def dynamodb_resource():
    """
    DynamoDB resource, pointed at ENDPOINT_URL (DynamoDB Local) when it is set
    """
    if os.environ.get('ENDPOINT_URL'):
        return boto3.resource('dynamodb', endpoint_url=os.environ.get('ENDPOINT_URL'), region_name=aws_region())
    return boto3.resource('dynamodb', config=aws_config_ddb())


def ssm_client():
    # Simple Systems Manager Client, parameter store holds the notification webhook url.
    return boto3.client('ssm', region_name=aws_region())
