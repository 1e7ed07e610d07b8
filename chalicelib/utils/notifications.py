import os
from typing import Dict, NamedTuple, Optional

import requests
from botocore.exceptions import BotoCoreError, ClientError

from chalicelib.constants.constants import PLACEHOLDER_WEBHOOK_URL, DEFAULT_NOTIFICATION_TIMEOUT_SECONDS
from chalicelib.utils.boto_clients import ssm_client
from chalicelib.utils.exceptions import InfrastructureError
from chalicelib.utils.logger import logger, log_exception
from chalicelib.utils.message_templates import get_new_order_notification_message

NOTIFICATION_SENT = 'sent'
NOTIFICATION_DISABLED = 'disabled'
NOTIFICATION_FAILED = 'failed'


class NotificationResult(NamedTuple):
    """
    Outcome of a best-effort notification, inspected for logging only
    """
    status: str
    detail: Optional[str] = None

    @property
    def sent(self) -> bool:
        return self.status == NOTIFICATION_SENT


def webhook_param_name() -> Optional[str]:
    return os.environ.get('NOTIFICATION_WEBHOOK_PARAM')


def notification_timeout() -> float:
    return float(os.environ.get('NOTIFICATION_TIMEOUT_SECONDS', DEFAULT_NOTIFICATION_TIMEOUT_SECONDS))


def get_webhook_url() -> Optional[str]:
    """
    Webhook url from the parameter store, read on every call.
    None when notifications are not configured.
    """
    param_name = webhook_param_name()
    if not param_name:
        return None
    try:
        response = ssm_client().get_parameter(Name=param_name, WithDecryption=True)
    except ClientError as error:
        if error.response.get('Error', {}).get('Code') == 'ParameterNotFound':
            return None
        raise InfrastructureError(f'get_webhook_url ::: unable to read parameter {param_name}') from error
    except BotoCoreError as error:
        raise InfrastructureError(f'get_webhook_url ::: unable to read parameter {param_name}') from error
    url = (response.get('Parameter', {}).get('Value') or '').strip()
    if not url or url == PLACEHOLDER_WEBHOOK_URL:
        return None
    return url


def post_to_webhook(url: str, message: Dict):
    try:
        response = requests.post(url, json=message, timeout=notification_timeout())
        response.raise_for_status()
    except requests.RequestException as error:
        raise InfrastructureError(f'post_to_webhook ::: webhook call failed: {error}') from error


def send_order_notification(order_record: Dict) -> NotificationResult:
    """
    Never raises: the order is already stored when this runs,
    any failure is logged and reported through the result only
    """
    order_id = order_record.get('id_')
    try:
        url = get_webhook_url()
        if url is None:
            logger.info(f'send_order_notification ::: webhook not configured, skipping order {order_id}')
            return NotificationResult(NOTIFICATION_DISABLED)
        post_to_webhook(url, get_new_order_notification_message(order_record))
    except Exception as error:
        log_exception(error, status_code=500, msg=f'send_order_notification ::: order {order_id} not notified')
        return NotificationResult(NOTIFICATION_FAILED, str(error))
    logger.info(f'send_order_notification ::: order {order_id} notification sent')
    return NotificationResult(NOTIFICATION_SENT)
