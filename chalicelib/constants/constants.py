PUBLIC_TENANT = 'PUBLIC'
DEFAULT_ADMIN_GROUP = 'admin'

ORDER_STATUS_PENDING = 'pending'
ORDER_STATUS_COMPLETED = 'completed'
ORDER_STATUS_CANCELLED = 'cancelled'
ORDER_STATUSES = (ORDER_STATUS_PENDING, ORDER_STATUS_COMPLETED, ORDER_STATUS_CANCELLED)

# DynamoDB BatchWriteItem accepts at most 25 requests per call
BATCH_WRITE_LIMIT = 25

PLACEHOLDER_WEBHOOK_URL = 'PLACEHOLDER_WEBHOOK_URL'
DEFAULT_NOTIFICATION_TIMEOUT_SECONDS = 5

GENERIC_ERROR_MESSAGE = 'Internal server error'

# DynamoDB caps a sort key value at 1024 bytes, patron names are the gsi1 sort key
MAX_SORT_KEY_BYTES = 1024

# DynamoDB numbers keep at most 38 significant digits
MAX_ORDER_QUANTITY = 1000
MAX_PRICE = 10_000_000
MAX_PRICE_DECIMAL_PLACES = 2
