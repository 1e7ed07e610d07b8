import json
from typing import Optional, Iterable

import jwt
from chalice.test import Client

# HS256 keys shorter than 32 bytes make PyJWT warn
TEST_SIGNING_KEY = 'bar-order-system-local-test-signing-key'


def make_token(sub: str, groups: Iterable[str] = (), email: Optional[str] = None) -> str:
    """
    Cognito style id token, the chalice local gateway decodes its payload
    without checking the signature and hands the claims to the route
    """
    claims = {
        'sub': sub,
        'email': email or f'{sub}@example.com',
        'cognito:username': sub,
        'cognito:groups': list(groups)
    }
    return jwt.encode(claims, TEST_SIGNING_KEY, algorithm='HS256')


def make_request(client: Client, endpoint: str = '/', method: str = 'GET',
                 query: Optional[str] = None, json_body=None, token: Optional[str] = None):
    headers = {'Content-Type': 'application/json', 'Host': 'test-domain.com'}
    if token:
        headers['Authorization'] = token
    return client.http.request(
        method=method,
        path=f"{endpoint}?{query}" if query else f"{endpoint}",
        headers=headers,
        body=json.dumps(json_body) if json_body is not None else b''
    )
