from typing import Any, Dict, Optional

from fastapi import Header

from app.core.errors import AuthError
from app.core.security import decode_token


'''
Bearer Token 校验（外部签发，本服务只验签）
    - 从 Authorization: Bearer <jwt> 取 token → decode_token(...)
    - 不查用户表，直接把 claims 交给路由
    - 失败统一抛 AuthError -> 401 {success: false, message}
'''
def get_current_user(authorization: Optional[str] = Header(default=None)) -> Dict[str, Any]:
    if not authorization:
        raise AuthError("Not authenticated")

    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise AuthError("Invalid authorization header")

    payload = decode_token(token.strip())
    if not payload:
        raise AuthError("Invalid token")
    return payload
