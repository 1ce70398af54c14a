from fastapi import HTTPException, Request
from app.auth_local import decode_access_token
from shared.core import set_request_context

BEARER_PREFIX = "Bearer "

async def get_current_user_id(request: Request) -> str:
    """Resolve the requesting user's id from the bearer token.

    The ``sub`` claim is the ownership key for every record the user touches.
    """
    auth_header = request.headers.get("Authorization")
    if not auth_header or not auth_header.startswith(BEARER_PREFIX):
        raise HTTPException(status_code=401, detail="Not authorized, no token")
    token = auth_header.split(" ", 1)[1]
    token_data = decode_access_token(token)
    if not token_data or not token_data.get("sub"):
        raise HTTPException(status_code=401, detail="Not authorized, token failed")
    user_id = str(token_data["sub"])
    set_request_context(user_id=user_id)
    return user_id
